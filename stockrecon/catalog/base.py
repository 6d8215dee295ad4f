from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any

from stockrecon.matching.normalization import normalize_barcode

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DiscrepancyEntry:
    barcode: str | None
    quantity: float | None = None
    is_offset: bool = False
    offset_with_barcode: str | None = None
    extras: dict[str, Any] = field(default_factory=dict, compare=False)


@dataclass(frozen=True)
class ProductMeta:
    category_id: int | str
    base_price: float


@dataclass(frozen=True)
class MatchedPair:
    missing_barcode: str
    over_barcode: str


@dataclass
class CatalogResult:
    meta: dict[str, ProductMeta] = field(default_factory=dict)
    products_found: int = 0
    failed_barcodes: list[str] = field(default_factory=list)

    def add_products(self, products: list[dict[str, Any]]) -> None:
        """Index catalog products under both their code and their barcode."""
        for product in products:
            self.products_found += 1
            meta = product_meta_from_payload(product)
            if meta is None:
                logger.debug("Skipping catalog product without category/price: %s", product.get("code"))
                continue
            code = normalize_barcode(product.get("code"))
            if code:
                self.meta[code] = meta
            bar_code = normalize_barcode(product.get("barCode"))
            if bar_code:
                self.meta[bar_code] = meta


def product_meta_from_payload(product: dict[str, Any]) -> ProductMeta | None:
    category_id = product.get("categoryId")
    base_price = product.get("basePrice")
    if category_id is None or base_price is None:
        return None
    if isinstance(base_price, bool) or not isinstance(base_price, (int, float)):
        return None
    return ProductMeta(category_id=category_id, base_price=base_price)


class CatalogSource(ABC):
    @abstractmethod
    def lookup(self, barcodes: list[str]) -> CatalogResult:
        raise NotImplementedError

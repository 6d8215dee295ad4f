from __future__ import annotations

import json
from pathlib import Path

from stockrecon.catalog.base import CatalogResult, CatalogSource
from stockrecon.matching.normalization import normalize_barcode, unique_barcodes


class FixtureCatalog(CatalogSource):
    """Offline catalog backed by a JSON dump of KiotViet products.

    The file holds either a bare list of products or the API envelope
    ``{"data": [...]}``. Only products whose code or barcode was requested
    are indexed, mirroring what a live ``code=`` query returns.
    """

    def __init__(self, fixture_path: str | Path) -> None:
        self.fixture_path = Path(fixture_path)

    def lookup(self, barcodes: list[str]) -> CatalogResult:
        wanted = set(unique_barcodes(barcodes))
        payload = json.loads(self.fixture_path.read_text(encoding="utf-8"))
        products = payload.get("data", []) if isinstance(payload, dict) else payload

        result = CatalogResult()
        result.add_products(
            [product for product in products if {normalize_barcode(product.get("code")), normalize_barcode(product.get("barCode"))} & wanted]
        )
        return result

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any

import httpx

from stockrecon.catalog.base import CatalogResult, CatalogSource
from stockrecon.config import Settings
from stockrecon.core.errors import BranchNotFoundError, ConfigurationError, CredentialError, UpstreamError
from stockrecon.matching.normalization import chunked, normalize_barcode, unique_barcodes

TOKEN_SCOPE = "PublicApi.Access"

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CatalogCredentials:
    retailer: str
    client_id: str
    client_secret: str

    @classmethod
    def from_settings(cls, settings: Settings) -> CatalogCredentials:
        values = {
            "retailer": settings.kiotviet_retailer,
            "client_id": settings.kiotviet_client_id,
            "client_secret": settings.kiotviet_client_secret,
        }
        missing = [name for name, value in values.items() if not (value and value.strip())]
        if missing:
            raise ConfigurationError(f"KiotViet configuration is missing on the server: {', '.join(missing)}")
        return cls(**{name: value.strip() for name, value in values.items()})


@dataclass
class StockSnapshot:
    branch_id: int | str
    branch_name: str
    total_products: int
    stock_map: dict[str, float] = field(default_factory=dict)


class KiotVietCatalog(CatalogSource):
    def __init__(
        self,
        credentials: CatalogCredentials,
        settings: Settings,
        client: httpx.Client | None = None,
    ) -> None:
        self.credentials = credentials
        self.settings = settings
        self.api_url = settings.kiotviet_api_url.rstrip("/")
        self.batch_size = settings.catalog_batch_size
        self.page_size = settings.catalog_page_size
        self._token: str | None = None
        self._owns_client = client is None
        self.client = client or httpx.Client(timeout=settings.timeout_seconds)

    def __enter__(self) -> KiotVietCatalog:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def close(self) -> None:
        if self._owns_client:
            self.client.close()

    def authenticate(self) -> str:
        form = {
            "scopes": TOKEN_SCOPE,
            "grant_type": "client_credentials",
            "client_id": self.credentials.client_id,
            "client_secret": self.credentials.client_secret,
        }
        try:
            response = self.client.post(self.settings.kiotviet_token_url, data=form)
        except httpx.HTTPError as exc:
            logger.error("KiotViet token request failed: %s", exc)
            raise CredentialError(f"KiotViet auth request failed: {exc}") from exc

        if not response.is_success:
            logger.error("KiotViet token status %s, body: %s", response.status_code, response.text)
            raise CredentialError(f"KiotViet auth failed ({response.status_code})")

        payload = _json_object(response)
        token = payload.get("access_token") if payload else None
        if not token or not isinstance(token, str):
            raise CredentialError("KiotViet token response missing access_token")

        logger.info("KiotViet token acquired")
        self._token = token
        return token

    def lookup(self, barcodes: list[str]) -> CatalogResult:
        codes = unique_barcodes(barcodes)
        result = CatalogResult()
        if not codes:
            return result

        self._ensure_token()
        for batch in chunked(codes, self.batch_size):
            products = self._fetch_batch(batch)
            if products is None:
                result.failed_barcodes.extend(batch)
                continue
            result.add_products(products)

        logger.info(
            "Catalog lookup resolved %s keys from %s products (%s codes queried, %s unresolved by failed batches)",
            len(result.meta),
            result.products_found,
            len(codes),
            len(result.failed_barcodes),
        )
        return result

    def fetch_branch_stock(self, store_code: str) -> StockSnapshot:
        target_name = self.settings.branch_aliases.get(store_code, store_code)
        self._ensure_token()

        try:
            response = self.client.get(f"{self.api_url}/branches", headers=self._headers())
        except httpx.HTTPError as exc:
            raise UpstreamError(f"KiotViet branches API error: {exc}") from exc
        if not response.is_success:
            logger.error("KiotViet branches status %s, body: %s", response.status_code, response.text)
            raise UpstreamError(f"KiotViet branches API error: {response.status_code}")

        payload = _json_object(response)
        if payload is None:
            raise UpstreamError("KiotViet branches API returned an unexpected body")
        branches = _dict_items(payload.get("data"))
        branch = self._match_branch(branches, target_name)
        if branch is None:
            available = ", ".join(str(b.get("branchName")) for b in branches)
            raise BranchNotFoundError(f'Branch not found: "{target_name}". Available: {available}')

        if branch.get("id") is None:
            raise UpstreamError(f"KiotViet branch \"{branch['branchName']}\" has no id")
        snapshot = StockSnapshot(branch_id=branch["id"], branch_name=branch["branchName"], total_products=0)
        logger.info("Resolved store %s to branch %s (id=%s)", store_code, snapshot.branch_name, snapshot.branch_id)

        current_item = 0
        while True:
            page = self._fetch_stock_page(current_item)
            if page is None:
                break
            total = page.get("total")
            snapshot.total_products = total if isinstance(total, int) else 0
            products = _dict_items(page.get("data"))
            if not products:
                break
            for product in products:
                self._collect_on_hand(snapshot, product)
            current_item += len(products)
            if current_item >= snapshot.total_products:
                break

        logger.info(
            "Stock snapshot for %s: %s products mapped from %s total",
            snapshot.branch_name,
            len(snapshot.stock_map),
            snapshot.total_products,
        )
        return snapshot

    def _ensure_token(self) -> str:
        if self._token is None:
            return self.authenticate()
        return self._token

    def _headers(self) -> dict[str, str]:
        return {
            "Authorization": f"Bearer {self._token}",
            "Retailer": self.credentials.retailer,
        }

    def _fetch_batch(self, batch: list[str]) -> list[dict[str, Any]] | None:
        params = {"code": ",".join(batch), "pageSize": self.page_size}
        try:
            response = self.client.get(f"{self.api_url}/products", params=params, headers=self._headers())
        except httpx.HTTPError as exc:
            logger.warning("Catalog batch of %s codes failed: %s", len(batch), exc)
            return None

        if not response.is_success:
            logger.warning("Catalog batch of %s codes failed with status %s", len(batch), response.status_code)
            return None

        payload = _json_object(response)
        if payload is None:
            logger.warning("Catalog batch of %s codes returned an unexpected body", len(batch))
            return None

        products = _dict_items(payload.get("data"))
        logger.debug("Catalog batch of %s codes returned %s products", len(batch), len(products))
        return products

    def _fetch_stock_page(self, current_item: int) -> dict[str, Any] | None:
        params = {
            "pageSize": self.settings.stock_page_size,
            "currentItem": current_item,
            "includeInventory": "true",
        }
        try:
            response = self.client.get(f"{self.api_url}/products", params=params, headers=self._headers())
            response.raise_for_status()
        except httpx.HTTPError as exc:
            logger.error("Stock page at item %s failed, returning partial snapshot: %s", current_item, exc)
            return None

        page = _json_object(response)
        if page is None:
            logger.error("Stock page at item %s returned an unexpected body, returning partial snapshot", current_item)
        return page

    @staticmethod
    def _match_branch(branches: list[dict[str, Any]], target_name: str) -> dict[str, Any] | None:
        needle = target_name.lower()
        for branch in branches:
            name = branch.get("branchName")
            if name and needle in name.lower():
                return branch
        return None

    @staticmethod
    def _collect_on_hand(snapshot: StockSnapshot, product: dict[str, Any]) -> None:
        bar_code = normalize_barcode(product.get("barCode"))
        inventories = product.get("inventories")
        if not bar_code or not inventories:
            return
        for inventory in inventories:
            if inventory.get("branchId") == snapshot.branch_id:
                snapshot.stock_map[bar_code] = inventory.get("onHand") or 0
                return


def _json_object(response: httpx.Response) -> dict[str, Any] | None:
    try:
        payload = response.json()
    except ValueError:
        return None
    return payload if isinstance(payload, dict) else None


def _dict_items(value: object) -> list[dict[str, Any]]:
    if not isinstance(value, list):
        return []
    return [item for item in value if isinstance(item, dict)]

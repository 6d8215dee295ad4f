from __future__ import annotations

from collections.abc import Callable

from stockrecon.catalog.base import CatalogSource
from stockrecon.catalog.kiotviet import CatalogCredentials, KiotVietCatalog
from stockrecon.config import Settings
from stockrecon.core.errors import InvalidRequestError
from stockrecon.pipeline import RecoveryAnalysis
from stockrecon.schemas.recovery import (
    AnalyzeData,
    AnalyzeRequest,
    AnalyzeResponse,
    DiscrepancyItem,
    StockRequest,
    StockResponse,
    entries_from_items,
)

CatalogFactory = Callable[[CatalogCredentials, Settings], KiotVietCatalog]


def build_catalog(credentials: CatalogCredentials, settings: Settings) -> KiotVietCatalog:
    return KiotVietCatalog(credentials, settings)


def analyze_with_catalog(payload: AnalyzeRequest, catalog: CatalogSource) -> AnalyzeResponse:
    result = RecoveryAnalysis(catalog).run(
        entries_from_items(payload.missing_items),
        entries_from_items(payload.over_items),
    )
    return AnalyzeResponse(
        data=AnalyzeData(
            analyzed_missing=[DiscrepancyItem.from_entry(entry) for entry in result.reconcile.analyzed_missing],
            matched_count=result.matched_count,
        )
    )


def analyze_recovery(
    payload: AnalyzeRequest,
    settings: Settings,
    catalog_factory: CatalogFactory = build_catalog,
) -> AnalyzeResponse:
    _check_size(payload, settings)
    credentials = CatalogCredentials.from_settings(settings)
    with catalog_factory(credentials, settings) as catalog:
        catalog.authenticate()
        return analyze_with_catalog(payload, catalog)


def branch_stock(
    payload: StockRequest,
    settings: Settings,
    catalog_factory: CatalogFactory = build_catalog,
) -> StockResponse:
    store_code = (payload.store_code or "").strip()
    if not store_code:
        raise InvalidRequestError("storeCode is required")

    credentials = CatalogCredentials.from_settings(settings)
    with catalog_factory(credentials, settings) as catalog:
        catalog.authenticate()
        snapshot = catalog.fetch_branch_stock(store_code)

    return StockResponse(branch_name=snapshot.branch_name, total=snapshot.total_products, stock_map=snapshot.stock_map)


def _check_size(payload: AnalyzeRequest, settings: Settings) -> None:
    limit = settings.max_items_per_list
    for name, items in (("missingItems", payload.missing_items), ("overItems", payload.over_items)):
        if len(items) > limit:
            raise InvalidRequestError(f"{name} has {len(items)} entries; at most {limit} are accepted")

from fastapi import APIRouter, Depends

from stockrecon.api.deps import catalog_factory_dependency, settings_dependency
from stockrecon.config import Settings
from stockrecon.schemas.recovery import StockRequest, StockResponse
from stockrecon.services.recovery import CatalogFactory, branch_stock

router = APIRouter(prefix="/v1/stock", tags=["stock"])


@router.post("", response_model=StockResponse)
def stock(
    payload: StockRequest,
    settings: Settings = Depends(settings_dependency),
    catalog_factory: CatalogFactory = Depends(catalog_factory_dependency),
) -> StockResponse:
    return branch_stock(payload, settings, catalog_factory)

from fastapi import APIRouter, Depends

from stockrecon.api.deps import catalog_factory_dependency, settings_dependency
from stockrecon.config import Settings
from stockrecon.schemas.recovery import AnalyzeRequest, AnalyzeResponse
from stockrecon.services.recovery import CatalogFactory, analyze_recovery

router = APIRouter(prefix="/v1/recovery", tags=["recovery"])


@router.post("/analyze", response_model=AnalyzeResponse)
def analyze(
    payload: AnalyzeRequest,
    settings: Settings = Depends(settings_dependency),
    catalog_factory: CatalogFactory = Depends(catalog_factory_dependency),
) -> AnalyzeResponse:
    return analyze_recovery(payload, settings, catalog_factory)

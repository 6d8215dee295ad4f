import logging

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from stockrecon.api.routes import recovery, stock
from stockrecon.config import get_settings
from stockrecon.core.errors import ApiError, StockReconError

logger = logging.getLogger(__name__)

settings = get_settings()
app = FastAPI(title=settings.app_name)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["POST", "GET", "OPTIONS"],
    allow_headers=["*"],
)


@app.exception_handler(StockReconError)
def stockrecon_exception_handler(request: Request, exc: StockReconError) -> JSONResponse:
    logger.error("%s %s failed: %s", request.method, request.url.path, exc)
    return JSONResponse(status_code=exc.status_code, content=ApiError.from_exception(exc).to_dict())


@app.exception_handler(RequestValidationError)
def request_validation_exception_handler(_: Request, exc: RequestValidationError) -> JSONResponse:
    error = ApiError(code="validation_error", message="Invalid request", details={"errors": jsonable_encoder(exc.errors())})
    return JSONResponse(status_code=422, content=error.to_dict())


@app.exception_handler(Exception)
def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("%s %s raised an unexpected error", request.method, request.url.path)
    return JSONResponse(status_code=500, content=ApiError(code="internal_error", message=str(exc)).to_dict())


app.include_router(recovery.router)
app.include_router(stock.router)


@app.get("/health")
def health() -> dict[str, str]:
    return {"status": "ok"}

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_BRANCH_ALIASES = {
    "BEE": "SM BEE",
    "PLAZA": "SM-PLAZA",
    "MIEN_DONG": "SM MIỀN ĐÔNG",
    "HT_PEARL": "SM HT PEARL",
    "GREEN_TOPAZ": "GREEN TOPAZ",
    "EMERALD": "SM EMERALD",
}


class Settings(BaseSettings):
    app_name: str = "Stock Recovery API"
    env: str = "dev"
    log_level: str = "INFO"

    kiotviet_retailer: str | None = None
    kiotviet_client_id: str | None = None
    kiotviet_client_secret: str | None = None
    kiotviet_token_url: str = "https://id.kiotviet.vn/connect/token"
    kiotviet_api_url: str = "https://public.kiotapi.com"

    catalog_batch_size: int = Field(default=20, ge=1)
    catalog_page_size: int = Field(default=100, ge=1)
    stock_page_size: int = Field(default=100, ge=1)
    timeout_seconds: float = 15.0
    max_items_per_list: int = Field(default=5000, ge=1)

    branch_aliases: dict[str, str] = Field(default_factory=lambda: dict(DEFAULT_BRANCH_ALIASES))
    cors_origins: list[str] = Field(default_factory=lambda: ["http://localhost:5173", "http://127.0.0.1:5173"])

    model_config = SettingsConfigDict(env_file=".env", env_prefix="STOCKRECON_")


@lru_cache
def get_settings() -> Settings:
    return Settings()

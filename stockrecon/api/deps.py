from stockrecon.config import Settings, get_settings
from stockrecon.services.recovery import CatalogFactory, build_catalog


def settings_dependency() -> Settings:
    return get_settings()


def catalog_factory_dependency() -> CatalogFactory:
    return build_catalog

# storefront/core/config.py
from functools import lru_cache
from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Centralized application settings loaded from environment.

    Required env vars (.env):
      - JWT_SECRET (HS256 secret used to verify bearer tokens)

    Optional:
      - DATA_DIR (directory holding products.json / orders.json /
        categories.json / carts/)
      - SEED_PRODUCTS / SEED_CATEGORIES (write the demo data when the
        file is missing)
      - STORE_RELOAD_ON_ACCESS (re-read JSON files before every store call)
    """

    PROJECT_NAME: str = "Storefront API"
    API_V1_STR: str = "/api/v1"

    # File-backed persistence
    DATA_DIR: Path = Path("data")
    PRODUCTS_FILE: str = "products.json"
    ORDERS_FILE: str = "orders.json"
    CATEGORIES_FILE: str = "categories.json"
    CARTS_DIR: str = "carts"
    SEED_PRODUCTS: bool = True
    SEED_CATEGORIES: bool = True

    # Several server workers may share DATA_DIR, so stores re-read the
    # file before every operation. Only turn this off for a single worker.
    STORE_RELOAD_ON_ACCESS: bool = True

    PLACEHOLDER_IMAGE: str = "/api/placeholder/300/300"
    CATEGORY_PLACEHOLDER_IMAGE: str = "/api/placeholder/300/200"

    # JWT verification (issuance happens elsewhere)
    JWT_SECRET: str
    JWT_ALG: str = "HS256"

    CORS_ORIGINS: list[str] = [
        "http://localhost:3000",
        "http://127.0.0.1:3000",
    ]

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    @property
    def products_path(self) -> Path:
        return self.DATA_DIR / self.PRODUCTS_FILE

    @property
    def orders_path(self) -> Path:
        return self.DATA_DIR / self.ORDERS_FILE

    @property
    def categories_path(self) -> Path:
        return self.DATA_DIR / self.CATEGORIES_FILE

    @property
    def carts_path(self) -> Path:
        return self.DATA_DIR / self.CARTS_DIR


@lru_cache
def get_settings() -> Settings:
    """
    Cached settings loader.
    Ensures we don't re-parse .env on every import / request.
    """
    return Settings()

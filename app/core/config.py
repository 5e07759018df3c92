# app/core/config.py
from functools import lru_cache
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Centralized application settings loaded from environment.

    Common env vars (.env):
      - DATABASE_URL (Postgres or SQLite connection string)
      - STORE_DATA_DIR (where per-client cart/wishlist/compare state lives)
      - ADMIN_API_KEY (enables admin catalog routes)

    Everything has a default so the service boots locally on SQLite.
    """

    PROJECT_NAME: str = "Storefront Backend"
    API_V1_STR: str = "/api/v1"

    DATABASE_URL: str = "sqlite:///./storefront.db"

    # Client state stores (cart / wishlist / compare)
    STORE_DATA_DIR: str = ".store-data"
    COMPARE_MAX_ITEMS: int = 4

    # Catalog listing pagination
    DEFAULT_PAGE_SIZE: int = 12
    MAX_PAGE_SIZE: int = 100

    # Shared secret for admin catalog routes; admin routes are closed when unset
    ADMIN_API_KEY: str | None = None

    CORS_ORIGINS: list[str] = [
        "http://localhost:3000",
        "http://127.0.0.1:3000",
    ]

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")


@lru_cache
def get_settings() -> Settings:
    """
    Cached settings loader.
    Ensures we don't re-parse .env on every import / request.
    """
    return Settings()

from __future__ import annotations

from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class AppSettings(BaseSettings):
    """
    Service-level settings.

    Loaded automatically from .env with prefix ORDER_SERVICE_*
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="ORDER_SERVICE_",
        extra="ignore",
    )

    app_name: str = "order-service"
    log_level: str = "INFO"

    # Year-end exports are only produced from the accounting cut-over year on
    export_min_year: int = 2025

    # Run Base.metadata.create_all in the API lifespan (tests / dev only)
    create_schema_on_startup: bool = False


@lru_cache()
def get_app_settings() -> AppSettings:
    """Return cached global settings for the entire app."""
    return AppSettings()

"""Centralized application configuration using Pydantic settings."""
from functools import lru_cache
from pathlib import Path
from typing import List

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

_ROOT = Path(__file__).resolve().parent.parent


class Settings(BaseSettings):
    """Environment-driven configuration for the reviews board."""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8")

    database_url: str = Field(
        default="sqlite:///./reviews.db",
        description="SQLAlchemy database URL. Defaults to local SQLite for development.",
    )
    run_db_migrations: bool = Field(
        default=False,
        description="Whether the service should create database tables on startup.",
    )
    service_api_key: str = Field(default="service-key", description="API key required for review writes")
    cors_origins: List[str] = Field(default_factory=lambda: ["*"], description="Allowed CORS origins")
    default_rate_limit: str = Field(default="30/minute", description="Global rate limiting rule")
    rate_limiting_enabled: bool = Field(default=True, description="Toggle to disable SlowAPI limits (useful in tests)")
    review_cache_ttl: int = Field(default=30, description="TTL (s) for the cached review listing")

    reviews_min_rating: int = Field(default=3, description="Only reviews rated above this are listed")
    reviews_page_limit: int = Field(default=10, ge=1, description="Number of reviews shown on the listing page")

    template_dir: Path = Field(
        default=_ROOT / "services" / "reviews" / "templates",
        description="Directory holding the Jinja2 view templates",
    )
    log_dir: Path = Field(default=_ROOT / "logs", description="Directory for audit log files")

    reviews_service_port: int = 8004


@lru_cache
def get_settings() -> Settings:
    """Return a cached instance of the Settings object."""

    return Settings()


def reset_settings_cache() -> None:
    """Clear the cached Settings instance (useful for tests)."""

    get_settings.cache_clear()

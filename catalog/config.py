"""
Catalog Configuration

Every tunable of the catalog lives on one pydantic-settings model. Values come
from, in order of precedence:

1. keyword arguments (tests: Settings(database_url="sqlite:///..."))
2. environment variables, matched case-insensitively (DATABASE_URL=...)
3. a .env file in the working directory
4. the defaults below

Invalid values (an unknown log level, a non-positive timeout) fail at startup
with a pydantic ValidationError rather than halfway through a request.

get_settings() caches the instance built from the environment. create_app()
accepts an explicit Settings so tests never touch that cache.
"""

from functools import lru_cache
from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class Settings(BaseSettings):
    """Catalog settings, read from the environment and .env."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # -------------------------------------------------------------------------
    # Server
    # -------------------------------------------------------------------------
    app_name: str = Field(
        default="Local Library",
        description="Shown in page titles, logs and /health"
    )
    environment: Literal["development", "staging", "production"] = Field(
        default="development",
        description="Deployment stage reported by /health"
    )
    debug: bool = Field(
        default=False,
        description="Show error details on 500 pages and reload on code changes"
    )
    host: str = Field(
        default="0.0.0.0",
        description="Interface uvicorn listens on when run as a script"
    )
    port: int = Field(
        default=8001,
        description="Port uvicorn listens on when run as a script"
    )

    # -------------------------------------------------------------------------
    # Entity Store
    # -------------------------------------------------------------------------
    database_url: str = Field(
        default="sqlite:///./catalog.db",
        description="SQLAlchemy URL of the catalog database"
    )
    db_pool_size: int = Field(
        default=5,
        description="Pooled connections kept open (ignored for SQLite)"
    )
    db_max_overflow: int = Field(
        default=10,
        description="Connections allowed beyond the pool (ignored for SQLite)"
    )
    create_tables_on_startup: bool = Field(
        default=True,
        description="Create missing tables when the app starts; disable once Alembic owns the schema"
    )
    aggregation_timeout: float = Field(
        default=10.0,
        gt=0,
        description="Seconds each concurrent page read may take before the request fails"
    )

    # -------------------------------------------------------------------------
    # Logging
    # -------------------------------------------------------------------------
    log_level: str = Field(
        default="INFO",
        description="Root log level: " + ", ".join(LOG_LEVELS)
    )

    @property
    def is_sqlite(self) -> bool:
        return self.database_url.startswith("sqlite")

    @field_validator("environment", mode="before")
    @classmethod
    def normalize_environment(cls, v: str) -> str:
        return v.lower() if isinstance(v, str) else v

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        level = v.upper()
        if level not in LOG_LEVELS:
            raise ValueError(f"log_level must be one of {', '.join(LOG_LEVELS)}")
        return level


@lru_cache
def get_settings() -> Settings:
    """Settings built from the environment, created on first use."""
    return Settings()

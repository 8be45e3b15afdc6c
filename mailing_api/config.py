# mailing_api/config.py
"""
Centralized configuration with validation.

Uses pydantic-settings to load and validate all environment variables at startup.
Fail fast with clear error messages if required config is missing.
"""

from functools import lru_cache

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )

    # Database
    DATABASE_URL: str = Field(
        ...,
        description="PostgreSQL connection URL",
    )
    DB_MAX_OPEN_CONNS: int = Field(
        default=3,
        ge=1,
        description="Maximum number of open connections to the database",
    )
    DB_MAX_IDLE_CONNS: int = Field(
        default=1,
        ge=0,
        description="Maximum number of connections kept in the idle pool",
    )
    DB_CONN_MAX_LIFETIME_SECS: int = Field(
        default=30,
        ge=1,
        description="Maximum amount of time a connection may be reused",
    )
    DB_WAIT_SECONDS: int = Field(
        default=0,
        ge=0,
        description="Seconds to wait for the database at startup (0 = connect once)",
    )

    # Storage
    STORE_PROVIDER: str = Field(
        default="sql",
        description="Entry store provider: sql, memory",
    )

    # Authentication
    API_TOKEN: str | None = Field(
        default=None,
        description="Expected X-Token header value for /clients endpoints",
    )

    # Server
    PORT: int = Field(
        default=8080,
        description="HTTP port for the API server",
    )

    # Retention watcher
    WATCHER_ENABLED: bool = Field(
        default=True,
        description="Run the retention watcher in the API process",
    )
    WATCHER_TICK_PERIOD_SECONDS: float = Field(
        default=60.0,
        gt=0,
        description="Seconds between retention sweeps",
    )
    RETENTION_TTL_SECONDS: int = Field(
        default=300,
        gt=0,
        description="Age in seconds after which an entry is evicted",
    )

    # Logging
    LOG_JSON: bool = Field(
        default=True,
        description="Emit single-line JSON logs (False = human-readable)",
    )
    LOG_LEVEL: str = Field(
        default="INFO",
        description="Root log level: DEBUG, INFO, WARNING, ERROR",
    )

    @field_validator("DATABASE_URL")
    @classmethod
    def fix_database_url(cls, v: str) -> str:
        """Hosted Postgres provides postgresql:// but SQLAlchemy needs postgresql+psycopg2://"""
        if v.startswith("postgresql://"):
            return v.replace("postgresql://", "postgresql+psycopg2://", 1)
        return v

    @field_validator("STORE_PROVIDER", "LOG_LEVEL")
    @classmethod
    def normalize_choice(cls, v: str) -> str:
        return v.strip()


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Get cached application settings. Call at startup to validate config."""
    return Settings()

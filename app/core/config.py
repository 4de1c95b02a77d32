"""Application configuration using Pydantic Settings.

This project loads configuration from environment variables.

Optionally, you may point `ENV_FILE` at a local env file (for development).
Leave it unset in deployed environments so injected secrets are the single
source of truth.
"""

import os
from enum import Enum
from urllib.parse import parse_qsl, urlencode, urlsplit, urlunsplit

from pydantic import field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class AppEnvironment(str, Enum):
    """Application environment values."""

    LOCAL = "local"
    TEST = "test"
    PROD = "prod"


# Query options that configure the SQLAlchemy pool, not the driver connection
ENGINE_ONLY_QUERY_OPTIONS = frozenset({"pool_size", "max_overflow", "pool_timeout", "pool_recycle"})


def _rewrite_database_url(url: str, driver: str) -> str:
    """Force a SQLAlchemy driver on a postgres URL and drop engine-only options."""
    parts = urlsplit(url)
    scheme = parts.scheme.split("+", 1)[0]
    if scheme == "postgres":
        scheme = "postgresql"
    if scheme == "postgresql":
        scheme = f"postgresql+{driver}"

    query = [
        (key, value)
        for key, value in parse_qsl(parts.query, keep_blank_values=True)
        if key not in ENGINE_ONLY_QUERY_OPTIONS
    ]
    if driver == "asyncpg":
        # asyncpg does not understand libpq's sslmode
        query = [("ssl", value) if key == "sslmode" else (key, value) for key, value in query]

    return urlunsplit((scheme, parts.netloc, parts.path, urlencode(query), parts.fragment))


class Settings(BaseSettings):
    """
    Application settings with type validation.

    Configuration is loaded from environment variables, with support
    for .env files in development.
    """

    model_config = SettingsConfigDict(
        env_file=os.getenv("ENV_FILE") or None, env_prefix="", extra="ignore"
    )

    # Application
    app_env: AppEnvironment = AppEnvironment.LOCAL
    app_name: str = "invoice-dashboard-api"
    app_log_level: str = "INFO"

    # Observability
    observability_enabled: bool = True
    observability_structured_logs: bool = True
    observability_request_id_header: str = "X-Request-ID"

    # Database - Runtime app user (used by FastAPI)
    database_url_app: str

    # Database - Admin user (schema creation and seeding)
    database_url_admin: str | None = None

    database_search_path: str = "public"
    database_pool_size: int = 20
    database_max_overflow: int = 10

    # Token for protecting /metrics endpoint
    metrics_token: str | None = None

    # When set, /health and /readyz require X-Health-Token header
    health_token: str | None = None

    # CORS Configuration
    cors_origins: str = "http://localhost:3000,http://localhost:5173"

    @property
    def cors_origins_list(self) -> list[str]:
        """Parse CORS origins string into a list."""
        return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]

    @property
    def async_url(self) -> str:
        """Database URL for the asyncpg-backed runtime engine."""
        return _rewrite_database_url(self.database_url_app, "asyncpg")

    @property
    def sync_url(self) -> str:
        """Database URL for the psycopg-backed engine used by scripts."""
        return _rewrite_database_url(self.database_url_admin or self.database_url_app, "psycopg")

    @field_validator("app_env", mode="before")
    @classmethod
    def validate_app_env(cls, v: str | AppEnvironment) -> AppEnvironment:
        """Validate and parse app_env to AppEnvironment enum."""
        if isinstance(v, AppEnvironment):
            return v
        try:
            return AppEnvironment(v.lower())
        except ValueError:
            raise ValueError(
                f"app_env must be one of {[e.value for e in AppEnvironment]}, got '{v}'"
            )

    @field_validator("database_url_app")
    @classmethod
    def validate_database_url_app(cls, v: str) -> str:
        """Only PostgreSQL URLs are supported."""
        v = v.strip()
        if not v.startswith(("postgresql", "postgres://")):
            raise ValueError("DATABASE_URL_APP must be a postgresql:// URL")
        return v

    @model_validator(mode="after")
    def validate_production_settings(self) -> "Settings":
        """
        Validate production-specific settings.

        These checks prevent insecure configurations from being deployed to production.
        """
        if self.app_env == AppEnvironment.PROD:
            if "sslmode=require" not in self.database_url_app:
                raise ValueError("DATABASE_URL_APP must use sslmode=require in production")

            for origin in self.cors_origins_list:
                if "localhost" in origin or "127.0.0.1" in origin:
                    raise ValueError(
                        f"CORS origins must not contain localhost in production: {origin}"
                    )

        return self


settings = Settings()

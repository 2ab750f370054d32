"""Application configuration using Pydantic Settings.

Configuration is environment-aware:
- APP_ENV determines which .env file to load
- Supports: development, testing, staging, production
- Each environment has its own .env.{environment} file

DATABASE_URL is the only required value. When it is missing the process
exits at import time instead of starting without a datastore.
"""

from __future__ import annotations

import os
from pathlib import Path

from pydantic import AliasChoices, Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


APP_ENV = os.getenv("APP_ENV", "development")

# Project root (so .env resolution doesn't depend on current working directory)
PROJECT_ROOT = Path(__file__).resolve().parents[2]

ENV_FILE_MAP = {
    "development": ".env.development",
    "testing": ".env.testing",
    "staging": ".env.staging",
    "production": ".env.production",
}

_env_filename = ENV_FILE_MAP.get(APP_ENV, ".env.development")
_env_path = PROJECT_ROOT / _env_filename

# Production usually injects variables directly, so the file is optional
_env_file = str(_env_path) if _env_path.is_file() else None

# Nested BaseSettings don't inherit env_file, so populate os.environ first
if _env_file:
    from dotenv import load_dotenv
    load_dotenv(_env_file, override=False)


DEFAULT_ALLOWED_ORIGINS = "https://meetcasa.com,https://www.meetcasa.com"


class DatabaseSettings(BaseSettings):
    """Relational datastore connection settings."""

    url: str = Field(
        ...,
        description="SQLAlchemy connection URL (DATABASE_URL)",
    )
    ssl_mode: str | None = Field(
        None,
        description="libpq sslmode passed to PostgreSQL connections (e.g. require)",
    )
    pool_size: int = Field(
        5,
        description="Number of pooled connections kept open per process",
        ge=1,
    )
    pool_pre_ping: bool = Field(
        True,
        description="Test pooled connections for liveness before use",
    )
    create_tables: bool = Field(
        False,
        description="Create the waitlist table on startup if it does not exist",
    )

    model_config = SettingsConfigDict(
        env_prefix="DATABASE_",
        case_sensitive=False,
    )

    @field_validator("url")
    @classmethod
    def _normalize_url(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("must not be empty")
        # Hosting providers still hand out the scheme SQLAlchemy dropped
        if value.startswith("postgres://"):
            value = "postgresql://" + value[len("postgres://"):]
        return value


class AppSettings(BaseSettings):
    """HTTP surface configuration."""

    environment: str = Field(
        APP_ENV,
        validation_alias=AliasChoices("APP_ENV", "APP_ENVIRONMENT"),
        description="Deployment environment name, reported in startup logs",
    )
    host: str = Field(
        "0.0.0.0",
        description="Interface the HTTP server binds to",
    )
    port: int = Field(
        3000,
        validation_alias=AliasChoices("APP_PORT", "PORT"),
        description="Port the HTTP server listens on",
        ge=1,
        le=65535,
    )
    cors_allowed_origins: str = Field(
        DEFAULT_ALLOWED_ORIGINS,
        description="Comma-separated list of browser origins allowed to call the API",
    )
    security_headers_enabled: bool = Field(
        True,
        description="Attach hardening headers (nosniff, frame options, HSTS...) to responses",
    )

    rate_limit_enabled: bool = Field(
        True,
        description="Enable per-client rate limiting on the signup endpoint",
    )
    rate_limit_requests: int = Field(
        12,
        description="Maximum number of admitted signups per window (per client)",
        ge=1,
    )
    rate_limit_window_seconds: int = Field(
        10,
        description="Rate limit window size in seconds",
        ge=1,
    )
    rate_limit_trust_forwarded_for: bool = Field(
        False,
        description=(
            "Key the rate limiter on the first X-Forwarded-For entry instead of "
            "the peer address. Only enable behind a proxy that overwrites it."
        ),
    )

    model_config = SettingsConfigDict(
        env_prefix="APP_",
        case_sensitive=False,
    )

    @property
    def cors_origins(self) -> list[str]:
        """Allowed origins as a list, blanks removed."""
        return [o.strip() for o in self.cors_allowed_origins.split(",") if o.strip()]


class LogSettings(BaseSettings):
    """Logging configuration."""

    level: str = Field("INFO", description="Root log level")
    format: str = Field("json", description="Log format: json or plain")
    request_id_header: str = Field(
        "X-Request-ID",
        description="Header used to read and echo the request correlation id",
    )

    model_config = SettingsConfigDict(
        env_prefix="LOG_",
        case_sensitive=False,
    )


def _build_database_settings() -> DatabaseSettings:
    # Values come from the environment; see pydantic-settings docs
    return DatabaseSettings()  # type: ignore[call-arg]


class Settings(BaseSettings):
    """Main application settings container.

    Raises validation errors on construction if required settings are
    missing; use load_settings() to turn those into a clean process exit.
    """

    database: DatabaseSettings = Field(default_factory=_build_database_settings)
    app: AppSettings = Field(default_factory=AppSettings)
    log: LogSettings = Field(default_factory=LogSettings)

    model_config = SettingsConfigDict(
        case_sensitive=False,
    )


_ENV_PREFIXES = {
    "DatabaseSettings": "DATABASE_",
    "AppSettings": "APP_",
    "LogSettings": "LOG_",
}


def load_settings() -> Settings:
    """Build settings from the environment or exit the process.

    Returns:
        Settings: Fully validated settings.

    Raises:
        SystemExit: When required configuration is absent or invalid.
    """

    try:
        return Settings()
    except ValidationError as exc:
        prefix = _ENV_PREFIXES.get(exc.title, "")
        problems = ", ".join(
            f"{prefix}{'_'.join(str(p) for p in err['loc']).upper()} ({err['msg']})"
            for err in exc.errors()
        )
        raise SystemExit(f"Invalid configuration: {problems}") from exc


settings = load_settings()

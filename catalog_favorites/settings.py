"""Centralized configuration management for the Catalog Favorites API."""

from __future__ import annotations

import logging
from functools import lru_cache

from dotenv import load_dotenv
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

# Load a local .env before the settings model reads the environment so that
# CLI entry points and the ASGI app observe the same configuration.
load_dotenv()

# -- Application-wide constants -------------------------------------------------

DEFAULT_SQLITE_DATABASE_URL = "sqlite+aiosqlite:///./data/app.db"
POSTGRES_ASYNC_PREFIX = "postgresql+psycopg://"
POSTGRES_SYNC_PREFIXES = ("postgres://", "postgresql://")
DEFAULT_CATALOG_API_URL = "https://fakestoreapi.com"
DEFAULT_LOG_LEVEL = "INFO"
DEFAULT_JWT_ALGORITHM = "HS256"
DEFAULT_JWT_EXPIRATION_DAYS = 7
DEFAULT_RATE_LIMIT_MAX_REQUESTS = 100
DEFAULT_RATE_LIMIT_WINDOW_SECONDS = 15 * 60


def _normalize_origin(origin: str) -> str:
    """Return the origin stripped of whitespace and trailing slashes."""

    return origin.strip().rstrip("/")


class AppSettings(BaseSettings):
    """Typed configuration surface built on top of ``pydantic-settings``.

    Values come from the process environment (or a ``.env`` file).  Helper
    properties expose derived values such as the async database URL so callers
    never repeat the parsing logic.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        populate_by_name=True,
    )

    database_url: str | None = Field(
        default=None,
        alias="DATABASE_URL",
        description=(
            "Full SQLAlchemy-compatible database URL. Postgres URLs supplied in"
            " sync format (postgres:// or postgresql://) are coerced into the"
            " async psycopg driver string at runtime."
        ),
    )
    use_sqlite: bool = Field(
        default=False,
        alias="USE_SQLITE",
        description="Force the SQLite fallback regardless of DATABASE_URL.",
    )
    auto_create_tables: bool | None = Field(
        default=None,
        alias="AUTO_CREATE_TABLES",
        description=(
            "Create tables at startup. Defaults to true for SQLite and false for"
            " PostgreSQL, where Alembic migrations own the schema."
        ),
    )
    jwt_secret: str | None = Field(
        default=None,
        alias="JWT_SECRET",
        description="Secret used to sign and verify bearer tokens.",
    )
    jwt_algorithm: str = Field(default=DEFAULT_JWT_ALGORITHM, alias="JWT_ALGORITHM")
    jwt_expiration_days: int = Field(
        default=DEFAULT_JWT_EXPIRATION_DAYS,
        alias="JWT_EXPIRATION_DAYS",
        gt=0,
    )
    catalog_api_url: str = Field(
        default=DEFAULT_CATALOG_API_URL,
        alias="FAKESTORE_API_URL",
        description="Base URL of the remote product catalog.",
    )
    catalog_timeout_seconds: float = Field(
        default=10.0,
        alias="CATALOG_TIMEOUT_SECONDS",
        gt=0,
        description="Transport timeout applied to every catalog request.",
    )
    host: str = Field(default="0.0.0.0", alias="HOST")
    port: int = Field(default=3000, alias="PORT")
    api_prefix: str = Field(default="/api", alias="API_PREFIX")
    log_level: str = Field(
        default=DEFAULT_LOG_LEVEL,
        alias="LOG_LEVEL",
        description="Root logging level (e.g. INFO, DEBUG, WARNING).",
    )
    cors_allow_origins_raw: str | None = Field(
        default=None,
        alias="CORS_ALLOW_ORIGINS",
        description="Comma-separated list of allowed CORS origins.",
    )
    redis_url: str | None = Field(
        default=None,
        alias="REDIS_URL",
        description="Redis connection string backing the rate limiter counters.",
    )
    rate_limit_enabled: bool = Field(default=True, alias="RATE_LIMIT_ENABLED")
    rate_limit_max_requests: int = Field(
        default=DEFAULT_RATE_LIMIT_MAX_REQUESTS,
        alias="RATE_LIMIT_MAX_REQUESTS",
        gt=0,
    )
    rate_limit_window_seconds: int = Field(
        default=DEFAULT_RATE_LIMIT_WINDOW_SECONDS,
        alias="RATE_LIMIT_WINDOW_SECONDS",
        gt=0,
    )

    @property
    def resolved_database_url(self) -> str:
        """Return the async-compatible database URL after applying fallbacks."""

        if self.use_sqlite or not self.database_url:
            return DEFAULT_SQLITE_DATABASE_URL

        url = self.database_url.strip()

        for prefix in POSTGRES_SYNC_PREFIXES:
            if url.startswith(prefix):
                return url.replace(prefix, POSTGRES_ASYNC_PREFIX, 1)

        if url.startswith(POSTGRES_ASYNC_PREFIX) or url.startswith("sqlite+aiosqlite://"):
            return url

        raise RuntimeError(
            f"Expected a PostgreSQL connection string or SQLite fallback, received: {url}"
        )

    @property
    def database_type(self) -> str:
        """Return ``sqlite`` when using SQLite otherwise ``postgresql``."""

        if self.resolved_database_url.startswith("sqlite"):
            return "sqlite"
        return "postgresql"

    @property
    def should_create_tables(self) -> bool:
        if self.auto_create_tables is not None:
            return self.auto_create_tables
        return self.database_type == "sqlite"

    @property
    def cors_allow_origins(self) -> list[str]:
        """Return normalised CORS origins, defaulting to any origin."""

        if not self.cors_allow_origins_raw:
            return ["*"]

        origins = [
            _normalize_origin(origin)
            for origin in self.cors_allow_origins_raw.split(",")
            if origin.strip()
        ]
        return [origin for origin in origins if origin] or ["*"]

    @property
    def normalized_api_prefix(self) -> str:
        prefix = self.api_prefix.strip().rstrip("/")
        if prefix and not prefix.startswith("/"):
            prefix = f"/{prefix}"
        return prefix

    @property
    def log_level_numeric(self) -> int:
        """Translate ``log_level`` into the numeric constant expected by logging."""

        candidate = logging.getLevelName(self.log_level.upper())
        if isinstance(candidate, int):
            return candidate
        return logging.INFO

    def require_jwt_secret(self) -> str:
        """Return the signing secret or fail loudly when it is missing."""

        if self.jwt_secret is None or not self.jwt_secret.strip():
            raise RuntimeError(
                "JWT_SECRET is not set. Configure a signing secret before starting the API."
            )
        return self.jwt_secret

    def optional_config_warnings(self) -> list[str]:
        """Return human-readable warnings for unset optional configuration."""

        warnings: list[str] = []

        if not self.database_url and not self.use_sqlite:
            warnings.append(
                "DATABASE_URL is not set - falling back to the local SQLite database"
            )

        if self.rate_limit_enabled and not self.redis_url:
            warnings.append(
                "REDIS_URL is not set - rate limit counters will be kept in process memory"
            )

        if not self.cors_allow_origins_raw:
            warnings.append(
                "CORS_ALLOW_ORIGINS is not set - allowing requests from any origin"
            )

        return warnings


@lru_cache(maxsize=1)
def get_settings() -> AppSettings:
    """Return a cached instance of :class:`AppSettings`."""

    return AppSettings()


__all__ = [
    "AppSettings",
    "DEFAULT_CATALOG_API_URL",
    "DEFAULT_JWT_EXPIRATION_DAYS",
    "DEFAULT_LOG_LEVEL",
    "DEFAULT_RATE_LIMIT_MAX_REQUESTS",
    "DEFAULT_RATE_LIMIT_WINDOW_SECONDS",
    "DEFAULT_SQLITE_DATABASE_URL",
    "POSTGRES_ASYNC_PREFIX",
    "POSTGRES_SYNC_PREFIXES",
    "get_settings",
]

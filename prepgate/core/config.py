"""Application configuration using Pydantic Settings.

Configuration is environment-aware:
- APP_ENV determines which .env file to load
- Supports: development, testing, staging, production
- Each environment has its own .env.{environment} file
"""

from __future__ import annotations

import os
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


# Determine which environment to load (default: development)
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

# Only load from file if it exists (production might inject via env vars only)
_env_file = str(_env_path) if _env_path.is_file() else None


# Nested BaseSettings don't inherit env_file, so populate os.environ up front
if _env_file:
    from dotenv import load_dotenv
    load_dotenv(_env_file, override=True)


def _build_app_settings() -> "AppSettings":
    """Build app settings from environment.

    Static type checkers treat BaseSettings fields as constructor arguments,
    which is not how BaseSettings is intended to be used.
    """

    return AppSettings()  # type: ignore[call-arg]


def _build_cache_settings() -> "CacheSettings":
    return CacheSettings()  # type: ignore[call-arg]


def _build_external_settings() -> "ExternalSettings":
    return ExternalSettings()  # type: ignore[call-arg]


def _build_log_settings() -> "LogSettings":
    return LogSettings()  # type: ignore[call-arg]


class AppSettings(BaseSettings):
    """Application-wide configuration."""

    debug: bool = Field(
        False,
        description="Enable debug mode with verbose logging",
    )
    rate_limit_enabled: bool = Field(
        True,
        description="Enforce per-client admission control on guarded routes",
    )
    rate_limit_include_headers: bool = Field(
        True,
        description="Include X-RateLimit-* and Retry-After headers when throttling",
    )
    rate_limit_max_keys: int | None = Field(
        100_000,
        description="Upper bound on tracked limiter keys (unset for unbounded)",
        ge=1,
    )
    trust_forwarded_headers: bool = Field(
        True,
        description="Derive the client identifier from X-Forwarded-For / X-Real-IP",
    )

    model_config = SettingsConfigDict(
        env_prefix="APP_",
        case_sensitive=False,
    )


class CacheSettings(BaseSettings):
    """Response cache configuration."""

    default_ttl_ms: int = Field(
        5 * 60 * 1000,
        description="TTL applied to memoized external lookups, in milliseconds",
        ge=1,
    )
    max_entries: int | None = Field(
        1024,
        description="Maximum cached entries before LRU eviction (unset for unbounded)",
        ge=1,
    )

    model_config = SettingsConfigDict(
        env_prefix="CACHE_",
        case_sensitive=False,
    )


class ExternalSettings(BaseSettings):
    """Upstream coding-profile providers and their per-client budgets."""

    github_api_url: str = Field(
        "https://api.github.com",
        description="Base URL of the GitHub REST API",
    )
    github_token: str | None = Field(
        None,
        description="Optional GitHub token to raise the upstream quota",
    )
    codeforces_api_url: str = Field(
        "https://codeforces.com/api",
        description="Base URL of the Codeforces API",
    )
    codechef_api_url: str = Field(
        "https://codechef-api.vercel.app",
        description="Community CodeChef JSON API, tried before the profile page",
    )
    codechef_url: str = Field("https://www.codechef.com", description="CodeChef site root")
    hackerrank_url: str = Field("https://www.hackerrank.com", description="HackerRank site root")
    hackerearth_url: str = Field("https://www.hackerearth.com", description="HackerEarth site root")
    timeout_seconds: float = Field(
        15.0,
        description="Timeout for a single upstream request",
    )
    submissions_timeout_seconds: float = Field(
        25.0,
        description="Timeout for the Codeforces submissions listing",
    )
    scrape_timeout_seconds: float = Field(
        20.0,
        description="Timeout for fetching a public HTML profile page",
    )
    window_ms: int = Field(
        60_000,
        description="Admission window for external lookups, in milliseconds",
        ge=1,
    )
    github_limit: int = Field(
        20,
        description="GitHub lookups allowed per client per window",
        ge=1,
    )
    codeforces_limit: int = Field(
        12,
        description="Codeforces lookups allowed per client per window",
        ge=1,
    )
    codechef_limit: int = Field(6, description="CodeChef lookups per client per window", ge=1)
    hackerrank_limit: int = Field(6, description="HackerRank lookups per client per window", ge=1)
    hackerearth_limit: int = Field(6, description="HackerEarth lookups per client per window", ge=1)

    model_config = SettingsConfigDict(
        env_prefix="EXTERNAL_",
        case_sensitive=False,
    )


class LogSettings(BaseSettings):
    """Logging output configuration."""

    level: str = Field("INFO", description="Root log level")
    format: str = Field("json", description="'json' or 'plain'")
    output: str = Field("stdout", description="'stdout' or 'file'")
    file_path: str | None = Field(None, description="Log file path when output=file")
    max_bytes: int = Field(10 * 1024 * 1024, description="Rotate after this many bytes (0 disables)")
    backup_count: int = Field(5, description="Rotated files to keep")
    request_id_header: str = Field("X-Request-ID", description="Correlation header name")

    model_config = SettingsConfigDict(
        env_prefix="LOG_",
        case_sensitive=False,
    )


class Settings(BaseSettings):
    """Main application settings container.

    Automatically loads from the appropriate .env.{APP_ENV} file.

    Environments:
    - development: Local development (DEBUG=true)
    - testing: Automated tests (uses .env.testing)
    - staging: Pre-production (uses .env.staging)
    - production: Production deployment (uses .env.production)
    """

    app_env: str = APP_ENV
    app: AppSettings = Field(default_factory=_build_app_settings)
    cache: CacheSettings = Field(default_factory=_build_cache_settings)
    external: ExternalSettings = Field(default_factory=_build_external_settings)
    log: LogSettings = Field(default_factory=_build_log_settings)

    model_config = SettingsConfigDict(
        case_sensitive=False,
    )


# Global settings instance - composed from domain-specific settings
settings = Settings()

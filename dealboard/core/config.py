"""Configuration module for the DealBoard application."""

from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache
from urllib.parse import urlparse

from dotenv import load_dotenv

from dealboard.core.exceptions import ConfigurationError

load_dotenv()


def _as_bool(value: str | None, default: bool = False) -> bool:
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


def _as_number(name: str, default: str, cast):
    raw = os.getenv(name, default)
    try:
        return cast(raw)
    except ValueError as exc:
        raise ConfigurationError(f"{name} must be a number, got {raw!r}.") from exc


@dataclass(frozen=True)
class Config:
    """Runtime configuration with validation."""

    APP_NAME: str
    APP_VERSION: str
    ENV: str
    DEBUG: bool
    DATABASE_URL: str
    DB_CONNECTIVITY_REQUIRED: bool
    API_HOST: str
    API_PORT: int
    API_PREFIX: str
    LOG_LEVEL: str
    LOG_FILE: str
    BOARD_RELOAD_DEBOUNCE_SECONDS: float
    ACTIVITY_FEED_LIMIT: int
    NOTIFICATION_BUFFER_SIZE: int
    DEAL_CODE_PREFIX: str
    SEED_DEFAULT_STAGES: bool

    @property
    def is_production(self) -> bool:
        return self.ENV == "production"


def _build_config(env: str | None = None) -> Config:
    resolved_env = (env or os.getenv("ENV", "development")).strip().lower()
    debug = _as_bool(os.getenv("DEBUG"), default=False)

    config = Config(
        APP_NAME="DealBoard",
        APP_VERSION=os.getenv("APP_VERSION", "1.0.0"),
        ENV=resolved_env,
        DEBUG=debug if resolved_env != "production" else False,
        DATABASE_URL=os.getenv("DATABASE_URL", "sqlite:///./dealboard.db"),
        DB_CONNECTIVITY_REQUIRED=_as_bool(
            os.getenv("DB_CONNECTIVITY_REQUIRED"), default=(resolved_env == "production")
        ),
        API_HOST=os.getenv("API_HOST", "0.0.0.0"),
        API_PORT=_as_number("API_PORT", "8000", int),
        API_PREFIX=os.getenv("API_PREFIX", "/api/v1"),
        LOG_LEVEL=os.getenv("LOG_LEVEL", "INFO").upper(),
        LOG_FILE=os.getenv("LOG_FILE", ""),
        BOARD_RELOAD_DEBOUNCE_SECONDS=_as_number("BOARD_RELOAD_DEBOUNCE_SECONDS", "0.25", float),
        ACTIVITY_FEED_LIMIT=_as_number("ACTIVITY_FEED_LIMIT", "10", int),
        NOTIFICATION_BUFFER_SIZE=_as_number("NOTIFICATION_BUFFER_SIZE", "50", int),
        DEAL_CODE_PREFIX=os.getenv("DEAL_CODE_PREFIX", "MON").strip().upper(),
        SEED_DEFAULT_STAGES=_as_bool(os.getenv("SEED_DEFAULT_STAGES"), default=True),
    )
    _validate_config(config)
    return config


def _validate_database_url(database_url: str) -> None:
    parsed = urlparse(database_url)
    if parsed.scheme not in {"sqlite", "postgresql", "postgresql+psycopg2", "postgresql+psycopg"}:
        raise ConfigurationError(
            "DATABASE_URL must use sqlite:// or postgresql:// style URL."
        )
    if parsed.scheme.startswith("postgresql") and not parsed.hostname:
        raise ConfigurationError("PostgreSQL DATABASE_URL is missing hostname.")


def _validate_config(config: Config) -> None:
    _validate_database_url(config.DATABASE_URL)

    if not config.API_PREFIX.startswith("/"):
        raise ConfigurationError("API_PREFIX must start with '/'.")
    if config.BOARD_RELOAD_DEBOUNCE_SECONDS < 0:
        raise ConfigurationError("BOARD_RELOAD_DEBOUNCE_SECONDS must be >= 0.")
    if config.ACTIVITY_FEED_LIMIT < 1:
        raise ConfigurationError("ACTIVITY_FEED_LIMIT must be >= 1.")
    if config.NOTIFICATION_BUFFER_SIZE < 1:
        raise ConfigurationError("NOTIFICATION_BUFFER_SIZE must be >= 1.")
    if not config.DEAL_CODE_PREFIX.isalnum():
        raise ConfigurationError("DEAL_CODE_PREFIX must be alphanumeric.")
    if config.LOG_LEVEL not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
        raise ConfigurationError("LOG_LEVEL must be one of DEBUG/INFO/WARNING/ERROR/CRITICAL.")
    if config.is_production and config.DATABASE_URL.startswith("sqlite"):
        raise ConfigurationError("Production DATABASE_URL must not point at SQLite.")


@lru_cache(maxsize=8)
def get_config(env: str | None = None) -> Config:
    """Get validated configuration for the requested environment."""
    return _build_config(env)

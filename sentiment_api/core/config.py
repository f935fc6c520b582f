"""Configuration for the sentiment API.

All settings come from environment variables, optionally seeded from a
``.env`` file in the working directory. Variables already set in the
environment always win over the file.
"""

import logging
import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

from sentiment_api.domain.constants import DEFAULT_DB_PATH, DEFAULT_SESSION_TTL_DAYS
from sentiment_api.domain.exceptions import ConfigError

# Environment variable names
ENV_DB_PATH = "SENTIMENT_DB_PATH"
ENV_SESSION_TTL_DAYS = "SESSION_TTL_DAYS"
ENV_SESSION_COOKIE_SECURE = "SESSION_COOKIE_SECURE"
ENV_PRICE_PROVIDER = "PRICE_PROVIDER"
ENV_LOG_LEVEL = "LOG_LEVEL"

PRICE_PROVIDERS = ("yfinance", "mock")

_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off"}


@dataclass(frozen=True)
class Settings:
    """Resolved runtime settings."""

    db_path: Path
    session_ttl_days: int
    session_cookie_secure: bool
    price_provider: str
    log_level: str


def get_db_path() -> Path:
    """Get the SQLite database path from environment (default data/sentiment.db)."""
    return Path(os.environ.get(ENV_DB_PATH, "") or DEFAULT_DB_PATH)


def get_session_ttl_days() -> int:
    """Get session lifetime in days from environment (default 7).

    Raises:
        ConfigError: if the value is not a positive integer
    """
    raw = os.environ.get(ENV_SESSION_TTL_DAYS, "")
    if not raw:
        return DEFAULT_SESSION_TTL_DAYS
    try:
        days = int(raw)
    except ValueError:
        raise ConfigError(
            f"{ENV_SESSION_TTL_DAYS} must be an integer, got {raw!r}",
            variable=ENV_SESSION_TTL_DAYS,
        ) from None
    if days < 1:
        raise ConfigError(
            f"{ENV_SESSION_TTL_DAYS} must be at least 1, got {days}",
            variable=ENV_SESSION_TTL_DAYS,
        )
    return days


def get_session_cookie_secure() -> bool:
    """Whether the session cookie is marked Secure (default false for local dev)."""
    raw = os.environ.get(ENV_SESSION_COOKIE_SECURE, "").strip().lower()
    if not raw:
        return False
    if raw in _TRUE_VALUES:
        return True
    if raw in _FALSE_VALUES:
        return False
    raise ConfigError(
        f"{ENV_SESSION_COOKIE_SECURE} must be true or false, got {raw!r}",
        variable=ENV_SESSION_COOKIE_SECURE,
    )


def get_price_provider() -> str:
    """Get the price provider name: 'yfinance' (default) or 'mock'."""
    provider = os.environ.get(ENV_PRICE_PROVIDER, "").strip().lower() or "yfinance"
    if provider not in PRICE_PROVIDERS:
        raise ConfigError(
            f"{ENV_PRICE_PROVIDER} must be one of {PRICE_PROVIDERS}, got {provider!r}",
            variable=ENV_PRICE_PROVIDER,
        )
    return provider


def get_log_level() -> str:
    """Get the log level name from environment (default INFO)."""
    return os.environ.get(ENV_LOG_LEVEL, "").strip().upper() or "INFO"


def load_settings() -> Settings:
    """Read .env (if present) and resolve all settings from the environment."""
    load_dotenv(override=False)
    return Settings(
        db_path=get_db_path(),
        session_ttl_days=get_session_ttl_days(),
        session_cookie_secure=get_session_cookie_secure(),
        price_provider=get_price_provider(),
        log_level=get_log_level(),
    )


def configure_logging(level: str = "INFO") -> None:
    """Configure root logging once for the process."""
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

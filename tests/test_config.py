"""Tests for sentiment_api.core.config module."""

from pathlib import Path
from unittest.mock import patch

import pytest

from sentiment_api.core.config import (
    get_db_path,
    get_log_level,
    get_price_provider,
    get_session_cookie_secure,
    get_session_ttl_days,
    load_settings,
)
from sentiment_api.domain.exceptions import ConfigError


class TestDefaults:
    """With no environment variables set every getter has a default."""

    def test_db_path(self) -> None:
        assert get_db_path() == Path("data/sentiment.db")

    def test_session_ttl(self) -> None:
        assert get_session_ttl_days() == 7

    def test_cookie_secure(self) -> None:
        assert get_session_cookie_secure() is False

    def test_price_provider(self) -> None:
        assert get_price_provider() == "yfinance"

    def test_log_level(self) -> None:
        assert get_log_level() == "INFO"


class TestOverrides:
    def test_db_path(self, monkeypatch) -> None:
        monkeypatch.setenv("SENTIMENT_DB_PATH", "/tmp/other.db")
        assert get_db_path() == Path("/tmp/other.db")

    def test_session_ttl(self, monkeypatch) -> None:
        monkeypatch.setenv("SESSION_TTL_DAYS", "30")
        assert get_session_ttl_days() == 30

    @pytest.mark.parametrize("raw", ["true", "1", "YES", "on"])
    def test_cookie_secure_true(self, monkeypatch, raw) -> None:
        monkeypatch.setenv("SESSION_COOKIE_SECURE", raw)
        assert get_session_cookie_secure() is True

    def test_price_provider_case_insensitive(self, monkeypatch) -> None:
        monkeypatch.setenv("PRICE_PROVIDER", "Mock")
        assert get_price_provider() == "mock"

    def test_log_level_uppercased(self, monkeypatch) -> None:
        monkeypatch.setenv("LOG_LEVEL", "debug")
        assert get_log_level() == "DEBUG"


class TestInvalidValues:
    """Unusable values raise ConfigError naming the variable."""

    @pytest.mark.parametrize("raw", ["abc", "0", "-3"])
    def test_session_ttl(self, monkeypatch, raw) -> None:
        monkeypatch.setenv("SESSION_TTL_DAYS", raw)
        with pytest.raises(ConfigError) as exc_info:
            get_session_ttl_days()
        assert exc_info.value.variable == "SESSION_TTL_DAYS"

    def test_cookie_secure(self, monkeypatch) -> None:
        monkeypatch.setenv("SESSION_COOKIE_SECURE", "maybe")
        with pytest.raises(ConfigError) as exc_info:
            get_session_cookie_secure()
        assert exc_info.value.variable == "SESSION_COOKIE_SECURE"

    def test_price_provider(self, monkeypatch) -> None:
        monkeypatch.setenv("PRICE_PROVIDER", "bloomberg")
        with pytest.raises(ConfigError):
            get_price_provider()


def test_load_settings_reads_environment(monkeypatch) -> None:
    monkeypatch.setenv("SENTIMENT_DB_PATH", "/tmp/x.db")
    monkeypatch.setenv("PRICE_PROVIDER", "mock")
    monkeypatch.setenv("SESSION_TTL_DAYS", "2")

    with patch("sentiment_api.core.config.load_dotenv") as mock_load:
        settings = load_settings()

    mock_load.assert_called_once_with(override=False)
    assert settings.db_path == Path("/tmp/x.db")
    assert settings.price_provider == "mock"
    assert settings.session_ttl_days == 2
    assert settings.session_cookie_secure is False

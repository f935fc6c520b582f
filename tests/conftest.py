"""Pytest configuration and fixtures for all tests.

This module ensures tests run in isolation from production environment
variables and never touch the real database or market-data provider.
"""

import os
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from sentiment_api.core.config import Settings
from sentiment_api.core.prices import MockQuoteProvider, PriceService
from sentiment_api.main import app
from sentiment_api.routes.dependencies import get_database, get_price_service, get_settings
from sentiment_api.storage import Database

# Environment variables that should not affect tests
APP_ENV_VARS = [
    "SENTIMENT_DB_PATH",
    "SESSION_TTL_DAYS",
    "SESSION_COOKIE_SECURE",
    "PRICE_PROVIDER",
    "LOG_LEVEL",
]

TEST_PASSWORD = "correct-horse-battery"


@pytest.fixture(autouse=True)
def isolate_from_env():
    """Clear app env vars before each test so a developer's .env never leaks in.

    Saves original values, clears them for the test, then restores after.
    """
    original_values = {}
    for var in APP_ENV_VARS:
        if var in os.environ:
            original_values[var] = os.environ.pop(var)

    yield

    for var in APP_ENV_VARS:
        os.environ.pop(var, None)
    for var, value in original_values.items():
        os.environ[var] = value


@pytest.fixture()
def db_path(tmp_path) -> Path:
    return tmp_path / "db" / "test.db"


@pytest.fixture()
def database(db_path):
    """Fresh SQLite database in a temp directory."""
    db = Database(db_path)
    yield db
    db.close()


@pytest.fixture()
def settings(db_path) -> Settings:
    return Settings(
        db_path=db_path,
        session_ttl_days=7,
        session_cookie_secure=False,
        price_provider="mock",
        log_level="INFO",
    )


@pytest.fixture()
def price_service() -> PriceService:
    return PriceService(MockQuoteProvider())


@pytest.fixture()
def client(database, settings, price_service):
    """TestClient with database, settings and price service overridden."""
    app.dependency_overrides[get_database] = lambda: database
    app.dependency_overrides[get_settings] = lambda: settings
    app.dependency_overrides[get_price_service] = lambda: price_service
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture()
def auth_client(client):
    """TestClient logged in as a freshly signed-up user (cookie kept by the client)."""
    response = client.post(
        "/auth/signup",
        json={"email": "ada@example.com", "name": "Ada", "password": TEST_PASSWORD},
    )
    assert response.status_code == 201
    return client

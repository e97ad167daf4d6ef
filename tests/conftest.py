# tests/conftest.py
from collections.abc import Generator
from unittest.mock import patch

import pytest
from fastapi.testclient import TestClient

import megastock.api.dependencies as _deps
from megastock.core.config import Settings, get_settings
from megastock.main import app


@pytest.fixture
def test_settings() -> Settings:
    return Settings(
        api_keys={"test-key-admin": "admin", "test-key-viewer": "viewer"},
        storage_backend="memory",
        remote_store_enabled=False,
    )


@pytest.fixture
def client(test_settings: Settings) -> Generator[TestClient, None, None]:
    # Reset the product-store singleton so each test starts from the seed catalog
    # with an empty in-memory storage backend.
    _deps._product_store = None
    app.dependency_overrides[get_settings] = lambda: test_settings
    try:
        with patch("megastock.core.config.get_settings", return_value=test_settings), TestClient(
            app
        ) as c:
            yield c
    finally:
        app.dependency_overrides.clear()
        _deps._product_store = None


@pytest.fixture
def admin_headers() -> dict:
    return {"X-API-Key": "test-key-admin"}


@pytest.fixture
def viewer_headers() -> dict:
    return {"X-API-Key": "test-key-viewer"}

"""Shared pytest fixtures for dbi_manager tests.

Fixtures are organized into categories:
- Environment isolation
- Credentials and handles
- Registries

Usage:
    # In any test file, fixtures are automatically available:
    def test_example(registry, mock_handle):
        registry.add_source(name="default", handle=mock_handle)
"""

from __future__ import annotations

from collections.abc import Iterator
from unittest.mock import AsyncMock, MagicMock

import pytest

from dbi_manager.config.secrets import DatabaseCredentials, clear_credentials_cache
from dbi_manager.config.settings import get_settings
from dbi_manager.registry import SourceRegistry

DB_ENV_VARS = ("DB_HOST", "DB_PORT", "DB_NAME", "DB_DATABASE", "DB_USER", "DB_PASSWORD")


# =============================================================================
# Environment Isolation
# =============================================================================


@pytest.fixture
def clean_db_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Remove DB_* variables so env credentials are never picked up."""
    for var in DB_ENV_VARS:
        monkeypatch.delenv(var, raising=False)


@pytest.fixture
def db_env(monkeypatch: pytest.MonkeyPatch) -> dict[str, str]:
    """Set a complete set of DB_* variables."""
    values = {
        "DB_HOST": "db.local",
        "DB_PORT": "6543",
        "DB_NAME": "app",
        "DB_USER": "app_user",
        "DB_PASSWORD": "hunter2",
    }
    monkeypatch.delenv("DB_DATABASE", raising=False)
    for key, value in values.items():
        monkeypatch.setenv(key, value)
    return values


@pytest.fixture(autouse=True)
def _reset_caches() -> Iterator[None]:
    """Clear cached credentials and settings around every test."""
    clear_credentials_cache()
    get_settings.cache_clear()
    yield
    clear_credentials_cache()
    get_settings.cache_clear()


# =============================================================================
# Credentials and Handles
# =============================================================================


@pytest.fixture
def credentials() -> DatabaseCredentials:
    """Sample database credentials."""
    return DatabaseCredentials(
        host="localhost",
        port=5432,
        database="testdb",
        username="user",
        password="pass",
    )


@pytest.fixture
def mock_handle() -> MagicMock:
    """An opaque connection handle."""
    handle = MagicMock(name="handle")
    handle.close = AsyncMock()
    return handle


# =============================================================================
# Registries
# =============================================================================


@pytest.fixture
def registry() -> SourceRegistry:
    """An empty registry."""
    return SourceRegistry()

"""Unit tests for database dependency wiring.

Tests the lazily created engine and adapter shared by resolution calls.
"""

import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncEngine

from infrastructure.database.adapter import DialectAdapter
from infrastructure.database.dependencies import (
    close_database_connections,
    get_adapter,
    get_engine,
)
from infrastructure.settings import Dialect, get_database_settings


@pytest_asyncio.fixture(autouse=True)
async def sqlite_database(monkeypatch, tmp_path):
    """Point the shared engine at a throwaway SQLite file."""
    monkeypatch.setenv("BRIDGE_DB_DIALECT", "sqlite")
    monkeypatch.setenv("BRIDGE_DB_SQLITE_PATH", str(tmp_path / "bridge.db"))
    get_database_settings.cache_clear()
    yield
    await close_database_connections()
    get_database_settings.cache_clear()


@pytest.mark.asyncio
async def test_get_engine():
    """Test that get_engine returns an aiosqlite AsyncEngine."""
    engine = get_engine()

    assert isinstance(engine, AsyncEngine)
    assert engine.url.drivername == "sqlite+aiosqlite"


@pytest.mark.asyncio
async def test_engine_and_adapter_are_singletons():
    """Test that engine and adapter are cached and reused."""
    assert get_engine() is get_engine()
    assert get_adapter() is get_adapter()


@pytest.mark.asyncio
async def test_adapter_matches_configured_dialect():
    """Test that the adapter renders for the configured store."""
    adapter = get_adapter()

    assert isinstance(adapter, DialectAdapter)
    assert adapter.dialect is Dialect.SQLITE


@pytest.mark.asyncio
async def test_close_database_connections_allows_reinitialization():
    """Test that closing resets the shared instances."""
    engine_before = get_engine()
    adapter_before = get_adapter()

    await close_database_connections()

    assert get_engine() is not engine_before
    assert get_adapter() is not adapter_before


@pytest.mark.asyncio
async def test_close_database_connections_without_engine():
    """Test that closing before first use is a no-op."""
    await close_database_connections()
    await close_database_connections()

"""Integration test fixtures for database tests.

These fixtures run against a real SQLite database file through aiosqlite,
using the engine exactly as create_engine_for builds it,
with the same schema the dashboard migrations create. No external
services are needed.
"""

from collections.abc import AsyncGenerator

import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncEngine

from infrastructure.database import SqlQuery
from infrastructure.database.adapter import DialectAdapter
from infrastructure.database.engines import create_engine_for
from infrastructure.settings import DatabaseSettings, Dialect
from registry.application.services import GroupResolutionService
from registry.dependencies import get_group_resolution_service

SCHEMA = (
    """
    CREATE TABLE agencies (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        name TEXT NOT NULL,
        role TEXT DEFAULT 'agency',
        is_active INTEGER NOT NULL DEFAULT 1,
        agency_code TEXT
    )
    """,
    """
    CREATE TABLE groups (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        agency_id INTEGER NOT NULL REFERENCES agencies (id),
        whatsapp_group_id TEXT NOT NULL UNIQUE,
        name TEXT NOT NULL,
        is_active INTEGER NOT NULL DEFAULT 1
    )
    """,
)


def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line(
        "markers",
        "integration: mark test as integration test (requires database)",
    )


@pytest.fixture
def integration_db_settings(tmp_path) -> DatabaseSettings:
    """Database settings pointing at a fresh SQLite file."""
    return DatabaseSettings(
        dialect=Dialect.SQLITE,
        sqlite_path=str(tmp_path / "bridge.db"),
    )


@pytest_asyncio.fixture
async def sqlite_engine(
    integration_db_settings: DatabaseSettings,
) -> AsyncGenerator[AsyncEngine, None]:
    """Provide an engine with the registry schema created."""
    engine = create_engine_for(integration_db_settings)

    async with engine.begin() as conn:
        for statement in SCHEMA:
            await conn.exec_driver_sql(statement)

    yield engine

    await engine.dispose()


@pytest.fixture
def adapter(sqlite_engine: AsyncEngine) -> DialectAdapter:
    """Provide a dialect adapter over the test database."""
    return DialectAdapter(sqlite_engine)


@pytest.fixture
def insert_agency(adapter: DialectAdapter):
    """Provide a helper that inserts an agency row and returns its id."""
    query = SqlQuery(
        "INSERT INTO agencies (name, role, is_active, agency_code) VALUES (?, ?, ?, ?)",
        returning="id",
    )

    async def _insert(
        name: str,
        role: str = "agency",
        is_active: bool = True,
        agency_code: str | None = None,
    ) -> int:
        return await adapter.insert(
            query,
            (name, role, 1 if is_active else 0, agency_code),
            operation="insert_test_agency",
        )

    return _insert


@pytest.fixture
def group_service(adapter: DialectAdapter) -> GroupResolutionService:
    """Provide the fully wired service with no override configured."""
    return get_group_resolution_service(adapter, override_provider=lambda: None)

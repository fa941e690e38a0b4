"""Unit test fixtures with mocked dependencies."""

import asyncio
from unittest.mock import AsyncMock, MagicMock

import pytest

from infrastructure.database.exceptions import DuplicateKeyError
from registry.domain.aggregates import Group


@pytest.fixture
def mock_db_settings():
    """Provide test PostgreSQL database settings."""
    from infrastructure.settings import DatabaseSettings, Dialect

    return DatabaseSettings(
        dialect=Dialect.POSTGRES,
        host="testhost",
        port=5432,
        database="testdb",
        username="testuser",
        password="testpass",
    )


@pytest.fixture
def mock_engine():
    """Provide a mocked AsyncEngine whose begin() yields a mocked connection.

    Returns the engine and the connection; tests configure
    ``conn.exec_driver_sql`` with a return value or side effect.
    """
    conn = MagicMock()
    conn.exec_driver_sql = AsyncMock()

    ctx_manager = AsyncMock()
    ctx_manager.__aenter__ = AsyncMock(return_value=conn)
    ctx_manager.__aexit__ = AsyncMock(return_value=None)

    engine = MagicMock()
    engine.begin = MagicMock(return_value=ctx_manager)
    engine.dialect.name = "sqlite"
    return engine, conn


class InMemoryGroupRepository:
    """Group repository double backed by a dict.

    Enforces external_id uniqueness like the real store does. With
    ``hold_lookups=n`` the first n lookups block until all n have arrived,
    which forces concurrent callers to miss before any of them inserts.
    """

    def __init__(self, hold_lookups: int = 0):
        self.rows: dict[int, Group] = {}
        self.insert_count = 0
        self._next_id = 1
        self._hold = hold_lookups
        self._arrived = 0
        self._released = asyncio.Event()

    async def find_by_external_id(self, external_id: str) -> Group | None:
        if self._arrived < self._hold:
            self._arrived += 1
            if self._arrived == self._hold:
                self._released.set()
            await self._released.wait()
        for group in self.rows.values():
            if group.external_id == external_id:
                return group
        return None

    async def create(
        self, agency_id: int, external_id: str, name: str, is_active: bool = True
    ) -> int:
        if any(group.external_id == external_id for group in self.rows.values()):
            raise DuplicateKeyError("duplicate key", operation="create_group")
        group_id = self._next_id
        self._next_id += 1
        self.rows[group_id] = Group(
            id=group_id,
            agency_id=agency_id,
            external_id=external_id,
            name=name,
            is_active=is_active,
        )
        self.insert_count += 1
        return group_id

    async def find_by_id(self, group_id: int) -> Group | None:
        return self.rows.get(group_id)

    async def get_agency_id(self, group_id: int) -> int | None:
        group = self.rows.get(group_id)
        return None if group is None else group.agency_id


@pytest.fixture
def in_memory_groups():
    """Provide an empty in-memory group repository."""
    return InMemoryGroupRepository()


@pytest.fixture
def make_in_memory_groups():
    """Provide a factory for in-memory group repositories."""
    return InMemoryGroupRepository

"""Unit tests for GroupRepository.

Tests verify repository behavior with a mocked dialect adapter.
"""

import pytest
from unittest.mock import AsyncMock, MagicMock

from infrastructure.database.exceptions import (
    ConstraintViolationError,
    DuplicateKeyError,
)
from infrastructure.settings import Dialect
from registry.domain.aggregates import Group
from registry.infrastructure.group_repository import (
    FIND_BY_EXTERNAL_ID,
    INSERT_GROUP,
    GroupRepository,
)
from registry.ports.repositories import IGroupRepository


@pytest.fixture
def mock_adapter():
    """Create mock dialect adapter for SQLite."""
    adapter = MagicMock()
    adapter.dialect = Dialect.SQLITE
    adapter.fetch_one = AsyncMock(return_value=None)
    adapter.fetch_all = AsyncMock(return_value=[])
    adapter.insert = AsyncMock()
    return adapter


@pytest.fixture
def mock_probe():
    """Create mock repository probe."""
    probe = MagicMock()
    return probe


@pytest.fixture
def repository(mock_adapter, mock_probe):
    """Create repository with mock dependencies."""
    return GroupRepository(adapter=mock_adapter, probe=mock_probe)


def _row(**overrides):
    row = {
        "id": 5,
        "agency_id": 3,
        "whatsapp_group_id": "120363@g.us",
        "name": "Ops",
        "is_active": 1,
    }
    row.update(overrides)
    return row


class TestProtocolCompliance:
    """Tests for protocol compliance."""

    def test_implements_protocol(self, repository):
        """Repository should implement IGroupRepository protocol."""
        assert isinstance(repository, IGroupRepository)


class TestFindByExternalId:
    """Tests for find_by_external_id method."""

    @pytest.mark.asyncio
    async def test_returns_group_when_found(self, repository, mock_adapter, mock_probe):
        """Should map the stored row to a Group."""
        mock_adapter.fetch_one.return_value = _row()

        result = await repository.find_by_external_id("120363@g.us")

        assert result == Group(
            id=5, agency_id=3, external_id="120363@g.us", name="Ops", is_active=True
        )
        mock_adapter.fetch_one.assert_called_once_with(
            FIND_BY_EXTERNAL_ID,
            ("120363@g.us",),
            operation="find_group_by_external_id",
        )
        mock_probe.group_retrieved.assert_called_once_with(5, "120363@g.us")

    @pytest.mark.asyncio
    async def test_returns_none_when_not_found(self, repository, mock_probe):
        """Should return None when the external id is unknown."""
        result = await repository.find_by_external_id("unknown@g.us")

        assert result is None
        mock_probe.group_not_found.assert_called_once_with(key="unknown@g.us")

    @pytest.mark.asyncio
    async def test_returns_inactive_groups(self, repository, mock_adapter):
        """Inactive groups still count as registered."""
        mock_adapter.fetch_one.return_value = _row(is_active=0)

        result = await repository.find_by_external_id("120363@g.us")

        assert result is not None
        assert result.is_active is False


class TestCreate:
    """Tests for create method."""

    @pytest.mark.asyncio
    async def test_returns_generated_id(self, repository, mock_adapter, mock_probe):
        """Should insert and return the store-generated id."""
        mock_adapter.insert.return_value = 11

        group_id = await repository.create(3, "120363@g.us", "Ops")

        assert group_id == 11
        mock_adapter.insert.assert_called_once_with(
            INSERT_GROUP,
            (3, "120363@g.us", "Ops", 1),
            operation="create_group",
        )
        mock_probe.group_created.assert_called_once_with(11, "120363@g.us", 3)

    @pytest.mark.asyncio
    async def test_binds_boolean_for_postgres(self, repository, mock_adapter):
        """PostgreSQL receives a real boolean for is_active."""
        mock_adapter.dialect = Dialect.POSTGRES
        mock_adapter.insert.return_value = 11

        await repository.create(3, "120363@g.us", "Ops", is_active=False)

        params = mock_adapter.insert.call_args[0][1]
        assert params[3] is False

    @pytest.mark.asyncio
    async def test_duplicate_external_id_propagates(
        self, repository, mock_adapter, mock_probe
    ):
        """Duplicate keys are reported and re-raised for the caller to recover."""
        mock_adapter.insert.side_effect = DuplicateKeyError(
            "duplicate key", operation="create_group"
        )

        with pytest.raises(DuplicateKeyError):
            await repository.create(3, "120363@g.us", "Ops")

        mock_probe.duplicate_external_id.assert_called_once_with("120363@g.us")
        mock_probe.group_created.assert_not_called()

    @pytest.mark.asyncio
    async def test_unknown_agency_propagates(self, repository, mock_adapter, mock_probe):
        """A missing owner agency is not mistaken for a duplicate."""
        mock_adapter.insert.side_effect = ConstraintViolationError(
            "foreign key", operation="create_group"
        )

        with pytest.raises(ConstraintViolationError):
            await repository.create(999, "120363@g.us", "Ops")

        mock_probe.duplicate_external_id.assert_not_called()


class TestFindById:
    """Tests for find_by_id method."""

    @pytest.mark.asyncio
    async def test_returns_group_when_found(self, repository, mock_adapter):
        """Should return the group with the given internal id."""
        mock_adapter.fetch_one.return_value = _row(id=11)

        result = await repository.find_by_id(11)

        assert result is not None
        assert result.id == 11

    @pytest.mark.asyncio
    async def test_returns_none_when_not_found(self, repository, mock_probe):
        """Should return None when the id is unknown."""
        assert await repository.find_by_id(11) is None
        mock_probe.group_not_found.assert_called_once_with(key="11")


class TestGetAgencyId:
    """Tests for get_agency_id method."""

    @pytest.mark.asyncio
    async def test_returns_owner(self, repository, mock_adapter):
        """Should return the owning agency id."""
        mock_adapter.fetch_one.return_value = {"agency_id": 3}

        assert await repository.get_agency_id(5) == 3

    @pytest.mark.asyncio
    async def test_returns_none_for_unknown_group(self, repository):
        """Unknown group ids have no owner."""
        assert await repository.get_agency_id(404) is None

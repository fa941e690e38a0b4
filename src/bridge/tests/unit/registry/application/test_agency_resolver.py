"""Unit tests for AgencyResolver.

Covers each tier of default-agency resolution and the order in which
they are tried.
"""

from unittest.mock import AsyncMock, MagicMock, create_autospec

import pytest

from registry.application.services.agency_resolver import AgencyResolver
from registry.domain.aggregates import Agency
from registry.domain.value_objects import AgencyRole, ResolutionSource
from registry.ports.exceptions import NoTenantAvailableError
from registry.ports.repositories import IAgencyRepository


@pytest.fixture
def mock_agency_repository():
    """Create mock agency repository with an empty store."""
    repo = create_autospec(IAgencyRepository, instance=True)
    repo.list_active_non_operator = AsyncMock(return_value=[])
    repo.first_active = AsyncMock(return_value=None)
    return repo


@pytest.fixture
def mock_probe():
    """Create mock resolver probe."""
    return MagicMock()


@pytest.fixture
def resolver(mock_agency_repository, mock_probe):
    """Create AgencyResolver with mock dependencies."""
    return AgencyResolver(agency_repository=mock_agency_repository, probe=mock_probe)


class TestOverride:
    """Tests for the operator override tier."""

    @pytest.mark.asyncio
    async def test_override_wins_without_queries(
        self, resolver, mock_agency_repository, mock_probe
    ):
        """An override is used verbatim and no agency is read."""
        mock_agency_repository.list_active_non_operator.return_value = [
            Agency(id=3, name="A")
        ]

        resolution = await resolver.resolve(override_agency_id=42)

        assert resolution.agency_id == 42
        assert resolution.source is ResolutionSource.OVERRIDE
        assert resolution.candidate_count == 0
        mock_agency_repository.list_active_non_operator.assert_not_called()
        mock_probe.override_used.assert_called_once_with(42)


class TestNonOperatorAgencies:
    """Tests for tiers that consider non-operator agencies."""

    @pytest.mark.asyncio
    async def test_single_active_agency(
        self, resolver, mock_agency_repository, mock_probe
    ):
        """A lone agency is chosen without ambiguity."""
        mock_agency_repository.list_active_non_operator.return_value = [
            Agency(id=3, name="A")
        ]

        resolution = await resolver.resolve()

        assert resolution.agency_id == 3
        assert resolution.source is ResolutionSource.SINGLE_ACTIVE_AGENCY
        assert resolution.candidate_count == 1
        assert resolution.is_ambiguous is False
        mock_probe.single_agency_detected.assert_called_once_with(3, "A")
        mock_agency_repository.first_active.assert_not_called()

    @pytest.mark.asyncio
    async def test_multiple_agencies_pick_lowest_id(
        self, resolver, mock_agency_repository, mock_probe
    ):
        """Several candidates resolve to the lowest id and are flagged."""
        mock_agency_repository.list_active_non_operator.return_value = [
            Agency(id=7, name="B"),
            Agency(id=3, name="A"),
        ]

        resolution = await resolver.resolve()

        assert resolution.agency_id == 3
        assert resolution.source is ResolutionSource.FIRST_OF_MULTIPLE
        assert resolution.candidate_count == 2
        assert resolution.is_ambiguous is True
        mock_probe.ambiguous_default_agency.assert_called_once_with(
            3, "A", candidate_count=2
        )
        mock_agency_repository.first_active.assert_not_called()


class TestFallback:
    """Tests for the last-resort tiers."""

    @pytest.mark.asyncio
    async def test_falls_back_to_operator_agency(
        self, resolver, mock_agency_repository, mock_probe
    ):
        """With only operator agencies left, the lowest-id active one owns the group."""
        mock_agency_repository.first_active.return_value = Agency(
            id=1, name="Platform", role=AgencyRole.SUPER_ADMIN
        )

        resolution = await resolver.resolve()

        assert resolution.agency_id == 1
        assert resolution.source is ResolutionSource.ANY_ACTIVE_AGENCY
        mock_probe.fell_back_to_any_active.assert_called_once_with(1, "super_admin")

    @pytest.mark.asyncio
    async def test_no_agency_raises(self, resolver, mock_probe):
        """An empty store is a configuration error."""
        with pytest.raises(NoTenantAvailableError, match="BRIDGE_DEFAULT_AGENCY_ID"):
            await resolver.resolve()

        mock_probe.no_agency_available.assert_called_once()

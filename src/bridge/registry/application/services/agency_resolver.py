"""Default-agency resolution for implicitly created groups.

When a group is first observed without an explicit owner, the owning agency
is chosen by the first tier that applies:

1. the operator override, used verbatim;
2. the only active non-operator agency;
3. the lowest-id active non-operator agency, flagged as ambiguous;
4. the lowest-id active agency of any role, operators included;
5. otherwise NoTenantAvailableError.
"""

from __future__ import annotations

from registry.application.observability import (
    AgencyResolverProbe,
    DefaultAgencyResolverProbe,
)
from registry.domain.value_objects import AgencyResolution, ResolutionSource
from registry.ports.exceptions import NoTenantAvailableError
from registry.ports.repositories import IAgencyRepository


class AgencyResolver:
    """Chooses the owning agency for a new group.

    Performs no writes. Tiers are evaluated lazily: each costs at most one
    read and later tiers are skipped once one yields an agency.
    """

    def __init__(
        self,
        agency_repository: IAgencyRepository,
        probe: AgencyResolverProbe | None = None,
    ):
        """Initialize AgencyResolver with dependencies.

        Args:
            agency_repository: Read access to agencies
            probe: Optional domain probe for observability
        """
        self._agency_repository = agency_repository
        self._probe = probe or DefaultAgencyResolverProbe()

    async def resolve(self, override_agency_id: int | None = None) -> AgencyResolution:
        """Choose the agency that will own a new group.

        Args:
            override_agency_id: Operator-configured owner. Not checked for
                existence; a bad id fails later as a foreign-key violation.

        Returns:
            The chosen agency and the tier that chose it

        Raises:
            NoTenantAvailableError: If no active agency exists
        """
        if override_agency_id is not None:
            self._probe.override_used(override_agency_id)
            return AgencyResolution(
                agency_id=override_agency_id,
                source=ResolutionSource.OVERRIDE,
            )

        candidates = await self._agency_repository.list_active_non_operator()

        if len(candidates) == 1:
            agency = candidates[0]
            self._probe.single_agency_detected(agency.id, agency.name)
            return AgencyResolution(
                agency_id=agency.id,
                source=ResolutionSource.SINGLE_ACTIVE_AGENCY,
                candidate_count=1,
            )

        if candidates:
            agency = min(candidates, key=lambda candidate: candidate.id)
            self._probe.ambiguous_default_agency(
                agency.id, agency.name, candidate_count=len(candidates)
            )
            return AgencyResolution(
                agency_id=agency.id,
                source=ResolutionSource.FIRST_OF_MULTIPLE,
                candidate_count=len(candidates),
            )

        # Operators may own groups, but only when nothing else exists
        fallback = await self._agency_repository.first_active()
        if fallback is not None:
            self._probe.fell_back_to_any_active(fallback.id, fallback.role.value)
            return AgencyResolution(
                agency_id=fallback.id,
                source=ResolutionSource.ANY_ACTIVE_AGENCY,
                candidate_count=1,
            )

        self._probe.no_agency_available()
        raise NoTenantAvailableError(
            "No active agency exists to own new groups; create an agency "
            "or set BRIDGE_DEFAULT_AGENCY_ID"
        )

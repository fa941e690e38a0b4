"""Dialect-neutral implementation of IAgencyRepository.

Agencies are created and maintained by the dashboard; the bridge only
reads them, to decide who owns a newly observed group.
"""

from __future__ import annotations

from typing import Any

from infrastructure.database import DialectAdapter, SqlQuery
from registry.domain.aggregates import Agency
from registry.domain.value_objects import AgencyCode, AgencyRole
from registry.infrastructure.observability import (
    AgencyRepositoryProbe,
    DefaultAgencyRepositoryProbe,
)
from registry.ports.repositories import IAgencyRepository

_AGENCY_COLUMNS = "id, name, role, is_active, agency_code"

LIST_ACTIVE_NON_OPERATOR = SqlQuery(
    f"SELECT {_AGENCY_COLUMNS} FROM agencies "
    f"WHERE is_active = {{true}} AND role != '{AgencyRole.SUPER_ADMIN.value}' "
    "ORDER BY id ASC"
)

FIRST_ACTIVE = SqlQuery(
    f"SELECT {_AGENCY_COLUMNS} FROM agencies "
    "WHERE is_active = {true} ORDER BY id ASC LIMIT 1"
)

FIND_ACTIVE_BY_CODE = SqlQuery(
    f"SELECT {_AGENCY_COLUMNS} FROM agencies "
    "WHERE UPPER(TRIM(agency_code)) = ? AND is_active = {true} "
    "ORDER BY id ASC LIMIT 1"
)


class AgencyRepository(IAgencyRepository):
    """Repository reading agencies through the DialectAdapter."""

    def __init__(
        self,
        adapter: DialectAdapter,
        probe: AgencyRepositoryProbe | None = None,
    ) -> None:
        """Initialize repository with a dialect adapter.

        Args:
            adapter: Query executor for the configured store
            probe: Optional domain probe for observability
        """
        self._adapter = adapter
        self._probe = probe or DefaultAgencyRepositoryProbe()

    async def list_active_non_operator(self) -> list[Agency]:
        """List active agencies that are not platform operators, lowest id first."""
        rows = await self._adapter.fetch_all(
            LIST_ACTIVE_NON_OPERATOR,
            operation="list_active_non_operator_agencies",
        )
        agencies = [self._to_agency(row) for row in rows]
        self._probe.agencies_listed(len(agencies), include_operators=False)
        return agencies

    async def first_active(self) -> Agency | None:
        """Return the lowest-id active agency of any role, or None."""
        row = await self._adapter.fetch_one(
            FIRST_ACTIVE,
            operation="first_active_agency",
        )
        self._probe.agencies_listed(0 if row is None else 1, include_operators=True)
        return None if row is None else self._to_agency(row)

    async def find_active_by_code(self, code: AgencyCode) -> Agency | None:
        """Return the active agency registered under ``code``, or None."""
        row = await self._adapter.fetch_one(
            FIND_ACTIVE_BY_CODE,
            (code.value,),
            operation="find_active_agency_by_code",
        )
        if row is None:
            self._probe.agency_code_not_found(code.value)
            return None
        return self._to_agency(row)

    @staticmethod
    def _to_agency(row: dict[str, Any]) -> Agency:
        return Agency(
            id=int(row["id"]),
            name=row["name"],
            role=AgencyRole(row["role"] or AgencyRole.AGENCY.value),
            is_active=bool(row["is_active"]),
            agency_code=row.get("agency_code"),
        )

"""Dialect-neutral implementation of IGroupRepository.

Groups are stored in the ``groups`` table, keyed externally by
``whatsapp_group_id`` (unique) and internally by a generated ``id``.
The schema itself is owned by migrations outside this package.
"""

from __future__ import annotations

from typing import Any

from infrastructure.database import (
    DialectAdapter,
    DuplicateKeyError,
    SqlQuery,
    bool_param,
)
from registry.domain.aggregates import Group
from registry.infrastructure.observability import (
    DefaultGroupRepositoryProbe,
    GroupRepositoryProbe,
)
from registry.ports.repositories import IGroupRepository

_GROUP_COLUMNS = "g.id, g.agency_id, g.whatsapp_group_id, g.name, g.is_active"

FIND_BY_EXTERNAL_ID = SqlQuery(
    f"SELECT {_GROUP_COLUMNS} FROM groups g WHERE g.whatsapp_group_id = ? LIMIT 1"
)

FIND_BY_ID = SqlQuery(f"SELECT {_GROUP_COLUMNS} FROM groups g WHERE g.id = ? LIMIT 1")

INSERT_GROUP = SqlQuery(
    "INSERT INTO groups (agency_id, whatsapp_group_id, name, is_active) "
    "VALUES (?, ?, ?, ?)",
    returning="id",
)

GET_AGENCY_ID = SqlQuery("SELECT agency_id FROM groups WHERE id = ? LIMIT 1")


class GroupRepository(IGroupRepository):
    """Repository reading and writing groups through the DialectAdapter.

    Every method is a single statement. No method retries; duplicate-key
    recovery belongs to the caller.
    """

    def __init__(
        self,
        adapter: DialectAdapter,
        probe: GroupRepositoryProbe | None = None,
    ) -> None:
        """Initialize repository with a dialect adapter.

        Args:
            adapter: Query executor for the configured store
            probe: Optional domain probe for observability
        """
        self._adapter = adapter
        self._probe = probe or DefaultGroupRepositoryProbe()

    async def find_by_external_id(self, external_id: str) -> Group | None:
        """Fetch a group by its external identifier, active or not.

        Args:
            external_id: Identifier assigned by the messaging platform

        Returns:
            The Group, or None if not found
        """
        row = await self._adapter.fetch_one(
            FIND_BY_EXTERNAL_ID,
            (external_id,),
            operation="find_group_by_external_id",
        )
        if row is None:
            self._probe.group_not_found(key=external_id)
            return None

        group = self._to_group(row)
        self._probe.group_retrieved(group.id, group.external_id)
        return group

    async def create(
        self,
        agency_id: int,
        external_id: str,
        name: str,
        is_active: bool = True,
    ) -> int:
        """Insert a new group and return its generated id.

        Raises:
            DuplicateKeyError: If external_id is already registered
            ConstraintViolationError: If agency_id does not exist
        """
        try:
            group_id = await self._adapter.insert(
                INSERT_GROUP,
                (
                    agency_id,
                    external_id,
                    name,
                    bool_param(self._adapter.dialect, is_active),
                ),
                operation="create_group",
            )
        except DuplicateKeyError:
            self._probe.duplicate_external_id(external_id)
            raise

        self._probe.group_created(group_id, external_id, agency_id)
        return group_id

    async def find_by_id(self, group_id: int) -> Group | None:
        """Fetch a group by its internal id.

        Args:
            group_id: Store-generated internal id

        Returns:
            The Group, or None if not found
        """
        row = await self._adapter.fetch_one(
            FIND_BY_ID,
            (group_id,),
            operation="find_group_by_id",
        )
        if row is None:
            self._probe.group_not_found(key=str(group_id))
            return None

        group = self._to_group(row)
        self._probe.group_retrieved(group.id, group.external_id)
        return group

    async def get_agency_id(self, group_id: int) -> int | None:
        """Return the owning agency of a group, or None if not found."""
        row = await self._adapter.fetch_one(
            GET_AGENCY_ID,
            (group_id,),
            operation="get_group_agency_id",
        )
        if row is None:
            return None
        return int(row["agency_id"])

    @staticmethod
    def _to_group(row: dict[str, Any]) -> Group:
        # SQLite hands booleans back as 0/1
        return Group(
            id=int(row["id"]),
            agency_id=int(row["agency_id"]),
            external_id=row["whatsapp_group_id"],
            name=row["name"],
            is_active=bool(row["is_active"]),
        )

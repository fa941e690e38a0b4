"""Repository protocols (ports) for the group registry context.

Repository protocols define the interface for reading and writing groups
and for the read-only agency queries used by default-agency resolution.
Implementations run dialect-neutral SQL through the DialectAdapter.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from registry.domain.aggregates import Agency, Group
from registry.domain.value_objects import AgencyCode


@runtime_checkable
class IGroupRepository(Protocol):
    """Repository for Group persistence.

    Performs no business logic beyond persistence. The uniqueness of
    external_id is enforced by the store, not by this interface.
    """

    async def find_by_external_id(self, external_id: str) -> Group | None:
        """Retrieve a group by its external identifier.

        Args:
            external_id: Identifier assigned by the messaging platform

        Returns:
            The Group, active or not, or None if it has never been registered
        """
        ...

    async def create(
        self,
        agency_id: int,
        external_id: str,
        name: str,
        is_active: bool = True,
    ) -> int:
        """Insert a new group row.

        Args:
            agency_id: Owning agency
            external_id: Identifier assigned by the messaging platform
            name: Display name
            is_active: Whether the group starts active

        Returns:
            The store-generated internal id

        Raises:
            DuplicateKeyError: If external_id is already registered
            ConstraintViolationError: If agency_id does not exist
        """
        ...

    async def find_by_id(self, group_id: int) -> Group | None:
        """Retrieve a group by its internal id.

        Args:
            group_id: Store-generated internal id

        Returns:
            The Group, or None if not found
        """
        ...

    async def get_agency_id(self, group_id: int) -> int | None:
        """Return the owning agency of a group, or None if not found."""
        ...


@runtime_checkable
class IAgencyRepository(Protocol):
    """Read-only queries over agencies.

    Each method is a single read so that default-agency resolution can stop
    at the first tier that yields an answer.
    """

    async def list_active_non_operator(self) -> list[Agency]:
        """List active agencies whose role is not super_admin, lowest id first."""
        ...

    async def first_active(self) -> Agency | None:
        """Return the lowest-id active agency of any role, or None."""
        ...

    async def find_active_by_code(self, code: AgencyCode) -> Agency | None:
        """Return the active agency registered under ``code``, or None."""
        ...

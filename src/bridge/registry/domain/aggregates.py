"""Aggregates for the group registry context."""

from __future__ import annotations

from dataclasses import dataclass

from registry.domain.value_objects import DEFAULT_GROUP_NAME, AgencyRole


@dataclass(frozen=True)
class Group:
    """A chat group known to the bridge.

    Groups are keyed externally by the identifier the messaging platform
    assigns them, and internally by a store-generated id.

    Business rules:
    - external_id is globally unique and never changes
    - agency_id is set once, at creation, and never revisited here
    - a group without a display name gets DEFAULT_GROUP_NAME
    """

    id: int
    agency_id: int
    external_id: str
    name: str = DEFAULT_GROUP_NAME
    is_active: bool = True

    @staticmethod
    def display_name_or_default(name: str | None) -> str:
        """Return ``name`` trimmed, or the placeholder when it is blank."""
        if name is None or not name.strip():
            return DEFAULT_GROUP_NAME
        return name.strip()


@dataclass(frozen=True)
class Agency:
    """An agency (tenant) that owns groups and their traffic.

    Agencies are maintained outside the bridge; this is a read-only view.
    """

    id: int
    name: str
    role: AgencyRole = AgencyRole.AGENCY
    is_active: bool = True
    agency_code: str | None = None

    @property
    def is_operator(self) -> bool:
        """True for platform-operator agencies."""
        return self.role is AgencyRole.SUPER_ADMIN

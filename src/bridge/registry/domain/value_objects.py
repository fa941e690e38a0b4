"""Value objects for the group registry domain.

Value objects are immutable descriptors that provide type safety and
domain semantics for domain concepts.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum

DEFAULT_GROUP_NAME = "Unnamed Group"

MIN_AGENCY_CODE_LENGTH = 4


class AgencyRole(StrEnum):
    """Roles an agency can hold.

    SUPER_ADMIN agencies are platform operators, not message-receiving
    businesses, and are skipped when choosing an owner automatically.
    """

    AGENCY = "agency"
    SUPER_ADMIN = "super_admin"


class ResolutionSource(StrEnum):
    """Which tier of the default-agency policy produced an owner."""

    OVERRIDE = "override"
    SINGLE_ACTIVE_AGENCY = "single_active_agency"
    FIRST_OF_MULTIPLE = "first_of_multiple"
    ANY_ACTIVE_AGENCY = "any_active_agency"


@dataclass(frozen=True)
class AgencyResolution:
    """Outcome of default-agency resolution.

    Attributes:
        agency_id: The agency that will own the new group
        source: The policy tier that chose it
        candidate_count: How many agencies the deciding tier considered
            (zero for an override, which performs no query)
    """

    agency_id: int
    source: ResolutionSource
    candidate_count: int = 0

    @property
    def is_ambiguous(self) -> bool:
        """True when the owner was picked from several equally valid agencies."""
        return self.source is ResolutionSource.FIRST_OF_MULTIPLE


@dataclass(frozen=True)
class AgencyCode:
    """Normalised agency registration code.

    Codes are matched case-insensitively and ignoring surrounding
    whitespace, so they are stored here trimmed and upper-cased.
    """

    value: str

    def __str__(self) -> str:
        """Return string representation."""
        return self.value

    @classmethod
    def parse(cls, raw: str | None) -> AgencyCode:
        """Normalise a user-supplied code.

        Args:
            raw: Code as typed in the chat

        Returns:
            AgencyCode instance

        Raises:
            ValueError: If the code is shorter than MIN_AGENCY_CODE_LENGTH
        """
        normalized = (raw or "").strip().upper()
        if len(normalized) < MIN_AGENCY_CODE_LENGTH:
            raise ValueError(
                f"Agency code must be at least {MIN_AGENCY_CODE_LENGTH} characters"
            )
        return cls(value=normalized)

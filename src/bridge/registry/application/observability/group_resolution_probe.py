"""Protocol for group resolution service observability.

Defines the interface for domain probes that capture application-level
domain events for the resolve-or-register use case.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol

import structlog

if TYPE_CHECKING:
    from infrastructure.observability.context import ObservationContext


class GroupResolutionProbe(Protocol):
    """Domain probe for group resolution operations."""

    def existing_group_resolved(
        self, external_id: str, group_id: int, agency_id: int
    ) -> None:
        """Record that an already-registered group was returned."""
        ...

    def explicit_agency_ignored(
        self, external_id: str, agency_id: int, explicit_agency_id: int
    ) -> None:
        """Record that an explicit owner was ignored for an existing group."""
        ...

    def group_registered(
        self, external_id: str, group_id: int, agency_id: int, source: str
    ) -> None:
        """Record that a new group was registered."""
        ...

    def registration_race_recovered(self, external_id: str, group_id: int) -> None:
        """Record that a concurrent creator won and its row was returned."""
        ...

    def no_agency_available(self, external_id: str) -> None:
        """Record that a group could not be registered for lack of an agency."""
        ...

    def creation_inconsistency(self, external_id: str, group_id: int | None) -> None:
        """Record that a created group could not be read back."""
        ...

    def store_unavailable(
        self,
        operation: str,
        external_id: str | None,
        error: str,
        group_id: int | None = None,
    ) -> None:
        """Record that the store failed while resolving a group."""
        ...

    def invalid_override(self, external_id: str, error: str) -> None:
        """Record that the default agency override could not be read."""
        ...

    def inactive_group_seen(self, external_id: str, group_id: int) -> None:
        """Record that traffic arrived for a deactivated group."""
        ...

    def agency_code_rejected(self, external_id: str, reason: str) -> None:
        """Record that an agency registration code was not accepted."""
        ...

    def with_context(self, context: ObservationContext) -> GroupResolutionProbe:
        """Return a copy of this probe that tags every event with ``context``."""
        ...


class DefaultGroupResolutionProbe:
    """Default implementation of GroupResolutionProbe using structlog."""

    def __init__(
        self,
        logger: structlog.stdlib.BoundLogger | None = None,
        context: ObservationContext | None = None,
    ):
        self._logger = logger or structlog.get_logger()
        self._context = context

    def _get_context_kwargs(self) -> dict[str, Any]:
        """Context fields to merge into an event, empty when unbound."""
        if self._context is None:
            return {}
        return self._context.as_dict()

    def with_context(self, context: ObservationContext) -> DefaultGroupResolutionProbe:
        """Return a copy of this probe that tags every event with ``context``."""
        return DefaultGroupResolutionProbe(logger=self._logger, context=context)

    def existing_group_resolved(
        self, external_id: str, group_id: int, agency_id: int
    ) -> None:
        """Record that an already-registered group was returned."""
        self._logger.debug(
            "existing_group_resolved",
            external_id=external_id,
            group_id=group_id,
            agency_id=agency_id,
            **self._get_context_kwargs(),
        )

    def explicit_agency_ignored(
        self, external_id: str, agency_id: int, explicit_agency_id: int
    ) -> None:
        """Record that an explicit owner was ignored for an existing group."""
        self._logger.info(
            "explicit_agency_ignored",
            external_id=external_id,
            agency_id=agency_id,
            explicit_agency_id=explicit_agency_id,
            **self._get_context_kwargs(),
        )

    def group_registered(
        self, external_id: str, group_id: int, agency_id: int, source: str
    ) -> None:
        """Record that a new group was registered."""
        self._logger.info(
            "group_registered",
            external_id=external_id,
            group_id=group_id,
            agency_id=agency_id,
            source=source,
            **self._get_context_kwargs(),
        )

    def registration_race_recovered(self, external_id: str, group_id: int) -> None:
        """Record that a concurrent creator won and its row was returned."""
        self._logger.info(
            "registration_race_recovered",
            external_id=external_id,
            group_id=group_id,
            **self._get_context_kwargs(),
        )

    def no_agency_available(self, external_id: str) -> None:
        """Record that a group could not be registered for lack of an agency."""
        self._logger.error(
            "group_registration_no_agency",
            external_id=external_id,
            **self._get_context_kwargs(),
        )

    def creation_inconsistency(self, external_id: str, group_id: int | None) -> None:
        """Record that a created group could not be read back."""
        self._logger.error(
            "group_creation_inconsistency",
            external_id=external_id,
            group_id=group_id,
            **self._get_context_kwargs(),
        )

    def store_unavailable(
        self,
        operation: str,
        external_id: str | None,
        error: str,
        group_id: int | None = None,
    ) -> None:
        """Record that the store failed while resolving a group."""
        self._logger.error(
            "group_resolution_store_unavailable",
            operation=operation,
            external_id=external_id,
            group_id=group_id,
            error=error,
            **self._get_context_kwargs(),
        )

    def invalid_override(self, external_id: str, error: str) -> None:
        """Record that the default agency override could not be read."""
        self._logger.error(
            "default_agency_override_invalid",
            external_id=external_id,
            error=error,
            hint="BRIDGE_DEFAULT_AGENCY_ID must be unset or a positive integer",
            **self._get_context_kwargs(),
        )

    def inactive_group_seen(self, external_id: str, group_id: int) -> None:
        """Record that traffic arrived for a deactivated group."""
        self._logger.warning(
            "inactive_group_seen",
            external_id=external_id,
            group_id=group_id,
            hint="Re-activate the group in the dashboard to process its messages",
            **self._get_context_kwargs(),
        )

    def agency_code_rejected(self, external_id: str, reason: str) -> None:
        """Record that an agency registration code was not accepted."""
        self._logger.info(
            "agency_code_rejected",
            external_id=external_id,
            reason=reason,
            **self._get_context_kwargs(),
        )

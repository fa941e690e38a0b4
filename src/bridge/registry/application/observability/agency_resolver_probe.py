"""Protocol for default-agency resolution observability.

Each tier of the default-agency policy emits its own event so operators
can tell from the logs which rule assigned an owner to a new group.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol

import structlog

if TYPE_CHECKING:
    from infrastructure.observability.context import ObservationContext


class AgencyResolverProbe(Protocol):
    """Domain probe for default-agency resolution."""

    def override_used(self, agency_id: int) -> None:
        """Record that the configured override chose the agency."""
        ...

    def single_agency_detected(self, agency_id: int, name: str) -> None:
        """Record that the only active agency was chosen."""
        ...

    def ambiguous_default_agency(
        self, agency_id: int, name: str, candidate_count: int
    ) -> None:
        """Record that the lowest-id agency was picked among several."""
        ...

    def fell_back_to_any_active(self, agency_id: int, role: str) -> None:
        """Record that an agency of any role, operators included, was chosen."""
        ...

    def no_agency_available(self) -> None:
        """Record that no active agency exists at all."""
        ...

    def with_context(self, context: ObservationContext) -> AgencyResolverProbe:
        """Return a copy of this probe that tags every event with ``context``."""
        ...


class DefaultAgencyResolverProbe:
    """Default implementation of AgencyResolverProbe using structlog."""

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

    def with_context(self, context: ObservationContext) -> DefaultAgencyResolverProbe:
        """Return a copy of this probe that tags every event with ``context``."""
        return DefaultAgencyResolverProbe(logger=self._logger, context=context)

    def override_used(self, agency_id: int) -> None:
        """Record that the configured override chose the agency."""
        self._logger.debug(
            "default_agency_override_used",
            agency_id=agency_id,
            **self._get_context_kwargs(),
        )

    def single_agency_detected(self, agency_id: int, name: str) -> None:
        """Record that the only active agency was chosen."""
        self._logger.info(
            "single_agency_detected",
            agency_id=agency_id,
            name=name,
            **self._get_context_kwargs(),
        )

    def ambiguous_default_agency(
        self, agency_id: int, name: str, candidate_count: int
    ) -> None:
        """Record that the lowest-id agency was picked among several."""
        self._logger.warning(
            "ambiguous_default_agency",
            agency_id=agency_id,
            name=name,
            candidate_count=candidate_count,
            hint="Set BRIDGE_DEFAULT_AGENCY_ID to choose the owning agency",
            **self._get_context_kwargs(),
        )

    def fell_back_to_any_active(self, agency_id: int, role: str) -> None:
        """Record that an agency of any role, operators included, was chosen."""
        self._logger.warning(
            "default_agency_fell_back_to_any_active",
            agency_id=agency_id,
            role=role,
            **self._get_context_kwargs(),
        )

    def no_agency_available(self) -> None:
        """Record that no active agency exists at all."""
        self._logger.error(
            "no_agency_available",
            **self._get_context_kwargs(),
        )

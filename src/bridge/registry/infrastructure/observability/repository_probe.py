"""Domain probe for registry repository operations.

Following Domain-Oriented Observability patterns, this probe captures
domain-significant events related to group and agency repository operations.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol

import structlog

if TYPE_CHECKING:
    from infrastructure.observability.context import ObservationContext


class GroupRepositoryProbe(Protocol):
    """Domain probe for group repository operations.

    Records domain events during group persistence operations.
    """

    def group_retrieved(self, group_id: int, external_id: str) -> None:
        """Record that a group was retrieved."""
        ...

    def group_not_found(self, key: str) -> None:
        """Record that a group was not found by external or internal id."""
        ...

    def group_created(self, group_id: int, external_id: str, agency_id: int) -> None:
        """Record that a group row was inserted."""
        ...

    def duplicate_external_id(self, external_id: str) -> None:
        """Record that an insert collided with an existing external id."""
        ...

    def with_context(self, context: ObservationContext) -> GroupRepositoryProbe:
        """Return a copy of this probe that tags every event with ``context``."""
        ...


class DefaultGroupRepositoryProbe:
    """Default implementation of GroupRepositoryProbe using structlog."""

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

    def with_context(self, context: ObservationContext) -> DefaultGroupRepositoryProbe:
        """Return a copy of this probe that tags every event with ``context``."""
        return DefaultGroupRepositoryProbe(logger=self._logger, context=context)

    def group_retrieved(self, group_id: int, external_id: str) -> None:
        """Record that a group was retrieved."""
        self._logger.debug(
            "group_retrieved",
            group_id=group_id,
            external_id=external_id,
            **self._get_context_kwargs(),
        )

    def group_not_found(self, key: str) -> None:
        """Record that a group was not found by external or internal id."""
        self._logger.debug(
            "group_not_found",
            key=key,
            **self._get_context_kwargs(),
        )

    def group_created(self, group_id: int, external_id: str, agency_id: int) -> None:
        """Record that a group row was inserted."""
        self._logger.info(
            "group_created",
            group_id=group_id,
            external_id=external_id,
            agency_id=agency_id,
            **self._get_context_kwargs(),
        )

    def duplicate_external_id(self, external_id: str) -> None:
        """Record that an insert collided with an existing external id."""
        self._logger.info(
            "duplicate_external_id",
            external_id=external_id,
            **self._get_context_kwargs(),
        )


class AgencyRepositoryProbe(Protocol):
    """Domain probe for agency repository operations."""

    def agencies_listed(self, count: int, include_operators: bool) -> None:
        """Record that active agencies were listed."""
        ...

    def agency_code_not_found(self, code: str) -> None:
        """Record that no active agency matched a registration code."""
        ...

    def with_context(self, context: ObservationContext) -> AgencyRepositoryProbe:
        """Return a copy of this probe that tags every event with ``context``."""
        ...


class DefaultAgencyRepositoryProbe:
    """Default implementation of AgencyRepositoryProbe using structlog."""

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

    def with_context(self, context: ObservationContext) -> DefaultAgencyRepositoryProbe:
        """Return a copy of this probe that tags every event with ``context``."""
        return DefaultAgencyRepositoryProbe(logger=self._logger, context=context)

    def agencies_listed(self, count: int, include_operators: bool) -> None:
        """Record that active agencies were listed."""
        self._logger.debug(
            "agencies_listed",
            count=count,
            include_operators=include_operators,
            **self._get_context_kwargs(),
        )

    def agency_code_not_found(self, code: str) -> None:
        """Record that no active agency matched a registration code."""
        self._logger.debug(
            "agency_code_not_found",
            code=code,
            **self._get_context_kwargs(),
        )

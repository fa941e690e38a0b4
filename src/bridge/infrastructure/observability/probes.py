"""Probes for the shared database layer.

The adapter and the engine wiring report store events here instead of
calling a logger directly.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol

import structlog

if TYPE_CHECKING:
    from infrastructure.observability.context import ObservationContext


class ConnectionProbe(Protocol):
    """Domain probe for relational store observability.

    This probe captures domain-significant events related to the store
    connection without exposing logging implementation details.
    """

    def engine_created(self, dialect: str, target: str) -> None:
        """Record that a database engine was created."""
        ...

    def store_unavailable(self, operation: str, error: Exception) -> None:
        """Record that a store call failed at I/O level."""
        ...

    def duplicate_key(self, operation: str) -> None:
        """Record that an insert collided with a unique key."""
        ...

    def pool_closed(self) -> None:
        """Record that the engine was disposed."""
        ...

    def with_context(self, context: ObservationContext) -> ConnectionProbe:
        """Return a copy of this probe that tags every event with ``context``."""
        ...


class DefaultConnectionProbe:
    """ConnectionProbe that writes structlog events.

    Events carry the bound ObservationContext, if any, so store failures
    can be traced back to the chat event that triggered them.
    """

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

    def with_context(self, context: ObservationContext) -> DefaultConnectionProbe:
        """Return a copy of this probe that tags every event with ``context``."""
        return DefaultConnectionProbe(logger=self._logger, context=context)

    def engine_created(self, dialect: str, target: str) -> None:
        """Record that a database engine was created."""
        self._logger.info(
            "database_engine_created",
            dialect=dialect,
            target=target,
            **self._get_context_kwargs(),
        )

    def store_unavailable(self, operation: str, error: Exception) -> None:
        """Record that a store call failed at I/O level."""
        self._logger.error(
            "database_store_unavailable",
            operation=operation,
            error=str(error),
            error_type=type(error).__name__,
            **self._get_context_kwargs(),
        )

    def duplicate_key(self, operation: str) -> None:
        """Record that an insert collided with a unique key."""
        self._logger.info(
            "database_duplicate_key",
            operation=operation,
            **self._get_context_kwargs(),
        )

    def pool_closed(self) -> None:
        """Record that the engine was disposed."""
        self._logger.info(
            "database_pool_closed",
            **self._get_context_kwargs(),
        )

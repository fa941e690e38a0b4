"""Uniform query execution over the supported relational stores.

The adapter runs ``SqlQuery`` templates with positional parameters against
an async SQLAlchemy engine, using the driver's native placeholder syntax,
and returns rows as plain ``dict`` mappings whatever the backend.
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
from typing import Any, TypeVar

from sqlalchemy.engine import CursorResult
from sqlalchemy.exc import (
    DBAPIError,
    IntegrityError,
    InterfaceError,
    OperationalError,
)
from sqlalchemy.ext.asyncio import AsyncEngine

from infrastructure.database.dialect import SqlQuery
from infrastructure.database.exceptions import (
    ConstraintViolationError,
    DatabaseError,
    DuplicateKeyError,
    StoreUnavailableError,
)
from infrastructure.observability.probes import (
    ConnectionProbe,
    DefaultConnectionProbe,
)
from infrastructure.settings import Dialect

T = TypeVar("T")

Row = dict[str, Any]

_UNIQUE_VIOLATION_SQLSTATE = "23505"

_ENGINE_DIALECTS = {
    "postgresql": Dialect.POSTGRES,
    "sqlite": Dialect.SQLITE,
}


def _is_unique_violation(error: IntegrityError) -> bool:
    """Tell a unique-key collision apart from other integrity failures."""
    orig = error.orig
    code = getattr(orig, "sqlstate", None) or getattr(orig, "pgcode", None)
    if code == _UNIQUE_VIOLATION_SQLSTATE:
        return True
    message = str(orig).lower()
    return "unique constraint failed" in message or "duplicate key value" in message


class DialectAdapter:
    """Executes dialect-neutral queries against a PostgreSQL or SQLite engine.

    Every call checks out its own connection and runs in its own short
    transaction, so no connection is held between calls.
    """

    def __init__(
        self,
        engine: AsyncEngine,
        dialect: Dialect | None = None,
        probe: ConnectionProbe | None = None,
    ):
        """Initialize the adapter.

        Args:
            engine: Async engine for the target store
            dialect: Store variant; inferred from the engine when omitted
            probe: Optional observability probe

        Raises:
            ValueError: If the engine's dialect is not supported
        """
        self._engine = engine
        self._probe = probe or DefaultConnectionProbe()
        if dialect is None:
            try:
                dialect = _ENGINE_DIALECTS[engine.dialect.name]
            except KeyError:
                raise ValueError(
                    f"Unsupported database dialect: {engine.dialect.name}"
                ) from None
        self._dialect = dialect

    @property
    def dialect(self) -> Dialect:
        """The store variant this adapter renders queries for."""
        return self._dialect

    async def fetch_all(
        self,
        query: SqlQuery,
        params: Sequence[Any] = (),
        *,
        operation: str,
    ) -> list[Row]:
        """Run a query and return every row as a column-name mapping."""
        return await self._run(
            query,
            params,
            operation,
            lambda result: [dict(row) for row in result.mappings().all()],
        )

    async def fetch_one(
        self,
        query: SqlQuery,
        params: Sequence[Any] = (),
        *,
        operation: str,
    ) -> Row | None:
        """Run a query and return its first row, or None if it returned nothing."""
        rows = await self.fetch_all(query, params, operation=operation)
        return rows[0] if rows else None

    async def insert(
        self,
        query: SqlQuery,
        params: Sequence[Any],
        *,
        operation: str,
    ) -> int:
        """Run an INSERT and return the generated key.

        Raises:
            ValueError: If ``query`` does not declare a ``returning`` column
            DuplicateKeyError: If the row collides with a unique key
            ConstraintViolationError: For any other integrity violation
            StoreUnavailableError: If the store cannot be reached
        """
        if query.returning is None:
            raise ValueError("insert() requires a query with a returning column")
        return await self._run(query, params, operation, self._generated_key)

    def _generated_key(self, result: CursorResult) -> int:
        if self._dialect is Dialect.POSTGRES:
            return int(result.scalar_one())
        return int(result.lastrowid)

    async def _run(
        self,
        query: SqlQuery,
        params: Sequence[Any],
        operation: str,
        consume: Callable[[CursorResult], T],
    ) -> T:
        if len(params) != query.param_count:
            raise ValueError(
                f"{operation}: expected {query.param_count} parameters, "
                f"got {len(params)}"
            )
        sql = query.render(self._dialect)

        try:
            async with self._engine.begin() as conn:
                result = await conn.exec_driver_sql(sql, tuple(params))
                return consume(result)

        except IntegrityError as e:
            if _is_unique_violation(e):
                self._probe.duplicate_key(operation=operation)
                raise DuplicateKeyError(
                    f"{operation}: duplicate key", operation=operation
                ) from e
            raise ConstraintViolationError(
                f"{operation}: constraint violation: {e.orig}", operation=operation
            ) from e

        except (OperationalError, InterfaceError, OSError, TimeoutError) as e:
            self._probe.store_unavailable(operation=operation, error=e)
            raise StoreUnavailableError(
                f"{operation}: store unavailable: {e}", operation=operation
            ) from e

        except DBAPIError as e:
            if e.connection_invalidated:
                self._probe.store_unavailable(operation=operation, error=e)
                raise StoreUnavailableError(
                    f"{operation}: connection lost: {e}", operation=operation
                ) from e
            raise DatabaseError(f"{operation}: {e}", operation=operation) from e

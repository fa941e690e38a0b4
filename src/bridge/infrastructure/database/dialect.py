"""Dialect-keyed SQL query builder.

Queries are authored once, with ``?`` marking each positional parameter and
``{true}`` / ``{false}`` marking boolean literals. ``SqlQuery.render`` turns
the template into the text a given store understands:

    postgres:  ``$1, $2, ...`` placeholders, ``true`` / ``false`` literals
    sqlite:    ``?`` placeholders, ``1`` / ``0`` literals

Templates must not contain ``?`` anywhere except as a placeholder.
"""

from __future__ import annotations

from dataclasses import dataclass
from functools import lru_cache

from infrastructure.settings import Dialect

__all__ = ["SqlQuery", "bool_param"]

_BOOLEAN_LITERALS: dict[Dialect, tuple[str, str]] = {
    Dialect.POSTGRES: ("true", "false"),
    Dialect.SQLITE: ("1", "0"),
}


@dataclass(frozen=True)
class SqlQuery:
    """A dialect-neutral SQL statement.

    Attributes:
        template: Statement text using ``?`` placeholders and ``{true}`` /
            ``{false}`` boolean tokens.
        returning: For INSERT statements, the generated-key column. Postgres
            renders a ``RETURNING`` clause for it; SQLite reports it through
            the cursor's ``lastrowid``.
    """

    template: str
    returning: str | None = None

    @property
    def param_count(self) -> int:
        """Number of positional parameters the template expects."""
        return self.template.count("?")

    def render(self, dialect: Dialect) -> str:
        """Render the statement for ``dialect``."""
        return _render(self.template, self.returning, dialect)


@lru_cache(maxsize=256)
def _render(template: str, returning: str | None, dialect: Dialect) -> str:
    true_literal, false_literal = _BOOLEAN_LITERALS[dialect]
    sql = template.replace("{true}", true_literal).replace("{false}", false_literal)

    if dialect is Dialect.POSTGRES:
        parts = sql.split("?")
        sql = parts[0] + "".join(
            f"${index}{part}" for index, part in enumerate(parts[1:], start=1)
        )
        if returning is not None:
            sql = f"{sql.rstrip().rstrip(';')} RETURNING {returning}"

    return sql


def bool_param(dialect: Dialect, value: bool) -> bool | int:
    """Bind a boolean parameter in the form ``dialect`` stores it."""
    if dialect is Dialect.SQLITE:
        return 1 if value else 0
    return bool(value)

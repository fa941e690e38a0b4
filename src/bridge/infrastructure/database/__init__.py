"""Database infrastructure - shared connection primitives."""

from infrastructure.database.adapter import DialectAdapter
from infrastructure.database.dialect import SqlQuery, bool_param
from infrastructure.database.exceptions import (
    ConstraintViolationError,
    DatabaseError,
    DuplicateKeyError,
    StoreUnavailableError,
)
from infrastructure.settings import Dialect

__all__ = [
    "ConstraintViolationError",
    "DatabaseError",
    "Dialect",
    "DialectAdapter",
    "DuplicateKeyError",
    "SqlQuery",
    "StoreUnavailableError",
    "bool_param",
]

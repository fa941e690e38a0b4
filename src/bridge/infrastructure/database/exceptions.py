"""Store-level exceptions raised by the dialect adapter.

SQLAlchemy and driver errors are translated into these at the adapter
boundary so callers never depend on backend-specific exception types.
"""


class DatabaseError(Exception):
    """Base exception for store operations."""

    def __init__(self, message: str, operation: str | None = None):
        super().__init__(message)
        self.operation = operation


class StoreUnavailableError(DatabaseError):
    """Raised when the relational store cannot be reached or fails at I/O level.

    Callers should treat this as transient and retry the whole event later.
    """

    pass


class DuplicateKeyError(DatabaseError):
    """Raised when an insert collides with an existing unique key."""

    pass


class ConstraintViolationError(DatabaseError):
    """Raised for integrity violations other than a duplicate key.

    The usual cause is a foreign key pointing at an agency that does not
    exist, e.g. a misconfigured default agency override.
    """

    pass

"""Domain exceptions for the group registry context.

These exceptions represent resolution failures that need operator
attention rather than a retry. Store-level failures (StoreUnavailableError,
DuplicateKeyError) live in infrastructure.database.exceptions.
"""


class GroupResolutionError(Exception):
    """Base class for failures resolving an external group identifier."""

    def __init__(self, message: str, external_id: str | None = None):
        super().__init__(message)
        self.external_id = external_id


class NoTenantAvailableError(GroupResolutionError):
    """Raised when no agency exists to own an implicitly created group.

    This is a configuration problem: an operator must create an agency or
    set BRIDGE_DEFAULT_AGENCY_ID. It is never retried automatically.
    """

    pass


class InvalidOverrideError(GroupResolutionError):
    """Raised when the configured default agency override cannot be read.

    BRIDGE_DEFAULT_AGENCY_ID must be unset or a positive integer. Nothing
    is inserted until an operator corrects it.
    """

    pass


class CreationInconsistencyError(GroupResolutionError):
    """Raised when an insert succeeded but the new row cannot be read back.

    This indicates storage-layer corruption or a backend that silently
    dropped the insert, and is treated as fatal.
    """

    def __init__(
        self,
        message: str,
        external_id: str | None = None,
        group_id: int | None = None,
    ):
        super().__init__(message, external_id=external_id)
        self.group_id = group_id

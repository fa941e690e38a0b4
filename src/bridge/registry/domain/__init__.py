"""Domain layer for the group registry context.

Pure business objects with no knowledge of the store or of logging.
"""

from registry.domain.aggregates import Agency, Group
from registry.domain.value_objects import (
    DEFAULT_GROUP_NAME,
    AgencyCode,
    AgencyResolution,
    AgencyRole,
    ResolutionSource,
)

__all__ = [
    "DEFAULT_GROUP_NAME",
    "Agency",
    "AgencyCode",
    "AgencyResolution",
    "AgencyRole",
    "Group",
    "ResolutionSource",
]

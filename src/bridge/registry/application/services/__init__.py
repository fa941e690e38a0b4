"""Application services for the registry bounded context.

Application services orchestrate domain objects and repositories to
fulfill use cases. They are the "front door" to the registry context.
"""

from registry.application.services.agency_resolver import AgencyResolver
from registry.application.services.group_resolution_service import (
    GroupResolutionService,
)

__all__ = [
    "AgencyResolver",
    "GroupResolutionService",
]

"""Domain-Oriented Observability for the registry application layer.

Probes for application service operations following Domain-Oriented Observability patterns.
"""

from registry.application.observability.agency_resolver_probe import (
    AgencyResolverProbe,
    DefaultAgencyResolverProbe,
)
from registry.application.observability.group_resolution_probe import (
    DefaultGroupResolutionProbe,
    GroupResolutionProbe,
)

__all__ = [
    "AgencyResolverProbe",
    "DefaultAgencyResolverProbe",
    "GroupResolutionProbe",
    "DefaultGroupResolutionProbe",
]

"""Ports for the group registry context."""

from registry.ports.exceptions import (
    CreationInconsistencyError,
    GroupResolutionError,
    InvalidOverrideError,
    NoTenantAvailableError,
)
from registry.ports.repositories import IAgencyRepository, IGroupRepository

__all__ = [
    "CreationInconsistencyError",
    "GroupResolutionError",
    "IAgencyRepository",
    "IGroupRepository",
    "InvalidOverrideError",
    "NoTenantAvailableError",
]

"""Observability for registry infrastructure."""

from registry.infrastructure.observability.repository_probe import (
    AgencyRepositoryProbe,
    DefaultAgencyRepositoryProbe,
    DefaultGroupRepositoryProbe,
    GroupRepositoryProbe,
)

__all__ = [
    "AgencyRepositoryProbe",
    "DefaultAgencyRepositoryProbe",
    "DefaultGroupRepositoryProbe",
    "GroupRepositoryProbe",
]

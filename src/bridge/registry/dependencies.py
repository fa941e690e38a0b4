"""Dependency wiring for the registry bounded context.

Composes infrastructure resources (the dialect adapter, settings) with
registry components (repositories, resolver, service).
"""

from __future__ import annotations

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from infrastructure.database.adapter import DialectAdapter
from infrastructure.database.dependencies import (
    close_database_connections,
    get_adapter,
)
from infrastructure.logging import configure_logging
from infrastructure.settings import get_settings, read_default_agency_id
from registry.application.services import AgencyResolver, GroupResolutionService
from registry.application.services.group_resolution_service import OverrideProvider
from registry.infrastructure.agency_repository import AgencyRepository
from registry.infrastructure.group_repository import GroupRepository


def get_group_resolution_service(
    adapter: DialectAdapter | None = None,
    override_provider: OverrideProvider | None = None,
) -> GroupResolutionService:
    """Build a GroupResolutionService.

    Args:
        adapter: Dialect adapter to use; defaults to the shared one built
            from BRIDGE_DB_* settings
        override_provider: Source of the default agency override; defaults
            to reading BRIDGE_DEFAULT_AGENCY_ID on every attempt

    Returns:
        GroupResolutionService instance
    """
    adapter = adapter or get_adapter()
    agency_repository = AgencyRepository(adapter)

    return GroupResolutionService(
        group_repository=GroupRepository(adapter),
        agency_repository=agency_repository,
        agency_resolver=AgencyResolver(agency_repository),
        override_provider=override_provider or read_default_agency_id,
    )


@asynccontextmanager
async def bridge_lifespan() -> AsyncIterator[GroupResolutionService]:
    """Run the bridge for the lifetime of the messaging client.

    Configures logging, yields a ready GroupResolutionService, and closes
    database connections on exit.

    Usage:
        async with bridge_lifespan() as groups:
            group = await groups.resolve_or_register(chat_id, chat_name)
    """
    configure_logging(debug=get_settings().debug)
    try:
        yield get_group_resolution_service()
    finally:
        await close_database_connections()

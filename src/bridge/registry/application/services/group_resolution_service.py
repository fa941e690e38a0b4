"""Group resolution service for the registry context.

Maps an external chat-group identifier onto its internal Group record,
registering the group the first time it is seen.

The lookup-then-insert sequence is not wrapped in a
transaction. Concurrent first sightings of the same group are reconciled
through the store's unique constraint instead: the loser of the race gets
DuplicateKeyError on insert and re-reads the winner's row.
"""

from __future__ import annotations

from collections.abc import Callable, Iterator
from contextlib import contextmanager

from infrastructure.database.exceptions import DuplicateKeyError, StoreUnavailableError
from registry.application.observability import (
    DefaultGroupResolutionProbe,
    GroupResolutionProbe,
)
from registry.application.services.agency_resolver import AgencyResolver
from registry.domain.aggregates import Group
from registry.domain.value_objects import AgencyCode
from registry.ports.exceptions import (
    CreationInconsistencyError,
    InvalidOverrideError,
    NoTenantAvailableError,
)
from registry.ports.repositories import IAgencyRepository, IGroupRepository

OverrideProvider = Callable[[], int | None]


class GroupResolutionService:
    """Application service for resolving and registering chat groups.

    This is the entry point used by the messaging client for every inbound
    chat event. It is safe to call concurrently for the same external id.

    Error handling:
    - StoreUnavailableError is logged with the external or group id and re-raised
    - DuplicateKeyError is recovered internally with exactly one re-read
    - NoTenantAvailableError, InvalidOverrideError and
      CreationInconsistencyError are surfaced
    """

    def __init__(
        self,
        group_repository: IGroupRepository,
        agency_repository: IAgencyRepository,
        agency_resolver: AgencyResolver,
        override_provider: OverrideProvider | None = None,
        probe: GroupResolutionProbe | None = None,
    ):
        """Initialize GroupResolutionService with dependencies.

        Args:
            group_repository: Repository for group persistence
            agency_repository: Read access to agencies, for code registration
            agency_resolver: Default-agency policy for implicit creation
            override_provider: Returns the operator's default agency override.
                Called once per registration attempt; omitted means no override.
            probe: Optional domain probe for observability
        """
        self._group_repository = group_repository
        self._agency_repository = agency_repository
        self._agency_resolver = agency_resolver
        self._override_provider = override_provider or (lambda: None)
        self._probe = probe or DefaultGroupResolutionProbe()

    async def resolve_or_register(
        self,
        external_id: str,
        name: str | None = None,
        explicit_agency_id: int | None = None,
    ) -> Group:
        """Return the group for ``external_id``, registering it if unseen.

        An existing group is returned unchanged: ownership is fixed at
        creation, so ``explicit_agency_id`` only matters for new groups.

        Args:
            external_id: Identifier assigned by the messaging platform
            name: Display name; the placeholder is used when blank
            explicit_agency_id: Owner to use if the group is new

        Returns:
            The canonical Group record

        Raises:
            NoTenantAvailableError: If the group is new and no agency can own it
            InvalidOverrideError: If BRIDGE_DEFAULT_AGENCY_ID is malformed
            CreationInconsistencyError: If the new row cannot be read back
            StoreUnavailableError: If the store cannot be reached
            ConstraintViolationError: If the chosen agency does not exist
        """
        with self._reporting_store_failures(
            "resolve_or_register", external_id=external_id
        ):
            existing = await self._group_repository.find_by_external_id(external_id)
            if existing is not None:
                self._report_existing(existing, explicit_agency_id)
                return existing

            return await self._register(external_id, name, explicit_agency_id)

    async def tenant_id_for_group(self, group_id: int) -> int | None:
        """Return the agency that owns a group's traffic, or None if unknown."""
        with self._reporting_store_failures("tenant_id_for_group", group_id=group_id):
            return await self._group_repository.get_agency_id(group_id)

    async def get_active_group(self, external_id: str) -> Group | None:
        """Return the group for ``external_id`` only if it is active.

        Never registers anything. A deactivated group is reported so an
        operator can re-enable it from the dashboard.
        """
        with self._reporting_store_failures(
            "get_active_group", external_id=external_id
        ):
            group = await self._group_repository.find_by_external_id(external_id)
        if group is None:
            return None

        if not group.is_active:
            self._probe.inactive_group_seen(external_id, group.id)
            return None

        return group

    async def register_with_agency_code(
        self,
        external_id: str,
        code: str | None,
        name: str | None = None,
    ) -> Group | None:
        """Register a group under the agency that owns a registration code.

        Codes are matched case-insensitively after trimming. If the group
        already exists it is returned unchanged, whatever agency the code
        names.

        Returns:
            The Group, or None if the code is malformed or unknown
        """
        try:
            agency_code = AgencyCode.parse(code)
        except ValueError as e:
            self._probe.agency_code_rejected(external_id, reason=str(e))
            return None

        with self._reporting_store_failures(
            "register_with_agency_code", external_id=external_id
        ):
            agency = await self._agency_repository.find_active_by_code(agency_code)
        if agency is None:
            self._probe.agency_code_rejected(external_id, reason="unknown agency code")
            return None

        return await self.resolve_or_register(
            external_id, name, explicit_agency_id=agency.id
        )

    @contextmanager
    def _reporting_store_failures(
        self,
        operation: str,
        external_id: str | None = None,
        group_id: int | None = None,
    ) -> Iterator[None]:
        """Log a StoreUnavailableError with the ids being served, then re-raise."""
        try:
            yield
        except StoreUnavailableError as e:
            self._probe.store_unavailable(
                operation=e.operation or operation,
                external_id=external_id,
                error=str(e),
                group_id=group_id,
            )
            raise

    def _read_override(self, external_id: str) -> int | None:
        try:
            return self._override_provider()
        except ValueError as e:
            # pydantic's ValidationError is a ValueError
            self._probe.invalid_override(external_id, error=str(e))
            raise InvalidOverrideError(
                "BRIDGE_DEFAULT_AGENCY_ID is not a positive integer",
                external_id=external_id,
            ) from e

    def _report_existing(self, group: Group, explicit_agency_id: int | None) -> None:
        self._probe.existing_group_resolved(group.external_id, group.id, group.agency_id)
        if explicit_agency_id is not None and explicit_agency_id != group.agency_id:
            self._probe.explicit_agency_ignored(
                group.external_id, group.agency_id, explicit_agency_id
            )

    async def _register(
        self,
        external_id: str,
        name: str | None,
        explicit_agency_id: int | None,
    ) -> Group:
        if explicit_agency_id is not None:
            agency_id, source = explicit_agency_id, "explicit"
        else:
            override = self._read_override(external_id)
            try:
                resolution = await self._agency_resolver.resolve(override)
            except NoTenantAvailableError as e:
                self._probe.no_agency_available(external_id)
                raise NoTenantAvailableError(str(e), external_id=external_id) from e
            agency_id, source = resolution.agency_id, resolution.source.value

        try:
            group_id = await self._group_repository.create(
                agency_id,
                external_id,
                Group.display_name_or_default(name),
                is_active=True,
            )
        except DuplicateKeyError:
            return await self._recover_from_race(external_id)

        created = await self._group_repository.find_by_id(group_id)
        if created is None:
            self._probe.creation_inconsistency(external_id, group_id)
            raise CreationInconsistencyError(
                f"Group {group_id} was inserted but could not be read back",
                external_id=external_id,
                group_id=group_id,
            )

        self._probe.group_registered(external_id, created.id, created.agency_id, source)
        return created

    async def _recover_from_race(self, external_id: str) -> Group:
        """Return the row a concurrent creator inserted first."""
        winner = await self._group_repository.find_by_external_id(external_id)
        if winner is None:
            self._probe.creation_inconsistency(external_id, None)
            raise CreationInconsistencyError(
                f"Insert for {external_id!r} hit a duplicate key but no row exists",
                external_id=external_id,
            )

        self._probe.registration_race_recovered(external_id, winner.id)
        return winner

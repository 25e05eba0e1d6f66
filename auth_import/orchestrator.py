"""
Import reconciliation orchestrator.
Runs the forward-only state machine that turns an ImportRequest into a
ResourceDescriptor: local precheck, directory lookup, client classification,
federation pool matching and role resolution.
"""
from __future__ import annotations

import logging
from enum import Enum
from typing import Any, Awaitable, List, Optional

from .builder import build_descriptor
from .classifier import classify
from .errors import (
    AlreadyExistsError,
    AlreadyImportedError,
    DirectoryNotFoundError,
    NoMatchingFederationPoolError,
    ProviderCallError,
    ProviderError,
    ProviderNotFoundError,
    ReconciliationError,
)
from .facade import LocalRegistry, ProviderClientFacade
from .inspector import PrecheckResult, precheck
from .matcher import match
from .models import (
    IMPORTED_SERVICE_TYPE,
    ClassifiedClients,
    DirectoryDetails,
    FederationPoolCandidate,
    ImportRequest,
    MultiFactorConfig,
    ResourceDescriptor,
    RoleBinding,
)
from .parser import Parser
from .roles import resolve_roles

logger = logging.getLogger(__name__)


class ReconciliationState(str, Enum):
    START = "Start"
    PRECHECK = "Precheck"
    DIRECTORY_FETCHED = "DirectoryFetched"
    CLIENTS_CLASSIFIED = "ClientsClassified"
    POOL_MATCHED = "PoolMatched"
    ROLES_RESOLVED = "RolesResolved"
    BUILT = "Built"
    FAILED = "Failed"


_ORDER: List[ReconciliationState] = [
    ReconciliationState.START,
    ReconciliationState.PRECHECK,
    ReconciliationState.DIRECTORY_FETCHED,
    ReconciliationState.CLIENTS_CLASSIFIED,
    ReconciliationState.POOL_MATCHED,
    ReconciliationState.ROLES_RESOLVED,
    ReconciliationState.BUILT,
]

ALREADY_EXISTS_MESSAGE = "Auth has already been added to this project."
ALREADY_EXISTS_HINT = "To update it, run the auth update command instead of importing."
ALREADY_IMPORTED_MESSAGE = "Auth has already been imported to this project and cannot be modified from the CLI."
ALREADY_IMPORTED_HINT = (
    "To modify, remove the imported auth resource to unlink it, then run the import again."
)


class Reconciliation:
    """A single reconciliation attempt.

    Holds the intermediate facts of one attempt; never shared between attempts.
    """

    def __init__(
        self,
        request: ImportRequest,
        facade: ProviderClientFacade,
        registry: LocalRegistry,
        category: str = "auth",
        provenance_key: str = "serviceType",
        imported_marker: str = IMPORTED_SERVICE_TYPE,
        parser: Optional[Parser] = None,
    ):
        self.request = request
        self.facade = facade
        self.registry = registry
        self.category = category
        self.provenance_key = provenance_key
        self.imported_marker = imported_marker
        self.parser = parser or Parser()

        self.state = ReconciliationState.START
        self.history: List[ReconciliationState] = [self.state]

        self.directory: Optional[DirectoryDetails] = None
        self.mfa: Optional[MultiFactorConfig] = None
        self.clients: Optional[ClassifiedClients] = None
        self.pool: Optional[FederationPoolCandidate] = None
        self.roles: Optional[RoleBinding] = None

    def _advance(self, new_state: ReconciliationState):
        if _ORDER.index(new_state) != _ORDER.index(self.state) + 1:
            raise RuntimeError(f"Illegal transition {self.state.value} -> {new_state.value}")
        logger.debug("Import of %s: %s -> %s", self.request.user_directory_id, self.state.value, new_state.value)
        self.state = new_state
        self.history.append(new_state)

    async def run(self) -> ResourceDescriptor:
        try:
            self._precheck()
            await self._fetch_directory()
            await self._classify_clients()
            await self._match_pool()
            await self._resolve_roles()
            descriptor = build_descriptor(self.directory, self.mfa, self.clients, self.pool, self.roles)
            self._advance(ReconciliationState.BUILT)
        except ReconciliationError as exc:
            exc.state = self.state
            logger.warning("Import of %s failed in state %s: %s", self.request.user_directory_id, self.state.value, exc)
            self.state = ReconciliationState.FAILED
            self.history.append(self.state)
            raise

        logger.info(
            "Reconciled user directory %s with federation pool %s",
            descriptor.user_directory_id,
            descriptor.federation_pool_id,
        )
        return descriptor

    def _precheck(self):
        result = precheck(
            self.registry.read(),
            category=self.category,
            provenance_key=self.provenance_key,
            imported_marker=self.imported_marker,
        )
        if result is PrecheckResult.ALREADY_IMPORTED:
            raise AlreadyImportedError(ALREADY_IMPORTED_MESSAGE, hint=ALREADY_IMPORTED_HINT, identifiers=(self.category,))
        if result is PrecheckResult.ALREADY_EXISTS:
            raise AlreadyExistsError(ALREADY_EXISTS_MESSAGE, hint=ALREADY_EXISTS_HINT, identifiers=(self.category,))
        self._advance(ReconciliationState.PRECHECK)

    async def _call_directory(self, operation: Awaitable[Any]) -> Any:
        directory_id = self.request.user_directory_id
        try:
            return await operation
        except ProviderNotFoundError as exc:
            raise DirectoryNotFoundError(
                f"The previously configured user directory ({directory_id}) cannot be found.",
                hint="Make sure the user directory exists in the configured account and region.",
                identifiers=(directory_id,),
            ) from exc
        except ProviderCallError as exc:
            raise ProviderError(
                f"Failed to read user directory '{directory_id}': {exc}",
                identifiers=(directory_id,),
            ) from exc

    async def _fetch_directory(self):
        directory_id = self.request.user_directory_id
        raw = await self._call_directory(self.facade.get_user_directory_details(directory_id))
        self.directory = self.parser.parse_directory(raw)
        if self.directory.id != directory_id:
            raise ProviderError(
                f"Provider returned user directory '{self.directory.id}' for '{directory_id}'.",
                identifiers=(directory_id, self.directory.id),
            )
        self._advance(ReconciliationState.DIRECTORY_FETCHED)

    async def _classify_clients(self):
        directory_id = self.request.user_directory_id
        raw_clients = await self._call_directory(self.facade.list_client_applications(directory_id))
        raw_mfa = await self._call_directory(self.facade.get_multi_factor_config(directory_id))
        self.mfa = self.parser.parse_mfa_config(raw_mfa, fallback=self.directory.multi_factor_mode)
        self.clients = classify(
            self.parser.parse_clients(raw_clients),
            preferred_public=self.request.public_client_id,
            preferred_confidential=self.request.confidential_client_id,
        )
        self._advance(ReconciliationState.CLIENTS_CLASSIFIED)

    async def _match_pool(self):
        try:
            raw_pools = await self.facade.list_federation_pools()
        except ProviderCallError as exc:
            raise ProviderError(f"Failed to list federation pools: {exc}") from exc

        confidential = self.clients.confidential
        pool = match(
            self.parser.parse_pools(raw_pools),
            self.directory.id,
            self.clients.public.client_id,
            confidential.client_id if confidential else None,
        )
        if pool.id != self.request.federation_pool_id:
            raise NoMatchingFederationPoolError(
                f"The federation pool '{self.request.federation_pool_id}' does not have the selected "
                f"user directory configured as identity provider; '{pool.id}' does.",
                hint=f"Import with federation pool '{pool.id}' or reconfigure '{self.request.federation_pool_id}'.",
                identifiers=(self.request.federation_pool_id, pool.id),
            )
        self.pool = pool
        self._advance(ReconciliationState.POOL_MATCHED)

    async def _resolve_roles(self):
        self.roles = await resolve_roles(
            self.facade,
            self.pool.id,
            self.parser,
            allows_unauthenticated=self.pool.allows_unauthenticated,
        )
        self._advance(ReconciliationState.ROLES_RESOLVED)


async def reconcile(
    request: ImportRequest,
    facade: ProviderClientFacade,
    registry: LocalRegistry,
    category: str = "auth",
    provenance_key: str = "serviceType",
    imported_marker: str = IMPORTED_SERVICE_TYPE,
) -> ResourceDescriptor:
    """Reconcile an import request against live provider state."""
    attempt = Reconciliation(
        request,
        facade,
        registry,
        category=category,
        provenance_key=provenance_key,
        imported_marker=imported_marker,
    )
    return await attempt.run()

"""Collaborator contracts the reconciliation engine is given by its caller."""
from __future__ import annotations

from typing import Any, Dict, List, Mapping, Optional, Protocol, runtime_checkable


@runtime_checkable
class ProviderClientFacade(Protocol):
    """Read-only view of the identity provider.

    Every operation returns the provider's raw payload and raises
    ``ProviderNotFoundError`` when the targeted resource does not exist or
    ``ProviderCallError`` for any other upstream fault.
    """

    async def get_user_directory_details(self, directory_id: str) -> Dict[str, Any]:
        ...

    async def list_client_applications(self, directory_id: str) -> List[Dict[str, Any]]:
        ...

    async def get_multi_factor_config(self, directory_id: str) -> Dict[str, Any]:
        ...

    async def list_federation_pools(self) -> List[Dict[str, Any]]:
        ...

    async def get_federation_pool_role_bindings(self, pool_id: str) -> Optional[Dict[str, Any]]:
        ...


@runtime_checkable
class LocalRegistry(Protocol):
    """Snapshot source for the project's local resource registry."""

    def read(self) -> Mapping[str, Any]:
        ...

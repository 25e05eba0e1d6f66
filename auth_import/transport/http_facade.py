"""Provider client facade backed by the provider gateway HTTP API."""
from __future__ import annotations

from typing import Any, Dict, List, Optional
from urllib.parse import quote

from .api_client import ApiClient
from .endpoints import get_provider_endpoints


class HttpProviderFacade:
    """Implements the five read operations the reconciliation engine needs."""

    def __init__(self, client: ApiClient, endpoints: Optional[Dict[str, Any]] = None):
        self.client = client
        self.endpoints = endpoints or get_provider_endpoints()

    async def __aenter__(self):
        await self.client.__aenter__()
        return self

    async def __aexit__(self, exc_type, exc, tb):
        return await self.client.__aexit__(exc_type, exc, tb)

    def _path(self, name: str, kind: str, **ids: str) -> str:
        return self.endpoints[name][kind].format(**{k: quote(v, safe="") for k, v in ids.items()})

    async def _detail(self, name: str, **ids: str) -> Any:
        payload = await self.client.fetch_one(name, self._path(name, "detail", **ids))
        item_key = self.endpoints[name].get("item_key")
        if item_key and isinstance(payload, dict) and item_key in payload:
            return payload[item_key]
        return payload

    async def _list(self, name: str, **ids: str) -> List[Dict[str, Any]]:
        definition = self.endpoints[name]
        return await self.client.fetch_paginated(
            name,
            self._path(name, "list", **ids),
            items_key=definition.get("items_key", "items"),
            supports_pagination=definition.get("supports_pagination", False),
        )

    async def get_user_directory_details(self, directory_id: str) -> Dict[str, Any]:
        return await self._detail("user_directory", directoryId=directory_id)

    async def list_client_applications(self, directory_id: str) -> List[Dict[str, Any]]:
        return await self._list("client_applications", directoryId=directory_id)

    async def get_multi_factor_config(self, directory_id: str) -> Dict[str, Any]:
        return await self._detail("mfa_config", directoryId=directory_id)

    async def list_federation_pools(self) -> List[Dict[str, Any]]:
        return await self._list("federation_pools")

    async def get_federation_pool_role_bindings(self, pool_id: str) -> Optional[Dict[str, Any]]:
        return await self._detail("federation_pool_roles", poolId=pool_id)

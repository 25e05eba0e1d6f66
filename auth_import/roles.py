"""Role binding lookup for a matched federation pool."""
from __future__ import annotations

from typing import Optional

from .errors import (
    NoRoleBindingError,
    PoolNotFoundError,
    ProviderCallError,
    ProviderError,
    ProviderNotFoundError,
)
from .facade import ProviderClientFacade
from .models import RoleBinding
from .parser import Parser


async def resolve_roles(
    facade: ProviderClientFacade,
    pool_id: str,
    parser: Optional[Parser] = None,
    allows_unauthenticated: bool = True,
) -> RoleBinding:
    parser = parser or Parser()
    try:
        raw = await facade.get_federation_pool_role_bindings(pool_id)
    except ProviderNotFoundError as exc:
        raise PoolNotFoundError(
            f"The federation pool '{pool_id}' cannot be found.",
            hint="Make sure the federation pool exists in the configured account and region.",
            identifiers=(pool_id,),
        ) from exc
    except ProviderCallError as exc:
        raise ProviderError(
            f"Failed to read roles of federation pool '{pool_id}': {exc}",
            identifiers=(pool_id,),
        ) from exc

    binding = parser.parse_roles(raw, require_unauthenticated=allows_unauthenticated)
    if binding is None:
        raise NoRoleBindingError(
            f"The federation pool '{pool_id}' has no authenticated or unauthenticated role attached.",
            hint="Attach roles to the federation pool, then run the import again.",
            identifiers=(pool_id,),
        )
    return binding

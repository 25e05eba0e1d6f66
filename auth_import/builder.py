"""Assembly of the final resource descriptor."""
from __future__ import annotations

from typing import Optional

from .models import (
    ClassifiedClients,
    DirectoryDetails,
    FederationPoolCandidate,
    MultiFactorConfig,
    ResourceDescriptor,
    RoleBinding,
)


def build_descriptor(
    directory: Optional[DirectoryDetails],
    mfa: Optional[MultiFactorConfig],
    clients: Optional[ClassifiedClients],
    pool: Optional[FederationPoolCandidate],
    roles: Optional[RoleBinding],
) -> ResourceDescriptor:
    missing = [
        name
        for name, value in (("directory", directory), ("mfa", mfa), ("clients", clients), ("pool", pool), ("roles", roles))
        if value is None
    ]
    if clients is not None and clients.public is None:
        missing.append("clients.public")
    if missing:
        raise ValueError(f"Cannot build descriptor from incomplete state: {', '.join(missing)}")

    return ResourceDescriptor(
        user_directory_id=directory.id,
        user_directory_name=directory.name,
        multi_factor_mode=mfa.mode,
        mfa_types=mfa.mfa_types,
        public_client_id=clients.public.client_id,
        confidential_client_id=clients.confidential.client_id if clients.confidential else None,
        federation_pool_id=pool.id,
        federation_pool_name=pool.name,
        allows_unauthenticated=pool.allows_unauthenticated,
        role_binding=roles,
    )

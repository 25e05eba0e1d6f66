"""Locate the federation pool that trusts a given user directory."""
from __future__ import annotations

from typing import Optional, Sequence

from .errors import AmbiguousFederationPoolError, NoMatchingFederationPoolError
from .models import FederationPoolCandidate


def references(pool: FederationPoolCandidate, directory_id: str, client_ids: Sequence[str]) -> bool:
    # Provider names carry the directory id as their trailing token.
    return any(
        provider.provider_name.endswith(directory_id) and provider.client_id in client_ids
        for provider in pool.identity_providers
    )


def match(
    pools: Sequence[FederationPoolCandidate],
    directory_id: str,
    public_client_id: str,
    confidential_client_id: Optional[str] = None,
) -> FederationPoolCandidate:
    """Return the single pool configured with the directory and one of its clients.

    Zero or several matches are both failures; the matcher never picks among
    equally valid pools.
    """
    client_ids = [cid for cid in (public_client_id, confidential_client_id) if cid]
    matches = [pool for pool in pools if references(pool, directory_id, client_ids)]

    if not matches:
        raise NoMatchingFederationPoolError(
            "There are no federation pools found which have the selected user directory "
            "configured as identity provider.",
            hint="Add the user directory and its app client to a federation pool, then run the import again.",
            identifiers=(directory_id,),
        )
    if len(matches) > 1:
        raise AmbiguousFederationPoolError(
            f"{len(matches)} federation pools have the selected user directory configured as identity provider.",
            hint="Leave only one federation pool referencing the user directory, then run the import again.",
            identifiers=tuple(pool.id for pool in matches),
            candidate_count=len(matches),
        )
    return matches[0]

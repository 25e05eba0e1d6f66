"""Split a directory's client applications into public and confidential clients."""
from __future__ import annotations

import logging
from typing import List, Optional, Sequence

from .errors import ClientNotFoundError, NoPublicClientError
from .models import ClassifiedClients, ClientApplication

logger = logging.getLogger(__name__)


def _select(
    candidates: List[ClientApplication],
    preferred: Optional[str],
    kind: str,
) -> Optional[ClientApplication]:
    if preferred is None:
        # First in provider order. Provider order is stable per query only.
        return candidates[0] if candidates else None
    if not candidates:
        logger.warning("Requested %s client '%s' ignored; the directory has no %s clients", kind, preferred, kind)
        return None
    for client in candidates:
        if client.client_id == preferred:
            return client
    raise ClientNotFoundError(
        f"The {kind} client '{preferred}' was not found among the directory's {kind} clients.",
        hint=f"Pick one of: {', '.join(c.client_id for c in candidates)}.",
        identifiers=(preferred,),
    )


def classify(
    clients: Sequence[ClientApplication],
    preferred_public: Optional[str] = None,
    preferred_confidential: Optional[str] = None,
) -> ClassifiedClients:
    """Pick the public (no secret) and confidential (secret) client to import."""
    public = [c for c in clients if not c.has_shared_secret]
    confidential = [c for c in clients if c.has_shared_secret]

    if not public:
        raise NoPublicClientError(
            "The selected user directory does not have at least 1 public app client configured. "
            "Public app clients are app clients without a client secret.",
            hint="Create an app client without a secret in the user directory, then run the import again.",
        )

    return ClassifiedClients(
        public=_select(public, preferred_public, "public"),
        confidential=_select(confidential, preferred_confidential, "confidential"),
    )

"""Exceptions raised by provider facades and by the reconciliation engine."""
from __future__ import annotations

from enum import Enum
from typing import Optional, Tuple


class ProviderCallError(Exception):
    """Upstream fault surfaced by a provider facade.

    Attributes:
        operation: Facade operation that failed
        status_code: HTTP status when the fault came from an HTTP response
        detail: Upstream error text
    """

    def __init__(self, operation: str, detail: str = "", status_code: Optional[int] = None):
        self.operation = operation
        self.detail = detail
        self.status_code = status_code
        prefix = f"[{status_code}] " if status_code is not None else ""
        super().__init__(f"{prefix}{operation}: {detail}" if detail else f"{prefix}{operation}")


class ProviderNotFoundError(ProviderCallError):
    """The targeted provider resource does not exist."""
    pass


class ErrorKind(str, Enum):
    INVALID_PAYLOAD = "InvalidPayload"
    ALREADY_EXISTS = "AlreadyExists"
    ALREADY_IMPORTED = "AlreadyImported"
    DIRECTORY_NOT_FOUND = "DirectoryNotFound"
    NO_PUBLIC_CLIENT = "NoPublicClient"
    CLIENT_NOT_FOUND = "ClientNotFound"
    POOL_NOT_FOUND = "PoolNotFound"
    NO_MATCHING_FEDERATION_POOL = "NoMatchingFederationPool"
    AMBIGUOUS_FEDERATION_POOL = "AmbiguousFederationPool"
    NO_ROLE_BINDING = "NoRoleBinding"
    PROVIDER_ERROR = "ProviderError"


class ReconciliationError(Exception):
    """Terminal failure of an import reconciliation.

    Attributes:
        kind: Stable error kind callers can branch on
        message: What went wrong
        hint: Resolution hint suitable for direct display
        identifiers: Offending identifier(s)
        state: Orchestrator state the attempt was in when it failed
    """

    kind: ErrorKind = ErrorKind.PROVIDER_ERROR

    def __init__(self, message: str, hint: str = "", identifiers: Tuple[str, ...] = ()):
        self.message = message
        self.hint = hint
        self.identifiers = tuple(identifiers)
        self.state = None
        super().__init__(message)

    def __str__(self) -> str:
        return f"{self.message} {self.hint}".strip()


class InvalidPayloadError(ReconciliationError):
    kind = ErrorKind.INVALID_PAYLOAD


class AlreadyExistsError(ReconciliationError):
    kind = ErrorKind.ALREADY_EXISTS


class AlreadyImportedError(ReconciliationError):
    kind = ErrorKind.ALREADY_IMPORTED


class DirectoryNotFoundError(ReconciliationError):
    kind = ErrorKind.DIRECTORY_NOT_FOUND


class NoPublicClientError(ReconciliationError):
    kind = ErrorKind.NO_PUBLIC_CLIENT


class ClientNotFoundError(ReconciliationError):
    kind = ErrorKind.CLIENT_NOT_FOUND


class PoolNotFoundError(ReconciliationError):
    kind = ErrorKind.POOL_NOT_FOUND


class NoMatchingFederationPoolError(ReconciliationError):
    kind = ErrorKind.NO_MATCHING_FEDERATION_POOL


class AmbiguousFederationPoolError(ReconciliationError):
    kind = ErrorKind.AMBIGUOUS_FEDERATION_POOL

    def __init__(self, message: str, hint: str = "", identifiers: Tuple[str, ...] = (), candidate_count: int = 0):
        super().__init__(message, hint, identifiers)
        self.candidate_count = candidate_count


class NoRoleBindingError(ReconciliationError):
    kind = ErrorKind.NO_ROLE_BINDING


class ProviderError(ReconciliationError):
    """Any upstream fault that is not a recognised not-found condition."""

    kind = ErrorKind.PROVIDER_ERROR

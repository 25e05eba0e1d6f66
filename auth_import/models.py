"""Value objects exchanged between the reconciliation stages."""
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Optional, Tuple


IMPORTED_SERVICE_TYPE = "imported"


class MultiFactorMode(str, Enum):
    OFF = "OFF"
    OPTIONAL = "OPTIONAL"
    REQUIRED = "REQUIRED"

    @classmethod
    def from_provider(cls, value: str) -> "MultiFactorMode":
        """Map the provider's MFA setting; the provider spells REQUIRED as ``ON``."""
        if value == "ON":
            return cls.REQUIRED
        return cls(value)


@dataclass(frozen=True)
class ImportRequest:
    version: int
    user_directory_id: str
    federation_pool_id: str
    public_client_id: Optional[str] = None
    confidential_client_id: Optional[str] = None


@dataclass(frozen=True)
class ClientApplication:
    owner_directory_id: str
    client_id: str
    has_shared_secret: bool


@dataclass(frozen=True)
class DirectoryDetails:
    id: str
    multi_factor_mode: MultiFactorMode
    name: Optional[str] = None


@dataclass(frozen=True)
class MultiFactorConfig:
    mode: MultiFactorMode
    sms_enabled: bool = False
    totp_enabled: bool = False

    @property
    def mfa_types(self) -> Tuple[str, ...]:
        if self.mode is MultiFactorMode.OFF:
            return ()
        types = []
        if self.sms_enabled:
            types.append("SMS Text Message")
        if self.totp_enabled:
            types.append("TOTP")
        return tuple(types)


@dataclass(frozen=True)
class IdentityProviderRef:
    provider_name: str
    client_id: str


@dataclass(frozen=True)
class FederationPoolCandidate:
    id: str
    name: str
    allows_unauthenticated: bool
    identity_providers: Tuple[IdentityProviderRef, ...] = ()


@dataclass(frozen=True)
class RoleBinding:
    authenticated_role_arn: str
    authenticated_role_name: str
    unauthenticated_role_arn: str
    unauthenticated_role_name: str


@dataclass(frozen=True)
class ClassifiedClients:
    public: Optional[ClientApplication] = None
    confidential: Optional[ClientApplication] = None


@dataclass(frozen=True)
class ResourceDescriptor:
    """Reconciled view of an existing auth backend, ready to be persisted locally."""

    user_directory_id: str
    multi_factor_mode: MultiFactorMode
    public_client_id: str
    federation_pool_id: str
    federation_pool_name: str
    allows_unauthenticated: bool
    role_binding: RoleBinding
    confidential_client_id: Optional[str] = None
    user_directory_name: Optional[str] = None
    mfa_types: Tuple[str, ...] = field(default_factory=tuple)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "userPoolId": self.user_directory_id,
            "userPoolName": self.user_directory_name,
            "mfaConfiguration": self.multi_factor_mode.value,
            "mfaTypes": list(self.mfa_types),
            "webClientId": self.public_client_id,
            "nativeClientId": self.confidential_client_id,
            "identityPoolId": self.federation_pool_id,
            "identityPoolName": self.federation_pool_name,
            "allowUnauthenticatedIdentities": self.allows_unauthenticated,
            "authRoleArn": self.role_binding.authenticated_role_arn,
            "authRoleName": self.role_binding.authenticated_role_name,
            "unauthRoleArn": self.role_binding.unauthenticated_role_arn,
            "unauthRoleName": self.role_binding.unauthenticated_role_name,
        }

    def to_registry_entry(self, provenance_key: str = "serviceType") -> Dict[str, Any]:
        """Payload a persistence collaborator writes under the auth category."""
        return {provenance_key: IMPORTED_SERVICE_TYPE, "output": self.to_dict()}

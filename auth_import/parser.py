"""Parser that turns raw provider payloads into reconciliation value objects."""
from __future__ import annotations

from typing import Any, Dict, List, Optional

from .errors import ProviderError
from .models import (
    ClientApplication,
    DirectoryDetails,
    FederationPoolCandidate,
    IdentityProviderRef,
    MultiFactorConfig,
    MultiFactorMode,
    RoleBinding,
)
from .resources import RESOURCE_DEFINITIONS


def _malformed(resource: str, reason: str) -> ProviderError:
    return ProviderError(
        f"Malformed {resource.replace('_', ' ')} response from provider: {reason}.",
        hint="Check the provider API version and retry the import.",
    )


class Parser:
    def __init__(self):
        self.definitions = RESOURCE_DEFINITIONS

    def extract(self, resource: str, raw: Any) -> Dict[str, Any]:
        if not isinstance(raw, dict):
            raise _malformed(resource, f"expected an object, got {type(raw).__name__}")
        definition = self.definitions[resource]
        return {name: getter(raw) for name, getter in definition.items()}

    def _required_str(self, resource: str, fields: Dict[str, Any], name: str) -> str:
        value = fields.get(name)
        if not isinstance(value, str) or not value:
            raise _malformed(resource, f"missing '{name}'")
        return value

    def _mfa_mode(self, resource: str, value: Any) -> MultiFactorMode:
        try:
            return MultiFactorMode.from_provider(value)
        except ValueError as exc:
            raise _malformed(resource, f"unknown MFA configuration {value!r}") from exc

    def parse_directory(self, raw: Any) -> DirectoryDetails:
        fields = self.extract("user_directory", raw)
        return DirectoryDetails(
            id=self._required_str("user_directory", fields, "id"),
            name=fields["name"] if isinstance(fields["name"], str) else None,
            multi_factor_mode=self._mfa_mode("user_directory", fields["mfa_mode"]),
        )

    def parse_client(self, raw: Any) -> ClientApplication:
        fields = self.extract("client_application", raw)
        return ClientApplication(
            owner_directory_id=self._required_str("client_application", fields, "owner_directory_id"),
            client_id=self._required_str("client_application", fields, "client_id"),
            has_shared_secret=fields["has_shared_secret"],
        )

    def parse_clients(self, payload: Any) -> List[ClientApplication]:
        if not isinstance(payload, list):
            raise _malformed("client_application", "expected a list")
        return [self.parse_client(item) for item in payload]

    def parse_mfa_config(self, raw: Any, fallback: MultiFactorMode) -> MultiFactorConfig:
        """MFA settings; the directory's own mode is used when the config omits one."""
        fields = self.extract("mfa_config", raw)
        mode = fallback if fields["mfa_mode"] is None else self._mfa_mode("mfa_config", fields["mfa_mode"])
        return MultiFactorConfig(
            mode=mode,
            sms_enabled=fields["sms_enabled"],
            totp_enabled=fields["totp_enabled"],
        )

    def parse_pool(self, raw: Any) -> FederationPoolCandidate:
        fields = self.extract("federation_pool", raw)
        providers = fields["identity_providers"]
        if not isinstance(providers, list):
            raise _malformed("federation_pool", "identity providers must be a list")
        refs = []
        for item in providers:
            ref = self.extract("identity_provider", item)
            refs.append(
                IdentityProviderRef(
                    provider_name=self._required_str("identity_provider", ref, "provider_name"),
                    client_id=self._required_str("identity_provider", ref, "client_id"),
                )
            )
        return FederationPoolCandidate(
            id=self._required_str("federation_pool", fields, "id"),
            name=fields["name"] if isinstance(fields["name"], str) else "",
            allows_unauthenticated=fields["allows_unauthenticated"],
            identity_providers=tuple(refs),
        )

    def parse_pools(self, payload: Any) -> List[FederationPoolCandidate]:
        if not isinstance(payload, list):
            raise _malformed("federation_pool", "expected a list")
        return [self.parse_pool(item) for item in payload]

    def parse_roles(self, raw: Any, require_unauthenticated: bool = True) -> Optional[RoleBinding]:
        """Role binding of a pool, or None when the pool has no roles attached.

        Pools that refuse unauthenticated identities may leave the
        unauthenticated half empty; it is then returned as empty strings.
        """
        if raw is None:
            return None
        fields = self.extract("role_binding", raw)
        if not fields["authenticated_role_arn"] and not fields["unauthenticated_role_arn"]:
            return None
        required = list(fields)
        unauthenticated = ("unauthenticated_role_arn", "unauthenticated_role_name")
        if not require_unauthenticated and not any(fields[name] for name in unauthenticated):
            required = [name for name in required if name not in unauthenticated]
            for name in unauthenticated:
                fields[name] = ""
        for name in required:
            value = fields[name]
            if not isinstance(value, str) or not value:
                raise _malformed("role_binding", f"missing '{name}'")
        return RoleBinding(**fields)

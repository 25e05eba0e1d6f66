"""Field blueprints for reading raw provider payloads."""
from __future__ import annotations

from typing import Any, Callable, Dict


ResourceDefinition = Dict[str, Callable[[Dict[str, Any]], Any]]


def _safe_get(obj, path, default=None):
    current = obj
    for part in path.split("."):
        if isinstance(current, dict):
            current = current.get(part, default)
        else:
            return default
    return current


RESOURCE_DEFINITIONS: Dict[str, ResourceDefinition] = {
    "user_directory": {
        "id": lambda obj: obj.get("Id"),
        "name": lambda obj: obj.get("Name"),
        "mfa_mode": lambda obj: obj.get("MfaConfiguration", "OFF"),
    },
    "client_application": {
        "owner_directory_id": lambda obj: obj.get("UserPoolId"),
        "client_id": lambda obj: obj.get("ClientId"),
        "has_shared_secret": lambda obj: bool(obj.get("ClientSecret")),
    },
    "mfa_config": {
        "mfa_mode": lambda obj: obj.get("MfaConfiguration"),
        "sms_enabled": lambda obj: bool(_safe_get(obj, "SmsMfaConfiguration.SmsConfiguration")),
        "totp_enabled": lambda obj: bool(_safe_get(obj, "SoftwareTokenMfaConfiguration.Enabled", False)),
    },
    "federation_pool": {
        "id": lambda obj: obj.get("IdentityPoolId"),
        "name": lambda obj: obj.get("IdentityPoolName", ""),
        "allows_unauthenticated": lambda obj: bool(obj.get("AllowUnauthenticatedIdentities", False)),
        "identity_providers": lambda obj: obj.get("CognitoIdentityProviders") or [],
    },
    "identity_provider": {
        "provider_name": lambda obj: obj.get("ProviderName"),
        "client_id": lambda obj: obj.get("ClientId"),
    },
    "role_binding": {
        "authenticated_role_arn": lambda obj: obj.get("authRoleArn"),
        "authenticated_role_name": lambda obj: obj.get("authRoleName"),
        "unauthenticated_role_arn": lambda obj: obj.get("unauthRoleArn"),
        "unauthenticated_role_name": lambda obj: obj.get("unauthRoleName"),
    },
}

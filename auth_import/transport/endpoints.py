"""
Endpoint definitions for the provider gateway API.
One entry per facade operation.
"""

from typing import Dict, Any


def get_provider_endpoints() -> Dict[str, Any]:
    """Get provider endpoint configuration."""
    return {
        # 1. User directory details
        "user_directory": {
            "detail": "/user-directories/{directoryId}",
            "item_key": "UserPool",
        },

        # 2. Client applications of a directory
        "client_applications": {
            "list": "/user-directories/{directoryId}/clients",
            "items_key": "UserPoolClients",
            "supports_pagination": True,
        },

        # 3. MFA configuration of a directory
        "mfa_config": {
            "detail": "/user-directories/{directoryId}/mfa-config",
        },

        # 4. Federation pools (with provider details)
        "federation_pools": {
            "list": "/federation-pools",
            "items_key": "IdentityPools",
            "supports_pagination": True,
        },

        # 5. Role bindings of a federation pool
        "federation_pool_roles": {
            "detail": "/federation-pools/{poolId}/roles",
        },
    }

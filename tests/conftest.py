"""Shared fixtures: a fake provider facade seeded with a healthy directory and pool."""
import copy
import sys
from pathlib import Path

import pytest

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from auth_import.errors import ProviderNotFoundError  # noqa: E402

USER_POOL_ID = "user-pool-123"
IDENTITY_POOL_ID = "identity-pool-123"
NATIVE_CLIENT_ID = "native-app-client-123"
WEB_CLIENT_ID = "web-app-client-123"


def default_provider_state():
    return {
        "directory": {"Id": USER_POOL_ID, "Name": "user-pool", "MfaConfiguration": "ON"},
        "clients": [
            {"UserPoolId": USER_POOL_ID, "ClientId": WEB_CLIENT_ID},
            {"UserPoolId": USER_POOL_ID, "ClientId": NATIVE_CLIENT_ID, "ClientSecret": "secret-123"},
        ],
        "mfa": {
            "SoftwareTokenMfaConfiguration": {"Enabled": True},
            "MfaConfiguration": "ON",
        },
        "pools": [
            {
                "IdentityPoolId": IDENTITY_POOL_ID,
                "IdentityPoolName": "identity-pool",
                "AllowUnauthenticatedIdentities": True,
                "CognitoIdentityProviders": [
                    {"ProviderName": f"web-provider-{USER_POOL_ID}", "ClientId": WEB_CLIENT_ID},
                    {"ProviderName": f"native-provider-{USER_POOL_ID}", "ClientId": NATIVE_CLIENT_ID},
                ],
            }
        ],
        "roles": {
            "authRoleArn": "arn:authRole:123",
            "authRoleName": "authRole",
            "unauthRoleName": "unAuthRole",
            "unauthRoleArn": "arn:unAuthRole:123",
        },
    }


class FakeFacade:
    """In-memory provider facade that records every call it receives.

    Set ``failures[operation]`` to an exception to make that operation raise.
    """

    def __init__(self, state=None):
        self.state = state if state is not None else default_provider_state()
        self.calls = []
        self.failures = {}
        self.entered = False
        self.exited = False

    async def __aenter__(self):
        self.entered = True
        return self

    async def __aexit__(self, exc_type, exc, tb):
        self.exited = True
        return False

    def _record(self, operation, *args):
        self.calls.append((operation, args))
        if operation in self.failures:
            raise self.failures[operation]

    async def get_user_directory_details(self, directory_id):
        self._record("get_user_directory_details", directory_id)
        if self.state["directory"] is None:
            raise ProviderNotFoundError("user_directory", f"{directory_id} not found", status_code=404)
        return self.state["directory"]

    async def list_client_applications(self, directory_id):
        self._record("list_client_applications", directory_id)
        return self.state["clients"]

    async def get_multi_factor_config(self, directory_id):
        self._record("get_multi_factor_config", directory_id)
        return self.state["mfa"]

    async def list_federation_pools(self):
        self._record("list_federation_pools")
        return self.state["pools"]

    async def get_federation_pool_role_bindings(self, pool_id):
        self._record("get_federation_pool_role_bindings", pool_id)
        return self.state["roles"]


class DictRegistry:
    def __init__(self, snapshot=None):
        self.snapshot = snapshot if snapshot is not None else {"providers": {"awscloudformation": {}}}
        self.reads = 0

    def read(self):
        self.reads += 1
        return self.snapshot


@pytest.fixture
def provider_state():
    return copy.deepcopy(default_provider_state())


@pytest.fixture
def facade(provider_state):
    return FakeFacade(provider_state)


@pytest.fixture
def registry():
    return DictRegistry()


@pytest.fixture
def headless_payload():
    return {
        "version": 1,
        "userPoolId": USER_POOL_ID,
        "identityPoolId": IDENTITY_POOL_ID,
        "nativeClientId": NATIVE_CLIENT_ID,
        "webClientId": WEB_CLIENT_ID,
    }


@pytest.fixture
def make_registry():
    return DictRegistry


@pytest.fixture
def make_facade():
    return FakeFacade

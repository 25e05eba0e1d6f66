import asyncio

import pytest

from auth_import.errors import (
    AlreadyExistsError,
    AlreadyImportedError,
    ClientNotFoundError,
    DirectoryNotFoundError,
    ErrorKind,
    NoMatchingFederationPoolError,
    NoPublicClientError,
    PoolNotFoundError,
    ProviderCallError,
    ProviderError,
    ProviderNotFoundError,
)
from auth_import.models import ImportRequest, MultiFactorMode
from auth_import.orchestrator import (
    ALREADY_EXISTS_MESSAGE,
    Reconciliation,
    ReconciliationState,
    reconcile,
)

REQUEST = ImportRequest(
    version=1,
    user_directory_id="user-pool-123",
    federation_pool_id="identity-pool-123",
    public_client_id="web-app-client-123",
    confidential_client_id="native-app-client-123",
)


def _run(request, facade, registry):
    return asyncio.run(reconcile(request, facade, registry))


def test_reconciles_directory_clients_pool_and_roles(facade, registry):
    descriptor = _run(REQUEST, facade, registry)

    assert descriptor.user_directory_id == "user-pool-123"
    assert descriptor.multi_factor_mode is MultiFactorMode.REQUIRED
    assert descriptor.mfa_types == ("TOTP",)
    assert descriptor.public_client_id == "web-app-client-123"
    assert descriptor.confidential_client_id == "native-app-client-123"
    assert descriptor.federation_pool_id == "identity-pool-123"
    assert descriptor.allows_unauthenticated is True
    assert descriptor.role_binding.authenticated_role_arn == "arn:authRole:123"
    assert descriptor.role_binding.unauthenticated_role_name == "unAuthRole"

    assert facade.calls == [
        ("get_user_directory_details", ("user-pool-123",)),
        ("list_client_applications", ("user-pool-123",)),
        ("get_multi_factor_config", ("user-pool-123",)),
        ("list_federation_pools", ()),
        ("get_federation_pool_role_bindings", ("identity-pool-123",)),
    ]


def test_selects_discovered_clients_when_request_names_none(facade, registry):
    request = ImportRequest(version=1, user_directory_id="user-pool-123", federation_pool_id="identity-pool-123")

    descriptor = _run(request, facade, registry)

    assert descriptor.public_client_id == "web-app-client-123"
    assert descriptor.confidential_client_id == "native-app-client-123"


def test_state_history_walks_every_state(facade, registry):
    attempt = Reconciliation(REQUEST, facade, registry)
    asyncio.run(attempt.run())

    assert attempt.state is ReconciliationState.BUILT
    assert attempt.history == [
        ReconciliationState.START,
        ReconciliationState.PRECHECK,
        ReconciliationState.DIRECTORY_FETCHED,
        ReconciliationState.CLIENTS_CLASSIFIED,
        ReconciliationState.POOL_MATCHED,
        ReconciliationState.ROLES_RESOLVED,
        ReconciliationState.BUILT,
    ]


def test_existing_auth_resource_stops_before_provider_calls(facade, make_registry):
    registry = make_registry({"auth": {"foo": {}}})

    with pytest.raises(AlreadyExistsError) as excinfo:
        _run(REQUEST, facade, registry)

    assert excinfo.value.kind is ErrorKind.ALREADY_EXISTS
    assert facade.calls == []


def test_imported_auth_resource_stops_before_provider_calls(facade, make_registry):
    registry = make_registry({"auth": {"foo": {"serviceType": "imported"}}})

    with pytest.raises(AlreadyImportedError) as excinfo:
        _run(REQUEST, facade, registry)

    assert excinfo.value.kind is ErrorKind.ALREADY_IMPORTED
    assert "remove" in excinfo.value.hint
    assert excinfo.value.message != ALREADY_EXISTS_MESSAGE
    assert facade.calls == []


def test_directory_not_found_carries_requested_id(facade, registry):
    facade.failures["get_user_directory_details"] = ProviderNotFoundError("user_directory", "ResourceNotFoundException")

    with pytest.raises(DirectoryNotFoundError) as excinfo:
        _run(REQUEST, facade, registry)

    assert excinfo.value.identifiers == ("user-pool-123",)
    assert "user-pool-123" in str(excinfo.value)
    assert excinfo.value.state is ReconciliationState.PRECHECK
    assert isinstance(excinfo.value.__cause__, ProviderNotFoundError)


def test_other_directory_faults_are_provider_errors(facade, registry):
    facade.failures["get_user_directory_details"] = ProviderCallError("user_directory", "AccessDenied", status_code=403)

    with pytest.raises(ProviderError) as excinfo:
        _run(REQUEST, facade, registry)

    assert excinfo.value.kind is ErrorKind.PROVIDER_ERROR
    assert "AccessDenied" in str(excinfo.value)


def test_client_listing_not_found_maps_to_directory_not_found(facade, registry):
    facade.failures["list_client_applications"] = ProviderNotFoundError("client_applications")

    with pytest.raises(DirectoryNotFoundError):
        _run(REQUEST, facade, registry)


def test_empty_client_list_has_no_public_client(facade, registry):
    facade.state["clients"] = []

    with pytest.raises(NoPublicClientError) as excinfo:
        _run(REQUEST, facade, registry)

    assert excinfo.value.state is ReconciliationState.DIRECTORY_FETCHED
    assert "list_federation_pools" not in [name for name, _ in facade.calls]


def test_requested_public_client_must_exist(facade, registry):
    request = ImportRequest(
        version=1,
        user_directory_id="user-pool-123",
        federation_pool_id="identity-pool-123",
        public_client_id="missing-client",
    )

    with pytest.raises(ClientNotFoundError) as excinfo:
        _run(request, facade, registry)

    assert excinfo.value.identifiers == ("missing-client",)


def test_no_pool_references_directory(facade, registry):
    invalid_id = "user-pool-123-invalid"
    facade.state["directory"] = {"Id": invalid_id, "MfaConfiguration": "ON"}
    for client in facade.state["clients"]:
        client["UserPoolId"] = invalid_id
    request = ImportRequest(version=1, user_directory_id=invalid_id, federation_pool_id="identity-pool-123")

    with pytest.raises(NoMatchingFederationPoolError) as excinfo:
        _run(request, facade, registry)

    assert excinfo.value.kind is ErrorKind.NO_MATCHING_FEDERATION_POOL
    assert "get_federation_pool_role_bindings" not in [name for name, _ in facade.calls]


def test_matched_pool_must_be_the_requested_pool(facade, registry):
    request = ImportRequest(version=1, user_directory_id="user-pool-123", federation_pool_id="identity-pool-999")

    with pytest.raises(NoMatchingFederationPoolError) as excinfo:
        _run(request, facade, registry)

    assert excinfo.value.identifiers == ("identity-pool-999", "identity-pool-123")


def test_pool_listing_failure_is_provider_error_even_when_not_found(facade, registry):
    facade.failures["list_federation_pools"] = ProviderNotFoundError("federation_pools")

    with pytest.raises(ProviderError):
        _run(REQUEST, facade, registry)


def test_role_lookup_not_found_is_pool_not_found(facade, registry):
    facade.failures["get_federation_pool_role_bindings"] = ProviderNotFoundError("federation_pool_roles")

    with pytest.raises(PoolNotFoundError) as excinfo:
        _run(REQUEST, facade, registry)

    assert excinfo.value.state is ReconciliationState.POOL_MATCHED


def test_directory_id_mismatch_is_provider_error(facade, registry):
    facade.state["directory"]["Id"] = "someone-else"

    with pytest.raises(ProviderError):
        _run(REQUEST, facade, registry)


def test_failed_attempt_ends_in_failed_state(facade, registry):
    facade.state["clients"] = []
    attempt = Reconciliation(REQUEST, facade, registry)

    with pytest.raises(NoPublicClientError):
        asyncio.run(attempt.run())

    assert attempt.state is ReconciliationState.FAILED
    assert attempt.history[-2:] == [ReconciliationState.DIRECTORY_FETCHED, ReconciliationState.FAILED]


def test_attempts_do_not_share_state(make_facade, registry):
    async def both():
        healthy = make_facade()
        broken = make_facade()
        broken.state = dict(broken.state, clients=[])
        return await asyncio.gather(
            reconcile(REQUEST, healthy, registry),
            reconcile(REQUEST, broken, registry),
            return_exceptions=True,
        )

    ok, failed = asyncio.run(both())

    assert ok.public_client_id == "web-app-client-123"
    assert isinstance(failed, NoPublicClientError)


def test_requested_confidential_client_is_optional_when_directory_has_none(facade, registry):
    facade.state["clients"] = [c for c in facade.state["clients"] if "ClientSecret" not in c]

    descriptor = _run(REQUEST, facade, registry)

    assert REQUEST.confidential_client_id == "native-app-client-123"
    assert descriptor.public_client_id == "web-app-client-123"
    assert descriptor.confidential_client_id is None
    assert descriptor.federation_pool_id == "identity-pool-123"


def test_pool_without_unauthenticated_access_needs_only_the_authenticated_role(facade, registry):
    facade.state["pools"][0]["AllowUnauthenticatedIdentities"] = False
    facade.state["roles"] = {"authRoleArn": "arn:authRole:123", "authRoleName": "authRole"}

    descriptor = _run(REQUEST, facade, registry)

    assert descriptor.allows_unauthenticated is False
    assert descriptor.role_binding.authenticated_role_arn == "arn:authRole:123"
    assert descriptor.role_binding.unauthenticated_role_arn == ""


def test_pool_allowing_unauthenticated_access_needs_both_roles(facade, registry):
    facade.state["roles"] = {"authRoleArn": "arn:authRole:123", "authRoleName": "authRole"}

    with pytest.raises(ProviderError):
        _run(REQUEST, facade, registry)

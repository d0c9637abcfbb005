"""
Name: Profile HTTP Endpoint Tests

Responsibilities:
  - Validate authentication (bearer header, cookie, missing token)
  - Validate status code mapping (403/404/409/422/503) as RFC 7807
  - Validate profile read/update and identity resolution over HTTP

Collaborators:
  - account_access.api.main: app under test
  - fastapi.testclient: HTTP testing

Notes:
  - Use case factories are overridden with seeded in-memory repositories
"""

import pytest
from fastapi.testclient import TestClient

from account_access import container
from account_access.api.main import app
from account_access.application.usecases.identity import ResolveIdentityUseCase
from account_access.application.usecases.profile import (
    FetchProfileUseCase,
    GetVisibleProfileUseCase,
    OwnershipFactGatherer,
    UpdateVisibleProfileUseCase,
)
from account_access.crosscutting.error_responses import PROBLEM_JSON_MEDIA_TYPE
from account_access.crosscutting.exceptions import DatabaseError
from account_access.identity.auth import create_access_token
from account_access.identity.roles import Role

from conftest import (
    ADMIN,
    COACH,
    CUSTOMER_A,
    CUSTOMER_B,
    LEARNER_L,
    MANAGER,
    RETIRED_COACH,
    make_session,
)


pytestmark = pytest.mark.unit


class _UnavailableIdentities:
    def __getattr__(self, name):
        def fail(account_id):
            raise DatabaseError("identity store unavailable")

        return fail


@pytest.fixture
def client(identity_repo, profile_repo, fact_gatherer):
    overrides = {
        container.get_get_visible_profile_use_case: lambda: GetVisibleProfileUseCase(
            fact_gatherer, profile_repo
        ),
        container.get_update_visible_profile_use_case: lambda: UpdateVisibleProfileUseCase(
            fact_gatherer, profile_repo
        ),
        container.get_fetch_profile_use_case: lambda: FetchProfileUseCase(profile_repo),
        container.get_resolve_identity_use_case: lambda: ResolveIdentityUseCase(
            identity_repo
        ),
    }
    app.dependency_overrides.update(overrides)
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


def _auth(account_id: int, *roles: Role) -> dict:
    return {"Authorization": f"Bearer {create_access_token(account_id, roles)}"}


def _assert_problem(response, status: int, code: str) -> dict:
    assert response.status_code == status
    assert response.headers["content-type"].startswith(PROBLEM_JSON_MEDIA_TYPE)
    body = response.json()
    assert body["status"] == status
    assert body["code"] == code
    return body


def test_missing_token_is_unauthorized(client):
    response = client.get(f"/v1/accounts/{LEARNER_L}/profile")

    _assert_problem(response, 401, "UNAUTHORIZED")


def test_garbage_token_is_unauthorized(client):
    response = client.get(
        f"/v1/accounts/{LEARNER_L}/profile", headers={"Authorization": "Bearer nope"}
    )

    _assert_problem(response, 401, "UNAUTHORIZED")


def test_cookie_token_is_accepted(client):
    token = create_access_token(LEARNER_L, [Role.LEARNER])

    response = client.get(
        f"/v1/accounts/{LEARNER_L}/profile", headers={"Cookie": f"access_token={token}"}
    )

    assert response.status_code == 200
    assert response.json()["account_id"] == LEARNER_L


def test_customer_reads_owned_learner_profile(client):
    response = client.get(
        f"/v1/accounts/{LEARNER_L}/profile", headers=_auth(CUSTOMER_A, Role.CUSTOMER)
    )

    assert response.status_code == 200
    body = response.json()
    assert body["nickname"] == f"user{LEARNER_L}"
    assert body["email"] == f"user{LEARNER_L}@example.com"
    assert body["geographic"] == {"province": "North", "city": "Harbor"}
    assert response.headers["X-Request-Id"]


def test_basic_detail_is_masked(client):
    response = client.get(
        f"/v1/accounts/{LEARNER_L}/profile",
        params={"detail": "BASIC"},
        headers=_auth(CUSTOMER_A, Role.CUSTOMER),
    )

    assert response.status_code == 200
    body = response.json()
    assert body["email"] is None
    assert body["notify_count"] == 0


def test_other_customers_learner_is_forbidden(client):
    response = client.get(
        f"/v1/accounts/{LEARNER_L}/profile", headers=_auth(CUSTOMER_B, Role.CUSTOMER)
    )

    _assert_problem(response, 403, "ACCESS_DENIED")


@pytest.mark.parametrize("raw_target", ["abc", "0", "-1", "٢٠"])
def test_malformed_target_is_forbidden(client, raw_target):
    response = client.get(
        f"/v1/accounts/{raw_target}/profile", headers=_auth(ADMIN, Role.ADMIN)
    )

    _assert_problem(response, 403, "ACCESS_DENIED")


def test_missing_profile_is_not_found(client):
    response = client.get("/v1/accounts/9999/profile", headers=_auth(ADMIN, Role.ADMIN))

    _assert_problem(response, 404, "PROFILE_NOT_FOUND")


def test_patch_updates_profile(client):
    response = client.patch(
        f"/v1/accounts/{LEARNER_L}/profile",
        json={"nickname": "Lina", "tags": ["chess"]},
        headers=_auth(LEARNER_L, Role.LEARNER),
    )

    assert response.status_code == 200
    body = response.json()
    assert body["is_updated"] is True
    assert body["profile"]["nickname"] == "Lina"
    assert body["profile"]["tags"] == ["chess"]


def test_patch_without_changes_reports_not_updated(client):
    response = client.patch(
        f"/v1/accounts/{LEARNER_L}/profile",
        json={"nickname": f"user{LEARNER_L}"},
        headers=_auth(LEARNER_L, Role.LEARNER),
    )

    assert response.status_code == 200
    assert response.json()["is_updated"] is False


def test_patch_with_forbidden_field_lists_fields(client):
    response = client.patch(
        f"/v1/accounts/{COACH}/profile",
        json={"nickname": "x", "user_state": "SUSPENDED", "access_group": ["ADMIN"]},
        headers=_auth(MANAGER, Role.MANAGER),
    )

    body = _assert_problem(response, 403, "FIELD_FORBIDDEN")
    fields = [item["field"] for item in body["errors"] if "field" in item]
    assert fields == ["access_group", "user_state"]


def test_patch_with_taken_nickname_conflicts(client):
    response = client.patch(
        f"/v1/accounts/{LEARNER_L}/profile",
        json={"nickname": f"user{COACH}"},
        headers=_auth(LEARNER_L, Role.LEARNER),
    )

    _assert_problem(response, 409, "NICKNAME_TAKEN")


def test_patch_with_invalid_value_is_unprocessable(client):
    response = client.patch(
        f"/v1/accounts/{LEARNER_L}/profile",
        json={"birth_date": "yesterday"},
        headers=_auth(LEARNER_L, Role.LEARNER),
    )

    body = _assert_problem(response, 422, "VALIDATION_FAILED")
    assert {"field": "birth_date"} in body["errors"]


def test_me_profile_defaults_when_record_missing(client):
    response = client.get("/v1/me/profile", headers=_auth(8888, Role.CUSTOMER))

    assert response.status_code == 200
    body = response.json()
    assert body["account_id"] == 8888
    assert body["access_group"] == ["CUSTOMER"]
    assert body["user_state"] == "PENDING"


def test_me_identity_resolves_projection(client):
    response = client.get(
        "/v1/me/identity", params={"role": "COACH"}, headers=_auth(COACH, Role.COACH)
    )

    assert response.status_code == 200
    body = response.json()
    assert body["kind"] == "COACH"
    assert body["identity"]["level"] == 2


def test_me_identity_for_undeclared_role_is_forbidden(client):
    response = client.get(
        "/v1/me/identity", params={"role": "ADMIN"}, headers=_auth(COACH, Role.COACH)
    )

    _assert_problem(response, 403, "ACCESS_DENIED")


def test_me_identity_deactivated_is_forbidden(client):
    response = client.get(
        "/v1/me/identity",
        params={"role": "COACH"},
        headers=_auth(RETIRED_COACH, Role.COACH),
    )

    _assert_problem(response, 403, "IDENTITY_INACTIVE")


def test_storage_failure_maps_to_service_unavailable(client, profile_repo, fact_gatherer):
    gatherer = OwnershipFactGatherer(_UnavailableIdentities(), max_workers=2)
    app.dependency_overrides[container.get_get_visible_profile_use_case] = (
        lambda: GetVisibleProfileUseCase(gatherer, profile_repo)
    )

    response = client.get(
        f"/v1/accounts/{LEARNER_L}/profile", headers=_auth(COACH, Role.COACH)
    )

    _assert_problem(response, 503, "DATABASE_ERROR")


def test_healthz_and_metrics(client):
    assert client.get("/healthz").json() == {"ok": True}

    response = client.get("/metrics")
    assert response.status_code == 200
    assert "account_access_requests_total" in response.text


def test_asgi_entrypoint_exposes_profile_routes():
    from account_access.main import app as entrypoint_app

    paths = {route.path for route in entrypoint_app.routes}

    assert {
        "/v1/accounts/{account_id}/profile",
        "/v1/me/profile",
        "/v1/me/identity",
        "/healthz",
        "/metrics",
    } <= paths


def test_app_shutdown_stops_shared_fact_gatherer():
    gatherer = container.get_fact_gatherer()

    with TestClient(app):
        pass

    assert container.get_fact_gatherer.cache_info().currsize == 0
    with pytest.raises(RuntimeError):
        gatherer.gather(make_session(MANAGER, Role.MANAGER), 999)

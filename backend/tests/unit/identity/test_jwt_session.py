"""
Name: Access Token -> Session Tests

Responsibilities:
  - Validate token decoding into a Session
  - Validate rejection of expired, tampered and malformed tokens
  - Validate header/cookie token extraction
"""

import jwt
import pytest
from starlette.requests import Request

from account_access.crosscutting.config import Settings
from account_access.crosscutting.error_responses import AppHTTPException, ErrorCode
from account_access.identity.auth import (
    JWT_ALGORITHM,
    create_access_token,
    decode_access_token,
    extract_access_token,
)
from account_access.identity.roles import Role


pytestmark = pytest.mark.unit


@pytest.fixture
def settings():
    return Settings(jwt_secret="unit-test-secret", app_env="test")


def _request_with_cookie(cookie: str | None) -> Request:
    headers = []
    if cookie:
        headers.append((b"cookie", cookie.encode()))
    return Request({"type": "http", "headers": headers})


def test_round_trip_builds_session(settings):
    token = create_access_token(42, [Role.COACH, "customer"], settings)

    session = decode_access_token(token, settings)

    assert session.account_id == 42
    assert session.roles == frozenset({Role.COACH, Role.CUSTOMER})


def test_unknown_role_names_are_dropped(settings):
    token = create_access_token(7, ["LEARNER", "GOD_MODE"], settings)

    assert decode_access_token(token, settings).roles == frozenset({Role.LEARNER})


def test_expired_token_is_unauthorized(settings):
    token = create_access_token(1, [], settings, expires_in_minutes=-5)

    with pytest.raises(AppHTTPException) as exc_info:
        decode_access_token(token, settings)

    assert exc_info.value.status_code == 401
    assert exc_info.value.code == ErrorCode.UNAUTHORIZED


def test_wrong_secret_is_unauthorized(settings):
    token = create_access_token(1, [], Settings(jwt_secret="other", app_env="test"))

    with pytest.raises(AppHTTPException) as exc_info:
        decode_access_token(token, settings)

    assert exc_info.value.status_code == 401


@pytest.mark.parametrize("sub", ["abc", "0", "-3"])
def test_non_positive_or_non_numeric_subject_is_rejected(settings, sub):
    token = jwt.encode(
        {"sub": sub, "exp": 4_102_444_800, "roles": []},
        settings.jwt_secret,
        algorithm=JWT_ALGORITHM,
    )

    with pytest.raises(AppHTTPException):
        decode_access_token(token, settings)


def test_roles_claim_must_be_a_list(settings):
    token = jwt.encode(
        {"sub": "5", "exp": 4_102_444_800, "roles": "ADMIN"},
        settings.jwt_secret,
        algorithm=JWT_ALGORITHM,
    )

    with pytest.raises(AppHTTPException):
        decode_access_token(token, settings)


def test_refresh_token_type_is_rejected(settings):
    token = jwt.encode(
        {"sub": "5", "exp": 4_102_444_800, "typ": "refresh"},
        settings.jwt_secret,
        algorithm=JWT_ALGORITHM,
    )

    with pytest.raises(AppHTTPException):
        decode_access_token(token, settings)


def test_extract_prefers_bearer_header_over_cookie():
    request = _request_with_cookie("access_token=from-cookie")

    assert extract_access_token(request, "Bearer from-header") == "from-header"
    assert extract_access_token(request, "Basic abc") == "from-cookie"
    assert extract_access_token(_request_with_cookie(None), None) is None

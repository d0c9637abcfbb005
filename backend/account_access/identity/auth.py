"""
Name: Bearer Token Verification (JWT -> Session)

Responsibilities:
  - Decode and validate HS256 access tokens issued by the account service
  - Build the request Session (sub = account id, "roles" claim)
  - Extract the token from `Authorization: Bearer` or the access cookie
  - Provide the FastAPI dependency that requires a Session

Collaborators:
  - crosscutting.config.get_settings: secret, TTL, cookie name
  - crosscutting.error_responses.unauthorized: 401 RFC 7807 errors
  - identity.roles.normalize_roles

Notes:
  - This service never issues credentials for end users.
    create_access_token exists for tests and local tooling.
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Callable, Iterable

import jwt
from fastapi import Header, Request

from ..context import actor_account_id_var
from ..crosscutting.config import Settings, get_settings
from ..crosscutting.error_responses import unauthorized
from .roles import Role, normalize_roles
from .session import Session

JWT_ALGORITHM = "HS256"
TOKEN_TYPE_ACCESS = "access"

CLAIM_SUB = "sub"
CLAIM_ROLES = "roles"
CLAIM_IAT = "iat"
CLAIM_EXP = "exp"
CLAIM_TYP = "typ"


def create_access_token(
    account_id: int,
    roles: Iterable[Role | str],
    settings: Settings | None = None,
    *,
    expires_in_minutes: int | None = None,
) -> str:
    """Sign an access token for `account_id` carrying `roles`."""
    s = settings or get_settings()
    now = datetime.now(timezone.utc)
    ttl = expires_in_minutes if expires_in_minutes is not None else s.jwt_access_ttl_minutes

    payload: dict[str, object] = {
        CLAIM_SUB: str(account_id),
        CLAIM_ROLES: [r.value if isinstance(r, Role) else str(r) for r in roles],
        CLAIM_IAT: int(now.timestamp()),
        CLAIM_EXP: int((now + timedelta(minutes=ttl)).timestamp()),
        CLAIM_TYP: TOKEN_TYPE_ACCESS,
    }
    return jwt.encode(payload, s.jwt_secret, algorithm=JWT_ALGORITHM)


def decode_access_token(token: str, settings: Settings | None = None) -> Session:
    """
    Decode and validate an access token into a Session.

    Errors:
        - 401 when expired, badly signed or missing required claims.
    """
    s = settings or get_settings()

    try:
        payload = jwt.decode(
            token,
            s.jwt_secret,
            algorithms=[JWT_ALGORITHM],
            options={"require": [CLAIM_SUB, CLAIM_EXP]},
        )
    except jwt.ExpiredSignatureError as exc:
        raise unauthorized("Token expired.") from exc
    except jwt.InvalidTokenError as exc:
        raise unauthorized("Invalid token.") from exc

    token_type = payload.get(CLAIM_TYP)
    if token_type is not None and token_type != TOKEN_TYPE_ACCESS:
        raise unauthorized("Invalid token type.")

    try:
        account_id = int(str(payload[CLAIM_SUB]))
    except ValueError as exc:
        raise unauthorized("Invalid token.") from exc
    if account_id <= 0:
        raise unauthorized("Invalid token.")

    raw_roles = payload.get(CLAIM_ROLES) or []
    if not isinstance(raw_roles, list):
        raise unauthorized("Invalid token.")

    return Session(account_id=account_id, roles=normalize_roles(raw_roles))


def _extract_bearer_token(authorization: str | None) -> str | None:
    if not authorization:
        return None
    parts = authorization.strip().split(" ", 1)
    if len(parts) != 2 or parts[0].lower() != "bearer":
        return None
    return parts[1].strip() or None


def extract_access_token(request: Request, authorization: str | None) -> str | None:
    """Header first, then the access cookie."""
    token = _extract_bearer_token(authorization)
    if token:
        return token
    return request.cookies.get(get_settings().jwt_cookie_name)


def require_session() -> Callable:
    """FastAPI dependency: authenticated Session from the access token."""

    async def dependency(
        request: Request,
        authorization: str | None = Header(None, alias="Authorization"),
    ) -> Session:
        token = extract_access_token(request, authorization)
        if not token:
            raise unauthorized("Missing bearer token.")

        session = decode_access_token(token)
        actor_account_id_var.set(str(session.account_id))
        request.state.session = session
        return session

    return dependency

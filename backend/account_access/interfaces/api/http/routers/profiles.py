"""
===============================================================================
CRC CARD: interfaces/api/http/routers/profiles.py
===============================================================================

Module:
    Profile Router

Responsibilities:
    - Expose profile read/update and identity resolution over HTTP.
    - Convert requests into use case inputs (Session, target id, patch).
    - Translate use case errors into RFC 7807 via error_mapping.

Collaborators:
    - identity.auth.require_session
    - container (use case factories)
    - schemas.profiles (DTOs)

Notes:
    - The path account id is taken as text: anything that is not a positive
      integer is denied exactly like a policy refusal.
===============================================================================
"""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Depends, Query

from .....application.usecases.identity import ResolveIdentityUseCase
from .....application.usecases.profile import (
    FetchProfileUseCase,
    GetVisibleProfileUseCase,
    UpdateVisibleProfileUseCase,
)
from .....container import (
    get_fetch_profile_use_case,
    get_get_visible_profile_use_case,
    get_resolve_identity_use_case,
    get_update_visible_profile_use_case,
)
from .....crosscutting.error_responses import OPENAPI_ERROR_RESPONSES, access_denied
from .....domain.entities import DetailLevel
from .....identity.auth import require_session
from .....identity.roles import Role
from .....identity.session import Session
from ..error_mapping import raise_identity_error, raise_profile_error
from ..schemas.profiles import IdentityRes, ProfileRes, UpdateProfileReq, UpdateProfileRes

router = APIRouter(tags=["profiles"], responses=OPENAPI_ERROR_RESPONSES)


def _parse_target(raw: str) -> Any:
    """ASCII digits -> int; anything else passes through and gets denied."""
    text = raw.strip()
    if text.isascii() and text.isdigit():
        return int(text)
    return raw


@router.get("/accounts/{account_id}/profile", response_model=ProfileRes)
def get_account_profile(
    account_id: str,
    detail: DetailLevel = Query(DetailLevel.FULL),
    session: Session = Depends(require_session()),
    use_case: GetVisibleProfileUseCase = Depends(get_get_visible_profile_use_case),
):
    result = use_case.execute(session, _parse_target(account_id), detail)
    if result.error is not None:
        raise_profile_error(result.error)
    return ProfileRes.from_record(result.profile)


@router.patch("/accounts/{account_id}/profile", response_model=UpdateProfileRes)
def update_account_profile(
    account_id: str,
    req: UpdateProfileReq,
    session: Session = Depends(require_session()),
    use_case: UpdateVisibleProfileUseCase = Depends(
        get_update_visible_profile_use_case
    ),
):
    result = use_case.execute(session, _parse_target(account_id), req.to_patch())
    if result.error is not None:
        raise_profile_error(result.error)
    return UpdateProfileRes(
        is_updated=result.is_updated, profile=ProfileRes.from_record(result.profile)
    )


@router.get("/me/profile", response_model=ProfileRes)
def get_my_profile(
    session: Session = Depends(require_session()),
    use_case: FetchProfileUseCase = Depends(get_fetch_profile_use_case),
):
    """Login-time read: never fails on a missing record."""
    result = use_case.execute_for_login(session.account_id, sorted(session.roles))
    return ProfileRes.from_record(result.profile)


@router.get("/me/identity", response_model=IdentityRes)
def get_my_identity(
    role: Role = Query(..., description="Declared role to resolve"),
    session: Session = Depends(require_session()),
    use_case: ResolveIdentityUseCase = Depends(get_resolve_identity_use_case),
):
    if role not in session.roles:
        raise access_denied()

    result = use_case.execute(session.account_id, role)
    if result.error is not None:
        raise_identity_error(result.error)
    return IdentityRes.from_projection(role.value, result.identity)

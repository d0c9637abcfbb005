"""
===============================================================================
CRC CARD: error_mapping.py (use case error -> HTTP RFC 7807)
===============================================================================

Responsibilities:
  - Translate profile/identity use case error codes into AppHTTPException.
  - Keep the mapping in one place so routers stay thin.

Rules:
  - ACCESS_DENIED never carries details about which rule failed.
===============================================================================
"""

from __future__ import annotations

from ....application.usecases.identity import IdentityError
from ....application.usecases.profile import ProfileError, ProfileErrorCode
from ....crosscutting.error_responses import (
    access_denied,
    field_forbidden,
    identity_inactive,
    nickname_taken,
    profile_not_found,
    validation_failed,
)


def raise_profile_error(error: ProfileError) -> None:
    """Translate ProfileErrorCode -> HTTP (403/404/409/422)."""
    field_errors = [{"field": name} for name in error.fields] or None

    if error.code == ProfileErrorCode.ACCESS_DENIED:
        raise access_denied(error.message)
    if error.code == ProfileErrorCode.FIELD_FORBIDDEN:
        raise field_forbidden(error.message, field_errors)
    if error.code == ProfileErrorCode.PROFILE_NOT_FOUND:
        raise profile_not_found(error.message)
    if error.code == ProfileErrorCode.NICKNAME_TAKEN:
        raise nickname_taken(error.message)
    # VALIDATION_FAILED and any future code
    raise validation_failed(error.message, field_errors)


def raise_identity_error(error: IdentityError) -> None:
    raise identity_inactive(error.message)

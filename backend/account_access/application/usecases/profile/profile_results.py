"""
===============================================================================
PROFILE USE CASE RESULTS (Shared Result / Error Models)
===============================================================================

Name:
    Profile Use Case Results

Business Goal:
    Consistent result and error types for profile read/update use cases.

Why:
    - Use cases return typed results instead of raising for business
      outcomes (denied, not found, forbidden field, invalid value, conflict).
    - The HTTP layer maps codes to status codes in one place.
    - Storage failures are NOT results: they raise DatabaseError.

Notes:
    - A malformed target id and a policy denial share ACCESS_DENIED and the
      same message, so responses never reveal whether an account exists.
===============================================================================
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from ....domain.entities import ProfileRecord


class ProfileErrorCode(str, Enum):
    """
    Stable error categories for profile use cases.

    Codes:
      - ACCESS_DENIED: invalid target or visibility policy refused.
      - PROFILE_NOT_FOUND: the target has no stored profile record.
      - FIELD_FORBIDDEN: the patch supplied a field the actor may not write.
      - VALIDATION_FAILED: a supplied value is malformed.
      - NICKNAME_TAKEN: another account already uses the nickname.
    """

    ACCESS_DENIED = "ACCESS_DENIED"
    PROFILE_NOT_FOUND = "PROFILE_NOT_FOUND"
    FIELD_FORBIDDEN = "FIELD_FORBIDDEN"
    VALIDATION_FAILED = "VALIDATION_FAILED"
    NICKNAME_TAKEN = "NICKNAME_TAKEN"


@dataclass(frozen=True)
class ProfileError:
    """
    Use case error.

    Fields:
      - code: ProfileErrorCode
      - message: human readable, never reveals which rule failed
      - fields: offending patch keys (FIELD_FORBIDDEN / VALIDATION_FAILED)
    """

    code: ProfileErrorCode
    message: str
    fields: tuple[str, ...] = ()


MSG_ACCESS_DENIED = "Access denied."
MSG_PROFILE_NOT_FOUND = "Profile not found."


def access_denied_error() -> ProfileError:
    return ProfileError(code=ProfileErrorCode.ACCESS_DENIED, message=MSG_ACCESS_DENIED)


def profile_not_found_error() -> ProfileError:
    return ProfileError(
        code=ProfileErrorCode.PROFILE_NOT_FOUND, message=MSG_PROFILE_NOT_FOUND
    )


@dataclass
class ProfileResult:
    """
    Result for profile reads.

    Contract:
      - Success: profile != None and error == None
      - Failure: profile == None and error != None
    """

    profile: ProfileRecord | None = None
    error: ProfileError | None = None


@dataclass
class UpdateProfileResult:
    """
    Result for profile updates.

    Fields:
      - profile: view after the operation (unchanged view on a no-op)
      - is_updated: False when the normalized patch changed nothing
      - error: typed error if the update was rejected
    """

    profile: ProfileRecord | None = None
    is_updated: bool = False
    error: ProfileError | None = None

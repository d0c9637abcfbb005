"""
Name: Profile Update Field Authorizer

Responsibilities:
  - Compute the set of profile fields an actor may write
  - Report patch keys that fall outside that set

Notes:
  - Tables are immutable module constants.
  - A supplied-but-forbidden key is a hard failure for the whole patch.
    An omitted key is a no-op.
  - access_group, identity links and timestamps are never writable.
"""

from __future__ import annotations

from enum import Enum
from typing import Iterable

from ..identity.roles import Role, expand_roles


class ProfileField(str, Enum):
    NICKNAME = "nickname"
    GENDER = "gender"
    BIRTH_DATE = "birth_date"
    AVATAR_URL = "avatar_url"
    EMAIL = "email"
    SIGNATURE = "signature"
    ADDRESS = "address"
    PHONE = "phone"
    TAGS = "tags"
    GEOGRAPHIC = "geographic"
    USER_STATE = "user_state"
    NOTIFY_COUNT = "notify_count"
    UNREAD_COUNT = "unread_count"


FULL_WRITABLE_FIELDS: frozenset[ProfileField] = frozenset(ProfileField)

PRIVILEGED_FIELDS: frozenset[ProfileField] = frozenset(
    {ProfileField.USER_STATE, ProfileField.NOTIFY_COUNT, ProfileField.UNREAD_COUNT}
)

NON_PRIVILEGED_FIELDS: frozenset[ProfileField] = FULL_WRITABLE_FIELDS - PRIVILEGED_FIELDS

MANAGER_OTHER_FIELDS: frozenset[ProfileField] = frozenset(
    {ProfileField.NICKNAME, ProfileField.AVATAR_URL, ProfileField.PHONE}
)


def allowed_fields(
    actor_roles: Iterable[Role], *, is_self: bool, is_admin: bool
) -> frozenset[ProfileField]:
    """R: Writable fields for this actor/target relationship."""
    is_manager = Role.MANAGER in expand_roles(actor_roles)

    if is_admin or (is_manager and is_self):
        return FULL_WRITABLE_FIELDS

    if is_manager:
        return MANAGER_OTHER_FIELDS

    return NON_PRIVILEGED_FIELDS


def find_forbidden_fields(
    patch_keys: Iterable[str], allowed: frozenset[ProfileField]
) -> list[str]:
    """R: Supplied keys outside `allowed` (unknown keys included), sorted."""
    allowed_names = {f.value for f in allowed}
    return sorted({key for key in patch_keys if key not in allowed_names})

"""
Name: Profile Field Normalization

Responsibilities:
  - Validate and normalize each writable profile field
  - Produce values directly comparable with the stored ProfileRecord

Collaborators:
  - application/usecases/profile/update_visible_profile.py

Notes:
  - Nickname uniqueness is NOT checked here; it needs the store and runs
    inside the update transaction.
"""

from __future__ import annotations

import re
from datetime import date
from types import MappingProxyType
from typing import Any, Callable, Mapping

from .entities import Gender, GeographicInfo, UserState
from .update_policy import ProfileField

NICKNAME_MAX = 50
MAX_TAGS = 20
TAG_MAX = 50
GEO_PART_MAX = 64

_BIRTH_DATE_RE = re.compile(r"^\d{4}-\d{2}-\d{2}$")


class FieldValidationError(ValueError):
    """R: A single field failed validation."""

    def __init__(self, field: str, message: str):
        self.field = field
        self.message = message
        super().__init__(f"{field}: {message}")


def _nickname(value: Any) -> str:
    if not isinstance(value, str):
        raise FieldValidationError("nickname", "must be a string")
    trimmed = value.strip()
    if not trimmed:
        raise FieldValidationError("nickname", "must not be empty")
    if len(trimmed) > NICKNAME_MAX:
        raise FieldValidationError("nickname", f"must be at most {NICKNAME_MAX} characters")
    return trimmed


def _enum(field: str, enum_cls, default):
    def normalize(value: Any):
        if value is None:
            return default
        try:
            return enum_cls(value.upper() if isinstance(value, str) else value)
        except ValueError:
            allowed = ", ".join(m.value for m in enum_cls)
            raise FieldValidationError(field, f"must be one of: {allowed}") from None

    return normalize


def _birth_date(value: Any) -> str | None:
    if value is None:
        return None
    if not isinstance(value, str) or not _BIRTH_DATE_RE.match(value):
        raise FieldValidationError("birth_date", "must be formatted as YYYY-MM-DD")
    try:
        date.fromisoformat(value)
    except ValueError:
        raise FieldValidationError("birth_date", "is not a valid calendar date") from None
    return value


def _text(field: str, max_len: int):
    def normalize(value: Any) -> str | None:
        if value is None:
            return None
        if not isinstance(value, str):
            raise FieldValidationError(field, "must be a string")
        if len(value) > max_len:
            raise FieldValidationError(field, f"must be at most {max_len} characters")
        return value

    return normalize


def _tags(value: Any) -> tuple[str, ...] | None:
    if value is None:
        return None
    if not isinstance(value, (list, tuple)):
        raise FieldValidationError("tags", "must be a list of strings")
    if len(value) > MAX_TAGS:
        raise FieldValidationError("tags", f"must contain at most {MAX_TAGS} items")
    for tag in value:
        if not isinstance(tag, str):
            raise FieldValidationError("tags", "must be a list of strings")
        if len(tag) > TAG_MAX:
            raise FieldValidationError("tags", f"each tag must be at most {TAG_MAX} characters")
    return tuple(value)


def _geographic(value: Any) -> GeographicInfo | None:
    if value is None:
        return None
    if isinstance(value, GeographicInfo):
        value = {"province": value.province, "city": value.city}
    if not isinstance(value, Mapping):
        raise FieldValidationError("geographic", "must be an object with province/city")
    unknown = set(value) - {"province", "city"}
    if unknown:
        raise FieldValidationError("geographic", f"unknown keys: {', '.join(sorted(unknown))}")
    parts = {}
    for key in ("province", "city"):
        part = value.get(key)
        if part is not None and not isinstance(part, str):
            raise FieldValidationError("geographic", f"{key} must be a string")
        if part is not None and len(part) > GEO_PART_MAX:
            raise FieldValidationError(
                "geographic", f"{key} must be at most {GEO_PART_MAX} characters"
            )
        parts[key] = part
    return GeographicInfo(**parts)


def _count(field: str):
    def normalize(value: Any) -> int:
        # bool is an int subclass; reject it explicitly
        if isinstance(value, bool) or not isinstance(value, int):
            raise FieldValidationError(field, "must be an integer")
        if value < 0:
            raise FieldValidationError(field, "must be non-negative")
        return value

    return normalize


FIELD_NORMALIZERS: Mapping[ProfileField, Callable[[Any], Any]] = MappingProxyType(
    {
        ProfileField.NICKNAME: _nickname,
        ProfileField.GENDER: _enum("gender", Gender, Gender.SECRET),
        ProfileField.BIRTH_DATE: _birth_date,
        ProfileField.AVATAR_URL: _text("avatar_url", 255),
        ProfileField.EMAIL: _text("email", 50),
        ProfileField.SIGNATURE: _text("signature", 100),
        ProfileField.ADDRESS: _text("address", 255),
        ProfileField.PHONE: _text("phone", 20),
        ProfileField.TAGS: _tags,
        ProfileField.GEOGRAPHIC: _geographic,
        ProfileField.USER_STATE: _enum("user_state", UserState, UserState.PENDING),
        ProfileField.NOTIFY_COUNT: _count("notify_count"),
        ProfileField.UNREAD_COUNT: _count("unread_count"),
    }
)


def normalize_patch(patch: Mapping[str, Any]) -> dict[ProfileField, Any]:
    """
    R: Normalize every key of an already-authorized patch.

    Raises:
        FieldValidationError: first field that fails.
    """
    normalized: dict[ProfileField, Any] = {}
    for key, value in patch.items():
        field = ProfileField(key)
        normalized[field] = FIELD_NORMALIZERS[field](value)
    return normalized

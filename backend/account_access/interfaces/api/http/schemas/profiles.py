"""
===============================================================================
CRC CARD: schemas/profiles.py
===============================================================================

Module:
    HTTP schemas for profiles and identities

Responsibilities:
    - Response DTOs for profile views and resolved identities.
    - The profile patch request: every key the client sends is kept as-is
      so the use case can tell "omitted" from "present but forbidden".

Collaborators:
    - domain.entities (ProfileRecord, identity projections)
===============================================================================
"""

from __future__ import annotations

from dataclasses import asdict
from datetime import date, datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from .....domain.entities import (
    Gender,
    IdentityKind,
    IdentityProjection,
    ProfileRecord,
    UserState,
)


# -----------------------------------------------------------------------------
# Requests
# -----------------------------------------------------------------------------
class UpdateProfileReq(BaseModel):
    """
    Partial profile patch.

    Values are typed loosely on purpose: field rules and permissions are
    applied by the use case, which reports FIELD_FORBIDDEN / VALIDATION_FAILED.
    Unknown keys are kept (and rejected as forbidden downstream).
    """

    model_config = ConfigDict(extra="allow")

    nickname: Any = None
    gender: Any = None
    birth_date: Any = Field(default=None, description="YYYY-MM-DD or null")
    avatar_url: Any = None
    email: Any = None
    signature: Any = None
    address: Any = None
    phone: Any = None
    tags: Any = None
    geographic: Any = Field(default=None, description="{province, city} or null")
    user_state: Any = Field(default=None, description="Manager/admin only")
    notify_count: Any = Field(default=None, description="Manager/admin only")
    unread_count: Any = Field(default=None, description="Manager/admin only")

    def to_patch(self) -> dict[str, Any]:
        """Only the keys the client actually sent (explicit nulls included)."""
        return self.model_dump(exclude_unset=True)


# -----------------------------------------------------------------------------
# Responses
# -----------------------------------------------------------------------------
class GeographicRes(BaseModel):
    province: str | None = None
    city: str | None = None


class ProfileRes(BaseModel):
    account_id: int
    nickname: str
    gender: Gender
    birth_date: str | None = None
    avatar_url: str | None = None
    email: str | None = None
    signature: str | None = None
    access_group: list[str]
    address: str | None = None
    phone: str | None = None
    tags: list[str] | None = None
    geographic: GeographicRes | None = None
    notify_count: int
    unread_count: int
    user_state: UserState
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_record(cls, record: ProfileRecord) -> "ProfileRes":
        return cls(
            account_id=record.account_id,
            nickname=record.nickname,
            gender=record.gender,
            birth_date=record.birth_date,
            avatar_url=record.avatar_url,
            email=record.email,
            signature=record.signature,
            access_group=list(record.access_group),
            address=record.address,
            phone=record.phone,
            tags=list(record.tags) if record.tags is not None else None,
            geographic=(
                GeographicRes(
                    province=record.geographic.province, city=record.geographic.city
                )
                if record.geographic is not None
                else None
            ),
            notify_count=record.notify_count,
            unread_count=record.unread_count,
            user_state=record.user_state,
            created_at=record.created_at,
            updated_at=record.updated_at,
        )


class UpdateProfileRes(BaseModel):
    is_updated: bool
    profile: ProfileRes


class IdentityRes(BaseModel):
    """Resolved identity; `kind` discriminates the projection payload."""

    role: str
    kind: IdentityKind | None = None
    identity: dict[str, Any] | None = None

    @classmethod
    def from_projection(
        cls, role: str, projection: IdentityProjection | None
    ) -> "IdentityRes":
        if projection is None:
            return cls(role=role)
        payload = {
            key: value.isoformat() if isinstance(value, (date, datetime)) else value
            for key, value in asdict(projection).items()
            if key != "kind"
        }
        return cls(role=role, kind=projection.kind, identity=payload)

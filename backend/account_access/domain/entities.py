"""
Name: Domain Entities (profile record + identity projections)

Responsibilities:
  - Define the shared profile record attached to an account
  - Define role-specific identity projections as a tagged union
  - Provide safe defaults so an absent record is always representable

Collaborators:
  - domain/repositories.py: persist/retrieve these entities
  - application/usecases: build and consume them
  - interfaces/api: serialize them into DTOs

Notes:
  - No DB/FastAPI dependencies.
  - Every projection carries its IdentityKind as data; callers match on
    `kind`, never on which attributes happen to be present.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime, timezone
from enum import Enum
from typing import Union


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Gender(str, Enum):
    MALE = "MALE"
    FEMALE = "FEMALE"
    SECRET = "SECRET"


class UserState(str, Enum):
    ACTIVE = "ACTIVE"
    INACTIVE = "INACTIVE"
    SUSPENDED = "SUSPENDED"
    PENDING = "PENDING"


class DetailLevel(str, Enum):
    BASIC = "BASIC"
    FULL = "FULL"


@dataclass(frozen=True)
class GeographicInfo:
    """R: Structured location; compared by value."""

    province: str | None = None
    city: str | None = None


# ---------------------------------------------------------------------------
# Profile record
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class ProfileRecord:
    """
    Shared profile ("user info") owned by an account.

    One account has at most one record. `access_group` mirrors the account's
    declared roles and is never writable through a profile patch.
    """

    account_id: int
    nickname: str = ""
    gender: Gender = Gender.SECRET
    birth_date: str | None = None
    avatar_url: str | None = None
    email: str | None = None
    signature: str | None = None
    access_group: tuple[str, ...] = ()
    address: str | None = None
    phone: str | None = None
    tags: tuple[str, ...] | None = None
    geographic: GeographicInfo | None = None
    notify_count: int = 0
    unread_count: int = 0
    user_state: UserState = UserState.PENDING
    created_at: datetime = field(default_factory=utcnow)
    updated_at: datetime = field(default_factory=utcnow)


# ---------------------------------------------------------------------------
# Identity projections
# ---------------------------------------------------------------------------


class IdentityKind(str, Enum):
    MANAGER = "MANAGER"
    COACH = "COACH"
    CUSTOMER = "CUSTOMER"
    LEARNER = "LEARNER"
    STAFF = "STAFF"


@dataclass(frozen=True)
class ManagerIdentity:
    id: int
    account_id: int
    name: str
    job_title: str | None = None
    department_id: int | None = None
    deactivated_at: datetime | None = None
    kind: IdentityKind = field(default=IdentityKind.MANAGER, init=False)

    @property
    def is_active(self) -> bool:
        return self.deactivated_at is None


@dataclass(frozen=True)
class CoachIdentity:
    id: int
    account_id: int
    name: str
    level: int = 1
    specialty: str | None = None
    deactivated_at: datetime | None = None
    kind: IdentityKind = field(default=IdentityKind.COACH, init=False)

    @property
    def is_active(self) -> bool:
        return self.deactivated_at is None


@dataclass(frozen=True)
class CustomerIdentity:
    id: int
    account_id: int
    name: str
    contact_phone: str | None = None
    membership_level: int = 0
    remaining_sessions: int = 0
    deactivated_at: datetime | None = None
    kind: IdentityKind = field(default=IdentityKind.CUSTOMER, init=False)

    @property
    def is_active(self) -> bool:
        return self.deactivated_at is None


@dataclass(frozen=True)
class LearnerIdentity:
    id: int
    account_id: int
    customer_id: int
    name: str
    gender: Gender = Gender.SECRET
    birth_date: date | None = None
    deactivated_at: datetime | None = None
    kind: IdentityKind = field(default=IdentityKind.LEARNER, init=False)

    @property
    def is_active(self) -> bool:
        return self.deactivated_at is None


@dataclass(frozen=True)
class StaffIdentity:
    id: int
    account_id: int
    name: str
    job_title: str | None = None
    department_id: int | None = None
    deactivated_at: datetime | None = None
    kind: IdentityKind = field(default=IdentityKind.STAFF, init=False)

    @property
    def is_active(self) -> bool:
        return self.deactivated_at is None


IdentityProjection = Union[
    ManagerIdentity, CoachIdentity, CustomerIdentity, LearnerIdentity, StaffIdentity
]

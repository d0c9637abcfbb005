"""
===============================================================================
USE CASE: Fetch Profile (view builder)
===============================================================================

Name:
    Profile View Builder / Fetch Profile Use Case

Business Goal:
    Turn a stored profile record (or its absence) into the outward view.

Responsibilities:
    - build_profile_view: fill safe defaults so a missing record is still a
      valid view (login-time reads).
    - FetchProfileUseCase.execute_for_login: lenient read, never fails.
    - FetchProfileUseCase.execute_strict: absent record -> PROFILE_NOT_FOUND.

Collaborators:
    - ProfileRepository.find_profile_by_account_id
    - profile_results
===============================================================================
"""

from __future__ import annotations

from dataclasses import replace
from datetime import datetime
from typing import Iterable

from ....domain.entities import ProfileRecord, utcnow
from ....domain.repositories import ProfileRepository
from ....identity.roles import Role
from .profile_results import ProfileResult, profile_not_found_error

DEFAULT_ACCESS_GROUP: tuple[str, ...] = (Role.REGISTRANT.value,)


def _normalize_access_group(access_group: Iterable[str | Role] | None) -> tuple[str, ...]:
    names = tuple(
        item.value if isinstance(item, Role) else str(item)
        for item in (access_group or ())
    )
    return names or DEFAULT_ACCESS_GROUP


def _normalize_tags(tags) -> tuple[str, ...] | None:
    if isinstance(tags, (list, tuple)):
        return tuple(str(tag) for tag in tags)
    return None


def build_profile_view(
    stored: ProfileRecord | None,
    account_id: int,
    access_group: Iterable[str | Role] | None = None,
    now: datetime | None = None,
) -> ProfileRecord:
    """
    Build the outward profile view.

    - stored is None -> a default record (empty nickname, SECRET gender,
      zero counters, PENDING state, timestamps = now).
    - access_group (when given) overrides the stored one; an empty group
      falls back to [REGISTRANT].
    """
    if stored is None:
        timestamp = now or utcnow()
        return ProfileRecord(
            account_id=account_id,
            access_group=_normalize_access_group(access_group),
            created_at=timestamp,
            updated_at=timestamp,
        )

    group = access_group if access_group is not None else stored.access_group
    return replace(
        stored,
        access_group=_normalize_access_group(group),
        tags=_normalize_tags(stored.tags),
    )


class FetchProfileUseCase:
    """Query: read the profile view for an account (no authorization)."""

    def __init__(self, profile_repository: ProfileRepository) -> None:
        self._profiles = profile_repository

    def execute_for_login(
        self, account_id: int, access_group: Iterable[str | Role] | None = None
    ) -> ProfileResult:
        stored = self._profiles.find_profile_by_account_id(account_id)
        return ProfileResult(profile=build_profile_view(stored, account_id, access_group))

    def execute_strict(self, account_id: int) -> ProfileResult:
        stored = self._profiles.find_profile_by_account_id(account_id)
        if stored is None:
            return ProfileResult(error=profile_not_found_error())
        return ProfileResult(profile=build_profile_view(stored, account_id))

"""
===============================================================================
USE CASE: Get Visible Profile
===============================================================================

Name:
    Get Visible Profile Use Case

Business Goal:
    Return a target account's profile if the actor may see it, at the
    requested detail level.

Flow:
    1) validate target + visibility policy      -> ACCESS_DENIED
    2) strict read of the stored record          -> PROFILE_NOT_FOUND
    3) mask to BASIC when requested

Collaborators:
    - profile_access.authorize_profile_access
    - FetchProfileUseCase.execute_strict
    - domain.profile_masking.to_basic
===============================================================================
"""

from __future__ import annotations

from typing import Any

from ....domain.entities import DetailLevel
from ....domain.profile_masking import to_basic
from ....domain.repositories import ProfileRepository
from ....identity.session import Session
from .ownership_facts import OwnershipFactGatherer
from .profile_access import authorize_profile_access
from .profile_results import ProfileResult
from .profile_view import FetchProfileUseCase


class GetVisibleProfileUseCase:
    """Query: read another (or the own) account's profile under the visibility policy."""

    def __init__(
        self,
        fact_gatherer: OwnershipFactGatherer,
        profile_repository: ProfileRepository,
    ) -> None:
        self._facts = fact_gatherer
        self._fetch = FetchProfileUseCase(profile_repository)

    def execute(
        self,
        session: Session,
        target_account_id: Any,
        detail: DetailLevel = DetailLevel.FULL,
    ) -> ProfileResult:
        _, error = authorize_profile_access(
            session=session,
            target_account_id=target_account_id,
            fact_gatherer=self._facts,
            operation="read",
        )
        if error is not None:
            return ProfileResult(error=error)

        result = self._fetch.execute_strict(target_account_id)
        if result.error is not None or detail != DetailLevel.BASIC:
            return result
        return ProfileResult(profile=to_basic(result.profile))

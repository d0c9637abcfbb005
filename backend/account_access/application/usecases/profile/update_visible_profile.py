"""
===============================================================================
USE CASE: Update Visible Profile
===============================================================================

Name:
    Update Visible Profile Use Case

Business Goal:
    Apply a partial profile patch on behalf of an actor, writing only the
    fields that actor may write and only when something actually changes.

Flow:
    1) validate target + visibility policy       -> ACCESS_DENIED
    2) allowed_fields; any key outside the set    -> FIELD_FORBIDDEN
       (the whole patch is rejected, nothing applied)
    3) inside one ProfileRepository.transaction():
         a) re-read the record (locked)           -> PROFILE_NOT_FOUND
         b) normalize supplied values             -> VALIDATION_FAILED
         c) diff against stored values
         d) nickname uniqueness                   -> NICKNAME_TAKEN
         e) save only when the change set is non-empty
            (NicknameConflictError at save        -> NICKNAME_TAKEN)
    4) empty change set -> is_updated=False with the unchanged view

Collaborators:
    - profile_access.authorize_profile_access
    - domain.update_policy (allowed_fields, find_forbidden_fields)
    - domain.profile_fields.normalize_patch
    - ProfileRepository.transaction() / ProfileTransaction
===============================================================================
"""

from __future__ import annotations

from dataclasses import replace
from typing import Any, Mapping

from ....crosscutting.logger import logger
from ....crosscutting.metrics import record_profile_update
from ....domain.entities import utcnow
from ....domain.profile_fields import FieldValidationError, normalize_patch
from ....domain.repositories import NicknameConflictError, ProfileRepository
from ....domain.update_policy import ProfileField, allowed_fields, find_forbidden_fields
from ....identity.roles import Role
from ....identity.session import Session
from .ownership_facts import OwnershipFactGatherer
from .profile_access import authorize_profile_access
from .profile_results import (
    ProfileError,
    ProfileErrorCode,
    UpdateProfileResult,
    profile_not_found_error,
)
from .profile_view import build_profile_view


class UpdateVisibleProfileUseCase:
    """Command: patch a profile under the visibility and field policies."""

    def __init__(
        self,
        fact_gatherer: OwnershipFactGatherer,
        profile_repository: ProfileRepository,
    ) -> None:
        self._facts = fact_gatherer
        self._profiles = profile_repository

    def execute(
        self,
        session: Session,
        target_account_id: Any,
        patch: Mapping[str, Any],
    ) -> UpdateProfileResult:
        # ---------------------------------------------------------------------
        # 1) Authorization (same path as reads).
        # ---------------------------------------------------------------------
        facts, error = authorize_profile_access(
            session=session,
            target_account_id=target_account_id,
            fact_gatherer=self._facts,
            operation="update",
        )
        if error is not None:
            return self._fail(error)

        # ---------------------------------------------------------------------
        # 2) Field authorization: forbidden keys reject the whole patch.
        # ---------------------------------------------------------------------
        allowed = allowed_fields(
            session.roles,
            is_self=facts.is_self,
            is_admin=Role.ADMIN in session.effective_roles,
        )
        forbidden = find_forbidden_fields(patch.keys(), allowed)
        if forbidden:
            logger.warning(
                "profile patch rejected: forbidden fields",
                extra={"target_account_id": target_account_id, "fields": forbidden},
            )
            return self._fail(
                ProfileError(
                    code=ProfileErrorCode.FIELD_FORBIDDEN,
                    message=f"Fields not writable: {', '.join(forbidden)}",
                    fields=tuple(forbidden),
                )
            )

        # ---------------------------------------------------------------------
        # 3) Re-read, normalize, diff, uniqueness and write in one unit of work.
        # ---------------------------------------------------------------------
        with self._profiles.transaction() as tx:
            current = tx.find_profile_for_update(target_account_id)
            if current is None:
                return self._fail(profile_not_found_error())

            try:
                normalized = normalize_patch(patch)
            except FieldValidationError as exc:
                return self._fail(
                    ProfileError(
                        code=ProfileErrorCode.VALIDATION_FAILED,
                        message=str(exc),
                        fields=(exc.field,),
                    )
                )

            changes = {
                field.value: value
                for field, value in normalized.items()
                if getattr(current, field.value) != value
            }

            if not changes:
                record_profile_update("noop")
                return UpdateProfileResult(
                    profile=build_profile_view(current, target_account_id),
                    is_updated=False,
                )

            nickname = changes.get(ProfileField.NICKNAME.value)
            if nickname is not None and tx.nickname_taken(
                nickname, exclude_account_id=target_account_id
            ):
                return self._fail(_nickname_taken())

            try:
                saved = tx.save_profile(replace(current, **changes, updated_at=utcnow()))
            except NicknameConflictError:
                return self._fail(_nickname_taken())

        logger.info(
            "profile updated",
            extra={"target_account_id": target_account_id, "fields": sorted(changes)},
        )
        record_profile_update("updated")
        return UpdateProfileResult(
            profile=build_profile_view(saved, target_account_id), is_updated=True
        )

    @staticmethod
    def _fail(error: ProfileError) -> UpdateProfileResult:
        record_profile_update(error.code.value)
        return UpdateProfileResult(error=error)


def _nickname_taken() -> ProfileError:
    return ProfileError(
        code=ProfileErrorCode.NICKNAME_TAKEN,
        message="Nickname already in use.",
        fields=(ProfileField.NICKNAME.value,),
    )

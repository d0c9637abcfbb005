"""
===============================================================================
PROFILE ACCESS HELPER (shared read/update authorization path)
===============================================================================

Name:
    Profile Access Helper

Business Goal:
    One authorization path for reading and updating a profile so both
    operations validate targets and apply the visibility policy identically.

Responsibilities:
    - Reject malformed target ids (non-integer, bool, <= 0) as ACCESS_DENIED.
    - Gather ownership facts and evaluate can_view_profile.
    - Log every decision with its internal reason; callers only ever see
      the constant ACCESS_DENIED error.

Collaborators:
    - OwnershipFactGatherer
    - domain.visibility_policy.can_view_profile
    - crosscutting.metrics.record_access_decision
===============================================================================
"""

from __future__ import annotations

from typing import Any, Tuple

from ....crosscutting.logger import logger
from ....crosscutting.metrics import record_access_decision
from ....domain.visibility_policy import OwnershipFacts, can_view_profile
from ....identity.session import Session
from .ownership_facts import OwnershipFactGatherer
from .profile_results import ProfileError, access_denied_error


def is_valid_target(target_account_id: Any) -> bool:
    return (
        isinstance(target_account_id, int)
        and not isinstance(target_account_id, bool)
        and target_account_id > 0
    )


def authorize_profile_access(
    *,
    session: Session,
    target_account_id: Any,
    fact_gatherer: OwnershipFactGatherer,
    operation: str,
) -> Tuple[OwnershipFacts | None, ProfileError | None]:
    """
    Returns:
      - (facts, None) if the actor may view the target
      - (None, ACCESS_DENIED) otherwise
    """
    if not is_valid_target(target_account_id):
        _log_decision(session, target_account_id, operation, False, "invalid_target")
        return None, access_denied_error()

    facts = fact_gatherer.gather(session, target_account_id)
    allowed = can_view_profile(session.roles, facts)
    _log_decision(
        session,
        target_account_id,
        operation,
        allowed,
        "policy_allow" if allowed else "policy_deny",
    )
    if not allowed:
        return None, access_denied_error()
    return facts, None


def _log_decision(
    session: Session, target: Any, operation: str, allowed: bool, reason: str
) -> None:
    record_access_decision(operation=operation, allowed=allowed)
    logger.info(
        "profile access decision",
        extra={
            "operation": operation,
            "allowed": allowed,
            "reason": reason,
            "actor_account_id": session.account_id,
            "target_account_id": str(target),
        },
    )

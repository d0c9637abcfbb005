"""
Name: Profile Visibility Policy

Responsibilities:
  - Decide whether an actor may view a target account's profile

Notes:
  - Pure and total over OwnershipFacts; no I/O.
  - Rules are evaluated in a fixed order, first match wins.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable

from ..identity.roles import Role, expand_roles


@dataclass(frozen=True)
class OwnershipFacts:
    """R: Target relative to the actor, computed fresh for each request."""

    is_self: bool = False
    target_is_coach: bool = False
    target_is_customer: bool = False
    target_is_learner: bool = False
    customer_owns_target_learner: bool = False


_OVERSIGHT_ROLES = frozenset({Role.MANAGER, Role.COACH})
_RELEVANT_ROLES = frozenset({Role.COACH, Role.MANAGER, Role.CUSTOMER})


def can_view_profile(actor_roles: Iterable[Role], facts: OwnershipFacts) -> bool:
    """R: Read access policy for account profiles."""
    if facts.is_self:
        return True

    effective = expand_roles(actor_roles)

    if Role.ADMIN in effective:
        return True

    # A learner never sees anyone else, other learners included
    if effective == frozenset({Role.LEARNER}):
        return False

    if not effective & _RELEVANT_ROLES:
        return False

    if effective & _OVERSIGHT_ROLES:
        return (
            facts.target_is_coach
            or facts.target_is_customer
            or facts.target_is_learner
        )

    if Role.CUSTOMER in effective:
        return facts.customer_owns_target_learner

    return False

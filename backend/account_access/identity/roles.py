"""
Name: Role Model

Responsibilities:
  - Define the finite role vocabulary
  - Expand a raw session role set into its effective role set
  - Parse role names coming from tokens or stored access groups

Collaborators:
  - domain/visibility_policy.py: consumes effective roles
  - domain/update_policy.py: consumes effective roles
  - identity/auth.py: parses the token "roles" claim

Notes:
  - Roles are flat; any hierarchy lives only in ROLE_IMPLICATIONS.
  - ROLE_IMPLICATIONS is read-only; broadening rules are added there and
    nowhere else.
"""

from __future__ import annotations

from enum import Enum
from types import MappingProxyType
from typing import Iterable, Mapping


class Role(str, Enum):
    """R: Roles an account can declare."""

    ADMIN = "ADMIN"
    MANAGER = "MANAGER"
    COACH = "COACH"
    CUSTOMER = "CUSTOMER"
    LEARNER = "LEARNER"
    STAFF = "STAFF"
    REGISTRANT = "REGISTRANT"


# R: role -> roles it additionally grants. Baseline: nothing broadens.
ROLE_IMPLICATIONS: Mapping[Role, frozenset[Role]] = MappingProxyType(
    {role: frozenset() for role in Role}
)


def normalize_roles(raw: Iterable[Role | str] | None) -> frozenset[Role]:
    """R: Parse role values/names (case-insensitive); unknown names are dropped."""
    if not raw:
        return frozenset()

    roles: set[Role] = set()
    for item in raw:
        if isinstance(item, Role):
            roles.add(item)
            continue
        if not isinstance(item, str):
            continue
        try:
            roles.add(Role(item.strip().upper()))
        except ValueError:
            continue
    return frozenset(roles)


def expand_roles(roles: Iterable[Role]) -> frozenset[Role]:
    """
    R: Effective role set (transitive closure over ROLE_IMPLICATIONS).

    Total and pure; expand_roles(expand_roles(r)) == expand_roles(r), and a
    non-empty input never yields an empty output.
    """
    effective = set(roles)
    pending = list(effective)
    while pending:
        for implied in ROLE_IMPLICATIONS.get(pending.pop(), frozenset()):
            if implied not in effective:
                effective.add(implied)
                pending.append(implied)
    return frozenset(effective)


def has_role(roles: Iterable[Role], role: Role) -> bool:
    return role in expand_roles(roles)


def is_pure_learner(roles: Iterable[Role]) -> bool:
    """R: Effective roles are exactly {LEARNER}."""
    return expand_roles(roles) == frozenset({Role.LEARNER})

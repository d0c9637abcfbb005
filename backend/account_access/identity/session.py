"""
Name: Session

Responsibilities:
  - Carry the authenticated actor (account id + raw declared roles)
    for the duration of one request
"""

from __future__ import annotations

from dataclasses import dataclass, field

from .roles import Role, expand_roles


@dataclass(frozen=True)
class Session:
    """R: Authenticated actor. Roles are raw, as declared on the account."""

    account_id: int
    roles: frozenset[Role] = field(default_factory=frozenset)

    @property
    def effective_roles(self) -> frozenset[Role]:
        return expand_roles(self.roles)

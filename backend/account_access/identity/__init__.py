"""
Name: Identity Layer Exports

Responsibilities:
  - Expose the role vocabulary and the request Session
"""

from .roles import Role, expand_roles, has_role, is_pure_learner, normalize_roles
from .session import Session

__all__ = [
    "Role",
    "Session",
    "expand_roles",
    "has_role",
    "is_pure_learner",
    "normalize_roles",
]

"""
Name: Domain Layer Exports

Responsibilities:
  - Re-export entities, contracts and pure policies for clean imports

Rules:
  - Only domain contracts/entities here; no infrastructure imports.
"""

from .entities import (
    CoachIdentity,
    CustomerIdentity,
    DetailLevel,
    Gender,
    GeographicInfo,
    IdentityKind,
    IdentityProjection,
    LearnerIdentity,
    ManagerIdentity,
    ProfileRecord,
    StaffIdentity,
    UserState,
)
from .profile_masking import to_basic
from .repositories import (
    IdentityProjectionRepository,
    NicknameConflictError,
    ProfileRepository,
    ProfileTransaction,
)
from .update_policy import ProfileField, allowed_fields, find_forbidden_fields
from .visibility_policy import OwnershipFacts, can_view_profile

__all__ = [
    "CoachIdentity",
    "CustomerIdentity",
    "DetailLevel",
    "Gender",
    "GeographicInfo",
    "IdentityKind",
    "IdentityProjection",
    "IdentityProjectionRepository",
    "LearnerIdentity",
    "ManagerIdentity",
    "NicknameConflictError",
    "OwnershipFacts",
    "ProfileField",
    "ProfileRecord",
    "ProfileRepository",
    "ProfileTransaction",
    "StaffIdentity",
    "UserState",
    "allowed_fields",
    "can_view_profile",
    "find_forbidden_fields",
    "to_basic",
]

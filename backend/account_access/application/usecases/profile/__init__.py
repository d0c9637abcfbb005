"""
===============================================================================
PROFILE USE CASES PACKAGE (Public API / Exports)
===============================================================================

Single import point for profile read/update use cases, their results and
the shared authorization helpers.
===============================================================================
"""

from .get_visible_profile import GetVisibleProfileUseCase
from .ownership_facts import OwnershipFactGatherer, plan_lookups
from .profile_access import authorize_profile_access, is_valid_target
from .profile_results import (
    ProfileError,
    ProfileErrorCode,
    ProfileResult,
    UpdateProfileResult,
)
from .profile_view import FetchProfileUseCase, build_profile_view
from .update_visible_profile import UpdateVisibleProfileUseCase

__all__ = [
    "FetchProfileUseCase",
    "GetVisibleProfileUseCase",
    "OwnershipFactGatherer",
    "ProfileError",
    "ProfileErrorCode",
    "ProfileResult",
    "UpdateProfileResult",
    "UpdateVisibleProfileUseCase",
    "authorize_profile_access",
    "build_profile_view",
    "is_valid_target",
    "plan_lookups",
]

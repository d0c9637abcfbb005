"""
===============================================================================
USE CASE: Resolve Identity
===============================================================================

Name:
    Resolve Identity Use Case

Business Goal:
    Resolve an account plus its declared role (login / "who am I") into the
    matching identity projection.

Rules:
    - The declared role is the discriminant; the lookup is an explicit
      dispatch table keyed by Role.
    - REGISTRANT and ADMIN have no projection -> identity None.
    - Projection not stored -> identity None (not an error).
    - Projection deactivated -> IDENTITY_INACTIVE.

Collaborators:
    - IdentityProjectionRepository
===============================================================================
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType
from typing import Callable, Mapping, Optional

from ....crosscutting.logger import logger
from ....domain.entities import IdentityProjection
from ....domain.repositories import IdentityProjectionRepository
from ....identity.roles import Role


class IdentityErrorCode(str, Enum):
    IDENTITY_INACTIVE = "IDENTITY_INACTIVE"


@dataclass(frozen=True)
class IdentityError:
    code: IdentityErrorCode
    message: str


@dataclass
class IdentityResult:
    """
    Contract:
      - identity != None: resolved active projection
      - identity == None and error == None: role carries no projection
      - error != None: projection exists but is deactivated
    """

    role: Role
    identity: IdentityProjection | None = None
    error: IdentityError | None = None


_Finder = Callable[[IdentityProjectionRepository, int], Optional[IdentityProjection]]

IDENTITY_FINDERS: Mapping[Role, _Finder] = MappingProxyType(
    {
        Role.MANAGER: lambda repo, account_id: repo.find_manager_by_account_id(account_id),
        Role.COACH: lambda repo, account_id: repo.find_coach_by_account_id(account_id),
        Role.CUSTOMER: lambda repo, account_id: repo.find_customer_by_account_id(account_id),
        Role.LEARNER: lambda repo, account_id: repo.find_learner_by_account_id(account_id),
        Role.STAFF: lambda repo, account_id: repo.find_staff_by_account_id(account_id),
    }
)


class ResolveIdentityUseCase:
    """Query: account + declared role -> identity projection."""

    def __init__(self, identity_repository: IdentityProjectionRepository) -> None:
        self._identities = identity_repository

    def execute(self, account_id: int, declared_role: Role) -> IdentityResult:
        finder = IDENTITY_FINDERS.get(declared_role)
        if finder is None:
            return IdentityResult(role=declared_role)

        identity = finder(self._identities, account_id)
        if identity is None:
            return IdentityResult(role=declared_role)

        if not identity.is_active:
            logger.warning(
                "identity resolution refused: projection deactivated",
                extra={"account_id": account_id, "role": declared_role.value},
            )
            return IdentityResult(
                role=declared_role,
                error=IdentityError(
                    code=IdentityErrorCode.IDENTITY_INACTIVE,
                    message="Identity is deactivated.",
                ),
            )

        return IdentityResult(role=declared_role, identity=identity)

"""
CRC: domain/repositories.py

Name
- Domain Repository Interfaces (Protocols)

Responsibilities
- Define the read-only identity projection store contract.
- Define the profile store contract, including its transactional scope.

Collaborators
- domain.entities: ProfileRecord and identity projections
- infrastructure.repositories: postgres and in_memory implementations

Constraints
- Pure interfaces only: no infrastructure imports, no SQL.
- "Not found" is returned as None, never raised.
- Storage failures surface as crosscutting.exceptions.DatabaseError.
"""

from __future__ import annotations

from typing import ContextManager, Optional, Protocol

from .entities import (
    CoachIdentity,
    CustomerIdentity,
    LearnerIdentity,
    ManagerIdentity,
    ProfileRecord,
    StaffIdentity,
)


class NicknameConflictError(Exception):
    """R: Storage-level nickname uniqueness guard tripped on save."""

    def __init__(self, nickname: str):
        self.nickname = nickname
        super().__init__(f"nickname already in use: {nickname!r}")


class IdentityProjectionRepository(Protocol):
    """
    R: Interface for identity projection lookups (point reads by account id).

    Deactivated projections are still returned; callers decide what
    deactivation means for them.
    """

    def find_coach_by_account_id(self, account_id: int) -> Optional[CoachIdentity]:
        ...

    def find_customer_by_account_id(
        self, account_id: int
    ) -> Optional[CustomerIdentity]:
        ...

    def find_learner_by_account_id(self, account_id: int) -> Optional[LearnerIdentity]:
        ...

    def find_manager_by_account_id(self, account_id: int) -> Optional[ManagerIdentity]:
        ...

    def find_staff_by_account_id(self, account_id: int) -> Optional[StaffIdentity]:
        ...


class ProfileTransaction(Protocol):
    """
    R: Unit of work for one profile update.

    Reads made here see the state the write will be applied against
    (row locked until the scope ends).
    """

    def find_profile_for_update(self, account_id: int) -> Optional[ProfileRecord]:
        ...

    def nickname_taken(self, nickname: str, *, exclude_account_id: int) -> bool:
        """R: True if another account already uses this nickname."""
        ...

    def save_profile(self, record: ProfileRecord) -> ProfileRecord:
        """
        R: Persist the record and return the stored version.

        Raises:
            NicknameConflictError: uniqueness guard tripped at write time.
        """
        ...


class ProfileRepository(Protocol):
    """R: Interface for profile persistence."""

    def find_profile_by_account_id(self, account_id: int) -> Optional[ProfileRecord]:
        ...

    def transaction(self) -> ContextManager[ProfileTransaction]:
        """R: Commit on clean exit, roll back when the block raises."""
        ...

"""
============================================================
CRC CARD: infrastructure/repositories/in_memory/identity.py
============================================================
Class: InMemoryIdentityProjectionRepository

Responsibilities:
  - Hold identity projections in memory (tests / local dev).
  - Answer point lookups by account id per projection kind.

Constraints:
  - Thread-safe: a Lock guards the tables (fact lookups run concurrently).
  - Pure store: no deactivation or RBAC decisions here.
============================================================
"""

from __future__ import annotations

from threading import Lock
from typing import Dict, Optional

from ....domain.entities import (
    CoachIdentity,
    CustomerIdentity,
    IdentityKind,
    IdentityProjection,
    LearnerIdentity,
    ManagerIdentity,
    StaffIdentity,
)


class InMemoryIdentityProjectionRepository:
    """
    In-memory projection store.

    Mental model: one table per IdentityKind, keyed by account id.
    """

    def __init__(self) -> None:
        self._lock = Lock()
        self._tables: Dict[IdentityKind, Dict[int, IdentityProjection]] = {
            kind: {} for kind in IdentityKind
        }

    def add(self, projection: IdentityProjection) -> None:
        """Insert or replace a projection (seeding helper)."""
        with self._lock:
            self._tables[projection.kind][projection.account_id] = projection

    def _get(self, kind: IdentityKind, account_id: int):
        with self._lock:
            return self._tables[kind].get(account_id)

    def find_manager_by_account_id(self, account_id: int) -> Optional[ManagerIdentity]:
        return self._get(IdentityKind.MANAGER, account_id)

    def find_coach_by_account_id(self, account_id: int) -> Optional[CoachIdentity]:
        return self._get(IdentityKind.COACH, account_id)

    def find_customer_by_account_id(
        self, account_id: int
    ) -> Optional[CustomerIdentity]:
        return self._get(IdentityKind.CUSTOMER, account_id)

    def find_learner_by_account_id(self, account_id: int) -> Optional[LearnerIdentity]:
        return self._get(IdentityKind.LEARNER, account_id)

    def find_staff_by_account_id(self, account_id: int) -> Optional[StaffIdentity]:
        return self._get(IdentityKind.STAFF, account_id)

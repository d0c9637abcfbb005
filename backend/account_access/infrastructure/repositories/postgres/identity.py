"""
============================================================
CRC CARD: infrastructure/repositories/postgres/identity.py
============================================================
Class: PostgresIdentityProjectionRepository

Responsibilities:
- Point lookups of identity projections by account id (raw SQL).
- Map rows to the tagged domain projections.

Collaborators:
- psycopg_pool.ConnectionPool
- crosscutting.exceptions.DatabaseError
- Tables: member_managers, member_coaches, member_customers,
  member_learners, member_staff

Notes:
- Deactivated rows are returned as-is; deactivation semantics belong to
  the application layer.
- All queries are parametrized.
============================================================
"""

from __future__ import annotations

from typing import Iterable, Optional

from psycopg_pool import ConnectionPool

from ....crosscutting.exceptions import DatabaseError
from ....crosscutting.logger import logger
from ....domain.entities import (
    CoachIdentity,
    CustomerIdentity,
    Gender,
    LearnerIdentity,
    ManagerIdentity,
    StaffIdentity,
)
from .profile import enum_or_default


class PostgresIdentityProjectionRepository:
    """PostgreSQL identity projection store (read-only)."""

    _SQL_FIND_MANAGER = """
        SELECT id, account_id, name, job_title, department_id, deactivated_at
        FROM member_managers
        WHERE account_id = %s
    """

    _SQL_FIND_COACH = """
        SELECT id, account_id, name, level, specialty, deactivated_at
        FROM member_coaches
        WHERE account_id = %s
    """

    _SQL_FIND_CUSTOMER = """
        SELECT id, account_id, name, contact_phone, membership_level,
               remaining_sessions, deactivated_at
        FROM member_customers
        WHERE account_id = %s
    """

    _SQL_FIND_LEARNER = """
        SELECT id, account_id, customer_id, name, gender, birth_date, deactivated_at
        FROM member_learners
        WHERE account_id = %s
    """

    _SQL_FIND_STAFF = """
        SELECT id, account_id, name, job_title, department_id, deactivated_at
        FROM member_staff
        WHERE account_id = %s
    """

    def __init__(self, pool: Optional[ConnectionPool] = None):
        self._pool = pool

    def _get_pool(self) -> ConnectionPool:
        if self._pool is not None:
            return self._pool
        from ...db.pool import get_pool

        return get_pool()

    def _fetchone(
        self, *, query: str, params: Iterable[object], context_msg: str, extra: dict
    ) -> tuple | None:
        try:
            with self._get_pool().connection() as conn:
                return conn.execute(query, tuple(params)).fetchone()
        except Exception as exc:
            logger.exception(context_msg, extra={**extra, "error": str(exc)})
            raise DatabaseError(f"{context_msg}: {exc}") from exc

    def _find(self, query: str, account_id: int, projection: str) -> tuple | None:
        return self._fetchone(
            query=query,
            params=[account_id],
            context_msg=f"PostgresIdentityProjectionRepository: Failed to find {projection}",
            extra={"account_id": account_id},
        )

    def find_manager_by_account_id(self, account_id: int) -> Optional[ManagerIdentity]:
        row = self._find(self._SQL_FIND_MANAGER, account_id, "manager")
        if row is None:
            return None
        return ManagerIdentity(
            id=row[0],
            account_id=row[1],
            name=row[2],
            job_title=row[3],
            department_id=row[4],
            deactivated_at=row[5],
        )

    def find_coach_by_account_id(self, account_id: int) -> Optional[CoachIdentity]:
        row = self._find(self._SQL_FIND_COACH, account_id, "coach")
        if row is None:
            return None
        return CoachIdentity(
            id=row[0],
            account_id=row[1],
            name=row[2],
            level=row[3],
            specialty=row[4],
            deactivated_at=row[5],
        )

    def find_customer_by_account_id(
        self, account_id: int
    ) -> Optional[CustomerIdentity]:
        row = self._find(self._SQL_FIND_CUSTOMER, account_id, "customer")
        if row is None:
            return None
        return CustomerIdentity(
            id=row[0],
            account_id=row[1],
            name=row[2],
            contact_phone=row[3],
            membership_level=row[4],
            remaining_sessions=row[5],
            deactivated_at=row[6],
        )

    def find_learner_by_account_id(self, account_id: int) -> Optional[LearnerIdentity]:
        row = self._find(self._SQL_FIND_LEARNER, account_id, "learner")
        if row is None:
            return None
        return LearnerIdentity(
            id=row[0],
            account_id=row[1],
            customer_id=row[2],
            name=row[3],
            gender=enum_or_default(Gender, row[4], Gender.SECRET),
            birth_date=row[5],
            deactivated_at=row[6],
        )

    def find_staff_by_account_id(self, account_id: int) -> Optional[StaffIdentity]:
        row = self._find(self._SQL_FIND_STAFF, account_id, "staff")
        if row is None:
            return None
        return StaffIdentity(
            id=row[0],
            account_id=row[1],
            name=row[2],
            job_title=row[3],
            department_id=row[4],
            deactivated_at=row[5],
        )

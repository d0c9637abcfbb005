"""
============================================================
CRC CARD: infrastructure/repositories/postgres/profile.py
============================================================
Classes: PostgresProfileRepository, PostgresProfileTransaction

Responsibilities:
- Read profile records by account id (table base_user_info).
- Provide the update unit of work: row lock (SELECT ... FOR UPDATE),
  nickname lookup and write on one connection/transaction.
- Translate the nickname unique index violation into NicknameConflictError.

Collaborators:
- psycopg / psycopg_pool
- crosscutting.exceptions.DatabaseError
- domain.repositories.NicknameConflictError

Notes:
- Uniqueness on nickname is enforced by a partial unique index
  (WHERE nickname <> ''), so empty nicknames never collide.
- save_profile runs inside a savepoint so a unique violation leaves the
  outer transaction usable.
============================================================
"""

from __future__ import annotations

from contextlib import contextmanager
from typing import Iterator, Optional

import psycopg
from psycopg import errors as pg_errors
from psycopg.types.json import Jsonb
from psycopg_pool import ConnectionPool

from ....crosscutting.exceptions import DatabaseError
from ....crosscutting.logger import logger
from ....domain.entities import Gender, GeographicInfo, ProfileRecord, UserState
from ....domain.repositories import NicknameConflictError

_COLUMNS = """
    account_id, nickname, gender, birth_date, avatar_url, email, signature,
    access_group, address, phone, tags, geographic, notify_count,
    unread_count, user_state, created_at, updated_at
"""


def enum_or_default(enum_cls, value, default):
    """Unknown or missing stored values read as the enum default."""
    try:
        return enum_cls(value) if value else default
    except ValueError:
        logger.warning(
            "unexpected stored enum value",
            extra={"enum": enum_cls.__name__, "value": str(value)},
        )
        return default


def _row_to_record(row: tuple) -> ProfileRecord:
    geographic = row[11]
    return ProfileRecord(
        account_id=row[0],
        nickname=row[1] or "",
        gender=enum_or_default(Gender, row[2], Gender.SECRET),
        birth_date=row[3].isoformat() if row[3] is not None else None,
        avatar_url=row[4],
        email=row[5],
        signature=row[6],
        access_group=tuple(row[7] or ()),
        address=row[8],
        phone=row[9],
        tags=tuple(row[10]) if isinstance(row[10], list) else None,
        geographic=(
            GeographicInfo(
                province=geographic.get("province"), city=geographic.get("city")
            )
            if isinstance(geographic, dict)
            else None
        ),
        notify_count=row[12] or 0,
        unread_count=row[13] or 0,
        user_state=enum_or_default(UserState, row[14], UserState.PENDING),
        created_at=row[15],
        updated_at=row[16],
    )


def _record_params(record: ProfileRecord) -> tuple:
    geographic = (
        Jsonb({"province": record.geographic.province, "city": record.geographic.city})
        if record.geographic is not None
        else None
    )
    return (
        record.nickname,
        record.gender.value,
        record.birth_date,
        record.avatar_url,
        record.email,
        record.signature,
        record.address,
        record.phone,
        Jsonb(list(record.tags)) if record.tags is not None else None,
        geographic,
        record.notify_count,
        record.unread_count,
        record.user_state.value,
        record.updated_at,
        record.account_id,
    )


class PostgresProfileTransaction:
    """Unit of work bound to one open connection/transaction."""

    _SQL_SELECT_FOR_UPDATE = f"""
        SELECT {_COLUMNS}
        FROM base_user_info
        WHERE account_id = %s
        FOR UPDATE
    """

    _SQL_NICKNAME_TAKEN = """
        SELECT 1
        FROM base_user_info
        WHERE nickname = %s AND account_id <> %s
        LIMIT 1
    """

    _SQL_UPDATE = f"""
        UPDATE base_user_info
        SET nickname = %s, gender = %s, birth_date = %s::date, avatar_url = %s,
            email = %s, signature = %s, address = %s, phone = %s, tags = %s,
            geographic = %s, notify_count = %s, unread_count = %s,
            user_state = %s, updated_at = %s
        WHERE account_id = %s
        RETURNING {_COLUMNS}
    """

    def __init__(self, conn: psycopg.Connection):
        self._conn = conn

    def _execute_one(self, query: str, params: tuple, context_msg: str, extra: dict):
        try:
            return self._conn.execute(query, params).fetchone()
        except psycopg.Error as exc:
            logger.exception(context_msg, extra={**extra, "error": str(exc)})
            raise DatabaseError(f"{context_msg}: {exc}") from exc

    def find_profile_for_update(self, account_id: int) -> Optional[ProfileRecord]:
        row = self._execute_one(
            self._SQL_SELECT_FOR_UPDATE,
            (account_id,),
            "PostgresProfileTransaction: Failed to lock profile",
            {"account_id": account_id},
        )
        return _row_to_record(row) if row is not None else None

    def nickname_taken(self, nickname: str, *, exclude_account_id: int) -> bool:
        row = self._execute_one(
            self._SQL_NICKNAME_TAKEN,
            (nickname, exclude_account_id),
            "PostgresProfileTransaction: Failed to check nickname",
            {"account_id": exclude_account_id},
        )
        return row is not None

    def save_profile(self, record: ProfileRecord) -> ProfileRecord:
        try:
            with self._conn.transaction():
                row = self._conn.execute(self._SQL_UPDATE, _record_params(record)).fetchone()
        except pg_errors.UniqueViolation as exc:
            raise NicknameConflictError(record.nickname) from exc
        except psycopg.Error as exc:
            logger.exception(
                "PostgresProfileTransaction: Failed to save profile",
                extra={"account_id": record.account_id, "error": str(exc)},
            )
            raise DatabaseError(f"Failed to save profile: {exc}") from exc

        if row is None:
            raise DatabaseError("Unexpected: profile row vanished during update")
        return _row_to_record(row)


class PostgresProfileRepository:
    """PostgreSQL profile store."""

    _SQL_FIND_BY_ACCOUNT = f"""
        SELECT {_COLUMNS}
        FROM base_user_info
        WHERE account_id = %s
    """

    def __init__(self, pool: Optional[ConnectionPool] = None):
        self._pool = pool

    def _get_pool(self) -> ConnectionPool:
        if self._pool is not None:
            return self._pool
        from ...db.pool import get_pool

        return get_pool()

    def find_profile_by_account_id(self, account_id: int) -> Optional[ProfileRecord]:
        try:
            with self._get_pool().connection() as conn:
                row = conn.execute(self._SQL_FIND_BY_ACCOUNT, (account_id,)).fetchone()
        except Exception as exc:
            logger.exception(
                "PostgresProfileRepository: Failed to find profile",
                extra={"account_id": account_id, "error": str(exc)},
            )
            raise DatabaseError(f"Failed to find profile: {exc}") from exc
        return _row_to_record(row) if row is not None else None

    @contextmanager
    def transaction(self) -> Iterator[PostgresProfileTransaction]:
        try:
            with self._get_pool().connection() as conn:
                with conn.transaction():
                    yield PostgresProfileTransaction(conn)
        except psycopg.Error as exc:
            logger.exception(
                "PostgresProfileRepository: Transaction failed",
                extra={"error": str(exc)},
            )
            raise DatabaseError(f"Profile transaction failed: {exc}") from exc

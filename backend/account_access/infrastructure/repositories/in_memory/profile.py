"""
============================================================
CRC CARD: infrastructure/repositories/in_memory/profile.py
============================================================
Classes: InMemoryProfileRepository, InMemoryProfileTransaction

Responsibilities:
  - Hold profile records in memory (tests / local dev).
  - Emulate the update unit of work: writes are staged and applied on
    clean exit, discarded when the block raises.
  - Enforce non-empty nickname uniqueness at save time.

Constraints:
  - Transactions are serialized by one Lock, standing in
    for the row lock + unique index of the PostgreSQL implementation.
  - Records are immutable dataclasses, so no defensive copies are needed.
============================================================
"""

from __future__ import annotations

from contextlib import contextmanager
from threading import Lock
from typing import Dict, Iterator, Optional

from ....domain.entities import ProfileRecord
from ....domain.repositories import NicknameConflictError


class InMemoryProfileTransaction:
    """Staged view over the repository's records."""

    def __init__(self, records: Dict[int, ProfileRecord]) -> None:
        self._records = records
        self._staged: Dict[int, ProfileRecord] = {}

    def _current(self, account_id: int) -> Optional[ProfileRecord]:
        return self._staged.get(account_id, self._records.get(account_id))

    def find_profile_for_update(self, account_id: int) -> Optional[ProfileRecord]:
        return self._current(account_id)

    def nickname_taken(self, nickname: str, *, exclude_account_id: int) -> bool:
        if not nickname:
            return False
        merged = {**self._records, **self._staged}
        return any(
            record.nickname == nickname and account_id != exclude_account_id
            for account_id, record in merged.items()
        )

    def save_profile(self, record: ProfileRecord) -> ProfileRecord:
        if self.nickname_taken(record.nickname, exclude_account_id=record.account_id):
            raise NicknameConflictError(record.nickname)
        self._staged[record.account_id] = record
        return record

    def commit(self) -> None:
        self._records.update(self._staged)
        self._staged.clear()


class InMemoryProfileRepository:
    """In-memory, thread-safe profile store."""

    def __init__(self) -> None:
        self._lock = Lock()
        self._records: Dict[int, ProfileRecord] = {}

    def add(self, record: ProfileRecord) -> None:
        """Insert or replace a record (seeding helper; profiles are created at registration)."""
        with self._lock:
            self._records[record.account_id] = record

    def find_profile_by_account_id(self, account_id: int) -> Optional[ProfileRecord]:
        with self._lock:
            return self._records.get(account_id)

    @contextmanager
    def transaction(self) -> Iterator[InMemoryProfileTransaction]:
        with self._lock:
            tx = InMemoryProfileTransaction(self._records)
            yield tx
            tx.commit()

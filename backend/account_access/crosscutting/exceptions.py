"""
Name: Typed Internal Exceptions

Responsibilities:
  - Provide internal exceptions with a stable error_code
  - Attach an error_id for log correlation
  - Keep messages human readable without leaking secrets

Collaborators:
  - api/exception_handlers.py (maps to RFC 7807 responses)
  - infrastructure repositories (wrap storage failures)

Notes:
  - Business outcomes (denied, not found, forbidden field...) are NOT
    exceptions; use cases return typed results for those.
"""

from __future__ import annotations

from uuid import uuid4


class AccountAccessError(Exception):
    """R: Base for internal service errors (error_code + error_id + message)."""

    error_code: str = "ACCOUNT_ACCESS_ERROR"

    def __init__(
        self,
        message: str,
        error_id: str | None = None,
        original_error: Exception | None = None,
    ):
        self.message = message
        self.error_id = error_id or str(uuid4())
        self.original_error = original_error
        super().__init__(message)


class DatabaseError(AccountAccessError):
    """Storage failures (connection, query, timeout, pool)."""

    error_code: str = "DATABASE_ERROR"

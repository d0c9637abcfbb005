"""
Name: Profile Detail Masking

Responsibilities:
  - Project a full profile view down to the BASIC view
"""

from __future__ import annotations

from dataclasses import replace

from .entities import ProfileRecord


def to_basic(view: ProfileRecord) -> ProfileRecord:
    """
    R: Keep identity-level fields, drop private ones.

    Kept: account_id, nickname, gender, birth_date, avatar_url, phone,
    access_group, user_state, timestamps. Idempotent.
    """
    return replace(
        view,
        email=None,
        signature=None,
        address=None,
        tags=None,
        geographic=None,
        notify_count=0,
        unread_count=0,
    )

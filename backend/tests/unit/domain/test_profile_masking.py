"""
Name: Profile Masking Tests

Responsibilities:
  - Validate the BASIC projection keeps identity fields and drops private ones
"""

import pytest

from account_access.domain.entities import Gender, GeographicInfo, ProfileRecord, UserState
from account_access.domain.profile_masking import to_basic


pytestmark = pytest.mark.unit


def _full() -> ProfileRecord:
    return ProfileRecord(
        account_id=9,
        nickname="nine",
        gender=Gender.MALE,
        birth_date="2001-02-03",
        avatar_url="https://cdn.example.com/9.png",
        email="nine@example.com",
        signature="sig",
        access_group=("COACH",),
        address="Somewhere",
        phone="555",
        tags=("a", "b"),
        geographic=GeographicInfo(province="P", city="C"),
        notify_count=4,
        unread_count=5,
        user_state=UserState.ACTIVE,
    )


def test_to_basic_drops_private_fields():
    basic = to_basic(_full())

    assert basic.email is None
    assert basic.signature is None
    assert basic.address is None
    assert basic.tags is None
    assert basic.geographic is None
    assert basic.notify_count == 0
    assert basic.unread_count == 0


def test_to_basic_keeps_identity_fields():
    full = _full()
    basic = to_basic(full)

    assert basic.account_id == full.account_id
    assert basic.nickname == full.nickname
    assert basic.gender == full.gender
    assert basic.birth_date == full.birth_date
    assert basic.avatar_url == full.avatar_url
    assert basic.phone == full.phone
    assert basic.access_group == full.access_group
    assert basic.user_state == full.user_state
    assert basic.created_at == full.created_at


def test_to_basic_is_idempotent():
    once = to_basic(_full())

    assert to_basic(once) == once

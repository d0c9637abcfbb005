"""
Name: Profile Update Field Authorizer Tests

Responsibilities:
  - Validate writable field sets per actor/target relationship
  - Validate forbidden key detection (unknown keys included)
"""

import pytest

from account_access.domain.update_policy import (
    FULL_WRITABLE_FIELDS,
    MANAGER_OTHER_FIELDS,
    NON_PRIVILEGED_FIELDS,
    PRIVILEGED_FIELDS,
    ProfileField,
    allowed_fields,
    find_forbidden_fields,
)
from account_access.identity.roles import Role


pytestmark = pytest.mark.unit


def test_field_tables_partition_the_writable_set():
    assert NON_PRIVILEGED_FIELDS | PRIVILEGED_FIELDS == FULL_WRITABLE_FIELDS
    assert not NON_PRIVILEGED_FIELDS & PRIVILEGED_FIELDS
    assert MANAGER_OTHER_FIELDS == {
        ProfileField.NICKNAME,
        ProfileField.AVATAR_URL,
        ProfileField.PHONE,
    }


@pytest.mark.parametrize("is_self", [True, False])
def test_admin_writes_everything(is_self):
    assert allowed_fields({Role.ADMIN}, is_self=is_self, is_admin=True) == FULL_WRITABLE_FIELDS


def test_manager_on_self_writes_everything():
    assert allowed_fields({Role.MANAGER}, is_self=True, is_admin=False) == FULL_WRITABLE_FIELDS


def test_manager_on_others_writes_limited_set():
    assert allowed_fields({Role.MANAGER}, is_self=False, is_admin=False) == MANAGER_OTHER_FIELDS


@pytest.mark.parametrize("roles", [{Role.LEARNER}, {Role.COACH}, {Role.CUSTOMER}, set()])
def test_everyone_else_writes_non_privileged(roles):
    assert allowed_fields(roles, is_self=True, is_admin=False) == NON_PRIVILEGED_FIELDS


def test_find_forbidden_fields_reports_sorted_unknown_and_privileged():
    forbidden = find_forbidden_fields(
        ["nickname", "user_state", "access_group", "bogus"], NON_PRIVILEGED_FIELDS
    )

    assert forbidden == ["access_group", "bogus", "user_state"]


def test_find_forbidden_fields_empty_patch():
    assert find_forbidden_fields([], MANAGER_OTHER_FIELDS) == []

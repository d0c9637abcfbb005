"""
Name: Role Model Tests

Responsibilities:
  - Validate role parsing from raw names
  - Validate effective role expansion (closure, idempotence)
"""

import pytest

from account_access.identity.roles import (
    ROLE_IMPLICATIONS,
    Role,
    expand_roles,
    has_role,
    is_pure_learner,
    normalize_roles,
)


pytestmark = pytest.mark.unit


def test_normalize_roles_is_case_insensitive_and_drops_unknown():
    roles = normalize_roles(["coach", " Manager ", "WIZARD", 42, Role.LEARNER])

    assert roles == frozenset({Role.COACH, Role.MANAGER, Role.LEARNER})


@pytest.mark.parametrize("raw", [None, [], ()])
def test_normalize_roles_empty_input(raw):
    assert normalize_roles(raw) == frozenset()


def test_expand_roles_baseline_adds_nothing():
    for role in Role:
        assert expand_roles({role}) == frozenset({role})


def test_expand_roles_is_idempotent_and_never_empties():
    raw = {Role.CUSTOMER, Role.COACH}
    once = expand_roles(raw)

    assert expand_roles(once) == once
    assert raw <= once


def test_role_implications_is_read_only():
    with pytest.raises(TypeError):
        ROLE_IMPLICATIONS[Role.MANAGER] = frozenset({Role.COACH})  # type: ignore[index]


def test_has_role_and_pure_learner():
    assert has_role({Role.COACH}, Role.COACH)
    assert not has_role({Role.COACH}, Role.ADMIN)
    assert is_pure_learner({Role.LEARNER})
    assert not is_pure_learner({Role.LEARNER, Role.CUSTOMER})
    assert not is_pure_learner(set())

"""
Name: Ownership Fact Gatherer Tests

Responsibilities:
  - Validate lookup planning per actor role set
  - Validate fact computation (ownership, deactivated projections)
  - Validate concurrent execution and storage error propagation
"""

import threading
from concurrent.futures import ThreadPoolExecutor

import pytest

from account_access.application.usecases.profile import OwnershipFactGatherer, plan_lookups
from account_access.crosscutting.exceptions import DatabaseError
from account_access.domain.visibility_policy import OwnershipFacts
from account_access.identity.roles import Role

from conftest import (
    ADMIN,
    COACH,
    CUSTOMER_A,
    LEARNER_L,
    LEARNER_M,
    MANAGER,
    RETIRED_COACH,
    make_session,
)


pytestmark = pytest.mark.unit


class _CountingRepo:
    """Wraps a repository and records every call."""

    def __init__(self, inner):
        self._inner = inner
        self.calls = []

    def __getattr__(self, name):
        target = getattr(self._inner, name)

        def call(account_id):
            self.calls.append((name, account_id))
            return target(account_id)

        return call


class _BarrierRepo:
    """Every lookup waits until `parties` lookups are in flight."""

    def __init__(self, parties):
        self._barrier = threading.Barrier(parties, timeout=5)

    def _meet(self, account_id):
        self._barrier.wait()
        return None

    find_coach_by_account_id = _meet
    find_customer_by_account_id = _meet
    find_learner_by_account_id = _meet


class _FailingRepo:
    def find_coach_by_account_id(self, account_id):
        return None

    def find_customer_by_account_id(self, account_id):
        raise DatabaseError("connection reset")

    def find_learner_by_account_id(self, account_id):
        return None


@pytest.fixture
def executor():
    pool = ThreadPoolExecutor(max_workers=4)
    yield pool
    pool.shutdown(wait=True)


@pytest.mark.parametrize(
    "roles, expected",
    [
        ({Role.ADMIN}, ()),
        ({Role.LEARNER}, ()),
        ({Role.STAFF}, ()),
        ({Role.COACH}, ("target_coach", "target_customer", "target_learner")),
        ({Role.MANAGER}, ("target_coach", "target_customer", "target_learner")),
        ({Role.CUSTOMER}, ("target_learner", "actor_customer")),
        (
            {Role.COACH, Role.CUSTOMER},
            ("target_coach", "target_customer", "target_learner", "actor_customer"),
        ),
    ],
)
def test_plan_lookups(roles, expected):
    assert plan_lookups(make_session(500, *roles), 600) == expected


def test_self_access_plans_nothing():
    assert plan_lookups(make_session(5, Role.CUSTOMER), 5) == ()


def test_self_and_admin_skip_storage(identity_repo, executor):
    counting = _CountingRepo(identity_repo)
    gatherer = OwnershipFactGatherer(counting, executor=executor)

    assert gatherer.gather(make_session(CUSTOMER_A, Role.CUSTOMER), CUSTOMER_A) == OwnershipFacts(
        is_self=True
    )
    assert gatherer.gather(make_session(ADMIN, Role.ADMIN), CUSTOMER_A) == OwnershipFacts()
    assert counting.calls == []


def test_customer_owns_own_learner(fact_gatherer):
    facts = fact_gatherer.gather(make_session(CUSTOMER_A, Role.CUSTOMER), LEARNER_L)

    assert facts.target_is_learner
    assert facts.customer_owns_target_learner


def test_customer_does_not_own_other_learner(fact_gatherer):
    facts = fact_gatherer.gather(make_session(CUSTOMER_A, Role.CUSTOMER), LEARNER_M)

    assert facts.target_is_learner
    assert not facts.customer_owns_target_learner


def test_oversight_facts_for_coach_target(fact_gatherer):
    facts = fact_gatherer.gather(make_session(MANAGER, Role.MANAGER), COACH)

    assert facts == OwnershipFacts(target_is_coach=True)


def test_deactivated_projection_counts_as_absent(fact_gatherer):
    facts = fact_gatherer.gather(make_session(MANAGER, Role.MANAGER), RETIRED_COACH)

    assert facts == OwnershipFacts()


def test_lookups_run_concurrently(executor):
    # Three lookups meet at a barrier; sequential execution would time out
    gatherer = OwnershipFactGatherer(_BarrierRepo(parties=3), executor=executor)

    facts = gatherer.gather(make_session(MANAGER, Role.MANAGER), 999)

    assert facts == OwnershipFacts()


def test_storage_error_propagates(executor):
    gatherer = OwnershipFactGatherer(_FailingRepo(), executor=executor)

    with pytest.raises(DatabaseError):
        gatherer.gather(make_session(COACH, Role.COACH), 999)


def test_shutdown_stops_owned_pool(identity_repo):
    gatherer = OwnershipFactGatherer(identity_repo, max_workers=2)
    gatherer.gather(make_session(MANAGER, Role.MANAGER), COACH)

    gatherer.shutdown()

    with pytest.raises(RuntimeError):
        gatherer.gather(make_session(MANAGER, Role.MANAGER), COACH)


def test_shutdown_leaves_injected_pool_running(identity_repo, executor):
    gatherer = OwnershipFactGatherer(identity_repo, executor=executor)

    gatherer.shutdown()

    assert executor.submit(lambda: 1).result(timeout=5) == 1

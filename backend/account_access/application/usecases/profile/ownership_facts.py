"""
===============================================================================
OWNERSHIP FACT GATHERER
===============================================================================

Name:
    Ownership Fact Gatherer

Business Goal:
    Compute the minimal facts the visibility policy needs about a target
    relative to the actor, with as few lookups as the actor's roles allow.

Responsibilities:
    - Plan lookups from the actor's effective roles:
        * MANAGER / COACH -> target as Coach, Customer, Learner
        * CUSTOMER        -> target as Learner, actor as Customer
        * self, ADMIN, pure learner, no relevant role -> no lookups
    - Run independent lookups concurrently and wait for all of them.
    - Treat deactivated projections as absent.

Collaborators:
    - IdentityProjectionRepository (find_*_by_account_id)
    - domain.visibility_policy.OwnershipFacts

Notes:
    - Not-found is a fact, never an error. Storage failures propagate as-is.
    - Facts are computed per call; nothing is cached.
===============================================================================
"""

from __future__ import annotations

import time
from concurrent.futures import ALL_COMPLETED, Executor, ThreadPoolExecutor, wait
from typing import Any, Callable

from ....crosscutting.metrics import observe_fact_lookup
from ....domain.entities import CustomerIdentity, LearnerIdentity
from ....domain.repositories import IdentityProjectionRepository
from ....domain.visibility_policy import OwnershipFacts
from ....identity.roles import Role, is_pure_learner
from ....identity.session import Session

_TARGET_COACH = "target_coach"
_TARGET_CUSTOMER = "target_customer"
_TARGET_LEARNER = "target_learner"
_ACTOR_CUSTOMER = "actor_customer"

_OVERSIGHT_LOOKUPS = (_TARGET_COACH, _TARGET_CUSTOMER, _TARGET_LEARNER)
_CUSTOMER_LOOKUPS = (_TARGET_LEARNER, _ACTOR_CUSTOMER)


def plan_lookups(session: Session, target_account_id: int) -> tuple[str, ...]:
    """R: Names of the lookups needed for this actor/target pair, in stable order."""
    if session.account_id == target_account_id:
        return ()

    effective = session.effective_roles
    if Role.ADMIN in effective or is_pure_learner(effective):
        return ()

    planned: list[str] = []
    if effective & {Role.MANAGER, Role.COACH}:
        planned.extend(_OVERSIGHT_LOOKUPS)
    if Role.CUSTOMER in effective:
        planned.extend(name for name in _CUSTOMER_LOOKUPS if name not in planned)
    return tuple(planned)


def _active(projection: Any) -> Any:
    if projection is None or not projection.is_active:
        return None
    return projection


def _owns(customer: CustomerIdentity | None, learner: LearnerIdentity | None) -> bool:
    return (
        customer is not None
        and learner is not None
        and learner.customer_id == customer.id
    )


class OwnershipFactGatherer:
    """Gathers OwnershipFacts with concurrent point lookups."""

    def __init__(
        self,
        identity_repository: IdentityProjectionRepository,
        *,
        executor: Executor | None = None,
        max_workers: int = 4,
    ) -> None:
        self._identities = identity_repository
        # Injected executors belong to the caller
        self._owns_executor = executor is None
        self._executor = executor or ThreadPoolExecutor(
            max_workers=max_workers, thread_name_prefix="fact-lookup"
        )

    def shutdown(self) -> None:
        """Stop the lookup pool created by this gatherer (no-op for injected ones)."""
        if self._owns_executor:
            self._executor.shutdown(wait=True)

    def _lookup(self, name: str, session: Session, target_account_id: int) -> Callable[[], Any]:
        repo = self._identities
        if name == _TARGET_COACH:
            return lambda: repo.find_coach_by_account_id(target_account_id)
        if name == _TARGET_CUSTOMER:
            return lambda: repo.find_customer_by_account_id(target_account_id)
        if name == _TARGET_LEARNER:
            return lambda: repo.find_learner_by_account_id(target_account_id)
        return lambda: repo.find_customer_by_account_id(session.account_id)

    def gather(self, session: Session, target_account_id: int) -> OwnershipFacts:
        if session.account_id == target_account_id:
            return OwnershipFacts(is_self=True)

        planned = plan_lookups(session, target_account_id)
        if not planned:
            return OwnershipFacts()

        start = time.perf_counter()
        futures = {
            name: self._executor.submit(self._lookup(name, session, target_account_id))
            for name in planned
        }
        # Every lookup settles before any result (or error) is used
        wait(futures.values(), return_when=ALL_COMPLETED)
        found = {name: _active(future.result()) for name, future in futures.items()}
        observe_fact_lookup(time.perf_counter() - start)

        learner = found.get(_TARGET_LEARNER)
        return OwnershipFacts(
            is_self=False,
            target_is_coach=found.get(_TARGET_COACH) is not None,
            target_is_customer=found.get(_TARGET_CUSTOMER) is not None,
            target_is_learner=learner is not None,
            customer_owns_target_learner=_owns(found.get(_ACTOR_CUSTOMER), learner),
        )

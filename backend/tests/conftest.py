"""
Name: Pytest Configuration and Shared Fixtures

Responsibilities:
  - Configure the test environment (APP_ENV=test, no .env file)
  - Provide in-memory repositories seeded with a small account world
  - Provide session builders and a fact gatherer with a managed thread pool

Notes:
  - APP_ENV must be set before importing the package (settings are cached)
"""

import os
import sys
from concurrent.futures import ThreadPoolExecutor
from datetime import datetime, timezone
from pathlib import Path

import pytest

ROOT_DIR = Path(__file__).resolve().parents[1]
if str(ROOT_DIR) not in sys.path:
    sys.path.insert(0, str(ROOT_DIR))

os.environ.setdefault("APP_ENV", "test")

from account_access.crosscutting import config as app_config  # noqa: E402

app_config.Settings.model_config["env_file"] = None

from account_access.application.usecases.profile import (  # noqa: E402
    GetVisibleProfileUseCase,
    OwnershipFactGatherer,
    UpdateVisibleProfileUseCase,
)
from account_access.domain.entities import (  # noqa: E402
    CoachIdentity,
    CustomerIdentity,
    Gender,
    GeographicInfo,
    LearnerIdentity,
    ManagerIdentity,
    ProfileRecord,
    StaffIdentity,
    UserState,
)
from account_access.identity.roles import Role  # noqa: E402
from account_access.identity.session import Session  # noqa: E402
from account_access.infrastructure.repositories.in_memory import (  # noqa: E402
    InMemoryIdentityProjectionRepository,
    InMemoryProfileRepository,
)

# Account ids of the seeded world
ADMIN = 1
CUSTOMER_A = 10
CUSTOMER_B = 11
LEARNER_L = 20
LEARNER_M = 21
COACH = 30
RETIRED_COACH = 31
MANAGER = 40
STAFF = 50

FIXED_TS = datetime(2024, 1, 1, tzinfo=timezone.utc)


def pytest_configure(config) -> None:
    config.addinivalue_line(
        "markers", "unit: Unit tests (fast, no external dependencies)"
    )
    config.addinivalue_line(
        "markers", "integration: Tests that need a migrated PostgreSQL database"
    )


def make_session(account_id: int, *roles: Role) -> Session:
    return Session(account_id=account_id, roles=frozenset(roles))


def make_profile(account_id: int, *access_group: Role, **overrides) -> ProfileRecord:
    values = dict(
        account_id=account_id,
        nickname=f"user{account_id}",
        gender=Gender.FEMALE,
        birth_date="1990-05-17",
        avatar_url=f"https://cdn.example.com/{account_id}.png",
        email=f"user{account_id}@example.com",
        signature="hello",
        access_group=tuple(r.value for r in access_group),
        address="1 Main St",
        phone="555-0100",
        tags=("swim",),
        geographic=GeographicInfo(province="North", city="Harbor"),
        notify_count=3,
        unread_count=2,
        user_state=UserState.ACTIVE,
        created_at=FIXED_TS,
        updated_at=FIXED_TS,
    )
    values.update(overrides)
    return ProfileRecord(**values)


@pytest.fixture
def identity_repo() -> InMemoryIdentityProjectionRepository:
    repo = InMemoryIdentityProjectionRepository()
    repo.add(CustomerIdentity(id=1, account_id=CUSTOMER_A, name="Customer A"))
    repo.add(CustomerIdentity(id=2, account_id=CUSTOMER_B, name="Customer B"))
    repo.add(LearnerIdentity(id=100, account_id=LEARNER_L, customer_id=1, name="L"))
    repo.add(LearnerIdentity(id=101, account_id=LEARNER_M, customer_id=2, name="M"))
    repo.add(CoachIdentity(id=7, account_id=COACH, name="Coach", level=2))
    repo.add(
        CoachIdentity(
            id=8, account_id=RETIRED_COACH, name="Retired", deactivated_at=FIXED_TS
        )
    )
    repo.add(ManagerIdentity(id=3, account_id=MANAGER, name="Manager"))
    repo.add(StaffIdentity(id=4, account_id=STAFF, name="Staff"))
    return repo


@pytest.fixture
def profile_repo() -> InMemoryProfileRepository:
    repo = InMemoryProfileRepository()
    repo.add(make_profile(ADMIN, Role.ADMIN))
    repo.add(make_profile(CUSTOMER_A, Role.CUSTOMER))
    repo.add(make_profile(CUSTOMER_B, Role.CUSTOMER))
    repo.add(make_profile(LEARNER_L, Role.LEARNER))
    repo.add(make_profile(LEARNER_M, Role.LEARNER))
    repo.add(make_profile(COACH, Role.COACH))
    repo.add(make_profile(RETIRED_COACH, Role.COACH))
    repo.add(make_profile(MANAGER, Role.MANAGER))
    repo.add(make_profile(STAFF, Role.STAFF))
    return repo


@pytest.fixture
def fact_gatherer(identity_repo):
    executor = ThreadPoolExecutor(max_workers=4)
    yield OwnershipFactGatherer(identity_repo, executor=executor)
    executor.shutdown(wait=True)


@pytest.fixture
def get_profile(fact_gatherer, profile_repo) -> GetVisibleProfileUseCase:
    return GetVisibleProfileUseCase(fact_gatherer, profile_repo)


@pytest.fixture
def update_profile(fact_gatherer, profile_repo) -> UpdateVisibleProfileUseCase:
    return UpdateVisibleProfileUseCase(fact_gatherer, profile_repo)

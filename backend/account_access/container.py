"""
===============================================================================
CRC CARD: container.py (Composition Root / manual DI)
===============================================================================

Responsibilities:
  - Compose repositories and use cases.
  - Expose factories for FastAPI (Depends).
  - Keep singletons cached with lru_cache.
  - Choose implementations from Settings (in-memory when APP_ENV=test).

Notes:
  - No business logic here.
  - No FastAPI dependency here (factories only).
===============================================================================
"""

from __future__ import annotations

from functools import lru_cache

from .application.usecases.identity import ResolveIdentityUseCase
from .application.usecases.profile import (
    FetchProfileUseCase,
    GetVisibleProfileUseCase,
    OwnershipFactGatherer,
    UpdateVisibleProfileUseCase,
)
from .crosscutting.config import get_settings
from .domain.repositories import IdentityProjectionRepository, ProfileRepository
from .infrastructure.repositories.in_memory import (
    InMemoryIdentityProjectionRepository,
    InMemoryProfileRepository,
)


def _is_test_env() -> bool:
    return get_settings().is_test()


# =============================================================================
# Repositories (singletons)
# =============================================================================


@lru_cache(maxsize=1)
def get_identity_repository() -> IdentityProjectionRepository:
    """Identity projections (in-memory in test; Postgres at runtime)."""
    if _is_test_env():
        return InMemoryIdentityProjectionRepository()
    from .infrastructure.repositories.postgres import PostgresIdentityProjectionRepository

    return PostgresIdentityProjectionRepository()


@lru_cache(maxsize=1)
def get_profile_repository() -> ProfileRepository:
    """Profile records (in-memory in test; Postgres at runtime)."""
    if _is_test_env():
        return InMemoryProfileRepository()
    from .infrastructure.repositories.postgres import PostgresProfileRepository

    return PostgresProfileRepository()


@lru_cache(maxsize=1)
def get_fact_gatherer() -> OwnershipFactGatherer:
    """Shared gatherer; owns the lookup thread pool."""
    return OwnershipFactGatherer(
        get_identity_repository(), max_workers=get_settings().fact_lookup_workers
    )


# =============================================================================
# Use cases
# =============================================================================


def get_get_visible_profile_use_case() -> GetVisibleProfileUseCase:
    return GetVisibleProfileUseCase(
        fact_gatherer=get_fact_gatherer(),
        profile_repository=get_profile_repository(),
    )


def get_update_visible_profile_use_case() -> UpdateVisibleProfileUseCase:
    return UpdateVisibleProfileUseCase(
        fact_gatherer=get_fact_gatherer(),
        profile_repository=get_profile_repository(),
    )


def get_fetch_profile_use_case() -> FetchProfileUseCase:
    return FetchProfileUseCase(get_profile_repository())


def get_resolve_identity_use_case() -> ResolveIdentityUseCase:
    return ResolveIdentityUseCase(get_identity_repository())

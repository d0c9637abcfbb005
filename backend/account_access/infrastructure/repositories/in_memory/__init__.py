"""In-memory repositories (tests / local dev)."""

from .identity import InMemoryIdentityProjectionRepository
from .profile import InMemoryProfileRepository

__all__ = ["InMemoryIdentityProjectionRepository", "InMemoryProfileRepository"]

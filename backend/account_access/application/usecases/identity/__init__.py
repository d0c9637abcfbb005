"""Identity use cases (package exports)."""

from .resolve_identity import (
    IDENTITY_FINDERS,
    IdentityError,
    IdentityErrorCode,
    IdentityResult,
    ResolveIdentityUseCase,
)

__all__ = [
    "IDENTITY_FINDERS",
    "IdentityError",
    "IdentityErrorCode",
    "IdentityResult",
    "ResolveIdentityUseCase",
]

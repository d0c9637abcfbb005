"""HTTP schemas (pydantic DTOs)."""

from .profiles import IdentityRes, ProfileRes, UpdateProfileReq, UpdateProfileRes

__all__ = ["IdentityRes", "ProfileRes", "UpdateProfileReq", "UpdateProfileRes"]

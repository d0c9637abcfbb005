"""PostgreSQL repositories (psycopg 3, raw SQL)."""

from .identity import PostgresIdentityProjectionRepository
from .profile import PostgresProfileRepository

__all__ = ["PostgresIdentityProjectionRepository", "PostgresProfileRepository"]

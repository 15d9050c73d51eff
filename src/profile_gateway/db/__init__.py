"""
Database abstraction layer.

Provides a unified interface for Supabase, standalone PostgreSQL and
in-memory backends. Controlled by DB_PROVIDER environment variable
(default: supabase).
"""

from .errors import DatabaseError, ProfileNotFoundError
from .factory import get_db_client, reset_db_client, set_db_client
from .protocol import APIResponse, DatabaseClient

__all__ = [
    "get_db_client",
    "set_db_client",
    "reset_db_client",
    "DatabaseClient",
    "APIResponse",
    "DatabaseError",
    "ProfileNotFoundError",
]

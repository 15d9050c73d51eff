"""
Supabase Database Client Adapter

Wraps the supabase-py Client and exposes the DatabaseClient interface.
Calls are forwarded to the native supabase-py builder; failures are
converted to DatabaseError. Active when DB_PROVIDER=supabase (default).
"""

from __future__ import annotations

from typing import Any

import httpx
from postgrest.exceptions import APIError
from supabase import Client

from .errors import DatabaseError
from .protocol import APIResponse, Row

# PostgREST / SQLSTATE codes that carry a meaningful HTTP status
_CODE_TO_STATUS = {
    "PGRST301": 401,  # JWT could not be decoded
    "PGRST302": 401,  # anonymous access disabled
    "PGRST116": 406,  # single row requested, none or many returned
    "PGRST204": 400,  # unknown column
    "PGRST205": 404,  # unknown table
    "42501": 403,  # insufficient privilege (RLS)
    "42P01": 404,  # undefined table
    "23505": 409,  # unique violation
    "23502": 400,  # not null violation
    "22P02": 400,  # invalid text representation
}


def _status_for(code: str | None) -> int | None:
    if not code:
        return None
    if code in _CODE_TO_STATUS:
        return _CODE_TO_STATUS[code]
    # postgrest-py uses the raw HTTP status as the code when the body is not JSON
    if code.isdigit() and 400 <= int(code) <= 599:
        return int(code)
    return None


def to_database_error(exc: Exception) -> DatabaseError:
    """Convert a supabase-py / postgrest / httpx failure to DatabaseError."""
    if isinstance(exc, APIError):
        code = str(exc.code) if exc.code is not None else None
        message = exc.message or exc.details or "Unknown error"
        return DatabaseError(str(message), http_status=_status_for(code), code=code)
    if isinstance(exc, httpx.HTTPError):
        return DatabaseError(f"Could not reach Supabase: {exc}")
    return DatabaseError(str(exc) or type(exc).__name__)


class _SupabaseTableQueryBuilder:
    """
    Forwards query builder calls to the supabase-py request builder,
    converting the supabase APIResponse to our internal APIResponse.

    supabase-py mutations already return the affected rows, so select()
    after insert/update/delete only keeps the chain readable.
    """

    def __init__(self, native_builder: Any) -> None:
        self._b = native_builder
        self._mutating = False

    # --- Column selection ---

    def select(self, columns: str = "*") -> "_SupabaseTableQueryBuilder":
        if not self._mutating:
            self._b = self._b.select(columns)
        return self

    # --- Mutations ---

    def insert(self, data: Row | list[Row]) -> "_SupabaseTableQueryBuilder":
        self._b = self._b.insert(data)
        self._mutating = True
        return self

    def update(self, data: Row) -> "_SupabaseTableQueryBuilder":
        self._b = self._b.update(data)
        self._mutating = True
        return self

    def delete(self) -> "_SupabaseTableQueryBuilder":
        self._b = self._b.delete()
        self._mutating = True
        return self

    # --- Filters ---

    def eq(self, column: str, value: Any) -> "_SupabaseTableQueryBuilder":
        self._b = self._b.eq(column, value)
        return self

    # --- Execution ---

    def execute(self) -> APIResponse:
        try:
            native_response = self._b.execute()
        except (APIError, httpx.HTTPError) as e:
            raise to_database_error(e) from e
        return APIResponse(
            data=list(native_response.data or []),
            count=getattr(native_response, "count", None),
        )


class SupabaseDatabaseClient:
    """
    Supabase-backed implementation of DatabaseClient.
    Wraps a supabase-py Client instance and delegates all operations.
    """

    def __init__(self, native_client: Client) -> None:
        self._client = native_client

    def table(self, name: str) -> _SupabaseTableQueryBuilder:
        return _SupabaseTableQueryBuilder(self._client.table(name))

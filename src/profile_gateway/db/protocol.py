"""
Database Client Protocol

Defines the structural interface that all database adapters must implement.
Uses Python Protocols for structural subtyping (duck typing): adapters
do not need to inherit from these classes.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Protocol, runtime_checkable

Row = dict[str, Any]


@dataclass
class APIResponse:
    """
    Response wrapper matching the supabase-py APIResponse structure.
    Every adapter returns this so callers read rows the same way.
    """

    data: list[Row] | None = None
    count: int | None = None


@runtime_checkable
class TableQueryBuilder(Protocol):
    """
    Fluent query builder for one table (mirrors supabase-py's request builder).

    execute() raises DatabaseError on any backend failure.
    """

    # Column selection
    def select(self, columns: str = "*") -> "TableQueryBuilder": ...

    # Mutation
    def insert(self, data: Row | list[Row]) -> "TableQueryBuilder": ...
    def update(self, data: Row) -> "TableQueryBuilder": ...
    def delete(self) -> "TableQueryBuilder": ...

    # Filters
    def eq(self, column: str, value: Any) -> "TableQueryBuilder": ...

    # Execution
    def execute(self) -> APIResponse: ...


@runtime_checkable
class DatabaseClient(Protocol):
    """
    Unified database client interface.

    Implemented by SupabaseDatabaseClient (wraps supabase-py),
    PostgresDatabaseClient (psycopg2) and MemoryDatabaseClient.
    """

    def table(self, name: str) -> TableQueryBuilder: ...

"""
In-Memory Database Client Adapter

Dict-based implementation of DatabaseClient for development and tests.
State is lost when the process restarts. Active when DB_PROVIDER=memory.

Mirrors the PostgREST behaviour the routes rely on:
- inserts assign an integer ``id`` and a ``created_at`` timestamp
- update/delete return the affected rows
- filter values compare by their text form, as PostgREST casts them
"""

from __future__ import annotations

import copy
import threading
from datetime import datetime, timezone
from enum import Enum, auto
from itertools import count
from typing import Any

from ..config.logfire_config import get_logger
from .errors import DatabaseError
from .protocol import APIResponse, Row

logger = get_logger(__name__)


class _Op(Enum):
    SELECT = auto()
    INSERT = auto()
    UPDATE = auto()
    DELETE = auto()


def _same(stored: Any, wanted: Any) -> bool:
    if stored is None or wanted is None:
        return False
    return stored == wanted or str(stored) == str(wanted)


class _MemoryTable:
    def __init__(self) -> None:
        self.rows: list[Row] = []
        self.ids = count(1)


class MemoryTableQueryBuilder:
    """Collects one operation plus filters and applies it under the store lock."""

    def __init__(self, store: "MemoryDatabaseClient", table: str) -> None:
        self._store = store
        self._table = table
        self._op: _Op | None = None
        self._columns = "*"
        self._data: Row | list[Row] | None = None
        self._filters: list[tuple[str, Any]] = []

    # --- Column selection ---

    def select(self, columns: str = "*") -> "MemoryTableQueryBuilder":
        if self._op is None:
            self._op = _Op.SELECT
        self._columns = columns
        return self

    # --- Mutations ---

    def insert(self, data: Row | list[Row]) -> "MemoryTableQueryBuilder":
        self._op = _Op.INSERT
        self._data = data
        return self

    def update(self, data: Row) -> "MemoryTableQueryBuilder":
        self._op = _Op.UPDATE
        self._data = data
        return self

    def delete(self) -> "MemoryTableQueryBuilder":
        self._op = _Op.DELETE
        return self

    # --- Filters ---

    def eq(self, column: str, value: Any) -> "MemoryTableQueryBuilder":
        self._filters.append((column, value))
        return self

    # --- Execution ---

    def execute(self) -> APIResponse:
        if self._op is None:
            raise DatabaseError(f"No operation set on query builder for table {self._table}")

        with self._store.lock:
            table = self._store.get_table(self._table)
            if self._op is _Op.SELECT:
                rows = [r for r in table.rows if self._matches(r)]
            elif self._op is _Op.INSERT:
                rows = self._insert(table)
            elif self._op is _Op.UPDATE:
                rows = [r for r in table.rows if self._matches(r)]
                for r in rows:
                    r.update(self._data or {})
            else:
                rows = [r for r in table.rows if self._matches(r)]
                table.rows = [r for r in table.rows if not any(r is d for d in rows)]

            data = [self._project(r) for r in rows]

        logger.debug("memory %s on %s -> %d row(s)", self._op.name, self._table, len(data))
        return APIResponse(data=data, count=len(data))

    # --- Internals ---

    def _insert(self, table: _MemoryTable) -> list[Row]:
        rows = self._data if isinstance(self._data, list) else [self._data or {}]
        inserted = []
        for values in rows:
            row = {
                "id": next(table.ids),
                "created_at": datetime.now(timezone.utc).isoformat(),
            }
            row.update(values)
            table.rows.append(row)
            inserted.append(row)
        return inserted

    def _matches(self, row: Row) -> bool:
        return all(_same(row.get(column), value) for column, value in self._filters)

    def _project(self, row: Row) -> Row:
        if self._columns.strip() == "*":
            return copy.deepcopy(row)
        wanted = [c.strip() for c in self._columns.split(",") if c.strip()]
        return {c: copy.deepcopy(row.get(c)) for c in wanted}


class MemoryDatabaseClient:
    """
    In-process implementation of DatabaseClient.
    Tables are created on first access.
    """

    def __init__(self) -> None:
        self.lock = threading.Lock()
        self._tables: dict[str, _MemoryTable] = {}

    def get_table(self, name: str) -> _MemoryTable:
        if name not in self._tables:
            self._tables[name] = _MemoryTable()
        return self._tables[name]

    def table(self, name: str) -> MemoryTableQueryBuilder:
        return MemoryTableQueryBuilder(self, name)

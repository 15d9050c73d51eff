"""
PostgreSQL Database Client Adapter

Direct psycopg2-based implementation of DatabaseClient, for running the
gateway against a plain Postgres database holding the ``profiles`` table.
Implements the same fluent query builder API as supabase-py.

Active when DB_PROVIDER=postgres + POSTGRES_DSN is set.
"""

from __future__ import annotations

import threading
from enum import Enum, auto
from typing import Any

import psycopg2
import psycopg2.errors
import psycopg2.extras
import psycopg2.pool
from psycopg2 import sql

from ..config.logfire_config import get_logger
from .errors import DatabaseError
from .protocol import APIResponse, Row

logger = get_logger(__name__)


class _Op(Enum):
    SELECT = auto()
    INSERT = auto()
    UPDATE = auto()
    DELETE = auto()


def _adapt_value(v: Any) -> Any:
    """Convert Python objects to psycopg2-compatible types."""
    if isinstance(v, (dict, list)):
        return psycopg2.extras.Json(v)
    return v


def to_database_error(exc: psycopg2.Error) -> DatabaseError:
    """Convert a psycopg2 error to DatabaseError, keeping the SQLSTATE."""
    message = (exc.pgerror or str(exc) or type(exc).__name__).strip()
    if isinstance(exc, psycopg2.IntegrityError):
        status = 409 if isinstance(exc, psycopg2.errors.UniqueViolation) else 400
    elif isinstance(exc, psycopg2.DataError):
        status = 400
    elif isinstance(exc, psycopg2.errors.InsufficientPrivilege):
        status = 403
    else:
        status = None
    return DatabaseError(message, http_status=status, code=exc.pgcode)


class PostgresTableQueryBuilder:
    """
    Fluent query builder that mirrors supabase-py's request builder.
    Builds and executes a single SQL statement per execute() call.
    """

    def __init__(
        self,
        pool: psycopg2.pool.ThreadedConnectionPool,
        table: str,
        slots: threading.BoundedSemaphore | None = None,
    ) -> None:
        self._pool = pool
        self._table = table
        self._slots = slots
        self._op: _Op | None = None
        self._columns = "*"
        self._data: Row | list[Row] | None = None
        self._filters: list[tuple[str, Any]] = []

    # --- Column selection ---

    def select(self, columns: str = "*") -> "PostgresTableQueryBuilder":
        # after a mutation, select() only narrows the RETURNING list
        if self._op is None:
            self._op = _Op.SELECT
        self._columns = columns
        return self

    # --- Mutations ---

    def insert(self, data: Row | list[Row]) -> "PostgresTableQueryBuilder":
        self._op = _Op.INSERT
        self._data = data
        return self

    def update(self, data: Row) -> "PostgresTableQueryBuilder":
        self._op = _Op.UPDATE
        self._data = data
        return self

    def delete(self) -> "PostgresTableQueryBuilder":
        self._op = _Op.DELETE
        return self

    # --- Filters ---

    def eq(self, column: str, value: Any) -> "PostgresTableQueryBuilder":
        self._filters.append((column, value))
        return self

    # --- Execution ---

    def execute(self) -> APIResponse:
        query, params = self.build_sql()
        if self._slots is not None:
            # waits for a free connection instead of failing with PoolError
            self._slots.acquire()
        conn = None
        try:
            conn = self._pool.getconn()
            with conn.cursor(cursor_factory=psycopg2.extras.RealDictCursor) as cur:
                logger.debug("PostgreSQL %s on %s | params=%s", self._op.name, self._table, params)
                cur.execute(query, params)
                conn.commit()
                rows = cur.fetchall() if cur.description else []
                data = [dict(r) for r in rows]
                return APIResponse(data=data, count=len(data))
        except psycopg2.Error as e:
            if conn is not None and not conn.closed:
                conn.rollback()
            raise to_database_error(e) from e
        finally:
            if conn is not None:
                self._pool.putconn(conn)
            if self._slots is not None:
                self._slots.release()

    # --- SQL builder ---

    def _returning(self) -> sql.Composable:
        if self._columns.strip() == "*":
            return sql.SQL("*")
        cols = [c.strip() for c in self._columns.split(",") if c.strip()]
        return sql.SQL(", ").join(sql.Identifier(c) for c in cols)

    def _where(self) -> tuple[sql.Composable, list[Any]]:
        if not self._filters:
            return sql.SQL(""), []
        clauses = [
            sql.SQL("{} = %s").format(sql.Identifier(column))
            for column, _ in self._filters
        ]
        params = [_adapt_value(value) for _, value in self._filters]
        return sql.SQL(" WHERE ") + sql.SQL(" AND ").join(clauses), params

    def build_sql(self) -> tuple[sql.Composed, list[Any]]:
        tbl = sql.Identifier(self._table)
        where, where_params = self._where()

        if self._op is _Op.SELECT:
            query = sql.SQL("SELECT {} FROM {}").format(self._returning(), tbl) + where
            return query, where_params

        if self._op is _Op.INSERT:
            rows = self._data if isinstance(self._data, list) else [self._data or {}]
            cols = list(rows[0].keys()) if rows else []
            if not cols:
                return sql.SQL("SELECT * FROM {} WHERE FALSE").format(tbl), []
            placeholder = sql.SQL("(") + sql.SQL(", ").join([sql.Placeholder()] * len(cols)) + sql.SQL(")")
            query = sql.SQL("INSERT INTO {} ({}) VALUES {} RETURNING {}").format(
                tbl,
                sql.SQL(", ").join(sql.Identifier(c) for c in cols),
                sql.SQL(", ").join([placeholder] * len(rows)),
                self._returning(),
            )
            params = [_adapt_value(row.get(c)) for row in rows for c in cols]
            return query, params

        if self._op is _Op.UPDATE:
            data = self._data or {}
            if not data:
                raise DatabaseError("Update requires at least one column", http_status=400)
            set_sql = sql.SQL(", ").join(
                sql.SQL("{} = %s").format(sql.Identifier(k)) for k in data
            )
            query = (
                sql.SQL("UPDATE {} SET ").format(tbl)
                + set_sql
                + where
                + sql.SQL(" RETURNING {}").format(self._returning())
            )
            return query, [_adapt_value(v) for v in data.values()] + where_params

        if self._op is _Op.DELETE:
            query = (
                sql.SQL("DELETE FROM {}").format(tbl)
                + where
                + sql.SQL(" RETURNING {}").format(self._returning())
            )
            return query, where_params

        raise DatabaseError(f"No operation set on query builder for table {self._table}")


class PostgresDatabaseClient:
    """
    PostgreSQL-backed implementation of DatabaseClient.
    Uses psycopg2 with a threaded connection pool.
    """

    def __init__(self, dsn: str, min_conn: int = 1, max_conn: int = 10) -> None:
        try:
            self._pool = psycopg2.pool.ThreadedConnectionPool(min_conn, max_conn, dsn=dsn)
        except psycopg2.Error as e:
            raise DatabaseError(f"Failed to connect to PostgreSQL: {e}") from e
        self._slots = threading.BoundedSemaphore(max_conn)
        logger.info("PostgresDatabaseClient initialized (pool min=%d max=%d)", min_conn, max_conn)

    def table(self, name: str) -> PostgresTableQueryBuilder:
        return PostgresTableQueryBuilder(self._pool, name, self._slots)

    def close(self) -> None:
        """Close all connections in the pool."""
        self._pool.closeall()
        logger.info("PostgresDatabaseClient pool closed")

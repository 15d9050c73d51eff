"""
Database errors.

Every adapter converts its backend's failures into DatabaseError so the
routes only ever deal with one error shape.
"""

from __future__ import annotations


class DatabaseError(Exception):
    """
    Failure reported by (or while reaching) the database backend.

    Attributes:
        message: Human-readable description, relayed to API clients.
        http_status: HTTP status suggested by the backend, if it gave one.
        code: Backend-specific error code (PostgREST or SQLSTATE), if any.
    """

    def __init__(
        self, message: str, http_status: int | None = None, code: str | None = None
    ) -> None:
        super().__init__(message)
        self.message = message
        self.http_status = http_status
        self.code = code

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(message={self.message!r}, "
            f"http_status={self.http_status!r}, code={self.code!r})"
        )


class ProfileNotFoundError(DatabaseError):
    """A mutation targeting a single profile matched no row."""

    def __init__(self, message: str) -> None:
        super().__init__(message, http_status=404)

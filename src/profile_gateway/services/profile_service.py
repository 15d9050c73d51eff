"""
Profile Service

One method per operation on the remote ``profiles`` table. Each method is a
single round trip: build the query, execute it, return the rows. Nothing is
cached; failures propagate as DatabaseError.
"""

from typing import Any

from ..config.logfire_config import get_logger, safe_span
from ..db.errors import DatabaseError, ProfileNotFoundError
from ..db.protocol import DatabaseClient

logger = get_logger(__name__)

PROFILES_TABLE = "profiles"


class ProfileService:
    """Pass-through operations on the profiles table."""

    def __init__(self, supabase_client: DatabaseClient | None = None):
        """Initialize with an explicit client, or the process-wide one."""
        if supabase_client is None:
            from ..db.factory import get_db_client

            supabase_client = get_db_client()
        self.supabase_client = supabase_client

    def list_profiles(self) -> list[dict[str, Any]]:
        """Fetch every row of the table (used as a connectivity check)."""
        with safe_span("profiles.list"):
            response = self.supabase_client.table(PROFILES_TABLE).select("*").execute()
        return response.data or []

    def create_profile(self, username: Any, bio: Any) -> dict[str, Any]:
        """
        Insert one profile and return the row the database stored.

        Values are forwarded unchecked; None becomes a SQL NULL.

        Raises:
            DatabaseError: if the insert fails or returns no row.
        """
        with safe_span("profiles.create", username=username):
            response = (
                self.supabase_client.table(PROFILES_TABLE)
                .insert([{"username": username, "bio": bio}])
                .select()
                .execute()
            )
        rows = response.data or []
        if not rows:
            raise DatabaseError("Profile was not returned by the database")
        logger.debug("Created profile id=%s", rows[0].get("id"))
        return rows[0]

    def delete_profiles_by_username(self, username: Any) -> list[dict[str, Any]]:
        """Delete every profile with this username; returns the deleted rows."""
        with safe_span("profiles.delete", username=username):
            response = (
                self.supabase_client.table(PROFILES_TABLE)
                .delete()
                .eq("username", username)
                .select()
                .execute()
            )
        rows = response.data or []
        logger.debug("Deleted %d profile(s) for username=%r", len(rows), username)
        return rows

    def update_bio(self, profile_id: str, bio: Any) -> dict[str, Any]:
        """
        Set the bio of one profile and return the updated row.

        Raises:
            ProfileNotFoundError: if no row has this id.
            DatabaseError: on any other backend failure.
        """
        with safe_span("profiles.update", profile_id=profile_id):
            response = (
                self.supabase_client.table(PROFILES_TABLE)
                .update({"bio": bio})
                .eq("id", profile_id)
                .select()
                .execute()
            )
        rows = response.data or []
        if not rows:
            raise ProfileNotFoundError(f"Profile ID {profile_id} not found")
        return rows[0]

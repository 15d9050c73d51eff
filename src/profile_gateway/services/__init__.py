"""Service layer: operations on the remote tables."""

from .profile_service import PROFILES_TABLE, ProfileService

__all__ = ["PROFILES_TABLE", "ProfileService"]

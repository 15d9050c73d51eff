"""HTTP routers."""

from .profiles_api import router as profiles_router

__all__ = ["profiles_router"]

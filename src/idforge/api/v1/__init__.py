"""Version 1 API endpoints."""

from .endpoints import ids_router, system_router

__all__ = [
    "ids_router",
    "system_router",
]

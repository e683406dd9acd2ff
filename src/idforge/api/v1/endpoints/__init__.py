"""API endpoint modules for version 1."""

from .ids import router as ids_router
from .system import router as system_router

__all__ = [
    "ids_router",
    "system_router",
]

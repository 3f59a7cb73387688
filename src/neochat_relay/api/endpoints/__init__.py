"""API endpoint modules."""

from .messages import router as messages_router
from .profiles import router as profiles_router
from .system import router as system_router

__all__ = [
    "messages_router",
    "profiles_router",
    "system_router",
]

# src/chatline/api/endpoints/__init__.py
"""API endpoint modules."""

from .auth import router as auth_router
from .messages import router as messages_router
from .system import router as system_router

__all__ = [
    "auth_router",
    "messages_router",
    "system_router",
]

"""HTTP API for Chatline."""

from .endpoints import auth_router, messages_router, system_router

__all__ = [
    "auth_router",
    "messages_router",
    "system_router",
]

"""Business logic services for the Chatline application."""

from .auth import AuthService
from .messages import MessageService
from .notifications import WelcomeNotifier

__all__ = [
    "AuthService",
    "MessageService",
    "WelcomeNotifier",
]

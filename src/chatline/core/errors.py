"""Exception hierarchy shared by services and the HTTP layer.

Services raise these; ``chatline.main`` converts them into JSON responses.
Messages are stable and safe to show to clients.
"""

from __future__ import annotations


class ChatlineError(Exception):
    """Base class for errors with a client-facing status and message."""

    status_code: int = 500
    default_message: str = "Internal server error"

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)


class InvalidInputError(ChatlineError):
    """Missing or malformed input."""

    status_code = 400
    default_message = "Invalid request"


class AuthError(ChatlineError):
    """Missing or invalid session token."""

    status_code = 401
    default_message = "Unauthorized"


class InvalidCredentialsError(AuthError):
    """Login failed. Deliberately does not say which field was wrong."""

    status_code = 400
    default_message = "Invalid credentials"


class NotFoundError(ChatlineError):
    """A referenced entity does not exist."""

    status_code = 404
    default_message = "Not found"


class ConflictError(ChatlineError):
    """A uniqueness rule would be violated."""

    status_code = 400
    default_message = "Already exists"


class DependencyError(ChatlineError):
    """The store or an external service failed.

    The message shown to clients is always the generic default; details
    belong in the server log.
    """

    status_code = 500


class ConfigError(ChatlineError):
    """Required configuration is missing or unusable."""

    status_code = 500

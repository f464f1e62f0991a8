"""Best-effort notifications dispatched after a response is sent."""

from __future__ import annotations

import dataclasses
import logging
from functools import lru_cache

from chatline.core.errors import ChatlineError
from chatline.core.settings import settings
from chatline.services.email import ResendEmailSender, get_email_sender, render_welcome_email

logger = logging.getLogger(__name__)


class WelcomeNotifier:
    """Sends the welcome email for a new account.

    ``notify`` never raises: it runs as a background task after the signup
    response, so failures are logged and dropped.
    """

    def __init__(self, sender: ResendEmailSender, client_url: str) -> None:
        self.sender = sender
        self.client_url = client_url

    async def notify(self, email: str, full_name: str) -> bool:
        """Send the welcome email. Return True if it was handed to the provider."""
        if not self.sender.configured:
            logger.info("Email delivery not configured; skipping welcome email for %s", email)
            return False

        message = dataclasses.replace(
            render_welcome_email(full_name, self.client_url),
            to=email,
        )
        try:
            await self.sender.send(message)
        except ChatlineError as err:
            logger.warning("Failed to send welcome email to %s: %s", email, err.message)
            return False
        except Exception:
            logger.exception("Unexpected error sending welcome email to %s", email)
            return False
        return True


@lru_cache(maxsize=1)
def get_welcome_notifier() -> WelcomeNotifier:
    """Return the shared notifier configured from settings."""
    return WelcomeNotifier(get_email_sender(), settings.client_url)

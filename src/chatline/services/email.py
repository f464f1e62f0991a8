"""Transactional email delivery through the Resend HTTP API."""

from __future__ import annotations

import html
import logging
from dataclasses import dataclass
from functools import lru_cache

import httpx

from chatline.core.errors import ConfigError, DependencyError
from chatline.core.settings import settings

logger = logging.getLogger(__name__)

RESEND_API_URL = "https://api.resend.com/emails"


@dataclass(frozen=True)
class EmailMessage:
    """A rendered email ready to send."""

    to: str
    subject: str
    html: str


def render_welcome_email(name: str, client_url: str) -> EmailMessage:
    """Build the welcome email sent after registration (recipient left blank)."""
    safe_name = html.escape(name)
    safe_url = html.escape(client_url, quote=True)
    body = (
        f"<h1>Welcome to {html.escape(settings.app_name)}, {safe_name}!</h1>"
        "<p>Your account is ready. Find your contacts and start chatting.</p>"
        f'<p><a href="{safe_url}">Open {html.escape(settings.app_name)}</a></p>'
    )
    return EmailMessage(to="", subject=f"Welcome to {settings.app_name}!", html=body)


class ResendEmailSender:
    """Sends email with the Resend REST API."""

    def __init__(
        self,
        api_key: str | None,
        sender: str,
        sender_name: str,
        *,
        timeout_seconds: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._api_key = api_key
        self.sender = sender
        self.sender_name = sender_name
        self.timeout_seconds = timeout_seconds
        self._transport = transport

    @property
    def configured(self) -> bool:
        return bool(self._api_key)

    async def send(self, message: EmailMessage) -> str:
        """Send ``message`` and return the provider's message id."""
        if not self.configured:
            raise ConfigError("Email delivery is not configured")

        payload = {
            "from": f"{self.sender_name} <{self.sender}>",
            "to": [message.to],
            "subject": message.subject,
            "html": message.html,
        }
        headers = {"Authorization": f"Bearer {self._api_key}"}
        try:
            async with httpx.AsyncClient(
                timeout=self.timeout_seconds, transport=self._transport
            ) as client:
                response = await client.post(RESEND_API_URL, json=payload, headers=headers)
                response.raise_for_status()
        except httpx.HTTPError as err:
            raise DependencyError(f"Email delivery failed: {err}") from err

        message_id = str(response.json().get("id", ""))
        logger.info("Sent email %r to %s (id=%s)", message.subject, message.to, message_id)
        return message_id


@lru_cache(maxsize=1)
def get_email_sender() -> ResendEmailSender:
    """Return the shared sender configured from settings."""
    return ResendEmailSender(
        settings.resend_api_key,
        settings.email_from,
        settings.email_from_name,
        timeout_seconds=settings.http_timeout_seconds,
    )

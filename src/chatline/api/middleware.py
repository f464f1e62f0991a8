"""ASGI middleware applied to every HTTP request."""

from __future__ import annotations

from fastapi import HTTPException, status
from fastapi.responses import JSONResponse
from starlette.datastructures import Headers
from starlette.types import ASGIApp, Message, Receive, Scope, Send

from chatline.core.settings import settings

BODY_TOO_LARGE = "Request body too large"


class BodySizeLimitMiddleware:
    """Reject request bodies larger than ``settings.max_body_bytes`` with 413.

    A declared ``Content-Length`` over the limit is refused before the app
    runs. Bodies without one (chunked uploads) are counted as they are
    received, and reading past the limit raises a 413 ``HTTPException``
    out of the route's body parsing.
    """

    def __init__(self, app: ASGIApp) -> None:
        self.app = app

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        limit = settings.max_body_bytes
        content_length = Headers(scope=scope).get("content-length")
        if content_length and content_length.isdigit() and int(content_length) > limit:
            response = JSONResponse(
                status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
                content={"detail": BODY_TOO_LARGE},
            )
            await response(scope, receive, send)
            return

        received = 0

        async def limited_receive() -> Message:
            nonlocal received
            message = await receive()
            if message["type"] == "http.request":
                received += len(message.get("body", b""))
                if received > limit:
                    raise HTTPException(
                        status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
                        detail=BODY_TOO_LARGE,
                    )
            return message

        await self.app(scope, limited_receive, send)

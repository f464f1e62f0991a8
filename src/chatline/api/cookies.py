"""Session cookie helpers."""

from __future__ import annotations

from fastapi import Response

from chatline.api.dependencies import SESSION_COOKIE


def set_session_cookie(response: Response, token: str, *, max_age: int, secure: bool) -> None:
    """Attach the session token as an HTTP-only, same-site cookie."""
    response.set_cookie(
        SESSION_COOKIE,
        token,
        max_age=max_age,
        httponly=True,
        samesite="strict",
        secure=secure,
    )


def clear_session_cookie(response: Response, *, secure: bool) -> None:
    """Overwrite the session cookie with an empty value that expires immediately."""
    response.set_cookie(
        SESSION_COOKIE,
        "",
        max_age=0,
        httponly=True,
        samesite="strict",
        secure=secure,
    )

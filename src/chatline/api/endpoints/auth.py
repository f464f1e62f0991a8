# src/chatline/api/endpoints/auth.py
"""Authentication endpoints for the Chatline API."""

from __future__ import annotations

from fastapi import APIRouter, BackgroundTasks, Response, status

from chatline.api.cookies import clear_session_cookie, set_session_cookie
from chatline.api.dependencies import AuthServiceDep, CurrentUserDep, WelcomeNotifierDep
from chatline.core.settings import settings
from chatline.schemas.common import StatusResponse
from chatline.schemas.user import (
    AuthResponse,
    LoginRequest,
    ProfileUpdateRequest,
    ProfileUpdateResponse,
    SignupRequest,
    UserPublic,
)

router = APIRouter(prefix="/auth", tags=["authentication"])


def _start_session(response: Response, token: str) -> None:
    set_session_cookie(
        response,
        token,
        max_age=settings.jwt_expire_seconds,
        secure=settings.cookie_secure,
    )


# signup and login stay sync so bcrypt runs in FastAPI's threadpool, off the event loop.
@router.post(
    "/signup",
    summary="Register a new account",
    status_code=status.HTTP_201_CREATED,
    response_model=AuthResponse,
)
def signup(
    payload: SignupRequest,
    response: Response,
    background_tasks: BackgroundTasks,
    auth_service: AuthServiceDep,
    notifier: WelcomeNotifierDep,
) -> AuthResponse:
    """Create an account, start its session and queue the welcome email."""
    user, token = auth_service.register(payload)
    _start_session(response, token)
    background_tasks.add_task(notifier.notify, user.email, user.full_name)
    return AuthResponse(
        message="Signed up successfully",
        user=UserPublic.model_validate(user),
    )


@router.post(
    "/login",
    summary="Log in with email and password",
    response_model=AuthResponse,
)
def login(
    payload: LoginRequest,
    response: Response,
    auth_service: AuthServiceDep,
) -> AuthResponse:
    user, token = auth_service.login(payload)
    _start_session(response, token)
    return AuthResponse(
        message="Logged in successfully",
        user=UserPublic.model_validate(user),
    )


@router.post("/logout", summary="End the current session", response_model=StatusResponse)
async def logout(response: Response) -> StatusResponse:
    """Clear the session cookie. Safe to call without a session."""
    clear_session_cookie(response, secure=settings.cookie_secure)
    return StatusResponse(message="Logged out successfully")


@router.put(
    "/update-profile",
    summary="Replace the profile picture",
    response_model=ProfileUpdateResponse,
)
async def update_profile(
    payload: ProfileUpdateRequest,
    current_user: CurrentUserDep,
    auth_service: AuthServiceDep,
) -> ProfileUpdateResponse:
    user = await auth_service.update_profile(current_user, payload.profile_pic)
    return ProfileUpdateResponse(
        message="Profile updated successfully",
        updated_user=UserPublic.model_validate(user),
    )


@router.get("/check", summary="Return the logged-in user", response_model=UserPublic)
async def check(current_user: CurrentUserDep) -> UserPublic:
    return UserPublic.model_validate(current_user)

"""User and authentication Pydantic schemas."""

from pydantic import Field

from .common import ApiModel, StatusResponse, UtcDatetime


class SignupRequest(ApiModel):
    """Registration form. Presence and format are checked by the auth service."""

    full_name: str | None = Field(None, description="Display name")
    email: str | None = Field(None, description="Login email, unique per account")
    password: str | None = Field(None, description="Plaintext password, at least 6 characters")


class LoginRequest(ApiModel):
    """Login form."""

    email: str | None = None
    password: str | None = None


class ProfileUpdateRequest(ApiModel):
    """Profile picture update carrying a data URL or remote image URL."""

    profile_pic: str | None = Field(None, description="Image payload to upload")


class UserPublic(ApiModel):
    """User fields that may leave the server. The password hash is not one of them."""

    id: str
    full_name: str
    email: str
    profile_pic: str = ""
    created_at: UtcDatetime | None = None
    updated_at: UtcDatetime | None = None


class AuthResponse(StatusResponse):
    """Signup and login response."""

    user: UserPublic


class ProfileUpdateResponse(StatusResponse):
    """Profile update response."""

    updated_user: UserPublic

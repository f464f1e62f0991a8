"""
Pydantic schemas for API request/response models.

These schemas define the structure of API data for serialization and validation.
"""

from .common import ApiModel, StatusResponse
from .message import (
    ChatPartnersResponse,
    ContactsResponse,
    ConversationResponse,
    MessagePublic,
    SendMessageRequest,
    SentMessageResponse,
)
from .user import (
    AuthResponse,
    LoginRequest,
    ProfileUpdateRequest,
    ProfileUpdateResponse,
    SignupRequest,
    UserPublic,
)

__all__ = [
    "ApiModel", "StatusResponse",
    "ChatPartnersResponse", "ContactsResponse", "ConversationResponse",
    "MessagePublic", "SendMessageRequest", "SentMessageResponse",
    "AuthResponse", "LoginRequest", "ProfileUpdateRequest", "ProfileUpdateResponse",
    "SignupRequest", "UserPublic",
]

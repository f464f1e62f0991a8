"""Message-related Pydantic schemas."""

from pydantic import Field

from .common import ApiModel, StatusResponse, UtcDatetime
from .user import UserPublic


class SendMessageRequest(ApiModel):
    """Payload for sending a message. At least one field must be set."""

    text: str | None = Field(None, description="Message text")
    image: str | None = Field(None, description="Image payload to upload")


class MessagePublic(ApiModel):
    """Schema for message information returned by the API."""

    id: str
    sender_id: str
    receiver_id: str
    text: str | None = None
    image: str | None = None
    created_at: UtcDatetime


class ContactsResponse(StatusResponse):
    contacts: list[UserPublic]


class ChatPartnersResponse(StatusResponse):
    chats: list[UserPublic]


class ConversationResponse(StatusResponse):
    messages: list[MessagePublic]


class SentMessageResponse(StatusResponse):
    data: MessagePublic

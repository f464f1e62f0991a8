# src/chatline/api/endpoints/messages.py
"""Contact and direct message endpoints for the Chatline API."""

from __future__ import annotations

from fastapi import APIRouter, status

from chatline.api.dependencies import CurrentUserDep, MessageServiceDep
from chatline.schemas.message import (
    ChatPartnersResponse,
    ContactsResponse,
    ConversationResponse,
    MessagePublic,
    SendMessageRequest,
    SentMessageResponse,
)
from chatline.schemas.user import UserPublic

router = APIRouter(prefix="/messages", tags=["messages"])


@router.get("/contacts", response_model=ContactsResponse)
async def get_contacts(
    current_user: CurrentUserDep,
    message_service: MessageServiceDep,
) -> ContactsResponse:
    """List every other user."""
    users = message_service.list_contacts(current_user)
    return ContactsResponse(
        message="Fetched contacts successfully",
        contacts=[UserPublic.model_validate(user) for user in users],
    )


@router.get("/chats", response_model=ChatPartnersResponse)
async def get_chat_partners(
    current_user: CurrentUserDep,
    message_service: MessageServiceDep,
) -> ChatPartnersResponse:
    """List users the caller has exchanged messages with."""
    users = message_service.list_chat_partners(current_user)
    return ChatPartnersResponse(
        message="Fetched chat partners successfully",
        chats=[UserPublic.model_validate(user) for user in users],
    )


@router.get("/{user_id}", response_model=ConversationResponse)
async def get_messages(
    user_id: str,
    current_user: CurrentUserDep,
    message_service: MessageServiceDep,
) -> ConversationResponse:
    """Return the conversation with ``user_id``, oldest message first."""
    messages = message_service.list_messages(current_user, user_id)
    return ConversationResponse(
        message="Fetched messages successfully",
        messages=[MessagePublic.model_validate(message) for message in messages],
    )


@router.post(
    "/send/{user_id}",
    status_code=status.HTTP_201_CREATED,
    response_model=SentMessageResponse,
)
async def send_message(
    user_id: str,
    payload: SendMessageRequest,
    current_user: CurrentUserDep,
    message_service: MessageServiceDep,
) -> SentMessageResponse:
    """Send a text and/or image message to ``user_id``."""
    message = await message_service.send(current_user, user_id, payload)
    return SentMessageResponse(
        message="Message sent successfully",
        data=MessagePublic.model_validate(message),
    )

"""Direct messaging between users.

Delivery is pull-only: a stored message reaches its receiver the next time
they list the conversation.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence

from sqlalchemy import and_, or_
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from chatline.core.errors import DependencyError, InvalidInputError, NotFoundError
from chatline.models import Message, User
from chatline.schemas.message import SendMessageRequest
from chatline.services import user_service
from chatline.services.assets import AssetUploader

logger = logging.getLogger(__name__)


def partner_ids(messages: Sequence[Message], user_id: str) -> list[str]:
    """Return the distinct counterpart ids in ``messages``, in first-seen order."""
    seen: dict[str, None] = {}
    for message in messages:
        other = message.receiver_id if message.sender_id == user_id else message.sender_id
        seen.setdefault(other, None)
    return list(seen)


class MessageService:
    """Contacts, chat partners and conversations for one caller."""

    def __init__(self, db: Session, uploader: AssetUploader) -> None:
        self.db = db
        self.uploader = uploader

    def list_contacts(self, caller: User) -> Sequence[User]:
        """Return every user except the caller.

        Unpaginated; fine for small deployments only.
        """
        try:
            return user_service.list_users_except(self.db, caller.id)
        except SQLAlchemyError as err:
            logger.error("Failed to list contacts for %s", caller.id, exc_info=True)
            raise DependencyError() from err

    def list_chat_partners(self, caller: User) -> Sequence[User]:
        """Return the users the caller has exchanged at least one message with."""
        try:
            messages = (
                self.db.query(Message)
                .filter(or_(Message.sender_id == caller.id, Message.receiver_id == caller.id))
                .all()
            )
            return user_service.get_users_by_ids(self.db, partner_ids(messages, caller.id))
        except SQLAlchemyError as err:
            logger.error("Failed to list chat partners for %s", caller.id, exc_info=True)
            raise DependencyError() from err

    def list_messages(self, caller: User, other_id: str) -> Sequence[Message]:
        """Return the conversation between the caller and ``other_id``, oldest first."""
        try:
            if not user_service.user_exists(self.db, other_id):
                raise NotFoundError("Receiver not found")
            return (
                self.db.query(Message)
                .filter(
                    or_(
                        and_(Message.sender_id == caller.id, Message.receiver_id == other_id),
                        and_(Message.sender_id == other_id, Message.receiver_id == caller.id),
                    )
                )
                .order_by(Message.created_at.asc(), Message.id.asc())
                .all()
            )
        except SQLAlchemyError as err:
            logger.error("Failed to load conversation for %s", caller.id, exc_info=True)
            raise DependencyError() from err

    async def send(self, caller: User, other_id: str, payload: SendMessageRequest) -> Message:
        """Store a message from the caller to ``other_id``."""
        if not payload.text and not payload.image:
            raise InvalidInputError("Text or image is required")

        try:
            receiver_exists = user_service.user_exists(self.db, other_id)
        except SQLAlchemyError as err:
            logger.error("Failed to look up receiver %s", other_id, exc_info=True)
            raise DependencyError() from err
        if not receiver_exists:
            raise NotFoundError("Receiver not found")
        if caller.id == other_id:
            raise InvalidInputError("Cannot send message to yourself")

        image_url: str | None = None
        if payload.image:
            image_url = await self.uploader.upload(payload.image)

        message = Message(
            sender_id=caller.id,
            receiver_id=other_id,
            text=payload.text or None,
            image=image_url,
        )
        try:
            self.db.add(message)
            self.db.commit()
            self.db.refresh(message)
        except SQLAlchemyError as err:
            self.db.rollback()
            logger.error("Failed to store message from %s", caller.id, exc_info=True)
            raise DependencyError() from err

        return message

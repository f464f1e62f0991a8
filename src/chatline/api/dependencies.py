"""Shared API dependencies for authentication and service wiring."""

import logging
from typing import Annotated

from fastapi import Cookie, Depends
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from chatline.core.errors import AuthError, DependencyError, NotFoundError
from chatline.core.security import TokenCodec, get_token_codec
from chatline.db.session import get_db
from chatline.models import User
from chatline.services import user_service
from chatline.services.assets import AssetUploader, get_asset_uploader
from chatline.services.auth import AuthService
from chatline.services.messages import MessageService
from chatline.services.notifications import WelcomeNotifier, get_welcome_notifier

logger = logging.getLogger(__name__)

SESSION_COOKIE = "jwt"

# Type alias for database session dependency
SessionDep = Annotated[Session, Depends(get_db)]


def get_token_codec_dep() -> TokenCodec:
    return get_token_codec()


def get_asset_uploader_dep() -> AssetUploader:
    return get_asset_uploader()


def get_welcome_notifier_dep() -> WelcomeNotifier:
    return get_welcome_notifier()


TokenCodecDep = Annotated[TokenCodec, Depends(get_token_codec_dep)]
AssetUploaderDep = Annotated[AssetUploader, Depends(get_asset_uploader_dep)]
WelcomeNotifierDep = Annotated[WelcomeNotifier, Depends(get_welcome_notifier_dep)]


def get_current_user(
    db: SessionDep,
    codec: TokenCodecDep,
    token: Annotated[str | None, Cookie(alias=SESSION_COOKIE)] = None,
) -> User:
    """Resolve the session cookie to the calling user.

    Raises:
        AuthError: If the cookie is missing or the token does not verify.
        NotFoundError: If the token names a user that no longer exists.
        DependencyError: If the store fails while resolving the user.
    """
    if not token:
        raise AuthError("Unauthorized - No token provided")

    user_id = codec.verify(token)
    if user_id is None:
        raise AuthError("Unauthorized - Invalid token")

    try:
        user = user_service.get_user(db, user_id)
    except SQLAlchemyError as err:
        logger.error("Failed to resolve session user %s", user_id, exc_info=True)
        raise DependencyError() from err

    if user is None:
        raise NotFoundError("User not found")
    return user


# Type alias for current user dependency
CurrentUserDep = Annotated[User, Depends(get_current_user)]


def get_auth_service(
    db: SessionDep,
    codec: TokenCodecDep,
    uploader: AssetUploaderDep,
) -> AuthService:
    return AuthService(db, codec, uploader)


def get_message_service(db: SessionDep, uploader: AssetUploaderDep) -> MessageService:
    return MessageService(db, uploader)


AuthServiceDep = Annotated[AuthService, Depends(get_auth_service)]
MessageServiceDep = Annotated[MessageService, Depends(get_message_service)]

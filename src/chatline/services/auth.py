"""Account registration, login and profile updates."""

from __future__ import annotations

import logging
import re
from functools import lru_cache

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from chatline.core.errors import (
    ConflictError,
    DependencyError,
    InvalidCredentialsError,
    InvalidInputError,
)
from chatline.core.security import TokenCodec, hash_password, verify_password
from chatline.models import User
from chatline.schemas.user import LoginRequest, SignupRequest
from chatline.services import user_service
from chatline.services.assets import AssetUploader

logger = logging.getLogger(__name__)

MIN_PASSWORD_LENGTH = 6
EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
PROFILE_PIC_FOLDER = "profile_pics"
PROFILE_PIC_FORMATS = ("jpg", "jpeg", "png", "gif", "webp")


@lru_cache(maxsize=1)
def _dummy_hash() -> str:
    return hash_password("chatline-timing-equalizer")


def is_valid_email(email: str) -> bool:
    """Return True if ``email`` has one ``@`` followed by a dotted domain and no spaces."""
    return EMAIL_PATTERN.fullmatch(email) is not None


class AuthService:
    """Credential checks and session issuance for the auth endpoints."""

    def __init__(self, db: Session, codec: TokenCodec, uploader: AssetUploader) -> None:
        self.db = db
        self.codec = codec
        self.uploader = uploader

    def register(self, payload: SignupRequest) -> tuple[User, str]:
        """Create an account and return it with a fresh session token."""
        full_name, email, password = payload.full_name, payload.email, payload.password
        if not full_name or not email or not password:
            raise InvalidInputError("All fields are required")
        if len(password) < MIN_PASSWORD_LENGTH:
            raise InvalidInputError(
                f"Password must be at least {MIN_PASSWORD_LENGTH} characters"
            )
        if not is_valid_email(email):
            raise InvalidInputError("Invalid email format")

        try:
            if user_service.get_user_by_email(self.db, email) is not None:
                raise ConflictError("Email already exists")
            user = user_service.create_user(self.db, full_name, email, hash_password(password))
        except IntegrityError as err:
            # A concurrent signup won the race; the unique index caught it.
            self.db.rollback()
            raise ConflictError("Email already exists") from err
        except SQLAlchemyError as err:
            self.db.rollback()
            logger.error("Failed to register %s", email, exc_info=True)
            raise DependencyError() from err

        logger.info("Registered user %s", user.id)
        return user, self.codec.issue(user.id)

    def login(self, payload: LoginRequest) -> tuple[User, str]:
        """Check credentials and return the user with a fresh session token."""
        if not payload.email or not payload.password:
            raise InvalidInputError("Email and password are required")

        try:
            user = user_service.get_user_by_email(self.db, payload.email)
        except SQLAlchemyError as err:
            logger.error("Failed to look up user for login", exc_info=True)
            raise DependencyError() from err

        if user is None:
            # Spend the same bcrypt work as a real comparison.
            verify_password(payload.password, _dummy_hash())
            raise InvalidCredentialsError()
        if not verify_password(payload.password, user.password):
            raise InvalidCredentialsError()

        return user, self.codec.issue(user.id)

    async def update_profile(self, user: User, profile_pic: str | None) -> User:
        """Upload a new profile picture and store its URL on ``user``."""
        if not profile_pic:
            raise InvalidInputError("Profile pic is required")

        url = await self.uploader.upload(
            profile_pic,
            folder=PROFILE_PIC_FOLDER,
            allowed_formats=PROFILE_PIC_FORMATS,
        )
        try:
            return user_service.set_profile_pic(self.db, user, url)
        except SQLAlchemyError as err:
            self.db.rollback()
            logger.error("Failed to store profile picture for %s", user.id, exc_info=True)
            raise DependencyError() from err

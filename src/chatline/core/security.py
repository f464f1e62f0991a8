"""Password hashing and session token primitives."""

from __future__ import annotations

from datetime import UTC, datetime, timedelta
from functools import lru_cache
from typing import Any

import bcrypt
from jose import JWTError, jwt

from chatline.core.errors import ConfigError
from chatline.core.settings import settings

BCRYPT_ROUNDS = 10
# bcrypt only looks at the first 72 bytes of a password.
BCRYPT_MAX_BYTES = 72


def _password_bytes(password: str) -> bytes:
    return password.encode("utf-8")[:BCRYPT_MAX_BYTES]


def hash_password(password: str) -> str:
    """Hash a password with a fresh bcrypt salt."""
    salt = bcrypt.gensalt(rounds=BCRYPT_ROUNDS)
    return bcrypt.hashpw(_password_bytes(password), salt).decode("utf-8")


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Check a password against a stored bcrypt hash in constant time."""
    try:
        return bcrypt.checkpw(_password_bytes(plain_password), hashed_password.encode("utf-8"))
    except ValueError:
        return False


class TokenCodec:
    """Sign and verify session tokens carrying a user id.

    Verification collapses every failure (bad signature, expiry, wrong
    algorithm, missing claim) into ``None``.
    """

    claim = "userId"

    def __init__(self, secret: str, *, algorithm: str = "HS256", ttl: timedelta) -> None:
        if not secret:
            raise ConfigError("JWT secret is not configured")
        self._secret = secret
        self._algorithm = algorithm
        self._ttl = ttl

    @property
    def ttl(self) -> timedelta:
        return self._ttl

    def issue(self, user_id: str) -> str:
        """Return a signed token for ``user_id`` expiring after the configured TTL."""
        payload: dict[str, Any] = {
            self.claim: user_id,
            "exp": datetime.now(UTC) + self._ttl,
        }
        token: str = jwt.encode(payload, self._secret, algorithm=self._algorithm)
        return token

    def verify(self, token: str) -> str | None:
        """Return the user id bound to ``token`` or ``None`` if it is not valid."""
        try:
            payload = jwt.decode(token, self._secret, algorithms=[self._algorithm])
        except JWTError:
            return None
        user_id = payload.get(self.claim)
        if not isinstance(user_id, str) or not user_id:
            return None
        return user_id


@lru_cache(maxsize=1)
def get_token_codec() -> TokenCodec:
    """Return the process-wide codec built from settings."""
    return TokenCodec(
        settings.jwt_secret,
        algorithm=settings.jwt_algorithm,
        ttl=timedelta(days=settings.jwt_expire_days),
    )

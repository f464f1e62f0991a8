# tests/conftest.py
from __future__ import annotations

import os
from collections.abc import Generator, Iterator, Sequence
from datetime import timedelta
from typing import Any

import pytest

os.environ["JWT_SECRET"] = "test-secret-key"
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["APP_ENV"] = "development"
os.environ["AUTO_CREATE_TABLES"] = "true"

from fastapi import FastAPI  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
from sqlalchemy import create_engine  # noqa: E402
from sqlalchemy.engine import Engine  # noqa: E402
from sqlalchemy.orm import Session, sessionmaker  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402

from chatline.api.dependencies import (  # noqa: E402
    SESSION_COOKIE,
    get_asset_uploader_dep,
    get_welcome_notifier_dep,
)
from chatline.core.security import TokenCodec, get_token_codec, hash_password  # noqa: E402
from chatline.core.settings import settings  # noqa: E402
from chatline.db.session import Base  # noqa: E402
from chatline.db.session import get_db as app_get_session  # noqa: E402
from chatline.main import app as fastapi_app  # noqa: E402
from chatline.models import User  # noqa: E402

TEST_DB_URL = "sqlite://"
TEST_PASSWORD = "password123"


class FakeUploader:
    """Records uploads and returns predictable hosted URLs."""

    def __init__(self) -> None:
        self.calls: list[dict[str, Any]] = []
        self.error: Exception | None = None

    async def upload(
        self,
        data: str,
        *,
        folder: str | None = None,
        allowed_formats: Sequence[str] | None = None,
    ) -> str:
        if self.error is not None:
            raise self.error
        self.calls.append({"data": data, "folder": folder, "allowed_formats": allowed_formats})
        return f"https://res.cloudinary.com/test/image/upload/{len(self.calls)}.png"


class FakeNotifier:
    """Stands in for the welcome notifier."""

    def __init__(self) -> None:
        self.sent: list[tuple[str, str]] = []

    async def notify(self, email: str, full_name: str) -> bool:
        self.sent.append((email, full_name))
        return True


@pytest.fixture()
def engine() -> Generator[Engine, None, None]:
    engine = create_engine(
        TEST_DB_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    try:
        yield engine
    finally:
        Base.metadata.drop_all(bind=engine)
        engine.dispose()


@pytest.fixture()
def db_session(engine: Engine) -> Iterator[Session]:
    SessionLocal = sessionmaker(bind=engine, autocommit=False, autoflush=False)
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture(scope="session")
def app() -> FastAPI:
    return fastapi_app


@pytest.fixture()
def uploader() -> FakeUploader:
    return FakeUploader()


@pytest.fixture()
def notifier() -> FakeNotifier:
    return FakeNotifier()


@pytest.fixture(autouse=True)
def override_dependencies(
    app: FastAPI,
    db_session: Session,
    uploader: FakeUploader,
    notifier: FakeNotifier,
) -> Iterator[None]:
    def _get_session_override() -> Generator[Session, None, None]:
        yield db_session

    app.dependency_overrides[app_get_session] = _get_session_override
    app.dependency_overrides[get_asset_uploader_dep] = lambda: uploader
    app.dependency_overrides[get_welcome_notifier_dep] = lambda: notifier
    try:
        yield
    finally:
        app.dependency_overrides.clear()


@pytest.fixture()
def client(app: FastAPI) -> Iterator[TestClient]:
    with TestClient(app, base_url="http://test") as test_client:
        yield test_client


@pytest.fixture()
def codec() -> TokenCodec:
    return get_token_codec()


@pytest.fixture(scope="session")
def password_hash() -> str:
    """bcrypt is slow on purpose; hash the shared test password once."""
    return hash_password(TEST_PASSWORD)


def make_user(db: Session, password_hash: str, full_name: str, email: str) -> User:
    user = User(full_name=full_name, email=email, password=password_hash)
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


@pytest.fixture()
def test_user(db_session: Session, password_hash: str) -> User:
    """Create and return a persisted test user."""
    return make_user(db_session, password_hash, "Test User", "test@example.com")


@pytest.fixture()
def other_user(db_session: Session, password_hash: str) -> User:
    """Create and return a second persisted user."""
    return make_user(db_session, password_hash, "Other User", "other@example.com")


@pytest.fixture()
def auth_client(client: TestClient, codec: TokenCodec, test_user: User) -> TestClient:
    """Return a client carrying a session cookie for ``test_user``."""
    client.cookies.set(SESSION_COOKIE, codec.issue(test_user.id))
    return client


@pytest.fixture()
def expired_token(test_user: User) -> str:
    codec = TokenCodec(settings.jwt_secret, ttl=timedelta(seconds=-60))
    return codec.issue(test_user.id)

"""Database engine lifecycle and session configuration."""

from __future__ import annotations

import logging
from collections.abc import Generator

from sqlalchemy import create_engine, text
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import DeclarativeBase, Session, sessionmaker
from sqlalchemy.pool import StaticPool

from chatline.core.errors import DependencyError
from chatline.core.settings import settings

logger = logging.getLogger(__name__)


class Base(DeclarativeBase):
    """Declarative base shared by all ORM models."""


class Database:
    """Process-wide handle on the SQL store.

    The engine is created by ``connect()`` during application startup and
    released by ``dispose()`` at shutdown. Until then ``ready`` is False and
    ``session()`` refuses to hand out sessions.
    """

    def __init__(self, url: str, *, echo: bool = False, pool_timeout: float = 30.0) -> None:
        self.url = url
        self.echo = echo
        self.pool_timeout = pool_timeout
        self._engine: Engine | None = None
        self._session_factory: sessionmaker[Session] | None = None

    @property
    def ready(self) -> bool:
        return self._engine is not None

    @property
    def engine(self) -> Engine:
        if self._engine is None:
            raise DependencyError("Database is not connected")
        return self._engine

    def _build_engine(self) -> Engine:
        if self.url.startswith("sqlite"):
            options: dict[str, object] = {"connect_args": {"check_same_thread": False}}
            if self.url in ("sqlite://", "sqlite:///:memory:"):
                # In-memory SQLite must share one connection across threads.
                options["poolclass"] = StaticPool
            return create_engine(self.url, echo=self.echo, **options)
        return create_engine(
            self.url,
            echo=self.echo,
            pool_pre_ping=True,
            pool_timeout=self.pool_timeout,
        )

    def connect(self, *, create_tables: bool = False) -> None:
        """Create the engine and verify the store answers."""
        if self._engine is not None:
            return
        engine = self._build_engine()
        try:
            with engine.connect() as connection:
                connection.execute(text("SELECT 1"))
            if create_tables:
                # Ensure model modules are imported so that metadata is populated.
                import chatline.models  # noqa: F401

                Base.metadata.create_all(bind=engine)
        except SQLAlchemyError as err:
            engine.dispose()
            logger.error("Could not connect to the database", exc_info=True)
            raise DependencyError("Database connection failed") from err

        self._engine = engine
        self._session_factory = sessionmaker(autocommit=False, autoflush=False, bind=engine)
        logger.info("Database connected: %s", engine.url.render_as_string(hide_password=True))

    def dispose(self) -> None:
        """Release pooled connections."""
        if self._engine is None:
            return
        self._engine.dispose()
        self._engine = None
        self._session_factory = None
        logger.info("Database connection closed")

    def session(self) -> Session:
        """Return a new session bound to the connected engine."""
        if self._session_factory is None:
            raise DependencyError("Database is not connected")
        return self._session_factory()


database = Database(
    settings.database_url,
    echo=settings.sql_debug,
    pool_timeout=settings.db_pool_timeout,
)


def get_db() -> Generator[Session, None, None]:
    """Yield a database session for dependency injection."""
    db = database.session()
    try:
        yield db
    finally:
        db.close()

"""Alembic environment for the Chatline schema.

The target URL comes from ``ALEMBIC_URL`` when set, otherwise from the
application's ``DATABASE_URL`` setting.
"""
from __future__ import annotations

import os
import sys
from logging.config import fileConfig
from pathlib import Path

from alembic import context
from sqlalchemy import create_engine, pool

# Running alembic from a checkout does not install the package.
sys.path.insert(0, str(Path(__file__).resolve().parents[1] / "src"))

import chatline.models  # noqa: E402,F401
from chatline.core.settings import settings  # noqa: E402
from chatline.db.session import Base  # noqa: E402

config = context.config
if config.config_file_name is not None:
    fileConfig(config.config_file_name)


def database_url() -> str:
    return os.getenv("ALEMBIC_URL") or settings.database_url


def run_offline() -> None:
    """Emit SQL to stdout instead of connecting."""
    context.configure(
        url=database_url(),
        target_metadata=Base.metadata,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
    )
    with context.begin_transaction():
        context.run_migrations()


def run_online() -> None:
    engine = create_engine(database_url(), poolclass=pool.NullPool)
    with engine.connect() as connection:
        context.configure(
            connection=connection,
            target_metadata=Base.metadata,
            render_as_batch=connection.dialect.name == "sqlite",
        )
        with context.begin_transaction():
            context.run_migrations()
    engine.dispose()


if context.is_offline_mode():
    run_offline()
else:
    run_online()

"""CRUD-style helpers for managing users."""
from __future__ import annotations

from collections.abc import Iterable, Sequence

from sqlalchemy.orm import Session

from chatline.models.user import User

__all__ = [
    "get_user",
    "get_user_by_email",
    "user_exists",
    "list_users_except",
    "get_users_by_ids",
    "create_user",
    "set_profile_pic",
]


def get_user(db: Session, user_id: str) -> User | None:
    """Return a single user by primary key."""
    return db.get(User, user_id)


def get_user_by_email(db: Session, email: str) -> User | None:
    """Return the user registered with exactly this email, if any."""
    return db.query(User).filter(User.email == email).first()


def user_exists(db: Session, user_id: str) -> bool:
    """Return True if a user with ``user_id`` exists."""
    return db.query(User.id).filter(User.id == user_id).first() is not None


def list_users_except(db: Session, user_id: str) -> Sequence[User]:
    """Return every user other than ``user_id``."""
    return db.query(User).filter(User.id != user_id).order_by(User.full_name).all()


def get_users_by_ids(db: Session, user_ids: Iterable[str]) -> Sequence[User]:
    """Return the users whose ids are in ``user_ids``."""
    ids = list(user_ids)
    if not ids:
        return []
    return db.query(User).filter(User.id.in_(ids)).order_by(User.full_name).all()


def create_user(db: Session, full_name: str, email: str, password_hash: str) -> User:
    """Persist a new user and return the stored row."""
    db_user = User(full_name=full_name, email=email, password=password_hash)
    db.add(db_user)
    db.commit()
    db.refresh(db_user)
    return db_user


def set_profile_pic(db: Session, db_user: User, url: str) -> User:
    """Store a new profile picture URL on ``db_user``."""
    db_user.profile_pic = url
    db.add(db_user)
    db.commit()
    db.refresh(db_user)
    return db_user

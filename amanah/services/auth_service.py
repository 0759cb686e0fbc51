# SPDX-FileCopyrightText: 2025 Roland Knall <rknall@gmail.com>
# SPDX-License-Identifier: GPL-2.0-only
"""Authentication service."""

import logging
import uuid
from datetime import datetime, timedelta

from sqlalchemy.orm import Session

from amanah.config import get_settings
from amanah.models import User
from amanah.models.session import Session as SessionModel
from amanah.security import get_password_hash, verify_password

logger = logging.getLogger(__name__)


def as_uuid(value: uuid.UUID | str) -> uuid.UUID | None:
    """Coerce an identifier to a UUID, returning None when malformed."""
    if isinstance(value, uuid.UUID):
        return value
    try:
        return uuid.UUID(str(value))
    except (TypeError, ValueError):
        return None


def authenticate(db: Session, email: str, password: str) -> User | None:
    """Authenticate a user by email and password.

    Inactive users are returned as well; the caller decides how to
    surface a deactivated account.
    """
    user = get_user_by_email(db, email)
    if not user:
        return None
    if not verify_password(password, user.hashed_password):
        return None
    return user


def create_session(
    db: Session, user_id: uuid.UUID | str, expiry_days: int | None = None
) -> SessionModel:
    """Create a new session for a user."""
    if expiry_days is None:
        expiry_days = get_settings().session_expiry_days

    session = SessionModel(
        user_id=as_uuid(user_id),
        token=str(uuid.uuid4()),
        expires_at=datetime.utcnow() + timedelta(days=expiry_days),
    )
    db.add(session)
    db.commit()
    db.refresh(session)
    return session


def get_session(db: Session, token: str) -> SessionModel | None:
    """Get a valid session by token."""
    session = db.query(SessionModel).filter(SessionModel.token == token).first()
    if not session:
        return None
    if session.expires_at < datetime.utcnow():
        db.delete(session)
        db.commit()
        return None
    return session


def rotate_session(
    db: Session, token: str, expiry_days: int | None = None
) -> SessionModel | None:
    """Replace a valid session with a fresh token and expiry."""
    session = get_session(db, token)
    if not session:
        return None
    user_id = session.user_id
    db.delete(session)
    db.flush()
    return create_session(db, user_id, expiry_days)


def delete_session(db: Session, token: str) -> bool:
    """Delete a session by token."""
    session = db.query(SessionModel).filter(SessionModel.token == token).first()
    if session:
        db.delete(session)
        db.commit()
        return True
    return False


def get_user_by_id(db: Session, user_id: uuid.UUID | str) -> User | None:
    """Get a user by ID."""
    user_uuid = as_uuid(user_id)
    if user_uuid is None:
        return None
    return db.query(User).filter(User.id == user_uuid).first()


def get_user_by_email(db: Session, email: str) -> User | None:
    """Get a user by email."""
    return db.query(User).filter(User.email == email.strip().lower()).first()


def create_user(
    db: Session,
    email: str,
    password: str,
    full_name: str | None = None,
    needs_password_reset: bool = False,
    menu_access: list[str] | None = None,
    sub_menu_access: dict[str, list[str]] | None = None,
    component_access: list[str] | None = None,
) -> User:
    """Create a user with a hashed password."""
    user = User(
        email=email.strip().lower(),
        hashed_password=get_password_hash(password),
        full_name=full_name,
        is_active=True,
        needs_password_reset=needs_password_reset,
        menu_access=menu_access,
        sub_menu_access=sub_menu_access,
        component_access=component_access,
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


def update_password(
    db: Session, user: User, new_password: str, clear_reset_flag: bool = False
) -> User:
    """Store a new password hash, optionally clearing the reset-required flag."""
    user.hashed_password = get_password_hash(new_password)
    if clear_reset_flag:
        user.needs_password_reset = False
    db.commit()
    db.refresh(user)
    logger.info(f"Password updated for user {user.id}")
    return user


def cleanup_expired_sessions(db: Session) -> int:
    """Delete all expired sessions. Returns count of deleted sessions."""
    count = (
        db.query(SessionModel)
        .filter(SessionModel.expires_at < datetime.utcnow())
        .delete()
    )
    db.commit()
    return count

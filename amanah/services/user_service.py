# SPDX-FileCopyrightText: 2025 Roland Knall <rknall@gmail.com>
# SPDX-License-Identifier: GPL-2.0-only
"""User administration service."""

import logging
import uuid
from collections.abc import Iterable

from sqlalchemy.orm import Session

from amanah.models import Role, User, UserRole
from amanah.models.session import Session as SessionModel
from amanah.schemas.user import UserUpdate

logger = logging.getLogger(__name__)


def list_users(db: Session) -> list[User]:
    return db.query(User).order_by(User.email).all()


def get_role_ids(db: Session, user: User) -> list[uuid.UUID]:
    rows = db.query(UserRole.role_id).filter(UserRole.user_id == user.id).all()
    return [row.role_id for row in rows]


def validate_role_ids(db: Session, role_ids: Iterable[uuid.UUID]) -> list[uuid.UUID]:
    """Deduplicate role ids and make sure every one exists.

    Raises:
        ValueError: If any role id is unknown
    """
    unique = list(dict.fromkeys(role_ids))
    found = db.query(Role.id).filter(Role.id.in_(unique)).count()
    if found != len(unique):
        raise ValueError("One or more invalid role IDs provided")
    return unique


def set_user_roles(
    db: Session,
    user: User,
    role_ids: Iterable[uuid.UUID],
    assigned_by: User | None = None,
) -> None:
    """Replace the roles held by a user. The caller commits.

    Raises:
        ValueError: If any role id is unknown
    """
    unique = validate_role_ids(db, role_ids)
    user.user_roles.clear()
    db.flush()
    for role_id in unique:
        user.user_roles.append(
            UserRole(
                role_id=role_id,
                assigned_by_id=assigned_by.id if assigned_by else None,
            )
        )
    db.flush()


def update_user(
    db: Session, user: User, data: UserUpdate, updated_by: User | None = None
) -> User:
    """Apply an administrative update.

    Deactivating a user also revokes every session they hold.

    Raises:
        ValueError: If any role id is unknown
    """
    updates = data.model_dump(exclude_unset=True)
    role_ids = updates.pop("role_ids", None)

    try:
        if role_ids is not None:
            set_user_roles(db, user, role_ids, assigned_by=updated_by)
    except ValueError:
        db.rollback()
        raise

    for field, value in updates.items():
        # The flags are NOT NULL; only the access lists may be cleared
        if value is None and field in ("is_active", "needs_password_reset"):
            continue
        setattr(user, field, value)

    if updates.get("is_active") is False:
        revoked = (
            db.query(SessionModel).filter(SessionModel.user_id == user.id).delete()
        )
        if revoked:
            logger.info(f"Revoked {revoked} sessions of deactivated user {user.id}")

    db.commit()
    db.refresh(user)
    return user


def delete_user(db: Session, user: User) -> None:
    """Delete a user with their roles and sessions."""
    user_id = user.id
    db.query(UserRole).filter(UserRole.assigned_by_id == user.id).update(
        {UserRole.assigned_by_id: None}, synchronize_session=False
    )
    db.delete(user)
    db.commit()
    logger.info(f"Deleted user {user_id}")

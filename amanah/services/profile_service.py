# SPDX-FileCopyrightText: 2025 Roland Knall <rknall@gmail.com>
# SPDX-License-Identifier: GPL-2.0-only
"""Builds principal snapshots from the user, role and permission tables."""

import logging
import uuid
from collections.abc import Callable

from sqlalchemy.orm import Session, selectinload

from amanah.database import SessionLocal
from amanah.models import Role, RolePermission, User, UserRole
from amanah.schemas.principal import PermissionGrant, Principal, RoleGrant
from amanah.services.auth_service import as_uuid

logger = logging.getLogger(__name__)


def user_to_principal(user: User) -> Principal:
    """Convert a user with loaded roles into an immutable principal."""
    roles = [
        RoleGrant(
            id=str(user_role.role.id),
            name=user_role.role.name,
            description=user_role.role.description,
            permissions=[
                PermissionGrant(
                    resource=rp.permission.resource,
                    action=rp.permission.action,
                    description=rp.permission.description,
                )
                for rp in user_role.role.permissions
            ],
        )
        for user_role in user.user_roles
    ]
    return Principal(
        id=str(user.id),
        email=user.email,
        display_name=user.full_name,
        is_active=user.is_active,
        needs_credential_reset=user.needs_password_reset,
        roles=roles,
        menu_access=user.menu_access,
        sub_menu_access=user.sub_menu_access,
        component_access=user.component_access,
    )


def load_principal(db: Session, user_id: uuid.UUID | str) -> Principal | None:
    """Load a user with roles and permissions in one logical read."""
    user_uuid = as_uuid(user_id)
    if user_uuid is None:
        return None

    user = (
        db.query(User)
        .options(
            selectinload(User.user_roles)
            .selectinload(UserRole.role)
            .selectinload(Role.permissions)
            .selectinload(RolePermission.permission)
        )
        .filter(User.id == user_uuid)
        .first()
    )
    if not user:
        return None
    return user_to_principal(user)


class SqlProfileStore:
    """Profile store backed by the application database."""

    def __init__(self, session_factory: Callable[[], Session] = SessionLocal) -> None:
        self._session_factory = session_factory

    async def fetch_profile(self, identity_id: str) -> Principal | None:
        db = self._session_factory()
        try:
            principal = load_principal(db, identity_id)
        finally:
            db.close()

        if principal is None:
            logger.warning(f"No profile found for identity {identity_id}")
        return principal

# SPDX-FileCopyrightText: 2025 Roland Knall <rknall@gmail.com>
# SPDX-License-Identifier: GPL-2.0-only
"""User model for authentication."""

from __future__ import annotations

import uuid as uuid_lib
from typing import TYPE_CHECKING, Any

from sqlalchemy import JSON, Boolean, String, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from amanah.models.base import Base, TimestampMixin

if TYPE_CHECKING:
    from amanah.models.session import Session
    from amanah.models.user_role import UserRole


class User(Base, TimestampMixin):
    """Back-office user.

    The access list columns are optional allow-lists; NULL means the list
    is not configured for this user.
    """

    __tablename__ = "users"

    id: Mapped[uuid_lib.UUID] = mapped_column(
        Uuid(as_uuid=True),
        primary_key=True,
        default=uuid_lib.uuid4,
    )
    email: Mapped[str] = mapped_column(String(255), unique=True, nullable=False)
    hashed_password: Mapped[str] = mapped_column(String(255), nullable=False)
    full_name: Mapped[str | None] = mapped_column(String(200), nullable=True)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)
    needs_password_reset: Mapped[bool] = mapped_column(
        Boolean, default=False, nullable=False
    )
    menu_access: Mapped[list[str] | None] = mapped_column(JSON, nullable=True)
    sub_menu_access: Mapped[dict[str, Any] | None] = mapped_column(
        JSON, nullable=True
    )
    component_access: Mapped[list[str] | None] = mapped_column(JSON, nullable=True)

    # Relationships
    sessions: Mapped[list[Session]] = relationship(
        "Session",
        back_populates="user",
        cascade="all, delete-orphan",
    )
    user_roles: Mapped[list[UserRole]] = relationship(
        "UserRole",
        foreign_keys="[UserRole.user_id]",
        back_populates="user",
        cascade="all, delete-orphan",
    )

# SPDX-FileCopyrightText: 2025 Roland Knall <rknall@gmail.com>
# SPDX-License-Identifier: GPL-2.0-only
"""User administration schemas."""

import uuid

from pydantic import BaseModel, ConfigDict, EmailStr, Field


class UserCreate(BaseModel):
    """Schema for creating a user.

    New users always start with ``needs_password_reset`` set.
    """

    email: EmailStr
    password: str = Field(..., min_length=8)
    full_name: str | None = Field(None, max_length=200)
    role_ids: list[uuid.UUID] = Field(..., min_length=1)
    menu_access: list[str] | None = None
    sub_menu_access: dict[str, list[str]] | None = None
    component_access: list[str] | None = None


class UserUpdate(BaseModel):
    """Schema for updating a user. Omitted fields are left unchanged."""

    full_name: str | None = Field(None, max_length=200)
    is_active: bool | None = None
    needs_password_reset: bool | None = None
    role_ids: list[uuid.UUID] | None = Field(None, min_length=1)
    menu_access: list[str] | None = None
    sub_menu_access: dict[str, list[str]] | None = None
    component_access: list[str] | None = None


class UserResponse(BaseModel):
    """Schema for user response."""

    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    email: str
    full_name: str | None
    is_active: bool
    needs_password_reset: bool
    menu_access: list[str] | None
    sub_menu_access: dict[str, list[str]] | None
    component_access: list[str] | None
    role_ids: list[uuid.UUID] = []

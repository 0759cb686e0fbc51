# SPDX-FileCopyrightText: 2025 Roland Knall <rknall@gmail.com>
# SPDX-License-Identifier: GPL-2.0-only
"""Authentication schemas."""

from pydantic import BaseModel, EmailStr, Field

from amanah.schemas.principal import Principal


class LoginRequest(BaseModel):
    """Credentials for signing in."""

    email: EmailStr
    password: str = Field(..., min_length=1)


class PasswordChangeRequest(BaseModel):
    """Request to change the current user's password."""

    new_password: str = Field(..., min_length=8)
    clear_needs_password_reset: bool = False


class PasswordResetRequest(BaseModel):
    """Request a password reset email."""

    email: EmailStr


class EffectivePermission(BaseModel):
    """Flattened permission pair."""

    resource: str
    action: str


class ProfileResponse(BaseModel):
    """Authenticated principal with its resolved permissions."""

    principal: Principal
    is_admin: bool
    permissions: list[EffectivePermission]


class AuthResponse(ProfileResponse):
    """Response returned after a successful sign in."""

    access_token: str
    token_type: str = "bearer"

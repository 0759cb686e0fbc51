# SPDX-FileCopyrightText: 2025 Roland Knall <rknall@gmail.com>
# SPDX-License-Identifier: GPL-2.0-only
"""Principal snapshot schemas used by every authorization decision."""

from pydantic import BaseModel, ConfigDict, Field


class PermissionGrant(BaseModel):
    """A (resource, action) capability reachable through a role."""

    model_config = ConfigDict(from_attributes=True, frozen=True)

    resource: str
    action: str
    description: str | None = None


class RoleGrant(BaseModel):
    """A role held by a principal, with its permissions resolved."""

    model_config = ConfigDict(from_attributes=True, frozen=True)

    id: str
    name: str
    description: str | None = None
    permissions: list[PermissionGrant] = Field(default_factory=list)


class Principal(BaseModel):
    """Immutable snapshot of the authenticated user.

    The optional access lists are independent allow-lists. ``None`` means
    the list is not configured for this principal, which lets any active
    principal through that gate.
    """

    model_config = ConfigDict(from_attributes=True, frozen=True)

    id: str
    email: str
    display_name: str | None = None
    is_active: bool = True
    needs_credential_reset: bool = False
    roles: list[RoleGrant] = Field(default_factory=list)
    menu_access: list[str] | None = None
    sub_menu_access: dict[str, list[str]] | None = None
    component_access: list[str] | None = None

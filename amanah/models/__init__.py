# SPDX-FileCopyrightText: 2025 Roland Knall <rknall@gmail.com>
# SPDX-License-Identifier: GPL-2.0-only
"""Database models package."""

from amanah.models.account_type import AccountType
from amanah.models.bank_account import BankAccount
from amanah.models.base import Base, TimestampMixin
from amanah.models.permission import Permission
from amanah.models.role import Role
from amanah.models.role_permission import RolePermission
from amanah.models.session import Session
from amanah.models.user import User
from amanah.models.user_role import UserRole

__all__ = [
    "AccountType",
    "BankAccount",
    "Base",
    "Permission",
    "Role",
    "RolePermission",
    "Session",
    "TimestampMixin",
    "User",
    "UserRole",
]

# SPDX-FileCopyrightText: 2025 Roland Knall <rknall@gmail.com>
# SPDX-License-Identifier: GPL-2.0-only
"""Explicit authorization context handed to route guards and call sites."""

from collections.abc import Callable
from dataclasses import dataclass

from amanah.rbac.evaluator import PermissionEvaluator
from amanah.schemas.principal import Principal


@dataclass(frozen=True)
class AuthContext:
    """Read-only view of the current session.

    Built by the session manager; consumers only query it. Checks made
    through the context count as user activity for the inactivity timer.
    """

    principal: Principal | None
    evaluator: PermissionEvaluator
    loading: bool = False
    error: str | None = None
    on_activity: Callable[[], None] | None = None

    def _touch(self) -> None:
        if self.on_activity is not None:
            self.on_activity()

    @property
    def is_authenticated(self) -> bool:
        return self.principal is not None

    def has_permission(self, resource: str, action: str) -> bool:
        self._touch()
        return self.evaluator.has_permission(self.principal, resource, action)

    def is_admin(self) -> bool:
        self._touch()
        return self.evaluator.is_admin(self.principal)

    def has_menu_access(self, menu_id: str) -> bool:
        self._touch()
        return self.evaluator.has_menu_access(self.principal, menu_id)

    def has_sub_menu_access(self, menu_id: str, sub_menu_id: str) -> bool:
        self._touch()
        return self.evaluator.has_sub_menu_access(self.principal, menu_id, sub_menu_id)

    def has_component_access(self, component_id: str) -> bool:
        self._touch()
        return self.evaluator.has_component_access(self.principal, component_id)

# SPDX-FileCopyrightText: 2025 Roland Knall <rknall@gmail.com>
# SPDX-License-Identifier: GPL-2.0-only
"""Allow/deny decisions for a principal snapshot."""

import logging
from collections.abc import Callable

from amanah.rbac.cache import DecisionCache
from amanah.schemas.principal import Principal

logger = logging.getLogger(__name__)

ADMIN_ROLE_NAME = "admin"


def snapshot_token(principal: Principal) -> tuple:
    """Identify the grants a decision was computed from.

    Two snapshots of the same principal with different roles or
    permissions get different tokens, so their decisions never share a
    cache entry.
    """
    return (
        principal.is_active,
        tuple(
            sorted(
                (
                    role.name.casefold(),
                    tuple(sorted((p.resource, p.action) for p in role.permissions)),
                )
                for role in principal.roles
            )
        ),
    )


class PermissionEvaluator:
    """Pure decision function over a principal snapshot.

    Decisions depend only on the principal passed in and the requested
    resource/action. The optional cache is written to but never cleared
    here; the session manager owns invalidation.
    """

    def __init__(
        self,
        cache: DecisionCache | None = None,
        admin_role_name: str = ADMIN_ROLE_NAME,
    ) -> None:
        self._cache = cache
        self._admin_role_name = admin_role_name.casefold()

    def _cached(self, key: tuple, compute: Callable[[], bool]) -> bool:
        if self._cache is None:
            return compute()
        return self._cache.get_or_compute(key, compute)

    def _holds_admin_role(self, principal: Principal) -> bool:
        return any(
            role.name.casefold() == self._admin_role_name for role in principal.roles
        )

    def _admin_override(self, principal: Principal) -> bool:
        return self._cached(
            DecisionCache.admin_key(principal.id, snapshot_token(principal)),
            lambda: self._holds_admin_role(principal),
        )

    def effective_permissions(self, principal: Principal | None) -> set[tuple[str, str]]:
        """Flatten the principal's roles into unique (resource, action) pairs."""
        if principal is None:
            return set()
        return {
            (permission.resource, permission.action)
            for role in principal.roles
            for permission in role.permissions
        }

    def has_permission(
        self, principal: Principal | None, resource: str, action: str
    ) -> bool:
        """Check whether the principal may perform action on resource.

        Args:
            principal: Current principal snapshot, or None when signed out
            resource: Catalog resource name
            action: Catalog action name

        Returns:
            True if allowed. Unknown pairs, inactive accounts and any
            evaluation error all result in False.
        """
        try:
            if principal is None or not principal.is_active:
                return False
            if self._admin_override(principal):
                return True
            allowed = self._cached(
                DecisionCache.permission_key(
                    principal.id, resource, action, snapshot_token(principal)
                ),
                lambda: (resource, action) in self.effective_permissions(principal),
            )
        except Exception as e:
            logger.error(f"Permission evaluation failed for {action} on {resource}: {e}")
            return False

        if not allowed:
            logger.debug(f"Principal {principal.id} denied {action} on {resource}")
        return allowed

    def is_admin(self, principal: Principal | None) -> bool:
        """True iff the principal is active and holds the admin role."""
        try:
            if principal is None or not principal.is_active:
                return False
            return self._admin_override(principal)
        except Exception as e:
            logger.error(f"Admin check failed: {e}")
            return False

    def can_access_admin_panel(self, principal: Principal | None) -> bool:
        return self.has_permission(principal, "admin", "access")

    def _allow_list_check(
        self, principal: Principal | None, check: Callable[[Principal], bool]
    ) -> bool:
        try:
            if principal is None or not principal.is_active:
                return False
            if self._admin_override(principal):
                return True
            return check(principal)
        except Exception as e:
            logger.error(f"Access list evaluation failed: {e}")
            return False

    def has_menu_access(self, principal: Principal | None, menu_id: str) -> bool:
        return self._allow_list_check(
            principal,
            lambda p: p.menu_access is None or menu_id in p.menu_access,
        )

    def has_sub_menu_access(
        self, principal: Principal | None, menu_id: str, sub_menu_id: str
    ) -> bool:
        def check(p: Principal) -> bool:
            if p.sub_menu_access is None:
                return True
            return sub_menu_id in p.sub_menu_access.get(menu_id, [])

        return self._allow_list_check(principal, check)

    def has_component_access(
        self, principal: Principal | None, component_id: str
    ) -> bool:
        return self._allow_list_check(
            principal,
            lambda p: p.component_access is None or component_id in p.component_access,
        )

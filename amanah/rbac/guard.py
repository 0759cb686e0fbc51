# SPDX-FileCopyrightText: 2025 Roland Knall <rknall@gmail.com>
# SPDX-License-Identifier: GPL-2.0-only
"""Route guard decisions for protected views."""

import logging
from dataclasses import dataclass
from enum import Enum

from amanah.rbac.context import AuthContext

logger = logging.getLogger(__name__)

DEFAULT_LOGIN_PATH = "/login"
DEFAULT_CREDENTIAL_RESET_PATH = "/force-password-change"

ADMIN_REQUIRED_MESSAGE = "You need administrator privileges to access this page."
INACTIVE_MESSAGE = (
    "Your account has been deactivated. Please contact an administrator."
)


class GuardOutcome(str, Enum):
    """What the view layer should do with a route request."""

    RENDER = "render"
    LOADING = "loading"
    REDIRECT_LOGIN = "redirect_login"
    REDIRECT_CREDENTIAL_RESET = "redirect_credential_reset"
    INACTIVE_NOTICE = "inactive_notice"
    ACCESS_DENIED = "access_denied"


@dataclass(frozen=True)
class RouteRequirement:
    """Access requirements declared by a protected view."""

    require_admin: bool = False
    required_permission: tuple[str, str] | None = None
    menu_id: str | None = None
    sub_menu_id: str | None = None
    component_id: str | None = None

    def __post_init__(self) -> None:
        if self.sub_menu_id is not None and self.menu_id is None:
            raise ValueError("sub_menu_id requires menu_id")


@dataclass(frozen=True)
class GuardDecision:
    """Result of evaluating a route against the current context."""

    outcome: GuardOutcome
    message: str | None = None
    redirect_to: str | None = None

    @property
    def allowed(self) -> bool:
        return self.outcome is GuardOutcome.RENDER


def _denied(message: str) -> GuardDecision:
    return GuardDecision(GuardOutcome.ACCESS_DENIED, message=message)


def evaluate_route(
    context: AuthContext,
    requirement: RouteRequirement | None = None,
    path: str = "",
    login_path: str = DEFAULT_LOGIN_PATH,
    credential_reset_path: str = DEFAULT_CREDENTIAL_RESET_PATH,
) -> GuardDecision:
    """Decide how a protected route should respond.

    Role permissions and the menu/sub-menu/component allow-lists are
    independent gates; a route declaring both must pass both.
    """
    requirement = requirement or RouteRequirement()
    principal = context.principal

    if principal is None:
        if context.loading:
            return GuardDecision(GuardOutcome.LOADING)
        return GuardDecision(GuardOutcome.REDIRECT_LOGIN, redirect_to=login_path)

    if principal.needs_credential_reset and path != credential_reset_path:
        logger.debug(f"Principal {principal.id} must reset credentials, redirecting")
        return GuardDecision(
            GuardOutcome.REDIRECT_CREDENTIAL_RESET, redirect_to=credential_reset_path
        )

    if not principal.is_active:
        return GuardDecision(GuardOutcome.INACTIVE_NOTICE, message=INACTIVE_MESSAGE)

    if requirement.require_admin and not context.is_admin():
        return _denied(ADMIN_REQUIRED_MESSAGE)

    if requirement.required_permission is not None:
        resource, action = requirement.required_permission
        if not context.has_permission(resource, action):
            return _denied(
                f"You need permission to {action} {resource} to access this page."
            )

    if requirement.menu_id is not None:
        if not context.has_menu_access(requirement.menu_id):
            return _denied(
                f"You do not have access to the {requirement.menu_id} menu."
            )
        if requirement.sub_menu_id is not None and not context.has_sub_menu_access(
            requirement.menu_id, requirement.sub_menu_id
        ):
            return _denied(
                f"You do not have access to {requirement.sub_menu_id} "
                f"in the {requirement.menu_id} menu."
            )

    if requirement.component_id is not None and not context.has_component_access(
        requirement.component_id
    ):
        return _denied(
            f"You do not have access to the {requirement.component_id} component."
        )

    return GuardDecision(GuardOutcome.RENDER)

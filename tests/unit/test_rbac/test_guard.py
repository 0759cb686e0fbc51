# SPDX-FileCopyrightText: 2025 Roland Knall <rknall@gmail.com>
# SPDX-License-Identifier: GPL-2.0-only
"""Tests for route guard decisions and the auth context."""

import pytest

from amanah.rbac.context import AuthContext
from amanah.rbac.evaluator import PermissionEvaluator
from amanah.rbac.guard import (
    ADMIN_REQUIRED_MESSAGE,
    DEFAULT_CREDENTIAL_RESET_PATH,
    DEFAULT_LOGIN_PATH,
    INACTIVE_MESSAGE,
    GuardOutcome,
    RouteRequirement,
    evaluate_route,
)
from amanah.schemas.principal import PermissionGrant, Principal, RoleGrant


def principal_with(
    pairs: list[tuple[str, str]] | None = None, role_name: str = "teller", **kwargs
) -> Principal:
    return Principal(
        id="user-1",
        email="user@example.com",
        roles=[
            RoleGrant(
                id="role-1",
                name=role_name,
                permissions=[PermissionGrant(resource=r, action=a) for r, a in pairs or []],
            )
        ],
        **kwargs,
    )


def context_for(principal: Principal | None, loading: bool = False, **kwargs) -> AuthContext:
    return AuthContext(
        principal=principal, evaluator=PermissionEvaluator(), loading=loading, **kwargs
    )


class TestAuthenticationGates:
    """Tests for missing, resetting and inactive principals."""

    def test_loading_without_principal(self):
        decision = evaluate_route(context_for(None, loading=True))
        assert decision.outcome is GuardOutcome.LOADING
        assert decision.allowed is False

    def test_anonymous_redirects_to_login(self):
        decision = evaluate_route(context_for(None))
        assert decision.outcome is GuardOutcome.REDIRECT_LOGIN
        assert decision.redirect_to == DEFAULT_LOGIN_PATH

    def test_custom_login_path(self):
        decision = evaluate_route(context_for(None), login_path="/signin")
        assert decision.redirect_to == "/signin"

    @pytest.mark.parametrize("role_name", ["teller", "admin"])
    def test_credential_reset_redirects_regardless_of_role(self, role_name):
        principal = principal_with(role_name=role_name, needs_credential_reset=True)
        decision = evaluate_route(context_for(principal), path="/transactions")
        assert decision.outcome is GuardOutcome.REDIRECT_CREDENTIAL_RESET
        assert decision.redirect_to == DEFAULT_CREDENTIAL_RESET_PATH

    def test_credential_reset_page_itself_renders(self):
        principal = principal_with(needs_credential_reset=True)
        decision = evaluate_route(
            context_for(principal), path=DEFAULT_CREDENTIAL_RESET_PATH
        )
        assert decision.outcome is GuardOutcome.RENDER

    def test_inactive_principal_gets_notice(self):
        principal = principal_with([("dashboard", "read")], is_active=False)
        decision = evaluate_route(context_for(principal))
        assert decision.outcome is GuardOutcome.INACTIVE_NOTICE
        assert decision.message == INACTIVE_MESSAGE


class TestAuthorizationGates:
    """Tests for admin, permission and allow-list requirements."""

    def test_no_requirement_renders(self):
        decision = evaluate_route(context_for(principal_with()))
        assert decision.allowed is True

    def test_require_admin_denied(self):
        decision = evaluate_route(
            context_for(principal_with()), RouteRequirement(require_admin=True)
        )
        assert decision.outcome is GuardOutcome.ACCESS_DENIED
        assert decision.message == ADMIN_REQUIRED_MESSAGE

    def test_require_admin_allowed(self):
        decision = evaluate_route(
            context_for(principal_with(role_name="Admin")),
            RouteRequirement(require_admin=True),
        )
        assert decision.allowed is True

    def test_required_permission_denied_message(self):
        decision = evaluate_route(
            context_for(principal_with([("transactions", "create")])),
            RouteRequirement(required_permission=("transactions", "approve")),
        )
        assert decision.outcome is GuardOutcome.ACCESS_DENIED
        assert (
            decision.message
            == "You need permission to approve transactions to access this page."
        )

    def test_required_permission_granted(self):
        decision = evaluate_route(
            context_for(principal_with([("transactions", "create")])),
            RouteRequirement(required_permission=("transactions", "create")),
        )
        assert decision.allowed is True

    def test_menu_gate(self):
        principal = principal_with(menu_access=["dashboard"])
        denied = evaluate_route(context_for(principal), RouteRequirement(menu_id="admin"))
        assert denied.message == "You do not have access to the admin menu."
        allowed = evaluate_route(
            context_for(principal), RouteRequirement(menu_id="dashboard")
        )
        assert allowed.allowed is True

    def test_sub_menu_gate(self):
        principal = principal_with(sub_menu_access={"reports": ["daily"]})
        decision = evaluate_route(
            context_for(principal),
            RouteRequirement(menu_id="reports", sub_menu_id="yearly"),
        )
        assert decision.message == "You do not have access to yearly in the reports menu."

    def test_component_gate(self):
        principal = principal_with(component_access=["user_profile"])
        decision = evaluate_route(
            context_for(principal), RouteRequirement(component_id="admin_panel")
        )
        assert decision.message == "You do not have access to the admin_panel component."

    def test_permission_and_allow_list_must_both_pass(self):
        """Holding the permission does not bypass a configured menu list."""
        principal = principal_with([("reports", "read")], menu_access=["dashboard"])
        requirement = RouteRequirement(
            required_permission=("reports", "read"), menu_id="reports"
        )
        decision = evaluate_route(context_for(principal), requirement)
        assert decision.outcome is GuardOutcome.ACCESS_DENIED

        granted = principal_with([("reports", "read")], menu_access=["reports"])
        assert evaluate_route(context_for(granted), requirement).allowed is True

    def test_sub_menu_requires_menu(self):
        with pytest.raises(ValueError):
            RouteRequirement(sub_menu_id="daily")


class TestAuthContext:
    """Tests for the explicit context object."""

    def test_checks_report_activity(self):
        touches = []
        context = context_for(
            principal_with([("reports", "read")]), on_activity=lambda: touches.append(1)
        )

        context.has_permission("reports", "read")
        context.is_admin()
        context.has_menu_access("reports")
        context.has_sub_menu_access("reports", "daily")
        context.has_component_access("user_profile")

        assert len(touches) == 5

    def test_is_authenticated(self):
        assert context_for(None).is_authenticated is False
        assert context_for(principal_with()).is_authenticated is True

    def test_anonymous_context_denies(self):
        context = context_for(None)
        assert context.has_permission("reports", "read") is False
        assert context.is_admin() is False

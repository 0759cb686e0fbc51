# SPDX-FileCopyrightText: 2025 Roland Knall <rknall@gmail.com>
# SPDX-License-Identifier: GPL-2.0-only
"""Tests for rbac_service and the seed."""

import uuid

import pytest

from amanah.exceptions import CatalogValidationError
from amanah.models import Permission, Role, RolePermission
from amanah.rbac.catalog import catalog
from amanah.services import rbac_service
from amanah.services.rbac_seed_service import seed_rbac_data
from conftest import create_user


class TestSeed:
    """Tests for seed_rbac_data."""

    def test_seeds_every_catalog_permission(self, seeded):
        assert seeded.query(Permission).count() == len(catalog.all_permissions())

    def test_seeds_default_roles(self, seeded):
        names = {role.name for role in rbac_service.list_roles(seeded)}
        assert names == {"admin", "teller", "auditor"}
        assert rbac_service.get_role_by_name(seeded, "admin").is_system is True

    def test_teller_role_permissions(self, seeded):
        role = rbac_service.get_role_by_name(seeded, "teller")
        pairs = {(p.resource, p.action) for p in rbac_service.get_role_permissions(seeded, role.id)}
        assert ("transactions", "create") in pairs
        assert ("transactions", "approve") not in pairs

    def test_seed_is_idempotent(self, seeded):
        permissions = seeded.query(Permission).count()
        links = seeded.query(RolePermission).count()

        seed_rbac_data(seeded)

        assert seeded.query(Permission).count() == permissions
        assert seeded.query(Role).count() == 3
        assert seeded.query(RolePermission).count() == links


class TestPermissions:
    """Tests for permission management."""

    def test_create_permission_uses_catalog_description(self, db_session):
        permission = rbac_service.create_permission(db_session, "transactions", "approve")
        assert permission.description == "Approve pending transactions"

    def test_create_permission_rejects_unknown_pairs(self, db_session):
        with pytest.raises(CatalogValidationError):
            rbac_service.create_permission(db_session, "ui_menu", "read")
        assert db_session.query(Permission).count() == 0

    def test_register_permission_is_idempotent(self, db_session):
        first = rbac_service.register_permission(db_session, "loans", "approve")
        second = rbac_service.register_permission(db_session, "loans", "approve")
        assert first.id == second.id

    def test_update_permission_validates_result(self, db_session):
        permission = rbac_service.create_permission(db_session, "loans", "read")

        updated = rbac_service.update_permission(db_session, permission, action="approve")
        assert updated.key == ("loans", "approve")

        with pytest.raises(CatalogValidationError):
            rbac_service.update_permission(db_session, permission, resource="ui_component")

    def test_delete_permission_detaches_roles(self, seeded):
        permission = rbac_service.get_permission_by_pair(seeded, "transactions", "create")
        rbac_service.delete_permission(seeded, permission)

        role = rbac_service.get_role_by_name(seeded, "teller")
        pairs = {(p.resource, p.action) for p in rbac_service.get_role_permissions(seeded, role.id)}
        assert ("transactions", "create") not in pairs


class TestRoles:
    """Tests for role management and assignment."""

    def test_create_role_with_permissions(self, seeded):
        approve = rbac_service.get_permission_by_pair(seeded, "loans", "approve")
        role = rbac_service.create_role(seeded, "loan_officer", "Loans", [approve.id])

        permissions = rbac_service.get_role_permissions(seeded, role.id)
        assert [p.key for p in permissions] == [("loans", "approve")]

    def test_role_lookup_ignores_case(self, seeded):
        assert rbac_service.get_role_by_name(seeded, "TELLER").name == "teller"

    def test_admin_name_is_reserved(self, db_session):
        with pytest.raises(ValueError, match="reserved"):
            rbac_service.create_role(db_session, "ADMIN")
        assert db_session.query(Role).count() == 0

    def test_create_role_with_unknown_permission(self, seeded):
        with pytest.raises(ValueError, match="not found"):
            rbac_service.create_role(seeded, "ghost", None, [uuid.uuid4()])
        assert rbac_service.get_role_by_name(seeded, "ghost") is None

    def test_set_role_permissions_replaces(self, seeded):
        role = rbac_service.get_role_by_name(seeded, "teller")
        read = rbac_service.get_permission_by_pair(seeded, "reports", "read")

        rbac_service.set_role_permissions(seeded, role, [read.id, read.id])
        seeded.commit()

        permissions = rbac_service.get_role_permissions(seeded, role.id)
        assert [p.key for p in permissions] == [("reports", "read")]

    def test_assign_and_remove_role(self, seeded):
        user = create_user(seeded, "someone@example.com")
        role = rbac_service.get_role_by_name(seeded, "auditor")

        rbac_service.assign_role_to_user(seeded, user.id, role.id)
        rbac_service.assign_role_to_user(seeded, user.id, role.id)
        assert [r.name for r in rbac_service.get_user_roles(seeded, user)] == ["auditor"]

        assert rbac_service.remove_role_from_user(seeded, user.id, role.id) is True
        assert rbac_service.remove_role_from_user(seeded, user.id, role.id) is False
        assert rbac_service.get_user_roles(seeded, user) == []

    def test_delete_role_removes_assignments(self, seeded):
        user = create_user(seeded, "someone@example.com", roles=("auditor",))
        role = rbac_service.get_role_by_name(seeded, "auditor")

        rbac_service.delete_role(seeded, role)

        assert rbac_service.get_role_by_name(seeded, "auditor") is None
        assert rbac_service.get_user_roles(seeded, user) == []

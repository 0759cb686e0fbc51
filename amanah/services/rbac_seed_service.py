# amanah/services/rbac_seed_service.py
import logging

from sqlalchemy.orm import Session

from amanah.models import Role, RolePermission
from amanah.rbac.catalog import catalog
from amanah.rbac.roles import DEFAULT_ROLES

from . import rbac_service

logger = logging.getLogger(__name__)


def seed_rbac_data(db: Session) -> None:
    """Seeds the database with catalog permissions and default roles.

    This function is idempotent.
    @param db: SQLAlchemy Session object
    """
    # Seed permissions
    for resource, action in catalog.all_permissions():
        rbac_service.register_permission(db, resource, action)

    # Seed roles and role-permissions
    for role_data in DEFAULT_ROLES:
        role = rbac_service.get_role_by_name(db, role_data["name"])
        if not role:
            role = Role(
                name=role_data["name"],
                is_system=role_data["is_system"],
                description=role_data["description"],
            )
            db.add(role)
            db.flush()  # Flush to get the role ID

            for resource, action in role_data["permissions"]:
                permission = rbac_service.get_permission_by_pair(db, resource, action)
                if permission:
                    db.add(RolePermission(role_id=role.id, permission_id=permission.id))
                else:
                    logger.warning(
                        f"Role {role.name} references unknown permission "
                        f"{resource}:{action}"
                    )
    db.commit()

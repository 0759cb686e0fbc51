# amanah/services/rbac_service.py
import logging
import uuid
from collections.abc import Iterable

from sqlalchemy import func
from sqlalchemy.orm import Session, joinedload

from amanah.models import Permission, Role, RolePermission, User, UserRole
from amanah.rbac.catalog import catalog
from amanah.rbac.roles import ADMIN_ROLE

logger = logging.getLogger(__name__)


def get_role_by_name(db: Session, name: str) -> Role | None:
    """Get a role by its name, ignoring case."""
    return db.query(Role).filter(func.lower(Role.name) == name.lower()).first()


def is_reserved_role_name(name: str) -> bool:
    """Names that would match the admin override."""
    return name.casefold() == ADMIN_ROLE.casefold()


def get_role(db: Session, role_id: uuid.UUID) -> Role | None:
    return db.query(Role).filter(Role.id == role_id).first()


def list_roles(db: Session) -> list[Role]:
    return db.query(Role).order_by(Role.name).all()


def get_role_permissions(db: Session, role_id: uuid.UUID) -> list[Permission]:
    """Get the permissions granted by a role."""
    return (
        db.query(Permission)
        .join(RolePermission)
        .filter(RolePermission.role_id == role_id)
        .order_by(Permission.resource, Permission.action)
        .all()
    )


def list_permissions(db: Session) -> list[Permission]:
    return db.query(Permission).order_by(Permission.resource, Permission.action).all()


def get_permission(db: Session, permission_id: uuid.UUID) -> Permission | None:
    return db.query(Permission).filter(Permission.id == permission_id).first()


def get_permission_by_pair(db: Session, resource: str, action: str) -> Permission | None:
    return (
        db.query(Permission)
        .filter(Permission.resource == resource, Permission.action == action)
        .first()
    )


def create_permission(
    db: Session, resource: str, action: str, description: str | None = None
) -> Permission:
    """Create a permission after validating it against the catalog.

    Raises:
        CatalogValidationError: If the pair is not in the catalog
    """
    catalog.validate_permission(resource, action)
    permission = Permission(
        resource=resource,
        action=action,
        description=description
        or catalog.get_permission_description(resource, action),
    )
    db.add(permission)
    db.commit()
    db.refresh(permission)
    return permission


def register_permission(
    db: Session, resource: str, action: str, description: str | None = None
) -> Permission:
    """Register a new permission if it does not already exist."""
    permission = get_permission_by_pair(db, resource, action)
    if not permission:
        permission = create_permission(db, resource, action, description)
    return permission


def update_permission(
    db: Session,
    permission: Permission,
    resource: str | None = None,
    action: str | None = None,
    description: str | None = None,
) -> Permission:
    """Update a permission; the resulting pair must stay in the catalog."""
    new_resource = resource or permission.resource
    new_action = action or permission.action
    catalog.validate_permission(new_resource, new_action)

    permission.resource = new_resource
    permission.action = new_action
    if description is not None:
        permission.description = description
    db.commit()
    db.refresh(permission)
    return permission


def delete_permission(db: Session, permission: Permission) -> None:
    db.query(RolePermission).filter(
        RolePermission.permission_id == permission.id
    ).delete()
    db.delete(permission)
    db.commit()


def set_role_permissions(
    db: Session, role: Role, permission_ids: Iterable[uuid.UUID]
) -> None:
    """Replace the permissions granted by a role.

    Raises:
        ValueError: If any permission id does not exist
    """
    db.query(RolePermission).filter(RolePermission.role_id == role.id).delete()
    db.flush()

    for permission_id in dict.fromkeys(permission_ids):
        permission = get_permission(db, permission_id)
        if not permission:
            raise ValueError(f"Permission '{permission_id}' not found")
        db.add(RolePermission(role_id=role.id, permission_id=permission.id))
    db.flush()


def create_role(
    db: Session,
    name: str,
    description: str | None = None,
    permission_ids: Iterable[uuid.UUID] = (),
    is_system: bool = False,
) -> Role:
    """Create a role with the given permissions.

    Raises:
        ValueError: If the name is reserved or a permission id does not exist
    """
    if is_reserved_role_name(name):
        raise ValueError(f"Role name '{name}' is reserved")
    role = Role(name=name, description=description, is_system=is_system)
    db.add(role)
    db.flush()  # To get role.id

    try:
        set_role_permissions(db, role, permission_ids)
    except ValueError:
        db.rollback()
        raise

    db.commit()
    db.refresh(role)
    return role


def delete_role(db: Session, role: Role) -> None:
    db.delete(role)
    db.commit()


def get_user_roles(db: Session, user: User) -> list[Role]:
    """Get a list of all roles for a user."""
    user_roles = (
        db.query(UserRole)
        .filter(UserRole.user_id == user.id)
        .options(joinedload(UserRole.role))
        .all()
    )
    return [user_role.role for user_role in user_roles]


def assign_role_to_user(
    db: Session,
    user_id: uuid.UUID,
    role_id: uuid.UUID,
    assigned_by: User | None = None,
) -> UserRole:
    """Assign a role to a user. Assigning a held role is a no-op."""
    user_role = (
        db.query(UserRole)
        .filter(UserRole.user_id == user_id, UserRole.role_id == role_id)
        .first()
    )
    if user_role:
        return user_role

    user_role = UserRole(
        user_id=user_id,
        role_id=role_id,
        assigned_by_id=assigned_by.id if assigned_by else None,
    )
    db.add(user_role)
    db.commit()
    logger.info(f"Assigned role {role_id} to user {user_id}")
    return user_role


def remove_role_from_user(db: Session, user_id: uuid.UUID, role_id: uuid.UUID) -> bool:
    """Remove a role from a user. Returns True if removed, False if not found."""
    user_role = (
        db.query(UserRole)
        .filter(UserRole.user_id == user_id, UserRole.role_id == role_id)
        .first()
    )

    if user_role:
        db.delete(user_role)
        db.commit()
        logger.info(f"Removed role {role_id} from user {user_id}")
        return True
    return False

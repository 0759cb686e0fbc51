# amanah/api/v1/rbac.py
import uuid

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from amanah.api.deps import get_current_principal, require_permission
from amanah.database import get_db
from amanah.events import AppEvent, event_bus
from amanah.exceptions import CatalogValidationError
from amanah.models import Role
from amanah.rbac.catalog import catalog
from amanah.schemas.principal import Principal
from amanah.schemas.rbac import (
    ActionOptionSchema,
    PermissionCreateSchema,
    PermissionSchema,
    PermissionUpdateSchema,
    ResourceOptionSchema,
    RoleCreateSchema,
    RoleSchema,
    RoleUpdateSchema,
    RoleWithPermissionsSchema,
)
from amanah.services import auth_service, rbac_service

router = APIRouter()


def _get_role_or_404(db: Session, role_id: uuid.UUID) -> Role:
    role = rbac_service.get_role(db, role_id)
    if not role:
        raise HTTPException(status_code=404, detail="Role not found")
    return role


def _role_with_permissions(db: Session, role: Role) -> RoleWithPermissionsSchema:
    permissions = rbac_service.get_role_permissions(db, role.id)
    return RoleWithPermissionsSchema(
        id=role.id,
        name=role.name,
        description=role.description,
        permissions=[PermissionSchema.model_validate(p) for p in permissions],
    )


# --- Catalog -----------------------------------------------------------------


@router.get("/rbac/catalog/resources", response_model=list[ResourceOptionSchema], summary="List catalog resources")
def list_catalog_resources(
    current_user: Principal = Depends(get_current_principal),
):
    """Resources that permissions can be defined for, in catalog order."""
    return [
        ResourceOptionSchema(
            value=r.name, label=r.label, description=r.description, category=r.category
        )
        for r in catalog.list_resources()
    ]


@router.get("/rbac/catalog/resources/{resource}/actions", response_model=list[ActionOptionSchema], summary="List the actions of a resource")
def list_catalog_actions(
    resource: str,
    current_user: Principal = Depends(get_current_principal),
):
    """Effective actions of a resource, including universal actions."""
    if not catalog.is_valid_resource(resource):
        raise HTTPException(status_code=404, detail=f"Unknown resource '{resource}'")
    return [
        ActionOptionSchema(value=a.name, label=a.label, description=a.description)
        for a in catalog.list_actions(resource)
    ]


@router.get("/rbac/catalog/categories", response_model=list[str], summary="List resource categories")
def list_catalog_categories(
    current_user: Principal = Depends(get_current_principal),
):
    return catalog.list_categories()


# --- Permissions -------------------------------------------------------------


@router.get("/rbac/permissions", response_model=list[PermissionSchema], summary="List all permissions")
def list_permissions(
    db: Session = Depends(get_db),
    current_user: Principal = Depends(require_permission("permissions", "view")),
):
    """Retrieve a list of all permissions stored in the system.
    Requires permissions:view.
    """
    return rbac_service.list_permissions(db)


@router.post("/rbac/permissions", response_model=PermissionSchema, status_code=status.HTTP_201_CREATED, summary="Create a permission")
def create_permission(
    permission_in: PermissionCreateSchema,
    db: Session = Depends(get_db),
    current_user: Principal = Depends(require_permission("permissions", "create")),
):
    """Create a permission for a catalog resource/action pair.
    Requires permissions:create.
    """
    if rbac_service.get_permission_by_pair(db, permission_in.resource, permission_in.action):
        raise HTTPException(status_code=400, detail="Permission already exists")

    try:
        permission = rbac_service.create_permission(
            db, permission_in.resource, permission_in.action, permission_in.description
        )
    except CatalogValidationError as e:
        raise HTTPException(status_code=400, detail=str(e)) from e

    event_bus.publish_sync(
        AppEvent.PERMISSION_CREATED,
        {"permission_id": str(permission.id), "user_id": current_user.id},
    )
    return permission


@router.put("/rbac/permissions/{permission_id}", response_model=PermissionSchema, summary="Update a permission")
def update_permission(
    permission_id: uuid.UUID,
    permission_in: PermissionUpdateSchema,
    db: Session = Depends(get_db),
    current_user: Principal = Depends(require_permission("permissions", "update")),
):
    """Update a permission. The resulting pair must exist in the catalog.
    Requires permissions:update.
    """
    permission = rbac_service.get_permission(db, permission_id)
    if not permission:
        raise HTTPException(status_code=404, detail="Permission not found")

    resource = permission_in.resource or permission.resource
    action = permission_in.action or permission.action
    existing = rbac_service.get_permission_by_pair(db, resource, action)
    if existing and existing.id != permission_id:
        raise HTTPException(status_code=400, detail="Permission already exists")

    try:
        permission = rbac_service.update_permission(
            db,
            permission,
            resource=permission_in.resource,
            action=permission_in.action,
            description=permission_in.description,
        )
    except CatalogValidationError as e:
        raise HTTPException(status_code=400, detail=str(e)) from e

    event_bus.publish_sync(
        AppEvent.PERMISSION_UPDATED,
        {"permission_id": str(permission.id), "user_id": current_user.id},
    )
    return permission


@router.delete("/rbac/permissions/{permission_id}", status_code=status.HTTP_204_NO_CONTENT, summary="Delete a permission")
def delete_permission(
    permission_id: uuid.UUID,
    db: Session = Depends(get_db),
    current_user: Principal = Depends(require_permission("permissions", "delete")),
):
    """Delete a permission and detach it from every role.
    Requires permissions:delete.
    """
    permission = rbac_service.get_permission(db, permission_id)
    if not permission:
        raise HTTPException(status_code=404, detail="Permission not found")

    rbac_service.delete_permission(db, permission)
    event_bus.publish_sync(
        AppEvent.PERMISSION_DELETED,
        {"permission_id": str(permission_id), "user_id": current_user.id},
    )


# --- Roles -------------------------------------------------------------------


@router.get("/rbac/roles", response_model=list[RoleSchema], summary="List all roles")
def list_roles(
    db: Session = Depends(get_db),
    current_user: Principal = Depends(require_permission("roles", "view")),
):
    """Retrieve a list of all roles in the system.
    Requires roles:view.
    """
    return rbac_service.list_roles(db)


@router.get("/rbac/roles/{role_id}", response_model=RoleWithPermissionsSchema, summary="Get a role by ID with its permissions")
def get_role(
    role_id: uuid.UUID,
    db: Session = Depends(get_db),
    current_user: Principal = Depends(require_permission("roles", "view")),
):
    """Retrieve a specific role by its ID, including all associated permissions.
    Requires roles:view.
    """
    return _role_with_permissions(db, _get_role_or_404(db, role_id))


@router.post("/rbac/roles", response_model=RoleWithPermissionsSchema, status_code=status.HTTP_201_CREATED, summary="Create a new custom role")
def create_role(
    role_in: RoleCreateSchema,
    db: Session = Depends(get_db),
    current_user: Principal = Depends(require_permission("roles", "create")),
):
    """Create a new custom role with specified permissions.
    Requires roles:create.
    """
    if rbac_service.get_role_by_name(db, role_in.name):
        raise HTTPException(status_code=400, detail="Role with this name already exists")

    try:
        role = rbac_service.create_role(
            db, role_in.name, role_in.description, role_in.permission_ids
        )
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e)) from e

    event_bus.publish_sync(
        AppEvent.ROLE_CREATED, {"role_id": str(role.id), "user_id": current_user.id}
    )
    return _role_with_permissions(db, role)


@router.put("/rbac/roles/{role_id}", response_model=RoleWithPermissionsSchema, summary="Update an existing role")
def update_role(
    role_id: uuid.UUID,
    role_in: RoleUpdateSchema,
    db: Session = Depends(get_db),
    current_user: Principal = Depends(require_permission("roles", "update")),
):
    """Update an existing custom role's name, description, and permissions.
    System roles cannot be modified.
    Requires roles:update.
    """
    role = _get_role_or_404(db, role_id)
    if role.is_system:
        raise HTTPException(status_code=403, detail="System roles cannot be modified")

    if role_in.name:
        if rbac_service.is_reserved_role_name(role_in.name):
            raise HTTPException(
                status_code=400, detail=f"Role name '{role_in.name}' is reserved"
            )
        existing_role = rbac_service.get_role_by_name(db, role_in.name)
        if existing_role and existing_role.id != role_id:
            raise HTTPException(status_code=400, detail="Role with this name already exists")
        role.name = role_in.name

    if role_in.description is not None:
        role.description = role_in.description

    if role_in.permission_ids is not None:
        try:
            rbac_service.set_role_permissions(db, role, role_in.permission_ids)
        except ValueError as e:
            db.rollback()
            raise HTTPException(status_code=400, detail=str(e)) from e

    db.commit()
    db.refresh(role)
    event_bus.publish_sync(
        AppEvent.ROLE_UPDATED, {"role_id": str(role.id), "user_id": current_user.id}
    )
    return _role_with_permissions(db, role)


@router.delete("/rbac/roles/{role_id}", status_code=status.HTTP_204_NO_CONTENT, summary="Delete a custom role")
def delete_role(
    role_id: uuid.UUID,
    db: Session = Depends(get_db),
    current_user: Principal = Depends(require_permission("roles", "delete")),
):
    """Delete a custom role. System roles cannot be deleted.
    Requires roles:delete.
    """
    role = _get_role_or_404(db, role_id)
    if role.is_system:
        raise HTTPException(status_code=403, detail="System roles cannot be deleted")

    rbac_service.delete_role(db, role)
    event_bus.publish_sync(
        AppEvent.ROLE_DELETED, {"role_id": str(role_id), "user_id": current_user.id}
    )


# --- Role assignment ---------------------------------------------------------


@router.post("/rbac/users/{user_id}/roles/{role_id}", status_code=status.HTTP_204_NO_CONTENT, summary="Assign a role to a user")
def assign_role(
    user_id: uuid.UUID,
    role_id: uuid.UUID,
    db: Session = Depends(get_db),
    current_user: Principal = Depends(require_permission("roles", "assign")),
):
    """Assign a role to a user. Requires roles:assign."""
    user = auth_service.get_user_by_id(db, user_id)
    if not user:
        raise HTTPException(status_code=404, detail="User not found")
    _get_role_or_404(db, role_id)

    assigned_by = auth_service.get_user_by_id(db, current_user.id)
    rbac_service.assign_role_to_user(db, user_id, role_id, assigned_by=assigned_by)
    event_bus.publish_sync(
        AppEvent.ROLE_ASSIGNED,
        {"role_id": str(role_id), "user_id": str(user_id), "by": current_user.id},
    )


@router.delete("/rbac/users/{user_id}/roles/{role_id}", status_code=status.HTTP_204_NO_CONTENT, summary="Remove a role from a user")
def unassign_role(
    user_id: uuid.UUID,
    role_id: uuid.UUID,
    db: Session = Depends(get_db),
    current_user: Principal = Depends(require_permission("roles", "assign")),
):
    """Remove a role from a user. Requires roles:assign."""
    if not rbac_service.remove_role_from_user(db, user_id, role_id):
        raise HTTPException(status_code=404, detail="Role assignment not found")
    event_bus.publish_sync(
        AppEvent.ROLE_UNASSIGNED,
        {"role_id": str(role_id), "user_id": str(user_id), "by": current_user.id},
    )

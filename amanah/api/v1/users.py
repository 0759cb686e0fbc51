# amanah/api/v1/users.py
"""User management API endpoints."""

import uuid

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from amanah.api.deps import require_permission
from amanah.database import get_db
from amanah.events import AppEvent, event_bus
from amanah.models import User
from amanah.schemas.principal import Principal
from amanah.schemas.user import UserCreate, UserResponse, UserUpdate
from amanah.services import auth_service, user_service

router = APIRouter()


def _to_response(db: Session, user: User) -> UserResponse:
    response = UserResponse.model_validate(user)
    return response.model_copy(update={"role_ids": user_service.get_role_ids(db, user)})


def _get_user_or_404(db: Session, user_id: uuid.UUID) -> User:
    user = auth_service.get_user_by_id(db, user_id)
    if not user:
        raise HTTPException(status_code=404, detail="User not found")
    return user


@router.get(
    "/users",
    response_model=list[UserResponse],
    summary="List all users",
)
def list_users(
    db: Session = Depends(get_db),
    current_user: Principal = Depends(require_permission("users", "read")),
) -> list[UserResponse]:
    """Retrieve a list of all users with their role ids.

    Requires users:read.
    """
    return [_to_response(db, user) for user in user_service.list_users(db)]


@router.post(
    "/users",
    response_model=UserResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create a new user",
)
def create_user(
    user_in: UserCreate,
    db: Session = Depends(get_db),
    current_user: Principal = Depends(require_permission("users", "create")),
) -> UserResponse:
    """Create a user who must change their password on first login.

    Requires users:create.
    """
    if auth_service.get_user_by_email(db, user_in.email):
        raise HTTPException(status_code=400, detail="Email already in use")

    try:
        role_ids = user_service.validate_role_ids(db, user_in.role_ids)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e)) from e

    user = auth_service.create_user(
        db,
        user_in.email,
        user_in.password,
        full_name=user_in.full_name,
        needs_password_reset=True,
        menu_access=user_in.menu_access,
        sub_menu_access=user_in.sub_menu_access,
        component_access=user_in.component_access,
    )
    assigned_by = auth_service.get_user_by_id(db, current_user.id)
    user_service.set_user_roles(db, user, role_ids, assigned_by=assigned_by)
    db.commit()
    db.refresh(user)

    event_bus.publish_sync(
        AppEvent.USER_CREATED, {"user_id": str(user.id), "by": current_user.id}
    )
    return _to_response(db, user)


@router.get(
    "/users/{user_id}",
    response_model=UserResponse,
    summary="Get a user by ID",
)
def get_user(
    user_id: uuid.UUID,
    db: Session = Depends(get_db),
    current_user: Principal = Depends(require_permission("users", "read")),
) -> UserResponse:
    """Retrieve a specific user by ID.

    Requires users:read.
    """
    return _to_response(db, _get_user_or_404(db, user_id))


@router.put(
    "/users/{user_id}",
    response_model=UserResponse,
    summary="Update a user",
)
def update_user(
    user_id: uuid.UUID,
    user_in: UserUpdate,
    db: Session = Depends(get_db),
    current_user: Principal = Depends(require_permission("users", "update")),
) -> UserResponse:
    """Update flags, access lists and roles of a user.

    Deactivating a user revokes their sessions. Users cannot deactivate
    themselves. Requires users:update.
    """
    user = _get_user_or_404(db, user_id)
    if str(user_id) == current_user.id and user_in.is_active is False:
        raise HTTPException(
            status_code=400, detail="You cannot deactivate your own account"
        )

    updated_by = auth_service.get_user_by_id(db, current_user.id)
    try:
        user = user_service.update_user(db, user, user_in, updated_by=updated_by)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e)) from e

    event_bus.publish_sync(
        AppEvent.USER_UPDATED, {"user_id": str(user_id), "by": current_user.id}
    )
    return _to_response(db, user)


@router.delete(
    "/users/{user_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete a user",
)
def delete_user(
    user_id: uuid.UUID,
    db: Session = Depends(get_db),
    current_user: Principal = Depends(require_permission("users", "delete")),
) -> None:
    """Delete a user. Users cannot delete themselves.

    Requires users:delete.
    """
    user = _get_user_or_404(db, user_id)
    if str(user_id) == current_user.id:
        raise HTTPException(status_code=400, detail="You cannot delete your own account")

    user_service.delete_user(db, user)
    event_bus.publish_sync(
        AppEvent.USER_DELETED, {"user_id": str(user_id), "by": current_user.id}
    )

# SPDX-FileCopyrightText: 2025 Roland Knall <rknall@gmail.com>
# SPDX-License-Identifier: GPL-2.0-only
"""Authentication API endpoints."""

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from amanah.api.deps import get_access_token, get_current_principal, get_evaluator
from amanah.database import get_db
from amanah.events import AppEvent, event_bus
from amanah.exceptions import InactiveAccountError
from amanah.rbac.evaluator import PermissionEvaluator
from amanah.schemas.auth import (
    AuthResponse,
    EffectivePermission,
    LoginRequest,
    PasswordChangeRequest,
    PasswordResetRequest,
    ProfileResponse,
)
from amanah.schemas.common import MessageResponse
from amanah.schemas.principal import Principal
from amanah.services import auth_service
from amanah.services.profile_service import load_principal

router = APIRouter()


def build_profile_response(
    principal: Principal, evaluator: PermissionEvaluator
) -> ProfileResponse:
    """Build ProfileResponse with the flattened permission set."""
    permissions = sorted(evaluator.effective_permissions(principal))
    return ProfileResponse(
        principal=principal,
        is_admin=evaluator.is_admin(principal),
        permissions=[
            EffectivePermission(resource=resource, action=action)
            for resource, action in permissions
        ],
    )


@router.post("/login", response_model=AuthResponse)
def login(
    data: LoginRequest,
    db: Session = Depends(get_db),
    evaluator: PermissionEvaluator = Depends(get_evaluator),
) -> AuthResponse:
    """Login with email and password."""
    user = auth_service.authenticate(db, data.email, data.password)

    if not user:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid credentials",
        )
    if not user.is_active:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail=str(InactiveAccountError()),
        )

    user_id = user.id
    session = auth_service.create_session(db, user_id)

    # Re-query after session creation commit to avoid expired object error
    principal = load_principal(db, user_id)
    if not principal:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="User not found after session creation",
        )

    event_bus.publish_sync(AppEvent.USER_LOGIN, {"user_id": principal.id})

    profile = build_profile_response(principal, evaluator)
    return AuthResponse(**profile.model_dump(), access_token=session.token)


@router.post("/logout", status_code=status.HTTP_204_NO_CONTENT)
def logout(
    db: Session = Depends(get_db),
    token: str = Depends(get_access_token),
    principal: Principal = Depends(get_current_principal),
) -> None:
    """Logout current user by revoking the presented token."""
    auth_service.delete_session(db, token)
    event_bus.publish_sync(AppEvent.USER_LOGOUT, {"user_id": principal.id})


@router.get("/me", response_model=ProfileResponse)
def get_current_user_info(
    principal: Principal = Depends(get_current_principal),
    evaluator: PermissionEvaluator = Depends(get_evaluator),
) -> ProfileResponse:
    """Get current authenticated user with effective permissions."""
    return build_profile_response(principal, evaluator)


@router.post("/password", response_model=ProfileResponse)
def change_password(
    data: PasswordChangeRequest,
    db: Session = Depends(get_db),
    principal: Principal = Depends(get_current_principal),
    evaluator: PermissionEvaluator = Depends(get_evaluator),
) -> ProfileResponse:
    """Change the current user's password and return the refreshed profile."""
    user = auth_service.get_user_by_id(db, principal.id)
    if not user:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="User not found or inactive",
        )

    auth_service.update_password(
        db, user, data.new_password, data.clear_needs_password_reset
    )
    event_bus.publish_sync(AppEvent.USER_PASSWORD_CHANGED, {"user_id": principal.id})

    refreshed = load_principal(db, principal.id)
    return build_profile_response(refreshed or principal, evaluator)


@router.post(
    "/password-reset",
    response_model=MessageResponse,
    status_code=status.HTTP_202_ACCEPTED,
)
def request_password_reset(
    data: PasswordResetRequest,
    db: Session = Depends(get_db),
) -> MessageResponse:
    """Request a password reset email.

    The response is identical whether or not the address is registered.
    """
    user = auth_service.get_user_by_email(db, data.email)
    if user:
        event_bus.publish_sync(
            AppEvent.USER_PASSWORD_RESET_REQUESTED,
            {"user_id": str(user.id), "email": user.email},
        )
    return MessageResponse(
        message="If an account exists for this email, a reset link has been sent."
    )

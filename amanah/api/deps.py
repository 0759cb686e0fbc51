# SPDX-FileCopyrightText: 2025 Roland Knall <rknall@gmail.com>
# SPDX-License-Identifier: GPL-2.0-only
"""API dependencies for dependency injection."""

import logging
from collections.abc import Callable

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from amanah.database import get_db
from amanah.exceptions import NotAuthenticatedError, PermissionDeniedError
from amanah.rbac.evaluator import PermissionEvaluator
from amanah.schemas.principal import Principal
from amanah.services import auth_service
from amanah.services.profile_service import load_principal

logger = logging.getLogger(__name__)

bearer_scheme = HTTPBearer(auto_error=False)


def get_access_token(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
) -> str:
    """Extract the bearer token from the Authorization header."""
    if credentials is None or not credentials.credentials:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=str(NotAuthenticatedError()),
            headers={"WWW-Authenticate": "Bearer"},
        )
    return credentials.credentials


def get_current_principal(
    db: Session = Depends(get_db),
    token: str = Depends(get_access_token),
) -> Principal:
    """Resolve the bearer token to an active principal."""
    session_obj = auth_service.get_session(db, token)
    if not session_obj:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=str(NotAuthenticatedError("Invalid or expired session")),
            headers={"WWW-Authenticate": "Bearer"},
        )

    principal = load_principal(db, session_obj.user_id)
    if not principal or not principal.is_active:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="User not found or inactive",
        )

    return principal


def get_evaluator() -> PermissionEvaluator:
    """Evaluator for a single request; nothing is cached across requests."""
    return PermissionEvaluator()


def require_permission(resource: str, action: str) -> Callable[..., Principal]:
    """Dependency for permission-based authorization."""

    def dependency(
        principal: Principal = Depends(get_current_principal),
        evaluator: PermissionEvaluator = Depends(get_evaluator),
    ) -> Principal:
        if not evaluator.has_permission(principal, resource, action):
            denied = PermissionDeniedError(resource, action)
            logger.warning(f"User {principal.id} denied {action} on {resource}")
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN, detail=str(denied)
            )
        return principal

    return dependency

"""Pydantic schemas package."""
from amanah.schemas.auth import (
    AuthResponse,
    LoginRequest,
    PasswordChangeRequest,
    PasswordResetRequest,
    ProfileResponse,
)
from amanah.schemas.common import HealthResponse, MessageResponse
from amanah.schemas.principal import PermissionGrant, Principal, RoleGrant

__all__ = [
    "AuthResponse",
    "HealthResponse",
    "LoginRequest",
    "MessageResponse",
    "PasswordChangeRequest",
    "PasswordResetRequest",
    "PermissionGrant",
    "Principal",
    "ProfileResponse",
    "RoleGrant",
]

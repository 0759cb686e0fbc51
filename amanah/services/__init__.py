"""Services package."""
from amanah.services import (
    auth_service,
    banking_service,
    profile_service,
    rbac_seed_service,
    rbac_service,
    user_service,
)

__all__ = [
    "auth_service",
    "banking_service",
    "profile_service",
    "rbac_seed_service",
    "rbac_service",
    "user_service",
]

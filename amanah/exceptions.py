# SPDX-FileCopyrightText: 2025 Roland Knall <rknall@gmail.com>
# SPDX-License-Identifier: GPL-2.0-only
"""Exception hierarchy for authentication and authorization failures."""


class AccessControlError(Exception):
    """Base class for all access control errors."""


class NotAuthenticatedError(AccessControlError):
    """Missing, invalid or expired identity."""

    def __init__(self, message: str = "Not authenticated") -> None:
        super().__init__(message)


class AuthProviderError(AccessControlError):
    """The external auth provider rejected a request."""


class ProfileError(AccessControlError):
    """The profile for an authenticated identity is unusable."""


class ProfileNotFoundError(ProfileError):
    """No profile exists for the identity."""

    def __init__(self, identity_id: str) -> None:
        self.identity_id = identity_id
        super().__init__(f"No user profile found for identity {identity_id}")


class InactiveAccountError(ProfileError):
    """The profile exists but the account has been deactivated."""

    def __init__(self, message: str = "Account is inactive") -> None:
        super().__init__(message)


class ProfileFetchError(AccessControlError):
    """Fetching the profile failed after all retry attempts."""


class ProfileFetchTimeoutError(ProfileFetchError):
    """Fetching the profile did not finish within the allowed time."""


class PermissionDeniedError(AccessControlError):
    """An authorization check denied the requested action."""

    def __init__(
        self, resource: str, action: str, message: str | None = None
    ) -> None:
        self.resource = resource
        self.action = action
        super().__init__(message or f"Permission denied: {action} on {resource}")


class CatalogValidationError(AccessControlError, ValueError):
    """A resource/action pair is not part of the permission catalog."""


class CredentialError(AccessControlError):
    """The credential API rejected a password change."""


class SessionClosedError(AccessControlError):
    """The session manager has been shut down."""


class SessionSupersededError(AccessControlError):
    """A newer lifecycle operation replaced this one before it finished."""

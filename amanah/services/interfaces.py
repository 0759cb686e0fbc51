# SPDX-FileCopyrightText: 2025 Roland Knall <rknall@gmail.com>
# SPDX-License-Identifier: GPL-2.0-only
"""Contracts of the external collaborators used by the session manager."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Protocol

from amanah.schemas.principal import Principal


@dataclass(frozen=True)
class AuthSession:
    """Session issued by the auth provider."""

    identity_id: str
    access_token: str
    email: str | None = None
    expires_at: datetime | None = None


class AuthChangeEvent(str, Enum):
    """Events emitted by the auth provider."""

    SIGNED_IN = "signedIn"
    TOKEN_REFRESHED = "tokenRefreshed"
    SIGNED_OUT = "signedOut"


AuthListener = Callable[[AuthChangeEvent, AuthSession | None], Awaitable[None]]


class AuthProvider(Protocol):
    """External identity provider.

    Methods raise AuthProviderError when the provider rejects a request.
    """

    async def sign_in_with_credentials(self, email: str, secret: str) -> AuthSession:
        ...

    async def get_session(self) -> AuthSession | None:
        ...

    async def refresh_session(self) -> AuthSession:
        ...

    async def sign_out(self) -> None:
        ...

    async def reset_password_for_email(self, email: str) -> None:
        ...

    def on_auth_state_change(self, listener: AuthListener) -> Callable[[], None]:
        """Register a listener; returns a callable that unregisters it."""
        ...


class ProfileStore(Protocol):
    """Source of principal profiles. Must be idempotent and safe to retry."""

    async def fetch_profile(self, identity_id: str) -> Principal | None:
        ...


class CredentialApi(Protocol):
    """Password management for the signed-in identity."""

    async def update_password(self, new_password: str, clear_reset_flag: bool) -> None:
        ...

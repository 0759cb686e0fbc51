# SPDX-FileCopyrightText: 2025 Roland Knall <rknall@gmail.com>
# SPDX-License-Identifier: GPL-2.0-only
"""Database-backed auth provider and credential API."""

import logging
from collections.abc import Awaitable, Callable

from sqlalchemy.orm import Session

from amanah.database import SessionLocal
from amanah.exceptions import AuthProviderError, CredentialError
from amanah.models.session import Session as SessionModel
from amanah.services import auth_service
from amanah.services.interfaces import AuthChangeEvent, AuthListener, AuthSession

logger = logging.getLogger(__name__)

ResetMailer = Callable[[str], Awaitable[None]]


def _to_auth_session(session: SessionModel, email: str | None = None) -> AuthSession:
    return AuthSession(
        identity_id=str(session.user_id),
        access_token=session.token,
        email=email,
        expires_at=session.expires_at,
    )


class LocalAuthProvider:
    """Auth provider that issues opaque tokens from the sessions table.

    Holds the token of the current client the way a hosted provider's
    client library would.
    """

    def __init__(
        self,
        session_factory: Callable[[], Session] = SessionLocal,
        expiry_days: int | None = None,
        reset_mailer: ResetMailer | None = None,
    ) -> None:
        self._session_factory = session_factory
        self._expiry_days = expiry_days
        self._reset_mailer = reset_mailer
        self._current: AuthSession | None = None
        self._listeners: list[AuthListener] = []

    @property
    def current_session(self) -> AuthSession | None:
        return self._current

    def on_auth_state_change(self, listener: AuthListener) -> Callable[[], None]:
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    async def _emit(self, event: AuthChangeEvent, session: AuthSession | None) -> None:
        for listener in list(self._listeners):
            try:
                await listener(event, session)
            except Exception as e:
                logger.error(f"Error in auth listener for {event.value}: {e}")

    async def sign_in_with_credentials(self, email: str, secret: str) -> AuthSession:
        db = self._session_factory()
        try:
            user = auth_service.authenticate(db, email, secret)
            if not user:
                raise AuthProviderError("Invalid login credentials")
            session = auth_service.create_session(db, user.id, self._expiry_days)
            self._current = _to_auth_session(session, user.email)
        finally:
            db.close()

        await self._emit(AuthChangeEvent.SIGNED_IN, self._current)
        return self._current

    async def get_session(self) -> AuthSession | None:
        if self._current is None:
            return None

        db = self._session_factory()
        try:
            session = auth_service.get_session(db, self._current.access_token)
        finally:
            db.close()

        if session is None:
            logger.debug("Stored session is no longer valid")
            return None
        return self._current

    async def refresh_session(self) -> AuthSession:
        if self._current is None:
            raise AuthProviderError("No session to refresh")

        db = self._session_factory()
        try:
            session = auth_service.rotate_session(
                db, self._current.access_token, self._expiry_days
            )
            if session is None:
                self._current = None
                raise AuthProviderError("Session expired")
            self._current = _to_auth_session(session, self._current.email)
        finally:
            db.close()

        await self._emit(AuthChangeEvent.TOKEN_REFRESHED, self._current)
        return self._current

    async def sign_out(self) -> None:
        if self._current is None:
            return

        token = self._current.access_token
        self._current = None
        db = self._session_factory()
        try:
            auth_service.delete_session(db, token)
        finally:
            db.close()

        await self._emit(AuthChangeEvent.SIGNED_OUT, None)

    async def reset_password_for_email(self, email: str) -> None:
        db = self._session_factory()
        try:
            user = auth_service.get_user_by_email(db, email)
        finally:
            db.close()

        # Unknown addresses are accepted silently
        if user is None:
            logger.info("Password reset requested for unknown email")
            return
        if self._reset_mailer is not None:
            await self._reset_mailer(email)
        else:
            logger.info(f"Password reset requested for user {user.id}")


class LocalCredentialApi:
    """Password updates for the identity currently signed in to a provider."""

    def __init__(
        self,
        provider: LocalAuthProvider,
        session_factory: Callable[[], Session] = SessionLocal,
    ) -> None:
        self._provider = provider
        self._session_factory = session_factory

    async def update_password(self, new_password: str, clear_reset_flag: bool) -> None:
        current = self._provider.current_session
        if current is None:
            raise CredentialError("Not authenticated")
        if len(new_password) < 8:
            raise CredentialError("Password must be at least 8 characters")

        db = self._session_factory()
        try:
            user = auth_service.get_user_by_id(db, current.identity_id)
            if user is None:
                raise CredentialError("User not found")
            auth_service.update_password(db, user, new_password, clear_reset_flag)
        finally:
            db.close()

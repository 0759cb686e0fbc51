# SPDX-FileCopyrightText: 2025 Roland Knall <rknall@gmail.com>
# SPDX-License-Identifier: GPL-2.0-only
"""Session and profile lifecycle for the current principal."""

import asyncio
import logging
from enum import Enum

from amanah.config import Settings, get_settings
from amanah.events import AppEvent, EventBus, event_bus
from amanah.exceptions import (
    AuthProviderError,
    InactiveAccountError,
    ProfileError,
    ProfileFetchError,
    ProfileFetchTimeoutError,
    ProfileNotFoundError,
    SessionClosedError,
    SessionSupersededError,
)
from amanah.rbac.cache import DecisionCache
from amanah.rbac.context import AuthContext
from amanah.rbac.evaluator import PermissionEvaluator
from amanah.schemas.principal import Principal
from amanah.services.interfaces import (
    AuthChangeEvent,
    AuthProvider,
    AuthSession,
    CredentialApi,
    ProfileStore,
)
from amanah.services.retry import with_retry

logger = logging.getLogger(__name__)

REFRESH_FAILED_MESSAGE = "Failed to refresh user profile. Using existing data."
REFRESH_TIMED_OUT_MESSAGE = "Profile refresh timed out. Using existing session data."


class SessionState(str, Enum):
    """Lifecycle states of the session manager."""

    UNINITIALIZED = "uninitialized"
    LOADING = "loading"
    AUTHENTICATED = "authenticated"
    ANONYMOUS = "anonymous"
    DESTROYED = "destroyed"


class SessionManager:
    """Sole owner of the principal snapshot and the decision cache.

    Every publish of a new principal and the matching cache invalidation
    happen in one synchronous step, so no permission check can observe a
    decision computed for a previous snapshot. Each profile load carries a
    generation number; a load that finishes after a newer one started is
    discarded.
    """

    def __init__(
        self,
        auth_provider: AuthProvider,
        profile_store: ProfileStore,
        credential_api: CredentialApi,
        settings: Settings | None = None,
        cache: DecisionCache | None = None,
        bus: EventBus = event_bus,
    ) -> None:
        settings = settings or get_settings()
        self._auth = auth_provider
        self._profiles = profile_store
        self._credentials = credential_api
        self._bus = bus

        self._max_attempts = settings.profile_fetch_max_attempts
        self._base_delay = settings.profile_fetch_base_delay_seconds
        self._fetch_timeout = settings.profile_fetch_timeout_seconds
        self._inactivity_timeout = settings.inactivity_timeout_seconds

        if cache is None:
            cache = DecisionCache(ttl_seconds=settings.decision_cache_ttl_seconds)
        self._cache = cache
        self.evaluator = PermissionEvaluator(cache)

        self.state = SessionState.UNINITIALIZED
        self.error: str | None = None
        self._principal: Principal | None = None
        self._generation = 0
        self._initialized = False
        self._sign_in_in_progress = 0
        self._pending_events: list[tuple[AuthChangeEvent, AuthSession | None]] = []

        self._loop: asyncio.AbstractEventLoop | None = None
        self._inactivity_handle: asyncio.TimerHandle | None = None
        self._expiry_task: asyncio.Task | None = None

        self._unsubscribe = auth_provider.on_auth_state_change(self._on_auth_event)

    # ------------------------------------------------------------------
    # Read side

    @property
    def principal(self) -> Principal | None:
        return self._principal

    @property
    def loading(self) -> bool:
        return self.state is SessionState.LOADING

    def context(self) -> AuthContext:
        """Snapshot of the session for guards and permission call sites."""
        return AuthContext(
            principal=self._principal,
            evaluator=self.evaluator,
            loading=self.loading,
            error=self.error,
            on_activity=self.touch,
        )

    # ------------------------------------------------------------------
    # Internal helpers

    def _ensure_open(self) -> None:
        if self.state is SessionState.DESTROYED:
            raise SessionClosedError("Session manager has been shut down")

    def _next_generation(self) -> int:
        self._generation += 1
        return self._generation

    def _publish(self, principal: Principal | None) -> None:
        # Snapshot swap and cache clear must stay in one synchronous step
        self._principal = principal
        self._cache.invalidate()

    def _settle(self) -> None:
        self.state = (
            SessionState.AUTHENTICATED
            if self._principal is not None
            else SessionState.ANONYMOUS
        )

    async def _fetch_profile(self, identity_id: str) -> Principal:
        """Load an active profile, retrying transient failures."""
        try:
            profile = await with_retry(
                lambda: self._profiles.fetch_profile(identity_id),
                max_attempts=self._max_attempts,
                base_delay=self._base_delay,
                timeout=self._fetch_timeout,
            )
        except TimeoutError as e:
            raise ProfileFetchTimeoutError("Profile fetch timed out") from e
        except Exception as e:
            raise ProfileFetchError(f"Failed to load user profile: {e}") from e

        if profile is None:
            raise ProfileNotFoundError(identity_id)
        if not profile.is_active:
            raise InactiveAccountError()
        return profile

    async def _revoke_external_session(self) -> None:
        try:
            await self._auth.sign_out()
        except Exception as e:
            logger.warning(f"Failed to revoke external session: {e}")

    async def _revoke_if_orphaned(self, session: AuthSession) -> None:
        """Sign out a provider session that no local principal stands for."""
        current = self._principal
        if current is not None and current.id == session.identity_id:
            return
        try:
            active = await self._auth.get_session()
        except AuthProviderError as e:
            logger.warning(f"Could not read provider session: {e}")
            return
        if active is not None and active.identity_id == session.identity_id:
            await self._revoke_external_session()

    async def _force_anonymous(self, message: str) -> None:
        """Drop the principal and the external session after a profile error."""
        self._next_generation()
        self._cancel_inactivity_timer()
        self._publish(None)
        self.state = SessionState.ANONYMOUS
        self.error = message
        await self._revoke_external_session()

    async def _activate(self, principal: Principal, event: AppEvent) -> None:
        self._publish(principal)
        self.error = None
        self.state = SessionState.AUTHENTICATED
        self._loop = asyncio.get_running_loop()
        self._restart_inactivity_timer()
        await self._bus.publish(event, {"user_id": principal.id})

    async def _load_session_profile(self, session: AuthSession) -> None:
        """Load the profile for a session that was not started by sign_in."""
        generation = self._next_generation()
        self.state = SessionState.LOADING
        try:
            profile = await self._fetch_profile(session.identity_id)
        except ProfileFetchError as e:
            if generation != self._generation:
                return
            logger.error(f"Profile load for session {session.identity_id} failed: {e}")
            if self._principal is None:
                # No local principal: never keep an orphaned external session
                await self._force_anonymous(str(e))
            else:
                self.error = (
                    REFRESH_TIMED_OUT_MESSAGE
                    if isinstance(e, ProfileFetchTimeoutError)
                    else REFRESH_FAILED_MESSAGE
                )
                self._settle()
            return
        except ProfileError as e:
            if generation == self._generation:
                await self._force_anonymous(str(e))
            return

        if generation != self._generation:
            logger.debug(f"Discarding superseded profile load for {session.identity_id}")
            return
        await self._activate(profile, AppEvent.USER_LOGIN)

    # ------------------------------------------------------------------
    # Lifecycle operations

    async def initialize(self) -> None:
        """Restore an existing provider session and replay queued events."""
        self._ensure_open()
        if self._initialized:
            return

        self.state = SessionState.LOADING
        try:
            session = await self._auth.get_session()
            if session is None:
                logger.debug("No active session found, attempting to refresh")
                try:
                    session = await self._auth.refresh_session()
                except AuthProviderError as e:
                    logger.debug(f"Session refresh failed: {e}")
                    session = None

            if session is None:
                self._publish(None)
                self.state = SessionState.ANONYMOUS
            else:
                await self._load_session_profile(session)
        except AuthProviderError as e:
            logger.error(f"Error getting session: {e}")
            self._publish(None)
            self.error = str(e)
            self.state = SessionState.ANONYMOUS
        finally:
            self._initialized = True

        pending, self._pending_events = self._pending_events, []
        for event, session in pending:
            await self._apply_auth_event(event, session)

    async def sign_in(self, email: str, secret: str) -> Principal:
        """Authenticate with the provider and load the matching profile.

        Raises:
            AuthProviderError: The provider rejected the credentials
            ProfileError: No usable profile exists for the identity
            ProfileFetchError: The profile could not be loaded in time
            SessionSupersededError: A sign-out or another sign-in replaced
                this one before its profile was published
        """
        self._ensure_open()
        if not self._initialized:
            await self.initialize()

        generation = self._next_generation()
        self.state = SessionState.LOADING
        self.error = None
        self._sign_in_in_progress += 1
        try:
            try:
                session = await self._auth.sign_in_with_credentials(email, secret)
            except AuthProviderError as e:
                self.error = str(e)
                self._settle()
                raise

            try:
                profile = await self._fetch_profile(session.identity_id)
            except (ProfileError, ProfileFetchError) as e:
                logger.warning(f"Sign in for {email} failed while loading profile: {e}")
                await self._force_anonymous(str(e))
                raise
        finally:
            self._sign_in_in_progress -= 1

        if generation != self._generation:
            logger.warning(f"Sign in for {email} was superseded, discarding profile")
            await self._revoke_if_orphaned(session)
            raise SessionSupersededError(f"Sign in for {email} was superseded")

        await self._activate(profile, AppEvent.USER_LOGIN)
        logger.info(f"User {profile.id} signed in")
        return profile

    async def sign_out(self) -> None:
        """Clear local state and revoke the external session. Idempotent."""
        if self.state is SessionState.DESTROYED:
            return

        self._next_generation()
        self._cancel_inactivity_timer()
        previous = self._principal
        self._publish(None)
        self.error = None
        self.state = SessionState.ANONYMOUS

        await self._revoke_external_session()
        if previous is not None:
            logger.info(f"User {previous.id} signed out")
            await self._bus.publish(AppEvent.USER_LOGOUT, {"user_id": previous.id})

    async def refresh_user(self) -> Principal | None:
        """Re-fetch the profile for the current identity.

        Transient failures keep the last known principal and only set
        ``error``. A missing or inactive profile signs the session out.
        """
        self._ensure_open()
        current = self._principal
        if current is None:
            return None
        if self._sign_in_in_progress:
            # The pending sign in publishes the profile for the new identity
            logger.debug(f"Skipping profile refresh for {current.id} during sign in")
            return current

        generation = self._next_generation()
        self.state = SessionState.LOADING
        try:
            profile = await self._fetch_profile(current.id)
        except ProfileFetchError as e:
            if generation == self._generation:
                logger.warning(f"Profile refresh for {current.id} failed: {e}")
                self.error = (
                    REFRESH_TIMED_OUT_MESSAGE
                    if isinstance(e, ProfileFetchTimeoutError)
                    else REFRESH_FAILED_MESSAGE
                )
                self._settle()
            return self._principal
        except ProfileError as e:
            if generation == self._generation:
                await self._force_anonymous(str(e))
            return self._principal

        if generation != self._generation:
            logger.debug(f"Discarding superseded profile refresh for {current.id}")
            return self._principal

        await self._activate(profile, AppEvent.USER_PROFILE_REFRESHED)
        return profile

    async def change_password(
        self, new_password: str, clear_reset_flag: bool = False
    ) -> None:
        """Update the password, then refresh so a cleared reset flag shows up."""
        self._ensure_open()
        self.error = None
        try:
            await self._credentials.update_password(new_password, clear_reset_flag)
        except Exception as e:
            self.error = str(e) or "Failed to change password"
            raise

        principal = self._principal
        await self.refresh_user()
        if principal is not None:
            await self._bus.publish(
                AppEvent.USER_PASSWORD_CHANGED, {"user_id": principal.id}
            )

    async def send_password_reset_email(self, email: str) -> None:
        """Ask the provider to send a password reset email."""
        self._ensure_open()
        self.error = None
        try:
            await self._auth.reset_password_for_email(email)
        except AuthProviderError as e:
            self.error = str(e)
            raise
        await self._bus.publish(AppEvent.USER_PASSWORD_RESET_REQUESTED, {"email": email})

    async def shutdown(self) -> None:
        """Detach from the provider and refuse further operations."""
        if self.state is SessionState.DESTROYED:
            return
        self._cancel_inactivity_timer()
        self._unsubscribe()
        self._next_generation()
        self._publish(None)
        self._pending_events.clear()
        self.state = SessionState.DESTROYED

    # ------------------------------------------------------------------
    # Auth provider events

    async def _on_auth_event(
        self, event: AuthChangeEvent, session: AuthSession | None
    ) -> None:
        if self.state is SessionState.DESTROYED:
            return
        if not self._initialized:
            logger.debug(f"Queueing auth event {event.value} until initialized")
            self._pending_events.append((event, session))
            return
        await self._apply_auth_event(event, session)

    async def _apply_auth_event(
        self, event: AuthChangeEvent, session: AuthSession | None
    ) -> None:
        if event is AuthChangeEvent.SIGNED_OUT or session is None:
            if self._principal is None and self.state is SessionState.ANONYMOUS:
                return
            self._next_generation()
            self._cancel_inactivity_timer()
            previous = self._principal
            self._publish(None)
            self.state = SessionState.ANONYMOUS
            if previous is not None:
                await self._bus.publish(AppEvent.USER_LOGOUT, {"user_id": previous.id})
            return

        if self._sign_in_in_progress:
            # sign_in loads the profile itself
            return

        current = self._principal
        if current is not None and current.id == session.identity_id:
            if event is AuthChangeEvent.TOKEN_REFRESHED:
                await self.refresh_user()
            return

        await self._load_session_profile(session)

    # ------------------------------------------------------------------
    # Inactivity timeout

    def touch(self) -> None:
        """Record user activity, restarting the inactivity timer."""
        if self._principal is not None:
            self._restart_inactivity_timer()

    def _cancel_inactivity_timer(self) -> None:
        if self._inactivity_handle is not None:
            self._inactivity_handle.cancel()
            self._inactivity_handle = None

    def _restart_inactivity_timer(self) -> None:
        self._cancel_inactivity_timer()
        if self._inactivity_timeout is None or self._loop is None:
            return
        if self._loop.is_closed():
            return
        self._inactivity_handle = self._loop.call_later(
            self._inactivity_timeout, self._on_inactivity
        )

    def _on_inactivity(self) -> None:
        self._inactivity_handle = None
        if self._principal is None or self._loop is None:
            return
        logger.info(f"User {self._principal.id} inactive, signing out")
        self._expiry_task = self._loop.create_task(self._expire_session())

    async def _expire_session(self) -> None:
        principal = self._principal
        if principal is not None:
            await self._bus.publish(
                AppEvent.USER_SESSION_EXPIRED, {"user_id": principal.id}
            )
        await self.sign_out()

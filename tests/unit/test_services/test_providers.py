# SPDX-FileCopyrightText: 2025 Roland Knall <rknall@gmail.com>
# SPDX-License-Identifier: GPL-2.0-only
"""Tests for the database-backed auth provider and credential API."""

import pytest

from amanah.config import Settings
from amanah.events import EventBus
from amanah.exceptions import AuthProviderError, CredentialError
from amanah.security import verify_password
from amanah.services import auth_service
from amanah.services.interfaces import AuthChangeEvent
from amanah.services.profile_service import SqlProfileStore
from amanah.services.providers import LocalAuthProvider, LocalCredentialApi
from amanah.services.session_service import SessionManager, SessionState
from conftest import create_user


@pytest.fixture
def provider(session_factory):
    return LocalAuthProvider(session_factory, expiry_days=1)


@pytest.fixture
def teller(seeded):
    return create_user(
        seeded, "teller@example.com", "Secret123!", roles=("teller",),
        needs_password_reset=True,
    )


class TestLocalAuthProvider:
    """Tests for LocalAuthProvider."""

    @pytest.mark.asyncio
    async def test_sign_in_issues_session_and_emits(self, provider, teller):
        events = []

        async def listener(event, session):
            events.append((event, session))

        provider.on_auth_state_change(listener)
        session = await provider.sign_in_with_credentials("teller@example.com", "Secret123!")

        assert session.identity_id == str(teller.id)
        assert session.email == "teller@example.com"
        assert await provider.get_session() == session
        assert events == [(AuthChangeEvent.SIGNED_IN, session)]

    @pytest.mark.asyncio
    async def test_invalid_credentials(self, provider, teller):
        with pytest.raises(AuthProviderError, match="Invalid login credentials"):
            await provider.sign_in_with_credentials("teller@example.com", "wrong")
        assert await provider.get_session() is None

    @pytest.mark.asyncio
    async def test_refresh_rotates_token(self, provider, teller):
        first = await provider.sign_in_with_credentials("teller@example.com", "Secret123!")

        refreshed = await provider.refresh_session()

        assert refreshed.access_token != first.access_token
        assert refreshed.identity_id == first.identity_id

    @pytest.mark.asyncio
    async def test_refresh_without_session_fails(self, provider):
        with pytest.raises(AuthProviderError):
            await provider.refresh_session()

    @pytest.mark.asyncio
    async def test_sign_out_revokes_token(self, provider, teller, seeded):
        events = []

        async def listener(event, session):
            events.append(event)

        unsubscribe = provider.on_auth_state_change(listener)
        session = await provider.sign_in_with_credentials("teller@example.com", "Secret123!")

        await provider.sign_out()
        await provider.sign_out()

        assert await provider.get_session() is None
        assert auth_service.get_session(seeded, session.access_token) is None
        assert events == [AuthChangeEvent.SIGNED_IN, AuthChangeEvent.SIGNED_OUT]

        unsubscribe()
        await provider.sign_in_with_credentials("teller@example.com", "Secret123!")
        assert len(events) == 2

    @pytest.mark.asyncio
    async def test_failing_listener_does_not_break_sign_in(self, provider, teller):
        async def broken(event, session):
            raise RuntimeError("listener bug")

        provider.on_auth_state_change(broken)
        session = await provider.sign_in_with_credentials("teller@example.com", "Secret123!")
        assert session is not None

    @pytest.mark.asyncio
    async def test_reset_password_uses_mailer_for_known_users(self, session_factory, teller):
        sent = []

        async def mailer(email):
            sent.append(email)

        provider = LocalAuthProvider(session_factory, reset_mailer=mailer)
        await provider.reset_password_for_email("teller@example.com")
        await provider.reset_password_for_email("nobody@example.com")

        assert sent == ["teller@example.com"]


class TestLocalCredentialApi:
    """Tests for LocalCredentialApi."""

    @pytest.mark.asyncio
    async def test_requires_signed_in_identity(self, provider, session_factory):
        api = LocalCredentialApi(provider, session_factory)
        with pytest.raises(CredentialError, match="Not authenticated"):
            await api.update_password("Changed123!", clear_reset_flag=False)

    @pytest.mark.asyncio
    async def test_rejects_short_passwords(self, provider, session_factory, teller):
        await provider.sign_in_with_credentials("teller@example.com", "Secret123!")
        api = LocalCredentialApi(provider, session_factory)
        with pytest.raises(CredentialError):
            await api.update_password("short", clear_reset_flag=False)

    @pytest.mark.asyncio
    async def test_updates_password_and_flag(self, provider, session_factory, teller, seeded):
        await provider.sign_in_with_credentials("teller@example.com", "Secret123!")
        api = LocalCredentialApi(provider, session_factory)

        await api.update_password("Changed123!", clear_reset_flag=True)

        seeded.expire_all()
        user = auth_service.get_user_by_email(seeded, "teller@example.com")
        assert verify_password("Changed123!", user.hashed_password)
        assert user.needs_password_reset is False


@pytest.mark.asyncio
async def test_session_manager_with_local_collaborators(session_factory, teller):
    """End to end: sign in, forced reset, password change, sign out."""
    provider = LocalAuthProvider(session_factory)
    manager = SessionManager(
        provider,
        SqlProfileStore(session_factory),
        LocalCredentialApi(provider, session_factory),
        settings=Settings(profile_fetch_base_delay_seconds=0.0),
        bus=EventBus(),
    )

    principal = await manager.sign_in("teller@example.com", "Secret123!")
    assert principal.needs_credential_reset is True
    assert manager.context().has_permission("transactions", "create") is True

    await manager.change_password("Changed123!", clear_reset_flag=True)
    assert manager.principal.needs_credential_reset is False

    await manager.sign_out()
    assert manager.state is SessionState.ANONYMOUS
    assert await provider.get_session() is None

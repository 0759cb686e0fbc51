# SPDX-FileCopyrightText: 2025 Roland Knall <rknall@gmail.com>
# SPDX-License-Identifier: GPL-2.0-only
"""Tests for the application event bus."""

from datetime import datetime

import pytest

from amanah.events import AppEvent, EventBus, EventPayload


class TestAppEvent:
    """Tests for AppEvent enum."""

    def test_session_events(self):
        assert AppEvent.USER_LOGIN.value == "user.login"
        assert AppEvent.USER_LOGOUT.value == "user.logout"
        assert AppEvent.USER_PROFILE_REFRESHED.value == "user.profile_refreshed"
        assert AppEvent.USER_SESSION_EXPIRED.value == "user.session_expired"

    def test_access_control_events(self):
        assert AppEvent.ROLE_ASSIGNED.value == "role.assigned"
        assert AppEvent.PERMISSION_DELETED.value == "permission.deleted"


class TestEventPayload:
    """Tests for EventPayload dataclass."""

    def test_create_payload(self):
        now = datetime.utcnow()
        payload = EventPayload(
            event_type=AppEvent.USER_LOGIN,
            timestamp=now,
            data={"user_id": "123"},
        )
        assert payload.timestamp == now
        assert payload.data["user_id"] == "123"
        assert payload.source is None


class TestEventBus:
    """Tests for EventBus class."""

    @pytest.fixture
    def bus(self):
        """Create a fresh EventBus for each test."""
        return EventBus()

    def test_subscribe_sync_and_async(self, bus):
        def handler(payload):
            pass

        async def async_handler(payload):
            pass

        bus.subscribe(AppEvent.USER_LOGIN, handler, "audit")
        bus.subscribe(AppEvent.USER_LOGIN, async_handler, "audit")
        assert bus.get_subscriber_count(AppEvent.USER_LOGIN) == 2

    def test_unsubscribe_handler(self, bus):
        def handler(payload):
            pass

        bus.subscribe(AppEvent.USER_LOGOUT, handler, "audit")
        bus.unsubscribe(AppEvent.USER_LOGOUT, handler, "audit")
        assert bus.get_subscriber_count(AppEvent.USER_LOGOUT) == 0

    def test_unsubscribe_all(self, bus):
        def handler(payload):
            pass

        bus.subscribe(AppEvent.USER_LOGIN, handler, "audit")
        bus.subscribe(AppEvent.ROLE_CREATED, handler, "audit")
        bus.subscribe(AppEvent.ROLE_CREATED, handler, "mailer")

        bus.unsubscribe_all("audit")

        assert bus.get_subscriber_count(AppEvent.USER_LOGIN) == 0
        assert bus.get_subscriber_count(AppEvent.ROLE_CREATED) == 1

    @pytest.mark.asyncio
    async def test_publish_calls_all_handlers(self, bus):
        received = []

        def handler(payload):
            received.append(("sync", payload.data["user_id"]))

        async def async_handler(payload):
            received.append(("async", payload.data["user_id"]))

        bus.subscribe(AppEvent.USER_LOGIN, handler)
        bus.subscribe(AppEvent.USER_LOGIN, async_handler)

        await bus.publish(AppEvent.USER_LOGIN, {"user_id": "u1"}, source="session")

        assert received == [("sync", "u1"), ("async", "u1")]

    @pytest.mark.asyncio
    async def test_failing_handler_does_not_stop_delivery(self, bus):
        received = []

        def broken(payload):
            raise RuntimeError("boom")

        async def async_broken(payload):
            raise RuntimeError("boom")

        def handler(payload):
            received.append(payload.event_type)

        bus.subscribe(AppEvent.USER_LOGOUT, broken)
        bus.subscribe(AppEvent.USER_LOGOUT, async_broken)
        bus.subscribe(AppEvent.USER_LOGOUT, handler)

        await bus.publish(AppEvent.USER_LOGOUT, {})

        assert received == [AppEvent.USER_LOGOUT]

    def test_publish_sync_skips_async_handlers(self, bus):
        received = []

        def handler(payload):
            received.append(payload)

        async def async_handler(payload):
            received.append(payload)

        bus.subscribe(AppEvent.ROLE_DELETED, handler)
        bus.subscribe(AppEvent.ROLE_DELETED, async_handler)

        bus.publish_sync(AppEvent.ROLE_DELETED, {"role_id": "r1"})

        assert len(received) == 1

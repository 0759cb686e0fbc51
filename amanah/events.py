# SPDX-FileCopyrightText: 2025 Roland Knall <rknall@gmail.com>
# SPDX-License-Identifier: GPL-2.0-only
"""Application event bus for session and access control changes."""

import inspect
import logging
from collections import defaultdict
from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Any

logger = logging.getLogger(__name__)


class AppEvent(str, Enum):
    """Application events other components can subscribe to."""

    # User administration
    USER_CREATED = "user.created"
    USER_UPDATED = "user.updated"
    USER_DELETED = "user.deleted"

    # Session lifecycle
    USER_LOGIN = "user.login"
    USER_LOGOUT = "user.logout"
    USER_PROFILE_REFRESHED = "user.profile_refreshed"
    USER_SESSION_EXPIRED = "user.session_expired"
    USER_PASSWORD_CHANGED = "user.password_changed"
    USER_PASSWORD_RESET_REQUESTED = "user.password_reset_requested"

    # Access control administration
    ROLE_CREATED = "role.created"
    ROLE_UPDATED = "role.updated"
    ROLE_DELETED = "role.deleted"
    ROLE_ASSIGNED = "role.assigned"
    ROLE_UNASSIGNED = "role.unassigned"
    PERMISSION_CREATED = "permission.created"
    PERMISSION_UPDATED = "permission.updated"
    PERMISSION_DELETED = "permission.deleted"


@dataclass
class EventPayload:
    """Payload for an application event."""

    event_type: AppEvent
    timestamp: datetime
    data: dict[str, Any]
    source: str | None = None  # None means from the host app


# Type alias for event handlers
EventHandler = Callable[[EventPayload], Any]


class EventBus:
    """Central event bus for application-wide events.

    Handlers may be sync or async. A failing handler is logged and never
    interrupts delivery to the others.
    """

    def __init__(self) -> None:
        """Initialize the event bus."""
        self._handlers: dict[AppEvent, list[tuple[str | None, EventHandler]]] = (
            defaultdict(list)
        )
        self._async_handlers: dict[
            AppEvent, list[tuple[str | None, EventHandler]]
        ] = defaultdict(list)

    def subscribe(
        self,
        event_type: AppEvent,
        handler: EventHandler,
        subscriber_id: str | None = None,
    ) -> None:
        """Subscribe to an event.

        Args:
            event_type: Event type to subscribe to
            handler: Function to call when event fires (sync or async)
            subscriber_id: Identifier used for bulk unsubscribe
        """
        if inspect.iscoroutinefunction(handler):
            self._async_handlers[event_type].append((subscriber_id, handler))
        else:
            self._handlers[event_type].append((subscriber_id, handler))

        logger.debug(
            f"Subscribed {subscriber_id or 'host'} to event {event_type.value}"
        )

    def unsubscribe(
        self,
        event_type: AppEvent,
        handler: EventHandler,
        subscriber_id: str | None = None,
    ) -> None:
        """Unsubscribe a handler from an event."""
        entry = (subscriber_id, handler)
        if entry in self._handlers[event_type]:
            self._handlers[event_type].remove(entry)
        if entry in self._async_handlers[event_type]:
            self._async_handlers[event_type].remove(entry)

    def unsubscribe_all(self, subscriber_id: str) -> None:
        """Remove all handlers registered under a subscriber id."""
        for registry in (self._handlers, self._async_handlers):
            for event_type in list(registry.keys()):
                registry[event_type] = [
                    (sid, handler)
                    for sid, handler in registry[event_type]
                    if sid != subscriber_id
                ]

        logger.debug(f"Unsubscribed all handlers for {subscriber_id}")

    def _payload(
        self, event_type: AppEvent, data: dict[str, Any], source: str | None
    ) -> EventPayload:
        return EventPayload(
            event_type=event_type,
            timestamp=datetime.utcnow(),
            data=data,
            source=source,
        )

    def _call_sync_handlers(self, payload: EventPayload) -> None:
        for subscriber_id, handler in self._handlers.get(payload.event_type, []):
            try:
                handler(payload)
            except Exception as e:
                logger.error(
                    f"Error in sync event handler for {payload.event_type.value} "
                    f"(subscriber: {subscriber_id}): {e}"
                )

    async def publish(
        self,
        event_type: AppEvent,
        data: dict[str, Any],
        source: str | None = None,
    ) -> None:
        """Publish an event to all subscribers.

        Args:
            event_type: Type of event
            data: Event data payload
            source: Component that generated the event (None for host)
        """
        payload = self._payload(event_type, data, source)
        self._call_sync_handlers(payload)

        for subscriber_id, handler in self._async_handlers.get(event_type, []):
            try:
                await handler(payload)
            except Exception as e:
                logger.error(
                    f"Error in async event handler for {event_type.value} "
                    f"(subscriber: {subscriber_id}): {e}"
                )

    def publish_sync(
        self,
        event_type: AppEvent,
        data: dict[str, Any],
        source: str | None = None,
    ) -> None:
        """Publish an event synchronously (sync handlers only).

        Async handlers are NOT called; use this from sync code that can't
        await.
        """
        self._call_sync_handlers(self._payload(event_type, data, source))

        if self._async_handlers.get(event_type):
            logger.warning(
                f"Event {event_type.value} has async handlers that were "
                "not called due to sync publish"
            )

    def get_subscriber_count(self, event_type: AppEvent) -> int:
        """Get the number of subscribers for an event type."""
        sync_count = len(self._handlers.get(event_type, []))
        async_count = len(self._async_handlers.get(event_type, []))
        return sync_count + async_count


# Global event bus singleton
event_bus = EventBus()

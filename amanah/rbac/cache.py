# SPDX-FileCopyrightText: 2025 Roland Knall <rknall@gmail.com>
# SPDX-License-Identifier: GPL-2.0-only
"""Short-lived memoization of permission decisions."""

import logging
import time
from collections.abc import Callable, Hashable

logger = logging.getLogger(__name__)

DEFAULT_TTL_SECONDS = 300.0


class DecisionCache:
    """Per-principal cache of allow/deny results.

    Keys always include the principal id and a token of the snapshot
    the decision was computed from. Expiry is lazy: once the TTL
    has elapsed since the last clean, the whole cache is dropped on the
    next access instead of evicting entries one by one.
    """

    def __init__(
        self,
        ttl_seconds: float = DEFAULT_TTL_SECONDS,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        """Initialize the cache.

        Args:
            ttl_seconds: Window after which all entries are dropped
            clock: Monotonic time source, injectable for tests
        """
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        self._entries: dict[Hashable, bool] = {}
        self._last_clean = clock()
        self.hits = 0
        self.misses = 0

    @staticmethod
    def permission_key(
        principal_id: str, resource: str, action: str, snapshot: Hashable = None
    ) -> tuple:
        return ("permission", principal_id, snapshot, resource, action)

    @staticmethod
    def admin_key(principal_id: str, snapshot: Hashable = None) -> tuple:
        return ("admin", principal_id, snapshot, "check")

    def _sweep(self) -> None:
        now = self._clock()
        if now - self._last_clean > self.ttl_seconds:
            if self._entries:
                logger.debug(f"Decision cache expired, dropping {len(self._entries)} entries")
            self._entries.clear()
            self._last_clean = now

    def get(self, key: Hashable) -> bool | None:
        self._sweep()
        return self._entries.get(key)

    def set(self, key: Hashable, value: bool) -> None:
        self._sweep()
        self._entries[key] = value

    def get_or_compute(self, key: Hashable, compute: Callable[[], bool]) -> bool:
        """Return the cached decision for key, computing and storing it on a miss."""
        self._sweep()
        if key in self._entries:
            self.hits += 1
            return self._entries[key]

        self.misses += 1
        value = compute()
        self._entries[key] = value
        return value

    def invalidate(self) -> None:
        """Drop every cached decision and restart the TTL window."""
        self._entries.clear()
        self._last_clean = self._clock()

    @property
    def size(self) -> int:
        return len(self._entries)

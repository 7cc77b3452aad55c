"""Track which users have already started a conversation."""

from __future__ import annotations

import logging
import threading
import time
from collections import OrderedDict
from typing import Callable

logger = logging.getLogger(__name__)
DEFAULT_TTL_SECONDS = 24 * 60 * 60
DEFAULT_MAX_USERS = 10_000


class SeenUserTracker:
    """Remember user ids with an inactivity TTL and a size cap.

    ``mark_seen`` is an atomic insert-if-absent, so two concurrent first
    messages from the same user yield exactly one "new" classification.
    """

    def __init__(
        self,
        *,
        ttl_seconds: float = DEFAULT_TTL_SECONDS,
        max_users: int = DEFAULT_MAX_USERS,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        if ttl_seconds <= 0:
            raise ValueError("ttl_seconds must be positive")
        if max_users <= 0:
            raise ValueError("max_users must be positive")
        self.ttl_seconds = ttl_seconds
        self.max_users = max_users
        self._clock = clock
        self._last_seen: "OrderedDict[str, float]" = OrderedDict()
        self._lock = threading.Lock()

    def __len__(self) -> int:
        with self._lock:
            self._evict_stale(self._clock())
            return len(self._last_seen)

    def __contains__(self, user_id: object) -> bool:
        with self._lock:
            self._evict_stale(self._clock())
            return user_id in self._last_seen

    def mark_seen(self, user_id: str) -> bool:
        """Record activity for ``user_id``; return True if it was not tracked yet."""
        with self._lock:
            now = self._clock()
            self._evict_stale(now)
            is_new = user_id not in self._last_seen
            self._last_seen[user_id] = now
            self._last_seen.move_to_end(user_id)
            if is_new:
                logger.debug("Tracking new user %s", user_id)
                while len(self._last_seen) > self.max_users:
                    evicted, _ = self._last_seen.popitem(last=False)
                    logger.info("Evicting user %s, tracker at capacity (%d)", evicted, self.max_users)
            return is_new

    def _evict_stale(self, now: float) -> None:
        # Entries are kept in last-seen order, so stale ones sit at the front.
        while self._last_seen:
            user_id, last_seen = next(iter(self._last_seen.items()))
            if now - last_seen <= self.ttl_seconds:
                break
            logger.info(
                "Forgetting user %s after %.0f seconds of inactivity", user_id, self.ttl_seconds
            )
            del self._last_seen[user_id]

"""
In-memory TTL cache with single-flight deduplication.

For N concurrent callers asking for the same missing or expired key, the
supplier runs exactly once; every caller receives the same value or the same
exception. Expiry is evaluated lazily at read time on a monotonic clock.
"""

import asyncio
import fnmatch
import time
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from datetime import timedelta
from typing import Any, TypeVar

from unified_finance.infrastructure.observability import get_ingestion_logger

T = TypeVar("T")


@dataclass(frozen=True)
class CacheEntry:
    key: str
    value: Any
    expires_at: float

    def is_live(self, now: float) -> bool:
        return now < self.expires_at


class TtlCache:
    """Key/value store with per-entry TTL and an in-flight registry.

    The in-flight registry maps a key to the asyncio.Task computing it. A
    task is registered and removed without any suspension in between checks,
    so two callers can never both believe they own the computation.
    """

    def __init__(
        self,
        clock: Callable[[], float] = time.monotonic,
        max_entries: int | None = None,
    ):
        if max_entries is not None and max_entries <= 0:
            raise ValueError(f"max_entries must be positive, got {max_entries}")
        self._clock = clock
        self.max_entries = max_entries
        self._entries: dict[str, CacheEntry] = {}
        self._in_flight: dict[str, asyncio.Task] = {}
        self.hits = 0
        self.misses = 0
        self.logger = get_ingestion_logger("ttl-cache")

    # ------------------------------------------------------------------
    # Read path
    # ------------------------------------------------------------------

    def _live_entry(self, key: str) -> CacheEntry | None:
        entry = self._entries.get(key)
        if entry is None:
            return None
        if entry.is_live(self._clock()):
            return entry
        del self._entries[key]
        return None

    def get(self, key: str) -> Any | None:
        """Live value for ``key`` or None. Never triggers a computation."""
        entry = self._live_entry(key)
        return entry.value if entry is not None else None

    async def get_or_put(
        self,
        key: str,
        ttl: timedelta,
        supplier: Callable[[], Awaitable[T]],
    ) -> T:
        entry = self._live_entry(key)
        if entry is not None:
            self.hits += 1
            self.logger.debug("cache_hit", key=key)
            return entry.value

        task = self._in_flight.get(key)
        if task is None:
            self.misses += 1
            self.logger.debug("cache_miss", key=key)
            task = asyncio.create_task(self._compute(key, ttl, supplier))
            task.add_done_callback(_consume_exception)
            self._in_flight[key] = task
        else:
            self.logger.debug("cache_join_in_flight", key=key)

        # A cancelled waiter must not cancel the computation other callers share
        return await asyncio.shield(task)

    async def _compute(
        self,
        key: str,
        ttl: timedelta,
        supplier: Callable[[], Awaitable[T]],
    ) -> T:
        try:
            value = await supplier()
            self._store(key, value, ttl)
            return value
        finally:
            if self._in_flight.get(key) is asyncio.current_task():
                del self._in_flight[key]

    # ------------------------------------------------------------------
    # Write path
    # ------------------------------------------------------------------

    def _store(self, key: str, value: Any, ttl: timedelta) -> None:
        expires_at = self._clock() + ttl.total_seconds()
        self._entries[key] = CacheEntry(key=key, value=value, expires_at=expires_at)
        if self.max_entries is not None and len(self._entries) > self.max_entries:
            self._evict()

    def _evict(self) -> None:
        """Drop expired entries, then the earliest-expiring ones, down to the bound."""
        now = self._clock()
        for key in [k for k, e in self._entries.items() if not e.is_live(now)]:
            del self._entries[key]

        overflow = len(self._entries) - self.max_entries
        if overflow > 0:
            oldest = sorted(self._entries.values(), key=lambda e: e.expires_at)
            for entry in oldest[:overflow]:
                del self._entries[entry.key]
            self.logger.debug("cache_evicted", count=overflow)

    def invalidate(self, key: str) -> bool:
        """Remove one entry. In-flight computations are left to finish."""
        return self._entries.pop(key, None) is not None

    def invalidate_pattern(self, pattern: str) -> int:
        """Remove every entry whose key matches a glob pattern, e.g. ``quote:*``."""
        matching = [k for k in self._entries if fnmatch.fnmatchcase(k, pattern)]
        for key in matching:
            del self._entries[key]
        return len(matching)

    def clear(self) -> None:
        self._entries.clear()

    # ------------------------------------------------------------------
    # Introspection
    # ------------------------------------------------------------------

    @property
    def size(self) -> int:
        """Stored entries, including expired ones not yet read."""
        return len(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    @property
    def in_flight_count(self) -> int:
        return len(self._in_flight)


def _consume_exception(task: asyncio.Task) -> None:
    # Waiters re-raise the error; this keeps asyncio from reporting it as unretrieved
    if not task.cancelled():
        task.exception()

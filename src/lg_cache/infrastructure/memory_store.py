"""In-process CacheStore for tests and single-worker local development.

Entries expire lazily on read and are swept on every write once the store
reaches ``max_entries``. Pattern matching uses the same grammar as the Redis
store so invalidation behaves identically.
"""

import asyncio
import logging
import time
from collections.abc import Callable
from dataclasses import dataclass

from src.lg_cache.domain.patterns import parse_pattern

logger = logging.getLogger(__name__)


@dataclass
class CacheEntry:
    value: str
    stored_at: float
    ttl_seconds: int

    def expired(self, now: float) -> bool:
        return self.ttl_seconds > 0 and now >= self.stored_at + self.ttl_seconds


class InMemoryCacheStore:
    def __init__(
        self,
        max_entries: int = 10_000,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._entries: dict[str, CacheEntry] = {}
        self._max_entries = max_entries
        self._clock = clock
        self._lock = asyncio.Lock()

    async def get(self, key: str) -> str | None:
        async with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return None
            if entry.expired(self._clock()):
                del self._entries[key]
                return None
            return entry.value

    async def set(self, key: str, value: str, ttl_seconds: int) -> bool:
        async with self._lock:
            now = self._clock()
            if len(self._entries) >= self._max_entries and key not in self._entries:
                self._evict(now)
            self._entries[key] = CacheEntry(value=value, stored_at=now, ttl_seconds=ttl_seconds)
            return True

    async def delete(self, key: str) -> bool:
        async with self._lock:
            self._entries.pop(key, None)
            return True

    async def delete_pattern(self, pattern: str) -> int:
        parsed = parse_pattern(pattern)
        async with self._lock:
            if parsed.is_exact:
                return 1 if self._entries.pop(parsed.raw, None) is not None else 0
            doomed = [key for key in self._entries if parsed.matches(key)]
            for key in doomed:
                del self._entries[key]
            return len(doomed)

    async def ping(self) -> bool:
        return True

    async def close(self) -> None:
        async with self._lock:
            self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)

    def _evict(self, now: float) -> None:
        for key in [k for k, e in self._entries.items() if e.expired(now)]:
            del self._entries[key]
        if len(self._entries) >= self._max_entries:
            # dicts keep insertion order: drop the oldest tenth
            for key in list(self._entries)[: max(1, self._max_entries // 10)]:
                del self._entries[key]
            logger.debug("In-memory cache full, evicted oldest entries")

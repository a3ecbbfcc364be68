"""ReadThroughCache: check cache, load on miss, populate, return.

Failure policy:
  - store outages (CacheUnavailableError) and undecodable entries are misses
  - a failed or skipped populate never changes the returned value
  - loader exceptions propagate unchanged and nothing is cached

There is no single-flight across requests: two concurrent misses both load
and both write, last write wins. Cached values are whole snapshots, so
either write is a valid entry.

If the caller is cancelled while a load is in flight, the load keeps running
in a shielded task and still populates the cache for the next request.
"""

import asyncio
import json
import logging
from collections.abc import Awaitable, Callable
from dataclasses import asdict, dataclass
from typing import Any, TypeVar

from src.lg_cache.domain.store import CacheStoreProtocol
from src.lg_common.errors import CacheUnavailableError

logger = logging.getLogger(__name__)

T = TypeVar("T")

Loader = Callable[[], Awaitable[T]]


@dataclass
class ReadThroughStats:
    hits: int = 0
    misses: int = 0
    errors: int = 0          # get failures and corrupt entries, served by the loader
    store_failures: int = 0  # populate attempts that did not reach the store


class ReadThroughCache:
    def __init__(
        self,
        store: CacheStoreProtocol,
        *,
        default_ttl_seconds: int = 3600,
        enabled: bool = True,
    ) -> None:
        self._store = store
        self._default_ttl = default_ttl_seconds
        self._enabled = enabled
        self._stats = ReadThroughStats()
        self._background: set[asyncio.Task[Any]] = set()

    @property
    def enabled(self) -> bool:
        return self._enabled

    def stats(self) -> dict[str, int]:
        return asdict(self._stats)

    async def fetch(self, key: str, loader: Loader[T], ttl_seconds: int | None = None) -> T:
        if not self._enabled:
            return await loader()

        cached = await self._lookup(key)
        if cached is not _MISS:
            self._stats.hits += 1
            logger.debug("Cache hit key=%s", key)
            return cached  # type: ignore[return-value]

        self._stats.misses += 1
        logger.debug("Cache miss key=%s", key)
        ttl = self._default_ttl if ttl_seconds is None else ttl_seconds

        task = asyncio.ensure_future(self._load_and_store(key, loader, ttl))
        self._background.add(task)
        task.add_done_callback(self._finish_background)
        return await asyncio.shield(task)

    async def _lookup(self, key: str) -> Any:
        try:
            raw = await self._store.get(key)
        except CacheUnavailableError as exc:
            self._stats.errors += 1
            logger.warning("Cache get failed, loading from source key=%s: %s", key, exc.message)
            return _MISS
        if raw is None:
            return _MISS
        try:
            return json.loads(raw)
        except (TypeError, ValueError):
            self._stats.errors += 1
            logger.error("Discarding undecodable cache entry key=%s", key)
            await self._discard(key)
            return _MISS

    async def _load_and_store(self, key: str, loader: Loader[T], ttl: int) -> T:
        value = await loader()
        try:
            payload = json.dumps(value, separators=(",", ":"))
        except (TypeError, ValueError) as exc:
            self._stats.store_failures += 1
            logger.error("Loader result for key=%s is not JSON-serializable: %s", key, exc)
            return value

        try:
            stored = await self._store.set(key, payload, ttl)
        except CacheUnavailableError as exc:
            logger.warning("Cache set failed key=%s: %s", key, exc.message)
            stored = False
        if not stored:
            self._stats.store_failures += 1
        return value

    async def _discard(self, key: str) -> None:
        try:
            await self._store.delete(key)
        except CacheUnavailableError as exc:
            logger.warning("Could not delete corrupt cache entry key=%s: %s", key, exc.message)

    def _finish_background(self, task: asyncio.Task[Any]) -> None:
        self._background.discard(task)
        # Consume the outcome so an abandoned (cancelled-caller) load does
        # not emit "exception was never retrieved".
        if not task.cancelled() and task.exception() is not None:
            logger.debug("Load task ended with %r", task.exception())

    async def drain(self) -> None:
        """Wait for loads abandoned by cancelled callers (used at shutdown)."""
        if self._background:
            await asyncio.gather(*self._background, return_exceptions=True)


class _Miss:
    __slots__ = ()

    def __repr__(self) -> str:
        return "<miss>"


_MISS: Any = _Miss()

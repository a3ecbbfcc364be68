"""CacheRuntime: the process-wide cache handle.

Built once by the application lifespan, stored on ``app.state`` and passed
explicitly to services; closed on shutdown.
"""

import logging
from dataclasses import dataclass

from config.settings import Settings
from src.lg_cache.application.invalidation import InvalidationTracker
from src.lg_cache.application.read_through import ReadThroughCache
from src.lg_cache.domain.store import CacheStoreProtocol
from src.lg_cache.infrastructure.memory_store import InMemoryCacheStore
from src.lg_cache.infrastructure.redis_store import RedisCacheStore
from src.lg_common.redis_client import create_redis

logger = logging.getLogger(__name__)


@dataclass
class CacheRuntime:
    store: CacheStoreProtocol
    reads: ReadThroughCache
    invalidations: InvalidationTracker

    @classmethod
    def from_store(
        cls,
        store: CacheStoreProtocol,
        *,
        default_ttl_seconds: int = 3600,
        enabled: bool = True,
    ) -> "CacheRuntime":
        return cls(
            store=store,
            reads=ReadThroughCache(store, default_ttl_seconds=default_ttl_seconds, enabled=enabled),
            invalidations=InvalidationTracker(store, enabled=enabled),
        )

    async def health(self) -> dict[str, object]:
        return {
            "enabled": self.reads.enabled,
            "reachable": await self.store.ping(),
            "reads": self.reads.stats(),
            "invalidation_failures": self.invalidations.failure_counts(),
        }

    async def close(self) -> None:
        await self.reads.drain()
        await self.store.close()


def build_cache_runtime(settings: Settings) -> CacheRuntime:
    backend = settings.CACHE_BACKEND.lower()
    store: CacheStoreProtocol
    if backend == "memory":
        store = InMemoryCacheStore()
    elif backend == "redis":
        client = create_redis(settings.REDIS_URL, settings.REDIS_SOCKET_TIMEOUT_SECONDS)
        store = RedisCacheStore(
            client,
            key_prefix=settings.CACHE_KEY_PREFIX,
            scan_batch_size=settings.CACHE_SCAN_BATCH_SIZE,
        )
    else:
        raise ValueError(f"Unknown CACHE_BACKEND: {settings.CACHE_BACKEND!r}")

    logger.info(
        "Cache runtime ready backend=%s enabled=%s default_ttl=%ds",
        backend,
        settings.CACHE_ENABLED,
        settings.CACHE_DEFAULT_TTL_SECONDS,
    )
    return CacheRuntime.from_store(
        store,
        default_ttl_seconds=settings.CACHE_DEFAULT_TTL_SECONDS,
        enabled=settings.CACHE_ENABLED,
    )

"""RedisCacheStore: CacheStoreProtocol over redis.asyncio.

Wildcard deletes walk the keyspace with SCAN MATCH and remove each page
with a multi-key DEL; a plain ``DEL prefix:*`` only ever removes a key
literally named ``prefix:*``.
"""

import logging

import redis.asyncio as aioredis
from redis.exceptions import RedisError

from src.lg_cache.domain.patterns import escape_glob, parse_pattern
from src.lg_common.errors import CacheUnavailableError
from src.lg_common.redis_client import close_redis

logger = logging.getLogger(__name__)

_TRANSPORT_ERRORS = (RedisError, OSError)


class RedisCacheStore:
    def __init__(
        self,
        client: aioredis.Redis,
        *,
        key_prefix: str = "",
        scan_batch_size: int = 500,
    ) -> None:
        self._client = client
        self._key_prefix = f"{key_prefix}:" if key_prefix else ""
        # SCAN MATCH sees the prefix as glob text too
        self._match_prefix = escape_glob(self._key_prefix)
        self._scan_batch_size = scan_batch_size

    def _k(self, key: str) -> str:
        return f"{self._key_prefix}{key}"

    async def get(self, key: str) -> str | None:
        try:
            return await self._client.get(self._k(key))
        except _TRANSPORT_ERRORS as exc:
            raise CacheUnavailableError("get", str(exc)) from exc

    async def set(self, key: str, value: str, ttl_seconds: int) -> bool:
        try:
            await self._client.set(self._k(key), value, ex=ttl_seconds)
            return True
        except _TRANSPORT_ERRORS as exc:
            logger.warning("Cache set failed key=%s: %s", key, exc)
            return False

    async def delete(self, key: str) -> bool:
        try:
            await self._client.delete(self._k(key))
            return True
        except _TRANSPORT_ERRORS as exc:
            raise CacheUnavailableError("delete", str(exc)) from exc

    async def delete_pattern(self, pattern: str) -> int:
        parsed = parse_pattern(pattern)
        try:
            if parsed.is_exact:
                return int(await self._client.delete(self._k(parsed.raw)))
            return await self._scan_and_delete(self._match_prefix + parsed.to_redis_match())
        except _TRANSPORT_ERRORS as exc:
            raise CacheUnavailableError("delete_pattern", str(exc)) from exc

    async def _scan_and_delete(self, match: str) -> int:
        deleted = 0
        cursor = 0
        while True:
            cursor, keys = await self._client.scan(
                cursor=cursor, match=match, count=self._scan_batch_size
            )
            if keys:
                deleted += int(await self._client.delete(*keys))
            if cursor == 0:
                break
        logger.debug("Deleted %d keys matching %s", deleted, match)
        return deleted

    async def ping(self) -> bool:
        try:
            return bool(await self._client.ping())
        except _TRANSPORT_ERRORS as exc:
            logger.warning("Cache ping failed: %s", exc)
            return False

    async def close(self) -> None:
        await close_redis(self._client)

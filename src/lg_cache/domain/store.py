# src/lg_cache/domain/store.py
"""CacheStore Protocol: the cache layer depends on this, never on Redis.

Contract:
  get            -> str | None; raises CacheUnavailableError on transport failure
  set            -> bool; best-effort, failures are logged and reported as False
  delete         -> bool; idempotent, deleting an absent key is not an error
  delete_pattern -> int; every key matching the pattern is removed (SCAN + DEL
                    for wildcards), raises CacheUnavailableError on failure
"""

from typing import Protocol


class CacheStoreProtocol(Protocol):
    async def get(self, key: str) -> str | None: ...

    async def set(self, key: str, value: str, ttl_seconds: int) -> bool: ...

    async def delete(self, key: str) -> bool: ...

    async def delete_pattern(self, pattern: str) -> int: ...

    async def ping(self) -> bool: ...

    async def close(self) -> None: ...

"""Redis client factory for the cache layer.

The client is a long-lived handle created once by the application lifespan
and passed explicitly to the cache store. Nothing imports a module-level
connection.
"""

import redis.asyncio as aioredis


def create_redis(url: str, socket_timeout: float | None = None) -> aioredis.Redis:
    """Create a Redis client backed by its own connection pool."""
    return aioredis.from_url(
        url,
        decode_responses=True,
        socket_timeout=socket_timeout,
        socket_connect_timeout=socket_timeout,
    )


async def close_redis(client: aioredis.Redis) -> None:
    """Close the client and release its connection pool."""
    await client.aclose()

"""Redis-backed response cache."""

from __future__ import annotations

import logging

import redis.asyncio as redis

from sky_flights.base import BaseCache

logger = logging.getLogger(__name__)


class RedisCache(BaseCache):
    """Stores response bodies in Redis with a TTL."""

    def __init__(self, client: redis.Redis) -> None:
        self._redis = client

    @classmethod
    def from_url(cls, url: str) -> RedisCache:
        """Create a cache on a new Redis connection pool."""
        client = redis.from_url(url, decode_responses=True)
        logger.info("Redis cache initialised: %s", url)
        return cls(client)

    async def has(self, key: str) -> bool:
        return bool(await self._redis.exists(key))

    async def get(self, key: str) -> str | None:
        return await self._redis.get(key)

    async def set(self, key: str, value: str, ttl: int | None = None) -> None:
        await self._redis.set(key, value, ex=ttl)

    async def close(self) -> None:
        """Gracefully close the Redis pool."""
        await self._redis.aclose()
        logger.info("Redis cache closed")

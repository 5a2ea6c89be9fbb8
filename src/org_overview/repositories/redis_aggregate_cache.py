"""Redis implementation of AggregateCache.

Entries are stored as JSON strings with a Redis expiry, so a stale
entry simply reads back as a missing key.
"""

import logging

import redis.asyncio as redis
from pydantic import ValidationError

from org_overview.config import get_redis_client
from org_overview.dto import CachedAggregatePayload
from org_overview.entities import CacheEntryEntity

logger = logging.getLogger(__name__)


class RedisAggregateCache:
    """Redis-backed aggregate cache.

    This class satisfies the AggregateCache protocol through structural
    typing - no explicit inheritance needed.
    """

    def __init__(self, redis_client: redis.Redis) -> None:
        """Initialize the cache.

        Args:
            redis_client: asyncio Redis client with decode_responses=True.
        """
        self._client = redis_client

    @classmethod
    def create(cls, url: str) -> "RedisAggregateCache":
        """Factory method to create the cache from a Redis URL."""
        return cls(redis_client=get_redis_client(url))

    async def get(self, key: str) -> CacheEntryEntity | None:
        """Read a cached aggregate.

        A payload that no longer matches the row schema is treated as a
        miss so the next rebuild overwrites it.

        Args:
            key: The cache identity

        Returns:
            The entry, or None if missing, expired or unreadable
        """
        raw = await self._client.get(key)
        if raw is None:
            return None

        try:
            payload = CachedAggregatePayload.model_validate_json(raw)
        except ValidationError as e:
            logger.warning("Discarding unreadable cache entry %s: %s", key, e)
            return None

        return payload.to_entity()

    async def put(self, key: str, entry: CacheEntryEntity, ttl: int) -> None:
        """Store an aggregate with a Redis expiry.

        Args:
            key: The cache identity
            entry: The entry to store
            ttl: Expiry in seconds
        """
        payload = CachedAggregatePayload.from_entity(entry)
        await self._client.set(key, payload.model_dump_json(by_alias=True), ex=ttl)

    async def ping(self) -> bool:
        """Check if Redis is accessible.

        Returns:
            True if healthy, False otherwise
        """
        try:
            return bool(await self._client.ping())
        except Exception:
            return False

    async def close(self) -> None:
        """Release the underlying connection pool."""
        await self._client.aclose()

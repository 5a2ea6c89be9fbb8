"""Redis implementation of KeyValueStore.

Each backing store is its own Redis database (or instance). The service
only ever issues GET against it.
"""

import redis.asyncio as redis

from org_overview.config import get_redis_client


class RedisKeyValueStore:
    """Read-only Redis key-value store.

    This class satisfies the KeyValueStore protocol through structural
    typing - no explicit inheritance needed.
    """

    def __init__(self, redis_client: redis.Redis, name: str = "redis") -> None:
        """Initialize the store.

        Args:
            redis_client: asyncio Redis client with decode_responses=True.
            name: Label used in log messages.
        """
        self._client = redis_client
        self._name = name

    @classmethod
    def create(cls, url: str, name: str = "redis") -> "RedisKeyValueStore":
        """Factory method to create a store from a Redis URL.

        Args:
            url: Redis URL, e.g. redis://localhost:6379/0
            name: Label used in log messages.

        Returns:
            Configured RedisKeyValueStore
        """
        return cls(redis_client=get_redis_client(url), name=name)

    @property
    def name(self) -> str:
        return self._name

    async def get(self, key: str) -> str | None:
        """Read the raw value stored under a key.

        Args:
            key: The key to read

        Returns:
            The stored string, or None if the key is absent
        """
        value = await self._client.get(key)
        if value is None:
            return None
        if isinstance(value, bytes):
            return value.decode("utf-8")
        return value

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

    @property
    def client(self) -> redis.Redis:
        """Get the Redis client."""
        return self._client

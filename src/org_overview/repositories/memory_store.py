"""In-process implementations of the store and cache protocols.

Used for tests, demos and single-process deployments that run without a
Redis instance for the aggregate cache (AGGREGATE_CACHE_URL=memory://).
"""

import time
from collections.abc import Callable, Mapping

from org_overview.entities import CacheEntryEntity


class InMemoryKeyValueStore:
    """Dictionary-backed KeyValueStore."""

    def __init__(self, data: Mapping[str, str] | None = None, name: str = "memory") -> None:
        self._data = dict(data or {})
        self._name = name

    @property
    def name(self) -> str:
        return self._name

    async def get(self, key: str) -> str | None:
        return self._data.get(key)

    async def ping(self) -> bool:
        return True


class InMemoryAggregateCache:
    """Dictionary-backed AggregateCache.

    Expiry is evaluated lazily: an entry past its deadline is dropped the
    next time it is read, there is no background sweep.
    """

    def __init__(self, clock: Callable[[], float] = time.monotonic) -> None:
        """Initialize the cache.

        Args:
            clock: Time source in seconds, injectable for tests.
        """
        self._clock = clock
        self._entries: dict[str, tuple[CacheEntryEntity, float]] = {}

    async def get(self, key: str) -> CacheEntryEntity | None:
        stored = self._entries.get(key)
        if stored is None:
            return None

        entry, expires_at = stored
        if self._clock() >= expires_at:
            del self._entries[key]
            return None
        return entry

    async def put(self, key: str, entry: CacheEntryEntity, ttl: int) -> None:
        self._entries[key] = (entry, self._clock() + ttl)

    async def ping(self) -> bool:
        return True

    def __len__(self) -> int:
        return len(self._entries)

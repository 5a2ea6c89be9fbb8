"""Cache-aside service for the aggregate.

This service puts the aggregate cache in front of the aggregator:
a fresh entry is served as-is, anything else triggers a rebuild whose
result is returned immediately and written back in the background.
"""

import asyncio
import logging
from dataclasses import asdict, dataclass

from org_overview.config import settings
from org_overview.entities import AggregatedRow, CacheEntryEntity
from org_overview.protocols import AggregateCache

from .aggregator import AggregatorService

logger = logging.getLogger(__name__)


@dataclass
class CacheCounters:
    """Running counters for cache behaviour since startup."""

    hits: int = 0
    misses: int = 0
    forced_refreshes: int = 0
    rebuild_failures: int = 0
    write_failures: int = 0


class AggregateCacheService:
    """Cache-aside controller for the single global aggregate.

    This service depends on PROTOCOLS, not concrete implementations:
    - AggregateCache: can be Redis, in-process memory, etc.

    Concurrent misses each rebuild independently unless ``coalesce`` is
    enabled, in which case they share one in-flight build.

    Example:
        ```python
        service = AggregateCacheService.create(
            aggregator=aggregator,
            cache=RedisAggregateCache.create("redis://localhost:6379/2"),
        )
        rows = await service.get_aggregate()
        rows = await service.get_aggregate(force_refresh=True)
        ```
    """

    def __init__(
        self,
        aggregator: AggregatorService,
        cache: AggregateCache,
        cache_key: str | None = None,
        ttl: int | None = None,
        coalesce: bool | None = None,
    ) -> None:
        """Initialize the cache service.

        Args:
            aggregator: Builds the aggregate on a miss (required).
            cache: Aggregate cache backend (required).
            cache_key: The cache identity. Defaults to settings.
            ttl: Freshness window in seconds. Defaults to settings.
            coalesce: Share one build between concurrent misses. Defaults to settings.
        """
        self._aggregator = aggregator
        self._cache = cache
        self._cache_key = cache_key or settings.cache_key
        self._ttl = ttl or settings.cache_ttl
        self._coalesce = settings.coalesce_rebuilds if coalesce is None else coalesce
        self._inflight: asyncio.Future[list[AggregatedRow]] | None = None
        self._pending_writes: set[asyncio.Task[None]] = set()
        self._counters = CacheCounters()

    @classmethod
    def create(
        cls,
        aggregator: AggregatorService,
        cache: AggregateCache,
        cache_key: str | None = None,
        ttl: int | None = None,
        coalesce: bool | None = None,
    ) -> "AggregateCacheService":
        """Factory method to create AggregateCacheService with settings defaults.

        Args:
            aggregator: Builds the aggregate on a miss (required).
            cache: Aggregate cache backend (required).
            cache_key: The cache identity. If None, uses settings.
            ttl: Freshness window in seconds. If None, uses settings.
            coalesce: Share one build between concurrent misses. If None, uses settings.

        Returns:
            Configured AggregateCacheService instance
        """
        return cls(
            aggregator=aggregator,
            cache=cache,
            cache_key=cache_key,
            ttl=ttl,
            coalesce=coalesce,
        )

    async def get_aggregate(self, force_refresh: bool = False) -> list[AggregatedRow]:
        """Return the aggregate, from cache when fresh.

        Business logic:
        1. Unless refresh is forced, serve a fresh cache entry
        2. Otherwise rebuild through the aggregator (failures propagate)
        3. Return the rebuilt rows and write them back in the background

        Args:
            force_refresh: Bypass the cache for this call only

        Returns:
            The aggregate rows

        Raises:
            KeyLookupError: If the rebuild cannot read the identifier list
        """
        if force_refresh:
            self._counters.forced_refreshes += 1
        else:
            entry = await self._read_cache()
            if entry is not None:
                self._counters.hits += 1
                logger.info("Cache HIT")
                return list(entry.rows)

        self._counters.misses += 1
        logger.info("Cache MISS or refresh forced. Rebuilding data...")

        try:
            rows, built_here = await self._rebuild()
        except Exception:
            self._counters.rebuild_failures += 1
            raise

        if built_here:
            self._schedule_write(CacheEntryEntity(rows=tuple(rows)))
        return rows

    async def wait_for_pending_writes(self) -> None:
        """Wait until every background cache write has finished."""
        if self._pending_writes:
            await asyncio.gather(*self._pending_writes, return_exceptions=True)

    def get_stats(self) -> dict:
        """Get cache statistics.

        Returns:
            Dictionary with counters and configuration
        """
        stats = asdict(self._counters)
        stats["cache_key"] = self._cache_key
        stats["ttl"] = self._ttl
        stats["coalesce"] = self._coalesce
        stats["pending_writes"] = len(self._pending_writes)
        return stats

    async def is_healthy(self) -> bool:
        return await self._cache.ping()

    async def _read_cache(self) -> CacheEntryEntity | None:
        try:
            return await self._cache.get(self._cache_key)
        except Exception as e:
            logger.warning("Cache read failed, rebuilding instead: %s", e)
            return None

    async def _rebuild(self) -> tuple[list[AggregatedRow], bool]:
        """Run the aggregator, joining an in-flight build when coalescing.

        Returns:
            The rows and whether this call owns the resulting cache write
        """
        if not self._coalesce:
            return await self._aggregator.build(), True

        if self._inflight is not None:
            logger.info("Joining in-flight rebuild")
            rows = await asyncio.shield(self._inflight)
            return list(rows), False

        build = asyncio.ensure_future(self._aggregator.build())
        self._inflight = build
        try:
            rows = await asyncio.shield(build)
        finally:
            if self._inflight is build:
                self._inflight = None
        return rows, True

    def _schedule_write(self, entry: CacheEntryEntity) -> None:
        task = asyncio.create_task(self._write(entry))
        self._pending_writes.add(task)
        task.add_done_callback(self._pending_writes.discard)

    async def _write(self, entry: CacheEntryEntity) -> None:
        try:
            await self._cache.put(self._cache_key, entry, self._ttl)
            logger.debug("Cached %d rows under %s", len(entry.rows), self._cache_key)
        except Exception as e:
            self._counters.write_failures += 1
            logger.error("Failed to write aggregate to cache: %s", e)

    @property
    def ttl(self) -> int:
        """Get the freshness window in seconds."""
        return self._ttl

    @property
    def aggregator(self) -> AggregatorService:
        """Get the underlying aggregator (for testing)."""
        return self._aggregator

    @property
    def cache(self) -> AggregateCache:
        """Get the underlying cache (for testing)."""
        return self._cache

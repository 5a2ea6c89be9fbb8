"""Service layer for business logic.

This layer contains the aggregation pipeline and the cache-aside
controller. Services depend on protocols (interfaces), not concrete
implementations, making them testable with substitute stores.

Architecture:
    Handler -> AggregateCacheService -> AggregatorService
                                      -> KeyLookupService
                                      -> RecordFetcher -> KeyValueStore x2

Usage:
    ```python
    from org_overview.services import build_cache_service

    service = build_cache_service(primary_store, secondary_store, cache)
    rows = await service.get_aggregate()
    ```
"""

from org_overview.protocols import AggregateCache, KeyValueStore

from .aggregator import AggregatorService
from .cache_service import AggregateCacheService, CacheCounters
from .key_lookup import KeyLookupService
from .record_fetcher import RecordFetcher


def build_cache_service(
    primary_store: KeyValueStore,
    secondary_store: KeyValueStore,
    cache: AggregateCache,
    **options,
) -> AggregateCacheService:
    """Wire the full pipeline from explicit dependencies.

    Args:
        primary_store: Store with the identifier list and representative data.
        secondary_store: Store with registry data.
        cache: Aggregate cache backend.
        **options: Overrides: list_key, lookup_timeout, max_concurrency,
            cache_key, ttl, coalesce.

    Returns:
        Configured AggregateCacheService
    """
    aggregator = AggregatorService(
        key_lookup=KeyLookupService(primary_store, list_key=options.get("list_key")),
        record_fetcher=RecordFetcher(
            primary_store,
            secondary_store,
            lookup_timeout=options.get("lookup_timeout"),
        ),
        max_concurrency=options.get("max_concurrency"),
    )
    return AggregateCacheService.create(
        aggregator=aggregator,
        cache=cache,
        cache_key=options.get("cache_key"),
        ttl=options.get("ttl"),
        coalesce=options.get("coalesce"),
    )


__all__ = [
    "AggregateCacheService",
    "AggregatorService",
    "CacheCounters",
    "KeyLookupService",
    "RecordFetcher",
    "build_cache_service",
]

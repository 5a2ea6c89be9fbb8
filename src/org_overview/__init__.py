"""Organization Overview - cached aggregation over two key-value stores.

This package provides a layered architecture:

Layers:
    - protocols: Interface contracts (KeyValueStore, AggregateCache)
    - repositories: Redis and in-memory implementations
    - services: Key lookup, record fetching, aggregation, cache-aside
    - encoders: JSON / name list / CSV views of the aggregate
    - handlers: HTTP endpoint handlers
    - dto: Data transfer objects (wire contracts)
    - entities: Domain models (internal)

Usage:
    ```python
    from org_overview.repositories import InMemoryAggregateCache, RedisKeyValueStore
    from org_overview.services import build_cache_service

    service = build_cache_service(
        RedisKeyValueStore.create("redis://localhost:6379/0", name="ORG_DATA"),
        RedisKeyValueStore.create("redis://localhost:6379/1", name="ORG_CACHE"),
        InMemoryAggregateCache(),
    )
    rows = await service.get_aggregate()
    ```

For HTTP API:
    ```python
    from org_overview.api.app import app
    ```
"""

from org_overview.config import get_redis_client, settings
from org_overview.entities import NOT_AVAILABLE, AggregatedRow, CacheEntryEntity
from org_overview.exceptions import (
    ConfigurationError,
    KeyListNotFoundError,
    KeyListParseError,
    KeyLookupError,
    OrgOverviewError,
)
from org_overview.handlers import AggregateHandler
from org_overview.protocols import AggregateCache, KeyValueStore
from org_overview.repositories import (
    InMemoryAggregateCache,
    InMemoryKeyValueStore,
    RedisAggregateCache,
    RedisKeyValueStore,
)
from org_overview.services import (
    AggregateCacheService,
    AggregatorService,
    KeyLookupService,
    RecordFetcher,
    build_cache_service,
)

__all__ = [
    # Configuration
    "settings",
    "get_redis_client",
    # Errors
    "OrgOverviewError",
    "ConfigurationError",
    "KeyLookupError",
    "KeyListNotFoundError",
    "KeyListParseError",
    # Protocols (interfaces)
    "KeyValueStore",
    "AggregateCache",
    # Services (business logic)
    "KeyLookupService",
    "RecordFetcher",
    "AggregatorService",
    "AggregateCacheService",
    "build_cache_service",
    # Handlers (HTTP)
    "AggregateHandler",
    # Repositories (data access)
    "RedisKeyValueStore",
    "RedisAggregateCache",
    "InMemoryKeyValueStore",
    "InMemoryAggregateCache",
    # Entities (domain models)
    "NOT_AVAILABLE",
    "AggregatedRow",
    "CacheEntryEntity",
]

"""Repository layer for data access.

This layer hides the backing stores and the aggregate cache behind
protocol-based interfaces. This enables:
- Explicitly constructed dependencies instead of ambient bindings
- Unit testing with in-memory substitutes
- Clear separation of concerns

The repositories are protocol-based (structural typing), not inheritance-based.
Any class implementing the required methods will satisfy the protocol.
"""

from org_overview.protocols import AggregateCache, KeyValueStore

from .memory_store import InMemoryAggregateCache, InMemoryKeyValueStore
from .redis_aggregate_cache import RedisAggregateCache
from .redis_store import RedisKeyValueStore

__all__ = [
    "AggregateCache",
    "KeyValueStore",
    "InMemoryAggregateCache",
    "InMemoryKeyValueStore",
    "RedisAggregateCache",
    "RedisKeyValueStore",
]

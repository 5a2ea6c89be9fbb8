"""Protocol interfaces for swappable implementations.

This package contains protocol definitions using structural typing.
Protocols enable:
- Swapping the backing stores (Redis, in-memory, any other key-value source)
- Unit testing with substitute stores
- Explicit construction instead of ambient global bindings

Usage:
    ```python
    from org_overview.protocols import AggregateCache, KeyValueStore

    store: KeyValueStore = RedisKeyValueStore.create(url)  # works
    store: KeyValueStore = InMemoryKeyValueStore({...})    # also works
    ```
"""

from .aggregate_cache import AggregateCache
from .key_value_store import KeyValueStore

__all__ = [
    "AggregateCache",
    "KeyValueStore",
]

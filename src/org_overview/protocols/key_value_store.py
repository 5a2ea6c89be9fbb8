"""Backing store protocol.

Defines the read-only interface this service needs from a key-value
source. Both the primary store (identifier list, representative data)
and the secondary store (registry data) satisfy it.

Implementations can include:
- Redis (default)
- In-process dictionaries (tests, demos)
- Any other key-value database with string values
"""

from typing import Protocol, runtime_checkable


@runtime_checkable
class KeyValueStore(Protocol):
    """Protocol for read-only key-value backing stores.

    Any type that implements these methods satisfies the protocol, no
    explicit inheritance needed.

    Example:
        ```python
        from org_overview.protocols import KeyValueStore

        store: KeyValueStore = RedisKeyValueStore.create("redis://localhost:6379/0")
        raw = await store.get("org_list")
        ```
    """

    @property
    def name(self) -> str:
        """Return a short label used in log messages.

        Returns:
            Store label (e.g., "ORG_DATA")
        """
        ...

    async def get(self, key: str) -> str | None:
        """Read the raw value stored under a key.

        Args:
            key: The key to read

        Returns:
            The stored string, or None if the key is absent
        """
        ...

    async def ping(self) -> bool:
        """Check if the store is reachable.

        Returns:
            True if reachable, False otherwise
        """
        ...

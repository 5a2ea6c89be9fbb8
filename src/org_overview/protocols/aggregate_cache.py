"""Aggregate cache protocol.

Defines the interface for the cache that sits in front of the
aggregator. Writes may be slow or fail; callers schedule them in the
background and never depend on their outcome.
"""

from typing import Protocol, runtime_checkable

from org_overview.entities import CacheEntryEntity


@runtime_checkable
class AggregateCache(Protocol):
    """Protocol for aggregate cache backends.

    Implementations own expiry: an entry older than the TTL it was
    written with must read back as absent.
    """

    async def get(self, key: str) -> CacheEntryEntity | None:
        """Read a cached aggregate.

        Args:
            key: The cache identity

        Returns:
            The fresh entry, or None if missing or expired
        """
        ...

    async def put(self, key: str, entry: CacheEntryEntity, ttl: int) -> None:
        """Store an aggregate.

        Args:
            key: The cache identity
            entry: The entry to store
            ttl: Freshness window in seconds, measured from now
        """
        ...

    async def ping(self) -> bool:
        """Check if the cache is reachable.

        Returns:
            True if reachable, False otherwise
        """
        ...

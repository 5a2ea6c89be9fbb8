"""Domain entities for internal representation.

These are pure dataclasses (frozen) used internally by services
and repositories. They are NOT used for API contracts - use DTOs
from the dto package for that.
"""

from .aggregated_row import NOT_AVAILABLE, AggregatedRow
from .cache_entry import CacheEntryEntity

__all__ = ["NOT_AVAILABLE", "AggregatedRow", "CacheEntryEntity"]

"""Cache entry domain entity."""

import time
from dataclasses import dataclass, field

from .aggregated_row import AggregatedRow


@dataclass(frozen=True)
class CacheEntryEntity:
    """Domain entity for a cached aggregate.

    Attributes:
        rows: The aggregate as it was built
        written_at: When this entry was created (Unix timestamp)
    """

    rows: tuple[AggregatedRow, ...]
    written_at: float = field(default_factory=time.time)

"""Aggregator service.

Fans the record fetcher out over every identifier and settles all
outcomes. Only a key lookup failure aborts the build.
"""

import asyncio
import logging

from org_overview.config import settings
from org_overview.entities import AggregatedRow

from .key_lookup import KeyLookupService
from .record_fetcher import RecordFetcher

logger = logging.getLogger(__name__)


class AggregatorService:
    """Builds the complete aggregate from the backing stores.

    Fetches run concurrently with no cap unless ``max_concurrency`` is
    set, in which case a semaphore bounds the number in flight.
    """

    def __init__(
        self,
        key_lookup: KeyLookupService,
        record_fetcher: RecordFetcher,
        max_concurrency: int | None = None,
    ) -> None:
        """Initialize the aggregator.

        Args:
            key_lookup: Source of the identifier list (required).
            record_fetcher: Per-identifier row builder (required).
            max_concurrency: Upper bound on in-flight fetches, 0 means unbounded.
                Defaults to settings.
        """
        self._key_lookup = key_lookup
        self._fetcher = record_fetcher
        limit = settings.fetch_concurrency if max_concurrency is None else max_concurrency
        self._max_concurrency = limit or None

    @property
    def max_concurrency(self) -> int | None:
        return self._max_concurrency

    async def build(self) -> list[AggregatedRow]:
        """Build the aggregate.

        Business logic:
        1. Read the identifier list (failures propagate)
        2. Fetch every identifier concurrently
        3. Keep the rows that came back, drop and log the rest

        Returns:
            One row per successfully processed identifier, in identifier-list order

        Raises:
            KeyLookupError: If the identifier list is missing or malformed
        """
        identifiers = await self._key_lookup.list_identifiers()
        if not identifiers:
            logger.warning("No keys found in '%s'", self._key_lookup.list_key)
            return []

        logger.info("Processing %d keys in parallel...", len(identifiers))

        if self._max_concurrency is None:
            tasks = [self._fetcher.fetch_one(identifier) for identifier in identifiers]
        else:
            semaphore = asyncio.Semaphore(self._max_concurrency)
            tasks = [self._bounded_fetch(semaphore, identifier) for identifier in identifiers]

        results = await asyncio.gather(*tasks, return_exceptions=True)

        rows: list[AggregatedRow] = []
        for identifier, result in zip(identifiers, results):
            if isinstance(result, BaseException):
                if isinstance(result, asyncio.CancelledError):
                    raise result
                logger.error(
                    "Unhandled failure for key %s: %s", identifier, result, exc_info=result
                )
            elif result is not None:
                rows.append(result)

        logger.info("Finished processing. Total aggregated rows: %d", len(rows))
        return rows

    async def _bounded_fetch(
        self, semaphore: asyncio.Semaphore, identifier: str
    ) -> AggregatedRow | None:
        async with semaphore:
            return await self._fetcher.fetch_one(identifier)

"""Record fetcher service.

Builds one AggregatedRow from the two backing stores. The two lookups
are independent: a missing key, a broken payload or a failing store on
one side only leaves that side's fields at NOT_AVAILABLE.

Field sources:
    primary store (representative data):
        organizationDisplayName -> representative
        firstSeen               -> added_date (UTC date, YYYY-MM-DD)
    secondary store (registry data), nested first organization under
    data.organisationer[0], falling back to flat top-level fields:
        organisationsnamn.organisationsnamnLista[0].namn | name    -> name
        juridiskForm.klartext                            | form    -> legal_form
        postadressOrganisation.postadress.postort        | postort -> locality
"""

import asyncio
import json
import logging
from datetime import UTC, datetime
from typing import Any

from org_overview.config import settings
from org_overview.entities import NOT_AVAILABLE, AggregatedRow
from org_overview.protocols import KeyValueStore

from .key_lookup import LOG_EXCERPT_LENGTH

logger = logging.getLogger(__name__)

_NESTED_NAME = ("organisationsnamn", "organisationsnamnLista", 0, "namn")
_NESTED_FORM = ("juridiskForm", "klartext")
_NESTED_LOCALITY = ("postadressOrganisation", "postadress", "postort")


def dig(document: Any, *path: str | int) -> Any:
    """Walk a parsed JSON document, returning None at the first missing step."""
    current = document
    for step in path:
        if isinstance(step, int):
            if not isinstance(current, list) or not -len(current) <= step < len(current):
                return None
        elif not isinstance(current, dict):
            return None
        else:
            if step not in current:
                return None
        current = current[step]
    return current


def first_text(*candidates: Any) -> str:
    """Return the first usable candidate as a string, else NOT_AVAILABLE.

    None, empty strings and containers do not count as usable values.
    """
    for value in candidates:
        if value is None or value == "" or isinstance(value, (dict, list, bool)):
            continue
        return value if isinstance(value, str) else str(value)
    return NOT_AVAILABLE


def to_calendar_date(value: Any) -> str:
    """Normalize a timestamp to its UTC calendar date.

    Accepts ISO-8601 strings (naive values are read as UTC) and numeric
    epoch milliseconds.

    Raises:
        ValueError: If the value cannot be read as a timestamp
    """
    if isinstance(value, bool):
        raise ValueError(f"Not a timestamp: {value!r}")
    if isinstance(value, (int, float)):
        moment = datetime.fromtimestamp(value / 1000, tz=UTC)
    elif isinstance(value, str):
        text = value.strip()
        if text.endswith(("Z", "z")):
            text = text[:-1] + "+00:00"
        moment = datetime.fromisoformat(text)
        if moment.tzinfo is None:
            moment = moment.replace(tzinfo=UTC)
    else:
        raise ValueError(f"Not a timestamp: {value!r}")
    return moment.astimezone(UTC).date().isoformat()


class RecordFetcher:
    """Fetches and merges the two partial records for one identifier."""

    def __init__(
        self,
        primary_store: KeyValueStore,
        secondary_store: KeyValueStore,
        lookup_timeout: float | None = None,
    ) -> None:
        """Initialize the record fetcher.

        Args:
            primary_store: Store with representative data (required).
            secondary_store: Store with registry data (required).
            lookup_timeout: Seconds allowed per store read, 0 disables. Defaults to settings.
        """
        self._primary = primary_store
        self._secondary = secondary_store
        timeout = settings.lookup_timeout_seconds if lookup_timeout is None else lookup_timeout
        self._timeout = timeout or None

    async def fetch_one(self, identifier: str) -> AggregatedRow | None:
        """Build the merged row for one identifier.

        Never raises. Field-level problems are absorbed into NOT_AVAILABLE
        values; anything unexpected drops the whole row.

        Args:
            identifier: The organization number

        Returns:
            The merged row, or None if the row must be dropped
        """
        try:
            representative_fields, registry_fields = await asyncio.gather(
                self._representative_fields(identifier),
                self._registry_fields(identifier),
            )
            return AggregatedRow(id=identifier, **representative_fields, **registry_fields)
        except Exception:
            logger.exception("Unexpected error while fetching %s, dropping row", identifier)
            return None

    async def _read(self, store: KeyValueStore, identifier: str) -> Any:
        """Read and parse one store's document, or None if unavailable."""
        try:
            raw = await asyncio.wait_for(store.get(identifier), timeout=self._timeout)
        except TimeoutError:
            logger.error("Lookup in %s timed out for %s", store.name, identifier)
            return None
        except Exception as e:
            logger.error("Lookup in %s failed for %s: %s", store.name, identifier, e)
            return None

        if raw is None:
            logger.warning("Key %s not found in %s", identifier, store.name)
            return None

        try:
            return json.loads(raw)
        except (json.JSONDecodeError, RecursionError) as e:
            logger.error(
                "Failed to parse %s for %s: %s. Text was: %s...",
                store.name,
                identifier,
                e,
                raw[:LOG_EXCERPT_LENGTH],
            )
            return None

    async def _representative_fields(self, identifier: str) -> dict[str, str]:
        document = await self._read(self._primary, identifier)
        fields = {"representative": NOT_AVAILABLE, "added_date": NOT_AVAILABLE}
        if document is None:
            return fields

        fields["representative"] = first_text(dig(document, "organizationDisplayName"))

        first_seen = dig(document, "firstSeen")
        if first_seen is not None and first_seen != "":
            try:
                fields["added_date"] = to_calendar_date(first_seen)
            except (ValueError, OverflowError, OSError) as e:
                logger.error("Unreadable firstSeen for %s: %s", identifier, e)
        return fields

    async def _registry_fields(self, identifier: str) -> dict[str, str]:
        document = await self._read(self._secondary, identifier)
        if document is None:
            return {"name": NOT_AVAILABLE, "legal_form": NOT_AVAILABLE, "locality": NOT_AVAILABLE}

        organization = dig(document, "data", "organisationer", 0)
        if not organization:
            organization = None

        return {
            "name": first_text(dig(organization, *_NESTED_NAME), dig(document, "name")),
            "legal_form": first_text(dig(organization, *_NESTED_FORM), dig(document, "form")),
            "locality": first_text(
                dig(organization, *_NESTED_LOCALITY), dig(document, "postort")
            ),
        }

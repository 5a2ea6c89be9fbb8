"""Key lookup service.

Reads the authoritative list of organization numbers from the primary
store. Without this list there is nothing to aggregate, so every
failure here is raised to the caller.
"""

import json
import logging

from org_overview.config import settings
from org_overview.exceptions import KeyListNotFoundError, KeyListParseError, KeyLookupError
from org_overview.protocols import KeyValueStore

logger = logging.getLogger(__name__)

# Characters of an unparsable payload quoted in log messages
LOG_EXCERPT_LENGTH = 150


class KeyLookupService:
    """Retrieves and parses the identifier list."""

    def __init__(self, store: KeyValueStore, list_key: str | None = None) -> None:
        """Initialize the key lookup service.

        Args:
            store: The primary backing store (required).
            list_key: Key holding the JSON array of identifiers. Defaults to settings.
        """
        self._store = store
        self._list_key = list_key or settings.org_list_key

    @property
    def list_key(self) -> str:
        return self._list_key

    async def list_identifiers(self) -> list[str]:
        """Read the identifier list.

        Returns:
            Identifiers in list order, duplicates included

        Raises:
            KeyListNotFoundError: If the list key is absent
            KeyListParseError: If the value is not a JSON array
            KeyLookupError: If the store read itself fails
        """
        try:
            raw = await self._store.get(self._list_key)
        except Exception as e:
            logger.error("Failed to read '%s' from %s: %s", self._list_key, self._store.name, e)
            raise KeyLookupError(
                self._list_key, f"Could not read '{self._list_key}': {e}"
            ) from e

        if raw is None:
            raise KeyListNotFoundError(self._list_key)

        try:
            parsed = json.loads(raw)
        except (json.JSONDecodeError, RecursionError, TypeError) as e:
            logger.error(
                "Failed to parse %s. Text was: %s...",
                self._list_key,
                str(raw)[:LOG_EXCERPT_LENGTH],
            )
            raise KeyListParseError(
                self._list_key, f"Failed to parse '{self._list_key}': {e}"
            ) from e

        if not isinstance(parsed, list):
            raise KeyListParseError(
                self._list_key, f"Value of '{self._list_key}' is not a JSON array"
            )

        identifiers = []
        for item in parsed:
            if item is None or item == "":
                logger.warning("Skipping empty identifier in '%s'", self._list_key)
                continue
            identifiers.append(item if isinstance(item, str) else str(item))
        return identifiers

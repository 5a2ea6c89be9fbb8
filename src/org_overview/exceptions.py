"""Error taxonomy for the aggregation pipeline.

Only failures that make the whole aggregate meaningless are raised.
Per-record problems are absorbed by the record fetcher and cache write
problems are logged by the cache service.
"""


class OrgOverviewError(Exception):
    """Base class for all service errors."""


class ConfigurationError(OrgOverviewError):
    """A required backing store or cache binding is unavailable."""


class KeyLookupError(OrgOverviewError):
    """The identifier list could not be read or parsed."""

    def __init__(self, key: str, message: str) -> None:
        self.key = key
        super().__init__(message)


class KeyListNotFoundError(KeyLookupError):
    """The identifier list key is absent from the primary store."""

    def __init__(self, key: str) -> None:
        super().__init__(key, f"Could not find key '{key}' in the primary store")


class KeyListParseError(KeyLookupError):
    """The identifier list is not valid JSON or not a JSON array."""

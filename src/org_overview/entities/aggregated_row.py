"""Aggregated row domain entity."""

from dataclasses import dataclass

# Placeholder for any field that could not be determined
NOT_AVAILABLE = "N/A"


@dataclass(frozen=True)
class AggregatedRow:
    """Merged, display-ready record for one organization.

    Every field is always present. Values that are missing or unparsable
    in the backing stores hold NOT_AVAILABLE so the encoders can rely on
    a fixed schema.

    Attributes:
        id: Organization number, the lookup key in both stores
        name: Registered organization name (secondary store)
        legal_form: Legal form label (secondary store)
        locality: Postal locality (secondary store)
        representative: Display name of the representative (primary store)
        added_date: Date the organization was first seen, YYYY-MM-DD (primary store)
    """

    id: str
    name: str = NOT_AVAILABLE
    legal_form: str = NOT_AVAILABLE
    locality: str = NOT_AVAILABLE
    representative: str = NOT_AVAILABLE
    added_date: str = NOT_AVAILABLE

    def __post_init__(self) -> None:
        if not self.id:
            raise ValueError("AggregatedRow.id must not be empty")

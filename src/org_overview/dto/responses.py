"""Response DTOs for API endpoints and cached payloads."""

from pydantic import BaseModel, ConfigDict, Field

from org_overview.entities import NOT_AVAILABLE, AggregatedRow, CacheEntryEntity


class AggregatedRowItem(BaseModel):
    """Single row of the aggregate, in wire field order.

    Field order here is the column order of the CSV export.
    """

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    id: str = Field(..., description="Organization number", min_length=1)
    name: str = Field(NOT_AVAILABLE, description="Registered organization name")
    legal_form: str = Field(NOT_AVAILABLE, alias="legalForm", description="Legal form label")
    locality: str = Field(NOT_AVAILABLE, description="Postal locality")
    representative: str = Field(NOT_AVAILABLE, description="Representative display name")
    added_date: str = Field(NOT_AVAILABLE, alias="addedDate", description="First seen, YYYY-MM-DD")

    @classmethod
    def from_entity(cls, row: AggregatedRow) -> "AggregatedRowItem":
        return cls(
            id=row.id,
            name=row.name,
            legal_form=row.legal_form,
            locality=row.locality,
            representative=row.representative,
            added_date=row.added_date,
        )

    def to_entity(self) -> AggregatedRow:
        return AggregatedRow(
            id=self.id,
            name=self.name,
            legal_form=self.legal_form,
            locality=self.locality,
            representative=self.representative,
            added_date=self.added_date,
        )

    @classmethod
    def wire_field_names(cls) -> list[str]:
        """Return the serialized field names in schema order."""
        return [field.alias or name for name, field in cls.model_fields.items()]


class CachedAggregatePayload(BaseModel):
    """Serialized form of a cache entry."""

    written_at: float = Field(..., description="When the entry was created (Unix timestamp)")
    rows: list[AggregatedRowItem] = Field(default_factory=list)

    @classmethod
    def from_entity(cls, entry: CacheEntryEntity) -> "CachedAggregatePayload":
        return cls(
            written_at=entry.written_at,
            rows=[AggregatedRowItem.from_entity(row) for row in entry.rows],
        )

    def to_entity(self) -> CacheEntryEntity:
        return CacheEntryEntity(
            rows=tuple(item.to_entity() for item in self.rows),
            written_at=self.written_at,
        )


class ErrorResponse(BaseModel):
    """Response DTO for a failed view request."""

    error: str = Field(..., description="Human-readable failure message")


class HealthCheckResponse(BaseModel):
    """Response DTO for health check."""

    status: str = Field(..., description="Health status: 'healthy' or 'unhealthy'")
    primary_store: bool = Field(..., description="Whether the primary store is reachable")
    secondary_store: bool = Field(..., description="Whether the secondary store is reachable")
    cache: bool = Field(..., description="Whether the aggregate cache is reachable")

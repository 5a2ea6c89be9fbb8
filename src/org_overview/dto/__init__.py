"""Data Transfer Objects for API and cache contracts.

These Pydantic models define the external wire format. They are used
for response documentation and for (de)serializing cached aggregates.

Internal domain logic should use entities from the entities package.
"""

from .responses import (
    AggregatedRowItem,
    CachedAggregatePayload,
    ErrorResponse,
    HealthCheckResponse,
)

__all__ = [
    "AggregatedRowItem",
    "CachedAggregatePayload",
    "ErrorResponse",
    "HealthCheckResponse",
]

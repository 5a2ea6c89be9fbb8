"""HTTP handlers for the aggregate views.

Handlers fetch the aggregate through the cache service, hand it to an
encoder and wrap the result in a response. Any failure that reaches
them becomes a JSON error body with status 500.
"""

import logging

from fastapi import status
from fastapi.responses import JSONResponse, Response

from org_overview.dto import ErrorResponse, HealthCheckResponse
from org_overview.encoders import encode_csv, encode_full, encode_names
from org_overview.protocols import KeyValueStore
from org_overview.services import AggregateCacheService

logger = logging.getLogger(__name__)

CSV_FILENAME = "export.csv"


def error_response(error: Exception) -> JSONResponse:
    """Build the JSON error body returned for a failed view."""
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=ErrorResponse(error=str(error)).model_dump(),
    )


class AggregateHandler:
    """HTTP handlers for the aggregate views.

    This handler delegates to AggregateCacheService and handles
    HTTP-specific concerns like:
    - Choosing the encoder and content type
    - Setting appropriate status codes
    - Error handling and responses

    Example:
        ```python
        handler = AggregateHandler(cache_service, primary_store, secondary_store)

        @app.get("/data.json")
        async def data_json(refresh: str | None = None):
            return await handler.data_json(force_refresh=refresh is not None)
        ```
    """

    def __init__(
        self,
        cache_service: AggregateCacheService,
        primary_store: KeyValueStore,
        secondary_store: KeyValueStore,
    ) -> None:
        """Initialize the aggregate handler.

        Args:
            cache_service: The cache-aside service (required).
            primary_store: Primary backing store, for health checks.
            secondary_store: Secondary backing store, for health checks.
        """
        self._cache = cache_service
        self._primary = primary_store
        self._secondary = secondary_store

    async def data_json(self, force_refresh: bool = False) -> Response:
        """Handle GET /data.json requests.

        Args:
            force_refresh: Bypass the cache for this request

        Returns:
            The full aggregate as JSON, or an error body
        """
        try:
            rows = await self._cache.get_aggregate(force_refresh=force_refresh)
        except Exception as e:
            logger.error("Failed to get aggregated data: %s", e)
            return error_response(e)
        return JSONResponse(content=encode_full(rows))

    async def names_json(self, force_refresh: bool = False) -> Response:
        """Handle GET /org-via-ombud.json requests.

        Args:
            force_refresh: Bypass the cache for this request

        Returns:
            Organization names as a JSON array, or an error body
        """
        try:
            rows = await self._cache.get_aggregate(force_refresh=force_refresh)
        except Exception as e:
            logger.error("Failed to get organization names: %s", e)
            return error_response(e)
        return JSONResponse(content=encode_names(rows))

    async def export_csv(self, force_refresh: bool = False) -> Response:
        """Handle GET /export.csv requests.

        Args:
            force_refresh: Bypass the cache for this request

        Returns:
            CSV attachment, or an error body
        """
        try:
            rows = await self._cache.get_aggregate(force_refresh=force_refresh)
        except Exception as e:
            logger.error("Failed to generate CSV: %s", e)
            return error_response(e)
        return Response(
            content=encode_csv(rows),
            media_type="text/csv; charset=utf-8",
            headers={"Content-Disposition": f'attachment; filename="{CSV_FILENAME}"'},
        )

    async def health_check(self) -> JSONResponse:
        """Handle GET /health requests.

        Returns:
            Reachability of both stores and the cache, 503 if any is down
        """
        result = HealthCheckResponse(
            status="healthy",
            primary_store=await self._primary.ping(),
            secondary_store=await self._secondary.ping(),
            cache=await self._cache.is_healthy(),
        )
        healthy = result.primary_store and result.secondary_store and result.cache
        if not healthy:
            result = result.model_copy(update={"status": "unhealthy"})
        return JSONResponse(
            status_code=status.HTTP_200_OK if healthy else status.HTTP_503_SERVICE_UNAVAILABLE,
            content=result.model_dump(),
        )

    async def get_stats(self) -> dict:
        """Handle GET /stats requests."""
        return self._cache.get_stats()

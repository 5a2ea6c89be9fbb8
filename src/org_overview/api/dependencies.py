"""Dependency injection configuration for FastAPI app.

Uses FastAPI's app.state pattern for storing service instances.

Pattern:
    - Backing stores and cache are built once (from settings, or passed in)
    - Services stored in app.state during lifespan
    - Dependency functions retrieve from request.app.state
    - Missing bindings surface as ConfigurationError on every request
"""

from collections.abc import Callable
from contextlib import asynccontextmanager
from dataclasses import dataclass
from typing import Annotated

from fastapi import Depends, FastAPI, Request

from org_overview.config import settings
from org_overview.exceptions import ConfigurationError
from org_overview.handlers import AggregateHandler
from org_overview.protocols import AggregateCache, KeyValueStore
from org_overview.repositories import (
    InMemoryAggregateCache,
    RedisAggregateCache,
    RedisKeyValueStore,
)
from org_overview.services import build_cache_service


@dataclass
class Bindings:
    """The external collaborators the service runs against."""

    primary_store: KeyValueStore | None
    secondary_store: KeyValueStore | None
    cache: AggregateCache | None

    @classmethod
    def from_settings(cls) -> "Bindings":
        """Build Redis-backed bindings from the configured URLs.

        An empty URL leaves the binding unset.
        """
        if settings.uses_memory_cache:
            cache: AggregateCache | None = InMemoryAggregateCache()
        elif settings.aggregate_cache_url:
            cache = RedisAggregateCache.create(settings.aggregate_cache_url)
        else:
            cache = None

        return cls(
            primary_store=(
                RedisKeyValueStore.create(settings.org_data_url, name="ORG_DATA")
                if settings.org_data_url
                else None
            ),
            secondary_store=(
                RedisKeyValueStore.create(settings.org_cache_url, name="ORG_CACHE")
                if settings.org_cache_url
                else None
            ),
            cache=cache,
        )

    def missing(self) -> list[str]:
        """Names of the bindings that are not configured."""
        return [name for name, value in vars(self).items() if value is None]


def get_handler(request: Request) -> AggregateHandler:
    """Dependency injection for AggregateHandler from app.state.

    Args:
        request: FastAPI Request object

    Returns:
        The AggregateHandler instance from app.state

    Raises:
        ConfigurationError: If a binding is missing and no handler was built
    """
    handler = getattr(request.app.state, "aggregate_handler", None)
    if handler is None:
        missing = getattr(request.app.state, "missing_bindings", None) or ["handler"]
        raise ConfigurationError(
            f"Configuration error: binding(s) {', '.join(missing)} missing. "
            "Check ORG_DATA_URL, ORG_CACHE_URL and AGGREGATE_CACHE_URL."
        )
    return handler


def make_lifespan(bindings: Bindings | None = None) -> Callable:
    """Create the lifespan context manager for the FastAPI app.

    Args:
        bindings: Explicit collaborators. If None, built from settings.

    Returns:
        Lifespan context manager
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Initialize all layers and store them in app.state.

        1. Bindings (stores, cache) - passed in or built from settings
        2. Cache service (pipeline) - stored in app.state.cache_service
        3. Handler (HTTP endpoints) - stored in app.state.aggregate_handler

        Cleanup:
            Drains background cache writes, closes Redis clients and
            removes everything from app.state on shutdown
        """
        active = bindings or Bindings.from_settings()
        missing = active.missing()
        app.state.missing_bindings = missing

        cache_service = None
        if missing:
            print(f"✗ Missing bindings: {', '.join(missing)}")
        else:
            cache_service = build_cache_service(
                active.primary_store,
                active.secondary_store,
                active.cache,
            )
            app.state.cache_service = cache_service
            app.state.aggregate_handler = AggregateHandler(
                cache_service=cache_service,
                primary_store=active.primary_store,
                secondary_store=active.secondary_store,
            )
            print("✓ Aggregate service initialized")
            print(f"✓ Cache TTL: {cache_service.ttl}s")

        yield

        if cache_service is not None:
            await cache_service.wait_for_pending_writes()
            del app.state.aggregate_handler
            del app.state.cache_service

        for resource in (active.primary_store, active.secondary_store, active.cache):
            close = getattr(resource, "close", None)
            if close is not None:
                await close()
        print("✓ Aggregate service shut down")

    return lifespan


# Type alias for cleaner dependency injection
HandlerDep = Annotated[AggregateHandler, Depends(get_handler)]

from typing import Any

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import PlainTextResponse, Response

from org_overview.api.dependencies import Bindings, HandlerDep, make_lifespan
from org_overview.config import configure_logging, settings
from org_overview.exceptions import ConfigurationError

NAMES_PATH = "/org-via-ombud.json"


def create_app(bindings: Bindings | None = None) -> FastAPI:
    """Create the FastAPI application.

    Args:
        bindings: Explicit stores and cache. If None, built from settings at startup.

    Returns:
        The configured application
    """
    app = FastAPI(
        title="Organization Overview API",
        description="Aggregated organization data from two key-value stores, cached",
        version="0.1.0",
        lifespan=make_lifespan(bindings),
    )

    app.add_middleware(
        CORSMiddleware,  # type: ignore[arg-type]
        allow_origins=["*"],
        allow_methods=["GET"],
        allow_headers=["*"],
    )

    @app.exception_handler(ConfigurationError)
    async def configuration_error(request: Request, exc: ConfigurationError) -> Response:
        return PlainTextResponse(str(exc), status_code=status.HTTP_500_INTERNAL_SERVER_ERROR)

    @app.get("/")
    async def root(handler: HandlerDep) -> dict[str, Any]:
        """Root endpoint with API information."""
        return {
            "name": "Organization Overview API",
            "version": "0.1.0",
            "endpoints": {
                "data": "/data.json",
                "names": NAMES_PATH,
                "csv": "/export.csv",
                "stats": "/stats",
                "health": "/health",
                "docs": "/docs",
            },
        }

    @app.get("/health")
    async def health(handler: HandlerDep) -> Response:
        """Health check endpoint."""
        return await handler.health_check()

    @app.get("/data.json")
    async def data_json(handler: HandlerDep, refresh: str | None = None) -> Response:
        """Full aggregate. Any `refresh` query parameter forces a rebuild."""
        return await handler.data_json(force_refresh=refresh is not None)

    @app.get(NAMES_PATH)
    async def names_json(handler: HandlerDep, refresh: str | None = None) -> Response:
        """Organization names only."""
        return await handler.names_json(force_refresh=refresh is not None)

    @app.get("/export.csv")
    async def export_csv(handler: HandlerDep, refresh: str | None = None) -> Response:
        """Aggregate as a CSV attachment."""
        return await handler.export_csv(force_refresh=refresh is not None)

    @app.get("/stats", response_model=dict[str, Any])
    async def get_stats(handler: HandlerDep) -> dict[str, Any]:
        """Get cache statistics."""
        return await handler.get_stats()

    return app


configure_logging()
app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "org_overview.api.app:app",
        host=settings.api_host,
        port=settings.api_port,
        reload=settings.api_reload,
    )

"""FastAPI application factory."""

from fastapi import FastAPI

from .api import api_router
from .links import links_router
from .middleware.logging import LoggingMiddleware


def create_app(
    service_instance,
    config,
) -> FastAPI:
    """Create and configure FastAPI application.

    The service is constructed by the caller and injected here;
    routes reach it through ``app.state``.

    Args:
        service_instance: Shortener service instance, owning its store and cache
        config: Configuration instance

    Returns:
        Configured FastAPI app
    """
    app = FastAPI(
        title="yaus",
        description="Deterministic URL shortener",
        version="1.0.0",
        docs_url="/api/docs",
        redoc_url="/api/redoc",
    )

    app.state.service = service_instance
    app.state.config = config

    app.add_middleware(LoggingMiddleware)

    app.include_router(api_router, prefix="/api", tags=["API"])
    # Registered last: GET /{locator} matches any single path segment
    app.include_router(links_router, tags=["Links"])

    return app

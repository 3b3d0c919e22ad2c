"""FastAPI application factory.

Creates the FastAPI app with lifespan management, exception handlers,
and OpenAPI metadata.
"""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from loguru import logger

from audience_api.core.config import get_settings
from audience_api.core.logging import setup_logging
from audience_api.lib.counting_client import CountingServiceClient
from audience_api.services.dimension_service import DimensionCache


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None]:
    """Manage application lifecycle: open the counting client on startup, close it on shutdown."""
    settings = get_settings()
    setup_logging(settings.log_level, log_dir=settings.log_dir)

    app.state.counting_client = CountingServiceClient(
        settings.counting_api_base_url,
        api_key=settings.counting_api_key,
        timeout=settings.counting_api_timeout,
    )
    app.state.dimension_cache = DimensionCache(ttl_seconds=settings.dimension_cache_ttl)
    logger.info("Counting service client ready for {}", settings.counting_api_base_url)

    yield

    await app.state.counting_client.close()
    app.state.dimension_cache.clear()


def create_app() -> FastAPI:
    """Create and configure the FastAPI application.

    Returns:
        Configured FastAPI application instance.
    """
    settings = get_settings()

    app = FastAPI(
        title="Audience API",
        description="Audience counts and breakdowns aggregated from the counting service",
        version="0.1.0",
        lifespan=lifespan,
    )

    # Register exception handlers
    @app.exception_handler(ValueError)
    async def value_error_handler(request: Request, exc: ValueError) -> JSONResponse:
        return JSONResponse(
            status_code=400,
            content={"detail": str(exc)},
        )

    # Register middleware and routers
    from audience_api.api.router import create_router, setup_middleware

    setup_middleware(app, settings)
    app.include_router(create_router(settings))

    return app

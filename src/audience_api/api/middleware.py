"""CORS and request timing middleware."""

import time
from typing import Any

from fastapi import FastAPI, Request, Response
from fastapi.middleware.cors import CORSMiddleware
from loguru import logger
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint

from audience_api.core.config import Settings


def setup_cors(app: FastAPI, settings: Settings) -> None:
    """Configure CORS middleware for the dashboard origins.

    Args:
        app: The FastAPI application.
        settings: Application settings.
    """
    kwargs: dict[str, Any] = {
        "allow_methods": ["GET", "POST", "OPTIONS"],
        "allow_headers": ["*"],
    }
    if settings.cors_origin_list:
        kwargs["allow_origins"] = settings.cors_origin_list
    app.add_middleware(CORSMiddleware, **kwargs)


class RequestTimingMiddleware(BaseHTTPMiddleware):
    """Log method, path, status, and duration of every request."""

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        """Time the downstream handler and log the outcome.

        Args:
            request: The incoming request.
            call_next: The next middleware/handler.

        Returns:
            The handler's response with an ``X-Response-Time`` header.
        """
        started = time.perf_counter()
        response = await call_next(request)
        elapsed = time.perf_counter() - started
        response.headers["X-Response-Time"] = f"{elapsed:.3f}s"
        logger.info(
            "{} {} -> {} in {:.2f}s",
            request.method,
            request.url.path,
            response.status_code,
            elapsed,
        )
        return response

"""FastAPI dependency injection for the counting client and shared caches.

Both objects are created once in the application lifespan and stored on
``app.state``; request handlers receive them through these dependencies.
"""

from fastapi import HTTPException, Request, status

from audience_api.lib.counting_client import CountingServiceClient
from audience_api.services.dimension_service import DimensionCache


def get_counting_client(request: Request) -> CountingServiceClient:
    """Return the application's counting service client.

    Raises:
        HTTPException: If the client was not initialized.
    """
    client: CountingServiceClient | None = getattr(request.app.state, "counting_client", None)
    if client is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Counting service client is not initialized",
        )
    return client


def get_dimension_cache(request: Request) -> DimensionCache | None:
    """Return the application's dimension cache, if any."""
    return getattr(request.app.state, "dimension_cache", None)

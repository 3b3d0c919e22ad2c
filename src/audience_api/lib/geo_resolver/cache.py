"""Request-scoped memo for geography-view lookups."""

import asyncio
from collections.abc import Awaitable, Callable

from loguru import logger

from audience_api.lib.counting_client.types import GeoView

ViewFetcher = Callable[[str, str, str], Awaitable[list[GeoView]]]
ViewKey = tuple[str, str, str]


class GeoViewCache:
    """Memoizes geography views by ``(typeCode, geoCode, subGeoCode)``.

    Create one per incoming request and ``clear()`` it when the request ends.
    Concurrent lookups of the same key share a single in-flight fetch.

    Args:
        fetch_view: Coroutine function performing the upstream view call.
    """

    def __init__(self, fetch_view: ViewFetcher) -> None:
        self._fetch_view = fetch_view
        self._views: dict[ViewKey, asyncio.Future[list[GeoView]]] = {}

    def __len__(self) -> int:
        return len(self._views)

    async def get_view(self, type_code: str, geo_code: str = "", sub_geo_code: str = "") -> list[GeoView]:
        """Return the view for a scope, fetching it at most once."""
        key = (type_code, geo_code, sub_geo_code)
        pending = self._views.get(key)
        if pending is None:
            logger.debug("Fetching geo view {}/{}", type_code, geo_code or "ALL")
            pending = asyncio.ensure_future(self._fetch_view(type_code, geo_code, sub_geo_code))
            self._views[key] = pending
        else:
            logger.debug("Using cached geo view {}/{}", type_code, geo_code or "ALL")
        return await asyncio.shield(pending)

    def clear(self) -> None:
        """Drop every memoized view, cancelling fetches still in flight."""
        for pending in self._views.values():
            if not pending.done():
                pending.cancel()
        self._views.clear()

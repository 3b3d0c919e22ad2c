"""Async HTTP client for the upstream audience-counting service."""

from __future__ import annotations

import time
from typing import Any

import httpx
from loguru import logger

from audience_api.lib.counting_client.types import AudienceCountRequest, GeoView


class CountingServiceError(Exception):
    """Raised when the counting service fails or returns an unusable body.

    Args:
        message: Human-readable error description.
        status_code: Optional HTTP status code from the service.
    """

    def __init__(self, message: str, status_code: int | None = None) -> None:
        self.message = message
        self.status_code = status_code
        super().__init__(message)


class CountingServiceClient:
    """Talks to the audience-counting API.

    Responses from the count endpoint are returned as untrusted JSON; the
    breakdown library is responsible for finding counts inside them.

    Args:
        base_url: Service root URL.
        api_key: Value sent in the ``X-API-Key`` header.
        timeout: Request timeout in seconds.
        transport: Optional httpx transport (used by tests).
    """

    def __init__(
        self,
        base_url: str,
        api_key: str = "",
        timeout: float = 60.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._client = httpx.AsyncClient(
            base_url=base_url,
            headers={"Content-Type": "application/json", "X-API-Key": api_key},
            timeout=timeout,
            transport=transport,
        )

    async def get_audience_count(self, request: AudienceCountRequest) -> Any:
        """POST ``/api/Audience/count`` for one geography."""
        return await self._request("POST", "/api/Audience/count", body=request.to_payload())

    async def get_geographic_view(self, type_code: str, geo_code: str = "", sub_geo_code: str = "") -> list[GeoView]:
        """POST ``/api/Geo/view`` and parse the rows.

        OData-style ``{"value": [...]}`` envelopes are unwrapped.
        """
        data = await self._request(
            "POST",
            "/api/Geo/view",
            body={"typeCode": type_code, "geoCode": geo_code, "subGeoCode": sub_geo_code},
        )
        if isinstance(data, dict) and isinstance(data.get("value"), list):
            data = data["value"]
        if not isinstance(data, list):
            logger.warning("Geo view {}/{} returned a non-list body", type_code, geo_code or "ALL")
            return []

        views = [GeoView.from_raw(row) for row in data]
        return [view for view in views if view is not None]

    async def get_dimensions(self, dimension_type: str) -> list[dict[str, Any]]:
        """GET ``/api/Dim/{dimension_type}`` (id/name items)."""
        data = await self._request("GET", f"/api/Dim/{dimension_type}")
        if not isinstance(data, list):
            return []
        return [item for item in data if isinstance(item, dict)]

    async def close(self) -> None:
        """Close the underlying HTTP client."""
        await self._client.aclose()

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    async def _request(self, method: str, path: str, body: dict[str, Any] | None = None) -> Any:
        """Send one request and decode the JSON body."""
        started = time.perf_counter()
        logger.debug("Counting API request: {} {} {}", method, path, body or "")
        try:
            response = await self._client.request(method, path, json=body)
            response.raise_for_status()
            result = response.json()
        except httpx.TimeoutException as exc:
            msg = f"Counting API request timed out: {method} {path}"
            logger.error(msg)
            raise CountingServiceError(msg) from exc
        except httpx.HTTPStatusError as exc:
            logger.error(
                "Counting API error: {} {} for {} {}",
                exc.response.status_code,
                exc.response.reason_phrase,
                method,
                path,
            )
            raise CountingServiceError(
                f"API Error ({exc.response.status_code}): {exc.response.text}",
                status_code=exc.response.status_code,
            ) from exc
        except httpx.RequestError as exc:
            logger.error("Counting API request failed: {}", exc)
            raise CountingServiceError(f"Request failed: {exc}") from exc
        except ValueError as exc:
            logger.error("Counting API returned non-JSON response for {} {}", method, path)
            raise CountingServiceError(f"Invalid JSON response for {path}") from exc

        logger.debug("{} {} completed in {:.2f}s", method, path, time.perf_counter() - started)
        return result

"""Audience aggregation API endpoints.

POST /audience/combined-filters, POST /audience/geographic-options.
"""

from datetime import UTC, datetime
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, status
from loguru import logger

from audience_api.core.config import Settings, get_settings
from audience_api.core.dependencies import get_counting_client, get_dimension_cache
from audience_api.lib.counting_client import CountingServiceClient, CountingServiceError
from audience_api.lib.geo_resolver import GeoResolutionError, GeoSelection
from audience_api.schemas.audience import (
    CombinedFiltersRequest,
    CombinedFiltersResponse,
    GeographicOptionsRequest,
    GeographicOptionsResponse,
)
from audience_api.services.aggregation_service import aggregate_audience
from audience_api.services.dimension_service import DimensionCache
from audience_api.services.geographic_options_service import get_geographic_options

audience_router = APIRouter(prefix="/audience", tags=["audience"])


@audience_router.post(
    "/combined-filters",
    response_model=CombinedFiltersResponse,
)
async def combined_filters(
    body: CombinedFiltersRequest,
    client: Annotated[CountingServiceClient, Depends(get_counting_client)],
    dimension_cache: Annotated[DimensionCache | None, Depends(get_dimension_cache)],
    settings: Annotated[Settings, Depends(get_settings)],
) -> CombinedFiltersResponse:
    """Combined counts and breakdowns for a geography and demographic selection."""
    selection = GeoSelection.from_mapping(body.geographicFilters.model_dump())
    try:
        result = await aggregate_audience(
            client,
            body.universeFields,
            selection,
            body.demographicFilters.model_dump(),
            body.requestedLevels,
            top_n=settings.geography_top_n,
            dimension_cache=dimension_cache,
        )
    except GeoResolutionError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    except CountingServiceError as exc:
        logger.error("Combined filters aggregation failed: {}", exc)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Failed to get combined counts: {exc}",
        ) from exc

    payload = result.to_payload()
    return CombinedFiltersResponse(
        combinedCounts=payload["combinedCounts"],
        filteredBreakdowns=payload["filteredBreakdowns"],
        timestamp=datetime.now(UTC),
    )


@audience_router.post(
    "/geographic-options",
    response_model=GeographicOptionsResponse,
)
async def geographic_options(
    body: GeographicOptionsRequest,
    client: Annotated[CountingServiceClient, Depends(get_counting_client)],
    dimension_cache: Annotated[DimensionCache | None, Depends(get_dimension_cache)],
) -> GeographicOptionsResponse:
    """Selectable geographies with audience counts for the selected states."""
    try:
        options = await get_geographic_options(
            client,
            body.selectedStates,
            body.universeFields,
            body.demographicFilters.model_dump(),
            dimension_cache=dimension_cache,
        )
    except GeoResolutionError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    except CountingServiceError as exc:
        logger.error("Geographic options lookup failed: {}", exc)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Failed to get geographic options: {exc}",
        ) from exc

    return GeographicOptionsResponse(
        geographicOptions=options,
        operator=body.operator,
        timestamp=datetime.now(UTC),
    )

"""Geographic options service — selectable geographies with audience counts."""

from collections.abc import Mapping

from audience_api.lib.breakdown import (
    GeographyCounts,
    GeographyLevel,
    extract_geography,
    finalize_geography,
    pick_geography_levels,
)
from audience_api.lib.counting_client import AudienceCountRequest, CountingServiceClient, build_universe_list
from audience_api.lib.geo_resolver import GeoResolutionError, GeoViewCache, resolve_primary_geo_id
from audience_api.services.dimension_service import DimensionCache, resolve_demographic_ids

OPTION_LEVELS: list[str] = [
    GeographyLevel.STATE,
    GeographyLevel.COUNTY,
    GeographyLevel.DMA,
    GeographyLevel.CONGRESSIONAL,
    GeographyLevel.STATE_SENATE_DISTRICT,
    GeographyLevel.STATE_HOUSE_DISTRICT,
]

# Response key for each option level
OPTION_KEYS: dict[str, str] = {
    GeographyLevel.STATE: "states",
    GeographyLevel.COUNTY: "counties",
    GeographyLevel.DMA: "dmas",
    GeographyLevel.CONGRESSIONAL: "congressionalDistricts",
    GeographyLevel.STATE_SENATE_DISTRICT: "stateSenateDistricts",
    GeographyLevel.STATE_HOUSE_DISTRICT: "stateHouseDistricts",
}


async def get_geographic_options(
    client: CountingServiceClient,
    selected_states: list[str],
    universe_fields: list[str] | None = None,
    demographic_filters: Mapping[str, list[str]] | None = None,
    *,
    dimension_cache: DimensionCache | None = None,
) -> dict[str, GeographyCounts]:
    """Counts for every selectable geography under the primary geo id.

    Entries are not limited to a top-N, since they feed selection dropdowns.

    Returns:
        Option key (``states``, ``counties``, ...) to name-to-count map.

    Raises:
        GeoResolutionError: If neither the state nor the national view resolves.
        CountingServiceError: If an upstream call fails.
    """
    geo_cache = GeoViewCache(client.get_geographic_view)
    try:
        demographic_ids = await resolve_demographic_ids(demographic_filters, client, dimension_cache)
        geo_id = await resolve_primary_geo_id(selected_states, geo_cache)
    finally:
        geo_cache.clear()

    if geo_id is None:
        msg = "Unable to resolve geoId for geographic options request"
        raise GeoResolutionError(msg)

    response = await client.get_audience_count(
        AudienceCountRequest(
            geo_id=geo_id,
            demographic_ids=demographic_ids,
            universe_list=build_universe_list(universe_fields or []),
        )
    )
    geography = finalize_geography(pick_geography_levels(extract_geography(response), OPTION_LEVELS), OPTION_LEVELS)
    return {OPTION_KEYS[level]: geography[level] for level in OPTION_LEVELS}

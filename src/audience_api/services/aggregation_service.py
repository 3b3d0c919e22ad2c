"""Aggregation service — fan out audience counts and assemble breakdowns.

One call resolves the geography selection to geo ids, issues one audience
count per geo id in parallel, sums the counts, and derives the geography,
demographic, vote-history, and political breakdowns from the same
responses. Any upstream failure fails the whole aggregation.
"""

import asyncio
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from loguru import logger

from audience_api.lib.breakdown import (
    DEFAULT_TOP_N,
    DemographicCategory,
    GeographyCounts,
    GeographyLevel,
    PoliticalAffiliation,
    VoteHistoryCategory,
    classify_political_affiliation,
    extract_count,
    extract_demographics,
    extract_geography,
    extract_named_count,
    extract_vote_history,
    finalize_geography,
    limit_geography_entries,
    merge_geography_maps,
    pick_geography_levels,
)
from audience_api.lib.breakdown.counts import Count
from audience_api.lib.breakdown.demographics import Breakdown
from audience_api.lib.counting_client import (
    AudienceCountRequest,
    CountingServiceClient,
    DemographicIds,
    build_universe_list,
)
from audience_api.lib.geo_resolver import GeoResolutionError, GeoSelection, GeoViewCache, resolve_geo_ids
from audience_api.services.dimension_service import DimensionCache, resolve_demographic_ids

DEFAULT_REQUESTED_LEVELS: tuple[str, ...] = (GeographyLevel.STATE, GeographyLevel.COUNTY, GeographyLevel.DMA)

TOTAL_KEY = "total"
CELL_PHONE_KEY = "hasCellPhoneCount"
HOUSEHOLD_KEY = "householdCount"

CELL_PHONE_COUNT_FIELDS: tuple[str, ...] = ("hasCellPhoneCount", "HasCellPhoneCount", "cellPhoneCount", "CellPhoneCount")
HOUSEHOLD_COUNT_FIELDS: tuple[str, ...] = ("householdCount", "HouseholdCount", "households", "Households")


@dataclass
class AggregationResult:
    """Combined counts and breakdowns for one request."""

    counts: dict[str, int]
    geography: GeographyCounts
    demographics: dict[str, Breakdown]
    political: PoliticalAffiliation
    general_vote_history: Breakdown
    primary_vote_history: Breakdown
    geo_ids: list[int] = field(default_factory=list)

    def to_payload(self) -> dict[str, Any]:
        """Serialize to the ``{combinedCounts, filteredBreakdowns}`` shape.

        ``engagement`` and ``mediaConsumption`` are legacy aliases of the
        general and primary vote-history breakdowns.
        """
        return {
            "combinedCounts": dict(self.counts),
            "filteredBreakdowns": {
                "demographics": self.demographics,
                "engagement": self.general_vote_history,
                "political": self.political.to_dict(),
                "mediaConsumption": self.primary_vote_history,
                "geography": self.geography,
                "generalVoteHistory": self.general_vote_history,
                "primaryVoteHistory": self.primary_vote_history,
            },
        }


def _as_int(value: Count | None) -> int:
    return int(value) if value is not None else 0


def levels_to_fetch(requested_levels: list[str] | None, selection: GeoSelection) -> list[str]:
    """Requested levels plus any district level present in the selection.

    Empty requests default to state, county, and DMA.
    """
    levels = [str(level) for level in (requested_levels or DEFAULT_REQUESTED_LEVELS)]
    for level in selection.selected_district_levels():
        if level not in levels:
            logger.debug("Adding selected district level {} to requested levels", level)
            levels.append(level)
    return levels


def validate_universe_fields(universe_fields: Any) -> list[str]:
    """Reject a universe field list that is not a list of strings.

    Raises:
        ValueError: If the input is not a list of strings.
    """
    if not isinstance(universe_fields, list | tuple) or not all(isinstance(f, str) for f in universe_fields):
        msg = "universeFields must be an array"
        raise ValueError(msg)
    return list(universe_fields)


async def _fan_out_counts(
    client: CountingServiceClient,
    geo_ids: list[int],
    demographic_ids: DemographicIds,
    universe_list: str,
) -> list[Any]:
    return await asyncio.gather(
        *(
            client.get_audience_count(
                AudienceCountRequest(geo_id=geo_id, demographic_ids=demographic_ids, universe_list=universe_list)
            )
            for geo_id in geo_ids
        )
    )


async def _field_total(
    client: CountingServiceClient,
    geo_ids: list[int],
    demographic_ids: DemographicIds,
    universe_field: str,
) -> int:
    responses = await _fan_out_counts(client, geo_ids, demographic_ids, build_universe_list([universe_field]))
    return sum(_as_int(extract_count(response)) for response in responses)


async def aggregate_audience(
    client: CountingServiceClient,
    universe_fields: list[str],
    geo_selection: GeoSelection,
    demographic_filters: Mapping[str, list[str]] | None = None,
    requested_levels: list[str] | None = None,
    *,
    top_n: int = DEFAULT_TOP_N,
    dimension_cache: DimensionCache | None = None,
) -> AggregationResult:
    """Compute combined counts and breakdowns for an audience selection.

    Args:
        client: Counting service client.
        universe_fields: Audience fields combined into the count.
        geo_selection: UI geography selection.
        demographic_filters: Demographic category to selected names.
        requested_levels: Geography levels to return.
        top_n: Entries kept per geography level.
        dimension_cache: Optional shared dimension cache.

    Returns:
        The assembled aggregation.

    Raises:
        ValueError: If ``universe_fields`` is not a list of strings.
        GeoResolutionError: If the selection resolves to no geo ids.
        CountingServiceError: If any upstream call fails.
    """
    universe_fields = validate_universe_fields(universe_fields)
    levels = levels_to_fetch(requested_levels, geo_selection)
    geo_cache = GeoViewCache(client.get_geographic_view)

    try:
        demographic_ids = await resolve_demographic_ids(demographic_filters, client, dimension_cache)
        geo_ids = await resolve_geo_ids(geo_selection, geo_cache)
        if not geo_ids:
            raise GeoResolutionError
        logger.info("Aggregating {} universe field(s) across {} geo id(s)", len(universe_fields), len(geo_ids))

        responses = await _fan_out_counts(client, geo_ids, demographic_ids, build_universe_list(universe_fields))

        total = 0
        cell_phones = 0
        households = 0
        merged_geography: GeographyCounts = {}
        for response in responses:
            total += _as_int(extract_count(response))
            cell_phones += _as_int(extract_named_count(response, CELL_PHONE_COUNT_FIELDS))
            households += _as_int(extract_named_count(response, HOUSEHOLD_COUNT_FIELDS))
            merge_geography_maps(merged_geography, extract_geography(response))

        counts: dict[str, int] = {TOTAL_KEY: total}
        if len(universe_fields) == 1:
            counts[universe_fields[0]] = total
        elif universe_fields:
            field_totals = await asyncio.gather(
                *(_field_total(client, geo_ids, demographic_ids, universe_field) for universe_field in universe_fields)
            )
            counts.update(zip(universe_fields, field_totals, strict=True))
        counts[CELL_PHONE_KEY] = cell_phones
        counts[HOUSEHOLD_KEY] = households
    finally:
        geo_cache.clear()

    geography = limit_geography_entries(
        finalize_geography(pick_geography_levels(merged_geography, levels), levels),
        top_n,
    )
    demographics = extract_demographics(responses)
    vote_history = extract_vote_history(responses)

    return AggregationResult(
        counts=counts,
        geography=geography,
        demographics=demographics,
        political=classify_political_affiliation(demographics[DemographicCategory.PARTY]),
        general_vote_history=vote_history[VoteHistoryCategory.GENERAL],
        primary_vote_history=vote_history[VoteHistoryCategory.PRIMARY],
        geo_ids=geo_ids,
    )

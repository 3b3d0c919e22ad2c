"""Resolve a UI geography selection into upstream geo ids.

Exactly one strategy applies per selection, chosen in this priority order:
county (requires a state), congressional, state senate, state house, DMA,
state, then national.
"""

import asyncio
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, fields
from typing import Any

from audience_api.lib.breakdown.levels import DISTRICT_LEVELS, GEO_TYPE_CODES, GeographyLevel
from audience_api.lib.counting_client.types import GeoView
from audience_api.lib.geo_resolver.cache import GeoViewCache

UNRESOLVED_SELECTION_MESSAGE = "Unable to resolve geoIds for selection"


class GeoResolutionError(Exception):
    """Raised when a selection resolves to no geo ids."""

    def __init__(self, message: str = UNRESOLVED_SELECTION_MESSAGE) -> None:
        super().__init__(message)


def _as_tuple(values: Any) -> tuple[str, ...]:
    if not values:
        return ()
    if isinstance(values, str):
        return (values,)
    return tuple(str(value) for value in values if value is not None)


@dataclass(frozen=True)
class GeoSelection:
    """Raw geography values selected in the UI, per level."""

    state: tuple[str, ...] = ()
    county: tuple[str, ...] = ()
    dma: tuple[str, ...] = ()
    congressional: tuple[str, ...] = ()
    state_senate_district: tuple[str, ...] = ()
    state_house_district: tuple[str, ...] = ()

    @classmethod
    def from_mapping(cls, filters: Mapping[str, Any] | None) -> "GeoSelection":
        """Build from a ``geographicFilters`` mapping (camelCase keys)."""
        filters = filters or {}
        return cls(
            state=_as_tuple(filters.get("state")),
            county=_as_tuple(filters.get("county")),
            dma=_as_tuple(filters.get("dma")),
            congressional=_as_tuple(filters.get("congressional")),
            state_senate_district=_as_tuple(filters.get("stateSenateDistrict")),
            state_house_district=_as_tuple(filters.get("stateHouseDistrict")),
        )

    def values_for(self, level: GeographyLevel) -> tuple[str, ...]:
        """Selected values for a level (national has none)."""
        return {
            GeographyLevel.STATE: self.state,
            GeographyLevel.COUNTY: self.county,
            GeographyLevel.DMA: self.dma,
            GeographyLevel.CONGRESSIONAL: self.congressional,
            GeographyLevel.STATE_SENATE_DISTRICT: self.state_senate_district,
            GeographyLevel.STATE_HOUSE_DISTRICT: self.state_house_district,
        }.get(level, ())

    @property
    def first_state(self) -> str:
        return self.state[0] if self.state else ""

    @property
    def is_empty(self) -> bool:
        return not any(getattr(self, f.name) for f in fields(self))

    def selected_district_levels(self) -> list[GeographyLevel]:
        """District levels that have at least one selected value."""
        return [level for level in DISTRICT_LEVELS if self.values_for(level)]


# Scoped-view branches after the county branch, in priority order
_SCOPED_BRANCHES: tuple[GeographyLevel, ...] = (*DISTRICT_LEVELS, GeographyLevel.DMA)


def _dedupe(geo_ids: Iterable[int]) -> list[int]:
    return list(dict.fromkeys(geo_ids))


def _matching_ids(views: list[GeoView], selected: tuple[str, ...]) -> list[int]:
    return _dedupe(view.geo_id for view in views if view.matches(selected))


async def resolve_geo_ids(selection: GeoSelection, cache: GeoViewCache) -> list[int]:
    """Resolve a selection to the deduplicated geo ids to fan out over.

    Args:
        selection: The UI geography selection.
        cache: Request-scoped view cache used for every upstream lookup.

    Returns:
        Geo ids in upstream order; empty when nothing matched, which callers
        must treat as a hard failure.
    """
    if selection.county and selection.state:
        views = await cache.get_view(GEO_TYPE_CODES[GeographyLevel.COUNTY], selection.first_state)
        return _matching_ids(views, selection.county)

    for level in _SCOPED_BRANCHES:
        selected = selection.values_for(level)
        if selected:
            views = await cache.get_view(GEO_TYPE_CODES[level], selection.first_state)
            return _matching_ids(views, selected)

    if selection.state:
        state_code = GEO_TYPE_CODES[GeographyLevel.STATE]
        state_views = await asyncio.gather(*(cache.get_view(state_code, state) for state in selection.state))
        return _dedupe(views[0].geo_id for views in state_views if views)

    national = await cache.get_view(GEO_TYPE_CODES[GeographyLevel.NATIONAL])
    return [national[0].geo_id] if national else []


async def resolve_primary_geo_id(states: list[str] | tuple[str, ...], cache: GeoViewCache) -> int | None:
    """Geo id of the first selected state, else of the nation.

    Returns:
        The geo id, or None when neither view has rows.
    """
    if states:
        state_views = await cache.get_view(GEO_TYPE_CODES[GeographyLevel.STATE], states[0])
        if state_views:
            return state_views[0].geo_id

    national = await cache.get_view(GEO_TYPE_CODES[GeographyLevel.NATIONAL])
    return national[0].geo_id if national else None

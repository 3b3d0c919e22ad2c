"""Dimension service — translate demographic filter names into upstream ids."""

import asyncio
import time
from collections.abc import Callable, Mapping
from typing import Any

from loguru import logger

from audience_api.lib.breakdown.demographics import DemographicCategory
from audience_api.lib.counting_client import CountingServiceClient, DemographicIds

# Demographic filter key to upstream dimension type
DIMENSION_TYPES: dict[str, str] = {
    DemographicCategory.GENDER: "gender",
    DemographicCategory.AGE: "agerange",
    DemographicCategory.ETHNICITY: "ethnicity",
    DemographicCategory.INCOME: "income",
    DemographicCategory.EDUCATION: "education",
    DemographicCategory.PARTY: "party",
}


class DimensionCache:
    """Time-boxed cache of dimension item lists, keyed by dimension type.

    Owned by the application (see ``main.lifespan``) and injected into
    requests.

    Args:
        ttl_seconds: Entry lifetime. ``0`` disables caching.
        clock: Monotonic time source (injectable for tests).
    """

    def __init__(self, ttl_seconds: float = 3600, clock: Callable[[], float] = time.monotonic) -> None:
        self._ttl = ttl_seconds
        self._clock = clock
        self._entries: dict[str, tuple[float, list[dict[str, Any]]]] = {}

    def get(self, dimension_type: str) -> list[dict[str, Any]] | None:
        entry = self._entries.get(dimension_type)
        if entry is None:
            return None
        stored_at, items = entry
        if self._clock() - stored_at >= self._ttl:
            del self._entries[dimension_type]
            return None
        return items

    def set(self, dimension_type: str, items: list[dict[str, Any]]) -> None:
        self._entries[dimension_type] = (self._clock(), items)

    def clear(self) -> None:
        self._entries.clear()


async def get_dimension_items(
    client: CountingServiceClient,
    dimension_type: str,
    cache: DimensionCache | None = None,
) -> list[dict[str, Any]]:
    """Dimension items for a type, served from ``cache`` while fresh."""
    if cache is not None:
        cached = cache.get(dimension_type)
        if cached is not None:
            logger.debug("Using cached dimensions for {}", dimension_type)
            return cached

    logger.debug("Fetching dimensions for {}", dimension_type)
    items = await client.get_dimensions(dimension_type)
    if cache is not None:
        cache.set(dimension_type, items)
    return items


def _ids_for_names(items: list[dict[str, Any]], names: list[str]) -> str:
    return ",".join(str(item["id"]) for item in items if item.get("name") in names and item.get("id") is not None)


async def resolve_demographic_ids(
    demographic_filters: Mapping[str, list[str]] | None,
    client: CountingServiceClient,
    cache: DimensionCache | None = None,
) -> DemographicIds:
    """Map selected demographic names to comma-joined dimension ids.

    Only dimensions with a non-empty selection are fetched (in parallel).
    Names with no matching dimension item are dropped.

    Args:
        demographic_filters: Category to selected value names.
        client: Counting service client.
        cache: Optional dimension cache.

    Returns:
        The ids per category; empty strings where nothing is selected.
    """
    filters = {category: list(values) for category, values in (demographic_filters or {}).items() if values}
    selected = [category for category in DIMENSION_TYPES if filters.get(category)]
    if not selected:
        return DemographicIds()

    item_lists = await asyncio.gather(
        *(get_dimension_items(client, DIMENSION_TYPES[category], cache) for category in selected)
    )
    ids = {
        category: _ids_for_names(items, filters[category]) for category, items in zip(selected, item_lists, strict=True)
    }

    return DemographicIds(
        gender_ids=ids.get(DemographicCategory.GENDER, ""),
        age_range_ids=ids.get(DemographicCategory.AGE, ""),
        ethnicity_ids=ids.get(DemographicCategory.ETHNICITY, ""),
        income_ids=ids.get(DemographicCategory.INCOME, ""),
        education_ids=ids.get(DemographicCategory.EDUCATION, ""),
        party_ids=ids.get(DemographicCategory.PARTY, ""),
    )

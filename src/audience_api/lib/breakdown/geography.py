"""Extract, merge, and finalize geography breakdowns from audience responses.

``GeographyCounts`` maps a normalized level (``state``, ``county``, ...) to a
mapping of entry name to accumulated count. A level key is only present once
an entry has been recorded for it, except after ``finalize_geography`` which
materializes every requested level.
"""

from typing import Any

from audience_api.lib.breakdown.counts import (
    Count,
    ResponseShape,
    classify_shape,
    extract_count_from_fields,
    extract_geography_count,
    normalize_count_value,
)
from audience_api.lib.breakdown.levels import GeographyLevel, normalize_geography_level

GeographyCounts = dict[str, dict[str, int]]

DEFAULT_TOP_N = 5

NAME_FIELDS: tuple[str, ...] = ("subGeoCode", "geoCode", "code", "name", "description", "label", "title", "value")
ENTRY_LEVEL_FIELDS: tuple[str, ...] = ("level", "type", "typeCode", "category")
CHILD_COLLECTION_FIELDS: tuple[str, ...] = ("items", "values", "entries")
CONTAINER_FIELDS: tuple[str, ...] = ("geography", "geographicBreakdown", "geographicBreakdowns")

_KNOWN_LEVELS = frozenset(GeographyLevel)


def add_geography_value(
    target: GeographyCounts,
    level: str | None,
    name: str | None,
    count: Count | None,
) -> None:
    """Accumulate one ``(level, name)`` count, truncated to an integer.

    Missing, incomplete, or negative values are ignored.
    """
    if not level or not name or count is None or count < 0:
        return
    values = target.setdefault(level, {})
    values[name] = values.get(name, 0) + int(count)


def extract_geography_name(entry: Any) -> str | None:
    """Return the first usable name field of a breakdown entry."""
    if classify_shape(entry) is not ResponseShape.RECORD:
        return None
    for key in NAME_FIELDS:
        value = entry.get(key)
        if value and classify_shape(value) is ResponseShape.SCALAR:
            return str(value)
    return None


def _entry_level(entry: dict[str, Any]) -> str | None:
    for key in ENTRY_LEVEL_FIELDS:
        if entry.get(key):
            return normalize_geography_level(entry[key])
    return None


def _traverse_entry(entry: Any, accumulator: GeographyCounts, hinted_level: str | None) -> None:
    if classify_shape(entry) is not ResponseShape.RECORD:
        return

    current_level = _entry_level(entry) or hinted_level
    add_geography_value(
        accumulator,
        current_level,
        extract_geography_name(entry),
        extract_geography_count(entry),
    )

    for key in CHILD_COLLECTION_FIELDS:
        if entry.get(key):
            traverse_geography_container(entry[key], accumulator, current_level)

    breakdown = entry.get("breakdown")
    shape = classify_shape(breakdown)
    if shape is ResponseShape.COLLECTION:
        traverse_geography_container(breakdown, accumulator, current_level)
    elif shape is ResponseShape.RECORD:
        for level_key, nested in breakdown.items():
            traverse_geography_container(
                nested,
                accumulator,
                normalize_geography_level(level_key) or current_level,
            )


def traverse_geography_container(
    container: Any,
    accumulator: GeographyCounts,
    hinted_level: str | None = None,
) -> None:
    """Walk a geography container and accumulate every entry found.

    Arrays are treated as lists of entries carrying ``hinted_level``. Objects
    are treated as level-keyed: each value is either an array of entries or a
    flat name-to-count map.

    Args:
        container: Array or object from the upstream response.
        accumulator: Counts to add to (mutated).
        hinted_level: Level inherited from the enclosing container.
    """
    shape = classify_shape(container)
    if shape is ResponseShape.COLLECTION:
        for entry in container:
            _traverse_entry(entry, accumulator, hinted_level)
        return
    if shape is not ResponseShape.RECORD:
        return

    for level_key, value in container.items():
        level = normalize_geography_level(level_key) or hinted_level
        value_shape = classify_shape(value)
        if value_shape is ResponseShape.COLLECTION:
            for entry in value:
                _traverse_entry(entry, accumulator, level)
        elif value_shape is ResponseShape.RECORD:
            for name, raw_count in value.items():
                add_geography_value(accumulator, level, str(name), normalize_count_value(raw_count))


def collect_geography_containers(response: Any) -> tuple[list[Any], list[Any]]:
    """Gather the geography containers and related geo counts of a response.

    Args:
        response: Upstream audience-count response.

    Returns:
        ``(containers, related_counts)``.
    """
    containers: list[Any] = []
    related_counts: list[Any] = []

    shape = classify_shape(response)
    if shape is ResponseShape.COLLECTION:
        containers.append(response)
        return containers, related_counts
    if shape is not ResponseShape.RECORD:
        return containers, related_counts

    breakdowns = response.get("breakdowns")
    breakdowns_shape = classify_shape(breakdowns)
    if breakdowns_shape is ResponseShape.RECORD:
        for key, value in breakdowns.items():
            if not value:
                continue
            # Keep the key as a level hint when it names a level
            if normalize_geography_level(key) in _KNOWN_LEVELS:
                containers.append({key: value})
            else:
                containers.append(value)
    elif breakdowns_shape is ResponseShape.COLLECTION:
        containers.append(breakdowns)

    for key in CONTAINER_FIELDS:
        if response.get(key):
            containers.append(response[key])

    related = response.get("relatedGeoCounts")
    if classify_shape(related) is ResponseShape.COLLECTION:
        related_counts.extend(related)

    return containers, related_counts


def _add_related_geo_counts(related_counts: list[Any], accumulator: GeographyCounts) -> None:
    for entry in related_counts:
        if classify_shape(entry) is not ResponseShape.RECORD:
            continue
        level = normalize_geography_level(entry.get("geoTypeCode") or entry.get("level"))
        add_geography_value(
            accumulator,
            level,
            extract_geography_name(entry),
            extract_count_from_fields(entry),
        )


def extract_geography(response: Any) -> GeographyCounts:
    """Extract the geography breakdown from one audience-count response.

    Args:
        response: Upstream response of any shape.

    Returns:
        Level to name-to-count mapping (empty when nothing was recognized).
    """
    accumulator: GeographyCounts = {}
    containers, related_counts = collect_geography_containers(response)
    for container in containers:
        traverse_geography_container(container, accumulator)
    _add_related_geo_counts(related_counts, accumulator)
    return accumulator


def merge_geography_maps(target: GeographyCounts, addition: GeographyCounts | None) -> GeographyCounts:
    """Add every count in ``addition`` onto ``target`` in place.

    Returns:
        ``target``, for chaining.
    """
    if not addition:
        return target
    for level, values in addition.items():
        for name, count in values.items():
            add_geography_value(target, level, name, count)
    return target


def pick_geography_levels(geography: GeographyCounts | None, allowed_levels: list[str] | None) -> GeographyCounts:
    """Return a copy holding only the allowed levels present in the source.

    An empty or missing ``allowed_levels`` keeps every level.
    """
    if not geography:
        return {}
    if not allowed_levels:
        return {level: dict(values) for level, values in geography.items()}
    return {level: dict(geography[level]) for level in allowed_levels if level in geography}


def finalize_geography(geography: GeographyCounts | None, requested_levels: list[str] | None) -> GeographyCounts:
    """Return a copy with exactly the requested levels, empty where absent.

    When ``requested_levels`` is empty every level of the source is kept.
    """
    geography = geography or {}
    levels = requested_levels or list(geography)
    return {level: dict(geography.get(level, {})) for level in levels}


def limit_geography_entries(geography: GeographyCounts | None, top_n: int = DEFAULT_TOP_N) -> GeographyCounts:
    """Keep the ``top_n`` largest entries of every level.

    Sorting is stable, so ties keep their original order. ``top_n <= 0``
    returns an unmodified copy.
    """
    if not geography:
        return {}
    if top_n <= 0:
        return {level: dict(values) for level, values in geography.items()}

    limited: GeographyCounts = {}
    for level, values in geography.items():
        ranked = sorted(values.items(), key=lambda item: item[1], reverse=True)
        limited[level] = dict(ranked[:top_n])
    return limited


def is_geography_empty(geography: GeographyCounts | None) -> bool:
    """Return True when no level holds any entry."""
    if not geography:
        return True
    return all(not values for values in geography.values())

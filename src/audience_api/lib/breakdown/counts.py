"""Locate numeric person counts inside loosely-shaped upstream responses.

The counting service places its counts at varying depths and under several
field-name variants. Every lookup here walks an explicit priority list so the
search order stays fixed and testable:

1. ``PRIMARY_COUNT_FIELDS`` directly on the object.
2. ``NESTED_CONTAINER_KEYS``, recursing with the same fallback setting.
3. ``SECONDARY_COUNT_FIELDS`` (fallback only).
4. Every other object-valued property, recursing without fallback.

A malformed shape is never an error; it yields ``None``.
"""

import math
from enum import StrEnum
from typing import Any

Count = int | float

PRIMARY_COUNT_FIELDS: tuple[str, ...] = ("personCount", "PersonCount", "personcount")
SECONDARY_COUNT_FIELDS: tuple[str, ...] = ("count", "Count", "total", "Total", "value", "Value")
NESTED_CONTAINER_KEYS: tuple[str, ...] = (
    "result",
    "Result",
    "data",
    "Data",
    "payload",
    "Payload",
    "response",
    "Response",
    "body",
    "Body",
)


class ResponseShape(StrEnum):
    """Recognized shapes of an untrusted upstream value."""

    MISSING = "missing"
    SCALAR = "scalar"
    RECORD = "record"
    COLLECTION = "collection"
    OPAQUE = "opaque"


def classify_shape(value: Any) -> ResponseShape:
    """Tag an upstream value with the shape the extractors dispatch on."""
    if value is None:
        return ResponseShape.MISSING
    if isinstance(value, bool):
        return ResponseShape.OPAQUE
    if isinstance(value, int | float | str):
        return ResponseShape.SCALAR
    if isinstance(value, dict):
        return ResponseShape.RECORD
    if isinstance(value, list | tuple):
        return ResponseShape.COLLECTION
    return ResponseShape.OPAQUE


def normalize_count_value(raw: Any) -> Count | None:
    """Convert a raw count to a number.

    Strings have thousands separators stripped and are parsed as floats.
    Non-finite or unparsable values are treated as absent.

    Args:
        raw: Candidate count value.

    Returns:
        The numeric count (integral values as ``int``), or None.
    """
    if raw is None or isinstance(raw, bool):
        return None
    if isinstance(raw, int):
        return raw
    if isinstance(raw, float):
        numeric = raw
    elif isinstance(raw, str):
        cleaned = raw.replace(",", "").strip()
        if not cleaned:
            return None
        try:
            numeric = float(cleaned)
        except ValueError:
            return None
    else:
        return None

    if not math.isfinite(numeric):
        return None
    return int(numeric) if numeric.is_integer() else numeric


def _count_by_fields(source: dict[str, Any], fields: tuple[str, ...]) -> Count | None:
    for key in fields:
        if key in source:
            numeric = normalize_count_value(source[key])
            if numeric is not None:
                return numeric
    return None


def extract_count_from_fields(source: Any, use_fallback: bool = True) -> Count | None:
    """Read a count from the object's own fields only (no nested descent).

    Args:
        source: Upstream object or scalar.
        use_fallback: Also try ``SECONDARY_COUNT_FIELDS``.

    Returns:
        The count, or None when no listed field holds a number.
    """
    shape = classify_shape(source)
    if shape is ResponseShape.SCALAR:
        return normalize_count_value(source)
    if shape is not ResponseShape.RECORD:
        return None

    preferred = _count_by_fields(source, PRIMARY_COUNT_FIELDS)
    if preferred is not None:
        return preferred
    if use_fallback:
        return _count_by_fields(source, SECONDARY_COUNT_FIELDS)
    return None


def extract_count(source: Any, allow_fallback: bool = True) -> Count | None:
    """Find the person count anywhere in an upstream response.

    Args:
        source: Upstream response (any shape).
        allow_fallback: Permit secondary field names and a descent into
            arbitrary object-valued properties.

    Returns:
        The first count found in priority order, or None. Callers that need a
        default substitute ``0`` themselves.
    """
    shape = classify_shape(source)
    if shape is ResponseShape.SCALAR:
        return normalize_count_value(source)
    if shape is not ResponseShape.RECORD:
        return None

    preferred = _count_by_fields(source, PRIMARY_COUNT_FIELDS)
    if preferred is not None:
        return preferred

    for key in NESTED_CONTAINER_KEYS:
        if key in source:
            nested = extract_count(source[key], allow_fallback)
            if nested is not None:
                return nested

    if not allow_fallback:
        return None

    fallback = _count_by_fields(source, SECONDARY_COUNT_FIELDS)
    if fallback is not None:
        return fallback

    # Arbitrary properties only match primary fields
    for key, value in source.items():
        if key in NESTED_CONTAINER_KEYS or classify_shape(value) is not ResponseShape.RECORD:
            continue
        nested = extract_count(value, allow_fallback=False)
        if nested is not None:
            return nested

    return None


def extract_named_count(source: Any, fields: tuple[str, ...]) -> Count | None:
    """Find a specific auxiliary count (e.g. household count).

    Tries ``fields`` on the object, then inside the nested containers.

    Args:
        source: Upstream response.
        fields: Field-name variants in priority order.

    Returns:
        The count, or None.
    """
    if classify_shape(source) is not ResponseShape.RECORD:
        return None

    direct = _count_by_fields(source, fields)
    if direct is not None:
        return direct

    for key in NESTED_CONTAINER_KEYS:
        if key in source:
            nested = extract_named_count(source[key], fields)
            if nested is not None:
                return nested
    return None


def extract_geography_count(entry: Any) -> Count | None:
    """Read the count of a single geography breakdown entry.

    Preferred fields win, then the ``value`` field and nested containers are
    searched recursively, then the secondary field names.

    Args:
        entry: A breakdown entry (or a bare scalar).

    Returns:
        The count, or None.
    """
    if classify_shape(entry) is not ResponseShape.RECORD:
        return extract_count_from_fields(entry)

    preferred = extract_count_from_fields(entry, use_fallback=False)
    if preferred is not None:
        return preferred

    for key in ("value", *NESTED_CONTAINER_KEYS):
        if key in entry:
            nested = extract_geography_count(entry[key])
            if nested is not None:
                return nested

    return _count_by_fields(entry, SECONDARY_COUNT_FIELDS)

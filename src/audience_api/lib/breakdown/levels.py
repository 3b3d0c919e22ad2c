"""Canonical geography levels and the alias table used to normalize raw labels."""

from enum import StrEnum


class GeographyLevel(StrEnum):
    """Geographic granularity of a breakdown entry."""

    NATIONAL = "national"
    STATE = "state"
    COUNTY = "county"
    DMA = "dma"
    CONGRESSIONAL = "congressional"
    STATE_SENATE_DISTRICT = "stateSenateDistrict"
    STATE_HOUSE_DISTRICT = "stateHouseDistrict"


GEOGRAPHY_LEVEL_ALIASES: dict[str, GeographyLevel] = {
    "state": GeographyLevel.STATE,
    "states": GeographyLevel.STATE,
    "st": GeographyLevel.STATE,
    "usstate": GeographyLevel.STATE,
    "county": GeographyLevel.COUNTY,
    "counties": GeographyLevel.COUNTY,
    "cty": GeographyLevel.COUNTY,
    "parish": GeographyLevel.COUNTY,
    "dma": GeographyLevel.DMA,
    "dmas": GeographyLevel.DMA,
    "stdma": GeographyLevel.DMA,
    "media": GeographyLevel.DMA,
    "congressional": GeographyLevel.CONGRESSIONAL,
    "cd": GeographyLevel.CONGRESSIONAL,
    "congressionaldistrict": GeographyLevel.CONGRESSIONAL,
    "statesenatedistrict": GeographyLevel.STATE_SENATE_DISTRICT,
    "ssd": GeographyLevel.STATE_SENATE_DISTRICT,
    "statehousedistrict": GeographyLevel.STATE_HOUSE_DISTRICT,
    "shd": GeographyLevel.STATE_HOUSE_DISTRICT,
    "national": GeographyLevel.NATIONAL,
    "nat": GeographyLevel.NATIONAL,
}

# Last-resort fuzzy arm, checked in order. "state" must stay last since
# "statesenate..." and "statehouse..." labels also contain it.
_SUBSTRING_FALLBACKS: tuple[tuple[tuple[str, ...], GeographyLevel], ...] = (
    (("senate",), GeographyLevel.STATE_SENATE_DISTRICT),
    (("house",), GeographyLevel.STATE_HOUSE_DISTRICT),
    (("congress",), GeographyLevel.CONGRESSIONAL),
    (("county", "parish"), GeographyLevel.COUNTY),
    (("dma",), GeographyLevel.DMA),
    (("state",), GeographyLevel.STATE),
)

# Upstream geography-view type codes
GEO_TYPE_CODES: dict[GeographyLevel, str] = {
    GeographyLevel.NATIONAL: "NAT",
    GeographyLevel.STATE: "ST",
    GeographyLevel.COUNTY: "CTY",
    GeographyLevel.CONGRESSIONAL: "CD",
    GeographyLevel.STATE_SENATE_DISTRICT: "SSD",
    GeographyLevel.STATE_HOUSE_DISTRICT: "SHD",
    GeographyLevel.DMA: "STDMA",
}

_LEVELS_BY_TYPE_CODE: dict[str, GeographyLevel] = {code: level for level, code in GEO_TYPE_CODES.items()}

DISTRICT_LEVELS: tuple[GeographyLevel, ...] = (
    GeographyLevel.CONGRESSIONAL,
    GeographyLevel.STATE_SENATE_DISTRICT,
    GeographyLevel.STATE_HOUSE_DISTRICT,
)


def normalize_geography_level(raw: object) -> str | None:
    """Map a raw upstream level label onto a canonical level name.

    Exact aliases are tried first, then the substring arm. The substring arm
    is fuzzy: any label containing ``"state"`` becomes
    ``state``, which can misclassify an unexpected upstream label. Labels
    matching neither arm pass through lower-cased so they still form their
    own level key.

    Args:
        raw: Level label as found in the response (usually a string).

    Returns:
        The canonical level (a ``GeographyLevel`` member), the lower-cased
        label when unrecognized, or None for empty input.
    """
    if raw is None or isinstance(raw, bool):
        return None
    key = str(raw).strip().lower()
    if not key:
        return None

    alias = GEOGRAPHY_LEVEL_ALIASES.get(key)
    if alias is not None:
        return alias

    for needles, level in _SUBSTRING_FALLBACKS:
        if any(needle in key for needle in needles):
            return level

    return key


def type_code_for_level(level: str) -> str:
    """Return the upstream view ``typeCode`` for a level (defaults to ``ST``)."""
    try:
        return GEO_TYPE_CODES[GeographyLevel(level)]
    except ValueError:
        return GEO_TYPE_CODES[GeographyLevel.STATE]


def level_for_type_code(type_code: str | None) -> GeographyLevel:
    """Return the level for an upstream ``typeCode`` (defaults to ``state``)."""
    if not type_code:
        return GeographyLevel.STATE
    return _LEVELS_BY_TYPE_CODE.get(type_code.upper(), GeographyLevel.STATE)

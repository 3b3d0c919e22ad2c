"""Demographic and vote-history breakdowns from audience-count responses.

Upstream breakdowns arrive as arrays of ``{name, personCount}`` entries. Each
category is converted to a name-to-count map and summed across the responses
of every geography fanned out to. "Unknown" buckets are dropped for every
demographic category except ethnicity; vote history is never filtered.
"""

import math
import re
from enum import StrEnum
from typing import Any

from audience_api.lib.breakdown.counts import NESTED_CONTAINER_KEYS, ResponseShape, classify_shape

Breakdown = dict[str, int]


class DemographicCategory(StrEnum):
    """Demographic dimension of a breakdown."""

    GENDER = "gender"
    AGE = "age"
    ETHNICITY = "ethnicity"
    EDUCATION = "education"
    INCOME = "income"
    PARTY = "party"


class VoteHistoryCategory(StrEnum):
    """Vote-history dimension of a breakdown."""

    GENERAL = "generalVoteHistory"
    PRIMARY = "primaryVoteHistory"


UNKNOWN_EXCLUDED_CATEGORIES: frozenset[str] = frozenset(
    {
        DemographicCategory.GENDER,
        DemographicCategory.AGE,
        DemographicCategory.EDUCATION,
        DemographicCategory.INCOME,
        DemographicCategory.PARTY,
    }
)
UNKNOWN_NAMES: frozenset[str] = frozenset({"unknown", "other/unknown", "other-unknown"})

# Field names the counting service uses for each breakdown, in priority order
BREAKDOWN_FIELDS: dict[str, tuple[str, ...]] = {
    DemographicCategory.GENDER: ("genderBreakdown", "gender", "genders"),
    DemographicCategory.AGE: ("ageRangeBreakdown", "ageBreakdown", "ageRange", "age"),
    DemographicCategory.ETHNICITY: ("ethnicityBreakdown", "ethnicity"),
    DemographicCategory.EDUCATION: ("educationBreakdown", "education"),
    DemographicCategory.INCOME: ("incomeBreakdown", "income"),
    DemographicCategory.PARTY: ("partyBreakdown", "party"),
    VoteHistoryCategory.GENERAL: ("generalVoteHistoryBreakdown", "generalVoteHistory"),
    VoteHistoryCategory.PRIMARY: ("primaryVoteHistoryBreakdown", "primaryVoteHistory"),
}
_GROUPING_FIELDS: tuple[str, ...] = ("demographics", "breakdowns", "voteHistory")

_LEADING_INT = re.compile(r"^\s*([+-]?\d+)")


def parse_person_count(raw: Any) -> int:
    """Parse an entry's ``personCount``.

    Numbers pass through; strings have commas stripped and their leading
    integer read. Anything unparsable counts as 0.
    """
    if isinstance(raw, bool) or raw is None:
        return 0
    if isinstance(raw, int):
        return raw
    if isinstance(raw, float):
        return int(raw) if math.isfinite(raw) else 0
    if isinstance(raw, str):
        match = _LEADING_INT.match(raw.replace(",", ""))
        return int(match.group(1)) if match else 0
    return 0


def is_unknown_name(name: str) -> bool:
    """Return True for the "Unknown" bucket labels."""
    return name.strip().lower() in UNKNOWN_NAMES


def accumulate_breakdown(target: Breakdown, entries: Any, category: str) -> Breakdown:
    """Add one upstream breakdown list onto ``target``.

    Entries with an explicit zero count are still recorded so "present with
    zero" stays distinguishable from "absent".

    Args:
        target: Name-to-count map to add to (mutated).
        entries: Array of ``{name, personCount}`` entries.
        category: Breakdown category, deciding the Unknown rule.

    Returns:
        ``target``.
    """
    if classify_shape(entries) is not ResponseShape.COLLECTION:
        return target

    drop_unknown = category in UNKNOWN_EXCLUDED_CATEGORIES
    for entry in entries:
        if classify_shape(entry) is not ResponseShape.RECORD:
            continue
        raw_name = entry.get("name") or entry.get("value")
        if not isinstance(raw_name, str | int) or isinstance(raw_name, bool):
            continue
        name = str(raw_name).strip()
        if not name:
            continue
        if drop_unknown and is_unknown_name(name):
            continue
        raw_count = entry["personCount"] if "personCount" in entry else entry.get("count")
        target[name] = target.get(name, 0) + parse_person_count(raw_count)
    return target


def find_breakdown_entries(response: Any, category: str) -> list[Any] | None:
    """Locate the breakdown array for ``category`` inside a response.

    Searches the response itself, then the grouping objects
    (``demographics``, ``breakdowns``, ``voteHistory``), then the nested
    containers recursively.

    Returns:
        The entry array, or None when the response carries none.
    """
    if classify_shape(response) is not ResponseShape.RECORD:
        return None

    fields = BREAKDOWN_FIELDS[category]
    for key in fields:
        if classify_shape(response.get(key)) is ResponseShape.COLLECTION:
            return response[key]

    for group in _GROUPING_FIELDS:
        grouped = response.get(group)
        if classify_shape(grouped) is ResponseShape.RECORD:
            for key in fields:
                if classify_shape(grouped.get(key)) is ResponseShape.COLLECTION:
                    return grouped[key]

    for key in NESTED_CONTAINER_KEYS:
        if key in response:
            nested = find_breakdown_entries(response[key], category)
            if nested is not None:
                return nested
    return None


def merge_breakdowns(target: Breakdown, addition: Breakdown | None) -> Breakdown:
    """Sum ``addition`` into ``target`` per name and return ``target``."""
    for name, count in (addition or {}).items():
        target[name] = target.get(name, 0) + count
    return target


def extract_demographics(responses: list[Any]) -> dict[str, Breakdown]:
    """Build every demographic breakdown, summed across ``responses``."""
    demographics: dict[str, Breakdown] = {category.value: {} for category in DemographicCategory}
    for response in responses:
        for category in DemographicCategory:
            accumulate_breakdown(demographics[category], find_breakdown_entries(response, category), category)
    return demographics


def extract_vote_history(responses: list[Any]) -> dict[str, Breakdown]:
    """Build the general and primary vote-history breakdowns."""
    history: dict[str, Breakdown] = {category.value: {} for category in VoteHistoryCategory}
    for response in responses:
        for category in VoteHistoryCategory:
            accumulate_breakdown(history[category], find_breakdown_entries(response, category), category)
    return history

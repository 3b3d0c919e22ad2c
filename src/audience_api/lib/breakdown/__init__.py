"""Breakdown library — tolerant extraction and aggregation of audience counts.

Public API:
    - extract_count: Locate a person count in any response shape
    - extract_geography: Geography breakdown of one audience response
    - merge_geography_maps / pick_geography_levels / finalize_geography /
      limit_geography_entries: Combine and trim geography breakdowns
    - extract_demographics / extract_vote_history: Demographic breakdowns
    - classify_political_affiliation: Party breakdown to three-way split
    - GeographyLevel / DemographicCategory / VoteHistoryCategory: Enums
"""

from audience_api.lib.breakdown.counts import (
    ResponseShape,
    classify_shape,
    extract_count,
    extract_count_from_fields,
    extract_geography_count,
    extract_named_count,
    normalize_count_value,
)
from audience_api.lib.breakdown.demographics import (
    DemographicCategory,
    VoteHistoryCategory,
    accumulate_breakdown,
    extract_demographics,
    extract_vote_history,
    merge_breakdowns,
)
from audience_api.lib.breakdown.geography import (
    DEFAULT_TOP_N,
    GeographyCounts,
    extract_geography,
    finalize_geography,
    is_geography_empty,
    limit_geography_entries,
    merge_geography_maps,
    pick_geography_levels,
)
from audience_api.lib.breakdown.levels import GeographyLevel, normalize_geography_level
from audience_api.lib.breakdown.political import PoliticalAffiliation, classify_political_affiliation

__all__ = [
    "DEFAULT_TOP_N",
    "DemographicCategory",
    "GeographyCounts",
    "GeographyLevel",
    "PoliticalAffiliation",
    "ResponseShape",
    "VoteHistoryCategory",
    "accumulate_breakdown",
    "classify_political_affiliation",
    "classify_shape",
    "extract_count",
    "extract_count_from_fields",
    "extract_demographics",
    "extract_geography",
    "extract_geography_count",
    "extract_named_count",
    "extract_vote_history",
    "finalize_geography",
    "is_geography_empty",
    "limit_geography_entries",
    "merge_breakdowns",
    "merge_geography_maps",
    "normalize_count_value",
    "normalize_geography_level",
    "pick_geography_levels",
]

"""Unit tests for geography breakdown extraction and finalization."""

from audience_api.lib.breakdown.geography import (
    add_geography_value,
    extract_geography,
    extract_geography_name,
    finalize_geography,
    is_geography_empty,
    limit_geography_entries,
    merge_geography_maps,
    pick_geography_levels,
)


class TestAddGeographyValue:
    def test_accumulates(self) -> None:
        target: dict = {}
        add_geography_value(target, "state", "TX", 10)
        add_geography_value(target, "state", "TX", 5)
        assert target == {"state": {"TX": 15}}

    def test_fractional_counts_truncated_to_int(self) -> None:
        target: dict = {}
        add_geography_value(target, "state", "TX", 10.5)
        add_geography_value(target, "state", "TX", 2.9)
        assert target == {"state": {"TX": 12}}
        assert isinstance(target["state"]["TX"], int)

    def test_ignores_incomplete_or_negative_values(self) -> None:
        target: dict = {}
        add_geography_value(target, None, "TX", 10)
        add_geography_value(target, "state", "", 10)
        add_geography_value(target, "state", "TX", None)
        add_geography_value(target, "state", "TX", -1)
        assert target == {}


class TestExtractGeographyName:
    def test_field_priority(self) -> None:
        assert extract_geography_name({"name": "Harris", "subGeoCode": "48201"}) == "48201"

    def test_skips_empty_and_non_scalar_fields(self) -> None:
        assert extract_geography_name({"geoCode": "", "code": {"x": 1}, "label": "Travis"}) == "Travis"

    def test_non_record(self) -> None:
        assert extract_geography_name("TX") is None


class TestExtractGeography:
    def test_level_keyed_breakdowns(self) -> None:
        response = {
            "breakdowns": {
                "state": [{"name": "TX", "personCount": 100}],
                "county": [
                    {"name": "Harris", "personCount": 60},
                    {"name": "Dallas", "personCount": 40},
                ],
            }
        }
        assert extract_geography(response) == {
            "state": {"TX": 100},
            "county": {"Harris": 60, "Dallas": 40},
        }

    def test_fractional_string_count_is_integer(self) -> None:
        response = {"breakdowns": {"state": [{"name": "TX", "personCount": "10.5"}]}}
        geography = extract_geography(response)
        assert geography == {"state": {"TX": 10}}
        assert isinstance(geography["state"]["TX"], int)

    def test_non_level_breakdowns_key_not_treated_as_geography(self) -> None:
        response = {
            "breakdowns": {
                "state": [{"name": "TX", "personCount": 100}],
                "gender": [{"name": "Female", "personCount": 60}, {"name": "Male", "personCount": 40}],
            }
        }
        assert extract_geography(response) == {"state": {"TX": 100}}

    def test_non_level_breakdowns_key_entries_keep_their_own_level(self) -> None:
        response = {"breakdowns": {"regions": [{"level": "DMA", "name": "Houston", "personCount": 30}]}}
        assert extract_geography(response) == {"dma": {"Houston": 30}}

    def test_entry_level_field_overrides_hint(self) -> None:
        response = {"geography": [{"level": "CTY", "name": "Travis", "count": 12}]}
        assert extract_geography(response) == {"county": {"Travis": 12}}

    def test_flat_name_to_count_map(self) -> None:
        response = {"geographicBreakdown": {"dma": {"Houston": "1,200", "Austin": 800}}}
        assert extract_geography(response) == {"dma": {"Houston": 1200, "Austin": 800}}

    def test_nested_child_collections_inherit_level(self) -> None:
        response = {
            "geography": [
                {
                    "type": "state",
                    "name": "TX",
                    "personCount": 100,
                    "breakdown": {"county": [{"name": "Harris", "personCount": 70}]},
                    "items": [{"name": "TX-extra", "personCount": 1}],
                }
            ]
        }
        assert extract_geography(response) == {
            "state": {"TX": 100, "TX-extra": 1},
            "county": {"Harris": 70},
        }

    def test_related_geo_counts(self) -> None:
        response = {
            "relatedGeoCounts": [
                {"geoTypeCode": "CD", "subGeoCode": "07", "personCount": 30},
                {"level": "SSD", "name": "15", "count": 20},
            ]
        }
        assert extract_geography(response) == {
            "congressional": {"07": 30},
            "stateSenateDistrict": {"15": 20},
        }

    def test_top_level_list_response(self) -> None:
        response = [{"level": "state", "name": "TX", "personCount": 5}]
        assert extract_geography(response) == {"state": {"TX": 5}}

    def test_unrecognized_response(self) -> None:
        assert extract_geography({"personCount": 5}) == {}
        assert extract_geography(None) == {}
        assert extract_geography("nope") == {}


class TestMergeGeographyMaps:
    def test_sums_in_place(self) -> None:
        target = {"state": {"TX": 10}}
        result = merge_geography_maps(target, {"state": {"TX": 5, "CA": 3}, "dma": {"Houston": 2}})
        assert result is target
        assert target == {"state": {"TX": 15, "CA": 3}, "dma": {"Houston": 2}}

    def test_empty_addition(self) -> None:
        target = {"state": {"TX": 10}}
        assert merge_geography_maps(target, None) == {"state": {"TX": 10}}


class TestPickAndFinalize:
    def test_pick_keeps_only_present_allowed_levels(self) -> None:
        geography = {"state": {"TX": 1}, "county": {"Harris": 2}, "zip": {"77002": 3}}
        assert pick_geography_levels(geography, ["state", "dma"]) == {"state": {"TX": 1}}

    def test_pick_without_levels_keeps_everything(self) -> None:
        geography = {"state": {"TX": 1}}
        picked = pick_geography_levels(geography, [])
        assert picked == geography
        assert picked["state"] is not geography["state"]

    def test_finalize_materializes_requested_levels(self) -> None:
        assert finalize_geography({"state": {"TX": 1}}, ["state", "county", "dma"]) == {
            "state": {"TX": 1},
            "county": {},
            "dma": {},
        }

    def test_finalize_is_idempotent(self) -> None:
        once = finalize_geography({"state": {"TX": 1}, "zip": {"1": 1}}, ["state", "county"])
        assert finalize_geography(once, ["state", "county"]) == once


class TestLimitGeographyEntries:
    def test_keeps_top_five(self) -> None:
        counties = {f"c{i}": i * 10 for i in range(1, 9)}
        limited = limit_geography_entries({"county": counties}, 5)
        assert list(limited["county"]) == ["c8", "c7", "c6", "c5", "c4"]

    def test_ties_keep_original_order(self) -> None:
        limited = limit_geography_entries({"state": {"A": 5, "B": 5, "C": 9}}, 2)
        assert list(limited["state"]) == ["C", "A"]

    def test_non_positive_top_n_returns_copy(self) -> None:
        geography = {"county": {f"c{i}": i for i in range(8)}}
        limited = limit_geography_entries(geography, 0)
        assert limited == geography
        assert limited["county"] is not geography["county"]

    def test_empty_levels_survive(self) -> None:
        assert limit_geography_entries({"state": {}, "county": {"a": 1}}) == {"state": {}, "county": {"a": 1}}


class TestIsGeographyEmpty:
    def test_empty(self) -> None:
        assert is_geography_empty(None)
        assert is_geography_empty({"state": {}, "county": {}})

    def test_not_empty(self) -> None:
        assert not is_geography_empty({"state": {}, "county": {"Harris": 1}})

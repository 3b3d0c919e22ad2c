"""Unit tests for geography selection resolution."""

import pytest

from audience_api.lib.counting_client import GeoView
from audience_api.lib.geo_resolver import (
    GeoResolutionError,
    GeoSelection,
    GeoViewCache,
    resolve_geo_ids,
    resolve_primary_geo_id,
)

_VIEWS: dict[tuple[str, str], list[GeoView]] = {
    ("NAT", ""): [GeoView(geo_id=1, type_code="NAT", geo_code="US")],
    ("ST", "TX"): [GeoView(geo_id=48, type_code="ST", geo_code="TX")],
    ("ST", "CA"): [GeoView(geo_id=6, type_code="ST", geo_code="CA")],
    ("CTY", "TX"): [
        GeoView(geo_id=48201, type_code="CTY", geo_code="TX", sub_geo_code="Harris"),
        GeoView(geo_id=48113, type_code="CTY", geo_code="TX", sub_geo_code="Dallas"),
        GeoView(geo_id=48201, type_code="CTY", geo_code="TX", sub_geo_code="Harris"),
    ],
    ("CD", "TX"): [GeoView(geo_id=4807, type_code="CD", geo_code="TX", sub_geo_code="07")],
    ("SSD", "TX"): [GeoView(geo_id=48015, type_code="SSD", geo_code="TX", sub_geo_code="15")],
    ("SHD", "TX"): [GeoView(geo_id=48134, type_code="SHD", geo_code="TX", sub_geo_code="134")],
    ("STDMA", "TX"): [GeoView(geo_id=618, type_code="STDMA", geo_code="TX", sub_geo_code="Houston")],
}


class _RecordingFetcher:
    """Serves ``_VIEWS`` and records every requested scope."""

    def __init__(self, views: dict[tuple[str, str], list[GeoView]] | None = None) -> None:
        self.views = _VIEWS if views is None else views
        self.calls: list[tuple[str, str, str]] = []

    async def __call__(self, type_code: str, geo_code: str, sub_geo_code: str) -> list[GeoView]:
        self.calls.append((type_code, geo_code, sub_geo_code))
        return self.views.get((type_code, geo_code), [])


@pytest.fixture
def fetcher() -> _RecordingFetcher:
    return _RecordingFetcher()


@pytest.fixture
def cache(fetcher: _RecordingFetcher) -> GeoViewCache:
    return GeoViewCache(fetcher)


class TestGeoSelection:
    def test_from_mapping(self) -> None:
        selection = GeoSelection.from_mapping(
            {"state": ["TX"], "county": "Harris", "stateSenateDistrict": ["15"], "unknown": ["x"]}
        )
        assert selection.state == ("TX",)
        assert selection.county == ("Harris",)
        assert selection.state_senate_district == ("15",)
        assert selection.first_state == "TX"

    def test_empty(self) -> None:
        assert GeoSelection.from_mapping(None).is_empty
        assert not GeoSelection(dma=("Houston",)).is_empty

    def test_selected_district_levels(self) -> None:
        selection = GeoSelection(state=("TX",), congressional=("07",), state_house_district=("134",))
        assert selection.selected_district_levels() == ["congressional", "stateHouseDistrict"]


class TestResolveGeoIds:
    @pytest.mark.asyncio
    async def test_county_with_state_never_consults_state_view(
        self, cache: GeoViewCache, fetcher: _RecordingFetcher
    ) -> None:
        selection = GeoSelection(state=("TX",), county=("Harris", "Dallas"))
        assert await resolve_geo_ids(selection, cache) == [48201, 48113]
        assert fetcher.calls == [("CTY", "TX", "")]

    @pytest.mark.asyncio
    async def test_county_without_state_falls_through_to_national(
        self, cache: GeoViewCache, fetcher: _RecordingFetcher
    ) -> None:
        assert await resolve_geo_ids(GeoSelection(county=("Harris",)), cache) == [1]
        assert fetcher.calls == [("NAT", "", "")]

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        ("selection", "expected_ids", "type_code"),
        [
            (GeoSelection(state=("TX",), congressional=("07",)), [4807], "CD"),
            (GeoSelection(state=("TX",), state_senate_district=("15",)), [48015], "SSD"),
            (GeoSelection(state=("TX",), state_house_district=("134",)), [48134], "SHD"),
            (GeoSelection(state=("TX",), dma=("Houston",)), [618], "STDMA"),
        ],
    )
    async def test_scoped_branches(
        self,
        cache: GeoViewCache,
        fetcher: _RecordingFetcher,
        selection: GeoSelection,
        expected_ids: list[int],
        type_code: str,
    ) -> None:
        assert await resolve_geo_ids(selection, cache) == expected_ids
        assert fetcher.calls == [(type_code, "TX", "")]

    @pytest.mark.asyncio
    async def test_congressional_takes_priority_over_dma(self, cache: GeoViewCache) -> None:
        selection = GeoSelection(state=("TX",), congressional=("07",), dma=("Houston",))
        assert await resolve_geo_ids(selection, cache) == [4807]

    @pytest.mark.asyncio
    async def test_unmatched_district_yields_nothing(self, cache: GeoViewCache) -> None:
        selection = GeoSelection(state=("TX",), congressional=("99",))
        assert await resolve_geo_ids(selection, cache) == []

    @pytest.mark.asyncio
    async def test_states_resolve_in_order(self, cache: GeoViewCache) -> None:
        selection = GeoSelection(state=("TX", "CA", "ZZ", "TX"))
        assert await resolve_geo_ids(selection, cache) == [48, 6]

    @pytest.mark.asyncio
    async def test_empty_selection_uses_national(self, cache: GeoViewCache) -> None:
        assert await resolve_geo_ids(GeoSelection(), cache) == [1]

    @pytest.mark.asyncio
    async def test_empty_national_view_yields_nothing(self) -> None:
        cache = GeoViewCache(_RecordingFetcher(views={}))
        assert await resolve_geo_ids(GeoSelection(), cache) == []


class TestResolvePrimaryGeoId:
    @pytest.mark.asyncio
    async def test_first_state(self, cache: GeoViewCache) -> None:
        assert await resolve_primary_geo_id(["CA", "TX"], cache) == 6

    @pytest.mark.asyncio
    async def test_unknown_state_falls_back_to_national(self, cache: GeoViewCache) -> None:
        assert await resolve_primary_geo_id(["ZZ"], cache) == 1

    @pytest.mark.asyncio
    async def test_nothing_resolves(self) -> None:
        cache = GeoViewCache(_RecordingFetcher(views={}))
        assert await resolve_primary_geo_id([], cache) is None


class TestGeoResolutionError:
    def test_default_message(self) -> None:
        assert str(GeoResolutionError()) == "Unable to resolve geoIds for selection"

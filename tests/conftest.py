"""Shared test fixtures for settings and a scripted counting service client."""

from typing import Any
from unittest.mock import AsyncMock

import pytest

from audience_api.core.config import Settings
from audience_api.lib.counting_client import CountingServiceClient, GeoView


@pytest.fixture
def settings() -> Settings:
    """Test application settings."""
    return Settings(
        _env_file=None,  # type: ignore[call-arg]
        counting_api_base_url="https://counts.example.com",
        counting_api_key="test-key",
    )


def make_view(geo_id: int, type_code: str, geo_code: str, sub_geo_code: str = "", description: str = "") -> GeoView:
    """Build a geography view row."""
    return GeoView(
        geo_id=geo_id,
        type_code=type_code,
        geo_code=geo_code,
        sub_geo_code=sub_geo_code,
        description=description,
    )


# Views keyed by (typeCode, geoCode)
SAMPLE_VIEWS: dict[tuple[str, str], list[GeoView]] = {
    ("NAT", ""): [make_view(1, "NAT", "US")],
    ("ST", "TX"): [make_view(48, "ST", "TX", description="Texas")],
    ("ST", "CA"): [make_view(6, "ST", "CA", description="California")],
    ("CTY", "TX"): [
        make_view(48201, "CTY", "TX", "Harris"),
        make_view(48113, "CTY", "TX", "Dallas"),
        make_view(48453, "CTY", "TX", "Travis"),
    ],
    ("CD", "TX"): [make_view(4807, "CD", "TX", "07"), make_view(4818, "CD", "TX", "18")],
    ("SSD", "TX"): [make_view(48015, "SSD", "TX", "15")],
    ("SHD", "TX"): [make_view(48134, "SHD", "TX", "134")],
    ("STDMA", "TX"): [make_view(618, "STDMA", "TX", "Houston")],
}


def sample_count_response(total: int, **extra: Any) -> dict[str, Any]:
    """An audience-count response carrying a state breakdown and demographics."""
    response: dict[str, Any] = {
        "personCount": total,
        "genderBreakdown": [
            {"name": "Female", "personCount": total // 2},
            {"name": "Male", "personCount": total // 2},
            {"name": "Unknown", "personCount": 3},
        ],
        "partyBreakdown": [
            {"name": "Democrat", "personCount": 40},
            {"name": "Republican", "personCount": 35},
            {"name": "Other", "personCount": 5},
        ],
    }
    response.update(extra)
    return response


@pytest.fixture
def mock_client() -> AsyncMock:
    """A counting client whose views come from ``SAMPLE_VIEWS``."""
    client = AsyncMock(spec=CountingServiceClient)

    async def _view(type_code: str, geo_code: str = "", sub_geo_code: str = "") -> list[GeoView]:
        return SAMPLE_VIEWS.get((type_code, geo_code), [])

    client.get_geographic_view.side_effect = _view
    client.get_dimensions.return_value = []
    client.get_audience_count.return_value = sample_count_response(100)
    return client

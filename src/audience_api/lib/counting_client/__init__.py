"""Counting client library — async access to the audience-counting service.

Public API:
    - CountingServiceClient: httpx-based client (counts, geo views, dimensions)
    - CountingServiceError: Transport/HTTP/JSON error type
    - AudienceCountRequest / DemographicIds: Count request body
    - GeoView: Parsed geography-view row
    - build_universe_list: Universe fields to upstream code list
"""

from audience_api.lib.counting_client.client import CountingServiceClient, CountingServiceError
from audience_api.lib.counting_client.types import (
    UNIVERSE_FIELD_MAPPING,
    AudienceCountRequest,
    DemographicIds,
    GeoView,
    build_universe_list,
)

__all__ = [
    "UNIVERSE_FIELD_MAPPING",
    "AudienceCountRequest",
    "CountingServiceClient",
    "CountingServiceError",
    "DemographicIds",
    "GeoView",
    "build_universe_list",
]

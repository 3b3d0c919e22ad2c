"""Geo resolver library — geography selections to upstream geo ids.

Public API:
    - GeoSelection: UI selection per level
    - GeoViewCache: Request-scoped geography-view memo
    - resolve_geo_ids: Priority-ordered selection resolution
    - resolve_primary_geo_id: Single geo id for option lookups
    - GeoResolutionError: Raised when a selection resolves to nothing
"""

from audience_api.lib.geo_resolver.cache import GeoViewCache
from audience_api.lib.geo_resolver.resolver import (
    UNRESOLVED_SELECTION_MESSAGE,
    GeoResolutionError,
    GeoSelection,
    resolve_geo_ids,
    resolve_primary_geo_id,
)

__all__ = [
    "UNRESOLVED_SELECTION_MESSAGE",
    "GeoResolutionError",
    "GeoSelection",
    "GeoViewCache",
    "resolve_geo_ids",
    "resolve_primary_geo_id",
]

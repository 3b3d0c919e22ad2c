"""Pydantic v2 schemas for the audience aggregation endpoints.

Field names use camelCase to match the dashboard's JSON contract.
"""

# ruff: noqa: N815

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, Field


class GeographicFilters(BaseModel):
    """Raw geography values selected in the dashboard."""

    state: list[str] = Field(default_factory=list)
    county: list[str] = Field(default_factory=list)
    dma: list[str] = Field(default_factory=list)
    congressional: list[str] = Field(default_factory=list)
    stateSenateDistrict: list[str] = Field(default_factory=list)
    stateHouseDistrict: list[str] = Field(default_factory=list)


class DemographicFilters(BaseModel):
    """Demographic value names selected in the dashboard."""

    gender: list[str] = Field(default_factory=list)
    age: list[str] = Field(default_factory=list)
    ethnicity: list[str] = Field(default_factory=list)
    income: list[str] = Field(default_factory=list)
    education: list[str] = Field(default_factory=list)
    party: list[str] = Field(default_factory=list)


class CombinedFiltersRequest(BaseModel):
    """Body of a combined-filters aggregation request."""

    universeFields: list[str] = Field(description="Universe/audience fields to count")
    geographicFilters: GeographicFilters = Field(description="Geography selection")
    demographicFilters: DemographicFilters = Field(default_factory=DemographicFilters)
    operator: Literal["AND", "OR"] = Field(default="AND", description="Combination operator for universe fields")
    requestedLevels: list[str] = Field(default_factory=list, description="Geography levels to break down")


class PoliticalBreakdown(BaseModel):
    """Three-way political affiliation split."""

    democrat: int = 0
    republican: int = 0
    independent: int = 0


class FilteredBreakdowns(BaseModel):
    """Breakdowns matching the filtered audience."""

    demographics: dict[str, dict[str, int]]
    engagement: dict[str, int] = Field(description="Legacy alias of generalVoteHistory")
    political: PoliticalBreakdown
    mediaConsumption: dict[str, int] = Field(description="Legacy alias of primaryVoteHistory")
    geography: dict[str, dict[str, int]]
    generalVoteHistory: dict[str, int]
    primaryVoteHistory: dict[str, int]


class CombinedFiltersResponse(BaseModel):
    """Combined counts and breakdowns for a selection."""

    success: bool = True
    combinedCounts: dict[str, int]
    filteredBreakdowns: FilteredBreakdowns
    timestamp: datetime


class GeographicOptionsRequest(BaseModel):
    """Body of a geographic-options request."""

    selectedStates: list[str] = Field(default_factory=list)
    universeFields: list[str] = Field(default_factory=list)
    demographicFilters: DemographicFilters = Field(default_factory=DemographicFilters)
    operator: Literal["AND", "OR"] = "AND"


class GeographicOptionsResponse(BaseModel):
    """Selectable geographies with counts, per level."""

    success: bool = True
    geographicOptions: dict[str, dict[str, int]]
    operator: str
    timestamp: datetime

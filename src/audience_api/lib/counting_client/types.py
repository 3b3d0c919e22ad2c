"""Request and view types exchanged with the audience-counting service."""

from dataclasses import dataclass
from typing import Any

from loguru import logger

# App-level universe field names to upstream universe codes
UNIVERSE_FIELD_MAPPING: dict[str, str] = {
    "engagement_high": "engagement_high",
    "engagement_mid": "engagement_mid",
    "engagement_low": "engagement_low",
    "engagementcontact": "engagementcontact",
    "engagementcurrentevents": "engagementcurrentevents",
    "ideologyfiscalcons": "ideologyfiscalcons",
    "ideologyfiscalprog": "ideologyfiscalprog",
    "likelytogivepii": "likelytogivepii",
    "likelyvotersdemocrat": "likelyvotersdemocrat",
    "likelyvotersrepublican": "likelyvotersrepublican",
    "persuasion": "persuasion",
    "socialmediaheavyuser": "socialmediaheavyuser",
    "socialmediauserfacebook": "socialmediauserfacebook",
    "socialmediauserinstagram": "socialmediauserinstagram",
    "socialmediauserx": "socialmediauserx",
    "socialmediauseryoutube": "socialmediauseryoutube",
    "taxstadiumsupport": "taxstadiumsupport",
    "turnouthigh": "turnouthigh",
}


def build_universe_list(universe_fields: list[str]) -> str:
    """Join universe fields into the comma-separated upstream code list."""
    return ",".join(UNIVERSE_FIELD_MAPPING.get(field, field) for field in universe_fields if field)


@dataclass(frozen=True)
class DemographicIds:
    """Comma-joined upstream dimension ids per demographic filter."""

    gender_ids: str = ""
    age_range_ids: str = ""
    ethnicity_ids: str = ""
    income_ids: str = ""
    education_ids: str = ""
    party_ids: str = ""

    @property
    def has_filters(self) -> bool:
        return any(
            (
                self.gender_ids,
                self.age_range_ids,
                self.ethnicity_ids,
                self.income_ids,
                self.education_ids,
                self.party_ids,
            )
        )


@dataclass(frozen=True)
class AudienceCountRequest:
    """Body of one upstream audience-count call."""

    geo_id: int
    demographic_ids: DemographicIds = DemographicIds()
    general_vote_history_ids: str = ""
    primary_vote_history_ids: str = ""
    universe_list: str = ""

    def to_payload(self) -> dict[str, Any]:
        """Serialize to the camelCase JSON body the service expects."""
        payload: dict[str, Any] = {
            "geoId": self.geo_id,
            "ageRangeIds": self.demographic_ids.age_range_ids,
            "genderIds": self.demographic_ids.gender_ids,
            "partyIds": self.demographic_ids.party_ids,
            "ethnicityIds": self.demographic_ids.ethnicity_ids,
            "incomeIds": self.demographic_ids.income_ids,
            "educationIds": self.demographic_ids.education_ids,
            "generalVoteHistoryIds": self.general_vote_history_ids,
            "primaryVoteHistoryIds": self.primary_vote_history_ids,
        }
        if self.universe_list:
            payload["universeList"] = self.universe_list
        return payload


@dataclass(frozen=True)
class GeoView:
    """One row of a geography view (a concrete geography and its count)."""

    geo_id: int
    type_code: str | None = None
    geo_code: str | None = None
    sub_geo_code: str | None = None
    description: str | None = None
    count: int = 0

    @classmethod
    def from_raw(cls, raw: Any) -> "GeoView | None":
        """Build a view row from upstream JSON, or None without a usable geoId."""
        if not isinstance(raw, dict):
            return None
        geo_id = raw.get("geoId")
        try:
            parsed_id = int(geo_id)  # type: ignore[arg-type]
        except (TypeError, ValueError):
            logger.warning("Skipping geo view row without a usable geoId: {!r}", raw)
            return None

        count = raw.get("count")
        return cls(
            geo_id=parsed_id,
            type_code=raw.get("typeCode"),
            geo_code=raw.get("geoCode"),
            sub_geo_code=raw.get("subGeoCode"),
            description=raw.get("description"),
            count=count if isinstance(count, int) and not isinstance(count, bool) else 0,
        )

    def matches(self, selected: tuple[str, ...] | list[str]) -> bool:
        """Whether the selection names this row by sub-code or code."""
        return (self.sub_geo_code or "") in selected or (self.geo_code or "") in selected

"""Three-way political affiliation split derived from the party breakdown."""

from dataclasses import asdict, dataclass

DEMOCRAT_LABELS = frozenset({"democrat", "democratic"})
REPUBLICAN_LABELS = frozenset({"republican"})
INDEPENDENT_LABELS = frozenset({"independent", "independent/other", "other/unaffiliated", "other-unknown", "other"})


@dataclass
class PoliticalAffiliation:
    """Democrat / Republican / Independent counts."""

    democrat: int = 0
    republican: int = 0
    independent: int = 0

    def to_dict(self) -> dict[str, int]:
        return asdict(self)


def classify_political_affiliation(party_breakdown: dict[str, int] | None) -> PoliticalAffiliation:
    """Bucket raw party labels into the three political categories.

    Labels outside the recognized sets are ignored, not counted as
    independent.

    Args:
        party_breakdown: Party name to count.

    Returns:
        The accumulated affiliation counts.
    """
    political = PoliticalAffiliation()
    for party_name, count in (party_breakdown or {}).items():
        label = party_name.strip().lower()
        if label in DEMOCRAT_LABELS:
            political.democrat += count
        elif label in REPUBLICAN_LABELS:
            political.republican += count
        elif label in INDEPENDENT_LABELS:
            political.independent += count
    return political

from dataclasses import dataclass, field
from typing import Any

RELEASE_DATES_LABEL = "Release dates"


@dataclass(slots=True)
class SeriesRecord:
    """
    A card series (booster set, structure deck, ...).

    Attributes:
        name: Series name as titled on its page
        release_date: ISO date string (YYYY-MM-DD)
        id: Catalog id, None until persisted
        prefix: Short code used in card numbers (e.g. "LOB")
        card_count: Number of cards belonging to the series
    """

    name: str
    release_date: str
    id: int | None = None
    prefix: str = ""
    card_count: int = 0

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "SeriesRecord":
        """Build a record from the catalog store's JSON shape."""
        return cls(
            id=data.get("id"),
            name=data["name"],
            release_date=data.get("release_date", ""),
            prefix=data.get("prefix") or "",
            card_count=int(data.get("card_count") or 0),
        )


@dataclass
class SeriesMeta:
    """
    Metadata surrounding a series card table.

    fields maps each labeled block of the page infobox to its values,
    e.g. {"Release dates": ["March 8, 2002"]}.
    """

    name: str
    fields: dict[str, list[str]] = field(default_factory=dict)

    def values(self, label: str) -> list[str] | None:
        """Values of a labeled block, or None if the block is absent."""
        return self.fields.get(label)

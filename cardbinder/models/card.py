from dataclasses import dataclass
from typing import Any

# Top-level categories found at the end of a card's category text.
# "Effect Monster" -> main="Monster", sub="Effect"
MAIN_TYPES = (
    "Monster",
    "Fusion Monster",
    "Ritual Monster",
    "Synchro Monster",
    "Xyz Monster",
    "Link Monster",
    "Pendulum Monster",
    "Spell Card",
    "Trap Card",
)


@dataclass(frozen=True, slots=True)
class Rarity:
    """
    A canonical rarity tier.

    Attributes:
        name: Normalized display label (e.g. "Common", "Ultra Rare")
        id: Catalog id, None until the rarity is persisted
    """

    name: str
    id: int | None = None


@dataclass(frozen=True, slots=True)
class CardType:
    """
    A card's category split into its top-level type and subtype.

    Attributes:
        main: Top-level category (e.g. "Monster", "Spell Card", "Trap Card")
        sub: Subtype (e.g. "Effect", "Flip"), empty when not applicable
    """

    main: str
    sub: str = ""

    @property
    def display(self) -> str:
        """Category text as printed on the card, e.g. "Effect Monster"."""
        return f"{self.sub} {self.main}".strip()

    @classmethod
    def parse(cls, category: str) -> "CardType":
        """
        Split category text into main type and subtype.

        The longest known main type that ends the text wins; whatever
        precedes it is the subtype. Unknown categories are kept whole
        as the main type.
        """
        category = " ".join(category.split())
        for main in sorted(MAIN_TYPES, key=len, reverse=True):
            if category == main:
                return cls(main=main)
            if category.endswith(" " + main):
                return cls(main=main, sub=category[: -len(main)].strip())
        return cls(main=category)


@dataclass(slots=True)
class CardRecord:
    """
    A catalog entry and the number of copies owned.

    in_collection is the only field that changes after ingestion, and only
    through signed deltas.
    """

    number: str
    name: str
    rarity: Rarity
    card_type: CardType
    series_id: int | None = None
    in_collection: int = 0
    collection_number: int = 0

    def sort_value(self, key: str) -> Any:
        """Value used when sorting by `key`; nested records sort by their label."""
        if key == "rarity":
            return self.rarity.name
        if key == "card_type":
            return self.card_type.display
        return getattr(self, key)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "CardRecord":
        """Build a record from the catalog store's JSON shape."""
        rarity = data.get("rarity") or {}
        card_type = data.get("card_type") or {}
        return cls(
            number=data["number"],
            name=data["name"],
            rarity=Rarity(name=rarity.get("name", ""), id=rarity.get("id")),
            card_type=CardType(main=card_type.get("main", ""), sub=card_type.get("sub", "")),
            series_id=data.get("series_id"),
            in_collection=int(data.get("in_collection") or 0),
            collection_number=int(data.get("collection_number") or 0),
        )

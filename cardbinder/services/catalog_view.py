"""
Catalog view model.

Holds the locally cached catalog and derives the visible card list through
a fixed filter pipeline:

    series scope -> name search -> ownership state -> rarity set

Sorting reorders the cache itself, so the chosen order survives any later
filter change. Filtering and sorting never perform I/O; only refresh() and
load_series() talk to the catalog store.
"""

import locale
import logging
from dataclasses import fields
from enum import Enum
from typing import Any

from cardbinder.models.card import CardRecord
from cardbinder.models.failure import UnknownCardError
from cardbinder.models.series import SeriesRecord
from cardbinder.services.catalog_client import CatalogClient

logger = logging.getLogger(__name__)

SORTABLE_FIELDS = frozenset(f.name for f in fields(CardRecord))


class OwnershipFilter(str, Enum):
    """Which cards to show by ownership state."""

    ALL = "all"
    COLLECTED = "collected"
    UNCOLLECTED = "uncollected"


def _collation_key(value: Any) -> tuple[int, Any]:
    # Strings use the active locale's collation; None sorts last
    if value is None:
        return (1, 0)
    if isinstance(value, str):
        return (0, locale.strxfrm(value.casefold()))
    return (0, value)


class CatalogViewModel:
    """
    Filtered, sorted projection of the catalog.

    Attributes:
        all_cards: Every catalog card, in the current sort order
        series: Known series, loaded by load_series()
        series_scope: Series id to restrict to, None for all series
        search_text: Case-insensitive name substring, "" matches all
        ownership: Ownership state filter
        rarities: Rarity names to restrict to, empty for all
        sort_key: Field the cache is sorted by, None if never sorted
        sort_ascending: Direction of the current sort
    """

    def __init__(self, client: CatalogClient | None = None) -> None:
        self._client = client
        self.all_cards: list[CardRecord] = []
        self.series: list[SeriesRecord] = []
        self.series_scope: int | None = None
        self.search_text = ""
        self.ownership = OwnershipFilter.ALL
        self.rarities: set[str] = set()
        self.sort_key: str | None = None
        self.sort_ascending = True

    # --- Loading ---

    def load(self, cards: list[CardRecord]) -> None:
        """Replace the cache, keeping the current sort."""
        self.all_cards = list(cards)
        self._apply_sort()

    async def refresh(self) -> None:
        """
        Reload the catalog from the store.

        Replaces the cache wholesale. An adjustment still in flight will
        see its optimistic count overwritten by the store's value.
        """
        self.load(await self._require_client().get_cards())
        logger.info("Loaded %d cards", len(self.all_cards))

    async def load_series(self) -> None:
        """Reload the series list from the store."""
        self.series = await self._require_client().get_series()

    def _require_client(self) -> CatalogClient:
        if self._client is None:
            raise RuntimeError("CatalogViewModel has no catalog client")
        return self._client

    # --- Filters ---

    def set_series_scope(self, series_id: int | None) -> None:
        self.series_scope = series_id

    def set_search_text(self, text: str) -> None:
        self.search_text = text

    def set_ownership_filter(self, ownership: OwnershipFilter | str) -> None:
        self.ownership = OwnershipFilter(ownership)

    def toggle_rarity(self, name: str) -> None:
        """Add a rarity to the rarity filter, or remove it if present."""
        if name in self.rarities:
            self.rarities.discard(name)
        else:
            self.rarities.add(name)

    @property
    def visible_cards(self) -> list[CardRecord]:
        """Cards passing every filter, in cache order."""
        cards = self.all_cards
        if self.series_scope is not None:
            cards = [c for c in cards if c.series_id == self.series_scope]
        if self.search_text:
            needle = self.search_text.casefold()
            cards = [c for c in cards if needle in c.name.casefold()]
        if self.ownership is OwnershipFilter.COLLECTED:
            cards = [c for c in cards if c.in_collection > 0]
        elif self.ownership is OwnershipFilter.UNCOLLECTED:
            cards = [c for c in cards if c.in_collection == 0]
        if self.rarities:
            cards = [c for c in cards if c.rarity.name in self.rarities]
        return list(cards)

    # --- Sorting ---

    def sort_by(self, key: str) -> None:
        """
        Sort the cache by a card field.

        Sorting by the current key while ascending flips to descending;
        any other call sorts ascending. Equal values keep their order.

        Raises:
            ValueError: If key is not a card field
        """
        if key not in SORTABLE_FIELDS:
            raise ValueError(f"Cannot sort by {key!r}. Must be one of {sorted(SORTABLE_FIELDS)}")

        if key == self.sort_key and self.sort_ascending:
            self.sort_ascending = False
        else:
            self.sort_ascending = True
        self.sort_key = key
        self._apply_sort()

    def _apply_sort(self) -> None:
        if self.sort_key is None:
            return
        key = self.sort_key
        self.all_cards.sort(
            key=lambda card: _collation_key(card.sort_value(key)),
            reverse=not self.sort_ascending,
        )
        # Missing values stay last whichever the direction
        self.all_cards.sort(key=lambda card: card.sort_value(key) is None)

    # --- Aggregates ---

    @property
    def collected_count(self) -> int:
        """Visible cards with at least one copy owned."""
        return sum(1 for card in self.visible_cards if card.in_collection > 0)

    @property
    def total_owned(self) -> int:
        """Copies owned across the whole catalog, ignoring filters."""
        return sum(card.in_collection for card in self.all_cards)

    @property
    def rarity_options(self) -> list[str]:
        """Distinct rarity names present in the catalog."""
        names = {card.rarity.name for card in self.all_cards if card.rarity.name}
        return sorted(names, key=_collation_key)

    @property
    def summary(self) -> str:
        return f"{self.collected_count}/{len(self.visible_cards)} collected"

    # --- Ownership ---

    def get_card(self, number: str) -> CardRecord:
        """
        Raises:
            UnknownCardError: If the card is not in the cache
        """
        for card in self.all_cards:
            if card.number == number:
                return card
        raise UnknownCardError(number)

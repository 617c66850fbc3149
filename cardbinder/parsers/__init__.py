from cardbinder.parsers.card_number import canonical_card_number, split_card_number
from cardbinder.parsers.rarity import CANONICAL_RARITIES, normalize_rarity
from cardbinder.parsers.series_page import (
    ExtractionResult,
    build_export,
    extract,
    extract_series_page,
    parse_release_date,
    parse_series_page,
)

__all__ = [
    "CANONICAL_RARITIES",
    "ExtractionResult",
    "build_export",
    "canonical_card_number",
    "extract",
    "extract_series_page",
    "normalize_rarity",
    "parse_release_date",
    "parse_series_page",
    "split_card_number",
]

from cardbinder.db.database import get_session, init_db
from cardbinder.db.operations import (
    add_rarity,
    apply_ownership_delta,
    card_to_record,
    get_card,
    get_or_create_card_type,
    get_rarity,
    get_series_by_name,
    ingest_series_export,
    insert_series,
    list_cards,
    list_series,
    seed_rarities,
    series_to_record,
    set_ownership_count,
)

__all__ = [
    "add_rarity",
    "apply_ownership_delta",
    "card_to_record",
    "get_card",
    "get_or_create_card_type",
    "get_rarity",
    "get_series_by_name",
    "get_session",
    "ingest_series_export",
    "init_db",
    "insert_series",
    "list_cards",
    "list_series",
    "seed_rarities",
    "series_to_record",
    "set_ownership_count",
]

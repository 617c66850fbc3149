from cardbinder.models.card import MAIN_TYPES, CardRecord, CardType, Rarity
from cardbinder.models.export import CardExport, SeriesExport
from cardbinder.models.failure import (
    CatalogClientError,
    FailureDetail,
    FailureKind,
    KnownError,
    MissingMetadataError,
    NegativeCountError,
    OwnershipSyncError,
    UnknownCardError,
    UnknownRarityError,
)
from cardbinder.models.series import RELEASE_DATES_LABEL, SeriesMeta, SeriesRecord

__all__ = [
    "CardExport",
    "CardRecord",
    "CardType",
    "CatalogClientError",
    "FailureDetail",
    "FailureKind",
    "KnownError",
    "MAIN_TYPES",
    "MissingMetadataError",
    "NegativeCountError",
    "OwnershipSyncError",
    "RELEASE_DATES_LABEL",
    "Rarity",
    "SeriesExport",
    "SeriesMeta",
    "SeriesRecord",
    "UnknownCardError",
    "UnknownRarityError",
]

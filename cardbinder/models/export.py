"""
Ingestion export document.

Produced once per scraped series page and consumed by the seeding step.
Field names are the stable on-disk format.
"""

from pydantic import BaseModel, Field


class CardExport(BaseModel):
    """One card row of a series export."""

    card_number: str = Field(..., examples=["LOB-EN001"])
    name: str = Field(..., examples=["Blue-Eyes White Dragon"])
    rarity: str = Field(..., examples=["Ultra Rare"])
    category: str = Field(..., examples=["Normal Monster"])


class SeriesExport(BaseModel):
    """A whole series as extracted from its page."""

    name: str
    ncards: int = Field(..., ge=0, description="Number of cards in `cards`")
    release_date: str = Field(..., description="Release date, ISO formatted")
    cards: list[CardExport] = Field(default_factory=list)

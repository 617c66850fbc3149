"""
Card catalog API endpoints.

Lists and searches the catalog and applies ownership deltas.
"""

from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import BaseModel, Field
from sqlalchemy.ext.asyncio import AsyncSession

from cardbinder.db import apply_ownership_delta, card_to_record, list_cards
from cardbinder.db.database import get_session
from cardbinder.models.card import CardRecord

router = APIRouter(prefix="/cards", tags=["cards"])


class RarityResponse(BaseModel):
    id: int | None = None
    name: str


class CardTypeResponse(BaseModel):
    main: str
    sub: str = ""


class CardResponse(BaseModel):
    """A catalog card with its owned count."""

    number: str = Field(..., examples=["LOB-001"])
    name: str
    collection_number: int = 0
    in_collection: int = Field(default=0, ge=0)
    series_id: int | None = None
    rarity: RarityResponse
    card_type: CardTypeResponse

    @classmethod
    def from_record(cls, card: CardRecord) -> "CardResponse":
        return cls(
            number=card.number,
            name=card.name,
            collection_number=card.collection_number,
            in_collection=card.in_collection,
            series_id=card.series_id,
            rarity=RarityResponse(id=card.rarity.id, name=card.rarity.name),
            card_type=CardTypeResponse(main=card.card_type.main, sub=card.card_type.sub),
        )


class CardSearchRequest(BaseModel):
    """Request model for searching cards by name."""

    name: str | None = Field(
        default=None,
        description="Case-insensitive substring of the card name",
        examples=["dragon"],
    )


class OwnershipDeltaRequest(BaseModel):
    """Request model for changing a card's owned count."""

    id: str = Field(..., description="Card number", examples=["LOB-001"])
    number: int | None = Field(
        default=None,
        description="Signed change to the owned count; null means +1",
        examples=[1, -1],
    )


class OwnershipDeltaResponse(BaseModel):
    """Response model for an applied ownership delta."""

    id: str
    in_collection: int


@router.get("", response_model=list[CardResponse])
async def get_cards(
    session: Annotated[AsyncSession, Depends(get_session)],
) -> list[CardResponse]:
    """Get the whole catalog in ingestion order."""
    cards = await list_cards(session)
    return [CardResponse.from_record(card_to_record(card)) for card in cards]


@router.post("", response_model=list[CardResponse])
async def search_cards(
    request: CardSearchRequest,
    session: Annotated[AsyncSession, Depends(get_session)],
) -> list[CardResponse]:
    """Get the cards whose name contains the given text."""
    if not request.name or not request.name.strip():
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Search name cannot be empty",
        )

    cards = await list_cards(session, name_contains=request.name.strip())
    return [CardResponse.from_record(card_to_record(card)) for card in cards]


@router.put("", response_model=OwnershipDeltaResponse)
async def adjust_ownership(
    request: OwnershipDeltaRequest,
    session: Annotated[AsyncSession, Depends(get_session)],
) -> OwnershipDeltaResponse:
    """
    Change a card's owned count by a signed delta.

    Returns 404 for an unknown card and 409 if the count would drop below
    zero; the count is unchanged in both cases.
    """
    delta = 1 if request.number is None else request.number
    new_count = await apply_ownership_delta(session, request.id, delta)
    return OwnershipDeltaResponse(id=request.id, in_collection=new_count)

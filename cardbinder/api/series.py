"""
Series API endpoints.
"""

from typing import Annotated

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field
from sqlalchemy.ext.asyncio import AsyncSession

from cardbinder.db import list_series, series_to_record
from cardbinder.db.database import get_session

router = APIRouter(prefix="/series", tags=["series"])


class SeriesResponse(BaseModel):
    """A series with the number of catalog cards in it."""

    id: int
    name: str
    prefix: str = ""
    release_date: str = Field(..., description="ISO date", examples=["2002-03-08"])
    card_count: int = 0


@router.get("", response_model=list[SeriesResponse])
async def get_series(
    session: Annotated[AsyncSession, Depends(get_session)],
) -> list[SeriesResponse]:
    """Get all series, oldest release first."""
    results = []
    for series, card_count in await list_series(session):
        record = series_to_record(series, card_count)
        results.append(
            SeriesResponse(
                id=record.id,
                name=record.name,
                prefix=record.prefix,
                release_date=record.release_date,
                card_count=record.card_count,
            )
        )
    return results

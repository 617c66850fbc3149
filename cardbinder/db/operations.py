"""
Catalog store operations.

Async functions for seeding reference data, loading series exports,
querying the catalog and applying ownership deltas.
"""

import logging
from collections.abc import Iterable
from datetime import date

from sqlalchemy import func, select, update
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from cardbinder.models.card import CardRecord, CardType, Rarity
from cardbinder.models.db import CardDB, CardTypeDB, RarityDB, SeriesDB
from cardbinder.models.export import SeriesExport
from cardbinder.models.failure import NegativeCountError, UnknownCardError, UnknownRarityError
from cardbinder.models.series import SeriesRecord
from cardbinder.parsers.card_number import canonical_card_number, split_card_number
from cardbinder.parsers.rarity import CANONICAL_RARITIES
from cardbinder.parsers.series_page import parse_release_date

logger = logging.getLogger(__name__)

# --- Reference Data ---


async def get_rarity(session: AsyncSession, name: str) -> RarityDB | None:
    """Get a rarity by its canonical label."""
    result = await session.execute(select(RarityDB).where(RarityDB.name == name))
    return result.scalar_one_or_none()


async def add_rarity(session: AsyncSession, name: str) -> RarityDB:
    """
    Register a rarity label.

    Returns the existing row if the label is already known.
    """
    existing = await get_rarity(session, name)
    if existing:
        return existing

    rarity = RarityDB(name=name)
    session.add(rarity)
    await session.flush()
    return rarity


async def seed_rarities(session: AsyncSession, names: Iterable[str] = CANONICAL_RARITIES) -> int:
    """
    Register the canonical rarity labels.

    Returns the number of labels that were not yet registered.
    """
    added = 0
    for name in names:
        if await get_rarity(session, name) is None:
            session.add(RarityDB(name=name))
            added += 1
    await session.flush()
    return added


async def get_or_create_card_type(session: AsyncSession, card_type: CardType) -> CardTypeDB:
    """Get the (main, sub) card type row, creating it on first use."""
    result = await session.execute(
        select(CardTypeDB).where(
            CardTypeDB.main == card_type.main,
            CardTypeDB.sub == card_type.sub,
        )
    )
    existing = result.scalar_one_or_none()
    if existing:
        return existing

    db_type = CardTypeDB(main=card_type.main, sub=card_type.sub)
    session.add(db_type)
    await session.flush()
    return db_type


# --- Series Operations ---


async def get_series_by_name(session: AsyncSession, name: str) -> SeriesDB | None:
    """Get a series by its exact name."""
    result = await session.execute(select(SeriesDB).where(SeriesDB.name == name))
    return result.scalar_one_or_none()


async def insert_series(
    session: AsyncSession,
    name: str,
    release_date: date,
    n_cards: int = 0,
    prefix: str = "",
) -> SeriesDB:
    """
    Insert a series.

    Series are reference data: if a series with the same name exists it is
    returned unchanged.
    """
    existing = await get_series_by_name(session, name)
    if existing:
        return existing

    series = SeriesDB(name=name, release_date=release_date, n_cards=n_cards, prefix=prefix)
    session.add(series)
    await session.flush()
    return series


async def list_series(session: AsyncSession) -> list[tuple[SeriesDB, int]]:
    """
    Get all series with the number of catalog cards in each.

    Ordered by release date, oldest first.
    """
    card_count = (
        select(func.count(CardDB.id))
        .where(CardDB.series_id == SeriesDB.id)
        .correlate(SeriesDB)
        .scalar_subquery()
    )
    result = await session.execute(
        select(SeriesDB, card_count).order_by(SeriesDB.release_date, SeriesDB.id)
    )
    return [(series, int(count)) for series, count in result.all()]


def series_to_record(series: SeriesDB, card_count: int) -> SeriesRecord:
    """Convert a database series to a domain record."""
    return SeriesRecord(
        id=series.id,
        name=series.name,
        prefix=series.prefix,
        release_date=series.release_date.isoformat(),
        card_count=card_count,
    )


# --- Card Operations ---


async def get_card(session: AsyncSession, number: str) -> CardDB | None:
    """Get a card by its catalog number."""
    result = await session.execute(
        select(CardDB)
        .where(CardDB.number == number)
        .options(
            selectinload(CardDB.rarity),
            selectinload(CardDB.card_type),
            selectinload(CardDB.series),
        )
    )
    return result.scalar_one_or_none()


async def list_cards(
    session: AsyncSession,
    name_contains: str | None = None,
    series_name: str | None = None,
) -> list[CardDB]:
    """
    Get catalog cards in ingestion order.

    Args:
        name_contains: Only cards whose name contains this text (case-insensitive)
        series_name: Only cards of the series with this exact name
    """
    query = select(CardDB).options(
        selectinload(CardDB.rarity),
        selectinload(CardDB.card_type),
        selectinload(CardDB.series),
    )
    if name_contains:
        query = query.where(func.lower(CardDB.name).contains(name_contains.lower()))
    if series_name:
        query = query.join(SeriesDB).where(SeriesDB.name == series_name)

    result = await session.execute(query.order_by(CardDB.id))
    return list(result.scalars().all())


def card_to_record(card: CardDB) -> CardRecord:
    """Convert a database card to a domain record."""
    return CardRecord(
        number=card.number,
        name=card.name,
        rarity=Rarity(name=card.rarity.name, id=card.rarity.id),
        card_type=CardType(main=card.card_type.main, sub=card.card_type.sub),
        series_id=card.series_id,
        in_collection=card.in_collection,
        collection_number=card.collection_number,
    )


async def apply_ownership_delta(session: AsyncSession, number: str, delta: int) -> int:
    """
    Add a signed delta to a card's owned count.

    The increment is a single UPDATE so concurrent deltas on the same card
    never lose updates.

    Returns:
        The new owned count.

    Raises:
        UnknownCardError: If no card has this number
        NegativeCountError: If the count would drop below zero
    """
    result = await session.execute(
        update(CardDB)
        .where(CardDB.number == number, CardDB.in_collection + delta >= 0)
        .values(in_collection=CardDB.in_collection + delta)
        .returning(CardDB.in_collection)
        .execution_options(synchronize_session="fetch")
    )
    new_count = result.scalar_one_or_none()
    if new_count is not None:
        return int(new_count)

    card = await get_card(session, number)
    if card is None:
        raise UnknownCardError(number)
    raise NegativeCountError(number, card.in_collection, delta)


async def set_ownership_count(session: AsyncSession, number: str, count: int) -> int:
    """
    Overwrite a card's owned count.

    Raises:
        ValueError: If count is negative
        UnknownCardError: If no card has this number
    """
    if count < 0:
        raise ValueError(f"Owned count must be non-negative, got {count}")

    result = await session.execute(
        update(CardDB)
        .where(CardDB.number == number)
        .values(in_collection=count)
        .returning(CardDB.in_collection)
        .execution_options(synchronize_session="fetch")
    )
    new_count = result.scalar_one_or_none()
    if new_count is None:
        raise UnknownCardError(number)
    return int(new_count)


# --- Ingestion ---


async def ingest_series_export(session: AsyncSession, export: SeriesExport) -> int:
    """
    Load a series export into the catalog.

    The series is inserted (or reused by name), its prefix taken from the
    first card number. Cards get canonical numbers; cards whose number is
    already in the catalog are skipped.

    Returns:
        Number of cards inserted.

    Raises:
        MissingMetadataError: If the release date cannot be parsed
        UnknownRarityError: If any card uses an unregistered rarity

        Nothing is inserted when either is raised.
    """
    release_date = date.fromisoformat(parse_release_date(export.release_date))

    rarities: dict[str, RarityDB] = {}
    for card in export.cards:
        if card.rarity in rarities:
            continue
        rarity = await get_rarity(session, card.rarity)
        if rarity is None:
            raise UnknownRarityError(card.rarity)
        rarities[card.rarity] = rarity

    prefix = split_card_number(export.cards[0].card_number)[0] if export.cards else ""
    series = await insert_series(
        session,
        name=export.name,
        release_date=release_date,
        n_cards=export.ncards,
        prefix=prefix,
    )

    inserted = 0
    for card in export.cards:
        number = canonical_card_number(card.card_number)
        if await get_card(session, number) is not None:
            logger.warning("Card '%s' already exists, skipping (series %r)", number, series.name)
            continue

        card_type = await get_or_create_card_type(session, CardType.parse(card.category))
        _, collection_number = split_card_number(card.card_number)
        session.add(
            CardDB(
                number=number,
                name=card.name,
                collection_number=collection_number,
                in_collection=0,
                series_id=series.id,
                rarity_id=rarities[card.rarity].id,
                card_type_id=card_type.id,
            )
        )
        await session.flush()
        inserted += 1

    logger.info("Inserted %d of %d cards for series %r", inserted, len(export.cards), series.name)
    return inserted

from pathlib import Path

import pytest
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from cardbinder.db.operations import seed_rarities
from cardbinder.models.card import CardRecord, CardType, Rarity
from cardbinder.models.db import Base
from cardbinder.models.export import CardExport, SeriesExport

FIXTURES = Path(__file__).parent / "fixtures"


@pytest.fixture
async def async_engine():
    """Create an in-memory SQLite engine for testing."""
    engine = create_async_engine("sqlite+aiosqlite:///:memory:", echo=False)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest.fixture
def session_factory(async_engine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(async_engine, class_=AsyncSession, expire_on_commit=False)


@pytest.fixture
async def session(session_factory) -> AsyncSession:
    """Provide a database session with the canonical rarities registered."""
    async with session_factory() as session:
        await seed_rarities(session)
        await session.commit()
        yield session


@pytest.fixture
def sample_export() -> SeriesExport:
    """A small series export as written by the scrape job."""
    return SeriesExport(
        name="Legend of Blue Eyes White Dragon",
        ncards=3,
        release_date="2002-03-08",
        cards=[
            CardExport(
                card_number="LOB-EN001",
                name="Blue-Eyes White Dragon",
                rarity="Ultra Rare",
                category="Normal Monster",
            ),
            CardExport(
                card_number="LOB-EN002",
                name="Hitotsu-Me Giant",
                rarity="Common",
                category="Normal Monster",
            ),
            CardExport(
                card_number="LOB-EN005",
                name="Dark Hole",
                rarity="Super Rare",
                category="Normal Spell Card",
            ),
        ],
    )


@pytest.fixture
def sample_cards() -> list[CardRecord]:
    """Catalog records in ingestion order, two series."""
    return [
        CardRecord(
            number="LOB-001",
            name="Blue-Eyes White Dragon",
            rarity=Rarity(name="Ultra Rare", id=4),
            card_type=CardType(main="Monster", sub="Normal"),
            series_id=1,
            in_collection=2,
            collection_number=1,
        ),
        CardRecord(
            number="LOB-002",
            name="Hitotsu-Me Giant",
            rarity=Rarity(name="Common", id=1),
            card_type=CardType(main="Monster", sub="Normal"),
            series_id=1,
            in_collection=0,
            collection_number=2,
        ),
        CardRecord(
            number="LOB-005",
            name="Dark Hole",
            rarity=Rarity(name="Super Rare", id=3),
            card_type=CardType(main="Spell Card", sub="Normal"),
            series_id=1,
            in_collection=1,
            collection_number=5,
        ),
        CardRecord(
            number="MRD-001",
            name="Baby Dragon",
            rarity=Rarity(name="Common", id=1),
            card_type=CardType(main="Monster", sub="Normal"),
            series_id=2,
            in_collection=0,
            collection_number=1,
        ),
        CardRecord(
            number="MRD-006",
            name="Time Wizard",
            rarity=Rarity(name="Ultra Rare", id=4),
            card_type=CardType(main="Monster", sub="Flip Effect"),
            series_id=2,
            in_collection=3,
            collection_number=6,
        ),
    ]

"""
SQLAlchemy ORM models for the catalog store.

Models mirror the dataclass records but add database persistence.
"""

from datetime import date, datetime

from sqlalchemy import (
    CheckConstraint,
    Date,
    DateTime,
    ForeignKey,
    Integer,
    String,
    UniqueConstraint,
    func,
)
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship


class Base(DeclarativeBase):
    """Base class for all ORM models."""

    pass


class RarityDB(Base):
    """A canonical rarity label. One row per distinct normalized label."""

    __tablename__ = "rarities"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(100), unique=True)

    def __repr__(self) -> str:
        return f"<RarityDB(id={self.id}, name={self.name})>"


class CardTypeDB(Base):
    """A (main, sub) card category pair."""

    __tablename__ = "card_types"
    __table_args__ = (UniqueConstraint("main", "sub", name="uq_card_type"),)

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    main: Mapped[str] = mapped_column(String(100))
    sub: Mapped[str] = mapped_column(String(100), default="")

    def __repr__(self) -> str:
        return f"<CardTypeDB(main={self.main}, sub={self.sub})>"


class SeriesDB(Base):
    """
    A card series.

    Reference data: immutable once ingested.
    """

    __tablename__ = "series"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(255), unique=True, index=True)
    prefix: Mapped[str] = mapped_column(String(20), default="")
    release_date: Mapped[date] = mapped_column(Date)
    # Card count announced by the export; the served count is computed from cards
    n_cards: Mapped[int] = mapped_column(Integer, default=0)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())

    cards: Mapped[list["CardDB"]] = relationship(back_populates="series")

    def __repr__(self) -> str:
        return f"<SeriesDB(id={self.id}, name={self.name})>"


class CardDB(Base):
    """
    A catalog card and its owned count.

    Card numbers are unique across the whole catalog; the store is
    addressed by number alone.
    """

    __tablename__ = "cards"
    __table_args__ = (CheckConstraint("in_collection >= 0", name="ck_in_collection_non_negative"),)

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    number: Mapped[str] = mapped_column(String(50), unique=True, index=True)
    name: Mapped[str] = mapped_column(String(255), index=True)
    collection_number: Mapped[int] = mapped_column(Integer, default=0)
    in_collection: Mapped[int] = mapped_column(Integer, default=0)

    series_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("series.id", ondelete="CASCADE"), index=True
    )
    rarity_id: Mapped[int] = mapped_column(Integer, ForeignKey("rarities.id"))
    card_type_id: Mapped[int] = mapped_column(Integer, ForeignKey("card_types.id"))

    series: Mapped["SeriesDB"] = relationship(back_populates="cards")
    rarity: Mapped["RarityDB"] = relationship()
    card_type: Mapped["CardTypeDB"] = relationship()

    def __repr__(self) -> str:
        return f"<CardDB(number={self.number}, qty={self.in_collection})>"

"""
Operator command line.

    cardbinder init
    cardbinder add rarity|card-type NAME
    cardbinder scrape SERIES_NAME [--output FILE]
    cardbinder load FILE
    cardbinder list series
    cardbinder list cards [--series NAME] [--hide-collected] [--formatter FMT]
    cardbinder find cards [--query TEXT] [--formatter FMT]
    cardbinder find series --query NAME
    cardbinder collect --id NUMBER [NUMBER ...] [--count N]
    cardbinder sell --id NUMBER [NUMBER ...]

Everything except scrape and find series works directly against the
configured database.
"""

import argparse
import asyncio
import logging
import sys
from pathlib import Path

import httpx

from cardbinder.config import DEFAULT_CARD_FORMATTER
from cardbinder.db.database import async_session_factory, init_db
from cardbinder.db.operations import (
    add_rarity,
    apply_ownership_delta,
    card_to_record,
    get_or_create_card_type,
    list_cards,
    list_series,
    series_to_record,
    set_ownership_count,
)
from cardbinder.jobs.load_export import load_export
from cardbinder.jobs.scrape_series import default_output_path, scrape_series, series_page_url
from cardbinder.models.card import CardType
from cardbinder.models.db import CardDB
from cardbinder.models.failure import KnownError

logger = logging.getLogger(__name__)


def format_card(card: CardDB, formatter: str = DEFAULT_CARD_FORMATTER) -> str:
    """
    Render a card with a str.format template.

    Placeholders: {name} {number} {collection_number} {rarity} {series}
    {card_type} {in_collection}
    """
    record = card_to_record(card)
    return formatter.format(
        name=record.name,
        number=record.number,
        collection_number=record.collection_number,
        rarity=record.rarity.name,
        series=card.series.name if card.series is not None else "",
        card_type=record.card_type.display,
        in_collection=record.in_collection,
    )


async def list_series_lines() -> list[str]:
    async with async_session_factory() as session:
        rows = await list_series(session)
    lines = []
    for series, card_count in rows:
        record = series_to_record(series, card_count)
        lines.append(
            f"{record.release_date}  {record.prefix:<6} {record.name} ({record.card_count})"
        )
    return lines


async def list_card_lines(
    series_name: str | None = None,
    hide_collected: bool = False,
    formatter: str = DEFAULT_CARD_FORMATTER,
    query: str | None = None,
) -> list[str]:
    async with async_session_factory() as session:
        cards = await list_cards(session, name_contains=query, series_name=series_name)
    if hide_collected:
        cards = [card for card in cards if card.in_collection == 0]
    return [format_card(card, formatter) for card in cards]


async def add_reference(kind: str, name: str) -> str:
    """Register a rarity label or card type so exports using it can load."""
    async with async_session_factory() as session:
        if kind == "rarity":
            rarity = await add_rarity(session, name)
            label = f"rarity {rarity.name!r}"
        else:
            card_type = await get_or_create_card_type(session, CardType.parse(name))
            label = f"card type {CardType(card_type.main, card_type.sub).display!r}"
        await session.commit()
    return f"Registered {label}"


async def adjust_cards(numbers: list[str], delta: int) -> dict[str, int]:
    """
    Apply the same delta to several cards in one transaction.

    Returns:
        Dict mapping card number to its new count

    Raises:
        UnknownCardError, NegativeCountError: Nothing is changed in that case
    """
    results: dict[str, int] = {}
    async with async_session_factory() as session:
        for number in numbers:
            results[number] = await apply_ownership_delta(session, number, delta)
        await session.commit()
    return results


async def set_card_counts(numbers: list[str], count: int) -> dict[str, int]:
    """Set several cards to the same owned count in one transaction."""
    results: dict[str, int] = {}
    async with async_session_factory() as session:
        for number in numbers:
            results[number] = await set_ownership_count(session, number, count)
        await session.commit()
    return results


def non_negative_int(value: str) -> int:
    count = int(value)
    if count < 0:
        raise argparse.ArgumentTypeError(f"must be 0 or more, got {count}")
    return count


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="cardbinder", description="Trading card collection tracker"
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    subparsers.add_parser("init", help="Create tables and register the canonical rarities")

    add = subparsers.add_parser("add", help="Register a rarity or card type")
    add.add_argument("kind", choices=["rarity", "card-type"])
    add.add_argument("name", help='Label, e.g. "Ghost Rare" or "Effect Monster"')

    scrape = subparsers.add_parser("scrape", help="Scrape a series page into an export file")
    scrape.add_argument("series", help="Series name")
    scrape.add_argument("--output", type=Path, default=None, help="Export file path")

    load = subparsers.add_parser("load", help="Load an export file into the catalog")
    load.add_argument("file", type=Path)

    list_cmd = subparsers.add_parser("list", help="List series or cards")
    list_cmd.add_argument("what", choices=["series", "cards"])
    list_cmd.add_argument("--series", default=None, help="Only cards of this series")
    list_cmd.add_argument(
        "--hide-collected", action="store_true", help="Only cards with no copies owned"
    )
    list_cmd.add_argument(
        "--formatter",
        default=DEFAULT_CARD_FORMATTER,
        help=f"Card line template (default: {DEFAULT_CARD_FORMATTER!r})",
    )

    find = subparsers.add_parser("find", help="Search cards by name, or locate a series page")
    find.add_argument("what", choices=["series", "cards"])
    find.add_argument("--query", default=None, help="Name text (required for series)")
    find.add_argument("--formatter", default=DEFAULT_CARD_FORMATTER, help="Card line template")

    collect = subparsers.add_parser("collect", help="Add one copy of each card")
    collect.add_argument("--id", dest="numbers", nargs="+", required=True, metavar="NUMBER")
    collect.add_argument(
        "--count",
        type=non_negative_int,
        default=None,
        help="Set each card to this many copies instead",
    )

    sell = subparsers.add_parser("sell", help="Remove one copy of each card")
    sell.add_argument("--id", dest="numbers", nargs="+", required=True, metavar="NUMBER")

    return parser


async def run(args: argparse.Namespace) -> list[str]:
    """Execute a parsed command and return the lines to print."""
    if args.command == "init":
        await init_db()
        return ["Database initialized"]

    if args.command == "add":
        return [await add_reference(args.kind, args.name)]

    if args.command == "scrape":
        output = args.output or default_output_path(args.series)
        export = await scrape_series(args.series, output)
        return [f"Wrote {export.ncards} cards of {export.name!r} to {output}"]

    if args.command == "load":
        inserted = await load_export(args.file)
        return [f"Inserted {inserted} cards"]

    if args.command == "list":
        if args.what == "series":
            return await list_series_lines()
        return await list_card_lines(args.series, args.hide_collected, args.formatter)

    if args.command == "find":
        if args.what == "series":
            return [series_page_url(args.query)]
        return await list_card_lines(formatter=args.formatter, query=args.query)

    if args.command == "collect" and args.count is not None:
        counts = await set_card_counts(args.numbers, args.count)
    else:
        delta = 1 if args.command == "collect" else -1
        counts = await adjust_cards(args.numbers, delta)
    return [f"{number}: {count}" for number, count in counts.items()]


def main(argv: list[str] | None = None) -> None:
    """CLI entry point."""
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    parser = build_parser()
    args = parser.parse_args(argv)
    if args.command == "find" and args.what == "series" and not args.query:
        parser.error("find series requires --query")

    try:
        lines = asyncio.run(run(args))
    except KnownError as e:
        logger.error("%s %s", e.message, e.detail or "")
        sys.exit(1)
    except httpx.HTTPError as e:
        logger.error("HTTP error: %s", e)
        sys.exit(1)

    for line in lines:
        print(line)


if __name__ == "__main__":
    main()

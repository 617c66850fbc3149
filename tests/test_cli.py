"""Tests for the operator command line."""

from pathlib import Path
from unittest.mock import AsyncMock, patch

import pytest
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from cardbinder.cli import build_parser, format_card, main, run
from cardbinder.db.operations import get_card, ingest_series_export
from cardbinder.models.db import CardTypeDB
from cardbinder.models.export import CardExport, SeriesExport
from cardbinder.models.failure import NegativeCountError, UnknownCardError, UnknownRarityError


@pytest.fixture
async def loaded(session_factory, session: AsyncSession, sample_export: SeriesExport):
    """Patch the CLI onto a loaded in-memory catalog."""
    await ingest_series_export(session, sample_export)
    await session.commit()
    with patch("cardbinder.cli.async_session_factory", session_factory):
        yield session


class TestParser:
    def test_collect_takes_several_numbers(self) -> None:
        args = build_parser().parse_args(["collect", "--id", "LOB-001", "LOB-002"])

        assert args.command == "collect"
        assert args.numbers == ["LOB-001", "LOB-002"]

    def test_list_defaults(self) -> None:
        args = build_parser().parse_args(["list", "cards"])

        assert args.what == "cards"
        assert args.hide_collected is False
        assert args.formatter == "|{series}|{number}|{name}|"

    def test_command_required(self) -> None:
        with pytest.raises(SystemExit):
            build_parser().parse_args([])


class TestList:
    async def test_list_cards_default_format(self, loaded: AsyncSession) -> None:
        args = build_parser().parse_args(["list", "cards"])

        lines = await run(args)

        assert lines[0] == "|Legend of Blue Eyes White Dragon|LOB-001|Blue-Eyes White Dragon|"
        assert len(lines) == 3

    async def test_custom_formatter(self, loaded: AsyncSession) -> None:
        args = build_parser().parse_args(
            ["list", "cards", "--formatter", "{number} {rarity} {card_type} x{in_collection}"]
        )

        lines = await run(args)

        assert lines[2] == "LOB-005 Super Rare Normal Spell Card x0"

    async def test_hide_collected(self, loaded: AsyncSession) -> None:
        await run(build_parser().parse_args(["collect", "--id", "LOB-001"]))

        lines = await run(build_parser().parse_args(["list", "cards", "--hide-collected"]))

        assert [line.split("|")[2] for line in lines] == ["LOB-002", "LOB-005"]

    async def test_list_series(self, loaded: AsyncSession) -> None:
        lines = await run(build_parser().parse_args(["list", "series"]))

        assert len(lines) == 1
        assert lines[0].startswith("2002-03-08")
        assert lines[0].endswith("Legend of Blue Eyes White Dragon (3)")

    async def test_format_card(self, loaded: AsyncSession) -> None:
        card = await get_card(loaded, "LOB-002")

        assert format_card(card) == "|Legend of Blue Eyes White Dragon|LOB-002|Hitotsu-Me Giant|"
        assert format_card(card, "{number}:{collection_number}") == "LOB-002:2"


class TestCollectAndSell:
    async def test_collect_then_sell(self, loaded: AsyncSession) -> None:
        lines = await run(build_parser().parse_args(["collect", "--id", "LOB-001", "LOB-002"]))
        assert lines == ["LOB-001: 1", "LOB-002: 1"]

        lines = await run(build_parser().parse_args(["sell", "--id", "LOB-001"]))
        assert lines == ["LOB-001: 0"]

    async def test_sell_uncollected_changes_nothing(self, loaded: AsyncSession) -> None:
        """A failing number rolls back the whole batch."""
        await run(build_parser().parse_args(["collect", "--id", "LOB-001"]))

        with pytest.raises(NegativeCountError):
            await run(build_parser().parse_args(["sell", "--id", "LOB-001", "LOB-002"]))

        args = build_parser().parse_args(["list", "cards", "--formatter", "{in_collection}"])
        lines = await run(args)
        assert lines == ["1", "0", "0"]


class TestCollectCount:
    async def test_count_sets_absolute_value(self, loaded: AsyncSession) -> None:
        await run(build_parser().parse_args(["collect", "--id", "LOB-001"]))

        lines = await run(
            build_parser().parse_args(["collect", "--id", "LOB-001", "LOB-002", "--count", "4"])
        )

        assert lines == ["LOB-001: 4", "LOB-002: 4"]

    async def test_count_zero(self, loaded: AsyncSession) -> None:
        await run(build_parser().parse_args(["collect", "--id", "LOB-005"]))

        lines = await run(build_parser().parse_args(["collect", "--id", "LOB-005", "--count", "0"]))

        assert lines == ["LOB-005: 0"]

    async def test_unknown_card_changes_nothing(self, loaded: AsyncSession) -> None:
        with pytest.raises(UnknownCardError):
            await run(
                build_parser().parse_args(["collect", "--id", "LOB-001", "XXX-999", "--count", "2"])
            )

        args = build_parser().parse_args(["list", "cards", "--formatter", "{in_collection}"])
        assert await run(args) == ["0", "0", "0"]

    def test_negative_count_rejected_by_parser(self) -> None:
        with pytest.raises(SystemExit):
            build_parser().parse_args(["collect", "--id", "LOB-001", "--count", "-1"])


class TestAddReference:
    async def test_added_rarity_unblocks_loading(
        self, loaded: AsyncSession, session: AsyncSession
    ) -> None:
        export = SeriesExport(
            name="Pharaoh's Servant",
            ncards=1,
            release_date="2002-10-20",
            cards=[
                CardExport(
                    card_number="PSV-EN000",
                    name="Jinzo",
                    rarity="Ultimate Rare",
                    category="Effect Monster",
                )
            ],
        )
        with pytest.raises(UnknownRarityError):
            await ingest_series_export(session, export)

        lines = await run(build_parser().parse_args(["add", "rarity", "Ultimate Rare"]))

        assert lines == ["Registered rarity 'Ultimate Rare'"]
        assert await ingest_series_export(session, export) == 1

    async def test_add_rarity_twice(self, loaded: AsyncSession) -> None:
        await run(build_parser().parse_args(["add", "rarity", "Ghost Rare"]))
        lines = await run(build_parser().parse_args(["add", "rarity", "Ghost Rare"]))

        assert lines == ["Registered rarity 'Ghost Rare'"]

    async def test_add_card_type(self, loaded: AsyncSession, session: AsyncSession) -> None:
        lines = await run(build_parser().parse_args(["add", "card-type", "Effect Monster"]))

        assert lines == ["Registered card type 'Effect Monster'"]
        result = await session.execute(select(CardTypeDB).where(CardTypeDB.sub == "Effect"))
        assert result.scalar_one().main == "Monster"

    def test_unknown_kind_rejected(self) -> None:
        with pytest.raises(SystemExit):
            build_parser().parse_args(["add", "series", "Metal Raiders"])


class TestFind:
    async def test_find_cards_by_name(self, loaded: AsyncSession) -> None:
        args = build_parser().parse_args(
            ["find", "cards", "--query", "giant", "--formatter", "{number}"]
        )

        lines = await run(args)

        assert lines == ["LOB-002"]

    async def test_find_cards_without_query_lists_all(self, loaded: AsyncSession) -> None:
        lines = await run(build_parser().parse_args(["find", "cards"]))

        assert len(lines) == 3

    async def test_find_series_prints_page_url(self) -> None:
        lines = await run(
            build_parser().parse_args(["find", "series", "--query", "metal raiders"])
        )

        assert lines == ["https://yugioh.fandom.com/wiki/Metal_Raiders"]

    def test_find_series_requires_query(self) -> None:
        with pytest.raises(SystemExit):
            main(["find", "series"])


class TestOtherCommands:
    async def test_scrape_uses_default_output(self) -> None:
        export = SeriesExport(name="Metal Raiders", ncards=0, release_date="2002-06-26")
        with patch(
            "cardbinder.cli.scrape_series", new_callable=AsyncMock, return_value=export
        ) as scrape:
            lines = await run(build_parser().parse_args(["scrape", "metal raiders"]))

        scrape.assert_awaited_once_with("metal raiders", Path("Metal_Raiders.json"))
        assert lines == ["Wrote 0 cards of 'Metal Raiders' to Metal_Raiders.json"]

    async def test_load(self, tmp_path: Path) -> None:
        with patch("cardbinder.cli.load_export", new_callable=AsyncMock, return_value=3):
            lines = await run(build_parser().parse_args(["load", str(tmp_path / "lob.json")]))

        assert lines == ["Inserted 3 cards"]

    async def test_init(self) -> None:
        with patch("cardbinder.cli.init_db", new_callable=AsyncMock) as init_db:
            lines = await run(build_parser().parse_args(["init"]))

        init_db.assert_awaited_once()
        assert lines == ["Database initialized"]


class TestMain:
    def test_prints_lines(self, capsys: pytest.CaptureFixture[str]) -> None:
        with patch("cardbinder.cli.run", new_callable=AsyncMock, return_value=["LOB-001: 1"]):
            main(["collect", "--id", "LOB-001"])

        assert capsys.readouterr().out == "LOB-001: 1\n"

    def test_known_error_exits_nonzero(self) -> None:
        with (
            patch(
                "cardbinder.cli.run",
                new_callable=AsyncMock,
                side_effect=UnknownCardError("XXX-999"),
            ),
            pytest.raises(SystemExit) as exc_info,
        ):
            main(["collect", "--id", "XXX-999"])

        assert exc_info.value.code == 1

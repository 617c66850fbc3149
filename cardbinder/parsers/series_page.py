"""
Series page extraction.

Turns a wiki series page into canonical catalog records:

1. parse_series_page() reads the card table and the infobox blocks
   out of the page HTML (structure only, no interpretation).
2. extract() interprets rows and metadata: rarity normalization, name
   cleanup, category splitting and release-date parsing.
3. build_export() renders the result as the ingestion export document.

Web pages are inherently fragile. Row-level problems degrade to empty
fields; only missing series metadata aborts an extraction.
"""

import logging
import re
from collections.abc import Sequence
from dataclasses import dataclass, field
from datetime import datetime

import bs4

from cardbinder.models.card import CardRecord, CardType, Rarity
from cardbinder.models.export import CardExport, SeriesExport
from cardbinder.models.failure import MissingMetadataError
from cardbinder.models.series import RELEASE_DATES_LABEL, SeriesMeta, SeriesRecord
from cardbinder.parsers.card_number import split_card_number
from cardbinder.parsers.rarity import normalize_rarity

logger = logging.getLogger(__name__)

# Positional columns of a card table row
NUMBER_COLUMN = 0
NAME_COLUMN = 1
RARITY_COLUMN = 2
CATEGORY_COLUMN = 3

# Dates as they appear in infobox values
ISO_DATE = re.compile(r"\d{4}-\d{2}-\d{2}")
LONG_DATE = re.compile(r"[A-Z][a-z]+\.? \d{1,2}, \d{4}")
FOOTNOTE = re.compile(r"\[[^\]]*\]")


@dataclass
class ExtractionResult:
    """Records extracted from one series page."""

    series: SeriesRecord
    cards: list[CardRecord] = field(default_factory=list)


def parse_release_date(text: str) -> str:
    """
    Parse a release date value into an ISO date string.

    Accepts "March 8, 2002" and "2002-03-08", with trailing annotations
    such as "(North America)" or "[1]" ignored.

    Raises:
        MissingMetadataError: If no date can be read from the value
    """
    cleaned = FOOTNOTE.sub("", text).strip()

    match = ISO_DATE.search(cleaned)
    if match:
        candidates = [(match.group(0), "%Y-%m-%d")]
    else:
        candidates = []
    match = LONG_DATE.search(cleaned)
    if match:
        value = match.group(0).replace(".", "")
        candidates += [(value, "%B %d, %Y"), (value, "%b %d, %Y")]

    for value, fmt in candidates:
        try:
            return datetime.strptime(value, fmt).date().isoformat()
        except ValueError:
            continue

    raise MissingMetadataError(RELEASE_DATES_LABEL, detail=f"Unparseable release date {text!r}")


def _cell(row: Sequence[str], index: int) -> str:
    """Cell text at `index`, or empty string when the row is short."""
    if index < len(row) and row[index] is not None:
        return row[index]
    return ""


def _card_from_row(row: Sequence[str]) -> CardRecord:
    number = _cell(row, NUMBER_COLUMN).strip()
    # Names are sometimes wrapped in quotes in the source markup
    name = _cell(row, NAME_COLUMN).replace('"', "").strip()
    rarity = normalize_rarity(_cell(row, RARITY_COLUMN))
    category = _cell(row, CATEGORY_COLUMN).strip()

    _, collection_number = split_card_number(number)
    return CardRecord(
        number=number,
        name=name,
        rarity=Rarity(name=rarity),
        card_type=CardType.parse(category),
        collection_number=collection_number,
    )


def extract(rows: Sequence[Sequence[str]], meta: SeriesMeta) -> ExtractionResult:
    """
    Extract canonical records from card table rows and series metadata.

    Each row holds, positionally: card number, name, rarity text and
    category text. Missing cells become empty strings. Cards keep the
    source row order.

    Raises:
        MissingMetadataError: If meta has no "Release dates" block, or the
            block holds no values. Nothing is extracted in that case.
    """
    release_dates = meta.values(RELEASE_DATES_LABEL)
    if release_dates is None:
        raise MissingMetadataError(
            RELEASE_DATES_LABEL, detail=f"No '{RELEASE_DATES_LABEL}' block on page"
        )
    release_dates = [value for value in release_dates if value.strip()]
    if not release_dates:
        raise MissingMetadataError(
            RELEASE_DATES_LABEL, detail=f"'{RELEASE_DATES_LABEL}' block has no values"
        )

    cards = [_card_from_row(row) for row in rows]
    series = SeriesRecord(
        name=meta.name.strip(),
        release_date=parse_release_date(release_dates[0]),
        card_count=len(cards),
    )
    logger.info("Extracted %d cards for series %r", len(cards), series.name)
    return ExtractionResult(series=series, cards=cards)


def _cell_text(cell: bs4.Tag) -> str:
    """Rendered cell text with <br> kept as line breaks."""
    for br in cell.find_all("br"):
        br.replace_with("\n")
    return cell.get_text()


def parse_series_page(html: str) -> tuple[list[list[str]], SeriesMeta]:
    """
    Read the card table and infobox metadata from a series page.

    Args:
        html: Raw HTML content of the series page

    Returns:
        Tuple of (rows, meta). rows holds the text of every body row's
        cells; meta holds the infobox title and each labeled infobox block.
    """
    soup = bs4.BeautifulSoup(html, "html.parser")

    rows: list[list[str]] = []
    table = soup.select_one("table.card-list")
    if table is not None:
        for table_row in table.select("tbody tr") or table.find_all("tr"):
            cells = table_row.find_all("td")
            if not cells:
                # Header row
                continue
            rows.append([_cell_text(cell) for cell in cells])

    title = soup.select_one("aside > h2")
    name = title.get_text(strip=True) if title is not None else ""

    fields: dict[str, list[str]] = {}
    for section in soup.select("aside > section"):
        heading = section.find("h2")
        if heading is None:
            continue
        label = heading.get_text(strip=True)
        values = [value.get_text(strip=True) for value in section.select(".pi-data-value")]
        fields.setdefault(label, []).extend(values)

    return rows, SeriesMeta(name=name, fields=fields)


def extract_series_page(html: str) -> ExtractionResult:
    """Parse a series page and extract its records."""
    rows, meta = parse_series_page(html)
    return extract(rows, meta)


def build_export(result: ExtractionResult) -> SeriesExport:
    """Render extracted records as the ingestion export document."""
    return SeriesExport(
        name=result.series.name,
        ncards=len(result.cards),
        release_date=result.series.release_date,
        cards=[
            CardExport(
                card_number=card.number,
                name=card.name,
                rarity=card.rarity.name,
                category=card.card_type.display,
            )
            for card in result.cards
        ],
    )

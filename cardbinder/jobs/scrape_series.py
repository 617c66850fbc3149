"""
Scrape a series page from the wiki into an export file.

Fetches the series page, extracts its card table and release date and
writes the ingestion export JSON. Can be run as a standalone script.
"""

import argparse
import asyncio
import logging
from pathlib import Path

import httpx

from cardbinder.config import settings
from cardbinder.models.export import SeriesExport
from cardbinder.parsers.series_page import build_export, extract_series_page

logger = logging.getLogger(__name__)

# Words left lowercase in wiki page titles
LOWERCASE_WORDS = frozenset({"the", "of"})


def page_title(series_name: str) -> str:
    """
    Wiki page title for a series name.

    Words are capitalized and joined with underscores; "the" and "of" stay
    lowercase except as the first word:
    "legend of blue eyes white dragon" -> "Legend_of_Blue_Eyes_White_Dragon"
    """
    words = series_name.split()
    titled = []
    for i, word in enumerate(words):
        if i > 0 and word.lower() in LOWERCASE_WORDS:
            titled.append(word.lower())
        else:
            titled.append(word[:1].upper() + word[1:])
    return "_".join(titled)


def series_page_url(series_name: str) -> str:
    return f"{settings.wiki_base_url.rstrip('/')}/{page_title(series_name)}"


async def fetch_series_page(series_name: str, client: httpx.AsyncClient | None = None) -> str:
    """
    Fetch the HTML of a series page.

    Args:
        series_name: Series name, in any capitalization
        client: Optional httpx client for connection reuse

    Raises:
        httpx.HTTPError: If the request fails
    """
    url = series_page_url(series_name)
    logger.info("Fetching %s", url)

    if client:
        response = await client.get(url)
    else:
        async with httpx.AsyncClient(
            headers={"User-Agent": settings.user_agent},
            follow_redirects=True,
            timeout=settings.request_timeout,
        ) as own_client:
            response = await own_client.get(url)

    response.raise_for_status()
    return response.text


async def scrape_series(
    series_name: str,
    output_path: Path | None = None,
    client: httpx.AsyncClient | None = None,
) -> SeriesExport:
    """
    Fetch and extract a series page, optionally writing the export file.

    Raises:
        httpx.HTTPError: If the page cannot be fetched
        MissingMetadataError: If the page has no release date; nothing is
            written in that case
    """
    html = await fetch_series_page(series_name, client=client)
    export = build_export(extract_series_page(html))

    if output_path is not None:
        output_path.parent.mkdir(parents=True, exist_ok=True)
        output_path.write_text(export.model_dump_json(indent=2), encoding="utf-8")
        logger.info("Wrote %d cards to %s", export.ncards, output_path)

    return export


def default_output_path(series_name: str) -> Path:
    return Path(f"{page_title(series_name)}.json")


def main() -> None:
    """CLI entry point."""
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    parser = argparse.ArgumentParser(description="Scrape a series page into an export file")
    parser.add_argument("series", help="Series name, e.g. 'Legend of Blue Eyes White Dragon'")
    parser.add_argument("--output", type=Path, default=None, help="Export file path")
    args = parser.parse_args()

    asyncio.run(scrape_series(args.series, args.output or default_output_path(args.series)))


if __name__ == "__main__":
    main()

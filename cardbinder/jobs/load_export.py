"""
Load a series export file into the catalog store.
"""

import argparse
import asyncio
import logging
from pathlib import Path

from cardbinder.db.database import async_session_factory
from cardbinder.db.operations import ingest_series_export
from cardbinder.models.export import SeriesExport

logger = logging.getLogger(__name__)


def read_export(path: Path) -> SeriesExport:
    """
    Read and validate an export file.

    Raises:
        pydantic.ValidationError: If the file is not a valid export
    """
    return SeriesExport.model_validate_json(path.read_text(encoding="utf-8"))


async def load_export(path: Path) -> int:
    """
    Load one export file in a single transaction.

    Returns:
        Number of cards inserted
    """
    export = read_export(path)
    logger.info("Loading series %r (%d cards) from %s", export.name, export.ncards, path)

    async with async_session_factory() as session:
        inserted = await ingest_series_export(session, export)
        await session.commit()

    return inserted


def main() -> None:
    """CLI entry point."""
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    parser = argparse.ArgumentParser(description="Load a series export into the catalog")
    parser.add_argument("file", type=Path, help="Export JSON file")
    args = parser.parse_args()

    asyncio.run(load_export(args.file))


if __name__ == "__main__":
    main()

"""CLI command that writes every stored book to a text file."""

from __future__ import annotations

import argparse
import logging
from pathlib import Path

from dotenv import load_dotenv

from gutencat.catalog.export import dump_catalog
from gutencat.cli.common import add_store_arguments, configure_logging, settings_from_args
from gutencat.errors import CatalogConfigurationError, StoreError
from gutencat.store import CatalogRepository, build_store


LOGGER = logging.getLogger(__name__)


def main(argv: list[str] | None = None) -> int:
    load_dotenv()

    parser = argparse.ArgumentParser(description="Dump the stored catalog as one line per book")
    parser.add_argument("--output", default="catalog.txt", help="Destination file; must not exist yet")
    add_store_arguments(parser)
    args = parser.parse_args(argv)
    configure_logging(args.log_level)

    output = Path(args.output)
    try:
        settings = settings_from_args(args)
        with CatalogRepository(build_store(settings)) as repository:
            books = repository.list_books()
    except (CatalogConfigurationError, StoreError, ValueError) as exc:
        LOGGER.error("%s", exc)
        return 2

    if not books:
        LOGGER.info("No books stored in the database")
        return 1

    try:
        written = dump_catalog(books, output)
    except FileExistsError:
        LOGGER.error("Cannot create dump file, it already exists: %s", output)
        return 1

    LOGGER.info("Wrote %d books to %s", written, output.resolve())
    return 0


if __name__ == "__main__":
    raise SystemExit(main())

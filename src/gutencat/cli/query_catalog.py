"""CLI command for looking up stored books by id."""

from __future__ import annotations

import argparse
import json
import logging

from dotenv import load_dotenv

from gutencat.cli.common import add_store_arguments, configure_logging, settings_from_args
from gutencat.errors import CatalogConfigurationError, StoreError
from gutencat.store import CatalogRepository, build_store


LOGGER = logging.getLogger(__name__)


def _split_ids(raw: str) -> list[str]:
    return [part.strip() for part in raw.split(",") if part.strip()]


def main(argv: list[str] | None = None) -> int:
    load_dotenv()

    parser = argparse.ArgumentParser(description="Show catalog books stored in the database")
    target = parser.add_mutually_exclusive_group(required=True)
    target.add_argument("--id", dest="ids", help="Book id, or comma-separated list of ids")
    target.add_argument("--all", action="store_true", help="List every stored book")
    add_store_arguments(parser)
    args = parser.parse_args(argv)
    configure_logging(args.log_level)

    try:
        settings = settings_from_args(args)
        with CatalogRepository(build_store(settings)) as repository:
            if args.all:
                books = repository.list_books()
                missing: list[str] = []
            else:
                requested = _split_ids(args.ids)
                if not requested:
                    parser.error("--id requires at least one book id")
                books = repository.get_books(requested)
                found = {book.id for book in books}
                missing = [book_id for book_id in requested if book_id not in found]
    except (CatalogConfigurationError, StoreError, ValueError) as exc:
        LOGGER.error("%s", exc)
        return 2

    payload = {
        "count": len(books),
        "books": [book.to_dict() for book in books],
        "missing": missing,
    }
    print(json.dumps(payload, ensure_ascii=False, indent=2))
    return 0 if not missing else 1


if __name__ == "__main__":
    raise SystemExit(main())

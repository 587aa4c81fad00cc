"""CLI entrypoint for loading an RDF document tree into the catalog store."""

from __future__ import annotations

import argparse
import json
import logging

from dotenv import load_dotenv

from gutencat.catalog.source import RecordSource
from gutencat.catalog.sync import synchronize
from gutencat.cli.common import add_store_arguments, configure_logging, settings_from_args
from gutencat.errors import CatalogConfigurationError, SyncAbortedError
from gutencat.store import build_store


LOGGER = logging.getLogger(__name__)


def main(argv: list[str] | None = None) -> int:
    load_dotenv()

    parser = argparse.ArgumentParser(description="Load RDF book records into the catalog database")
    parser.add_argument("--root", required=True, help="Directory holding one sub-directory per book")
    parser.add_argument(
        "--preload-ids",
        action="store_true",
        default=None,
        help="Load stored ids into memory once instead of one lookup per book",
    )
    add_store_arguments(parser)
    args = parser.parse_args(argv)
    configure_logging(args.log_level)

    try:
        settings = settings_from_args(args)
        store = build_store(settings)
        result = synchronize(
            args.root,
            store,
            source=RecordSource(settings.layout),
            preload_ids=settings.preload_ids,
        )
    except (CatalogConfigurationError, ValueError) as exc:
        LOGGER.error("%s", exc)
        return 2
    except SyncAbortedError as exc:
        LOGGER.error("%s", exc)
        print(json.dumps(exc.result.to_dict(), ensure_ascii=True, indent=2))
        return 2

    print(json.dumps(result.to_dict(), ensure_ascii=True, indent=2))
    return 0 if result.skipped_failed == 0 else 1


if __name__ == "__main__":
    raise SystemExit(main())

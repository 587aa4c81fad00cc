"""Argument and logging helpers shared by the catalog CLIs."""

from __future__ import annotations

import argparse
import logging
import os

from gutencat.config import SUPPORTED_BACKENDS, CatalogSettings


LOG_FORMAT = "%(asctime)s %(levelname)s %(message)s"


def add_store_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--db-path", default=None, help="SQLite database path (overrides GUTENCAT_DB_PATH)")
    parser.add_argument(
        "--backend",
        choices=SUPPORTED_BACKENDS,
        default=None,
        help="Store backend (overrides GUTENCAT_DB_BACKEND)",
    )
    parser.add_argument("--db-url", default=None, help="PostgreSQL DSN (overrides GUTENCAT_DB_URL)")
    parser.add_argument("--log-level", default="INFO", help="Logging level (default: INFO)")


def configure_logging(level_name: str) -> None:
    level = getattr(logging, str(level_name).upper(), logging.INFO)
    logging.basicConfig(level=level, format=LOG_FORMAT)


def settings_from_args(args: argparse.Namespace) -> CatalogSettings:
    """Environment settings with command-line overrides applied."""

    environ = dict(os.environ)
    if args.db_path is not None:
        environ["GUTENCAT_DB_PATH"] = str(args.db_path)
    if args.backend is not None:
        environ["GUTENCAT_DB_BACKEND"] = args.backend
    if args.db_url is not None:
        environ["GUTENCAT_DB_URL"] = args.db_url
    if getattr(args, "preload_ids", None) is not None:
        environ["GUTENCAT_PRELOAD_IDS"] = "true" if args.preload_ids else "false"
    return CatalogSettings.from_env(environ)

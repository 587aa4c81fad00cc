"""Catalog store backends and the factory that selects one."""

from __future__ import annotations

from gutencat.config import CatalogSettings
from gutencat.store.base import CatalogConnection, CatalogStore
from gutencat.store.postgres_store import PostgresCatalogStore
from gutencat.store.repository import CatalogRepository
from gutencat.store.sqlite_store import SQLiteCatalogStore


def build_store(settings: CatalogSettings) -> CatalogStore:
    """Return the store backend named by ``settings.backend``."""

    if settings.backend == "sqlite":
        return SQLiteCatalogStore(settings.db_path)
    if settings.backend == "postgresql":
        if not settings.db_url:
            raise ValueError("GUTENCAT_DB_URL is required for the postgresql backend")
        return PostgresCatalogStore(settings.db_url)
    raise ValueError(f"Unsupported catalog backend: {settings.backend}")


__all__ = [
    "CatalogConnection",
    "CatalogRepository",
    "CatalogStore",
    "PostgresCatalogStore",
    "SQLiteCatalogStore",
    "build_store",
]

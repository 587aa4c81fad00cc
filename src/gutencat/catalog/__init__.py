"""Catalog discovery, extraction and synchronization interfaces."""

from .layout import DEFAULT_LAYOUT, DocumentLayout
from .models import Book, Candidate, InsertOutcome, InsertStatus, SyncResult, SyncState
from .snapshot import read_book, read_catalog
from .source import RecordSource
from .sync import CatalogSynchronizer, synchronize

__all__ = [
    "Book",
    "Candidate",
    "CatalogSynchronizer",
    "DEFAULT_LAYOUT",
    "DocumentLayout",
    "InsertOutcome",
    "InsertStatus",
    "RecordSource",
    "SyncResult",
    "SyncState",
    "read_book",
    "read_catalog",
    "synchronize",
]

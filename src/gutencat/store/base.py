"""Capability contract shared by every catalog store backend."""

from __future__ import annotations

from typing import Iterable, Iterator, Protocol, runtime_checkable

from gutencat.catalog.models import Book, InsertOutcome


@runtime_checkable
class CatalogConnection(Protocol):
    """One transactional, non-autocommit session against the books table."""

    def ensure_table(self) -> bool:
        """Create the books table; return False when it already existed."""

    def exists(self, book_id: str) -> bool:
        """Point lookup by primary key; raises StoreError on driver failure."""

    def insert(self, book: Book) -> InsertOutcome:
        """Insert one row without committing."""

    def iter_ids(self) -> Iterator[str]:
        ...

    def fetch_all(self) -> list[Book]:
        ...

    def fetch_by_ids(self, book_ids: Iterable[str]) -> list[Book]:
        ...

    def delete(self, book_id: str) -> bool:
        ...

    def count(self) -> int:
        ...

    def commit(self) -> None:
        ...

    def rollback(self) -> None:
        ...

    def close(self) -> None:
        ...

    def __enter__(self) -> "CatalogConnection":
        ...

    def __exit__(self, exc_type, exc, tb) -> None:
        ...


@runtime_checkable
class CatalogStore(Protocol):
    """Explicitly constructed handle that hands out catalog connections."""

    backend: str

    def connect(self) -> CatalogConnection:
        """Open a dedicated connection; raises CatalogConfigurationError."""

"""Data-access operations over stored books, outside the sync engine."""

from __future__ import annotations

import logging
from typing import Iterable

from gutencat.catalog.models import Book, InsertOutcome, InsertStatus
from gutencat.store.base import CatalogConnection, CatalogStore


LOGGER = logging.getLogger(__name__)


class CatalogRepository:
    """Storage facade for lookups, ad-hoc inserts and deletions.

    Owns one connection for its lifetime and commits after every mutating
    call.
    """

    def __init__(self, store: CatalogStore) -> None:
        self._connection: CatalogConnection = store.connect()
        try:
            self._connection.ensure_table()
            self._connection.commit()
        except Exception:
            self._connection.close()
            raise

    def close(self) -> None:
        self._connection.close()

    def __enter__(self) -> "CatalogRepository":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def list_books(self) -> list[Book]:
        return self._connection.fetch_all()

    def get_book(self, book_id: str) -> Book | None:
        books = self._connection.fetch_by_ids([book_id])
        return books[0] if books else None

    def get_books(self, book_ids: Iterable[str]) -> list[Book]:
        return self._connection.fetch_by_ids(book_ids)

    def count(self) -> int:
        return self._connection.count()

    def add_book(self, book: Book) -> InsertOutcome:
        outcome = self._connection.insert(book)
        if outcome.status is InsertStatus.INSERTED:
            self._connection.commit()
        elif outcome.status is InsertStatus.DUPLICATE:
            LOGGER.info("Book %s already stored", book.id)
        else:
            LOGGER.warning("Error saving book %s: %s", book.id, outcome.reason)
            self._connection.rollback()
        return outcome

    def delete_book(self, book_id: str) -> bool:
        deleted = self._connection.delete(book_id)
        self._connection.commit()
        return deleted

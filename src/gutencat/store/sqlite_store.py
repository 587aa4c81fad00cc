"""SQLite backend for the catalog store."""

from __future__ import annotations

import logging
from pathlib import Path
import sqlite3
from typing import Iterable, Iterator

from gutencat.catalog.models import Book, InsertOutcome
from gutencat.errors import CatalogConfigurationError, StoreError
from gutencat.store.schema import (
    COUNT_BOOKS,
    DELETE_BOOK,
    INSERT_BOOK,
    SELECT_ALL_BOOKS,
    SELECT_ALL_IDS,
    SELECT_BOOK_ID,
    apply_runtime_pragmas,
    create_books_table,
    select_books_by_ids,
)


LOGGER = logging.getLogger(__name__)


def _is_unique_violation(exc: sqlite3.IntegrityError) -> bool:
    return "UNIQUE constraint failed" in str(exc)


def _row_to_book(row: sqlite3.Row) -> Book:
    return Book(
        id=row["id"],
        title=row["title"] or "",
        author=row["author"] or "",
        language=row["language"] or "",
    )


class SQLiteCatalogConnection:
    """Thin transactional layer over one sqlite3 connection."""

    def __init__(self, connection: sqlite3.Connection) -> None:
        self._connection = connection
        self._closed = False

    @property
    def connection(self) -> sqlite3.Connection:
        return self._connection

    def __enter__(self) -> "SQLiteCatalogConnection":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def ensure_table(self) -> bool:
        try:
            return create_books_table(self._connection)
        except sqlite3.Error as exc:
            raise StoreError(f"Failed to create books table: {exc}") from exc

    def exists(self, book_id: str) -> bool:
        try:
            row = self._connection.execute(SELECT_BOOK_ID, (book_id,)).fetchone()
        except sqlite3.Error as exc:
            raise StoreError(f"Lookup failed for book {book_id}: {exc}") from exc
        return row is not None

    def insert(self, book: Book) -> InsertOutcome:
        try:
            self._connection.execute(INSERT_BOOK, (book.id, book.author, book.title, book.language))
        except sqlite3.IntegrityError as exc:
            if _is_unique_violation(exc):
                return InsertOutcome.duplicate(str(exc))
            return InsertOutcome.failed(str(exc))
        except sqlite3.Error as exc:
            return InsertOutcome.failed(str(exc))
        return InsertOutcome.inserted()

    def iter_ids(self) -> Iterator[str]:
        try:
            rows = self._connection.execute(SELECT_ALL_IDS).fetchall()
        except sqlite3.Error as exc:
            raise StoreError(f"Failed to list book ids: {exc}") from exc
        for row in rows:
            yield row["id"]

    def fetch_all(self) -> list[Book]:
        try:
            rows = self._connection.execute(SELECT_ALL_BOOKS).fetchall()
        except sqlite3.Error as exc:
            raise StoreError(f"Failed to list books: {exc}") from exc
        return [_row_to_book(row) for row in rows]

    def fetch_by_ids(self, book_ids: Iterable[str]) -> list[Book]:
        ids = list(dict.fromkeys(book_ids))
        if not ids:
            return []
        try:
            rows = self._connection.execute(select_books_by_ids(len(ids)), tuple(ids)).fetchall()
        except sqlite3.Error as exc:
            raise StoreError(f"Failed to fetch books: {exc}") from exc
        return [_row_to_book(row) for row in rows]

    def delete(self, book_id: str) -> bool:
        try:
            cursor = self._connection.execute(DELETE_BOOK, (book_id,))
        except sqlite3.Error as exc:
            raise StoreError(f"Failed to delete book {book_id}: {exc}") from exc
        return cursor.rowcount > 0

    def count(self) -> int:
        try:
            row = self._connection.execute(COUNT_BOOKS).fetchone()
        except sqlite3.Error as exc:
            raise StoreError(f"Failed to count books: {exc}") from exc
        return int(row["c"])

    def commit(self) -> None:
        try:
            self._connection.commit()
        except sqlite3.Error as exc:
            raise StoreError(f"Commit failed: {exc}") from exc

    def rollback(self) -> None:
        try:
            self._connection.rollback()
        except sqlite3.Error as exc:
            raise StoreError(f"Rollback failed: {exc}") from exc

    def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        self._connection.close()


class SQLiteCatalogStore:
    """Catalog store backed by a local SQLite database file."""

    backend = "sqlite"

    def __init__(self, db_path: str | Path) -> None:
        self._db_path = Path(db_path)

    @property
    def db_path(self) -> Path:
        return self._db_path

    def connect(self) -> SQLiteCatalogConnection:
        try:
            connection = sqlite3.connect(str(self._db_path))
        except sqlite3.Error as exc:
            raise CatalogConfigurationError(f"Cannot open SQLite database {self._db_path}: {exc}") from exc

        try:
            connection.row_factory = sqlite3.Row
            apply_runtime_pragmas(connection)
        except sqlite3.Error as exc:
            connection.close()
            raise CatalogConfigurationError(f"Cannot open SQLite database {self._db_path}: {exc}") from exc

        LOGGER.debug("Opened SQLite catalog at %s", self._db_path)
        return SQLiteCatalogConnection(connection)

"""PostgreSQL backend for the catalog store.

Requires ``psycopg`` (v3), installed with the ``postgres`` extra. The driver
is imported when a connection is opened so the SQLite backend works without
it.
"""

from __future__ import annotations

import logging
from typing import Any, Iterable, Iterator

from gutencat.catalog.models import Book, InsertOutcome
from gutencat.errors import CatalogConfigurationError, StoreError
from gutencat.store.schema import (
    COUNT_BOOKS,
    CREATE_BOOKS_TABLE,
    DELETE_BOOK,
    INSERT_BOOK,
    SELECT_ALL_BOOKS,
    SELECT_ALL_IDS,
    SELECT_BOOK_ID,
    select_books_by_ids,
    with_placeholder,
)


LOGGER = logging.getLogger(__name__)

_PLACEHOLDER = "%s"
_SAVEPOINT = "gutencat_stmt"


def _import_psycopg() -> Any:
    try:
        import psycopg
    except ImportError as exc:
        raise ImportError("psycopg not installed. Install with: pip install 'gutencat[postgres]'") from exc
    return psycopg


def _row_to_book(row: dict[str, Any]) -> Book:
    return Book(
        id=row["id"],
        title=row["title"] or "",
        author=row["author"] or "",
        language=row["language"] or "",
    )


def _redact(dsn: str) -> str:
    return dsn.split("@", 1)[1] if "@" in dsn else "..."


class PostgresCatalogConnection:
    """Non-autocommit psycopg connection; single statements run in savepoints."""

    def __init__(self, connection: Any, psycopg: Any) -> None:
        self._connection = connection
        self._psycopg = psycopg
        self._closed = False

    def __enter__(self) -> "PostgresCatalogConnection":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def _execute(self, statement: str, params: tuple[Any, ...] = ()) -> Any:
        return self._connection.execute(with_placeholder(statement, _PLACEHOLDER), params)

    def _guarded(self, statement: str, params: tuple[Any, ...] = ()) -> Any:
        """Run one statement so that its failure leaves the transaction usable."""

        self._connection.execute(f"SAVEPOINT {_SAVEPOINT}")
        try:
            cursor = self._execute(statement, params)
        except self._psycopg.Error:
            self._connection.execute(f"ROLLBACK TO SAVEPOINT {_SAVEPOINT}")
            raise
        self._connection.execute(f"RELEASE SAVEPOINT {_SAVEPOINT}")
        return cursor

    def ensure_table(self) -> bool:
        try:
            self._guarded(CREATE_BOOKS_TABLE)
        except self._psycopg.errors.DuplicateTable:
            return False
        except self._psycopg.Error as exc:
            raise StoreError(f"Failed to create books table: {exc}") from exc
        return True

    def exists(self, book_id: str) -> bool:
        try:
            row = self._guarded(SELECT_BOOK_ID, (book_id,)).fetchone()
        except self._psycopg.Error as exc:
            raise StoreError(f"Lookup failed for book {book_id}: {exc}") from exc
        return row is not None

    def insert(self, book: Book) -> InsertOutcome:
        try:
            self._guarded(INSERT_BOOK, (book.id, book.author, book.title, book.language))
        except self._psycopg.errors.UniqueViolation as exc:
            return InsertOutcome.duplicate(str(exc))
        except self._psycopg.Error as exc:
            return InsertOutcome.failed(str(exc))
        return InsertOutcome.inserted()

    def iter_ids(self) -> Iterator[str]:
        try:
            rows = self._execute(SELECT_ALL_IDS).fetchall()
        except self._psycopg.Error as exc:
            raise StoreError(f"Failed to list book ids: {exc}") from exc
        for row in rows:
            yield row["id"]

    def fetch_all(self) -> list[Book]:
        try:
            rows = self._execute(SELECT_ALL_BOOKS).fetchall()
        except self._psycopg.Error as exc:
            raise StoreError(f"Failed to list books: {exc}") from exc
        return [_row_to_book(row) for row in rows]

    def fetch_by_ids(self, book_ids: Iterable[str]) -> list[Book]:
        ids = list(dict.fromkeys(book_ids))
        if not ids:
            return []
        try:
            rows = self._execute(select_books_by_ids(len(ids)), tuple(ids)).fetchall()
        except self._psycopg.Error as exc:
            raise StoreError(f"Failed to fetch books: {exc}") from exc
        return [_row_to_book(row) for row in rows]

    def delete(self, book_id: str) -> bool:
        try:
            cursor = self._execute(DELETE_BOOK, (book_id,))
        except self._psycopg.Error as exc:
            raise StoreError(f"Failed to delete book {book_id}: {exc}") from exc
        return cursor.rowcount > 0

    def count(self) -> int:
        try:
            row = self._execute(COUNT_BOOKS).fetchone()
        except self._psycopg.Error as exc:
            raise StoreError(f"Failed to count books: {exc}") from exc
        return int(row["c"])

    def commit(self) -> None:
        try:
            self._connection.commit()
        except self._psycopg.Error as exc:
            raise StoreError(f"Commit failed: {exc}") from exc

    def rollback(self) -> None:
        try:
            self._connection.rollback()
        except self._psycopg.Error as exc:
            raise StoreError(f"Rollback failed: {exc}") from exc

    def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        self._connection.close()


class PostgresCatalogStore:
    """Catalog store backed by a PostgreSQL database."""

    backend = "postgresql"

    def __init__(self, dsn: str, *, connect_timeout: int = 30) -> None:
        if not dsn:
            raise ValueError("PostgreSQL DSN cannot be empty")
        self._dsn = dsn
        self._connect_timeout = connect_timeout

    def connect(self) -> PostgresCatalogConnection:
        psycopg = _import_psycopg()
        from psycopg.rows import dict_row

        try:
            connection = psycopg.connect(
                self._dsn,
                autocommit=False,
                row_factory=dict_row,
                connect_timeout=self._connect_timeout,
            )
        except psycopg.Error as exc:
            raise CatalogConfigurationError(f"Cannot connect to PostgreSQL at {_redact(self._dsn)}: {exc}") from exc

        LOGGER.info("Connected to PostgreSQL: %s", _redact(self._dsn))
        return PostgresCatalogConnection(connection, psycopg)

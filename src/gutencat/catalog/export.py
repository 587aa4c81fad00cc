"""Plain-text dump of stored books."""

from __future__ import annotations

from pathlib import Path
from typing import Iterable

from gutencat.catalog.models import Book


def format_book_line(book: Book) -> str:
    return f"{book.id} {book.language} {book.title} {book.author}"


def dump_catalog(books: Iterable[Book], path: str | Path) -> int:
    """Write one line per book to a new file and return the line count."""

    target = Path(path)
    written = 0
    with target.open("x", encoding="utf-8") as handle:
        for book in books:
            handle.write(format_book_line(book))
            handle.write("\n")
            written += 1
    return written

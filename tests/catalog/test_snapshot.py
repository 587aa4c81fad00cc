from __future__ import annotations

from pathlib import Path

import pytest

from gutencat.catalog.export import dump_catalog
from gutencat.catalog.models import Book
from gutencat.catalog.snapshot import read_book, read_catalog
from gutencat.errors import ExtractionError

_RDF = """<?xml version="1.0" encoding="utf-8"?>
<rdf:RDF xmlns:rdf="http://www.w3.org/1999/02/22-rdf-syntax-ns#"
  xmlns:dcterms="http://purl.org/dc/terms/"
  xmlns:pgterms="http://www.gutenberg.org/2009/pgterms/">
  <pgterms:ebook rdf:about="ebooks/{book_id}">
    <dcterms:title>{title}</dcterms:title>
  </pgterms:ebook>
</rdf:RDF>
"""


def _write_record(root: Path, book_id: str, title: str) -> None:
    folder = root / book_id
    folder.mkdir(parents=True)
    (folder / f"pg{book_id}.rdf").write_text(_RDF.format(book_id=book_id, title=title), encoding="utf-8")


def test_read_catalog_maps_ids_to_books_and_drops_unreadable(tmp_path: Path) -> None:
    _write_record(tmp_path, "1", "One")
    _write_record(tmp_path, "2", "Two\nLines")
    (tmp_path / "3").mkdir()
    (tmp_path / "3" / "pg3.rdf").write_text("not xml", encoding="utf-8")
    _write_record(tmp_path, "4-delete", "Removed")

    snapshot = read_catalog(tmp_path)

    assert sorted(snapshot) == ["1", "2"]
    assert snapshot["2"].title == "TwoLines"
    assert snapshot["1"].author == ""


def test_read_book_extracts_single_record(tmp_path: Path) -> None:
    _write_record(tmp_path, "11", "Eleven")

    book = read_book(tmp_path, "11")

    assert book == Book(id="11", title="Eleven")


def test_read_book_raises_for_unknown_id(tmp_path: Path) -> None:
    with pytest.raises(ExtractionError):
        read_book(tmp_path, "404")


def test_dump_catalog_writes_one_line_per_book(tmp_path: Path) -> None:
    output = tmp_path / "catalog.txt"
    books = [
        Book(id="1", title="Hamlet", author="Shakespeare, William", language="en"),
        Book(id="2", title="Fausto", author="", language="es"),
    ]

    written = dump_catalog(books, output)

    assert written == 2
    assert output.read_text(encoding="utf-8").splitlines() == [
        "1 en Hamlet Shakespeare, William",
        "2 es Fausto ",
    ]


def test_dump_catalog_refuses_to_overwrite(tmp_path: Path) -> None:
    output = tmp_path / "catalog.txt"
    output.write_text("keep me", encoding="utf-8")

    with pytest.raises(FileExistsError):
        dump_catalog([Book(id="1")], output)

    assert output.read_text(encoding="utf-8") == "keep me"


def test_book_identity_uses_id_and_title_only() -> None:
    first = Book(id="1", title="Same", author="A", language="en")
    same_title = Book(id="1", title="Same", author="B", language="fr")
    other_title = Book(id="1", title="Different")

    assert first == same_title
    assert hash(first) == hash(same_title)
    assert first != other_title
    assert len({first, same_title, other_title}) == 2

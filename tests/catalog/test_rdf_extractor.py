from __future__ import annotations

from pathlib import Path

import pytest

from gutencat.catalog.rdf_extractor import MetadataExtractor, RdfMetadataExtractor
from gutencat.errors import ExtractionError

_HEADER = """<?xml version="1.0" encoding="utf-8"?>
<rdf:RDF xml:base="http://www.gutenberg.org/"
  xmlns:rdf="http://www.w3.org/1999/02/22-rdf-syntax-ns#"
  xmlns:dcterms="http://purl.org/dc/terms/"
  xmlns:pgterms="http://www.gutenberg.org/2009/pgterms/">
"""

_NESTED_AGENT = _HEADER + """
  <pgterms:ebook rdf:about="ebooks/84">
    <dcterms:title>Frankenstein; Or, The Modern Prometheus</dcterms:title>
    <dcterms:creator>
      <pgterms:agent rdf:about="2009/agents/61">
        <pgterms:name>Shelley, Mary Wollstonecraft</pgterms:name>
        <pgterms:birthdate rdf:datatype="http://www.w3.org/2001/XMLSchema#integer">1797</pgterms:birthdate>
      </pgterms:agent>
    </dcterms:creator>
    <dcterms:language>
      <rdf:Description rdf:nodeID="Nc1">
        <rdf:value rdf:datatype="http://purl.org/dc/terms/RFC4646">en</rdf:value>
      </rdf:Description>
    </dcterms:language>
  </pgterms:ebook>
</rdf:RDF>
"""

_REFERENCED_AGENT = _HEADER + """
  <pgterms:ebook rdf:about="ebooks/2000">
    <dcterms:title>Don Quijote</dcterms:title>
    <dcterms:creator rdf:resource="2009/agents/505"/>
    <dcterms:language>
      <rdf:Description>
        <rdf:value>es</rdf:value>
      </rdf:Description>
    </dcterms:language>
  </pgterms:ebook>
  <pgterms:agent rdf:about="2009/agents/505">
    <pgterms:name>Cervantes Saavedra, Miguel de</pgterms:name>
  </pgterms:agent>
</rdf:RDF>
"""

_TITLE_ONLY = _HEADER + """
  <pgterms:ebook rdf:about="ebooks/9">
    <dcterms:title>Anonymous Pamphlet</dcterms:title>
  </pgterms:ebook>
</rdf:RDF>
"""


def _write(tmp_path: Path, payload: str) -> Path:
    path = tmp_path / "pg1.rdf"
    path.write_text(payload, encoding="utf-8")
    return path


def test_extracts_title_author_and_language_from_nested_agent(tmp_path: Path) -> None:
    metadata = RdfMetadataExtractor().extract(_write(tmp_path, _NESTED_AGENT))

    assert metadata.title == "Frankenstein; Or, The Modern Prometheus"
    assert metadata.author == "Shelley, Mary Wollstonecraft"
    assert metadata.language == "en"


def test_resolves_creator_referenced_by_resource(tmp_path: Path) -> None:
    metadata = RdfMetadataExtractor().extract(_write(tmp_path, _REFERENCED_AGENT))

    assert metadata.title == "Don Quijote"
    assert metadata.author == "Cervantes Saavedra, Miguel de"
    assert metadata.language == "es"


def test_missing_fields_are_none(tmp_path: Path) -> None:
    metadata = RdfMetadataExtractor().extract(_write(tmp_path, _TITLE_ONLY))

    assert metadata.title == "Anonymous Pamphlet"
    assert metadata.author is None
    assert metadata.language is None


def test_malformed_xml_raises_extraction_error(tmp_path: Path) -> None:
    path = _write(tmp_path, "<rdf:RDF><pgterms:ebook>")

    with pytest.raises(ExtractionError) as excinfo:
        RdfMetadataExtractor().extract(path)

    assert excinfo.value.path == path
    assert "Malformed" in str(excinfo.value)


def test_missing_file_raises_extraction_error(tmp_path: Path) -> None:
    with pytest.raises(ExtractionError):
        RdfMetadataExtractor().extract(tmp_path / "absent.rdf")


def test_extractor_satisfies_protocol() -> None:
    assert isinstance(RdfMetadataExtractor(), MetadataExtractor)

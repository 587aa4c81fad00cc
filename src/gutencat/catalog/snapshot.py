"""Read books straight from the document tree without touching a store."""

from __future__ import annotations

import logging
from pathlib import Path

from gutencat.catalog.layout import DEFAULT_LAYOUT, DocumentLayout
from gutencat.catalog.models import Book, ExtractedMetadata
from gutencat.catalog.normalization import blank_if_missing, strip_line_breaks
from gutencat.catalog.rdf_extractor import MetadataExtractor, RdfMetadataExtractor
from gutencat.catalog.source import RecordSource
from gutencat.errors import ExtractionError


LOGGER = logging.getLogger(__name__)


def book_from_metadata(book_id: str, metadata: ExtractedMetadata) -> Book:
    return Book(
        id=book_id,
        title=strip_line_breaks(metadata.title),
        author=blank_if_missing(metadata.author),
        language=blank_if_missing(metadata.language),
    )


def read_catalog(
    root: str | Path,
    *,
    source: RecordSource | None = None,
    extractor: MetadataExtractor | None = None,
) -> dict[str, Book]:
    """Extract every readable record under ``root`` into an id-keyed map."""

    source = source or RecordSource()
    extractor = extractor or RdfMetadataExtractor()

    snapshot: dict[str, Book] = {}
    for candidate in source.scan(root):
        try:
            metadata = extractor.extract(candidate.path)
        except ExtractionError as exc:
            LOGGER.warning("File %s not read: %s", candidate.id, exc)
            continue
        snapshot[candidate.id] = book_from_metadata(candidate.id, metadata)

    LOGGER.info("Read %d records from %s", len(snapshot), root)
    return snapshot


def read_book(
    root: str | Path,
    book_id: str,
    *,
    layout: DocumentLayout = DEFAULT_LAYOUT,
    extractor: MetadataExtractor | None = None,
) -> Book:
    """Extract one record by id; raises ExtractionError when it is unusable."""

    extractor = extractor or RdfMetadataExtractor()
    path = layout.document_path(root, book_id)
    if not path.is_file():
        raise ExtractionError(path, f"Wrong rdf file. Id: {book_id}")
    return book_from_metadata(book_id, extractor.extract(path))

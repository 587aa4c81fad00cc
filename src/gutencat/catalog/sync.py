"""Synchronize a directory of RDF records into a catalog store.

A run walks the document root once, skips ids the store already holds,
extracts metadata for the rest and inserts them inside a single transaction
that is committed at the end. Per-record problems (missing or malformed
documents, failed or duplicate inserts) are counted and logged; only
configuration errors and a failed commit propagate to the caller.

The existence check and the insert are separate statements, so two runs
against the same store can both decide an id is new. The primary key keeps
exactly one row and the losing insert comes back as a duplicate outcome.
"""

from __future__ import annotations

import logging
from pathlib import Path
import time
from typing import Callable

from gutencat.catalog.existence import ExistenceIndex, PreloadedExistenceIndex, StoreExistenceIndex
from gutencat.catalog.models import Candidate, InsertStatus, SyncResult, SyncState
from gutencat.catalog.rdf_extractor import MetadataExtractor, RdfMetadataExtractor
from gutencat.catalog.snapshot import book_from_metadata
from gutencat.catalog.source import RecordSource
from gutencat.errors import CatalogConfigurationError, ExtractionError, StoreError, SyncAbortedError
from gutencat.store.base import CatalogConnection, CatalogStore


LOGGER = logging.getLogger(__name__)

ExistenceIndexFactory = Callable[[CatalogConnection], ExistenceIndex]


class CatalogSynchronizer:
    """Drive one or more synchronization runs against a store."""

    def __init__(
        self,
        store: CatalogStore,
        *,
        source: RecordSource | None = None,
        extractor: MetadataExtractor | None = None,
        preload_ids: bool = False,
        existence_index_factory: ExistenceIndexFactory | None = None,
    ) -> None:
        self._store = store
        self._source = source or RecordSource()
        self._extractor = extractor or RdfMetadataExtractor()
        self._preload_ids = preload_ids
        self._existence_index_factory = existence_index_factory
        self._state = SyncState.INIT

    @property
    def state(self) -> SyncState:
        return self._state

    def synchronize(self, root: str | Path) -> SyncResult:
        started = time.perf_counter()
        result = SyncResult()
        self._state = SyncState.INIT
        result.state = self._state
        LOGGER.info("Loading catalog from %s into %s store", root, self._store.backend)

        def _on_malformed(name: str, path: Path) -> None:
            result.scanned += 1
            result.record_failure(name, f"Missing metadata document: {path}")

        candidates = self._source.scan(root, on_malformed=_on_malformed)
        connection = self._store.connect()

        try:
            self._prepare_table(connection, result)
            existence = self._build_existence_index(connection)

            self._transition(SyncState.STREAMING, result)
            for candidate in candidates:
                result.scanned += 1
                self._process(candidate, connection, existence, result)

            self._transition(SyncState.FINALIZED, result)
            try:
                connection.commit()
            except StoreError as exc:
                self._abort(connection, result)
                result.duration_ms = int((time.perf_counter() - started) * 1000)
                raise SyncAbortedError(f"Catalog load aborted: {exc}", result) from exc
        except SyncAbortedError:
            raise
        except Exception:
            self._abort(connection, result)
            raise

        connection.close()
        self._transition(SyncState.COMMITTED, result)
        result.duration_ms = int((time.perf_counter() - started) * 1000)
        LOGGER.info(
            "Load complete: %d inserted, %d already stored, %d failed, %d duplicates",
            result.inserted,
            result.skipped_existing,
            result.skipped_failed,
            result.skipped_duplicate,
        )
        return result

    def _prepare_table(self, connection: CatalogConnection, result: SyncResult) -> None:
        try:
            created = connection.ensure_table()
        except StoreError as exc:
            raise CatalogConfigurationError(str(exc)) from exc
        if created:
            LOGGER.info("BOOKS table created")
        else:
            LOGGER.info("Using the existing BOOKS table")
        self._transition(SyncState.TABLE_READY, result)

    def _build_existence_index(self, connection: CatalogConnection) -> ExistenceIndex:
        if self._existence_index_factory is not None:
            return self._existence_index_factory(connection)
        if self._preload_ids:
            try:
                return PreloadedExistenceIndex.from_connection(connection)
            except StoreError as exc:
                raise CatalogConfigurationError(f"Cannot preload stored book ids: {exc}") from exc
        return StoreExistenceIndex(connection)

    def _process(
        self,
        candidate: Candidate,
        connection: CatalogConnection,
        existence: ExistenceIndex,
        result: SyncResult,
    ) -> None:
        if existence.exists(candidate.id):
            result.skipped_existing += 1
            return

        try:
            metadata = self._extractor.extract(candidate.path)
        except ExtractionError as exc:
            LOGGER.warning("File %s not read: %s", candidate.id, exc)
            result.record_failure(candidate.id, str(exc))
            return

        book = book_from_metadata(candidate.id, metadata)

        outcome = connection.insert(book)
        if outcome.status is InsertStatus.INSERTED:
            result.inserted += 1
            if isinstance(existence, PreloadedExistenceIndex):
                existence.add(book.id)
        elif outcome.status is InsertStatus.DUPLICATE:
            LOGGER.debug("Book %s already stored by another writer", book.id)
            result.skipped_duplicate += 1
        else:
            LOGGER.warning("Error saving %s: %s", book.id, outcome.reason)
            result.record_failure(book.id, outcome.reason or "insert failed")

    def _transition(self, state: SyncState, result: SyncResult) -> None:
        self._state = state
        result.state = state

    def _abort(self, connection: CatalogConnection, result: SyncResult) -> None:
        try:
            connection.rollback()
        except StoreError as exc:
            LOGGER.error("Rollback failed: %s", exc)
        finally:
            connection.close()
        self._transition(SyncState.ABORTED, result)


def synchronize(
    root: str | Path,
    store: CatalogStore,
    *,
    source: RecordSource | None = None,
    extractor: MetadataExtractor | None = None,
    preload_ids: bool = False,
    existence_index_factory: ExistenceIndexFactory | None = None,
) -> SyncResult:
    """Load every record under ``root`` that ``store`` does not hold yet."""

    synchronizer = CatalogSynchronizer(
        store,
        source=source,
        extractor=extractor,
        preload_ids=preload_ids,
        existence_index_factory=existence_index_factory,
    )
    return synchronizer.synchronize(root)

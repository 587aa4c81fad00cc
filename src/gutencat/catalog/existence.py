"""Lookups that decide whether a book id is already stored."""

from __future__ import annotations

import logging
from typing import Iterable, Protocol, runtime_checkable

from gutencat.errors import StoreError
from gutencat.store.base import CatalogConnection


LOGGER = logging.getLogger(__name__)


@runtime_checkable
class ExistenceIndex(Protocol):
    def exists(self, book_id: str) -> bool:
        """Return True when ``book_id`` is known to be stored."""


class StoreExistenceIndex:
    """Primary-key round trip through the run's store connection.

    A failed lookup reports False; the store's primary key still rejects the
    insert if the row was in fact present.
    """

    def __init__(self, connection: CatalogConnection) -> None:
        self._connection = connection

    def exists(self, book_id: str) -> bool:
        try:
            return self._connection.exists(book_id)
        except StoreError as exc:
            LOGGER.error("Existence check failed for %s: %s", book_id, exc)
            return False


class PreloadedExistenceIndex:
    """In-memory id set loaded once before streaming."""

    def __init__(self, book_ids: Iterable[str] = ()) -> None:
        self._ids: set[str] = set(book_ids)

    @classmethod
    def from_connection(cls, connection: CatalogConnection) -> "PreloadedExistenceIndex":
        index = cls(connection.iter_ids())
        LOGGER.info("Preloaded %d stored book ids", len(index))
        return index

    def __len__(self) -> int:
        return len(self._ids)

    def __contains__(self, book_id: object) -> bool:
        return book_id in self._ids

    def exists(self, book_id: str) -> bool:
        return book_id in self._ids

    def add(self, book_id: str) -> None:
        self._ids.add(book_id)

"""Canonical data structures shared by the catalog modules."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path


@dataclass(slots=True, eq=False)
class Book:
    """One catalog record, keyed by the directory-derived identifier.

    Missing metadata is stored as an empty string. Equality and hashing only
    consider ``id`` and ``title``, so two books sharing an id but carrying
    different titles compare unequal even though they collide on the primary
    key in the store.
    """

    id: str
    title: str = ""
    author: str = ""
    language: str = ""

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Book):
            return NotImplemented
        return self.id == other.id and self.title == other.title

    def __hash__(self) -> int:
        return hash((self.id, self.title))

    def to_dict(self) -> dict[str, str]:
        return {
            "id": self.id,
            "title": self.title,
            "author": self.author,
            "language": self.language,
        }


@dataclass(frozen=True, slots=True)
class Candidate:
    """A directory entry whose metadata document exists but is not yet read."""

    id: str
    path: Path


@dataclass(slots=True)
class ExtractedMetadata:
    """Raw fields pulled out of a metadata document."""

    title: str | None = None
    author: str | None = None
    language: str | None = None


class InsertStatus(str, Enum):
    INSERTED = "inserted"
    DUPLICATE = "duplicate"
    FAILED = "failed"


@dataclass(frozen=True, slots=True)
class InsertOutcome:
    """Result of a single insert attempt against the store."""

    status: InsertStatus
    reason: str | None = None

    @classmethod
    def inserted(cls) -> "InsertOutcome":
        return cls(InsertStatus.INSERTED)

    @classmethod
    def duplicate(cls, reason: str | None = None) -> "InsertOutcome":
        return cls(InsertStatus.DUPLICATE, reason)

    @classmethod
    def failed(cls, reason: str) -> "InsertOutcome":
        return cls(InsertStatus.FAILED, reason)


class SyncState(str, Enum):
    INIT = "init"
    TABLE_READY = "table_ready"
    STREAMING = "streaming"
    FINALIZED = "finalized"
    COMMITTED = "committed"
    ABORTED = "aborted"


@dataclass(slots=True)
class SyncResult:
    scanned: int = 0
    inserted: int = 0
    skipped_existing: int = 0
    skipped_failed: int = 0
    skipped_duplicate: int = 0
    state: SyncState = SyncState.INIT
    duration_ms: int = 0
    error_details: list[dict[str, str]] = field(default_factory=list)

    def record_failure(self, book_id: str, error: str) -> None:
        self.skipped_failed += 1
        self.error_details.append({"id": book_id, "error": error})

    def to_dict(self) -> dict[str, object]:
        return {
            "state": self.state.value,
            "scanned": self.scanned,
            "inserted": self.inserted,
            "skipped_existing": self.skipped_existing,
            "skipped_failed": self.skipped_failed,
            "skipped_duplicate": self.skipped_duplicate,
            "duration_ms": self.duration_ms,
            "error_details": self.error_details,
        }

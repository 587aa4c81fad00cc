"""Exception types shared by catalog synchronization modules."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from gutencat.catalog.models import SyncResult


class CatalogConfigurationError(ValueError):
    """Raised when the document root or the store cannot be used at all."""


@dataclass(slots=True)
class ExtractionError(Exception):
    """Domain error for unreadable or malformed metadata documents."""

    path: Path
    message: str

    def __str__(self) -> str:
        return f"{self.message} (path={self.path})"


class StoreError(RuntimeError):
    """Wrapped driver error raised by a catalog store connection."""


class SyncAbortedError(RuntimeError):
    """Raised when a synchronization run cannot be committed."""

    def __init__(self, message: str, result: "SyncResult") -> None:
        super().__init__(message)
        self.result = result

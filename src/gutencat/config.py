"""Runtime configuration for catalog synchronization."""

from __future__ import annotations

from dataclasses import dataclass
import os
from pathlib import Path
from typing import Mapping

from gutencat.catalog.layout import (
    DEFAULT_DOC_EXTENSION,
    DEFAULT_DOC_PREFIX,
    DEFAULT_EXCLUDE_MARKER,
    DocumentLayout,
)


DEFAULT_DB_BACKEND = "sqlite"
DEFAULT_DB_PATH = ".gutencat.db"
SUPPORTED_BACKENDS = ("sqlite", "postgresql")

_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off", ""}


def _parse_bool(*, name: str, raw_value: str) -> bool:
    value = raw_value.strip().lower()
    if value in _TRUE_VALUES:
        return True
    if value in _FALSE_VALUES:
        return False
    raise ValueError(f"{name} must be a boolean (got {raw_value!r})")


@dataclass(frozen=True, slots=True)
class CatalogSettings:
    """Validated store and layout settings."""

    backend: str = DEFAULT_DB_BACKEND
    db_path: Path = Path(DEFAULT_DB_PATH)
    db_url: str | None = None
    doc_prefix: str = DEFAULT_DOC_PREFIX
    doc_extension: str = DEFAULT_DOC_EXTENSION
    exclude_marker: str = DEFAULT_EXCLUDE_MARKER
    preload_ids: bool = False

    def __post_init__(self) -> None:
        if self.backend not in SUPPORTED_BACKENDS:
            supported = ", ".join(SUPPORTED_BACKENDS)
            raise ValueError(f"GUTENCAT_DB_BACKEND must be one of: {supported} (got {self.backend!r})")
        if self.backend == "postgresql" and not self.db_url:
            raise ValueError("GUTENCAT_DB_URL is required for the postgresql backend")
        if self.backend == "sqlite" and not str(self.db_path).strip():
            raise ValueError("GUTENCAT_DB_PATH cannot be empty")
        if not self.doc_extension:
            raise ValueError("GUTENCAT_DOC_EXTENSION cannot be empty")

    @property
    def layout(self) -> DocumentLayout:
        return DocumentLayout(
            prefix=self.doc_prefix,
            extension=self.doc_extension,
            exclude_marker=self.exclude_marker,
        )

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> "CatalogSettings":
        source: Mapping[str, str] = os.environ if environ is None else environ

        backend = source.get("GUTENCAT_DB_BACKEND", DEFAULT_DB_BACKEND).strip().lower()
        db_path_raw = source.get("GUTENCAT_DB_PATH", DEFAULT_DB_PATH).strip()
        db_url = source.get("GUTENCAT_DB_URL", "").strip() or None
        doc_prefix = source.get("GUTENCAT_DOC_PREFIX", DEFAULT_DOC_PREFIX).strip()
        doc_extension = source.get("GUTENCAT_DOC_EXTENSION", DEFAULT_DOC_EXTENSION).strip()
        exclude_marker = source.get("GUTENCAT_EXCLUDE_MARKER", DEFAULT_EXCLUDE_MARKER).strip()
        preload_ids = _parse_bool(
            name="GUTENCAT_PRELOAD_IDS",
            raw_value=source.get("GUTENCAT_PRELOAD_IDS", "false"),
        )

        if backend == "sqlite" and not db_path_raw:
            raise ValueError("GUTENCAT_DB_PATH cannot be empty")

        return cls(
            backend=backend,
            db_path=Path(db_path_raw or DEFAULT_DB_PATH),
            db_url=db_url,
            doc_prefix=doc_prefix,
            doc_extension=doc_extension,
            exclude_marker=exclude_marker,
            preload_ids=preload_ids,
        )

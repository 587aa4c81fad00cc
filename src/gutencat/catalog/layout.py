"""Mapping rules from catalog directory entries to ids and document paths."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path


DEFAULT_DOC_PREFIX = "pg"
DEFAULT_DOC_EXTENSION = ".rdf"
DEFAULT_EXCLUDE_MARKER = "delete"


def _require_name(name: str) -> str:
    if name is None or not str(name).strip():
        raise ValueError("Directory entry name cannot be empty")
    return str(name)


@dataclass(frozen=True, slots=True)
class DocumentLayout:
    """Naming convention of the `<root>/<id>/<prefix><id><extension>` tree."""

    prefix: str = DEFAULT_DOC_PREFIX
    extension: str = DEFAULT_DOC_EXTENSION
    exclude_marker: str = DEFAULT_EXCLUDE_MARKER

    def record_id(self, name: str) -> str:
        return _require_name(name)

    def document_path(self, root: str | Path, name: str) -> Path:
        name = _require_name(name)
        return Path(root) / name / f"{self.prefix}{name}{self.extension}"

    def is_excluded(self, name: str) -> bool:
        name = _require_name(name)
        if not self.exclude_marker:
            return False
        return self.exclude_marker.casefold() in name.casefold()


DEFAULT_LAYOUT = DocumentLayout()

"""Directory walker that turns catalog entries into extraction candidates."""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Callable, Iterator

from gutencat.catalog.layout import DEFAULT_LAYOUT, DocumentLayout
from gutencat.catalog.models import Candidate
from gutencat.errors import CatalogConfigurationError


LOGGER = logging.getLogger(__name__)

MalformedCallback = Callable[[str, Path], None]


class RecordSource:
    """Enumerate `<root>/<id>/` directories that carry a metadata document."""

    def __init__(self, layout: DocumentLayout = DEFAULT_LAYOUT) -> None:
        self._layout = layout

    @property
    def layout(self) -> DocumentLayout:
        return self._layout

    def scan(self, root: str | Path, on_malformed: MalformedCallback | None = None) -> Iterator[Candidate]:
        """List ``root`` now and return a lazy iterator over its candidates.

        The directory listing happens before this method returns, so a bad
        root fails here rather than on first iteration. Entries whose
        document is missing are reported through ``on_malformed`` and never
        yielded.
        """

        root_path = Path(root)
        names = self._list_subdirectories(root_path)
        return self._iter_candidates(root_path, names, on_malformed)

    def _list_subdirectories(self, root: Path) -> list[str]:
        if not root.exists():
            raise CatalogConfigurationError(f"Catalog root does not exist: {root}")
        if not root.is_dir():
            raise CatalogConfigurationError(f"Catalog root is not a directory: {root}")
        try:
            with os.scandir(root) as entries:
                return sorted(entry.name for entry in entries if entry.is_dir())
        except OSError as exc:
            raise CatalogConfigurationError(f"Catalog root is not readable: {root} ({exc})") from exc

    def _iter_candidates(
        self,
        root: Path,
        names: list[str],
        on_malformed: MalformedCallback | None,
    ) -> Iterator[Candidate]:
        for name in names:
            if not name.strip():
                LOGGER.warning("Entry %r has a blank name", name)
                if on_malformed is not None:
                    on_malformed(name, root / name)
                continue

            if self._layout.is_excluded(name):
                LOGGER.debug("Skipping excluded entry %s", name)
                continue

            document = self._layout.document_path(root, name)
            if not document.is_file():
                LOGGER.warning("Entry %s has no metadata document at %s", name, document)
                if on_malformed is not None:
                    on_malformed(name, document)
                continue

            yield Candidate(id=self._layout.record_id(name), path=document)

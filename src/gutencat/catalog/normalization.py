"""Text normalization helpers applied to extracted metadata."""

from __future__ import annotations

import re

_WHITESPACE_RE = re.compile(r"\s+")
_LINE_BREAK_RE = re.compile(r"[\n\r]")


def normalize_whitespace(text: str) -> str:
    """Collapse repeated whitespace and trim boundaries."""

    return _WHITESPACE_RE.sub(" ", text).strip()


def strip_line_breaks(text: str | None) -> str:
    """Remove literal newlines and carriage returns without adding spaces."""

    if not text:
        return ""
    return _LINE_BREAK_RE.sub("", text)


def blank_if_missing(value: str | None) -> str:
    return value if value is not None else ""

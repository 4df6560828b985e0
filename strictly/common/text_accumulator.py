"""Text collection for a single table cell.

Cells in the score tables carry more than their value: footnote markers
in ``<sup>`` elements, and ``<br>`` elements that pack several values
(one per couple in a group dance) into one cell. TextAccumulator keeps
the value text, drops footnote text, and rewrites line breaks as
FIELD_SEPARATOR so callers can split packed cells.
"""

from __future__ import annotations

import re

FIELD_SEPARATOR = ";"

# Elements whose text never belongs to the cell value.
SUPPRESSED_TAGS = frozenset({"sup", "style", "script"})

_WHITESPACE_RE = re.compile(r"\s+")


class TextAccumulator:
    """Collects the text of one cell from a stream of parser events.

    Usage::

        acc = TextAccumulator()
        acc.begin()
        acc.start("sup")       # footnote marker opens
        acc.data("1")          # ignored
        acc.end("sup")
        acc.data("Anastacia & Gorka")
        acc.finish()           # -> "Anastacia & Gorka"

    Events arriving while no cell is open are ignored, so the accumulator
    can be fed every event of a table unconditionally.
    """

    def __init__(self) -> None:
        self._parts: list[str] = []
        self._open = False
        self._suppress_depth = 0

    def begin(self) -> None:
        """Start collecting a new cell, discarding anything collected."""
        self._parts = []
        self._open = True
        self._suppress_depth = 0

    def start(self, tag: str) -> None:
        if not self._open:
            return
        if tag in SUPPRESSED_TAGS:
            self._suppress_depth += 1
        elif tag == "br" and self._suppress_depth == 0:
            self._parts.append(FIELD_SEPARATOR)

    def end(self, tag: str) -> None:
        if self._open and tag in SUPPRESSED_TAGS and self._suppress_depth:
            self._suppress_depth -= 1

    def data(self, text: str) -> None:
        if self._open and self._suppress_depth == 0:
            self._parts.append(text)

    def finish(self) -> str:
        """Close the cell and return its trimmed text.

        Runs of whitespace (including non-breaking spaces) collapse to a
        single space. Whitespace around separators is removed, as are
        separators at either end (a trailing ``<br>``).
        """
        self._open = False
        self._suppress_depth = 0
        return normalize_text("".join(self._parts))


def normalize_text(text: str) -> str:
    """Collapse whitespace and trim around field separators."""
    text = _WHITESPACE_RE.sub(" ", text).strip()
    if FIELD_SEPARATOR in text:
        parts = [part.strip() for part in text.split(FIELD_SEPARATOR)]
        text = FIELD_SEPARATOR.join(parts).strip(FIELD_SEPARATOR)
    return text


def split_fields(text: str) -> list[str]:
    """Split packed cell text on FIELD_SEPARATOR, dropping empty parts."""
    return [part for part in text.split(FIELD_SEPARATOR) if part]

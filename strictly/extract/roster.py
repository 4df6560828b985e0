"""Roster table scanning.

The roster ("Couples") table lists each celebrity with their
professional partner. Its rows feed the MonikerResolver so that the
short names used in score tables can later be expanded to full names.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Mapping

from strictly.common.monikers import MonikerResolver
from strictly.common.text_accumulator import TextAccumulator, split_fields

logger = logging.getLogger(__name__)

PERFORMER_COLUMN = 0
DEFAULT_PARTNER_COLUMN = 2

_PARTNER_HEADER_RE = re.compile(r"partner|professional", re.IGNORECASE)


class RosterTable:
    """Reads roster rows into a MonikerResolver.

    A row whose cells are all ``th`` is a header row; it is used to find
    the partner column and otherwise ignored. The celebrity is always in
    the first column.
    """

    def __init__(self, resolver: MonikerResolver) -> None:
        self.resolver = resolver
        self.partner_column = DEFAULT_PARTNER_COLUMN
        self._text = TextAccumulator()
        self._cells: list[str] = []
        self._has_data_cell = False
        self._cell_depth = 0

    def start(self, tag: str, attrib: Mapping[str, str]) -> None:
        if tag == "tr" and self._cell_depth == 0:
            self._cells = []
            self._has_data_cell = False
        elif tag in ("td", "th"):
            self._cell_depth += 1
            if self._cell_depth == 1:
                self._has_data_cell = self._has_data_cell or tag == "td"
                self._text.begin()
        else:
            self._text.start(tag)

    def end(self, tag: str) -> None:
        if tag == "tr" and self._cell_depth == 0:
            self._finish_row()
        elif tag in ("td", "th") and self._cell_depth:
            self._cell_depth -= 1
            if self._cell_depth == 0:
                self._cells.append(self._text.finish())
        else:
            self._text.end(tag)

    def data(self, text: str) -> None:
        self._text.data(text)

    def _finish_row(self) -> None:
        cells, self._cells = self._cells, []
        if not cells:
            return

        if not self._has_data_cell:
            for index, label in enumerate(cells):
                if _PARTNER_HEADER_RE.search(label):
                    self.partner_column = index
                    break
            return

        performer = cells[PERFORMER_COLUMN]
        if performer:
            self.resolver.add_performer(performer)
        if len(cells) > self.partner_column:
            for partner in split_fields(cells[self.partner_column]):
                self.resolver.add_partner(partner)
        logger.debug("Roster row: %s", cells)

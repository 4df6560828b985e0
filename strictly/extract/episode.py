"""Row automaton for weekly score tables.

Each week's table has one row per performance with the columns Couple,
Score, Dance, Music and Result. Cells span several rows to avoid
repeating a value: a couple dancing twice in one show has a Couple cell
with ``rowspan="2"``, and the following row starts directly with its
Score cell. EpisodeTable rebuilds the logical rows from the element
stream by keeping, for each of the three fields it reads, the text of
the current cell and the number of rows that cell still covers.

A row begins with whichever field's block is exhausted first, in
couple -> score -> dance order. When the couple block ends, the score
and dance blocks must end with it; anything else means the table
layout is not one this automaton models, and the parse fails with a
ProtocolViolation instead of guessing.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from enum import Enum

from typing_extensions import assert_never

from strictly.common.exceptions import (
    IncompleteRowException,
    ProtocolViolation,
)
from strictly.common.text_accumulator import TextAccumulator
from strictly.data_types import DocumentPosition
from strictly.extract.emitter import COMBINED_DANCE_NOTE, RowEmitter

logger = logging.getLogger(__name__)


class RowState(Enum):
    AWAITING_ROW = "awaiting_row"
    AWAITING_PARTNER = "awaiting_partner"
    AWAITING_SCORE = "awaiting_score"
    AWAITING_DANCE = "awaiting_dance"
    ROW_COMPLETE = "row_complete"


class CellField(Enum):
    PARTNER = "partner"
    SCORE = "score"
    DANCE = "dance"


class EpisodeTable:
    """Per-week row automaton feeding a RowEmitter.

    One instance covers every table under a week heading, so a week
    split over several shows (a "Night 1" and "Night 2" sub-heading)
    reads as one continuous table.
    """

    def __init__(
        self,
        series: int,
        week: int,
        section: str,
        emitter: RowEmitter,
    ) -> None:
        self.series = series
        self.week = week
        self.section = section
        self.emitter = emitter
        self.state = RowState.AWAITING_ROW

        self.partner = ""
        self.partner_uses = 0
        self.score = ""
        self.score_uses = 0
        self.dance = ""
        self.dance_uses = 0
        self.note = ""

        self._row = 0
        self._cell_depth = 0
        self._field: CellField | None = None
        self._text = TextAccumulator()

    @property
    def position(self) -> DocumentPosition:
        return DocumentPosition(self.series, self.section, self._row)

    def snapshot(self) -> dict[str, object]:
        """Automaton state for error context."""
        return {
            "partner": self.partner,
            "partner_uses": self.partner_uses,
            "score": self.score,
            "score_uses": self.score_uses,
            "dance": self.dance,
            "dance_uses": self.dance_uses,
        }

    def _violation(
        self,
        message: str,
        exc_type: type[ProtocolViolation] = ProtocolViolation,
    ) -> ProtocolViolation:
        return exc_type(
            message, self.state.value, self.position, self.snapshot()
        )

    # -- Events ---------------------------------------------------------

    def start(self, tag: str, attrib: Mapping[str, str]) -> None:
        if tag == "tr" and self._cell_depth == 0:
            self._open_row()
        elif tag == "td":
            self._cell_depth += 1
            if self._cell_depth == 1:
                self._open_cell(attrib)
        else:
            self._text.start(tag)

    def end(self, tag: str) -> None:
        if tag == "tr" and self._cell_depth == 0:
            self._close_row()
        elif tag == "td" and self._cell_depth:
            self._cell_depth -= 1
            if self._cell_depth == 0:
                self._close_cell()
        else:
            self._text.end(tag)

    def data(self, text: str) -> None:
        self._text.data(text)

    # -- Transitions ----------------------------------------------------

    def _first_exhausted_block(self) -> RowState:
        if self.partner_uses == 0:
            return RowState.AWAITING_PARTNER
        if self.score_uses == 0:
            return RowState.AWAITING_SCORE
        if self.dance_uses == 0:
            return RowState.AWAITING_DANCE
        return RowState.ROW_COMPLETE

    def _open_row(self) -> None:
        self._row += 1
        if self.state is not RowState.AWAITING_ROW:
            raise self._violation(
                "Row opened before the previous row completed"
            )
        self.state = self._first_exhausted_block()

    def _rowspan(self, attrib: Mapping[str, str]) -> int:
        value = attrib.get("rowspan", "1").strip() or "1"
        try:
            rows = int(value)
        except ValueError:
            raise self._violation(f"Unreadable rowspan '{value}'") from None
        if rows < 1:
            raise self._violation(f"Non-positive rowspan '{value}'")
        return rows

    def _open_cell(self, attrib: Mapping[str, str]) -> None:
        match self.state:
            case RowState.AWAITING_PARTNER:
                self._field = CellField.PARTNER
                self.partner_uses = self._rowspan(attrib)
            case RowState.AWAITING_SCORE:
                self._field = CellField.SCORE
                self.score_uses = self._rowspan(attrib)
                # A score spanning rows covers two styles danced as one.
                self.note = (
                    COMBINED_DANCE_NOTE if self.score_uses > 1 else ""
                )
            case RowState.AWAITING_DANCE:
                self._field = CellField.DANCE
                self.dance_uses = self._rowspan(attrib)
            case RowState.ROW_COMPLETE:
                # Music and result columns.
                self._field = None
                return
            case RowState.AWAITING_ROW:
                raise self._violation("Cell outside of a table row")
            case _:
                assert_never(self.state)
        self._text.begin()

    def _close_cell(self) -> None:
        field, self._field = self._field, None
        if field is None:
            return
        text = self._text.finish()
        match field:
            case CellField.PARTNER:
                self.partner = text
                if self.score_uses == 0:
                    self.state = RowState.AWAITING_SCORE
                elif self.dance_uses == 0:
                    self.state = RowState.AWAITING_DANCE
                else:
                    self.state = RowState.ROW_COMPLETE
            case CellField.SCORE:
                self.score = text
                if self.dance_uses == 0:
                    self.state = RowState.AWAITING_DANCE
                else:
                    self.state = RowState.ROW_COMPLETE
            case CellField.DANCE:
                self.dance = text
                self.state = RowState.ROW_COMPLETE
            case _:
                assert_never(field)

    def _close_row(self) -> None:
        match self.state:
            case RowState.ROW_COMPLETE:
                pass
            case RowState.AWAITING_PARTNER if self._field is None and (
                self.partner_uses == 0
            ):
                # Header row: only th cells, no couple block opened.
                self.state = RowState.AWAITING_ROW
                return
            case _:
                raise self._violation(
                    "Row ended before couple, score and dance were read",
                    IncompleteRowException,
                )

        if not (self.partner and self.score and self.dance):
            raise self._violation(
                "Completed row has an empty field", IncompleteRowException
            )
        if min(self.partner_uses, self.score_uses, self.dance_uses) < 1:
            raise self._violation(
                "Completed row has an exhausted block", IncompleteRowException
            )

        self.emitter.emit_row(
            self.partner, self.score, self.dance, self.note, self.position
        )

        self.partner_uses -= 1
        self.score_uses -= 1
        self.dance_uses -= 1
        if self.partner_uses < max(self.score_uses, self.dance_uses):
            raise self._violation(
                "Couple block ended while a score or dance cell still spans "
                "rows"
            )
        self.state = RowState.AWAITING_ROW

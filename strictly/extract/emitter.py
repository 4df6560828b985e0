"""Turning completed table rows into records.

A completed row of a score table holds three texts: the couple, the
score and the dance. RowEmitter decodes them into zero or more Records:

- A single couple ("Alesha & Matthew") with a score such as
  "32 (8,8,8,8)" yields one record, averaged over the judges listed.
- A group dance packs several couples and their scores into the cells,
  one per line. Each couple yields a record scored by a single judge,
  unless the numbers are placings (1, 2, 3, ...) rather than scores.
- Placeholder scores such as "N/A" (unscored exhibition dances) yield
  nothing.
"""

from __future__ import annotations

import logging
import re

from strictly.common.exceptions import CoupleFormatException
from strictly.common.monikers import MonikerMap
from strictly.common.text_accumulator import FIELD_SEPARATOR, split_fields
from strictly.data_types import DocumentPosition, Record

logger = logging.getLogger(__name__)

COMBINED_DANCE_NOTE = "combined dance"
GROUP_DANCE_NOTE = "group dance"

# Professionals who were credited under more than one name. Records always
# carry the canonical name.
PARTNER_RENAMES: dict[str, str] = {
    "Karen Clifton": "Karen Hauer",
}

_COUPLE_SEPARATOR_RE = re.compile(r"\s*&\s*")
_FOOTNOTE_MARKERS = "*†‡§#"


def split_couple(
    couple: str, position: DocumentPosition
) -> tuple[str, str]:
    """Split "performer & partner" into its two names.

    Trailing footnote markers ("Gorka*") are removed from both names.

    Raises:
        CoupleFormatException: Unless there is exactly one separator with
            a name on each side.
    """
    parts = _COUPLE_SEPARATOR_RE.split(couple.strip())
    if len(parts) != 2:
        raise CoupleFormatException(couple, position)
    performer, partner = (
        part.rstrip(_FOOTNOTE_MARKERS).strip() for part in parts
    )
    if not performer or not partner:
        raise CoupleFormatException(couple, position)
    return performer, partner


def is_placement_list(scores: list[str]) -> bool:
    """True when group-dance numbers are placings, not judges' totals.

    Placings are small integers starting from 1, each no larger than the
    number of entries.
    """
    if not scores:
        return False
    try:
        values = [int(score) for score in scores]
    except ValueError:
        return False
    return values[0] == 1 and all(1 <= v <= len(values) for v in values)


def parse_score(score: str) -> tuple[int, int] | None:
    """Parse "<total> (<judge>,<judge>,...)" into (total, judge count).

    Returns None when the leading token is not an integer.
    """
    tokens = score.split(None, 1)
    if not tokens:
        return None
    try:
        total = int(tokens[0])
    except ValueError:
        return None
    breakdown = tokens[1] if len(tokens) > 1 else ""
    return total, 1 + breakdown.count(",")


def _join_notes(*notes: str) -> str:
    return "; ".join(note for note in notes if note)


class RowEmitter:
    """Validates completed rows of one week and appends their records."""

    def __init__(
        self,
        series: int,
        week: int,
        monikers: MonikerMap,
        records: list[Record],
    ) -> None:
        self.series = series
        self.week = week
        self.monikers = monikers
        self.records = records

    def emit_row(
        self,
        couple: str,
        score: str,
        dance: str,
        note: str,
        position: DocumentPosition,
    ) -> int:
        """Decode one completed row. Returns the number of records added."""
        if FIELD_SEPARATOR in couple:
            return self._emit_group_dance(couple, score, dance, position)
        return self._emit_couple(couple, score, dance, note, position)

    def _resolve_partner(self, moniker: str) -> tuple[str, str]:
        """Return (canonical name, note) for a professional's moniker."""
        full_name = self.monikers.partner(moniker)
        canonical = PARTNER_RENAMES.get(full_name)
        if canonical is None:
            return full_name, ""
        return canonical, f"{canonical} credited as {full_name}"

    def _emit_couple(
        self,
        couple: str,
        score: str,
        dance: str,
        note: str,
        position: DocumentPosition,
    ) -> int:
        performer, partner = split_couple(couple, position)
        parsed = parse_score(score)
        if parsed is None:
            logger.debug(
                "Skipping unscored dance %r for %r at %s",
                dance,
                couple,
                position,
            )
            return 0

        total, judges = parsed
        partner_name, rename_note = self._resolve_partner(partner)
        self._append(
            performer=self.monikers.performer(performer),
            partner=partner_name,
            dance=dance,
            total_score=total,
            judge_count=judges,
            note=_join_notes(note, rename_note),
        )
        return 1

    def _emit_group_dance(
        self,
        couples: str,
        scores: str,
        dance: str,
        position: DocumentPosition,
    ) -> int:
        couple_list = split_fields(couples)
        score_list = split_fields(scores)
        if is_placement_list(score_list):
            logger.debug(
                "Skipping group dance %r ranked by placing at %s",
                dance,
                position,
            )
            return 0
        if len(couple_list) != len(score_list):
            logger.warning(
                "Group dance %r lists %d couples but %d scores at %s",
                dance,
                len(couple_list),
                len(score_list),
                position,
            )

        emitted = 0
        for couple, score in zip(couple_list, score_list):
            performer, partner = split_couple(couple, position)
            try:
                total = int(score)
            except ValueError:
                logger.debug(
                    "Skipping unscored group entry %r at %s", couple, position
                )
                continue
            partner_name, rename_note = self._resolve_partner(partner)
            self._append(
                performer=self.monikers.performer(performer),
                partner=partner_name,
                dance=dance,
                total_score=total,
                judge_count=1,
                note=_join_notes(GROUP_DANCE_NOTE, rename_note),
            )
            emitted += 1
        return emitted

    def _append(
        self,
        performer: str,
        partner: str,
        dance: str,
        total_score: int,
        judge_count: int,
        note: str,
    ) -> None:
        self.records.append(
            Record.validated(
                f"series {self.series}",
                series=self.series,
                week=self.week,
                performer=performer,
                partner=partner,
                dance=dance,
                total_score=total_score,
                judge_count=judge_count,
                average_score=total_score / judge_count,
                note=note,
            )
        )

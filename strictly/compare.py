"""Reconciliation of extracted scores against a reference dataset.

The comparison works on multisets of total scores per (series, week):
both datasets are grouped, each group's totals are sorted, and groups
whose sorted totals differ are reported. Record order, names and dances
play no part, so the check is insensitive to how either side orders or
spells its rows.

Key classes:
- ScoreKey: (series, week) group identifier
- ScoreMismatch: One group whose totals differ
- ComparisonSummary: Aggregate result across all reference groups
"""

from __future__ import annotations

import csv
import logging
from collections import defaultdict
from dataclasses import dataclass, field
from pathlib import Path

from strictly.common.exceptions import (
    ReferenceFormatException,
    ScoreFileFormatException,
)

logger = logging.getLogger(__name__)

UNSCORED_REFERENCE_TOTAL = "-"


@dataclass(frozen=True, order=True)
class ScoreKey:
    series: int
    week: int

    def __str__(self) -> str:
        return f"Series {self.series} Week {self.week}"


ScoreGroups = dict[ScoreKey, list[int]]


@dataclass
class ScoreMismatch:
    """A group whose sorted totals differ between the two datasets."""

    key: ScoreKey
    ours: list[int]
    reference: list[int]


@dataclass
class ComparisonSummary:
    """Result of comparing every reference group with our output.

    Attributes:
        groups_compared: Number of reference groups checked.
        mismatches: Groups whose totals differ, in key order.
    """

    groups_compared: int = 0
    mismatches: list[ScoreMismatch] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.mismatches


def _key(series: str, week: str) -> ScoreKey:
    return ScoreKey(int(series), int(week))


def load_output_scores(path: Path) -> ScoreGroups:
    """Read totals from our CSV output, grouped by (series, week).

    Raises:
        ScoreFileFormatException: If a row lacks an integer series, week
            or total_score.
    """
    groups: ScoreGroups = defaultdict(list)
    with open(path, newline="", encoding="utf-8") as f:
        reader = csv.DictReader(f)
        for row in reader:
            try:
                key = _key(row["series"], row["week"])
                total = int(row["total_score"])
            except (KeyError, TypeError, ValueError) as e:
                raise ScoreFileFormatException(
                    str(path),
                    reader.line_num,
                    f"expected integer series, week and total_score ({e})",
                ) from e
            groups[key].append(total)
    return dict(groups)


def load_reference_scores(path: Path) -> ScoreGroups:
    """Read totals from the reference CSV, grouped by (series, week).

    The reference marks unscored dances with "-"; those rows are skipped.

    Raises:
        ScoreFileFormatException: If a row lacks an integer Series or Week,
            or a Total column.
        ReferenceFormatException: If a total is neither an integer nor "-".
    """
    groups: ScoreGroups = defaultdict(list)
    with open(path, newline="", encoding="utf-8") as f:
        reader = csv.DictReader(f)
        for row in reader:
            try:
                key = _key(row["Series"], row["Week"])
                total = row["Total"].strip()
            except (AttributeError, KeyError, TypeError, ValueError) as e:
                raise ScoreFileFormatException(
                    str(path),
                    reader.line_num,
                    f"expected integer Series and Week and a Total ({e})",
                ) from e
            if total == UNSCORED_REFERENCE_TOTAL:
                continue
            try:
                value = int(total)
            except ValueError:
                raise ReferenceFormatException(
                    total, reader.line_num, str(path)
                ) from None
            groups[key].append(value)
    return dict(groups)


def compare_scores(
    ours: ScoreGroups, reference: ScoreGroups
) -> ComparisonSummary:
    """Compare sorted totals for every group in the reference.

    Groups present only in our output are not reported; a reference group
    missing from our output compares against an empty list.
    """
    summary = ComparisonSummary()
    for key in sorted(reference):
        expected = sorted(reference[key])
        actual = sorted(ours.get(key, []))
        summary.groups_compared += 1
        if actual != expected:
            logger.warning("%s: ours=%s reference=%s", key, actual, expected)
            summary.mismatches.append(ScoreMismatch(key, actual, expected))

    logger.info(
        "Compared %d groups, %d mismatched",
        summary.groups_compared,
        len(summary.mismatches),
    )
    return summary

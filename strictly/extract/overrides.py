"""Fixed record sets for weeks the row automaton cannot read.

In series 10, week 10 every couple performed a fusion of two dance
styles for a single score. When such a week's table uses a layout the
automaton does not model, its records are listed here instead of being
parsed. Entries are keyed on the exact (series, week) pair and are never
applied to any other week.

Entries must be transcribed from the article's own table (couples, both
styles of each fusion, shared total and judge count). A week without an
entry is parsed; for series 10 week 10 the spanning score cells are read
by the automaton and noted as combined dances.
"""

from __future__ import annotations

from dataclasses import dataclass

from strictly.data_types import Record


@dataclass(frozen=True)
class OverrideEntry:
    """One couple's combined performance in an overridden week."""

    performer: str
    partner: str
    dances: tuple[str, str]
    total_score: int
    judge_count: int = 4

    @property
    def note(self) -> str:
        return f"combined dance: {self.dances[0]} and {self.dances[1]}"


FUSION_WEEK: tuple[int, int] = (10, 10)

# TODO: add the FUSION_WEEK entries once transcribed from the series 10
# week 10 score table.
WEEK_OVERRIDES: dict[tuple[int, int], tuple[OverrideEntry, ...]] = {}


def override_records(series: int, week: int) -> list[Record] | None:
    """Return the fixed records for a week, or None if it is parsed.

    Each entry yields one record per dance style, both carrying the
    shared score.
    """
    entries = WEEK_OVERRIDES.get((series, week))
    if entries is None:
        return None

    records = []
    for entry in entries:
        for dance in entry.dances:
            records.append(
                Record.validated(
                    f"series {series}",
                    series=series,
                    week=week,
                    performer=entry.performer,
                    partner=entry.partner,
                    dance=dance,
                    total_score=entry.total_score,
                    judge_count=entry.judge_count,
                    average_score=entry.total_score / entry.judge_count,
                    note=entry.note,
                )
            )
    return records

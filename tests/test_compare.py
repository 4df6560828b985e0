"""Tests for reconciliation against a reference dataset."""

from pathlib import Path

import pytest

from strictly.common.exceptions import (
    ReferenceFormatException,
    ScoreFileFormatException,
)
from strictly.compare import (
    ScoreKey,
    compare_scores,
    load_output_scores,
    load_reference_scores,
)


def write(path: Path, text: str) -> Path:
    path.write_text(text, encoding="utf-8")
    return path


@pytest.fixture
def output_csv(tmp_path: Path) -> Path:
    return write(
        tmp_path / "output.csv",
        "series,week,performer,partner,dance,total_score,judge_count,"
        "average_score,note\n"
        "7,1,Alex Smith,Karen Hauer,Jive,32,4,8.00,\n"
        "7,1,Emma Willis,Gorka Márquez,Tango,28,4,7.00,\n"
        "7,2,Alex Smith,Karen Hauer,Rumba,36,4,9.00,\n",
    )


class TestLoadScores:
    """Tests for reading both datasets."""

    def test_load_output(self, output_csv):
        """Totals shall be grouped by series and week."""
        groups = load_output_scores(output_csv)

        assert groups == {
            ScoreKey(7, 1): [32, 28],
            ScoreKey(7, 2): [36],
        }

    def test_reference_skips_unscored(self, tmp_path):
        """Reference rows with a "-" total shall be skipped."""
        path = write(
            tmp_path / "reference.csv",
            "Series,Week,Couple,Total\n7,1,Alex,32\n7,1,Emma B.,-\n",
        )

        assert load_reference_scores(path) == {ScoreKey(7, 1): [32]}

    def test_reference_bad_total(self, tmp_path):
        """A total that is neither an integer nor "-" shall raise."""
        path = write(
            tmp_path / "reference.csv",
            "Series,Week,Total\n7,1,32\n7,1,n/a\n",
        )

        with pytest.raises(ReferenceFormatException) as exc_info:
            load_reference_scores(path)
        assert exc_info.value.value == "n/a"
        assert exc_info.value.line == 3

    def test_leading_zeros_match(self, tmp_path):
        """Leading zeros in the reference shall not split groups."""
        path = write(
            tmp_path / "reference.csv",
            "Series,Week,Total\n07,01,32\n",
        )

        assert load_reference_scores(path) == {ScoreKey(7, 1): [32]}

    def test_output_bad_total(self, tmp_path):
        """A non-integer total in our output shall raise, naming the line."""
        path = write(
            tmp_path / "output.csv",
            "series,week,total_score\n7,1,32\n7,1,lots\n",
        )

        with pytest.raises(ScoreFileFormatException) as exc_info:
            load_output_scores(path)
        assert exc_info.value.line == 3
        assert exc_info.value.path == str(path)

    def test_output_missing_column(self, tmp_path):
        """Output without a total_score column shall raise."""
        path = write(tmp_path / "output.csv", "series,week\n7,1\n")

        with pytest.raises(ScoreFileFormatException):
            load_output_scores(path)

    def test_reference_bad_week(self, tmp_path):
        """A reference week that is not an integer shall raise."""
        path = write(
            tmp_path / "reference.csv",
            "Series,Week,Total\n7,Final,32\n",
        )

        with pytest.raises(ScoreFileFormatException) as exc_info:
            load_reference_scores(path)
        assert not isinstance(exc_info.value, ReferenceFormatException)


class TestCompareScores:
    """Tests for compare_scores()."""

    def test_order_insensitive_match(self):
        """Groups with the same totals in any order shall match."""
        key = ScoreKey(7, 1)
        summary = compare_scores({key: [28, 32]}, {key: [32, 28]})

        assert summary.ok
        assert summary.groups_compared == 1

    def test_mismatch_reported(self, caplog):
        """Differing totals shall be reported sorted, and logged."""
        key = ScoreKey(7, 1)
        summary = compare_scores({key: [32, 27]}, {key: [28, 32]})

        assert not summary.ok
        (mismatch,) = summary.mismatches
        assert mismatch.key == key
        assert mismatch.ours == [27, 32]
        assert mismatch.reference == [28, 32]
        assert "Series 7 Week 1" in caplog.text

    def test_missing_group_is_mismatch(self):
        """A reference group absent from our output shall mismatch."""
        key = ScoreKey(7, 3)
        summary = compare_scores({}, {key: [30]})

        assert summary.mismatches[0].ours == []

    def test_extra_groups_ignored(self):
        """Groups only in our output shall not be compared."""
        summary = compare_scores({ScoreKey(7, 9): [30]}, {})

        assert summary.ok
        assert summary.groups_compared == 0

    def test_mismatches_in_key_order(self):
        """Mismatches shall be listed in (series, week) order."""
        reference = {ScoreKey(8, 1): [1], ScoreKey(7, 2): [1]}
        summary = compare_scores({}, reference)

        assert [str(m.key) for m in summary.mismatches] == [
            "Series 7 Week 2",
            "Series 8 Week 1",
        ]

    def test_numeric_series_order(self):
        """Series 2 shall be reported before series 10."""
        reference = {ScoreKey(10, 1): [1], ScoreKey(2, 1): [1]}
        summary = compare_scores({}, reference)

        assert [str(m.key) for m in summary.mismatches] == [
            "Series 2 Week 1",
            "Series 10 Week 1",
        ]

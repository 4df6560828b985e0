"""Tests for the strictly command-line interface."""

import csv
import io
import json
from pathlib import Path

import pytest
from click.testing import CliRunner

from strictly import cli as cli_module
from strictly.cli import cli
from strictly.common.exceptions import HTMLResponseAssumptionException
from tests.pages import generate_series_html


@pytest.fixture
def runner() -> CliRunner:
    return CliRunner()


@pytest.fixture
def saved_page(tmp_path: Path) -> Path:
    path = tmp_path / "series_99.html"
    path.write_text(generate_series_html(), encoding="utf-8")
    return path


class FakeFetcher:
    """Stands in for ArticleFetcher, serving the sample article."""

    fetched: list[int] = []

    def __init__(self, timeout=None):
        self.timeout = timeout

    def __enter__(self):
        return self

    def __exit__(self, *args):
        return None

    def fetch(self, series: int) -> str:
        FakeFetcher.fetched.append(series)
        if series > 99:
            raise HTMLResponseAssumptionException(
                404, [200], f"https://example.org/{series}"
            )
        return generate_series_html()


@pytest.fixture
def fake_fetcher(monkeypatch) -> type[FakeFetcher]:
    FakeFetcher.fetched = []
    monkeypatch.setattr(cli_module, "ArticleFetcher", FakeFetcher)
    return FakeFetcher


class TestExtractCommand:
    """Tests for ``strictly extract``."""

    def test_writes_csv(self, runner, saved_page, tmp_path):
        """The command shall write one CSV row per record."""
        output = tmp_path / "out.csv"
        result = runner.invoke(
            cli, ["extract", "99", str(saved_page), "-o", str(output)]
        )

        assert result.exit_code == 0, result.output
        rows = list(csv.DictReader(io.StringIO(output.read_text("utf-8"))))
        assert len(rows) == 11
        assert rows[0]["performer"] == "Alex Smith"

    def test_writes_jsonl(self, runner, saved_page, tmp_path):
        """--format jsonl shall write one JSON object per record."""
        output = tmp_path / "out.jsonl"
        result = runner.invoke(
            cli,
            [
                "extract",
                "99",
                str(saved_page),
                "--format",
                "jsonl",
                "-o",
                str(output),
            ],
        )

        assert result.exit_code == 0, result.output
        lines = output.read_text("utf-8").splitlines()
        assert json.loads(lines[-1])["dance"] == "Salsa"

    def test_malformed_article_fails(self, runner, tmp_path):
        """An extraction failure shall exit non-zero with the message."""
        page = tmp_path / "bad.html"
        page.write_text(
            generate_series_html().replace(
                "Emma W. &amp; Gorka*", "Emma W. and Gorka"
            ),
            encoding="utf-8",
        )
        output = tmp_path / "out.csv"

        result = runner.invoke(
            cli, ["extract", "99", str(page), "-o", str(output)]
        )

        assert result.exit_code == 1
        assert "Expected exactly one '&'" in result.output
        assert not output.exists()


class TestGenerateCommand:
    """Tests for ``strictly generate``."""

    def test_header_written_once(self, runner, fake_fetcher, tmp_path):
        """Several series shall share one CSV header."""
        output = tmp_path / "all.csv"
        result = runner.invoke(
            cli,
            ["generate", "--first", "98", "--latest", "99", "-o", str(output)],
        )

        assert result.exit_code == 0, result.output
        assert fake_fetcher.fetched == [98, 99]
        lines = output.read_text("utf-8").splitlines()
        assert sum(line.startswith("series,") for line in lines) == 1
        assert len(lines) == 1 + 2 * 11

    def test_first_after_latest(self, runner, fake_fetcher):
        """--first after --latest shall be a usage error."""
        result = runner.invoke(
            cli, ["generate", "--first", "5", "--latest", "4"]
        )

        assert result.exit_code == 2
        assert fake_fetcher.fetched == []

    def test_fetch_failure(self, runner, fake_fetcher, tmp_path):
        """A fetch failure shall exit non-zero naming the status."""
        result = runner.invoke(
            cli,
            [
                "generate",
                "--first",
                "99",
                "--latest",
                "100",
                "-o",
                str(tmp_path / "all.csv"),
            ],
        )

        assert result.exit_code == 1
        assert "HTTP 404" in result.output


class TestCompareCommand:
    """Tests for ``strictly compare``."""

    def reference(self, tmp_path: Path, totals: list[str]) -> Path:
        path = tmp_path / "reference.csv"
        rows = "".join(f"99,1,{total}\n" for total in totals)
        path.write_text("Series,Week,Total\n" + rows, encoding="utf-8")
        return path

    def output(self, runner, saved_page, tmp_path: Path) -> Path:
        path = tmp_path / "out.csv"
        runner.invoke(cli, ["extract", "99", str(saved_page), "-o", str(path)])
        return path

    def test_matching(self, runner, saved_page, tmp_path):
        """Matching totals shall exit 0 with a summary."""
        output = self.output(runner, saved_page, tmp_path)
        reference = self.reference(tmp_path, ["24", "32", "-", "28"])

        result = runner.invoke(cli, ["compare", str(output), str(reference)])

        assert result.exit_code == 0, result.output
        assert "1 groups compared, 0 mismatched" in result.output

    def test_mismatch(self, runner, saved_page, tmp_path):
        """Differing totals shall be printed and exit 1."""
        output = self.output(runner, saved_page, tmp_path)
        reference = self.reference(tmp_path, ["24", "32", "29"])

        result = runner.invoke(cli, ["compare", str(output), str(reference)])

        assert result.exit_code == 1
        assert "Series 99 Week 1" in result.output
        assert "reference: [24, 29, 32]" in result.output

    def test_bad_reference(self, runner, saved_page, tmp_path):
        """An unreadable reference total shall be reported."""
        output = self.output(runner, saved_page, tmp_path)
        reference = self.reference(tmp_path, ["24", "x"])

        result = runner.invoke(cli, ["compare", str(output), str(reference)])

        assert result.exit_code == 1
        assert "neither an integer nor '-'" in result.output

    def test_bad_output(self, runner, tmp_path):
        """An unreadable row in our output shall be reported, not raised."""
        output = tmp_path / "out.csv"
        output.write_text(
            "series,week,total_score\n99,1,lots\n", encoding="utf-8"
        )
        reference = self.reference(tmp_path, ["24"])

        result = runner.invoke(cli, ["compare", str(output), str(reference)])

        assert result.exit_code == 1
        assert "line 2" in result.output
        assert isinstance(result.exception, SystemExit)

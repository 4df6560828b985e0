"""strictly CLI: extract scores and reconcile them.

Usage:
    strictly generate                       # Fetch every series, CSV to stdout
    strictly generate --first 18 --latest 20 --output scores.csv
    strictly extract 7 saved/series_7.html  # Extract from a saved article
    strictly compare scores.csv reference.csv
"""

from __future__ import annotations

import logging
import sys
from collections.abc import Iterable
from contextlib import contextmanager
from pathlib import Path
from typing import TextIO

import click

from strictly.common.exceptions import (
    ExtractionAssumptionException,
    ScoreFileFormatException,
    TransientException,
)
from strictly.common.request_manager import LATEST_SERIES, ArticleFetcher
from strictly.compare import (
    compare_scores,
    load_output_scores,
    load_reference_scores,
)
from strictly.data_types import Record
from strictly.extract import extract_rows
from strictly.writer import write_csv, write_jsonl

logger = logging.getLogger(__name__)


def _configure_logging(verbose: bool) -> None:
    log_level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )


@contextmanager
def _open_output(output: str | None):
    if output is None:
        yield sys.stdout
        return
    with open(output, "w", newline="", encoding="utf-8") as f:
        yield f


def _write(
    records: Iterable[Record], stream: TextIO, fmt: str, header: bool
) -> int:
    if fmt == "jsonl":
        return write_jsonl(records, stream)
    return write_csv(records, stream, header=header)


_output_option = click.option(
    "--output",
    "-o",
    type=click.Path(dir_okay=False),
    default=None,
    help="Write records here instead of stdout.",
)
_format_option = click.option(
    "--format",
    "fmt",
    type=click.Choice(["csv", "jsonl"]),
    default="csv",
    show_default=True,
    help="Output format.",
)
_verbose_option = click.option(
    "-v", "--verbose", is_flag=True, help="Verbose logging."
)


@click.group()
@click.version_option(package_name="strictly-data")
def cli() -> None:
    """Strictly Come Dancing score extraction."""


@cli.command()
@click.option(
    "--first",
    type=click.IntRange(min=1),
    default=1,
    show_default=True,
    help="First series to fetch.",
)
@click.option(
    "--latest",
    type=click.IntRange(min=1),
    default=LATEST_SERIES,
    show_default=True,
    help="Last series to fetch.",
)
@click.option(
    "--timeout",
    type=float,
    default=30.0,
    show_default=True,
    help="Request timeout in seconds.",
)
@_output_option
@_format_option
@_verbose_option
def generate(
    first: int,
    latest: int,
    timeout: float,
    output: str | None,
    fmt: str,
    verbose: bool,
) -> None:
    """Fetch each series article and write its records.

    \b
    Examples:
        strictly generate > scores.csv
        strictly generate --first 18 --latest 18 --format jsonl
    """
    _configure_logging(verbose)
    if first > latest:
        raise click.BadParameter(
            f"--first ({first}) is after --latest ({latest})"
        )

    total = 0
    try:
        with ArticleFetcher(timeout=timeout) as fetcher, _open_output(
            output
        ) as stream:
            for series in range(first, latest + 1):
                records = extract_rows(series, fetcher.fetch(series))
                total += _write(records, stream, fmt, header=series == first)
    except (TransientException, ExtractionAssumptionException) as e:
        raise click.ClickException(str(e)) from e
    logger.info("Wrote %d records for series %d-%d", total, first, latest)


@cli.command()
@click.argument("series", type=click.IntRange(min=1))
@click.argument(
    "page", type=click.Path(exists=True, dir_okay=False, path_type=Path)
)
@_output_option
@_format_option
@_verbose_option
def extract(
    series: int, page: Path, output: str | None, fmt: str, verbose: bool
) -> None:
    """Extract records from a saved article.

    SERIES is the series number the article describes; PAGE is the saved
    article markup.
    """
    _configure_logging(verbose)
    try:
        records = extract_rows(series, page.read_text(encoding="utf-8"))
    except ExtractionAssumptionException as e:
        raise click.ClickException(str(e)) from e
    with _open_output(output) as stream:
        _write(records, stream, fmt, header=True)


@cli.command()
@click.argument(
    "output", type=click.Path(exists=True, dir_okay=False, path_type=Path)
)
@click.argument(
    "reference", type=click.Path(exists=True, dir_okay=False, path_type=Path)
)
@_verbose_option
def compare(output: Path, reference: Path, verbose: bool) -> None:
    """Compare extracted totals with a reference dataset.

    OUTPUT is a CSV written by ``strictly generate``; REFERENCE has
    Series, Week and Total columns. Exits with status 1 on any mismatch.
    """
    _configure_logging(verbose)
    try:
        logger.info("Parsing %s", output)
        ours = load_output_scores(output)
        logger.info("Parsing %s", reference)
        theirs = load_reference_scores(reference)
    except ScoreFileFormatException as e:
        raise click.ClickException(e.message) from e

    summary = compare_scores(ours, theirs)
    for mismatch in summary.mismatches:
        click.echo(str(mismatch.key))
        click.echo(f"  ours:      {mismatch.ours}")
        click.echo(f"  reference: {mismatch.reference}")
    click.echo(
        f"{summary.groups_compared} groups compared, "
        f"{len(summary.mismatches)} mismatched"
    )
    if not summary.ok:
        sys.exit(1)


def main() -> None:
    """Entry point for the ``strictly`` console script."""
    cli()

"""Extraction engine: article markup in, performance records out.

Example::

    from strictly.extract import extract_rows

    records = extract_rows(7, page)

Extraction runs in two phases over the same markup. The roster phase
builds the moniker tables from the "Couples" table; the episode phase
reads every week's score table against those tables, now read-only.
Either phase may raise an ExtractionAssumptionException, in which case
no records are returned.
"""

from __future__ import annotations

import logging

from strictly.common.monikers import MonikerMap
from strictly.data_types import Record
from strictly.extract.events import feed_document
from strictly.extract.router import EpisodePhaseRouter, RosterPhaseRouter

logger = logging.getLogger(__name__)

__all__ = ["extract_rows", "scan_episodes", "scan_roster"]


def scan_roster(series: int, page: str) -> MonikerMap:
    """Build the moniker tables from an article's roster table."""
    router = RosterPhaseRouter(series)
    feed_document(page, router)
    return router.resolver.freeze()


def scan_episodes(
    series: int, page: str, monikers: MonikerMap
) -> list[Record]:
    """Read every week's score table into records, in document order."""
    router = EpisodePhaseRouter(series, monikers=monikers)
    feed_document(page, router)
    return router.records


def extract_rows(series: int, page: str) -> list[Record]:
    """Extract all performance records from one series article.

    Args:
        series: The series number the article describes.
        page: The article markup.

    Returns:
        Records in document order.

    Raises:
        ExtractionAssumptionException: If the markup does not match the
            table layouts the extractor models.
    """
    monikers = scan_roster(series, page)
    records = scan_episodes(series, page, monikers)
    logger.info("Series %d: extracted %d records", series, len(records))
    return records

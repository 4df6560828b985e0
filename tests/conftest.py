"""Shared fixtures for extraction tests."""

import pytest

from strictly.common.monikers import MonikerMap, MonikerResolver
from strictly.data_types import Record
from strictly.extract.emitter import RowEmitter
from tests.pages import COUPLES, generate_series_html


@pytest.fixture
def series_html() -> str:
    """The sample series article.

    Returns:
        HTML string containing the roster and three weeks of scores.
    """
    return generate_series_html()


@pytest.fixture
def monikers() -> MonikerMap:
    """Moniker tables built from the sample roster.

    Returns:
        Frozen MonikerMap for the sample couples.
    """
    resolver = MonikerResolver()
    for couple in COUPLES:
        resolver.add_performer(couple.celebrity)
        resolver.add_partner(couple.professional)
    return resolver.freeze()


@pytest.fixture
def records() -> list[Record]:
    """An empty output list for emitters under test."""
    return []


@pytest.fixture
def emitter(monikers: MonikerMap, records: list[Record]) -> RowEmitter:
    """RowEmitter for series 99, week 1 writing into ``records``."""
    return RowEmitter(99, 1, monikers, records)

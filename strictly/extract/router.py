"""Section routing.

Which automaton reads a table depends on the heading above it: the
"Couples" section holds the roster, each "Week <n>" section holds that
week's scores, and everything else is ignored. SectionRouter watches
heading elements and swaps the active table context accordingly; all
other events go to the active context.

A single retention slot remembers the context that was active before
the first relevant section opened, and is restored (then cleared) when
an irrelevant section begins. Sub-headings that split a week into
several shows ("Night 1", "Show 2") leave the week's context in place.

The router runs twice over an article, once per phase: the roster phase
fills a MonikerResolver and ignores week tables, the episode phase reads
week tables against the frozen MonikerMap and ignores the roster.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Mapping
from dataclasses import dataclass, field

from typing_extensions import assert_never

from strictly.common.exceptions import SectionHeadingException
from strictly.common.monikers import MonikerMap, MonikerResolver
from strictly.data_types import Record
from strictly.extract.emitter import RowEmitter
from strictly.extract.episode import EpisodeTable
from strictly.extract.overrides import override_records
from strictly.extract.roster import RosterTable

logger = logging.getLogger(__name__)

ROSTER_HEADINGS: tuple[str, ...] = ("Couples",)
HEADING_TAGS = frozenset({"h2", "h3", "h4"})

_WEEK_TOKEN_RE = re.compile(r"[\s:]+")
_SUBHEADING_RE = re.compile(
    r"^(?:night|show)\b|\b(?:night|show)$", re.IGNORECASE
)


# =============================================================================
# Table contexts
# =============================================================================


@dataclass
class Unrecognized:
    """No relevant section is open; table events are dropped."""


@dataclass
class RosterScan:
    table: RosterTable


@dataclass
class EpisodeScan:
    week: int
    table: EpisodeTable


TableContext = Unrecognized | RosterScan | EpisodeScan


# =============================================================================
# Heading labels
# =============================================================================


def heading_label(tag: str, attrib: Mapping[str, str]) -> str | None:
    """Return the label of a heading element, or None for other elements.

    Headings are ``h2``-``h4`` elements, or legacy
    ``span.mw-headline`` elements, carrying an ``id``. The label is the
    id with underscores read as spaces.
    """
    is_headline = (
        tag == "span" and "mw-headline" in attrib.get("class", "").split()
    )
    if not (tag in HEADING_TAGS or is_headline):
        return None
    heading_id = attrib.get("id")
    if not heading_id:
        return None
    return heading_id.replace("_", " ").strip()


def parse_week(label: str, source: str) -> int | None:
    """Return the week number of a "Week <n>[: title]" label.

    Returns None for labels that are not week headings.

    Raises:
        SectionHeadingException: If the label starts with "Week" but has
            no week number.
    """
    tokens = _WEEK_TOKEN_RE.split(label)
    if tokens[0] != "Week":
        return None
    if len(tokens) < 2 or not tokens[1].isdigit():
        raise SectionHeadingException(label, source)
    return int(tokens[1])


def is_subheading(label: str) -> bool:
    return bool(_SUBHEADING_RE.search(label))


# =============================================================================
# Routers
# =============================================================================


@dataclass
class SectionRouter:
    """Dispatches document events to the table context in force.

    Subclasses decide which context a roster or week heading opens.
    """

    series: int
    active: TableContext = field(default_factory=Unrecognized)
    retained: TableContext | None = None
    section: str = ""

    @property
    def source(self) -> str:
        return f"series {self.series}"

    def roster_context(self, label: str) -> TableContext:
        raise NotImplementedError

    def week_context(self, week: int, label: str) -> TableContext:
        raise NotImplementedError

    # -- Heading handling ---------------------------------------------

    def _switch(self, context: TableContext) -> None:
        if self.retained is None:
            self.retained = self.active
        self.active = context

    def _restore(self) -> None:
        if self.retained is not None:
            self.active, self.retained = self.retained, None
        else:
            self.active = Unrecognized()

    def on_heading(self, label: str) -> None:
        if label in ROSTER_HEADINGS:
            self.section = label
            self._switch(self.roster_context(label))
            return

        week = parse_week(label, self.source)
        if week is not None:
            self.section = label
            self._switch(self.week_context(week, label))
        elif is_subheading(label):
            logger.debug("Sub-heading %r continues %r", label, self.section)
        else:
            self.section = label
            self._restore()
        logger.debug(
            "Heading %r: active=%s", label, type(self.active).__name__
        )

    # -- DocumentHandler ----------------------------------------------

    def start(self, tag: str, attrib: Mapping[str, str]) -> None:
        label = heading_label(tag, attrib)
        if label is not None:
            self.on_heading(label)
            return

        match self.active:
            case Unrecognized():
                pass
            case RosterScan(table=roster):
                roster.start(tag, attrib)
            case EpisodeScan(table=episode):
                episode.start(tag, attrib)
            case _:
                assert_never(self.active)

    def end(self, tag: str) -> None:
        match self.active:
            case Unrecognized():
                pass
            case RosterScan(table=roster):
                roster.end(tag)
            case EpisodeScan(table=episode):
                episode.end(tag)
            case _:
                assert_never(self.active)

    def data(self, text: str) -> None:
        match self.active:
            case Unrecognized():
                pass
            case RosterScan(table=roster):
                roster.data(text)
            case EpisodeScan(table=episode):
                episode.data(text)
            case _:
                assert_never(self.active)


@dataclass
class RosterPhaseRouter(SectionRouter):
    """First pass: fills the resolver from the roster table."""

    resolver: MonikerResolver = field(default_factory=MonikerResolver)

    def roster_context(self, label: str) -> TableContext:
        return RosterScan(RosterTable(self.resolver))

    def week_context(self, week: int, label: str) -> TableContext:
        return Unrecognized()


@dataclass
class EpisodePhaseRouter(SectionRouter):
    """Second pass: reads week tables into records."""

    monikers: MonikerMap = field(default_factory=MonikerMap.empty)
    records: list[Record] = field(default_factory=list)

    def roster_context(self, label: str) -> TableContext:
        return Unrecognized()

    def week_context(self, week: int, label: str) -> TableContext:
        fixed = override_records(self.series, week)
        if fixed is not None:
            logger.info(
                "Series %d week %d: using %d fixed records",
                self.series,
                week,
                len(fixed),
            )
            self.records.extend(fixed)
            return Unrecognized()

        emitter = RowEmitter(self.series, week, self.monikers, self.records)
        return EpisodeScan(
            week, EpisodeTable(self.series, week, label, emitter)
        )

"""Moniker resolution for celebrity and professional names.

Score tables refer to couples by short display names ("Alesha & Matthew",
"Emma B. & Anton"). The roster table near the top of each article lists
the full names. MonikerResolver is filled while the roster is scanned and
then frozen into a MonikerMap that the episode tables read from.

A moniker that two different people could claim is mapped to the
AMBIGUOUS sentinel and is never resolved again; lookups for it return
the moniker unchanged.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass
from types import MappingProxyType

logger = logging.getLogger(__name__)

AMBIGUOUS = ""

# Stage names that do not follow the "first name + surname" shape. They
# are registered under the listed moniker only.
STAGE_NAME_MONIKERS: dict[str, str] = {
    "Viscountess Emma Weymouth": "Emma W.",
}


def candidate_monikers(full_name: str) -> list[str]:
    """Return the monikers a celebrity may be listed under.

    For "Emma Barton" these are "Emma", "Emma B." and "Emma Barton". The
    last form covers titled names such as "Dr. Ranj" or "Judge Rinder",
    where the first token alone is the title.
    """
    if full_name in STAGE_NAME_MONIKERS:
        return [STAGE_NAME_MONIKERS[full_name]]

    tokens = full_name.split()
    if not tokens:
        return []
    first = tokens[0]
    candidates = [first]
    if len(tokens) > 1:
        second = tokens[1]
        candidates.append(f"{first} {second[0]}.")
        candidates.append(f"{first} {second}")
    return candidates


def _register(table: dict[str, str], moniker: str, full_name: str) -> None:
    existing = table.get(moniker)
    if existing is None:
        table[moniker] = full_name
    elif existing != full_name and existing != AMBIGUOUS:
        logger.debug(
            "Moniker %r is ambiguous (%r, %r)", moniker, existing, full_name
        )
        table[moniker] = AMBIGUOUS


def _lookup(table: Mapping[str, str], moniker: str) -> str:
    full_name = table.get(moniker)
    if full_name:
        return full_name
    return moniker


class MonikerResolver:
    """Mutable builder for celebrity and professional moniker tables.

    Celebrities and professionals are kept in separate tables: a
    professional named "Kevin" does not make a celebrity "Kevin"
    ambiguous.
    """

    def __init__(self) -> None:
        self._performers: dict[str, str] = {}
        self._partners: dict[str, str] = {}

    def add_performer(self, full_name: str) -> None:
        """Register a celebrity under each of their candidate monikers."""
        for moniker in candidate_monikers(full_name):
            _register(self._performers, moniker, full_name)

    def add_partner(self, full_name: str) -> None:
        """Register a professional under their first name."""
        tokens = full_name.split()
        if tokens:
            _register(self._partners, tokens[0], full_name)

    def freeze(self) -> MonikerMap:
        """Return a read-only snapshot of the tables built so far."""
        return MonikerMap(
            performers=MappingProxyType(dict(self._performers)),
            partners=MappingProxyType(dict(self._partners)),
        )


@dataclass(frozen=True)
class MonikerMap:
    """Read-only moniker tables used while scanning episode tables."""

    performers: Mapping[str, str]
    partners: Mapping[str, str]

    @classmethod
    def empty(cls) -> MonikerMap:
        return MonikerResolver().freeze()

    def performer(self, moniker: str) -> str:
        """Resolve a celebrity moniker, or return it unchanged."""
        return _lookup(self.performers, moniker)

    def partner(self, moniker: str) -> str:
        """Resolve a professional's first name, or return it unchanged."""
        return _lookup(self.partners, moniker)

"""Filtering and stable multi-key ordering of NEO views."""

from __future__ import annotations

import locale
import logging
from collections.abc import Callable, Iterable
from dataclasses import dataclass
from enum import Enum
from typing import Any

from neowatch.feed import NeoRecord
from neowatch.risk import risk_priority, tier_for

logger = logging.getLogger(__name__)


class SortKey(str, Enum):
    NAME = "name"
    DIAMETER = "diameter"
    DISTANCE = "distance"
    VELOCITY = "velocity"
    HAZARDOUS = "hazardous"
    RISK = "risk"


class SortDirection(str, Enum):
    ASC = "asc"
    DESC = "desc"

    def flipped(self) -> "SortDirection":
        return SortDirection.DESC if self is SortDirection.ASC else SortDirection.ASC


@dataclass
class SortState:
    """Active sort column + direction for one view."""

    key: SortKey = SortKey.DISTANCE
    direction: SortDirection = SortDirection.ASC

    def select(self, key: SortKey) -> None:
        """Reselecting the active key flips direction; a new key starts ascending."""
        if key == self.key:
            self.direction = self.direction.flipped()
        else:
            self.key = key
            self.direction = SortDirection.ASC


# Sorting is presentation-only: a record without approach events sorts as 0
# instead of failing like classify() does.
def _nearest_distance_km(record: NeoRecord) -> float:
    return record.close_approaches[0].miss_distance_km if record.close_approaches else 0.0


def _nearest_velocity_km_h(record: NeoRecord) -> float:
    return record.close_approaches[0].velocity_km_h if record.close_approaches else 0.0


def _name_key(record: NeoRecord) -> tuple[str, str]:
    # Case-folded first so "apophis" and "Bennu" interleave even under the C locale
    return locale.strxfrm(record.name.casefold()), locale.strxfrm(record.name)


def use_environment_collation() -> None:
    """Collate names with the locale from LANG / LC_* instead of the C default."""
    try:
        locale.setlocale(locale.LC_COLLATE, "")
    except locale.Error as exc:
        logger.warning("Collation locale from environment unavailable (%s); names sort by code point", exc)


_SORT_KEYS: dict[SortKey, Callable[[NeoRecord], Any]] = {
    SortKey.NAME: _name_key,
    SortKey.DIAMETER: lambda r: r.diameter_max_km,
    SortKey.DISTANCE: _nearest_distance_km,
    SortKey.VELOCITY: _nearest_velocity_km_h,
    SortKey.HAZARDOUS: lambda r: 1 if r.hazardous else 0,
    SortKey.RISK: lambda r: risk_priority(tier_for(r.hazardous, _nearest_distance_km(r))),
}


def sort_records(
    records: Iterable[NeoRecord],
    key: SortKey = SortKey.DISTANCE,
    direction: SortDirection = SortDirection.ASC,
) -> list[NeoRecord]:
    """Stable sort; equal keys keep their input order in both directions."""
    # sorted(reverse=True) preserves the original order of equal elements
    return sorted(records, key=_SORT_KEYS[SortKey(key)], reverse=SortDirection(direction) is SortDirection.DESC)


def filter_records(records: Iterable[NeoRecord], query: str | None) -> list[NeoRecord]:
    """Case-insensitive substring match on name or id. Blank query keeps everything."""
    needle = (query or "").strip().casefold()
    if not needle:
        return list(records)
    return [r for r in records if needle in r.name.casefold() or needle in r.id.casefold()]


def build_view(records: Iterable[NeoRecord], query: str | None, state: SortState) -> list[NeoRecord]:
    return sort_records(filter_records(records, query), state.key, state.direction)

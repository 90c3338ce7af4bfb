"""NeoWs feed normalization: date-keyed raw feed to a flat list of NeoRecord.

The NeoWs /feed endpoint groups objects by calendar date:

    {"near_earth_objects": {"2026-10-19": [ {...}, {...} ], "2026-10-20": [...]}}

normalize_feed() flattens that mapping in date order, keeping the source order
of entries within a date. Objects that appear under several dates are kept once
per date; callers see each occurrence as a separate row.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from typing import Any

logger = logging.getLogger(__name__)

KM_PER_AU = 149_597_870.7
KM_PER_LUNAR_DISTANCE = 384_400.0
SECONDS_PER_HOUR = 3600


class MalformedFeed(ValueError):
    """Raised when a feed entry lacks required structure (e.g. close-approach data)."""


# ---------------------------------------------------------------------------
# Dataclasses
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class CloseApproach:
    """One pass of a NEO near its orbiting body.

    Velocity and miss distance are each held as a single authoritative magnitude;
    the other units are derived so they can never disagree.
    """

    date: str
    epoch_ms: int
    velocity_km_s: float
    miss_distance_km: float
    orbiting_body: str = "Earth"

    @property
    def velocity_km_h(self) -> float:
        return self.velocity_km_s * SECONDS_PER_HOUR

    @property
    def miss_distance_au(self) -> float:
        return self.miss_distance_km / KM_PER_AU

    @property
    def miss_distance_lunar(self) -> float:
        return self.miss_distance_km / KM_PER_LUNAR_DISTANCE


@dataclass(frozen=True)
class NeoRecord:
    id: str
    name: str
    diameter_min_km: float
    diameter_max_km: float
    hazardous: bool
    close_approaches: tuple[CloseApproach, ...]
    nasa_jpl_url: str
    absolute_magnitude_h: float | None = None

    @property
    def display_name(self) -> str:
        """Name without the parentheses NeoWs wraps provisional designations in."""
        return self.name.replace("(", "").replace(")", "")


# ---------------------------------------------------------------------------
# Parsing
# ---------------------------------------------------------------------------


def _parse_approach(raw: Mapping[str, Any]) -> CloseApproach:
    return CloseApproach(
        date=str(raw["close_approach_date"]),
        epoch_ms=int(raw.get("epoch_date_close_approach") or 0),
        velocity_km_s=float(raw["relative_velocity"]["kilometers_per_second"]),
        miss_distance_km=float(raw["miss_distance"]["kilometers"]),
        orbiting_body=str(raw.get("orbiting_body") or "Earth"),
    )


def parse_neo(raw: Mapping[str, Any]) -> NeoRecord:
    """Convert one raw NeoWs entry into a NeoRecord.

    Raises MalformedFeed if the entry has no close-approach events or is missing
    any field the pipeline depends on.
    """
    if not isinstance(raw, Mapping):
        raise MalformedFeed(f"NEO entry is {type(raw).__name__}, not an object")
    approaches_raw = raw.get("close_approach_data")
    if not approaches_raw or not isinstance(approaches_raw, Sequence) or isinstance(approaches_raw, str):
        raise MalformedFeed(f"NEO {raw.get('id', '?')} has no close_approach_data")

    try:
        diameter = raw["estimated_diameter"]["kilometers"]
        d_min = float(diameter["estimated_diameter_min"])
        d_max = float(diameter["estimated_diameter_max"])
        approaches = tuple(_parse_approach(a) for a in approaches_raw)
        magnitude = raw.get("absolute_magnitude_h")
        record = NeoRecord(
            id=str(raw["id"]),
            name=str(raw["name"]),
            diameter_min_km=d_min,
            diameter_max_km=d_max,
            hazardous=bool(raw["is_potentially_hazardous_asteroid"]),
            close_approaches=approaches,
            nasa_jpl_url=str(raw.get("nasa_jpl_url") or ""),
            absolute_magnitude_h=float(magnitude) if magnitude is not None else None,
        )
    except (KeyError, TypeError, ValueError, AttributeError) as exc:
        raise MalformedFeed(f"NEO {raw.get('id', '?')} is malformed: {exc!r}") from exc

    if record.diameter_min_km > record.diameter_max_km:
        raise MalformedFeed(
            f"NEO {record.id} diameter min {record.diameter_min_km} exceeds max {record.diameter_max_km}"
        )
    return record


def normalize_feed(near_earth_objects: Mapping[str, Sequence[Mapping[str, Any]]]) -> list[NeoRecord]:
    """Flatten a date to entries mapping into one ordered list of NeoRecord.

    Date order is the mapping's iteration order; entries keep their source order
    within each date. No deduplication. Any malformed entry fails the whole batch.
    """
    records: list[NeoRecord] = []
    for date, entries in near_earth_objects.items():
        if not isinstance(entries, Sequence) or isinstance(entries, str):
            raise MalformedFeed(f"feed entries for {date} are {type(entries).__name__}, not a list")
        for raw in entries:
            records.append(parse_neo(raw))
        logger.debug("Normalized %d NEOs for %s", len(entries), date)
    return records


def extract_feed(payload: Mapping[str, Any]) -> list[NeoRecord]:
    """Normalize a full NeoWs /feed response body."""
    if not isinstance(payload, Mapping):
        raise MalformedFeed("feed response is not a JSON object")
    neos = payload.get("near_earth_objects")
    if not isinstance(neos, Mapping):
        raise MalformedFeed("feed response has no near_earth_objects mapping")
    return normalize_feed(neos)

"""Risk tiering for NEOs.

Three tiers derived from the upstream hazard flag and the nearest miss distance:
- High:   flagged potentially hazardous by the upstream catalog
- Medium: not flagged, but passes closer than 5,000,000 km
- Low:    everything else

Tiers are never stored on a record; call classify() whenever one is needed.
"""

from __future__ import annotations

from enum import Enum

from neowatch.feed import CloseApproach, MalformedFeed, NeoRecord

# Strictly-less-than: a pass at exactly this distance is Low
MEDIUM_RISK_DISTANCE_KM = 5_000_000.0


class RiskTier(str, Enum):
    HIGH = "High"
    MEDIUM = "Medium"
    LOW = "Low"


_PRIORITY = {RiskTier.HIGH: 0, RiskTier.MEDIUM: 1, RiskTier.LOW: 2}


def nearest_approach(record: NeoRecord) -> CloseApproach:
    """First close-approach event. Upstream lists the nearest pass first."""
    if not record.close_approaches:
        raise MalformedFeed(f"NEO {record.id} has no close-approach events")
    return record.close_approaches[0]


def tier_for(hazardous: bool, distance_km: float) -> RiskTier:
    if hazardous:
        return RiskTier.HIGH
    if distance_km < MEDIUM_RISK_DISTANCE_KM:
        return RiskTier.MEDIUM
    return RiskTier.LOW


def classify(record: NeoRecord) -> RiskTier:
    """Risk tier for a record. Raises MalformedFeed if it has no approach events."""
    return tier_for(record.hazardous, nearest_approach(record).miss_distance_km)


def risk_priority(tier: RiskTier) -> int:
    """Sort rank: High=0 < Medium=1 < Low=2 (ascending puts the most dangerous first)."""
    return _PRIORITY[tier]

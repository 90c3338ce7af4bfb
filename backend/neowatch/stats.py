"""Headline numbers for the dashboard stat cards."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

from neowatch.feed import NeoRecord
from neowatch.risk import RiskTier, classify, nearest_approach


@dataclass(frozen=True)
class DashboardStats:
    total: int
    hazardous: int
    nearest_approach_mkm: float  # million km, 2 decimals
    avg_velocity_km_h: float     # whole km/h
    tiers: dict[str, int]

    @property
    def alert(self) -> str:
        if self.hazardous > 0:
            return (
                f"System detected {self.hazardous} hazardous objects in the current "
                "tracking window. Monitoring active."
            )
        return "All tracked objects within safe parameters. No immediate threats detected."


def summarize(records: Sequence[NeoRecord]) -> DashboardStats:
    tiers = {t.value: 0 for t in RiskTier}
    for r in records:
        tiers[classify(r).value] += 1

    if not records:
        return DashboardStats(total=0, hazardous=0, nearest_approach_mkm=0.0, avg_velocity_km_h=0.0, tiers=tiers)

    nearest_km = min(nearest_approach(r).miss_distance_km for r in records)
    total_velocity = sum(nearest_approach(r).velocity_km_h for r in records)
    return DashboardStats(
        total=len(records),
        hazardous=sum(1 for r in records if r.hazardous),
        nearest_approach_mkm=round(nearest_km / 1_000_000, 2),
        avg_velocity_km_h=float(round(total_velocity / len(records))),
        tiers=tiers,
    )

"""Shared fixtures: raw NeoWs entries, NeoRecords and a NeoWs client on a mock transport."""
from datetime import date

import httpx
import pytest

from neowatch.config import Settings
from neowatch.feed import CloseApproach, NeoRecord
from neowatch.neows import NeoWsClient


TODAY = date(2026, 10, 19)


def raw_neo(
    neo_id="2465633",
    name="465633 (2009 JR5)",
    hazardous=False,
    miss_km=45290298.225725659,
    velocity_km_s=18.1279360862,
    d_min=0.2170475943,
    d_max=0.4853331752,
    approach_date="2026-10-19",
):
    """A NeoWs /feed entry in the shape the API returns (numbers as strings)."""
    return {
        "id": neo_id,
        "neo_reference_id": neo_id,
        "name": name,
        "nasa_jpl_url": f"https://ssd.jpl.nasa.gov/tools/sbdb_lookup.html#/?sstr={neo_id}",
        "absolute_magnitude_h": 20.44,
        "estimated_diameter": {
            "kilometers": {"estimated_diameter_min": d_min, "estimated_diameter_max": d_max},
            "meters": {"estimated_diameter_min": d_min * 1000, "estimated_diameter_max": d_max * 1000},
        },
        "is_potentially_hazardous_asteroid": hazardous,
        "close_approach_data": [
            {
                "close_approach_date": approach_date,
                "close_approach_date_full": "2026-Oct-19 20:28",
                "epoch_date_close_approach": 1792441680000,
                "relative_velocity": {
                    "kilometers_per_second": str(velocity_km_s),
                    "kilometers_per_hour": str(velocity_km_s * 3600),
                },
                "miss_distance": {
                    "astronomical": str(miss_km / 149_597_870.7),
                    "lunar": str(miss_km / 384_400),
                    "kilometers": str(miss_km),
                },
                "orbiting_body": "Earth",
            }
        ],
        "is_sentry_object": False,
    }


def record(
    neo_id="1",
    name="(2026 AA)",
    hazardous=False,
    miss_km=10_000_000.0,
    velocity_km_s=10.0,
    d_max=0.5,
    approaches=None,
):
    if approaches is None:
        approaches = (CloseApproach("2026-10-19", 0, velocity_km_s, miss_km),)
    return NeoRecord(
        id=neo_id,
        name=name,
        diameter_min_km=min(0.1, d_max),
        diameter_max_km=d_max,
        hazardous=hazardous,
        close_approaches=tuple(approaches),
        nasa_jpl_url=f"https://example.invalid/{neo_id}",
    )


def feed_payload(by_date):
    return {
        "element_count": sum(len(v) for v in by_date.values()),
        "near_earth_objects": by_date,
    }


@pytest.fixture
def settings():
    return Settings(
        nasa_api_key="TEST_KEY",
        neows_base_url="https://neows.test/neo/rest/v1",
        probe_url="https://neows.test/planetary/apod",
        probe_interval_s=30.0,
        animation_fps=60.0,
        asteroid_seed=7,
    )


@pytest.fixture
def make_client(settings):
    def _make(handler):
        return NeoWsClient(settings, transport=httpx.MockTransport(handler))
    return _make

"""Runtime settings read from the environment (after .env is loaded)."""

from __future__ import annotations

import os
from dataclasses import dataclass, field

NEOWS_BASE = "https://api.nasa.gov/neo/rest/v1"
APOD_URL = "https://api.nasa.gov/planetary/apod"


def _int_or_none(raw: str | None) -> int | None:
    if raw is None or raw.strip() == "":
        return None
    return int(raw)


@dataclass(frozen=True)
class Settings:
    nasa_api_key: str = "DEMO_KEY"
    neows_base_url: str = NEOWS_BASE
    probe_url: str = APOD_URL
    request_timeout_s: float = 10.0
    feed_window_days: int = 7
    probe_interval_s: float = 30.0
    animation_fps: float = 60.0
    asteroid_count: int = 15
    asteroid_seed: int | None = None
    cors_origins: tuple[str, ...] = field(default_factory=lambda: (
        "http://localhost:3000",
        "http://localhost:5173",
        "http://127.0.0.1:3000",
        "http://127.0.0.1:5173",
    ))

    @classmethod
    def from_env(cls) -> "Settings":
        defaults = cls()
        origins = os.getenv("CORS_ORIGINS")
        return cls(
            nasa_api_key=os.getenv("NASA_API_KEY", defaults.nasa_api_key),
            neows_base_url=os.getenv("NEOWS_BASE_URL", defaults.neows_base_url),
            probe_url=os.getenv("NEOWS_PROBE_URL", defaults.probe_url),
            request_timeout_s=float(os.getenv("NEOWS_TIMEOUT_S", defaults.request_timeout_s)),
            feed_window_days=int(os.getenv("FEED_WINDOW_DAYS", defaults.feed_window_days)),
            probe_interval_s=float(os.getenv("HEALTH_PROBE_INTERVAL_S", defaults.probe_interval_s)),
            animation_fps=float(os.getenv("ANIMATION_FPS", defaults.animation_fps)),
            asteroid_count=int(os.getenv("ASTEROID_COUNT", defaults.asteroid_count)),
            asteroid_seed=_int_or_none(os.getenv("ASTEROID_SEED")),
            cors_origins=(
                tuple(o.strip() for o in origins.split(",") if o.strip())
                if origins else defaults.cors_origins
            ),
        )

    @property
    def frame_interval_s(self) -> float:
        return 1.0 / self.animation_fps if self.animation_fps > 0 else 0.0

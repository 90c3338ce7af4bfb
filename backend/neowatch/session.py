"""DashboardSession: one consuming view of the NEO pipeline.

Owns three independent activities that never share mutable state:
  - feed fetch: one request in flight at a time, result swapped in wholesale
  - health probe timer
  - animation loop over the orbital simulator

close() stops the timer and the loop first, then releases the HTTP client.
A fetch that completes after close() is dropped.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, replace
from datetime import date, datetime, timezone
from enum import Enum
from typing import Callable

from neowatch.animation import AnimationLoop
from neowatch.config import Settings
from neowatch.feed import MalformedFeed, NeoRecord, extract_feed
from neowatch.health import HealthProbe
from neowatch.neows import NeoWsClient, TransportFailure, default_window
from neowatch.simulator import OrbitalSimulator
from neowatch.sorting import SortState, build_view

logger = logging.getLogger(__name__)


class FeedStatus(str, Enum):
    IDLE = "idle"        # nothing fetched yet
    LOADING = "loading"
    READY = "ready"
    ERROR = "error"      # last fetch failed; records are from the fetch before it


@dataclass(frozen=True)
class FeedSnapshot:
    status: FeedStatus = FeedStatus.IDLE
    records: tuple[NeoRecord, ...] = ()
    start: date | None = None
    end: date | None = None
    last_updated: datetime | None = None
    error: str | None = None


class DashboardSession:

    def __init__(
        self,
        settings: Settings,
        client: NeoWsClient | None = None,
        simulator: OrbitalSimulator | None = None,
        today: Callable[[], date] = date.today,
        clock: Callable[[], float] = time.perf_counter,
    ):
        self.settings = settings
        self.client = client or NeoWsClient(settings)
        self.probe = HealthProbe(self.client.probe, settings.probe_interval_s, clock)
        self.simulator = simulator or OrbitalSimulator.solar_system(
            settings.asteroid_seed, settings.asteroid_count,
        )
        self.animation = AnimationLoop(self.simulator, settings.frame_interval_s)
        self.sort_state = SortState()
        self._today = today
        self._clock = clock
        self._snapshot = FeedSnapshot()
        self._busy = False
        self._closed = False

    @property
    def snapshot(self) -> FeedSnapshot:
        return self._snapshot

    @property
    def busy(self) -> bool:
        return self._busy

    @property
    def closed(self) -> bool:
        return self._closed

    def today(self) -> date:
        return self._today()

    def start(self) -> None:
        self.probe.start()
        self.animation.start()

    def view(self, query: str | None = None) -> list[NeoRecord]:
        return build_view(self._snapshot.records, query, self.sort_state)

    async def refresh_feed(self, start: date | None = None, end: date | None = None) -> bool:
        """Fetch, normalize and swap in a new feed.

        Returns False without doing anything if a fetch is already in flight or
        the session is closed. Failures leave the previous records in place and
        set the ERROR status.
        """
        if self._busy or self._closed:
            return False
        self._busy = True
        if start is None or end is None:
            start, end = default_window(self._today(), self.settings.feed_window_days)
        self._snapshot = replace(self._snapshot, status=FeedStatus.LOADING)

        try:
            t0 = self._clock()
            try:
                payload = await self.client.fetch_feed(start, end)
            except TransportFailure as exc:
                if self._closed:
                    return True
                logger.warning("Feed fetch failed: %s", exc)
                self.probe.record_failure()
                self._snapshot = replace(self._snapshot, status=FeedStatus.ERROR, error=str(exc))
                return True

            if self._closed:
                logger.info("Session closed during fetch, discarding feed result")
                return True
            self.probe.record_latency((self._clock() - t0) * 1000)

            try:
                records = tuple(extract_feed(payload))
            except MalformedFeed as exc:
                logger.exception("Feed for %s to %s is malformed", start, end)
                self._snapshot = replace(self._snapshot, status=FeedStatus.ERROR, error=str(exc))
                return True

            self._snapshot = FeedSnapshot(
                status=FeedStatus.READY,
                records=records,
                start=start,
                end=end,
                last_updated=datetime.now(timezone.utc),
            )
            logger.info("Loaded %d NEOs for %s to %s", len(records), start, end)
            return True
        finally:
            self._busy = False

    async def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        try:
            await self.animation.stop()
            await self.probe.stop()
        finally:
            await self.client.aclose()
            logger.info("Dashboard session closed")

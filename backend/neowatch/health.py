"""Periodic latency probe for the NeoWs service.

The latest HealthSample is replaced wholesale on every update. Two writers share
it: the dedicated probe timer and the feed fetch, which records its own round
trip. Whichever finishes last wins.
"""

from __future__ import annotations

import asyncio
import logging
import time
from dataclasses import dataclass
from enum import Enum
from typing import Awaitable, Callable

from neowatch.neows import TransportFailure

logger = logging.getLogger(__name__)

DEFAULT_PROBE_INTERVAL_S = 30.0

# Status widget bands (ms)
GOOD_LATENCY_MS = 200
FAIR_LATENCY_MS = 500


class HealthStatus(str, Enum):
    ONLINE = "online"
    OFFLINE = "offline"
    CHECKING = "checking"


@dataclass(frozen=True)
class HealthSample:
    status: HealthStatus
    latency_ms: int | None = None

    @classmethod
    def checking(cls) -> "HealthSample":
        return cls(HealthStatus.CHECKING)

    @classmethod
    def online(cls, latency_ms: float) -> "HealthSample":
        return cls(HealthStatus.ONLINE, round(latency_ms))

    @classmethod
    def offline(cls) -> "HealthSample":
        return cls(HealthStatus.OFFLINE)


def latency_grade(latency_ms: int | None) -> str:
    if latency_ms is None:
        return "unknown"
    if latency_ms < GOOD_LATENCY_MS:
        return "good"
    if latency_ms < FAIR_LATENCY_MS:
        return "fair"
    return "poor"


class HealthProbe:
    """Times a round trip to the data source every `interval` seconds.

    `probe` is any coroutine function that raises TransportFailure on failure
    (normally NeoWsClient.probe). `clock` returns seconds and is injectable for
    tests.
    """

    def __init__(
        self,
        probe: Callable[[], Awaitable[None]],
        interval: float = DEFAULT_PROBE_INTERVAL_S,
        clock: Callable[[], float] = time.perf_counter,
    ):
        self._probe = probe
        self.interval = interval
        self._clock = clock
        self._sample = HealthSample.checking()
        self._task: asyncio.Task | None = None
        self._closed = False

    @property
    def sample(self) -> HealthSample:
        return self._sample

    def record_latency(self, latency_ms: float) -> None:
        if self._closed:
            return
        self._sample = HealthSample.online(latency_ms)

    def record_failure(self) -> None:
        if self._closed:
            return
        self._sample = HealthSample.offline()

    async def probe_once(self) -> HealthSample:
        start = self._clock()
        try:
            await self._probe()
        except TransportFailure as exc:
            logger.warning("Health probe failed: %s", exc)
            self.record_failure()
            return self._sample
        elapsed_ms = (self._clock() - start) * 1000
        self.record_latency(elapsed_ms)
        logger.debug("Health probe ok in %.0f ms", elapsed_ms)
        return self._sample

    def start(self) -> None:
        if self._task is not None and not self._task.done():
            return
        self._closed = False
        self._task = asyncio.create_task(self._run())
        logger.info("Health probe started (every %.0fs)", self.interval)

    async def _run(self) -> None:
        try:
            while True:
                await asyncio.sleep(self.interval)
                try:
                    await self.probe_once()
                except Exception:
                    logger.exception("Health probe raised an unexpected error")
                    self.record_failure()
        except asyncio.CancelledError:
            pass

    async def stop(self) -> None:
        """Cancel the timer. Results of a probe still in flight are dropped."""
        self._closed = True
        if self._task is None:
            return
        self._task.cancel()
        try:
            await self._task
        finally:
            self._task = None
        logger.info("Health probe stopped")

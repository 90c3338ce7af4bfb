"""Asyncio tick source that drives an OrbitalSimulator once per display frame."""

from __future__ import annotations

import asyncio
import logging
from typing import Awaitable, Callable

from neowatch.simulator import OrbitalSimulator

logger = logging.getLogger(__name__)

FrameCallback = Callable[[OrbitalSimulator], Awaitable[None]] | None


class AnimationLoop:
    """Runs simulator.tick() every frame_interval seconds until stopped.

    stop() cancels the task and waits for it, so once it returns the simulator's
    phases are no longer touched.
    """

    def __init__(
        self,
        simulator: OrbitalSimulator,
        frame_interval: float = 1 / 60,
        on_frame: FrameCallback = None,
    ):
        self.simulator = simulator
        self.frame_interval = frame_interval
        self.on_frame = on_frame
        self._task: asyncio.Task | None = None
        self._stopped = False

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self) -> None:
        if self.running:
            return
        self._stopped = False
        self._task = asyncio.create_task(self._run())
        logger.info("Animation loop started (%.1f fps)", 1 / self.frame_interval if self.frame_interval else 0)

    async def _run(self) -> None:
        try:
            while not self._stopped:
                self.simulator.tick()
                if self.on_frame:
                    await self.on_frame(self.simulator)
                await asyncio.sleep(self.frame_interval)
        except asyncio.CancelledError:
            pass

    async def stop(self) -> None:
        self._stopped = True
        if self._task is None:
            return
        self._task.cancel()
        try:
            await self._task
        finally:
            self._task = None
        logger.info("Animation loop stopped at frame %d", self.simulator.frame)

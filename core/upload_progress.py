# core/upload_progress.py
import asyncio
import logging
import random
from typing import List, Optional
from config.settings import settings
from core.scheduling import AsyncioScheduler, CancellationToken, Scheduler
from util.functions import notify
from util.types import UploadCallback

logger = logging.getLogger(__name__)


class UploadProgressSimulator:
    """
    Cosmetic upload progress while the submission request is in flight.

    The transfer reports no byte-level progress, so each tick adds a random
    increment, capped below completion. Only `finish()` (the response arriving)
    reaches 100. Nothing downstream reads this value for control flow.
    """

    def __init__(
        self,
        *,
        scheduler: Optional[Scheduler] = None,
        tick_seconds: float = settings.UPLOAD_TICK_SECONDS,
        cap: float = settings.UPLOAD_PROGRESS_CAP,
        max_increment: float = settings.UPLOAD_MAX_INCREMENT,
        rng: Optional[random.Random] = None,
    ) -> None:
        self._scheduler = scheduler or AsyncioScheduler()
        self._tick_seconds = tick_seconds
        self._cap = cap
        self._max_increment = max_increment
        self._rng = rng or random.Random()
        self._observers: List[UploadCallback] = []
        self._token = CancellationToken()
        self._task: Optional[asyncio.Task] = None
        self.progress: float = 0.0
        self.finished: bool = False

    def subscribe(self, callback: UploadCallback) -> None:
        self._observers.append(callback)

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self) -> None:
        if self._task is not None:
            return
        self._task = asyncio.create_task(self._run())

    async def tick(self) -> float:
        """Advance one step; stays at the cap until the response resolves."""
        if self.finished or self.progress >= self._cap:
            return self.progress
        step = self._rng.random() * self._max_increment
        self.progress = min(self._cap, self.progress + step)
        await self._publish()
        return self.progress

    async def finish(self) -> None:
        await self._halt()
        self.progress = 100.0
        self.finished = True
        await self._publish()

    async def stop(self) -> None:
        """Abandon without completing; value drops back to the baseline."""
        await self._halt()
        self.progress = 0.0
        self.finished = False

    async def _run(self) -> None:
        while not self._token.cancelled:
            await self._scheduler.sleep(self._tick_seconds, self._token)
            if self._token.cancelled:
                break
            await self.tick()
            if self.progress >= self._cap:
                logger.debug("upload.sim.capped value=%.1f", self.progress)
                break

    async def _halt(self) -> None:
        self._token.cancel()
        task, self._task = self._task, None
        if task is not None and not task.done():
            task.cancel()
            await asyncio.gather(task, return_exceptions=True)

    async def _publish(self) -> None:
        for cb in list(self._observers):
            await notify(cb, self.progress, self.finished)

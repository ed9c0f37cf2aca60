# core/scheduling.py
import asyncio
from typing import Optional, Protocol


class CancellationToken:
    """
    Flag shared between a submission and the loops it starts.
    Checked at every suspension point; cancelling also wakes pending sleeps.
    """

    def __init__(self) -> None:
        self._event = asyncio.Event()

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()

    def cancel(self) -> None:
        self._event.set()

    async def wait(self) -> None:
        await self._event.wait()


class Scheduler(Protocol):
    async def sleep(
        self, seconds: float, token: Optional[CancellationToken] = None
    ) -> None: ...


class AsyncioScheduler:
    async def sleep(
        self, seconds: float, token: Optional[CancellationToken] = None
    ) -> None:
        if token is None:
            await asyncio.sleep(seconds)
            return
        if token.cancelled:
            return
        try:
            await asyncio.wait_for(token.wait(), timeout=seconds)
        except asyncio.TimeoutError:
            pass

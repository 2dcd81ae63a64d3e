"""Elapsed-time counter for live test sessions."""
from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass

from prepdesk.config import TIMER_INTERVAL_SECONDS

logger = logging.getLogger(__name__)


@dataclass
class ElapsedTime:
    hours: int = 0
    minutes: int = 0
    seconds: int = 0

    def tick(self) -> None:
        """Advance by one second."""
        seconds = self.seconds + 1
        minutes = self.minutes + seconds // 60
        self.hours += minutes // 60
        self.minutes = minutes % 60
        self.seconds = seconds % 60

    @property
    def total_minutes(self) -> int:
        """Whole minutes elapsed; leftover seconds are dropped."""
        return self.hours * 60 + self.minutes

    def format(self) -> str:
        return f"{self.hours:02d}h:{self.minutes:02d}m:{self.seconds:02d}s"


class SessionTimer:
    """
    Ticks an ElapsedTime once per interval on the running event loop.
    There is no pause; stop() cancels the ticking task for good.
    """

    def __init__(self, interval: float = TIMER_INTERVAL_SECONDS):
        self.interval = interval
        self.elapsed = ElapsedTime()
        self._task: asyncio.Task | None = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self) -> None:
        """Start ticking. Must be called with a running event loop."""
        if self.running:
            return
        loop = asyncio.get_running_loop()
        self._task = loop.create_task(self._run(), name="session_timer")

    def stop(self) -> None:
        if self._task is not None:
            self._task.cancel()
            self._task = None

    async def _run(self) -> None:
        try:
            while True:
                await asyncio.sleep(self.interval)
                self.elapsed.tick()
        except asyncio.CancelledError:
            logger.debug("Timer stopped at %s", self.elapsed.format())
            raise

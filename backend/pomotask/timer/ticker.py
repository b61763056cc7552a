# backend/pomotask/timer/ticker.py

import asyncio
import logging
import time
from typing import Callable, Optional

logger = logging.getLogger(__name__)


class Ticker:
    """
    One repeating tick source on the running asyncio loop.

    Ticks are scheduled against a monotonic deadline rather than chained
    sleeps: when the loop was blocked or throttled for several intervals,
    the missed ticks are delivered back to back so the countdown does not
    drift. ``callback`` runs synchronously and may call ``stop()``; no
    further tick fires after that.
    """

    def __init__(
        self,
        callback: Callable[[], None],
        interval: float = 1.0,
        clock: Callable[[], float] = time.monotonic,
    ):
        if interval <= 0:
            raise ValueError("interval must be positive")
        self._callback = callback
        self._interval = interval
        self._clock = clock
        self._task: Optional[asyncio.Task] = None
        self._generation = 0

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self) -> None:
        if self.running:
            return
        self._generation += 1
        first_deadline = self._clock() + self._interval
        self._task = asyncio.get_running_loop().create_task(
            self._run(self._generation, first_deadline)
        )

    def stop(self) -> None:
        # bump first so a stop() issued from inside the callback ends
        # the catch-up loop before the next tick
        self._generation += 1
        task, self._task = self._task, None
        if task is not None and task is not asyncio.current_task():
            task.cancel()

    async def _run(self, generation: int, next_deadline: float) -> None:
        while generation == self._generation:
            await asyncio.sleep(max(0.0, next_deadline - self._clock()))

            now = self._clock()
            due = int((now - next_deadline) // self._interval) + 1
            if due > 1:
                logger.debug("Ticker catching up %d missed ticks", due - 1)

            for _ in range(due):
                if generation != self._generation:
                    return
                self._callback()
            next_deadline += due * self._interval

"""Tick driver — feeds the engine periodic ticks on a wall-clock cadence.

No background thread: ``run`` is a plain loop on the caller's thread, so
ticks and commands share one sequential stream. If the loop falls behind
(slow machine, suspended process), the missed slots collapse into a single
tick; accrual is delta-based, so nothing is lost.
"""

import logging
import time
from typing import Callable, Optional

from focusflow.core.config import settings
from focusflow.timer.engine import TimerEngine

logger = logging.getLogger(__name__)


class TickDriver:
    """Calls ``engine.tick`` every ``interval`` seconds.

    Usage:
        driver = TickDriver(engine, interval=1.0, on_tick=print)
        driver.run(max_ticks=60)
    """

    def __init__(
        self,
        engine: TimerEngine,
        interval: float = settings.TICK_INTERVAL,
        clock: Callable[[], float] = time.time,
        sleep: Callable[[float], None] = time.sleep,
        on_tick: Optional[Callable[[list[str]], None]] = None,
    ):
        if interval <= 0:
            raise ValueError("interval must be positive")
        self.engine = engine
        self.interval = interval
        self.clock = clock
        self.sleep = sleep
        self.on_tick = on_tick
        self.ticks = 0
        self.coalesced = 0
        self._stopped = False

    def tick_once(self) -> list[str]:
        """Run one tick at the current clock reading."""
        changed = self.engine.tick(now=self.clock())
        self.ticks += 1
        if self.on_tick is not None:
            self.on_tick(changed)
        return changed

    def stop(self) -> None:
        """Ask ``run`` to return after the current tick."""
        self._stopped = True

    def run(self, max_ticks: Optional[int] = None) -> int:
        """Tick until stopped (or ``max_ticks`` ticks). Returns ticks performed."""
        self._stopped = False
        performed = 0
        next_at = self.clock() + self.interval

        while not self._stopped and (max_ticks is None or performed < max_ticks):
            wait = next_at - self.clock()
            if wait > 0:
                self.sleep(wait)

            self.tick_once()
            performed += 1

            now = self.clock()
            next_at += self.interval
            if next_at <= now:
                # Fell behind: skip the missed slots instead of replaying them
                missed = int((now - next_at) // self.interval) + 1
                self.coalesced += missed
                logger.debug("Tick loop behind by %d slot(s); coalescing", missed)
                next_at += missed * self.interval

        return performed

# passkey/common/scheduler.py
from __future__ import annotations
import asyncio, logging, time
from typing import Callable
from passkey.common.models import SLOT_NAMES, SchedulerState
from passkey.common.rotator import (
    CURRENT, NEXT, PREVIOUS, Window, derive, normalize_interval, time_bucket,
)
from passkey.common.secret import SecretStore

# timers may fire a hair early; land safely inside the new bucket
TICK_SLACK_SEC = 0.05

class RotationScheduler:
    """
    Owns the window of one session and rotates it once per interval.

    The stop event is the only way to shut the background task down.
    Setting it does not wait for the task; a rotation already under way
    still completes.
    """

    def __init__(self, store: SecretStore, interval: float | None = None,
                 stop: asyncio.Event | None = None,
                 clock: Callable[[], float] | None = None, logger=None):
        self.store = store
        self.interval = normalize_interval(interval)
        self.window = Window()
        self.state: SchedulerState = "STOPPED"
        self.generated_secret: str | None = None
        self.ticks = 0
        self._stop = stop if stop is not None else asyncio.Event()
        self._clock = clock or time.time
        self.logger = logger or logging.getLogger("passkey")

    def prime(self) -> str | None:
        """
        Fill current and next from scratch; previous stays empty until the
        first rotation. Returns the secret text when one had to be generated.
        """
        self.generated_secret = self.store.ensure()
        if self.generated_secret:
            self.logger.warning("no shared secret configured, generated a new one")

        now = self._clock()
        self.window.clear()
        self._fill(CURRENT, now)
        self._fill(NEXT, now)
        self.ticks = 0
        return self.generated_secret

    def _fill(self, slot: int, now: float):
        code = derive(self.store.raw, self.interval, slot, now)
        bucket = time_bucket(self.interval, slot, now)
        self.window.slot(SLOT_NAMES[slot]).store(code, bucket)

    def rotate(self):
        w = self.window
        w.previous.store(*w.current.snapshot())
        w.current.store(*w.next.snapshot())
        self._fill(NEXT, self._clock())
        self.ticks += 1
        self.logger.debug(f"window rotated tick={self.ticks} current_bucket={w.current.bucket}")

    def realign(self, now: float):
        """
        Rebuild all three slots for `now` after the loop missed buckets.
        Written newest first.
        """
        self._fill(NEXT, now)
        self._fill(CURRENT, now)
        self._fill(PREVIOUS, now)
        self.ticks += 1
        self.logger.warning(f"rotation fell behind, window realigned current_bucket={self.window.current.bucket}")

    def tick(self):
        """
        One wake-up of the background task: a normal single-slot rotation,
        or a realign when the wall clock has moved more than one bucket.
        """
        now = self._clock()
        behind = (time_bucket(self.interval, CURRENT, now) - self.window.current.bucket) // self.interval
        if behind == 1:
            self.rotate()
        elif behind > 1:
            self.realign(now)

    def seconds_to_boundary(self) -> float:
        now = self._clock()
        return self.interval - (now % self.interval) + TICK_SLACK_SEC

    async def run(self):
        self.state = "RUNNING"
        try:
            while not self._stop.is_set():
                try:
                    await asyncio.wait_for(self._stop.wait(), timeout=self.seconds_to_boundary())
                except asyncio.TimeoutError:
                    self.tick()
        finally:
            self.state = "STOPPED"
            self.logger.info("rotation stopped")

    def start(self) -> asyncio.Task:
        """
        Prime the window and launch the rotation task on the running loop.
        """
        if self.state == "RUNNING":
            raise RuntimeError("rotation scheduler already running")
        self._stop.clear()
        self.prime()
        self.state = "RUNNING"
        self.logger.info(f"rotation started interval={self.interval}s")
        return asyncio.create_task(self.run())

    def stop(self):
        self._stop.set()

"""
One-second driver for the countdown timer.
Runs as an interval job inside FastAPI's event loop using APScheduler.
The job exists only while the timer is running: every transition out of
running removes it, and close() removes it for good on shutdown.
"""

import logging

from apscheduler.schedulers.asyncio import AsyncIOScheduler

from timer.engine import CountdownTimer, TimerStatus

logger = logging.getLogger(__name__)

TICK_JOB_ID = "countdown_tick"
TICK_SECONDS = 1


class TimerTicker:
    def __init__(self, timer: CountdownTimer, scheduler):
        self.timer = timer
        self._scheduler = scheduler
        self._closed = False

    def status(self) -> TimerStatus:
        return self.timer.status()

    def start(self) -> TimerStatus:
        if not self._closed and self.timer.start():
            self._scheduler.add_job(
                self._on_tick,
                trigger="interval",
                seconds=TICK_SECONDS,
                id=TICK_JOB_ID,
                replace_existing=True,
            )
        return self.status()

    def pause(self) -> TimerStatus:
        self.timer.pause()
        self._cancel_tick()
        return self.status()

    def reset(self) -> TimerStatus:
        self.timer.reset()
        self._cancel_tick()
        return self.status()

    def begin_configuration(self) -> TimerStatus:
        self.timer.begin_configuration()
        self._cancel_tick()
        return self.status()

    def set_configuration(self, minutes_text: str) -> TimerStatus:
        self.timer.set_configuration(minutes_text)
        self._cancel_tick()
        return self.status()

    def close(self) -> None:
        """Tear down: no tick may fire after this."""
        self._closed = True
        self.timer.pause()
        self._cancel_tick()

    def _on_tick(self) -> None:
        if self._closed:
            return
        expired = self.timer.tick()
        if expired:
            logger.info("[Timer] Countdown finished")
        if not self.timer.running:
            self._cancel_tick()

    def _cancel_tick(self) -> None:
        if self._scheduler.get_job(TICK_JOB_ID) is not None:
            self._scheduler.remove_job(TICK_JOB_ID)


def start_scheduler() -> AsyncIOScheduler:
    """Create and start the APScheduler instance that drives the timer."""
    scheduler = AsyncIOScheduler()
    scheduler.start()
    logger.info("[Scheduler] Timer scheduler started")
    return scheduler

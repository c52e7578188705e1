"""Countdown timer engine: pure logic, no I/O.

Time only moves through tick(); whoever owns the engine decides when a
second has passed (see timer.ticker for the scheduler-driven owner).
"""

from __future__ import annotations

import logging
import re
from enum import Enum

from pydantic import BaseModel

logger = logging.getLogger(__name__)

DEFAULT_MINUTES = 25

_LEADING_INT = re.compile(r"\s*([+-]?\d+)")


class TimerState(str, Enum):
    CONFIGURING = "configuring"
    READY = "ready"
    RUNNING = "running"
    EXPIRED = "expired"


class TimerStatus(BaseModel):
    state: TimerState
    remaining_seconds: int
    running: bool
    configured_minutes: int
    display: str


def format_time(seconds: int) -> str:
    """Format seconds as 'MM:SS'."""
    minutes, secs = divmod(max(seconds, 0), 60)
    return f"{minutes:02d}:{secs:02d}"


def parse_minutes(text: str) -> int | None:
    """Leading integer of text, or None if there is none or it is not positive."""
    match = _LEADING_INT.match(text or "")
    if not match:
        return None
    minutes = int(match.group(1))
    return minutes if minutes > 0 else None


class CountdownTimer:
    """Encapsulates countdown state and transitions.

    Every transition returns True if it changed anything, so callers can
    tell a real transition from an ignored one.
    """

    def __init__(self, minutes: int = DEFAULT_MINUTES):
        if minutes <= 0:
            raise ValueError("minutes must be positive")
        self._configured_minutes: int = minutes
        self._remaining_seconds: int = minutes * 60
        self._running: bool = False
        self._configuring: bool = False

    # ---- Read-only properties ----

    @property
    def remaining_seconds(self) -> int:
        return self._remaining_seconds

    @property
    def running(self) -> bool:
        return self._running

    @property
    def configured_minutes(self) -> int:
        return self._configured_minutes

    @property
    def state(self) -> TimerState:
        if self._configuring:
            return TimerState.CONFIGURING
        if self._running:
            return TimerState.RUNNING
        if self._remaining_seconds == 0:
            return TimerState.EXPIRED
        return TimerState.READY

    def status(self) -> TimerStatus:
        return TimerStatus(
            state=self.state,
            remaining_seconds=self._remaining_seconds,
            running=self._running,
            configured_minutes=self._configured_minutes,
            display=format_time(self._remaining_seconds),
        )

    # ---- Transitions ----

    def start(self) -> bool:
        if self.state != TimerState.READY:
            return False
        self._running = True
        logger.debug("Timer started with %ss left", self._remaining_seconds)
        return True

    def pause(self) -> bool:
        if not self._running:
            return False
        self._running = False
        logger.debug("Timer paused at %ss", self._remaining_seconds)
        return True

    def tick(self) -> bool:
        """Advance one second. Returns True if this tick expired the timer."""
        if not self._running:
            return False
        self._remaining_seconds -= 1
        if self._remaining_seconds <= 0:
            self._remaining_seconds = 0
            self._running = False
            logger.info("Timer expired")
            return True
        return False

    def reset(self) -> bool:
        self._configuring = False
        self._running = False
        self._remaining_seconds = self._configured_minutes * 60
        return True

    def begin_configuration(self) -> bool:
        """Enter the configuring state; the countdown stops while editing."""
        if self._configuring:
            return False
        self._configuring = True
        self._running = False
        return True

    def set_configuration(self, minutes_text: str) -> bool:
        """Leave configuring with a new target. Unparseable text keeps the old one.

        The remaining time is untouched; reset() applies the new target.
        """
        self._configuring = False
        self._running = False
        minutes = parse_minutes(minutes_text)
        if minutes is None:
            logger.debug("Ignoring timer configuration %r", minutes_text)
            return False
        self._configured_minutes = minutes
        return True

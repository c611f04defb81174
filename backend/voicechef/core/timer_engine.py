import logging
from typing import Optional

from ..models.session import TimerEvent, TimerExpired, TimerRunning

log = logging.getLogger(__name__)


class TimerEngine:
    """
    A single countdown. The caller drives it by calling ``tick`` once per
    second (or whatever unit the scheduler uses).
    """

    def __init__(self) -> None:
        self.remaining = 0
        self.running = False

    def start(self, seconds: int) -> None:
        if seconds <= 0:
            raise ValueError(f"timer needs a positive duration, got {seconds}")
        if self.running:
            log.debug(f"Replacing running timer ({self.remaining}s left)")
        self.remaining = seconds
        self.running = True

    def cancel(self) -> None:
        if not self.running:
            return
        log.debug(f"Timer cancelled with {self.remaining}s left")
        self.remaining = 0
        self.running = False

    def tick(self) -> Optional[TimerEvent]:
        if not self.running:
            return None
        self.remaining -= 1
        if self.remaining > 0:
            return TimerRunning(remaining=self.remaining)
        self.remaining = 0
        self.running = False
        return TimerExpired()

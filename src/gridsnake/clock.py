# src/gridsnake/clock.py
from __future__ import annotations
from typing import Optional

from .config import validate_period


class TickClock:
    """
    Cooperative period gate for a polling main loop.

    The loop asks `due(now_ms)` every frame; it answers True once per period.
    A late poll never replays missed periods: the next due time is re-based
    on `now_ms` instead.
    """

    def __init__(self, period_ms: int):
        self.period_ms = validate_period(period_ms)
        self.next_due: Optional[int] = None

    @property
    def active(self) -> bool:
        return self.next_due is not None

    def start(self, now_ms: int) -> None:
        self.next_due = now_ms + self.period_ms

    def stop(self) -> None:
        self.next_due = None

    def due(self, now_ms: int) -> bool:
        if self.next_due is None or now_ms < self.next_due:
            return False
        self.next_due += self.period_ms
        if self.next_due <= now_ms:
            self.next_due = now_ms + self.period_ms
        return True

    def set_period(self, period_ms: int, now_ms: int) -> None:
        # cancel-then-reschedule, never two pending schedules
        self.period_ms = validate_period(period_ms)
        if self.active:
            self.start(now_ms)

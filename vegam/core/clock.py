from __future__ import annotations


class ClockDriver:
    """One-tick-per-second counter for an active test.

    Counts down from the time limit in Time mode and up from zero otherwise.
    A cancelled driver ignores further ticks; a new test always gets a new
    driver.
    """

    def __init__(self, countdown: bool, start: int = 0) -> None:
        self._countdown = countdown
        self._value = start
        self._cancelled = False

    @property
    def value(self) -> int:
        return self._value

    @property
    def countdown(self) -> bool:
        return self._countdown

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    def tick(self) -> bool:
        """Advance one second. Returns True when a countdown has just hit zero."""
        if self._cancelled:
            return False
        if not self._countdown:
            self._value += 1
            return False
        self._value = max(0, self._value - 1)
        if self._value == 0:
            self._cancelled = True
            return True
        return False

    def cancel(self) -> None:
        self._cancelled = True

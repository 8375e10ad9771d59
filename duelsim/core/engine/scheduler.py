"""Cooperative periodic timers.

The engine is single-threaded: nothing fires on its own. The owner polls each
timer with the current monotonic time and the timer runs its callback once
for every period that has elapsed. A callback is never re-entered, and a
timer stopped from inside its own callback fires no further catch-up ticks.
"""

from typing import Callable, Optional


TimerCallback = Callable[[], None]


class PeriodicTimer:
    """Fixed-period timer driven by explicit ``poll(now)`` calls."""

    def __init__(
        self,
        period: float,
        callback: TimerCallback,
        name: str = "timer",
        max_catch_up: int = 10,
    ):
        """Initialize the timer.

        Args:
            period: Seconds between firings
            callback: Function run once per elapsed period
            name: Label used in diagnostics
            max_catch_up: Most firings a single poll may run; older missed
                periods are dropped so a stalled loop cannot spiral
        """
        if period <= 0:
            raise ValueError(f"Timer period must be positive, got {period}")
        if max_catch_up < 1:
            raise ValueError("max_catch_up must be at least 1")
        self.period = period
        self.callback = callback
        self.name = name
        self.max_catch_up = max_catch_up

        self._active = False
        self._firing = False
        self._next_fire: Optional[float] = None
        self._fire_count = 0

    @property
    def is_active(self) -> bool:
        return self._active

    @property
    def fire_count(self) -> int:
        """Total firings since the timer was created."""
        return self._fire_count

    @property
    def next_fire(self) -> Optional[float]:
        return self._next_fire

    def start(self, now: float) -> None:
        """Arm the timer; the first firing is one period after ``now``."""
        self._active = True
        self._next_fire = now + self.period

    def stop(self) -> None:
        """Cancel further firings. Safe to call from inside the callback."""
        self._active = False
        self._next_fire = None

    def poll(self, now: float) -> int:
        """Run the callback for every period elapsed up to ``now``.

        Returns:
            Number of times the callback ran during this poll
        """
        if self._firing:
            return 0

        fired = 0
        self._firing = True
        try:
            while (
                self._active
                and self._next_fire is not None
                and now >= self._next_fire
            ):
                if fired >= self.max_catch_up:
                    # Drop the backlog and resynchronise to the next boundary
                    missed = int((now - self._next_fire) // self.period) + 1
                    self._next_fire += missed * self.period
                    break
                self._next_fire += self.period
                fired += 1
                self._fire_count += 1
                self.callback()
        finally:
            self._firing = False
        return fired

from __future__ import annotations

from typing import List


class GravityTimer:
    """Cancellable periodic source of gravity ticks.

    Every `start()` and `stop()` bumps `generation`. A tick is identified by
    the generation it was scheduled under, so a tick that was already queued
    when the timer was stopped or restarted can be recognised as stale.

    The base class is clock-agnostic: drive it with `advance(elapsed_ms)`.
    Subclasses hook `_arm`/`_disarm` to delegate scheduling to an event loop.
    """

    def __init__(self, period_ms: int = 1000) -> None:
        if period_ms <= 0:
            raise ValueError(f"period_ms must be positive, got {period_ms}")
        self.period_ms = int(period_ms)
        self.generation = 0
        self.running = False
        self._elapsed_ms = 0

    def start(self) -> int:
        self.generation += 1
        self.running = True
        self._elapsed_ms = 0
        self._arm()
        return self.generation

    def stop(self) -> None:
        if not self.running:
            return
        self.generation += 1
        self.running = False
        self._elapsed_ms = 0
        self._disarm()

    def is_current(self, generation: int) -> bool:
        return self.running and generation == self.generation

    def advance(self, elapsed_ms: int) -> List[int]:
        """Accumulate time and return one generation stamp per due tick."""
        if not self.running:
            return []
        self._elapsed_ms += int(elapsed_ms)
        due = self._elapsed_ms // self.period_ms
        self._elapsed_ms -= due * self.period_ms
        return [self.generation] * due

    def _arm(self) -> None:
        pass

    def _disarm(self) -> None:
        pass

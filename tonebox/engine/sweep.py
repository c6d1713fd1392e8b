"""Sweep transition curves and the elapsed-time clock that drives them."""

from __future__ import annotations

import math
from collections.abc import Callable

from ..sound.base import TransitionCurve
from .state import SweepConfig

Clock = Callable[[], float]


def interpolate(
    curve: TransitionCurve,
    start: float,
    end: float,
    progress: float,
) -> float:
    """Map ``progress`` in [0, 1] to a frequency between ``start`` and ``end``.

    ``exponential`` interpolates pitch evenly (geometric), ``sine`` eases in
    and out. All curves return exactly ``start`` at 0 and ``end`` at 1.
    """
    if progress >= 1.0:
        return end
    if curve == TransitionCurve.EXPONENTIAL:
        return start * (end / start) ** progress
    if curve == TransitionCurve.SINE:
        eased = (math.sin((progress - 0.5) * math.pi) + 1.0) / 2.0
        return start + (end - start) * eased
    return start + (end - start) * progress


class SweepClock:
    """Tracks one sweep's progress against a monotonic clock.

    Usage::

        sweep = SweepClock(config, time.monotonic)
        frequency, finished = sweep.advance()
    """

    def __init__(self, config: SweepConfig, clock: Clock):
        self.config = config
        self._clock = clock
        self.started_at = clock()

    def restart(self) -> None:
        self.started_at = self._clock()

    def progress(self) -> float:
        elapsed = self._clock() - self.started_at
        return min(max(elapsed / self.config.duration, 0.0), 1.0)

    def advance(self) -> tuple[float, bool]:
        """Return ``(frequency, finished)`` for the current instant.

        A looping sweep wraps back to its start once a traversal completes.
        A one-shot sweep reports ``finished`` with the end frequency.
        """
        c = self.config
        progress = self.progress()
        if progress >= 1.0:
            if not c.loop:
                return c.end_frequency, True
            self.restart()
            progress = 0.0
        return interpolate(c.transition, c.start_frequency, c.end_frequency, progress), False

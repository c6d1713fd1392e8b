"""Playback state and sweep configuration dataclasses."""

from __future__ import annotations

import math
import numbers
from dataclasses import dataclass, replace

from ..exceptions import InvalidParameterError
from ..sound.base import NoiseColor, SoundMode, TransitionCurve, Waveform


def _clamp(value: float, bounds: tuple[float, float]) -> float:
    lo, hi = bounds
    return max(lo, min(hi, value))


@dataclass
class SweepConfig:
    """A frequency sweep ("rhythm modulation") between two bounds.

    ``duration`` is one traversal from start to end, in seconds.
    """
    enabled: bool = True
    start_frequency: float = 200.0
    end_frequency: float = 800.0
    duration: float = 5.0
    transition: TransitionCurve = TransitionCurve.LINEAR
    loop: bool = False

    def validated(
        self,
        frequency_range: tuple[float, float] = (20.0, 20000.0),
        duration_range: tuple[float, float] = (0.1, 60.0),
    ) -> SweepConfig:
        """Return a copy with enums parsed and values clamped into range.

        Raises:
            InvalidParameterError: a frequency or the duration is not a
                finite positive number, or the transition is unknown.
        """
        transition = TransitionCurve.parse(self.transition)
        for name in ("start_frequency", "end_frequency", "duration"):
            value = getattr(self, name)
            if (
                isinstance(value, bool)
                or not isinstance(value, numbers.Real)
                or not math.isfinite(value)
                or value <= 0
            ):
                raise InvalidParameterError(
                    f"Sweep {name} must be a finite positive number, got {value!r}"
                )
        return replace(
            self,
            enabled=bool(self.enabled),
            start_frequency=_clamp(float(self.start_frequency), frequency_range),
            end_frequency=_clamp(float(self.end_frequency), frequency_range),
            duration=_clamp(float(self.duration), duration_range),
            transition=transition,
            loop=bool(self.loop),
        )


@dataclass
class PlaybackState:
    """Everything the engine knows about what is (or would be) sounding.

    ``frequency`` is the tone frequency in tone mode and the live, possibly
    sweep-modulated, frequency in rhythm mode.
    """
    mode: SoundMode = SoundMode.TONE
    is_sounding: bool = False
    frequency: float = 440.0
    waveform: Waveform = Waveform.SINE
    noise_color: NoiseColor = NoiseColor.WHITE
    volume: float = 0.3
    sweep: SweepConfig | None = None

    @property
    def sweep_enabled(self) -> bool:
        return self.sweep is not None and self.sweep.enabled

    def copy(self) -> PlaybackState:
        return replace(self, sweep=replace(self.sweep) if self.sweep else None)

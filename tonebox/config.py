"""ToneBox configuration — dataclass-based config with sensible defaults."""

from __future__ import annotations

from dataclasses import dataclass

from .controls import MAX_DURATION, MAX_FREQUENCY, MIN_DURATION, MIN_FREQUENCY
from .engine.state import SweepConfig
from .sound.base import NoiseColor, SoundMode, TransitionCurve, Waveform


@dataclass
class ToneBoxConfig:
    # Audio device
    sample_rate: int = 44100
    block_size: int = 1024              # ~23ms at 44100 Hz
    channels: int = 1

    # Noise
    noise_buffer_seconds: float = 2.0   # looped

    # Modulation loop
    tick_interval: float = 0.016        # ~60 Hz, smooth enough for sweeps

    # Initial engine state
    initial_frequency: float = 440.0
    initial_waveform: Waveform = Waveform.SINE
    initial_noise_color: NoiseColor = NoiseColor.WHITE
    initial_mode: SoundMode = SoundMode.TONE
    initial_volume: float = 0.3

    # Ranges
    frequency_range: tuple[float, float] = (MIN_FREQUENCY, MAX_FREQUENCY)
    duration_range: tuple[float, float] = (MIN_DURATION, MAX_DURATION)

    # Sweep defaults
    sweep_start: float = 200.0
    sweep_end: float = 800.0
    sweep_duration: float = 5.0
    sweep_transition: TransitionCurve = TransitionCurve.LINEAR
    sweep_loop: bool = False

    def default_sweep(self, enabled: bool = True) -> SweepConfig:
        """Build a SweepConfig from the sweep defaults above."""
        return SweepConfig(
            enabled=enabled,
            start_frequency=self.sweep_start,
            end_frequency=self.sweep_end,
            duration=self.sweep_duration,
            transition=self.sweep_transition,
            loop=self.sweep_loop,
        )

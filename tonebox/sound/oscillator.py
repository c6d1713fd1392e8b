"""OscillatorSource — periodic tone generation for the four waveforms."""

from __future__ import annotations

import numpy as np
from scipy.signal import sawtooth, square

from .base import SoundSource, Waveform

AUDIO_SAMPLE_RATE = 44100


def render_waveform(waveform: Waveform, phases: np.ndarray) -> np.ndarray:
    """Evaluate a unit-amplitude waveform at the given phases (radians)."""
    if waveform == Waveform.SINE:
        return np.sin(phases)
    if waveform == Waveform.SQUARE:
        return square(phases)
    if waveform == Waveform.SAWTOOTH:
        return sawtooth(phases)
    return sawtooth(phases, width=0.5)


class OscillatorSource(SoundSource):
    """Generates a tone at a live-adjustable frequency.

    Uses phase accumulation for glitch-free frequency changes between blocks:
    a new ``frequency`` takes effect at the next block boundary without
    resetting the phase.
    """

    def __init__(
        self,
        waveform: Waveform = Waveform.SINE,
        frequency: float = 440.0,
        sample_rate: int = AUDIO_SAMPLE_RATE,
    ):
        self.waveform = Waveform.parse(waveform)
        self.frequency = frequency
        self.sample_rate = sample_rate
        self._phase = 0.0

    def generate(self, n_frames: int) -> np.ndarray:
        phase_inc = 2.0 * np.pi * self.frequency / self.sample_rate
        phases = self._phase + phase_inc * np.arange(n_frames)
        if n_frames > 0:
            self._phase = float((phases[-1] + phase_inc) % (2.0 * np.pi))
        return render_waveform(self.waveform, phases)

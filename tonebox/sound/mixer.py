"""Mixer — sums connected sound sources through one output gain."""

from __future__ import annotations

import threading

import numpy as np

from .base import SoundSource


class Mixer:
    """Sums connected SoundSources and applies a linear output gain.

    Sources are keyed by an integer id so the caller can disconnect them
    later. The audio callback thread calls :meth:`generate` while control
    code connects and disconnects, so both sides take the same lock.

    Usage::

        mixer = Mixer(gain=0.3)
        mixer.connect(1, OscillatorSource(Waveform.SINE, 440.0))
        audio = mixer.generate(n_frames=1024)
        mixer.disconnect(1)
    """

    def __init__(self, gain: float = 1.0):
        self.gain = gain
        self._sources: dict[int, SoundSource] = {}
        self._lock = threading.Lock()

    def connect(self, source_id: int, source: SoundSource) -> None:
        with self._lock:
            self._sources[source_id] = source

    def disconnect(self, source_id: int) -> SoundSource | None:
        with self._lock:
            return self._sources.pop(source_id, None)

    def get(self, source_id: int) -> SoundSource | None:
        with self._lock:
            return self._sources.get(source_id)

    def clear(self) -> None:
        with self._lock:
            self._sources.clear()

    @property
    def source_count(self) -> int:
        with self._lock:
            return len(self._sources)

    def generate(self, n_frames: int) -> np.ndarray:
        """Generate a mixed audio block."""
        mixed = np.zeros(n_frames, dtype=np.float64)
        with self._lock:
            for source in self._sources.values():
                mixed += source.generate(n_frames)
            gain = self.gain
        return mixed * gain

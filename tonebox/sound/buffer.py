"""BufferSource — plays a fixed sample buffer, optionally looped."""

from __future__ import annotations

import numpy as np

from .base import SoundSource


class BufferSource(SoundSource):
    """Streams ``samples`` block by block.

    A looped source wraps seamlessly across block boundaries; a one-shot
    source pads with silence once exhausted.
    """

    def __init__(self, samples: np.ndarray, sample_rate: int, loop: bool = False):
        self.samples = np.asarray(samples, dtype=np.float64)
        self.sample_rate = sample_rate
        self.loop = loop
        self._pos = 0

    @property
    def finished(self) -> bool:
        return not self.loop and self._pos >= len(self.samples)

    def generate(self, n_frames: int) -> np.ndarray:
        out = np.zeros(n_frames, dtype=np.float64)
        length = len(self.samples)
        if length == 0:
            return out

        written = 0
        while written < n_frames:
            if self._pos >= length:
                if not self.loop:
                    break
                self._pos = 0
            n = min(n_frames - written, length - self._pos)
            out[written:written + n] = self.samples[self._pos:self._pos + n]
            written += n
            self._pos += n
        return out

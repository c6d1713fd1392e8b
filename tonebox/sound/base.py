"""Sound enums and the SoundSource ABC."""

from __future__ import annotations

from abc import ABC, abstractmethod
from enum import Enum

import numpy as np

from ..exceptions import InvalidParameterError


class _ParsableEnum(str, Enum):
    """String enum that accepts either a member or its value."""

    @classmethod
    def parse(cls, value):
        try:
            return cls(value)
        except ValueError:
            names = ", ".join(m.value for m in cls)
            raise InvalidParameterError(
                f"Unknown {cls.__name__} {value!r} (expected one of: {names})"
            ) from None


class Waveform(_ParsableEnum):
    SINE = "sine"
    SQUARE = "square"
    SAWTOOTH = "sawtooth"
    TRIANGLE = "triangle"


class NoiseColor(_ParsableEnum):
    WHITE = "white"
    PINK = "pink"
    BROWN = "brown"
    BLUE = "blue"
    VIOLET = "violet"
    GREY = "grey"


class SoundMode(_ParsableEnum):
    TONE = "tone"
    NOISE = "noise"
    RHYTHM = "rhythm"


class TransitionCurve(_ParsableEnum):
    LINEAR = "linear"
    EXPONENTIAL = "exponential"
    SINE = "sine"


class SoundSource(ABC):
    """Generates audio samples block by block."""

    @abstractmethod
    def generate(self, n_frames: int) -> np.ndarray:
        """Generate ``n_frames`` of mono audio as float64."""
        ...

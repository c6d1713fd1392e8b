"""NoiseSynthesizer — colored-noise buffers built from uniform white noise.

Every colour consumes one uniform sample in [-1, 1] per output sample. The
recursive colours are first-order IIR banks, so each bank member is computed
over the whole buffer with ``lfilter``; filter state starts at zero for
every buffer.
"""

from __future__ import annotations

import operator

import numpy as np
from scipy.signal import lfilter

from ..exceptions import InvalidParameterError
from .base import NoiseColor

AUDIO_SAMPLE_RATE = 44100

# Paul Kellett's refined 1/f approximation: (retain, gain) per pole
PINK_BANK = (
    (0.99886, 0.0555179),
    (0.99332, 0.0750759),
    (0.96900, 0.1538520),
    (0.86650, 0.3104856),
    (0.55000, 0.5329522),
    (-0.7616, -0.0168980),
)
PINK_DIRECT = 0.5362
PINK_CARRY = 0.115926
PINK_SCALE = 0.11

BROWN_STEP = 0.02
BROWN_LEAK = 1.02
BROWN_GAIN = 3.5

# Mid-frequency weighted bank, loosely A-weighting inspired
GREY_BANK = (
    (0.99, 0.121),
    (0.96, 0.234),
    (0.92, 0.345),
    (0.88, 0.289),
)
GREY_SCALE = 0.25


def _one_pole(white: np.ndarray, retain: float, gain: float) -> np.ndarray:
    """y[n] = retain * y[n-1] + gain * x[n], starting from y = 0."""
    return lfilter([gain], [1.0, -retain], white)


def white_noise(white: np.ndarray) -> np.ndarray:
    return white.copy()


def pink_noise(white: np.ndarray) -> np.ndarray:
    out = white * PINK_DIRECT
    for retain, gain in PINK_BANK:
        out += _one_pole(white, retain, gain)
    # b6 lags one sample behind the input
    carry = np.zeros_like(white)
    carry[1:] = white[:-1] * PINK_CARRY
    return (out + carry) * PINK_SCALE


def brown_noise(white: np.ndarray) -> np.ndarray:
    # The integrator feeds back its un-amplified output
    walk = lfilter([BROWN_STEP / BROWN_LEAK], [1.0, -1.0 / BROWN_LEAK], white)
    return walk * BROWN_GAIN


def blue_noise(white: np.ndarray) -> np.ndarray:
    return lfilter([1.0, -1.0], [1.0], white)


def violet_noise(white: np.ndarray) -> np.ndarray:
    return lfilter([0.25, -0.5, 0.25], [1.0], white)


def grey_noise(white: np.ndarray) -> np.ndarray:
    out = np.zeros_like(white)
    for retain, gain in GREY_BANK:
        out += _one_pole(white, retain, gain)
    return out * GREY_SCALE


_GENERATORS = {
    NoiseColor.WHITE: white_noise,
    NoiseColor.PINK: pink_noise,
    NoiseColor.BROWN: brown_noise,
    NoiseColor.BLUE: blue_noise,
    NoiseColor.VIOLET: violet_noise,
    NoiseColor.GREY: grey_noise,
}


def generate_noise(
    color: NoiseColor | str,
    n_samples: int,
    rng: np.random.Generator | None = None,
) -> np.ndarray:
    """Return ``n_samples`` of ``color`` noise as float64.

    Samples are nominally in [-1, 1] but are not clipped; brown and pink can
    overshoot on unlucky draws.

    Raises:
        InvalidParameterError: unknown colour, or a sample count that is not
            a non-negative integer.
    """
    color = NoiseColor.parse(color)
    try:
        n = operator.index(n_samples)
    except TypeError:
        raise InvalidParameterError(
            f"Sample count must be an integer, got {n_samples!r}"
        ) from None
    if n < 0:
        raise InvalidParameterError(f"Sample count must be >= 0, got {n}")
    if n == 0:
        return np.zeros(0, dtype=np.float64)

    rng = rng if rng is not None else np.random.default_rng()
    white = rng.uniform(-1.0, 1.0, n)
    return _GENERATORS[color](white)


class NoiseSynthesizer:
    """Builds noise buffers of a given duration at a fixed sample rate.

    Usage::

        synth = NoiseSynthesizer(sample_rate=44100)
        samples = synth.create_buffer(NoiseColor.PINK, duration=2.0)
    """

    def __init__(
        self,
        sample_rate: int = AUDIO_SAMPLE_RATE,
        rng: np.random.Generator | None = None,
    ):
        self.sample_rate = sample_rate
        self._rng = rng if rng is not None else np.random.default_rng()

    def buffer_length(self, duration: float) -> int:
        return max(0, int(round(self.sample_rate * duration)))

    def create_buffer(
        self, color: NoiseColor | str, duration: float = 2.0
    ) -> np.ndarray:
        """Synthesize ``duration`` seconds of ``color`` noise."""
        return generate_noise(color, self.buffer_length(duration), self._rng)

"""Unit tests for colored-noise synthesis."""

import numpy as np
import pytest

from tonebox.exceptions import InvalidParameterError
from tonebox.sound.base import NoiseColor
from tonebox.sound.noise import NoiseSynthesizer, generate_noise

SAMPLE_RATE = 44100


def _band_power(samples: np.ndarray, low: float, high: float) -> float:
    """Mean periodogram power between ``low`` and ``high`` Hz."""
    spectrum = np.abs(np.fft.rfft(samples)) ** 2
    freqs = np.fft.rfftfreq(len(samples), d=1.0 / SAMPLE_RATE)
    band = (freqs >= low) & (freqs < high)
    return float(np.mean(spectrum[band]))


def _reference_pink(white: np.ndarray) -> np.ndarray:
    """Sample-by-sample Kellett filter, for comparison with the vectorized one."""
    b0 = b1 = b2 = b3 = b4 = b5 = b6 = 0.0
    out = np.zeros_like(white)
    for i, w in enumerate(white):
        b0 = 0.99886 * b0 + w * 0.0555179
        b1 = 0.99332 * b1 + w * 0.0750759
        b2 = 0.96900 * b2 + w * 0.1538520
        b3 = 0.86650 * b3 + w * 0.3104856
        b4 = 0.55000 * b4 + w * 0.5329522
        b5 = -0.7616 * b5 - w * 0.0168980
        out[i] = (b0 + b1 + b2 + b3 + b4 + b5 + b6 + w * 0.5362) * 0.11
        b6 = w * 0.115926
    return out


def _reference_brown(white: np.ndarray) -> np.ndarray:
    last = 0.0
    out = np.zeros_like(white)
    for i, w in enumerate(white):
        last = (last + 0.02 * w) / 1.02
        out[i] = last * 3.5
    return out


def _reference_grey(white: np.ndarray) -> np.ndarray:
    b0 = b1 = b2 = b3 = 0.0
    out = np.zeros_like(white)
    for i, w in enumerate(white):
        b0 = 0.99 * b0 + w * 0.121
        b1 = 0.96 * b1 + w * 0.234
        b2 = 0.92 * b2 + w * 0.345
        b3 = 0.88 * b3 + w * 0.289
        out[i] = (b0 + b1 + b2 + b3) * 0.25
    return out


class TestBufferLength:
    @pytest.mark.parametrize("color", list(NoiseColor))
    def test_exact_length(self, color):
        for n in (1, 2, 3, 1000, 4410):
            assert len(generate_noise(color, n)) == n

    @pytest.mark.parametrize("color", list(NoiseColor))
    def test_zero_samples_is_empty(self, color):
        samples = generate_noise(color, 0)
        assert samples.shape == (0,)

    def test_accepts_color_names(self):
        assert len(generate_noise("violet", 16)) == 16

    def test_negative_count_rejected(self):
        with pytest.raises(InvalidParameterError):
            generate_noise(NoiseColor.WHITE, -1)

    def test_fractional_count_rejected(self):
        with pytest.raises(InvalidParameterError):
            generate_noise(NoiseColor.WHITE, 10.5)

    def test_unknown_color_rejected(self):
        with pytest.raises(InvalidParameterError):
            generate_noise("purple", 10)

    def test_synthesizer_duration(self):
        synth = NoiseSynthesizer(sample_rate=SAMPLE_RATE)
        assert len(synth.create_buffer(NoiseColor.PINK, duration=2.0)) == 2 * SAMPLE_RATE


class TestWhiteNoise:
    def test_uniform_statistics(self):
        samples = generate_noise(NoiseColor.WHITE, 20000, np.random.default_rng(1))
        assert np.all(samples >= -1.0)
        assert np.all(samples <= 1.0)
        assert abs(np.mean(samples)) < 0.02
        # Uniform on [-1, 1] has variance 1/3
        assert abs(np.var(samples) - 1.0 / 3.0) < 0.02

    def test_fresh_draws_per_call(self):
        synth = NoiseSynthesizer(rng=np.random.default_rng(3))
        a = synth.create_buffer(NoiseColor.WHITE, duration=0.01)
        b = synth.create_buffer(NoiseColor.WHITE, duration=0.01)
        assert not np.array_equal(a, b)


class TestFilters:
    """The vectorized filters must match the per-sample recurrences."""

    N = 5000

    def _white(self, seed):
        return np.random.default_rng(seed).uniform(-1.0, 1.0, self.N)

    def test_pink_matches_recurrence(self):
        out = generate_noise(NoiseColor.PINK, self.N, np.random.default_rng(11))
        np.testing.assert_allclose(out, _reference_pink(self._white(11)), atol=1e-9)

    def test_brown_matches_recurrence(self):
        out = generate_noise(NoiseColor.BROWN, self.N, np.random.default_rng(12))
        np.testing.assert_allclose(out, _reference_brown(self._white(12)), atol=1e-9)

    def test_grey_matches_recurrence(self):
        out = generate_noise(NoiseColor.GREY, self.N, np.random.default_rng(13))
        np.testing.assert_allclose(out, _reference_grey(self._white(13)), atol=1e-9)

    def test_blue_is_first_difference(self):
        white = self._white(14)
        out = generate_noise(NoiseColor.BLUE, self.N, np.random.default_rng(14))
        assert out[0] == pytest.approx(white[0])
        np.testing.assert_allclose(out[1:], np.diff(white), atol=1e-12)

    def test_violet_is_scaled_second_difference(self):
        white = self._white(15)
        out = generate_noise(NoiseColor.VIOLET, self.N, np.random.default_rng(15))
        assert out[0] == pytest.approx(white[0] / 4)
        assert out[1] == pytest.approx((white[1] - 2 * white[0]) / 4)
        np.testing.assert_allclose(out[2:], np.diff(white, n=2) / 4, atol=1e-12)

    def test_filter_state_resets_per_buffer(self):
        synth = NoiseSynthesizer(rng=np.random.default_rng(16))
        synth.create_buffer(NoiseColor.BROWN, duration=0.5)
        second = synth.create_buffer(NoiseColor.BROWN, duration=0.01)
        # A fresh integrator starts from zero: the first step is tiny
        assert abs(second[0]) <= 3.5 * 0.02 / 1.02 + 1e-12


class TestSpectralSlope:
    def test_low_band_energy_ordering(self):
        n = 4 * SAMPLE_RATE
        power = {
            color: _band_power(
                generate_noise(color, n, np.random.default_rng(21)), 50.0, 150.0
            )
            for color in (
                NoiseColor.BROWN,
                NoiseColor.PINK,
                NoiseColor.WHITE,
                NoiseColor.BLUE,
                NoiseColor.VIOLET,
            )
        }
        assert power[NoiseColor.BROWN] > power[NoiseColor.PINK]
        assert power[NoiseColor.PINK] > power[NoiseColor.WHITE]
        assert power[NoiseColor.WHITE] > power[NoiseColor.BLUE]
        assert power[NoiseColor.BLUE] > power[NoiseColor.VIOLET]

    def test_violet_emphasizes_high_frequencies(self):
        samples = generate_noise(NoiseColor.VIOLET, SAMPLE_RATE, np.random.default_rng(22))
        assert _band_power(samples, 15000.0, 20000.0) > _band_power(samples, 100.0, 1000.0)

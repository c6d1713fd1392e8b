"""Unit tests for audio block generation."""

import numpy as np
import pytest

from tonebox.sound.base import Waveform
from tonebox.sound.buffer import BufferSource
from tonebox.sound.mixer import Mixer
from tonebox.sound.oscillator import OscillatorSource


class TestOscillatorSource:
    def test_generates_correct_length(self):
        osc = OscillatorSource(Waveform.SINE, 440.0, sample_rate=44100)
        assert len(osc.generate(1024)) == 1024

    def test_zero_frames(self):
        osc = OscillatorSource(Waveform.SINE, 440.0)
        assert len(osc.generate(0)) == 0

    def test_all_waveforms_bounded(self):
        for waveform in Waveform:
            osc = OscillatorSource(waveform, 440.0)
            audio = osc.generate(44100)
            assert np.max(np.abs(audio)) <= 1.0 + 1e-9
            assert np.max(audio) > 0.9

    def test_square_is_two_level(self):
        osc = OscillatorSource(Waveform.SQUARE, 100.0)
        audio = osc.generate(4410)
        assert set(np.unique(audio)) <= {-1.0, 1.0}

    def test_sine_frequency(self):
        osc = OscillatorSource(Waveform.SINE, 1000.0, sample_rate=44100)
        audio = osc.generate(44100)
        peak = np.argmax(np.abs(np.fft.rfft(audio)))
        assert peak == 1000  # 1 Hz bins over one second

    def test_phase_continuity(self):
        """Consecutive blocks should not have discontinuities."""
        osc = OscillatorSource(Waveform.SINE, 440.0, sample_rate=44100)
        block1 = osc.generate(1000)
        block2 = osc.generate(1000)
        diff = abs(block2[0] - block1[-1])
        max_step = 2 * np.pi * 440 / 44100  # max derivative * dt
        assert diff < max_step + 0.01

    def test_live_frequency_change_keeps_phase(self):
        osc = OscillatorSource(Waveform.SINE, 440.0, sample_rate=44100)
        block1 = osc.generate(1000)
        osc.frequency = 880.0
        block2 = osc.generate(1000)
        max_step = 2 * np.pi * 880 / 44100
        assert abs(block2[0] - block1[-1]) < max_step + 0.01

    def test_accepts_waveform_name(self):
        assert OscillatorSource("triangle").waveform is Waveform.TRIANGLE


class TestBufferSource:
    def test_loop_wraps(self):
        source = BufferSource(np.array([1.0, 2.0, 3.0]), 44100, loop=True)
        np.testing.assert_array_equal(source.generate(7), [1, 2, 3, 1, 2, 3, 1])
        np.testing.assert_array_equal(source.generate(2), [2, 3])
        assert not source.finished

    def test_one_shot_pads_with_silence(self):
        source = BufferSource(np.array([1.0, 2.0]), 44100)
        np.testing.assert_array_equal(source.generate(4), [1, 2, 0, 0])
        assert source.finished
        np.testing.assert_array_equal(source.generate(2), [0, 0])

    def test_empty_buffer(self):
        source = BufferSource(np.zeros(0), 44100, loop=True)
        np.testing.assert_array_equal(source.generate(3), [0, 0, 0])


class TestMixer:
    def test_empty_mixer(self):
        mixer = Mixer()
        audio = mixer.generate(1024)
        assert np.all(audio == 0.0)

    def test_gain_is_linear(self):
        mixer = Mixer(gain=0.5)
        mixer.connect(1, BufferSource(np.array([0.8, -0.4]), 44100, loop=True))
        np.testing.assert_allclose(mixer.generate(2), [0.4, -0.2])

    def test_sums_sources(self):
        mixer = Mixer(gain=1.0)
        mixer.connect(1, BufferSource(np.ones(4), 44100, loop=True))
        mixer.connect(2, BufferSource(np.ones(4) * 2, 44100, loop=True))
        np.testing.assert_allclose(mixer.generate(4), [3, 3, 3, 3])
        assert mixer.source_count == 2

    def test_disconnect(self):
        mixer = Mixer(gain=1.0)
        source = BufferSource(np.ones(4), 44100, loop=True)
        mixer.connect(1, source)
        assert mixer.disconnect(1) is source
        assert mixer.disconnect(1) is None
        assert np.all(mixer.generate(4) == 0.0)

    def test_no_soft_clipping(self):
        mixer = Mixer(gain=1.0)
        mixer.connect(1, BufferSource(np.array([1.5]), 44100, loop=True))
        assert mixer.generate(1)[0] == pytest.approx(1.5)

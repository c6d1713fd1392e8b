"""DeviceBackend — real output through sounddevice."""

from __future__ import annotations

import itertools
import logging
import threading

import numpy as np

from ..sound.base import SoundSource, Waveform
from ..sound.buffer import BufferSource
from ..sound.mixer import Mixer
from ..sound.oscillator import OscillatorSource
from ..sound.output import AudioOutput
from .base import AudioBackend, GainHandle, SourceHandle, TickCallback, TickHandle

logger = logging.getLogger(__name__)


class DeviceBackend(AudioBackend):
    """Drives the default output device via a Mixer and an AudioOutput.

    Ticks are ``threading.Timer`` instances, so callbacks run on a timer
    thread; the engine serializes them against host calls.

    Usage::

        backend = DeviceBackend(sample_rate=44100, block_size=1024)
        engine = PlaybackEngine(backend)
    """

    def __init__(
        self,
        sample_rate: int = 44100,
        block_size: int = 1024,
        channels: int = 1,
        tick_interval: float = 0.016,
    ):
        self.sample_rate = sample_rate
        self.tick_interval = tick_interval
        self.mixer = Mixer(gain=0.0)
        self.output = AudioOutput(
            self.mixer,
            sample_rate=sample_rate,
            block_size=block_size,
            channels=channels,
        )
        self._sources: dict[int, SoundSource] = {}
        self._timers: dict[int, threading.Timer] = {}
        self._timers_lock = threading.Lock()
        self._ids = itertools.count(1)

    def open_output(self, level: float) -> GainHandle:
        self.mixer.gain = level
        self.output.start()
        return GainHandle(next(self._ids))

    def create_tone_source(self, waveform: Waveform, frequency: float) -> SourceHandle:
        handle = SourceHandle(next(self._ids), "tone")
        self._sources[handle.id] = OscillatorSource(waveform, frequency, self.sample_rate)
        return handle

    def create_buffer_source(
        self, samples: np.ndarray, sample_rate: int, loop: bool
    ) -> SourceHandle:
        if sample_rate != self.sample_rate:
            logger.warning(
                "Buffer rate %d Hz differs from device rate %d Hz; playing unresampled",
                sample_rate, self.sample_rate,
            )
        handle = SourceHandle(next(self._ids), "buffer")
        self._sources[handle.id] = BufferSource(samples, sample_rate, loop=loop)
        return handle

    def connect(self, handle: SourceHandle, gain: GainHandle) -> None:
        self.mixer.connect(handle.id, self._sources[handle.id])

    def disconnect(self, handle: SourceHandle) -> None:
        self.mixer.disconnect(handle.id)
        self._sources.pop(handle.id, None)

    def set_live_frequency(self, handle: SourceHandle, hz: float) -> None:
        source = self._sources.get(handle.id)
        if isinstance(source, OscillatorSource):
            source.frequency = hz

    def set_live_gain(self, gain: GainHandle, level: float) -> None:
        self.mixer.gain = level

    def schedule_next_tick(self, callback: TickCallback) -> TickHandle:
        handle = TickHandle(next(self._ids))

        def fire() -> None:
            with self._timers_lock:
                if self._timers.pop(handle.id, None) is None:
                    return
            callback()

        timer = threading.Timer(self.tick_interval, fire)
        timer.daemon = True
        with self._timers_lock:
            self._timers[handle.id] = timer
        timer.start()
        return handle

    def cancel_tick(self, handle: TickHandle) -> None:
        with self._timers_lock:
            timer = self._timers.pop(handle.id, None)
        if timer is not None:
            timer.cancel()

    def close(self) -> None:
        with self._timers_lock:
            timers = list(self._timers.values())
            self._timers.clear()
        for timer in timers:
            timer.cancel()
        self.output.stop()
        self.mixer.clear()
        self._sources.clear()

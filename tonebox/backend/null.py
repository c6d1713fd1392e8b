"""Null backend (no actual audio output).

Records every call so tests and headless hosts can inspect what would be
sounding. Ticks never fire on their own; call :meth:`run_pending_ticks`.
"""

from __future__ import annotations

import itertools
import logging
from dataclasses import dataclass

import numpy as np

from ..sound.base import Waveform
from .base import AudioBackend, GainHandle, SourceHandle, TickCallback, TickHandle

logger = logging.getLogger(__name__)


@dataclass
class NullSource:
    handle: SourceHandle
    waveform: Waveform | None = None
    frequency: float | None = None
    samples: np.ndarray | None = None
    loop: bool = False


class NullBackend(AudioBackend):
    """Silent backend that keeps a log of connections and parameter changes."""

    def __init__(self, sample_rate: int = 44100):
        self.sample_rate = sample_rate
        self.gain_level: float | None = None
        self.closed = False
        self.sources: dict[int, NullSource] = {}
        self.connected: dict[int, NullSource] = {}
        self.events: list[tuple[str, int]] = []
        self.peak_connected = 0
        self._pending: dict[int, TickCallback] = {}
        self._ids = itertools.count(1)

    def open_output(self, level: float) -> GainHandle:
        self.gain_level = level
        logger.debug("NullBackend output opened")
        return GainHandle(next(self._ids))

    def create_tone_source(self, waveform: Waveform, frequency: float) -> SourceHandle:
        handle = SourceHandle(next(self._ids), "tone")
        self.sources[handle.id] = NullSource(handle, waveform=waveform, frequency=frequency)
        return handle

    def create_buffer_source(
        self, samples: np.ndarray, sample_rate: int, loop: bool
    ) -> SourceHandle:
        handle = SourceHandle(next(self._ids), "buffer")
        self.sources[handle.id] = NullSource(handle, samples=samples, loop=loop)
        return handle

    def connect(self, handle: SourceHandle, gain: GainHandle) -> None:
        self.connected[handle.id] = self.sources[handle.id]
        self.events.append(("connect", handle.id))
        self.peak_connected = max(self.peak_connected, len(self.connected))

    def disconnect(self, handle: SourceHandle) -> None:
        if self.connected.pop(handle.id, None) is not None:
            self.events.append(("disconnect", handle.id))
        self.sources.pop(handle.id, None)

    def set_live_frequency(self, handle: SourceHandle, hz: float) -> None:
        source = self.sources.get(handle.id)
        if source is not None:
            source.frequency = hz

    def set_live_gain(self, gain: GainHandle, level: float) -> None:
        self.gain_level = level

    def schedule_next_tick(self, callback: TickCallback) -> TickHandle:
        handle = TickHandle(next(self._ids))
        self._pending[handle.id] = callback
        return handle

    def cancel_tick(self, handle: TickHandle) -> None:
        self._pending.pop(handle.id, None)

    @property
    def pending_ticks(self) -> int:
        return len(self._pending)

    def run_pending_ticks(self) -> int:
        """Fire the ticks pending right now; returns how many ran.

        Ticks scheduled by those callbacks stay pending for the next call.
        """
        ran = 0
        for tick_id in list(self._pending):
            callback = self._pending.pop(tick_id, None)
            if callback is None:  # cancelled by an earlier callback
                continue
            callback()
            ran += 1
        return ran

    def close(self) -> None:
        self.connected.clear()
        self.sources.clear()
        self._pending.clear()
        self.closed = True
        logger.debug("NullBackend closed")

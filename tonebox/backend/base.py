"""AudioBackend ABC — the narrow interface the playback engine drives."""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Callable
from dataclasses import dataclass

import numpy as np

from ..sound.base import Waveform

TickCallback = Callable[[], None]


@dataclass(frozen=True)
class SourceHandle:
    id: int
    kind: str  # "tone" or "buffer"


@dataclass(frozen=True)
class GainHandle:
    id: int


@dataclass(frozen=True)
class TickHandle:
    id: int


class AudioBackend(ABC):
    """Platform audio primitive: sources, an output gain, and a tick clock.

    Live parameter updates (frequency, gain) must take effect without
    reconnecting anything. ``schedule_next_tick`` runs ``callback`` once,
    roughly one tick interval from now; ``cancel_tick`` guarantees that a
    tick which has not started yet never runs.
    """

    sample_rate: int

    @abstractmethod
    def open_output(self, level: float) -> GainHandle:
        """Open the output device and return its gain stage."""
        ...

    @abstractmethod
    def create_tone_source(self, waveform: Waveform, frequency: float) -> SourceHandle:
        ...

    @abstractmethod
    def create_buffer_source(
        self, samples: np.ndarray, sample_rate: int, loop: bool
    ) -> SourceHandle:
        ...

    @abstractmethod
    def connect(self, handle: SourceHandle, gain: GainHandle) -> None:
        """Start the source sounding through ``gain``."""
        ...

    @abstractmethod
    def disconnect(self, handle: SourceHandle) -> None:
        """Stop the source and release it. Unknown handles are ignored."""
        ...

    @abstractmethod
    def set_live_frequency(self, handle: SourceHandle, hz: float) -> None:
        ...

    @abstractmethod
    def set_live_gain(self, gain: GainHandle, level: float) -> None:
        ...

    @abstractmethod
    def schedule_next_tick(self, callback: TickCallback) -> TickHandle:
        ...

    @abstractmethod
    def cancel_tick(self, handle: TickHandle) -> None:
        ...

    @abstractmethod
    def close(self) -> None:
        """Release the output device. The backend is unusable afterwards."""
        ...

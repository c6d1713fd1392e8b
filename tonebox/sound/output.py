"""AudioOutput — sounddevice OutputStream wrapper."""

from __future__ import annotations

import logging

import numpy as np
import sounddevice as sd

from ..exceptions import DeviceError
from .mixer import Mixer

logger = logging.getLogger(__name__)


class AudioOutput:
    """Wraps a sounddevice OutputStream that pulls blocks from a Mixer.

    The stream callback renders exactly the block the device asks for, so
    live parameter changes on the mixer's sources are heard from the next
    block onwards.

    Usage::

        mixer = Mixer()
        out = AudioOutput(mixer, sample_rate=44100, block_size=1024)
        out.start()
        ...
        out.stop()
    """

    def __init__(
        self,
        mixer: Mixer,
        sample_rate: int = 44100,
        block_size: int = 1024,
        channels: int = 1,
    ):
        self.mixer = mixer
        self.sample_rate = sample_rate
        self.block_size = block_size
        self.channels = channels
        self._stream: sd.OutputStream | None = None

    @property
    def running(self) -> bool:
        return self._stream is not None

    def _callback(
        self,
        outdata: np.ndarray,
        frames: int,
        time_info: object,
        status: sd.CallbackFlags,
    ) -> None:
        if status:
            logger.debug("Output stream status: %s", status)
        block = np.clip(self.mixer.generate(frames), -1.0, 1.0)
        outdata[:] = block[:, np.newaxis]

    def start(self) -> None:
        """Open and start the audio stream."""
        if self._stream is not None:
            return
        try:
            stream = sd.OutputStream(
                samplerate=self.sample_rate,
                blocksize=self.block_size,
                channels=self.channels,
                dtype="float32",
                callback=self._callback,
            )
            stream.start()
        except sd.PortAudioError as e:
            raise DeviceError(f"Could not open audio output: {e}") from e
        self._stream = stream
        logger.debug("Audio output started at %d Hz", self.sample_rate)

    def stop(self) -> None:
        """Stop and close the audio stream."""
        if self._stream is not None:
            self._stream.stop()
            self._stream.close()
            self._stream = None
            logger.debug("Audio output stopped")

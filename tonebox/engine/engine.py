"""PlaybackEngine — owns what is sounding and drives frequency sweeps."""

from __future__ import annotations

import functools
import logging
import math
import numbers
import threading
import time

from ..backend.base import AudioBackend, GainHandle, SourceHandle, TickHandle
from ..config import ToneBoxConfig
from ..exceptions import InvalidParameterError
from ..sound.base import NoiseColor, SoundMode, Waveform
from ..sound.noise import NoiseSynthesizer
from .state import PlaybackState, SweepConfig
from .sweep import Clock, SweepClock

logger = logging.getLogger(__name__)


def _operation(method):
    """Serialize a public operation and turn it into a no-op once disposed."""

    @functools.wraps(method)
    def wrapper(self, *args, **kwargs):
        with self._lock:
            if self._disposed:
                logger.warning("%s() ignored: engine is disposed", method.__name__)
                return None
            return method(self, *args, **kwargs)

    return wrapper


def _check_finite(name: str, value: float) -> float:
    if isinstance(value, bool) or not isinstance(value, numbers.Real) or not math.isfinite(value):
        raise InvalidParameterError(f"{name} must be a finite number, got {value!r}")
    return float(value)


class PlaybackEngine:
    """Plays a tone, a colored noise, or a swept tone through an AudioBackend.

    At most one source is connected at a time; switching signals always
    disconnects the old source before connecting the new one. While a sweep
    runs, the engine re-schedules itself on the backend's tick clock and
    updates the live frequency on every tick.

    Every public operation runs under one re-entrant lock, shared with the
    sweep ticks, so a backend that fires ticks from another thread cannot
    interleave with host calls. Operations on a disposed engine log a
    warning and do nothing.

    Usage::

        engine = PlaybackEngine(DeviceBackend())
        engine.play()
        engine.set_frequency(880.0)
        engine.stop()
        engine.dispose()
    """

    def __init__(
        self,
        backend: AudioBackend,
        config: ToneBoxConfig | None = None,
        *,
        clock: Clock = time.monotonic,
        noise: NoiseSynthesizer | None = None,
    ):
        self.config = config or ToneBoxConfig()
        c = self.config

        self.backend = backend
        self._noise = noise or NoiseSynthesizer(backend.sample_rate)
        self._clock = clock
        self._lock = threading.RLock()

        self._state = PlaybackState(
            mode=SoundMode.parse(c.initial_mode),
            frequency=_check_finite("initial_frequency", c.initial_frequency),
            waveform=Waveform.parse(c.initial_waveform),
            noise_color=NoiseColor.parse(c.initial_noise_color),
            volume=max(0.0, min(1.0, c.initial_volume)),
        )

        self._gain: GainHandle | None = None
        self._source: SourceHandle | None = None
        self._sweep: SweepClock | None = None
        self._tick: TickHandle | None = None
        self._generation = 0
        self._disposed = False

    # -- getters -----------------------------------------------------------

    @property
    def frequency(self) -> float:
        return self._state.frequency

    @property
    def waveform(self) -> Waveform:
        return self._state.waveform

    @property
    def noise_color(self) -> NoiseColor:
        return self._state.noise_color

    @property
    def mode(self) -> SoundMode:
        return self._state.mode

    @property
    def volume(self) -> float:
        return self._state.volume

    @property
    def is_sounding(self) -> bool:
        return self._state.is_sounding

    @property
    def sweep(self) -> SweepConfig | None:
        return self._state.sweep

    @property
    def state(self) -> PlaybackState:
        """A snapshot copy; mutating it does not affect the engine."""
        with self._lock:
            return self._state.copy()

    @property
    def is_sweeping(self) -> bool:
        return self._sweep is not None

    @property
    def sweep_progress(self) -> float:
        """Progress of the current traversal in [0, 1]; 0 when not sweeping."""
        with self._lock:
            return self._sweep.progress() if self._sweep is not None else 0.0

    @property
    def disposed(self) -> bool:
        return self._disposed

    # -- control operations ------------------------------------------------

    @_operation
    def play(self) -> None:
        """Start the signal for the current mode. No-op if already sounding."""
        if self._state.is_sounding:
            return
        self._start_signal(self._state.mode, with_sweep=True)
        logger.debug("play: %s", self._state.mode.value)

    @_operation
    def stop(self) -> None:
        """Disconnect whatever is sounding and halt any sweep. Idempotent."""
        self._stop_signal()

    @_operation
    def set_frequency(self, frequency: float) -> None:
        """Set the tone frequency, live if a tone is connected.

        The host is expected to clamp into the audible range first (see
        ``controls.clamp_frequency``); only non-finite or non-positive
        values are rejected.
        """
        frequency = _check_finite("frequency", frequency)
        if frequency <= 0:
            raise InvalidParameterError(f"frequency must be positive, got {frequency}")
        self._apply_frequency(frequency)

    @_operation
    def set_waveform(self, waveform: Waveform | str) -> None:
        self._state.waveform = Waveform.parse(waveform)
        if self._state.is_sounding and self._state.mode != SoundMode.NOISE:
            self._restart_signal()

    @_operation
    def set_noise_color(self, color: NoiseColor | str) -> None:
        self._state.noise_color = NoiseColor.parse(color)
        if self._state.is_sounding and self._state.mode == SoundMode.NOISE:
            self._restart_signal()

    @_operation
    def set_mode(self, mode: SoundMode | str) -> None:
        """Switch mode, swapping the live signal if sounding.

        Switching live into rhythm mode starts a plain tone at the current
        frequency; the sweep itself starts via ``configure_sweep`` or
        ``start_sweep``.
        """
        mode = SoundMode.parse(mode)
        previous = self._state.mode
        self._state.mode = mode
        if self._state.is_sounding and mode != previous:
            self._stop_signal()
            self._start_signal(mode, with_sweep=False)
            logger.debug("mode %s -> %s while sounding", previous.value, mode.value)

    @_operation
    def set_volume(self, volume: float) -> None:
        """Set output gain, clamped to [0, 1]."""
        volume = max(0.0, min(1.0, _check_finite("volume", volume)))
        self._state.volume = volume
        if self._gain is not None:
            self.backend.set_live_gain(self._gain, volume)

    @_operation
    def configure_sweep(self, config: SweepConfig | None = None) -> None:
        """Replace the sweep configuration.

        With no argument the config's sweep defaults are used (see
        ``ToneBoxConfig.default_sweep``). An enabled sweep restarts from
        zero elapsed time if the engine is sounding in rhythm mode; a
        disabled one halts the sweep and leaves the tone at its last
        frequency.

        Raises:
            InvalidParameterError: see ``SweepConfig.validated``. The previous
                configuration stays in place.
        """
        c = self.config
        if config is None:
            config = c.default_sweep()
        self._state.sweep = config.validated(c.frequency_range, c.duration_range)
        if not self._state.sweep.enabled:
            self._halt_modulation()
        elif self._state.is_sounding and self._state.mode == SoundMode.RHYTHM:
            self._start_modulation()

    @_operation
    def start_sweep(self) -> None:
        """(Re)start the configured sweep from its start frequency."""
        if not self._state.sweep_enabled:
            logger.warning("start_sweep() ignored: no enabled sweep configured")
            return
        if not self._state.is_sounding or self._state.mode != SoundMode.RHYTHM:
            logger.warning("start_sweep() ignored: not sounding in rhythm mode")
            return
        self._start_modulation()

    @_operation
    def stop_sweep(self) -> None:
        """Halt the sweep; the tone keeps sounding at its last frequency."""
        self._halt_modulation()

    def dispose(self) -> None:
        """Stop, then release the output device. Safe to call twice."""
        with self._lock:
            if self._disposed:
                return
            self._stop_signal()
            self.backend.close()
            self._gain = None
            self._disposed = True
            logger.debug("engine disposed")

    def __enter__(self) -> PlaybackEngine:
        return self

    def __exit__(self, *exc) -> None:
        self.dispose()

    # -- signal plumbing ---------------------------------------------------

    def _ensure_output(self) -> GainHandle:
        if self._gain is None:
            self._gain = self.backend.open_output(self._state.volume)
        return self._gain

    def _start_signal(self, mode: SoundMode, with_sweep: bool) -> None:
        gain = self._ensure_output()
        s = self._state
        sweeping = with_sweep and mode == SoundMode.RHYTHM and s.sweep_enabled
        if mode == SoundMode.NOISE:
            samples = self._noise.create_buffer(s.noise_color, self.config.noise_buffer_seconds)
            source = self.backend.create_buffer_source(samples, self._noise.sample_rate, loop=True)
        else:
            if sweeping:
                s.frequency = s.sweep.start_frequency
            source = self.backend.create_tone_source(s.waveform, s.frequency)
        self.backend.connect(source, gain)
        self._source = source
        s.is_sounding = True
        if sweeping:
            self._start_modulation()

    def _stop_signal(self) -> None:
        self._halt_modulation()
        if self._source is not None:
            self.backend.disconnect(self._source)
            self._source = None
            logger.debug("stop")
        self._state.is_sounding = False

    def _restart_signal(self) -> None:
        mode = self._state.mode
        self._stop_signal()
        self._start_signal(mode, with_sweep=True)

    def _apply_frequency(self, frequency: float) -> None:
        self._state.frequency = frequency
        if self._source is not None and self._source.kind == "tone":
            self.backend.set_live_frequency(self._source, frequency)

    # -- modulation loop ---------------------------------------------------

    def _start_modulation(self) -> None:
        self._halt_modulation()
        self._sweep = SweepClock(self._state.sweep, self._clock)
        logger.debug("sweep started")
        self._modulate()

    def _halt_modulation(self) -> None:
        # Bumping the generation invalidates any tick already in flight.
        self._generation += 1
        if self._tick is not None:
            self.backend.cancel_tick(self._tick)
            self._tick = None
        self._sweep = None

    def _schedule_tick(self) -> None:
        generation = self._generation
        self._tick = self.backend.schedule_next_tick(lambda: self._on_tick(generation))

    def _on_tick(self, generation: int) -> None:
        with self._lock:
            if generation != self._generation or self._disposed:
                return
            self._tick = None
            self._modulate()

    def _modulate(self) -> None:
        frequency, finished = self._sweep.advance()
        self._apply_frequency(frequency)
        if finished:
            logger.debug("sweep finished at %.2f Hz", frequency)
            self._halt_modulation()
        else:
            self._schedule_tick()

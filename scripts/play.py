#!/usr/bin/env python3
"""Play a tone, a colored noise, or a frequency sweep on the default device."""

import argparse
import logging
import time

from tonebox.backend.device import DeviceBackend
from tonebox.config import ToneBoxConfig
from tonebox.controls import PRESETS, Preset, clamp_frequency, preset_by_name
from tonebox.engine.engine import PlaybackEngine
from tonebox.sound.base import NoiseColor, SoundMode, TransitionCurve, Waveform


def preset_arg(name: str) -> Preset:
    try:
        return preset_by_name(name)
    except KeyError:
        names = ", ".join(repr(p.name) for p in PRESETS)
        raise argparse.ArgumentTypeError(f"unknown preset {name!r} (choose from {names})")


def parse_args(defaults: ToneBoxConfig) -> argparse.Namespace:
    p = argparse.ArgumentParser(description=__doc__)
    p.add_argument("mode", choices=[m.value for m in SoundMode], nargs="?",
                   default=defaults.initial_mode.value)
    p.add_argument("-f", "--frequency", type=float, default=defaults.initial_frequency)
    p.add_argument("-p", "--preset", type=preset_arg, help="preset name, e.g. 'A4' or '1 kHz'")
    p.add_argument("-w", "--waveform", choices=[w.value for w in Waveform],
                   default=defaults.initial_waveform.value)
    p.add_argument("-n", "--noise", choices=[c.value for c in NoiseColor],
                   default=defaults.initial_noise_color.value)
    p.add_argument("-v", "--volume", type=float, default=defaults.initial_volume)
    p.add_argument("-d", "--duration", type=float, default=5.0, help="seconds to play")
    p.add_argument("--sweep", nargs=2, type=float, metavar=("START", "END"),
                   default=(defaults.sweep_start, defaults.sweep_end))
    p.add_argument("--sweep-duration", type=float, default=defaults.sweep_duration)
    p.add_argument("--transition", choices=[t.value for t in TransitionCurve],
                   default=defaults.sweep_transition.value)
    p.add_argument("--loop", action="store_true", default=defaults.sweep_loop)
    p.add_argument("--verbose", action="store_true")
    return p.parse_args()


def main():
    args = parse_args(ToneBoxConfig())
    if args.verbose:
        logging.basicConfig(level=logging.DEBUG)

    frequency = args.frequency
    if args.preset:
        preset = args.preset
        frequency = preset.frequency
        print(f"Preset {preset.name}: {preset.frequency:g} Hz ({preset.description})")

    start, end = args.sweep
    config = ToneBoxConfig(
        initial_frequency=clamp_frequency(frequency),
        initial_waveform=Waveform(args.waveform),
        initial_noise_color=NoiseColor(args.noise),
        initial_mode=SoundMode(args.mode),
        initial_volume=args.volume,
        sweep_start=start,
        sweep_end=end,
        sweep_duration=args.sweep_duration,
        sweep_transition=TransitionCurve(args.transition),
        sweep_loop=args.loop,
    )
    backend = DeviceBackend(
        sample_rate=config.sample_rate,
        block_size=config.block_size,
        channels=config.channels,
        tick_interval=config.tick_interval,
    )

    with PlaybackEngine(backend, config) as engine:
        if engine.mode == SoundMode.RHYTHM:
            engine.configure_sweep()

        engine.play()
        print(f"Playing {engine.mode.value} for {args.duration:g}s. Press Ctrl+C to stop.")
        try:
            deadline = time.monotonic() + args.duration
            while time.monotonic() < deadline:
                if engine.mode != SoundMode.NOISE:
                    print(f"  {engine.frequency:9.2f} Hz", end="\r")
                time.sleep(0.1)
        except KeyboardInterrupt:
            pass
        engine.stop()

    print("\nStopped.")


if __name__ == "__main__":
    main()

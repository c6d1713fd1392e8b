"""Host-side helpers: range clamping, octave jumps, nudges and presets.

The engine expects pre-clamped frequencies; these are the helpers a UI or
CLI uses to get them.
"""

from __future__ import annotations

from dataclasses import dataclass

MIN_FREQUENCY = 20.0
MAX_FREQUENCY = 20000.0
MIN_DURATION = 0.1
MAX_DURATION = 60.0

# Keyboard modifier -> frequency step in Hz
NUDGE_STEPS = {
    "none": 10.0,
    "shift": 1.0,
    "ctrl": 0.01,
}


def clamp_frequency(frequency: float) -> float:
    return max(MIN_FREQUENCY, min(MAX_FREQUENCY, frequency))


def clamp_volume(volume: float) -> float:
    return max(0.0, min(1.0, volume))


def clamp_duration(duration: float) -> float:
    return max(MIN_DURATION, min(MAX_DURATION, duration))


def octave_up(frequency: float) -> float:
    return clamp_frequency(frequency * 2.0)


def octave_down(frequency: float) -> float:
    return clamp_frequency(frequency / 2.0)


def nudge(frequency: float, direction: int, modifier: str = "none") -> float:
    """Step ``frequency`` up (``direction > 0``) or down by the modifier's step."""
    try:
        step = NUDGE_STEPS[modifier]
    except KeyError:
        raise ValueError(f"Unknown modifier {modifier!r}") from None
    sign = 1.0 if direction > 0 else -1.0
    return clamp_frequency(frequency + sign * step)


@dataclass(frozen=True)
class Preset:
    frequency: float
    name: str
    description: str
    category: str  # "musical", "healing" or "scientific"


PRESETS: tuple[Preset, ...] = (
    Preset(440.0, "A4", "Standard tuning pitch", "musical"),
    Preset(432.0, "Natural A", "Natural tuning", "healing"),
    Preset(528.0, "Love Freq", "Transformation & miracles", "healing"),
    Preset(174.0, "Foundation", "Pain relief", "healing"),
    Preset(639.0, "Connection", "Relationships", "healing"),
    Preset(852.0, "Intuition", "Spiritual awareness", "healing"),
    Preset(1000.0, "1 kHz", "Reference tone", "scientific"),
    Preset(10000.0, "10 kHz", "High frequency test", "scientific"),
)


def find_preset(frequency: float, tolerance: float = 0.1) -> Preset | None:
    """Return the preset within ``tolerance`` Hz of ``frequency``, if any."""
    for preset in PRESETS:
        if abs(frequency - preset.frequency) < tolerance:
            return preset
    return None


def preset_by_name(name: str) -> Preset:
    for preset in PRESETS:
        if preset.name.lower() == name.lower():
            return preset
    raise KeyError(name)

"""Plain-language descriptions of what each mastering knob setting does."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable

from .utils.config import RANGES, AudioConfig


@dataclass(frozen=True, slots=True)
class KnobImpact:
    field: str
    label: str
    value: float
    description: str

    def as_dict(self) -> dict[str, str | float]:
        return {"field": self.field, "label": self.label, "value": self.value, "description": self.description}


def frequency_impact(highpass_hz: float) -> str:
    if highpass_hz <= 60:
        return "Removes rumble only, keeps all voice warmth"
    if highpass_hz <= 80:
        return "RECOMMENDED: Balanced warmth & clarity"
    if highpass_hz <= 120:
        return "Cleaner sound, slight warmth reduction"
    return "Very clean but may thin male voices"


def clarity_impact(lowpass_hz: float) -> str:
    if lowpass_hz < 3000:
        return "Muffled but warm (AM Radio style)"
    if lowpass_hz < 5000:
        return "RECOMMENDED: Natural clarity"
    if lowpass_hz < 8000:
        return "Bright and crisp, enhances consonants"
    return "Very bright, open air"


def deesser_impact(amount: float) -> str:
    if amount == 0:
        return "OFF: Natural but may have harsh S sounds"
    if amount <= 0.3:
        return "LIGHT: Subtle reduction, very natural"
    if amount <= 0.6:
        return "RECOMMENDED: Noticeable but pleasant"
    return "HEAVY: Strong reduction, may cause lisp effect"


def noise_impact(amount: float) -> str:
    if amount == 0:
        return "OFF: All natural room tone preserved"
    if amount <= 0.3:
        return "LIGHT: Reduces obvious hiss only"
    if amount <= 0.6:
        return "RECOMMENDED: Clean but natural"
    return "AGGRESSIVE: Very clean but may sound processed"


def compression_impact(amount: float) -> str:
    if amount <= 0.2:
        return "NATURAL: Preserves performance dynamics"
    if amount <= 0.5:
        return "AUDIOBOOK: Gentle evening out"
    if amount <= 0.7:
        return "PODCAST: Consistent volume, punchy"
    return "BROADCAST: Heavy compression, radio-style"


def loudness_impact(target_lufs: float) -> str:
    if target_lufs <= -23:
        return "ACX / Audible Standard"
    if target_lufs <= -18:
        return "RECOMMENDED: Sweet spot for narration"
    if target_lufs <= -16:
        return "Podcast Standard"
    return "Music Streaming / Loud"


# Knobs with a classifier, in display order.
_CLASSIFIERS: tuple[tuple[str, Callable[[float], str]], ...] = (
    ("highpass_freq", frequency_impact),
    ("lowpass_freq", clarity_impact),
    ("deesser_amount", deesser_impact),
    ("noise_reduction", noise_impact),
    ("compression_amount", compression_impact),
    ("loudnorm_target", loudness_impact),
)


def describe_config(config: AudioConfig) -> tuple[KnobImpact, ...]:
    """One description per classified knob of ``config``."""

    impacts = []
    for field, classify in _CLASSIFIERS:
        value = getattr(config, field)
        impacts.append(
            KnobImpact(field=field, label=RANGES[field].label, value=value, description=classify(value))
        )
    return tuple(impacts)

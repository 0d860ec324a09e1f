"""Named preset bundles layered onto the active configuration."""

from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Mapping

from .utils.config import AudioConfig, with_overrides


@dataclass(frozen=True, slots=True)
class AudioPreset:
    """A partial override bundle; fields it does not name are left untouched."""

    preset_id: str
    name: str
    description: str
    overrides: Mapping[str, Any] = field(default_factory=dict)


PRESETS: tuple[AudioPreset, ...] = (
    AudioPreset(
        preset_id="acx",
        name="ACX Standard",
        description="Meets Audible requirements (-19 LUFS, -3dB TP)",
        overrides=MappingProxyType(
            {"loudnorm_target": -20.0, "loudnorm_tp": -3.0, "highpass_freq": 80.0, "compression_amount": 0.3}
        ),
    ),
    AudioPreset(
        preset_id="warm",
        name="Warm Narrator",
        description="Enhanced low-mids, gentle processing",
        overrides=MappingProxyType(
            {"highpass_freq": 60.0, "lowpass_freq": 8000.0, "compression_amount": 0.2, "loudnorm_target": -20.0}
        ),
    ),
    AudioPreset(
        preset_id="clear",
        name="Crystal Clear",
        description="Bright and articulate, good for non-fiction",
        overrides=MappingProxyType(
            {"highpass_freq": 90.0, "lowpass_freq": 14000.0, "deesser_amount": 0.7, "compression_amount": 0.4}
        ),
    ),
    AudioPreset(
        preset_id="home",
        name="Home Studio Fix",
        description="Heavier noise reduction for untreated rooms",
        overrides=MappingProxyType({"noise_reduction": 0.6, "highpass_freq": 100.0, "compression_amount": 0.5}),
    ),
    AudioPreset(
        preset_id="radio",
        name="Radio Ready",
        description="Compressed, punchy, loud",
        overrides=MappingProxyType(
            {"loudnorm_target": -16.0, "loudnorm_tp": -1.0, "compression_amount": 0.8, "lowpass_freq": 10000.0}
        ),
    ),
)

_PRESETS_BY_ID: dict[str, AudioPreset] = {preset.preset_id: preset for preset in PRESETS}


def preset_ids() -> tuple[str, ...]:
    return tuple(preset.preset_id for preset in PRESETS)


def resolve_preset(preset_id: str) -> AudioPreset:
    try:
        return _PRESETS_BY_ID[preset_id.strip().lower()]
    except KeyError as exc:
        allowed = ", ".join(preset_ids())
        raise ValueError(f"Unknown preset '{preset_id}'. Allowed: {allowed}.") from exc


def apply_preset(config: AudioConfig, preset_id: str) -> AudioConfig:
    """Return ``config`` with the preset's overrides applied."""

    return with_overrides(config, resolve_preset(preset_id).overrides)

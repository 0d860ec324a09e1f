from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Mapping

import json

from pydantic import BaseModel, ConfigDict, Field, ValidationInfo, field_validator


@dataclass(frozen=True, slots=True)
class ParameterRange:
    """Closed range and slider granularity for one configuration field."""

    minimum: float
    maximum: float
    step: float
    label: str


RANGES: dict[str, ParameterRange] = {
    "highpass_freq": ParameterRange(20, 200, 5, "Rumble Cutoff (Hz)"),
    "lowpass_freq": ParameterRange(2000, 16000, 100, "Clarity Ceiling (Hz)"),
    "deesser_freq": ParameterRange(4000, 8000, 100, "Sibilance Freq (Hz)"),
    "deesser_amount": ParameterRange(0, 1, 0.1, "De-esser Strength"),
    "noise_reduction": ParameterRange(0, 1, 0.05, "Noise Reduction"),
    "compression_amount": ParameterRange(0, 1, 0.1, "Compression Style"),
    "loudnorm_target": ParameterRange(-30, -14, 0.5, "LUFS Target"),
    "loudnorm_tp": ParameterRange(-6.0, -0.1, 0.1, "True Peak Limit (dB)"),
    "loudnorm_lra": ParameterRange(1, 20, 1, "Loudness Range (LU)"),
    "bitrate": ParameterRange(96, 256, 32, "Bitrate (kbps)"),
    "flac_compression_level": ParameterRange(0, 12, 1, "Intermediate FLAC Level"),
}


# Off-step values within this tolerance are float noise, not user input.
_STEP_TOLERANCE = 1e-6


def _ranged(default: float, name: str, alias: str) -> Any:
    bounds = RANGES[name]
    return Field(default, ge=bounds.minimum, le=bounds.maximum, alias=alias, description=bounds.label)


class AudioConfig(BaseModel):
    """Mastering knobs: absolute frequencies/levels plus 0..1 style amounts."""

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="forbid")

    highpass_freq: float = _ranged(80.0, "highpass_freq", "highpassFreq")
    lowpass_freq: float = _ranged(12000.0, "lowpass_freq", "lowpassFreq")
    deesser_freq: float = _ranged(6000.0, "deesser_freq", "deesserFreq")
    deesser_amount: float = _ranged(0.5, "deesser_amount", "deesserAmount")
    noise_reduction: float = _ranged(0.2, "noise_reduction", "noiseReduction")
    compression_amount: float = _ranged(0.3, "compression_amount", "compressionAmount")
    loudnorm_target: float = _ranged(-19.0, "loudnorm_target", "loudnormTarget")
    loudnorm_tp: float = _ranged(-3.0, "loudnorm_tp", "loudnormTp")
    loudnorm_lra: float = _ranged(11.0, "loudnorm_lra", "loudnormLra")
    bitrate: int = _ranged(128, "bitrate", "bitrate")
    flac_compression_level: int = _ranged(6, "flac_compression_level", "flacCompressionLevel")

    @field_validator("*")
    @classmethod
    def _validate_step(cls, value: float, info: ValidationInfo) -> float:
        bounds = RANGES[info.field_name]
        steps = (value - bounds.minimum) / bounds.step
        if abs(steps - round(steps)) > _STEP_TOLERANCE:
            raise ValueError(
                f"{info.field_name} must move in steps of {bounds.step} from {bounds.minimum}, got {value}."
            )
        return value


DEFAULT_CONFIG = AudioConfig()


def with_overrides(config: AudioConfig, overrides: Mapping[str, Any]) -> AudioConfig:
    """Layer overrides onto a config, validating the merged result."""

    merged = config.model_dump()
    for key, value in overrides.items():
        merged[_field_name(key)] = value
    return AudioConfig.model_validate(merged)


def _field_name(key: str) -> str:
    if key in AudioConfig.model_fields:
        return key
    for name, field in AudioConfig.model_fields.items():
        if field.alias == key:
            return name
    return key


def load_audio_config(path: Path, base: AudioConfig = DEFAULT_CONFIG) -> AudioConfig:
    """Load a config file, applying an optional ``preset`` key before field overrides."""

    data = dict(_load_config_data(path))
    preset_id = data.pop("preset", None)
    if preset_id is not None:
        from audo_book.presets import apply_preset

        base = apply_preset(base, str(preset_id))
    return with_overrides(base, data)


def _load_config_data(path: Path) -> dict:
    if path.suffix.lower() in {".yaml", ".yml"}:
        try:
            import yaml
        except ImportError as exc:
            raise ImportError("PyYAML is required to load YAML configs.") from exc

        with path.open("r", encoding="utf-8") as handle:
            try:
                return yaml.safe_load(handle) or {}
            except yaml.YAMLError as exc:
                raise ValueError(f"Invalid YAML config {path}: {exc}") from exc

    with path.open("r", encoding="utf-8") as handle:
        return json.load(handle)

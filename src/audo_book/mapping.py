"""Mapping mastering knobs into concrete per-filter parameters."""

from __future__ import annotations

import math
from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal

from .audio_contract import OUTPUT_CODEC, OUTPUT_SAMPLE_RATE_HZ, REFERENCE_NYQUIST_HZ
from .measurement import LoudnessTargets
from .utils.config import AudioConfig

FILTER_POLES = 2
COMPRESSOR_THRESHOLD_DB = -20.0
LIMITER_ATTACK_MS = 5.0
LIMITER_RELEASE_MS = 50.0
DEESSER_MAX_REDUCTION = 0.5
DEESSER_OUTPUT_MODE = "o"
DECLICK_WINDOW_MS = 55
DECLICK_OVERLAP_PCT = 75
DECLICK_THRESHOLD = 25


@dataclass(frozen=True, slots=True)
class EncoderSettings:
    """Output and intermediate encoding settings."""

    codec: str
    bitrate_kbps: int
    intermediate_flac_level: int
    sample_rate_hz: int


@dataclass(frozen=True, slots=True)
class FilterParameters:
    """Concrete filter parameters derived from an :class:`AudioConfig`."""

    highpass_hz: float
    lowpass_hz: float
    noise_reduction_db: int
    noise_floor_db: int
    deesser_intensity: float
    deesser_freq_ratio: float
    compressor_ratio: float
    compressor_attack_ms: float
    compressor_release_ms: int
    compressor_makeup_db: float
    limiter_ceiling_db: float
    encoder: EncoderSettings
    filter_poles: int = FILTER_POLES
    compressor_threshold_db: float = COMPRESSOR_THRESHOLD_DB
    deesser_max_reduction: float = DEESSER_MAX_REDUCTION
    deesser_output_mode: str = DEESSER_OUTPUT_MODE
    limiter_attack_ms: float = LIMITER_ATTACK_MS
    limiter_release_ms: float = LIMITER_RELEASE_MS
    declick_window_ms: int = DECLICK_WINDOW_MS
    declick_overlap_pct: int = DECLICK_OVERLAP_PCT
    declick_threshold: int = DECLICK_THRESHOLD


def _round_half_up(value: float, places: int) -> float:
    quantum = Decimal(1).scaleb(-places)
    return float(Decimal(repr(value)).quantize(quantum, rounding=ROUND_HALF_UP))


def _round_int(value: float) -> int:
    return int(math.floor(value + 0.5))


def noise_reduction_pair(amount: float) -> tuple[int, int]:
    """``(nr, nf)`` for the FFT denoiser: reduction in dB and tracked noise floor."""

    return _round_int(amount * 40.0), _round_int(-80.0 + amount * 40.0)


def map_filter_parameters(config: AudioConfig) -> FilterParameters:
    """Translate configuration knobs into filter parameters.

    Every affine mapping is rounded to its display precision so identical
    configs render byte-identical filter text. Heavier compression gets a
    higher ratio and makeup with a faster attack and release.
    """

    amount = config.compression_amount
    noise_reduction_db, noise_floor_db = noise_reduction_pair(config.noise_reduction)

    return FilterParameters(
        highpass_hz=float(config.highpass_freq),
        lowpass_hz=float(config.lowpass_freq),
        noise_reduction_db=noise_reduction_db,
        noise_floor_db=noise_floor_db,
        deesser_intensity=_round_half_up(config.deesser_amount, 2),
        deesser_freq_ratio=_round_half_up(config.deesser_freq / REFERENCE_NYQUIST_HZ, 3),
        compressor_ratio=_round_half_up(2.0 + amount * 3.0, 1),
        compressor_attack_ms=_round_half_up(20.0 - amount * 18.0, 1),
        compressor_release_ms=_round_int(250.0 - amount * 200.0),
        compressor_makeup_db=_round_half_up(2.0 + amount * 2.0, 1),
        limiter_ceiling_db=float(config.loudnorm_tp),
        encoder=EncoderSettings(
            codec=OUTPUT_CODEC,
            bitrate_kbps=int(config.bitrate),
            intermediate_flac_level=int(config.flac_compression_level),
            sample_rate_hz=OUTPUT_SAMPLE_RATE_HZ,
        ),
    )


def loudness_targets_from_config(config: AudioConfig) -> LoudnessTargets:
    return LoudnessTargets(
        integrated_lufs=float(config.loudnorm_target),
        true_peak_dbtp=float(config.loudnorm_tp),
        loudness_range_lu=float(config.loudnorm_lra),
    )

"""Windowed loudness, peak and noise-floor estimation over a decoded buffer.

The loudness figure is an RMS estimate, not an ITU-R BS.1770 measurement;
the full export measures true integrated loudness in its first pass.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass

import numpy as np

from .audio_contract import AMPLITUDE_FLOOR, ANALYSIS_WINDOW_SAMPLES, NOISE_FLOOR_PERCENTILE
from .errors import InsufficientDataError, InvalidInputError

logger = logging.getLogger(__name__)

_STAGE = "analysis"


@dataclass(frozen=True, slots=True)
class AudioAnalysis:
    """One scan of one buffer. Superseded, never merged, by the next scan."""

    est_lufs: float
    peak_db: float
    noise_floor_db: float
    duration_seconds: float
    sample_rate_hz: int
    is_estimate: bool

    def as_dict(self) -> dict[str, float | int | bool]:
        """Display form with decibel values rounded to one decimal."""

        return {
            "est_lufs": round(self.est_lufs, 1),
            "peak_db": round(self.peak_db, 1),
            "noise_floor_db": round(self.noise_floor_db, 1),
            "duration_seconds": self.duration_seconds,
            "sample_rate_hz": self.sample_rate_hz,
            "is_estimate": self.is_estimate,
        }


def amplitude_to_db(amplitude: float) -> float:
    """20*log10 with the amplitude floored so silence stays finite."""

    return float(20.0 * math.log10(max(float(amplitude), AMPLITUDE_FLOOR)))


def _mono(samples: np.ndarray) -> np.ndarray:
    if samples.ndim == 1:
        return samples.astype(np.float64, copy=False)
    if samples.ndim == 2:
        return np.mean(samples, axis=0, dtype=np.float64)
    raise InvalidInputError(
        f"Sample buffer must be 1D mono or 2D channel-first, got {samples.ndim} dimensions.",
        stage=_STAGE,
    )


def window_rms(samples: np.ndarray, window_size: int = ANALYSIS_WINDOW_SAMPLES) -> np.ndarray:
    """RMS per fixed-size window; the trailing partial window uses its own count."""

    starts = np.arange(0, samples.size, window_size)
    window_sums = np.add.reduceat(np.square(samples, dtype=np.float64), starts)
    counts = np.minimum(window_size, samples.size - starts)
    return np.sqrt(window_sums / counts)


def noise_floor_amplitude(rms_values: np.ndarray, percentile: float = NOISE_FLOOR_PERCENTILE) -> float:
    """Window RMS at the given low percentile index of the ascending sort."""

    ordered = np.sort(rms_values)
    index = min(int(math.floor(percentile * ordered.size)), ordered.size - 1)
    return float(ordered[index])


def analyze_samples(
    samples: np.ndarray,
    sample_rate: int,
    *,
    is_truncated: bool = False,
    window_size: int = ANALYSIS_WINDOW_SAMPLES,
) -> AudioAnalysis:
    """Estimate loudness, peak and noise floor for a decoded buffer.

    ``is_truncated`` is the caller's knowledge that the buffer is a size-capped
    prefix of a larger file; it is carried through as ``is_estimate``.
    """

    if sample_rate <= 0:
        raise InvalidInputError(f"Sample rate must be positive, got {sample_rate}.", stage=_STAGE)
    if window_size <= 0:
        raise InvalidInputError(f"Window size must be positive, got {window_size}.", stage=_STAGE)

    mono = _mono(np.asarray(samples))
    if mono.size == 0:
        raise InsufficientDataError("Sample buffer is empty.", stage=_STAGE)
    if not np.all(np.isfinite(mono)):
        raise InvalidInputError("Sample buffer contains non-finite values.", stage=_STAGE)

    rms_values = window_rms(mono, window_size)
    global_rms = math.sqrt(float(np.sum(np.square(mono))) / mono.size)
    peak = float(np.max(np.abs(mono)))

    analysis = AudioAnalysis(
        est_lufs=amplitude_to_db(global_rms),
        peak_db=amplitude_to_db(peak),
        noise_floor_db=amplitude_to_db(noise_floor_amplitude(rms_values)),
        duration_seconds=mono.size / float(sample_rate),
        sample_rate_hz=int(sample_rate),
        is_estimate=bool(is_truncated),
    )
    logger.debug(
        "Scanned %d samples in %d windows: est_lufs=%.1f peak=%.1f noise_floor=%.1f",
        mono.size,
        rms_values.size,
        analysis.est_lufs,
        analysis.peak_db,
        analysis.noise_floor_db,
    )
    return analysis

"""Pass-1 loudness measurement values and their deterministic fallbacks."""

from __future__ import annotations

import json
import logging
import math
import re
from dataclasses import dataclass, fields

from .errors import MeasurementUnavailable

logger = logging.getLogger(__name__)

FALLBACK_THRESHOLD_DB = -70.0
FALLBACK_OFFSET_DB = 0.0

# loudnorm JSON key -> shell variable written by the measurement pass.
MEASURED_VARIABLES: dict[str, str] = {
    "input_i": "MEASURED_I",
    "input_tp": "MEASURED_TP",
    "input_lra": "MEASURED_LRA",
    "input_thresh": "MEASURED_THRESH",
    "target_offset": "OFFSET",
}

_JSON_BLOCK = re.compile(r"\{[^{}]*\}", re.DOTALL)


@dataclass(frozen=True, slots=True)
class LoudnessTargets:
    """Configured loudness normalization targets."""

    integrated_lufs: float
    true_peak_dbtp: float
    loudness_range_lu: float


@dataclass(frozen=True, slots=True)
class LoudnessMeasurement:
    """Values reported by a measuring loudnorm pass; ``None`` when unavailable."""

    input_i: float | None = None
    input_tp: float | None = None
    input_lra: float | None = None
    input_thresh: float | None = None
    target_offset: float | None = None

    @property
    def missing_fields(self) -> tuple[str, ...]:
        return tuple(field.name for field in fields(self) if getattr(self, field.name) is None)


@dataclass(frozen=True, slots=True)
class ResolvedMeasurement:
    """Concrete values for the measured loudnorm stage."""

    input_i: float
    input_tp: float
    input_lra: float
    input_thresh: float
    target_offset: float
    fallback_fields: tuple[str, ...] = ()

    @property
    def used_fallback(self) -> bool:
        return bool(self.fallback_fields)


def fallback_values(targets: LoudnessTargets) -> dict[str, float]:
    """Literal stand-ins for each measured value."""

    return {
        "input_i": targets.integrated_lufs,
        "input_tp": targets.true_peak_dbtp,
        "input_lra": targets.loudness_range_lu,
        "input_thresh": FALLBACK_THRESHOLD_DB,
        "target_offset": FALLBACK_OFFSET_DB,
    }


def resolve_measurement(measurement: LoudnessMeasurement | None, targets: LoudnessTargets) -> ResolvedMeasurement:
    """Fill every missing measured value with its fallback literal.

    Missing values are logged, never raised.
    """

    measurement = measurement or LoudnessMeasurement()
    defaults = fallback_values(targets)
    missing = measurement.missing_fields
    if missing:
        condition = MeasurementUnavailable(
            f"Loudness measurement missing {', '.join(missing)}; using fallback values.",
            stage="measurement",
        )
        logger.warning("%s", condition.message, extra={"code": condition.code, "fallback_fields": missing})

    values = {
        name: defaults[name] if getattr(measurement, name) is None else float(getattr(measurement, name))
        for name in MEASURED_VARIABLES
    }
    return ResolvedMeasurement(**values, fallback_fields=missing)


def _parse_value(raw: object) -> float | None:
    try:
        value = float(str(raw).strip())
    except (TypeError, ValueError):
        return None
    if not math.isfinite(value):
        return None
    return value


def parse_loudnorm_output(text: str) -> LoudnessMeasurement:
    """Parse the JSON block ffmpeg's loudnorm prints with ``print_format=json``.

    The last JSON object in ``text`` is used. Absent, non-numeric or
    non-finite values come back as ``None``.
    """

    for block in reversed(_JSON_BLOCK.findall(text)):
        try:
            payload = json.loads(block)
        except json.JSONDecodeError:
            continue
        if not isinstance(payload, dict) or not any(key in payload for key in MEASURED_VARIABLES):
            continue
        return LoudnessMeasurement(**{key: _parse_value(payload.get(key)) for key in MEASURED_VARIABLES})

    logger.warning("No loudnorm JSON block found in measurement output.")
    return LoudnessMeasurement()

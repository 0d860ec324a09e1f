"""Rule-based advice derived from a quick scan."""

from __future__ import annotations

from dataclasses import dataclass

from .analysis import AudioAnalysis
from .audio_contract import OUTPUT_SAMPLE_RATE_HZ
from .mastering_options import DiagnosticTier

NOISE_FLOOR_WARN_DB = -45.0
NOISE_FLOOR_INFO_DB = -60.0
CLIPPING_PEAK_DB = -0.5
LOW_LEVEL_PEAK_DB = -12.0


@dataclass(frozen=True, slots=True)
class DiagnosticIssue:
    tier: DiagnosticTier
    check: str
    message: str

    def as_dict(self) -> dict[str, str]:
        return {"tier": self.tier.value, "check": self.check, "message": self.message}


def _noise_floor_issue(noise_floor_db: float) -> DiagnosticIssue:
    if noise_floor_db > NOISE_FLOOR_WARN_DB:
        return DiagnosticIssue(
            DiagnosticTier.WARN,
            "noise_floor",
            f"High noise floor ({noise_floor_db}dB). Consider increasing Noise Reduction > 0.3.",
        )
    if noise_floor_db > NOISE_FLOOR_INFO_DB:
        return DiagnosticIssue(
            DiagnosticTier.INFO,
            "noise_floor",
            f"Moderate room noise ({noise_floor_db}dB). Light Noise Reduction recommended.",
        )
    return DiagnosticIssue(DiagnosticTier.GOOD, "noise_floor", f"Clean noise floor ({noise_floor_db}dB).")


def _peak_issue(peak_db: float) -> DiagnosticIssue | None:
    if peak_db > CLIPPING_PEAK_DB:
        return DiagnosticIssue(
            DiagnosticTier.WARN,
            "peak",
            f"Input is clipping ({peak_db}dB). Limiter will engage heavily.",
        )
    if peak_db < LOW_LEVEL_PEAK_DB:
        return DiagnosticIssue(
            DiagnosticTier.INFO,
            "peak",
            f"Low input level ({peak_db}dB). Compression will add significant gain.",
        )
    return None


def diagnose(
    analysis: AudioAnalysis, *, output_sample_rate: int = OUTPUT_SAMPLE_RATE_HZ
) -> tuple[DiagnosticIssue, ...]:
    """Classify noise floor, peak headroom and sample-rate mismatch."""

    noise_floor_db = round(analysis.noise_floor_db, 1)
    peak_db = round(analysis.peak_db, 1)

    issues = [_noise_floor_issue(noise_floor_db)]
    peak = _peak_issue(peak_db)
    if peak is not None:
        issues.append(peak)
    if analysis.sample_rate_hz != output_sample_rate:
        issues.append(
            DiagnosticIssue(
                DiagnosticTier.INFO,
                "sample_rate",
                f"Source is {analysis.sample_rate_hz / 1000:g}kHz. Output will be {output_sample_rate / 1000:g}kHz.",
            )
        )
    return tuple(issues)

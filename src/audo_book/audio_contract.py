"""Audio contract shared by the analyzer, the planner and external entry points.

Invariants
----------
* The analyzer only ever sees a decoded, mono-collapsible float buffer.
* Every rendered plan resamples to ``OUTPUT_SAMPLE_RATE_HZ`` and collapses to
  mono as its final stage.
"""

from __future__ import annotations

from pathlib import Path

# Supported source extensions (lower-case, with leading dot).
ACCEPTED_SOURCE_EXTENSIONS: tuple[str, ...] = (
    ".m4b",
    ".m4a",
    ".mp3",
    ".wav",
    ".flac",
    ".aiff",
    ".aif",
    ".ogg",
)

# MIME types accepted by API uploads.
ACCEPTED_SOURCE_MIME_TYPES: tuple[str, ...] = (
    "audio/mp4",
    "audio/x-m4a",
    "audio/x-m4b",
    "audio/mpeg",
    "audio/wav",
    "audio/x-wav",
    "audio/flac",
    "audio/aiff",
    "audio/x-aiff",
    "audio/ogg",
)

# Analysis window in samples; the final partial window is kept, not padded.
ANALYSIS_WINDOW_SAMPLES = 4096

# Fraction of quietest windows treated as the room-noise estimate.
NOISE_FLOOR_PERCENTILE = 0.1

# Amplitudes are floored here before 20*log10 so silence reads as -160 dB.
AMPLITUDE_FLOOR = 1e-8

# Files larger than this are analyzed from a prefix and flagged as estimates.
ANALYSIS_BYTE_CAP_BYTES = 50 * 1024 * 1024

# The de-esser frequency is expressed against this reference Nyquist.
REFERENCE_SAMPLE_RATE_HZ = 44_100
REFERENCE_NYQUIST_HZ = REFERENCE_SAMPLE_RATE_HZ / 2

OUTPUT_SAMPLE_RATE_HZ = 44_100
OUTPUT_CODEC = "aac"
OUTPUT_EXTENSION = ".m4b"

# Previews skip likely front-matter before listening.
PREVIEW_START_OFFSET = "00:05:00"


class UnsupportedAudioFormatError(ValueError):
    """Raised when a source path falls outside the supported container contract."""


def ensure_supported_path(path: Path) -> None:
    """Validate a local file path against accepted source extensions."""

    if path.suffix.lower() not in ACCEPTED_SOURCE_EXTENSIONS:
        supported = ", ".join(ACCEPTED_SOURCE_EXTENSIONS)
        raise UnsupportedAudioFormatError(
            f"Unsupported audio format for '{path.name}'. Supported extensions: {supported}"
        )


def ensure_supported_upload(filename: str | None, content_type: str | None) -> None:
    """Validate API upload metadata against accepted source formats."""

    if content_type and content_type.lower() in ACCEPTED_SOURCE_MIME_TYPES:
        return

    if filename and Path(filename).suffix.lower() in ACCEPTED_SOURCE_EXTENSIONS:
        return

    supported_ext = ", ".join(ACCEPTED_SOURCE_EXTENSIONS)
    supported_mimes = ", ".join(ACCEPTED_SOURCE_MIME_TYPES)
    raise UnsupportedAudioFormatError(
        "Unsupported upload format. "
        f"Supported extensions: {supported_ext}. "
        f"Supported MIME types: {supported_mimes}."
    )

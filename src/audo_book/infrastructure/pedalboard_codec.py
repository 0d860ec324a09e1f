"""Decode adapter backed by pedalboard, bounded by a byte cap."""

from __future__ import annotations

import io
import logging
import os
from dataclasses import dataclass
from pathlib import Path

import numpy as np
from pedalboard.io import AudioFile

from audo_book.audio_contract import ANALYSIS_BYTE_CAP_BYTES, ensure_supported_path
from audo_book.errors import DecodeFailureError

logger = logging.getLogger(__name__)

BYTE_CAP_ENV_VAR = "AUDO_BOOK_ANALYSIS_BYTE_CAP"


@dataclass(frozen=True, slots=True)
class DecodedAudio:
    """Channel-first samples plus whether they cover only a prefix of the file."""

    samples: np.ndarray
    sample_rate: int
    is_truncated: bool


def resolve_byte_cap(byte_cap: int | None = None) -> int:
    """Explicit cap, else the environment override, else the default."""

    if byte_cap is not None:
        resolved = int(byte_cap)
    else:
        resolved = int(os.getenv(BYTE_CAP_ENV_VAR, str(ANALYSIS_BYTE_CAP_BYTES)))
    if resolved <= 0:
        raise ValueError("Analysis byte cap must be a positive number of bytes.")
    return resolved


def decode_bytes(payload: bytes, *, is_truncated: bool = False) -> DecodedAudio:
    """Decode an in-memory container into float samples."""

    if not payload:
        raise DecodeFailureError("Audio payload is empty.", stage="decode")
    try:
        with AudioFile(io.BytesIO(payload)) as audio_file:
            samples = audio_file.read(audio_file.frames)
            sample_rate = int(audio_file.samplerate)
    except (ValueError, RuntimeError, OSError) as error:
        raise DecodeFailureError(f"Unable to decode audio: {error}", stage="decode") from error
    return DecodedAudio(samples=samples, sample_rate=sample_rate, is_truncated=is_truncated)


def decode_for_analysis(path: Path, *, byte_cap: int | None = None) -> DecodedAudio:
    """Decode at most ``byte_cap`` leading bytes of ``path``.

    Files larger than the cap are decoded from their prefix and reported as
    truncated so the resulting analysis is flagged as an estimate.
    """

    ensure_supported_path(path)
    cap = resolve_byte_cap(byte_cap)
    try:
        file_size = path.stat().st_size
        with path.open("rb") as handle:
            payload = handle.read(cap)
    except OSError as error:
        raise DecodeFailureError(f"Audio file is unreadable: {path}", stage="decode") from error

    is_truncated = file_size > cap
    if is_truncated:
        logger.info("Decoding first %d of %d bytes of %s", cap, file_size, path.name)
    return decode_bytes(payload, is_truncated=is_truncated)

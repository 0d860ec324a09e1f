import numpy as np
import pytest

from audo_book.audio_contract import UnsupportedAudioFormatError
from audo_book.errors import DecodeFailureError
from audo_book.infrastructure import pedalboard_codec
from audo_book.infrastructure.pedalboard_codec import (
    BYTE_CAP_ENV_VAR,
    DecodedAudio,
    decode_bytes,
    decode_for_analysis,
    resolve_byte_cap,
)

from conftest import make_wav_bytes


def test_decode_wav_file(wav_file):
    decoded = decode_for_analysis(wav_file)

    assert decoded.sample_rate == 44_100
    assert decoded.samples.shape == (1, 22_050)
    assert decoded.is_truncated is False
    assert np.allclose(decoded.samples, 0.5)


def test_decode_stereo_bytes():
    decoded = decode_bytes(make_wav_bytes(channels=2, sample_rate=48_000, duration_seconds=0.1))

    assert decoded.samples.shape == (2, 4_800)
    assert decoded.sample_rate == 48_000


def test_large_file_is_decoded_from_prefix(monkeypatch, wav_file):
    captured = {}

    def fake_decode(payload, *, is_truncated=False):
        captured["size"] = len(payload)
        return DecodedAudio(samples=np.zeros((1, 4)), sample_rate=44_100, is_truncated=is_truncated)

    monkeypatch.setattr(pedalboard_codec, "decode_bytes", fake_decode)

    decoded = decode_for_analysis(wav_file, byte_cap=1024)

    assert captured["size"] == 1024
    assert decoded.is_truncated is True


def test_file_at_cap_is_not_truncated(monkeypatch, wav_file):
    monkeypatch.setattr(
        pedalboard_codec,
        "decode_bytes",
        lambda payload, *, is_truncated=False: DecodedAudio(np.zeros((1, 4)), 44_100, is_truncated),
    )

    decoded = decode_for_analysis(wav_file, byte_cap=wav_file.stat().st_size)

    assert decoded.is_truncated is False


def test_unsupported_extension_is_rejected(tmp_path):
    path = tmp_path / "notes.txt"
    path.write_text("not audio", encoding="utf-8")

    with pytest.raises(UnsupportedAudioFormatError):
        decode_for_analysis(path)


def test_missing_file_is_decode_failure(tmp_path):
    with pytest.raises(DecodeFailureError) as exc_info:
        decode_for_analysis(tmp_path / "missing.m4b")

    assert exc_info.value.stage == "decode"


def test_empty_payload_is_decode_failure():
    with pytest.raises(DecodeFailureError):
        decode_bytes(b"")


def test_decoder_errors_are_wrapped(monkeypatch):
    class _BrokenAudioFile:
        def __init__(self, *args, **kwargs):
            raise ValueError("unsupported codec")

    monkeypatch.setattr(pedalboard_codec, "AudioFile", _BrokenAudioFile)

    with pytest.raises(DecodeFailureError, match="unsupported codec"):
        decode_bytes(b"\x00" * 64)


def test_byte_cap_resolution(monkeypatch):
    monkeypatch.delenv(BYTE_CAP_ENV_VAR, raising=False)
    assert resolve_byte_cap() == 50 * 1024 * 1024
    assert resolve_byte_cap(2048) == 2048

    monkeypatch.setenv(BYTE_CAP_ENV_VAR, "4096")
    assert resolve_byte_cap() == 4096

    with pytest.raises(ValueError):
        resolve_byte_cap(0)

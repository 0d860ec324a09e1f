import io
import wave

import numpy as np
import pytest


def make_wav_bytes(
    *,
    level: float = 0.5,
    duration_seconds: float = 0.5,
    sample_rate: int = 44_100,
    channels: int = 1,
) -> bytes:
    frames = int(duration_seconds * sample_rate)
    value = int(round(level * 32768))
    samples = np.full(frames * channels, value, dtype="<i2")
    with io.BytesIO() as buffer:
        with wave.open(buffer, "wb") as wav:
            wav.setnchannels(channels)
            wav.setsampwidth(2)
            wav.setframerate(sample_rate)
            wav.writeframes(samples.tobytes())
        return buffer.getvalue()


class RecordingPublisher:
    def __init__(self) -> None:
        self.events = []

    def publish(self, event) -> None:
        self.events.append(event)


@pytest.fixture
def wav_file(tmp_path):
    path = tmp_path / "chapter.wav"
    path.write_bytes(make_wav_bytes())
    return path


@pytest.fixture
def publisher():
    return RecordingPublisher()

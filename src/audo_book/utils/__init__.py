from .config import (
    DEFAULT_CONFIG,
    RANGES,
    AudioConfig,
    ParameterRange,
    load_audio_config,
    with_overrides,
)

__all__ = [
    "AudioConfig",
    "DEFAULT_CONFIG",
    "ParameterRange",
    "RANGES",
    "load_audio_config",
    "with_overrides",
]

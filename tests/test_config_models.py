import json

import pytest
from pydantic import ValidationError

from audo_book.utils.config import DEFAULT_CONFIG, RANGES, AudioConfig, load_audio_config, with_overrides


def test_defaults_match_documented_values():
    assert DEFAULT_CONFIG.highpass_freq == 80
    assert DEFAULT_CONFIG.lowpass_freq == 12000
    assert DEFAULT_CONFIG.deesser_freq == 6000
    assert DEFAULT_CONFIG.loudnorm_target == -19
    assert DEFAULT_CONFIG.loudnorm_tp == -3
    assert DEFAULT_CONFIG.loudnorm_lra == 11
    assert DEFAULT_CONFIG.bitrate == 128
    assert DEFAULT_CONFIG.flac_compression_level == 6


def test_every_range_is_attached_to_a_field():
    assert set(RANGES) == set(AudioConfig.model_fields)


@pytest.mark.parametrize(
    "overrides",
    [
        {"highpass_freq": 10},
        {"lowpass_freq": 20000},
        {"noise_reduction": 1.5},
        {"loudnorm_tp": 0.0},
        {"bitrate": 320},
    ],
)
def test_out_of_range_values_are_rejected(overrides):
    with pytest.raises(ValidationError):
        with_overrides(DEFAULT_CONFIG, overrides)


def test_unknown_fields_are_rejected():
    with pytest.raises(ValueError):
        AudioConfig.model_validate({"gain": 3})


def test_camel_case_aliases_are_accepted():
    config = with_overrides(DEFAULT_CONFIG, {"highpassFreq": 100, "loudnormTarget": -18})

    assert config.highpass_freq == 100
    assert config.loudnorm_target == -18
    assert config.lowpass_freq == DEFAULT_CONFIG.lowpass_freq


def test_config_is_immutable():
    with pytest.raises(ValidationError):
        DEFAULT_CONFIG.highpass_freq = 100


def test_load_json_config(tmp_path):
    path = tmp_path / "book.json"
    path.write_text(json.dumps({"noise_reduction": 0.4, "bitrate": 96}), encoding="utf-8")

    config = load_audio_config(path)

    assert config.noise_reduction == 0.4
    assert config.bitrate == 96


def test_load_yaml_config_applies_preset_before_fields(tmp_path):
    path = tmp_path / "book.yaml"
    path.write_text("preset: radio\nloudnorm_target: -18\n", encoding="utf-8")

    config = load_audio_config(path)

    assert config.loudnorm_target == -18
    assert config.compression_amount == 0.8
    assert config.lowpass_freq == 10000


def test_empty_yaml_config_is_defaults(tmp_path):
    path = tmp_path / "empty.yml"
    path.write_text("", encoding="utf-8")

    assert load_audio_config(path) == DEFAULT_CONFIG


@pytest.mark.parametrize(
    "overrides",
    [
        {"compression_amount": 0.32},
        {"highpass_freq": 83},
        {"noise_reduction": 0.21},
        {"loudnorm_target": -19.2},
        {"bitrate": 100},
    ],
)
def test_off_step_values_are_rejected(overrides):
    with pytest.raises(ValidationError, match="must move in steps of"):
        with_overrides(DEFAULT_CONFIG, overrides)


def test_float_noise_on_step_values_is_accepted():
    config = with_overrides(DEFAULT_CONFIG, {"compression_amount": 0.1 * 3, "noise_reduction": 0.05 * 7})

    assert config.compression_amount == pytest.approx(0.3)
    assert config.noise_reduction == pytest.approx(0.35)


def test_malformed_yaml_is_a_value_error(tmp_path):
    path = tmp_path / "broken.yaml"
    path.write_text("highpass_freq: [80, 90\n", encoding="utf-8")

    with pytest.raises(ValueError, match="Invalid YAML config"):
        load_audio_config(path)

"""Processing plan construction: ordered filter chain plus pass structure."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from .audio_contract import PREVIEW_START_OFFSET
from .mapping import EncoderSettings, FilterParameters
from .mastering_options import PREVIEW_DURATIONS_S, ExecutionMode, parse_execution_mode
from .measurement import (
    MEASURED_VARIABLES,
    LoudnessMeasurement,
    LoudnessTargets,
    fallback_values,
    resolve_measurement,
)
from .path_resolver import resolve_shell_path

logger = logging.getLogger(__name__)

DEFAULT_INTERMEDIATE_PATH = "/tmp/temp_analysis_$(date +%s).flac"

# Stage names in chain order; each stage assumes the state left by the one before.
STAGE_ORDER: tuple[str, ...] = (
    "aformat",
    "highpass",
    "afftdn",
    "lowpass",
    "adeclick",
    "deesser",
    "acompressor",
    "loudnorm",
    "alimiter",
    "aformat",
)


def format_number(value: float) -> str:
    """Shortest text for a config value: ``-19`` rather than ``-19.0``."""

    number = float(value)
    if number.is_integer():
        return str(int(number))
    return repr(number)


@dataclass(frozen=True, slots=True)
class FilterStage:
    """One named filter and its ``key=value`` options in order."""

    name: str
    params: tuple[tuple[str, str], ...]

    def render(self) -> str:
        options = ":".join(f"{key}={value}" for key, value in self.params)
        return f"{self.name}={options}" if options else self.name

    def param(self, key: str) -> str | None:
        for name, value in self.params:
            if name == key:
                return value
        return None


@dataclass(frozen=True, slots=True)
class MeasuredValue:
    """A pass-2 loudnorm input: measured if known, else the pass-1 shell variable."""

    field: str
    variable: str
    fallback: float
    value: float | None = None

    @property
    def token(self) -> str:
        if self.value is None:
            return f"${self.variable}"
        return format_number(self.value)


@dataclass(frozen=True, slots=True)
class MeasurementProtocol:
    """What pass 1 measures and how pass 2 consumes it."""

    measure_stage: FilterStage
    values: tuple[MeasuredValue, ...]
    fallback_fields: tuple[str, ...] = ()

    def value_for(self, field: str) -> MeasuredValue:
        for value in self.values:
            if value.field == field:
                return value
        raise KeyError(field)


@dataclass(frozen=True, slots=True)
class ProcessingStep:
    """One tool invocation: ``source`` through ``stages`` into ``destination``."""

    description: str
    source: str
    destination: str | None
    stages: tuple[FilterStage, ...] = ()


@dataclass(frozen=True, slots=True)
class ProcessingPass:
    name: str
    steps: tuple[ProcessingStep, ...]


@dataclass(frozen=True, slots=True)
class ProcessingPlan:
    """Fully specified plan for one execution mode."""

    mode: ExecutionMode
    input_path: str
    output_path: str
    revision: int
    stages: tuple[FilterStage, ...]
    passes: tuple[ProcessingPass, ...]
    encoder: EncoderSettings
    targets: LoudnessTargets
    measurement_protocol: MeasurementProtocol | None = None
    intermediate_path: str | None = None
    cleanup_paths: tuple[str, ...] = ()
    start_offset: str | None = None
    duration_seconds: int | None = None

    @property
    def stage_names(self) -> tuple[str, ...]:
        return tuple(stage.name for stage in self.stages)

    def filter_graph(self) -> str:
        return ",".join(stage.render() for stage in self.stages)


def _stage(name: str, *params: tuple[str, object]) -> FilterStage:
    return FilterStage(name=name, params=tuple((key, str(value)) for key, value in params))


def _loudness_target_params(targets: LoudnessTargets) -> tuple[tuple[str, str], ...]:
    return (
        ("I", format_number(targets.integrated_lufs)),
        ("TP", format_number(targets.true_peak_dbtp)),
        ("LRA", format_number(targets.loudness_range_lu)),
    )


def loudnorm_single_pass_stage(targets: LoudnessTargets) -> FilterStage:
    """Dynamic loudnorm: approximate, good enough for a quick listen."""

    return FilterStage("loudnorm", _loudness_target_params(targets))


def loudnorm_measure_stage(targets: LoudnessTargets) -> FilterStage:
    return FilterStage("loudnorm", _loudness_target_params(targets) + (("print_format", "json"),))


def loudnorm_measured_stage(targets: LoudnessTargets, protocol: MeasurementProtocol) -> FilterStage:
    """Linear loudnorm fed with pass-1 values."""

    measured = (
        ("measured_I", protocol.value_for("input_i").token),
        ("measured_TP", protocol.value_for("input_tp").token),
        ("measured_LRA", protocol.value_for("input_lra").token),
        ("measured_thresh", protocol.value_for("input_thresh").token),
        ("offset", protocol.value_for("target_offset").token),
    )
    return FilterStage(
        "loudnorm",
        _loudness_target_params(targets) + measured + (("linear", "true"), ("print_format", "summary")),
    )


def build_filter_chain(params: FilterParameters, loudness_stage: FilterStage) -> tuple[FilterStage, ...]:
    """The ten-stage chain with ``loudness_stage`` in the normalization slot."""

    return (
        _stage(
            "aformat",
            ("sample_fmts", "fltp"),
            ("sample_rates", params.encoder.sample_rate_hz),
            ("channel_layouts", "stereo"),
        ),
        _stage("highpass", ("f", format_number(params.highpass_hz)), ("poles", params.filter_poles)),
        _stage(
            "afftdn",
            ("nr", params.noise_reduction_db),
            ("nf", params.noise_floor_db),
            ("tn", 1),
        ),
        _stage("lowpass", ("f", format_number(params.lowpass_hz)), ("poles", params.filter_poles)),
        _stage(
            "adeclick",
            ("w", params.declick_window_ms),
            ("o", params.declick_overlap_pct),
            ("t", params.declick_threshold),
        ),
        _stage(
            "deesser",
            ("i", f"{params.deesser_intensity:.2f}"),
            ("m", format_number(params.deesser_max_reduction)),
            ("f", f"{params.deesser_freq_ratio:.3f}"),
            ("s", params.deesser_output_mode),
        ),
        _stage(
            "acompressor",
            ("threshold", f"{format_number(params.compressor_threshold_db)}dB"),
            ("ratio", f"{params.compressor_ratio:.1f}"),
            ("attack", f"{params.compressor_attack_ms:.1f}"),
            ("release", params.compressor_release_ms),
            ("makeup", f"{params.compressor_makeup_db:.1f}"),
        ),
        loudness_stage,
        _stage(
            "alimiter",
            ("limit", f"{format_number(params.limiter_ceiling_db)}dB"),
            ("attack", format_number(params.limiter_attack_ms)),
            ("release", format_number(params.limiter_release_ms)),
        ),
        _stage("aformat", ("channel_layouts", "mono")),
    )


def build_measurement_protocol(
    targets: LoudnessTargets, measurement: LoudnessMeasurement | None = None
) -> MeasurementProtocol:
    """Describe pass 1; supplied values are substituted, missing ones fall back."""

    defaults = fallback_values(targets)
    if measurement is None:
        values = tuple(
            MeasuredValue(field=field, variable=variable, fallback=defaults[field])
            for field, variable in MEASURED_VARIABLES.items()
        )
        return MeasurementProtocol(measure_stage=loudnorm_measure_stage(targets), values=values)

    resolved = resolve_measurement(measurement, targets)
    values = tuple(
        MeasuredValue(field=field, variable=variable, fallback=defaults[field], value=getattr(resolved, field))
        for field, variable in MEASURED_VARIABLES.items()
    )
    return MeasurementProtocol(
        measure_stage=loudnorm_measure_stage(targets),
        values=values,
        fallback_fields=resolved.fallback_fields,
    )


def _plan_preview(
    params: FilterParameters,
    input_path: str,
    output_path: str,
    mode: ExecutionMode,
    targets: LoudnessTargets,
    revision: int,
) -> ProcessingPlan:
    stages = build_filter_chain(params, loudnorm_single_pass_stage(targets))
    duration = PREVIEW_DURATIONS_S[mode]
    preview_pass = ProcessingPass(
        name="preview",
        steps=(
            ProcessingStep(
                description=f"Render {duration}s preview from {PREVIEW_START_OFFSET}",
                source=input_path,
                destination=output_path,
                stages=stages,
            ),
        ),
    )
    return ProcessingPlan(
        mode=mode,
        input_path=input_path,
        output_path=output_path,
        revision=revision,
        stages=stages,
        passes=(preview_pass,),
        encoder=params.encoder,
        targets=targets,
        start_offset=PREVIEW_START_OFFSET,
        duration_seconds=duration,
    )


def _plan_full_export(
    params: FilterParameters,
    input_path: str,
    output_path: str,
    targets: LoudnessTargets,
    revision: int,
    measurement: LoudnessMeasurement | None,
    intermediate_path: str,
) -> ProcessingPlan:
    protocol = build_measurement_protocol(targets, measurement)
    stages = build_filter_chain(params, loudnorm_measured_stage(targets, protocol))
    measure_pass = ProcessingPass(
        name="measure",
        steps=(
            ProcessingStep(
                description=f"Extract to intermediate FLAC (level {params.encoder.intermediate_flac_level})",
                source=input_path,
                destination=intermediate_path,
            ),
            ProcessingStep(
                description="Measure integrated loudness, true peak, loudness range and threshold",
                source=intermediate_path,
                destination=None,
                stages=(protocol.measure_stage,),
            ),
        ),
    )
    process_pass = ProcessingPass(
        name="process",
        steps=(
            ProcessingStep(
                description="Run the full chain with measured loudness normalization",
                source=intermediate_path,
                destination=output_path,
                stages=stages,
            ),
        ),
    )
    return ProcessingPlan(
        mode=ExecutionMode.FULL_TWO_PASS,
        input_path=input_path,
        output_path=output_path,
        revision=revision,
        stages=stages,
        passes=(measure_pass, process_pass),
        encoder=params.encoder,
        targets=targets,
        measurement_protocol=protocol,
        intermediate_path=intermediate_path,
        cleanup_paths=(intermediate_path,),
    )


def plan_processing(
    params: FilterParameters,
    input_path: str,
    output_path: str,
    mode: ExecutionMode | str,
    targets: LoudnessTargets,
    *,
    revision: int = 1,
    measurement: LoudnessMeasurement | None = None,
    intermediate_path: str = DEFAULT_INTERMEDIATE_PATH,
) -> ProcessingPlan:
    """Compose filter parameters, paths and a mode into a processing plan.

    Raises :class:`~audo_book.errors.InvalidModeError` for modes outside
    ``preview-10s``, ``preview-45s`` and ``full-two-pass``. ``measurement`` is
    ignored by previews, which normalize in a single pass.
    """

    resolved_mode = parse_execution_mode(mode)
    shell_input = resolve_shell_path(input_path)
    shell_output = resolve_shell_path(output_path)

    if resolved_mode.is_preview:
        plan = _plan_preview(params, shell_input, shell_output, resolved_mode, targets, revision)
    else:
        plan = _plan_full_export(
            params,
            shell_input,
            shell_output,
            targets,
            revision,
            measurement,
            resolve_shell_path(intermediate_path),
        )

    logger.info(
        "Planned %s: %d stages in %d pass(es) -> %s",
        plan.mode.value,
        len(plan.stages),
        len(plan.passes),
        plan.output_path,
    )
    return plan

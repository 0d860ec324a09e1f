"""Application services orchestrating scan, plan and finalize use-cases."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from uuid import uuid4

from audo_book.analysis import AudioAnalysis, analyze_samples
from audo_book.application.event_publisher import EventPublisher, NullEventPublisher
from audo_book.diagnostics import DiagnosticIssue, diagnose
from audo_book.domain.events import (
    MeasurementFallbackApplied,
    PipelineFailed,
    PlanFinalized,
    PlanGenerated,
    SourceScanned,
)
from audo_book.errors import AudoBookError
from audo_book.impact import KnobImpact, describe_config
from audo_book.infrastructure.pedalboard_codec import (
    DecodedAudio,
    decode_bytes,
    decode_for_analysis,
    resolve_byte_cap,
)
from audo_book.mapping import FilterParameters, loudness_targets_from_config, map_filter_parameters
from audo_book.mastering_options import ExecutionMode, parse_execution_mode
from audo_book.measurement import LoudnessMeasurement
from audo_book.path_resolver import output_path_for
from audo_book.processing import ProcessingPlan, plan_processing
from audo_book.rendering import render_script
from audo_book.revision import RevisionCounter
from audo_book.utils.config import DEFAULT_CONFIG, AudioConfig


@dataclass(frozen=True, slots=True)
class ScanReport:
    analysis: AudioAnalysis
    issues: tuple[DiagnosticIssue, ...]


@dataclass(frozen=True, slots=True)
class PlanRequest:
    """Everything one plan depends on, passed explicitly."""

    input_path: str
    mode: ExecutionMode | str = ExecutionMode.PREVIEW_45S
    config: AudioConfig = DEFAULT_CONFIG
    output_dir: str | None = None
    revision: int = 1
    measurement: LoudnessMeasurement | None = None


@dataclass(frozen=True, slots=True)
class PlanResult:
    parameters: FilterParameters
    plan: ProcessingPlan
    script: str
    impacts: tuple[KnobImpact, ...] = ()


def _default_output_dir(input_path: str) -> str:
    cut = max(input_path.rfind("/"), input_path.rfind("\\"))
    return input_path[: cut + 1] if cut >= 0 else ""


@dataclass(slots=True)
class ScanSource:
    """Use case that decodes a source and estimates its levels."""

    event_publisher: EventPublisher = NullEventPublisher()
    byte_cap: int | None = None

    def analyze_decoded(self, decoded: DecodedAudio, correlation_id: str | None = None) -> ScanReport:
        run_correlation_id = correlation_id or str(uuid4())
        try:
            analysis = analyze_samples(decoded.samples, decoded.sample_rate, is_truncated=decoded.is_truncated)
        except AudoBookError as error:
            self._publish_failure(run_correlation_id, error)
            raise

        issues = diagnose(analysis)
        self.event_publisher.publish(
            SourceScanned(
                correlation_id=run_correlation_id,
                payload_summary={
                    **analysis.as_dict(),
                    "issue_tiers": [issue.tier.value for issue in issues],
                },
            )
        )
        return ScanReport(analysis=analysis, issues=issues)

    def scan_path(self, path: Path, correlation_id: str | None = None) -> ScanReport:
        run_correlation_id = correlation_id or str(uuid4())
        try:
            decoded = decode_for_analysis(path, byte_cap=self.byte_cap)
        except AudoBookError as error:
            self._publish_failure(run_correlation_id, error)
            raise
        return self.analyze_decoded(decoded, correlation_id=run_correlation_id)

    def scan_bytes(self, payload: bytes, correlation_id: str | None = None) -> ScanReport:
        run_correlation_id = correlation_id or str(uuid4())
        try:
            cap = resolve_byte_cap(self.byte_cap)
            decoded = decode_bytes(payload[:cap], is_truncated=len(payload) > cap)
        except AudoBookError as error:
            self._publish_failure(run_correlation_id, error)
            raise
        return self.analyze_decoded(decoded, correlation_id=run_correlation_id)

    def _publish_failure(self, correlation_id: str, error: AudoBookError) -> None:
        self.event_publisher.publish(
            PipelineFailed(
                correlation_id=correlation_id,
                payload_summary={"stage": error.stage, "code": error.code, "error": error.message},
            )
        )


@dataclass(slots=True)
class PlanMasteringJob:
    """Use case that maps a config and builds, then renders, a plan."""

    event_publisher: EventPublisher = NullEventPublisher()

    def run(self, request: PlanRequest, correlation_id: str | None = None) -> PlanResult:
        run_correlation_id = correlation_id or str(uuid4())
        try:
            mode = parse_execution_mode(request.mode)
        except AudoBookError as error:
            self.event_publisher.publish(
                PipelineFailed(
                    correlation_id=run_correlation_id,
                    payload_summary={"stage": error.stage, "code": error.code, "error": error.message},
                )
            )
            raise

        output_dir = request.output_dir
        if output_dir is None:
            output_dir = _default_output_dir(request.input_path)

        parameters = map_filter_parameters(request.config)
        plan = plan_processing(
            parameters,
            request.input_path,
            output_path_for(request.input_path, output_dir, request.revision, mode),
            mode,
            loudness_targets_from_config(request.config),
            revision=request.revision,
            measurement=request.measurement,
        )

        protocol = plan.measurement_protocol
        if protocol is not None and protocol.fallback_fields:
            self.event_publisher.publish(
                MeasurementFallbackApplied(
                    correlation_id=run_correlation_id,
                    payload_summary={"fallback_fields": list(protocol.fallback_fields)},
                )
            )
        self.event_publisher.publish(
            PlanGenerated(
                correlation_id=run_correlation_id,
                payload_summary={
                    "mode": plan.mode.value,
                    "revision": plan.revision,
                    "stage_count": len(plan.stages),
                    "pass_count": len(plan.passes),
                    "output_path": plan.output_path,
                },
            )
        )
        return PlanResult(
            parameters=parameters,
            plan=plan,
            script=render_script(plan),
            impacts=describe_config(request.config),
        )


@dataclass(slots=True)
class FinalizeExport:
    """Use case run once per successful export; advances the caller's counter."""

    event_publisher: EventPublisher = NullEventPublisher()

    def run(self, plan: ProcessingPlan, counter: RevisionCounter, correlation_id: str | None = None) -> int:
        finalized = counter.finalize()
        self.event_publisher.publish(
            PlanFinalized(
                correlation_id=correlation_id or str(uuid4()),
                payload_summary={
                    "mode": plan.mode.value,
                    "finalized_revision": finalized,
                    "next_revision": counter.current,
                    "output_path": plan.output_path,
                },
            )
        )
        return finalized

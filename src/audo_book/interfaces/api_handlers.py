"""API-facing handlers that delegate to application services."""

from __future__ import annotations

from typing import Any

from audo_book.application.mastering_service import (
    PlanMasteringJob,
    PlanRequest,
    PlanResult,
    ScanReport,
    ScanSource,
)
from audo_book.infrastructure.logging_event_publisher import LoggingEventPublisher
from audo_book.measurement import LoudnessMeasurement
from audo_book.presets import apply_preset
from audo_book.processing import ProcessingPlan
from audo_book.utils.config import DEFAULT_CONFIG, AudioConfig, with_overrides

_event_publisher = LoggingEventPublisher()
scan_service = ScanSource(event_publisher=_event_publisher)
plan_service = PlanMasteringJob(event_publisher=_event_publisher)


def build_config(preset: str | None, overrides: dict[str, Any]) -> AudioConfig:
    config = apply_preset(DEFAULT_CONFIG, preset) if preset else DEFAULT_CONFIG
    return with_overrides(config, overrides) if overrides else config


def scan_uploaded_bytes(payload: bytes, correlation_id: str) -> ScanReport:
    return scan_service.scan_bytes(payload, correlation_id=correlation_id)


def plan_for_request(
    *,
    input_path: str,
    mode: str,
    config: AudioConfig,
    output_dir: str | None,
    revision: int,
    measurement: LoudnessMeasurement | None,
    correlation_id: str,
) -> PlanResult:
    request = PlanRequest(
        input_path=input_path,
        mode=mode,
        config=config,
        output_dir=output_dir,
        revision=revision,
        measurement=measurement,
    )
    return plan_service.run(request, correlation_id=correlation_id)


def plan_to_dict(plan: ProcessingPlan) -> dict[str, Any]:
    protocol = plan.measurement_protocol
    return {
        "mode": plan.mode.value,
        "revision": plan.revision,
        "input_path": plan.input_path,
        "output_path": plan.output_path,
        "stages": [{"name": stage.name, "params": dict(stage.params)} for stage in plan.stages],
        "filter_graph": plan.filter_graph(),
        "passes": [
            {
                "name": processing_pass.name,
                "steps": [
                    {
                        "description": step.description,
                        "source": step.source,
                        "destination": step.destination,
                        "filter_graph": ",".join(stage.render() for stage in step.stages),
                    }
                    for step in processing_pass.steps
                ],
            }
            for processing_pass in plan.passes
        ],
        "cleanup_paths": list(plan.cleanup_paths),
        "measurement": None
        if protocol is None
        else {
            "values": [
                {"field": value.field, "variable": value.variable, "fallback": value.fallback, "value": value.value}
                for value in protocol.values
            ],
            "fallback_fields": list(protocol.fallback_fields),
        },
        "start_offset": plan.start_offset,
        "duration_seconds": plan.duration_seconds,
    }


__all__ = ["build_config", "plan_for_request", "plan_to_dict", "scan_uploaded_bytes"]

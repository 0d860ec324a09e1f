"""CLI-facing handlers that delegate to application services."""

from __future__ import annotations

from pathlib import Path

from audo_book.application.mastering_service import (
    FinalizeExport,
    PlanMasteringJob,
    PlanRequest,
    PlanResult,
    ScanReport,
    ScanSource,
)
from audo_book.infrastructure.logging_event_publisher import LoggingEventPublisher
from audo_book.mastering_options import ExecutionMode
from audo_book.measurement import parse_loudnorm_output
from audo_book.presets import apply_preset
from audo_book.rendering import script_file_name
from audo_book.revision import RevisionCounter
from audo_book.utils.config import DEFAULT_CONFIG, AudioConfig, load_audio_config

_event_publisher = LoggingEventPublisher()
plan_service = PlanMasteringJob(event_publisher=_event_publisher)
finalize_service = FinalizeExport(event_publisher=_event_publisher)


def build_config(config_path: Path | None = None, preset: str | None = None) -> AudioConfig:
    """Config file (if any) layered on the defaults, then the preset on top."""

    config = load_audio_config(config_path) if config_path is not None else DEFAULT_CONFIG
    if preset:
        config = apply_preset(config, preset)
    return config


def scan_from_path(path: Path, correlation_id: str, byte_cap: int | None = None) -> ScanReport:
    service = ScanSource(event_publisher=_event_publisher, byte_cap=byte_cap)
    return service.scan_path(path, correlation_id=correlation_id)


def load_revision_counter(counter_path: Path | None, start: int | None = None) -> RevisionCounter:
    """Counter read from ``counter_path``, or seeded at ``start`` when one is given."""

    if start is not None:
        return RevisionCounter(current=start)
    if counter_path is None or not counter_path.exists():
        return RevisionCounter()
    raw = counter_path.read_text(encoding="utf-8").strip()
    if not raw:
        return RevisionCounter()
    try:
        return RevisionCounter(current=int(raw))
    except ValueError as error:
        raise ValueError(f"Revision file {counter_path} does not hold a positive integer.") from error


def plan_from_options(
    input_path: str,
    mode: ExecutionMode | str,
    correlation_id: str,
    *,
    config: AudioConfig = DEFAULT_CONFIG,
    output_dir: str | None = None,
    revision: int = 1,
    measurement_output: Path | None = None,
) -> PlanResult:
    measurement = None
    if measurement_output is not None:
        measurement = parse_loudnorm_output(measurement_output.read_text(encoding="utf-8"))

    request = PlanRequest(
        input_path=input_path,
        mode=mode,
        config=config,
        output_dir=output_dir,
        revision=revision,
        measurement=measurement,
    )
    return plan_service.run(request, correlation_id=correlation_id)


def export_script(
    result: PlanResult,
    script_dir: Path,
    correlation_id: str,
    counter: RevisionCounter,
    counter_path: Path | None = None,
) -> Path:
    """Write the rendered script, then advance and persist the revision."""

    script_dir.mkdir(parents=True, exist_ok=True)
    script_path = script_dir / script_file_name(result.plan.revision)
    script_path.write_text(result.script, encoding="utf-8")
    script_path.chmod(0o755)

    finalize_service.run(result.plan, counter, correlation_id=correlation_id)
    if counter_path is not None:
        counter_path.parent.mkdir(parents=True, exist_ok=True)
        counter_path.write_text(f"{counter.current}\n", encoding="utf-8")
    return script_path

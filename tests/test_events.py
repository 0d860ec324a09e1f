from __future__ import annotations

import logging

import numpy as np
import pytest

from audo_book.application.mastering_service import FinalizeExport, PlanMasteringJob, PlanRequest, ScanSource
from audo_book.domain.events import (
    MeasurementFallbackApplied,
    PipelineFailed,
    PlanFinalized,
    PlanGenerated,
    SourceScanned,
)
from audo_book.errors import InsufficientDataError, InvalidModeError
from audo_book.infrastructure.logging_event_publisher import LoggingEventPublisher
from audo_book.infrastructure.pedalboard_codec import DecodedAudio
from audo_book.measurement import LoudnessMeasurement
from audo_book.revision import RevisionCounter


def test_scan_emits_source_scanned_with_summary(publisher) -> None:
    service = ScanSource(event_publisher=publisher)
    decoded = DecodedAudio(samples=np.full((1, 8192), 0.5, dtype=np.float32), sample_rate=48_000, is_truncated=True)

    report = service.analyze_decoded(decoded, correlation_id="scan-1")

    assert [type(event) for event in publisher.events] == [SourceScanned]
    event = publisher.events[0]
    assert event.correlation_id == "scan-1"
    assert event.payload_summary["is_estimate"] is True
    assert event.payload_summary["issue_tiers"] == [issue.tier.value for issue in report.issues]
    assert report.analysis.is_estimate is True


def test_scan_failure_emits_pipeline_failed(publisher) -> None:
    service = ScanSource(event_publisher=publisher)
    decoded = DecodedAudio(samples=np.zeros((1, 0), dtype=np.float32), sample_rate=44_100, is_truncated=False)

    with pytest.raises(InsufficientDataError):
        service.analyze_decoded(decoded, correlation_id="scan-2")

    assert [type(event) for event in publisher.events] == [PipelineFailed]
    assert publisher.events[0].payload_summary["stage"] == "analysis"
    assert publisher.events[0].payload_summary["code"] == "insufficient_data"


def test_scan_bytes_applies_byte_cap(monkeypatch, publisher) -> None:
    captured = {}

    def fake_decode(payload, *, is_truncated=False):
        captured["size"] = len(payload)
        captured["is_truncated"] = is_truncated
        return DecodedAudio(samples=np.full(64, 0.1), sample_rate=44_100, is_truncated=is_truncated)

    monkeypatch.setattr("audo_book.application.mastering_service.decode_bytes", fake_decode)
    service = ScanSource(event_publisher=publisher, byte_cap=10)

    report = service.scan_bytes(b"x" * 25)

    assert captured == {"size": 10, "is_truncated": True}
    assert report.analysis.is_estimate is True


def test_plan_emits_plan_generated(publisher) -> None:
    service = PlanMasteringJob(event_publisher=publisher)

    result = service.run(PlanRequest(input_path="~/Desktop/book.m4b", mode="preview-10s"), correlation_id="plan-1")

    assert [type(event) for event in publisher.events] == [PlanGenerated]
    summary = publisher.events[0].payload_summary
    assert summary["mode"] == "preview-10s"
    assert summary["stage_count"] == 10
    assert summary["pass_count"] == 1
    assert summary["output_path"] == "$HOME/Desktop/book_v1-preview-10s.m4b"
    assert result.script.startswith("ffmpeg ")


def test_plan_with_partial_measurement_reports_fallback(publisher) -> None:
    service = PlanMasteringJob(event_publisher=publisher)
    request = PlanRequest(
        input_path="/audio/book.m4b",
        mode="full-two-pass",
        output_dir="/exports",
        revision=2,
        measurement=LoudnessMeasurement(input_i=-22.0),
    )

    result = service.run(request, correlation_id="plan-2")

    assert [type(event) for event in publisher.events] == [MeasurementFallbackApplied, PlanGenerated]
    assert publisher.events[0].payload_summary["fallback_fields"] == [
        "input_tp",
        "input_lra",
        "input_thresh",
        "target_offset",
    ]
    assert result.plan.output_path == "/exports/book_v2-processed.m4b"


def test_plan_with_invalid_mode_emits_pipeline_failed(publisher) -> None:
    service = PlanMasteringJob(event_publisher=publisher)

    with pytest.raises(InvalidModeError):
        service.run(PlanRequest(input_path="book.m4b", mode="preview-5m"), correlation_id="plan-3")

    assert [type(event) for event in publisher.events] == [PipelineFailed]
    assert publisher.events[0].payload_summary["code"] == "invalid_mode"


def test_finalize_advances_counter_and_emits_event(publisher) -> None:
    plan = PlanMasteringJob().run(PlanRequest(input_path="book.m4b", mode="full-two-pass")).plan
    counter = RevisionCounter()

    finalized = FinalizeExport(event_publisher=publisher).run(plan, counter, correlation_id="final-1")

    assert finalized == 1
    assert counter.current == 2
    assert [type(event) for event in publisher.events] == [PlanFinalized]
    assert publisher.events[0].payload_summary["next_revision"] == 2


def test_planning_never_touches_the_counter() -> None:
    counter = RevisionCounter(current=5)
    service = PlanMasteringJob()

    service.run(PlanRequest(input_path="book.m4b", revision=counter.current))
    service.run(PlanRequest(input_path="book.m4b", revision=counter.current))

    assert counter.current == 5


def test_logging_event_publisher_emits_structured_record(caplog) -> None:
    with caplog.at_level(logging.INFO, logger="audo_book.events"):
        LoggingEventPublisher().publish(PlanGenerated(correlation_id="log-1", payload_summary={"mode": "full-two-pass"}))

    record = caplog.records[-1]
    assert record.getMessage() == "domain_event_emitted"
    assert record.event_name == "PlanGenerated"
    assert record.correlation_id == "log-1"


def test_logging_event_publisher_raises_failures_to_warning(caplog) -> None:
    with caplog.at_level(logging.INFO, logger="audo_book.events"):
        LoggingEventPublisher().publish(
            PipelineFailed(correlation_id="log-2", payload_summary={"stage": "decode", "code": "decode_failure"})
        )

    assert caplog.records[-1].levelno == logging.WARNING
    assert caplog.records[-1].event_name == "PipelineFailed"

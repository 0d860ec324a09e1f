"""Domain event contracts for scan and planning workflows."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any


@dataclass(frozen=True, slots=True)
class DomainEvent:
    """Base domain event emitted by application services."""

    correlation_id: str
    payload_summary: dict[str, Any]
    occurred_at: datetime = field(default_factory=lambda: datetime.now(tz=timezone.utc))


@dataclass(frozen=True, slots=True)
class SourceScanned(DomainEvent):
    """A decoded buffer was analyzed for loudness, peak and noise floor."""


@dataclass(frozen=True, slots=True)
class PlanGenerated(DomainEvent):
    """A processing plan was built for a config and execution mode."""


@dataclass(frozen=True, slots=True)
class MeasurementFallbackApplied(DomainEvent):
    """Pass-2 loudness inputs were filled from fallback literals."""


@dataclass(frozen=True, slots=True)
class PlanFinalized(DomainEvent):
    """A plan was exported and the revision counter advanced."""


@dataclass(frozen=True, slots=True)
class PipelineFailed(DomainEvent):
    """Scan or planning failed for a correlation id."""

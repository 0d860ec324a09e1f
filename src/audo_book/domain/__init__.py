"""DDD domain layer."""

from .events import (
    DomainEvent,
    MeasurementFallbackApplied,
    PipelineFailed,
    PlanFinalized,
    PlanGenerated,
    SourceScanned,
)

__all__ = [
    "DomainEvent",
    "SourceScanned",
    "PlanGenerated",
    "MeasurementFallbackApplied",
    "PlanFinalized",
    "PipelineFailed",
]

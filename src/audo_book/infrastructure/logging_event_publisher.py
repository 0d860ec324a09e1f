"""Logging-backed implementation of the event publisher."""

from __future__ import annotations

import logging

from audo_book.domain.events import DomainEvent, MeasurementFallbackApplied, PipelineFailed

LOGGER = logging.getLogger("audo_book.events")

# Events that signal degraded or failed work are raised above INFO.
_WARNING_EVENTS: tuple[type[DomainEvent], ...] = (PipelineFailed, MeasurementFallbackApplied)


class LoggingEventPublisher:
    """Emit event payload summaries to structured logs."""

    def publish(self, event: DomainEvent) -> None:
        level = logging.WARNING if isinstance(event, _WARNING_EVENTS) else logging.INFO
        LOGGER.log(
            level,
            "domain_event_emitted",
            extra={
                "event_name": type(event).__name__,
                "correlation_id": event.correlation_id,
                "payload_summary": event.payload_summary,
                "occurred_at": event.occurred_at.isoformat(),
            },
        )

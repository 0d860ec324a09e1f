"""DDD application layer."""

from .event_publisher import EventPublisher, NullEventPublisher
from .mastering_service import FinalizeExport, PlanMasteringJob, PlanRequest, ScanSource

__all__ = ["EventPublisher", "NullEventPublisher", "FinalizeExport", "PlanMasteringJob", "PlanRequest", "ScanSource"]

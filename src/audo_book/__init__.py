"""Public package exports for Audo_Book with lazy imports."""

from __future__ import annotations

from importlib import import_module
from typing import Any

__all__ = [
    "AudioAnalysis",
    "analyze_samples",
    "AudioConfig",
    "DEFAULT_CONFIG",
    "apply_preset",
    "FilterParameters",
    "map_filter_parameters",
    "ExecutionMode",
    "LoudnessMeasurement",
    "ProcessingPlan",
    "plan_processing",
    "render_script",
    "RevisionCounter",
    "InvalidInputError",
    "InsufficientDataError",
    "DecodeFailureError",
    "InvalidModeError",
]

_EXPORT_MODULES: dict[str, str] = {
    "AudioAnalysis": "audo_book.analysis",
    "analyze_samples": "audo_book.analysis",
    "AudioConfig": "audo_book.utils.config",
    "DEFAULT_CONFIG": "audo_book.utils.config",
    "apply_preset": "audo_book.presets",
    "FilterParameters": "audo_book.mapping",
    "map_filter_parameters": "audo_book.mapping",
    "ExecutionMode": "audo_book.mastering_options",
    "LoudnessMeasurement": "audo_book.measurement",
    "ProcessingPlan": "audo_book.processing",
    "plan_processing": "audo_book.processing",
    "render_script": "audo_book.rendering",
    "RevisionCounter": "audo_book.revision",
    "InvalidInputError": "audo_book.errors",
    "InsufficientDataError": "audo_book.errors",
    "DecodeFailureError": "audo_book.errors",
    "InvalidModeError": "audo_book.errors",
}


def __getattr__(name: str) -> Any:
    if name not in _EXPORT_MODULES:
        raise AttributeError(f"module 'audo_book' has no attribute {name!r}")

    module = import_module(_EXPORT_MODULES[name])
    value = getattr(module, name)
    globals()[name] = value
    return value

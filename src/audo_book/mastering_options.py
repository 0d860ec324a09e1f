"""Shared mastering option enums and parsing helpers."""

from __future__ import annotations

from enum import Enum
from typing import TypeVar

from .errors import InvalidModeError


class ExecutionMode(str, Enum):
    """How a processing plan is executed."""

    PREVIEW_10S = "preview-10s"
    PREVIEW_45S = "preview-45s"
    FULL_TWO_PASS = "full-two-pass"

    @property
    def is_preview(self) -> bool:
        return self is not ExecutionMode.FULL_TWO_PASS


class DiagnosticTier(str, Enum):
    """Severity tiers emitted by the advisory layer."""

    WARN = "warn"
    INFO = "info"
    GOOD = "good"


# Names used by earlier script generators.
_MODE_ALIASES: dict[str, ExecutionMode] = {
    "test-10s": ExecutionMode.PREVIEW_10S,
    "test-45s": ExecutionMode.PREVIEW_45S,
    "full": ExecutionMode.FULL_TWO_PASS,
}

PREVIEW_DURATIONS_S: dict[ExecutionMode, int] = {
    ExecutionMode.PREVIEW_10S: 10,
    ExecutionMode.PREVIEW_45S: 45,
}

OUTPUT_SUFFIXES: dict[ExecutionMode, str] = {
    ExecutionMode.PREVIEW_10S: "-preview-10s",
    ExecutionMode.PREVIEW_45S: "-preview-45s",
    ExecutionMode.FULL_TWO_PASS: "-processed",
}


EnumT = TypeVar("EnumT", bound=Enum)


def enum_values(enum_cls: type[EnumT]) -> tuple[str, ...]:
    """Return enum values for UI/API hinting in declaration order."""

    return tuple(str(member.value) for member in enum_cls)


def parse_case_insensitive_enum(raw_value: str, enum_cls: type[EnumT]) -> EnumT:
    """Parse enum values case-insensitively and raise ValueError with allowed values."""

    normalized = raw_value.strip().lower()
    for member in enum_cls:
        if str(member.value).lower() == normalized:
            return member

    allowed = ", ".join(enum_values(enum_cls))
    enum_name = enum_cls.__name__
    raise ValueError(f"Invalid {enum_name}: '{raw_value}'. Allowed values: {allowed}.")


def parse_execution_mode(raw_value: ExecutionMode | str) -> ExecutionMode:
    """Resolve a mode or mode name, raising InvalidModeError outside the closed set."""

    if isinstance(raw_value, ExecutionMode):
        return raw_value
    if not isinstance(raw_value, str):
        raise InvalidModeError(f"Execution mode must be a string, got {type(raw_value).__name__}.", stage="planning")

    alias = _MODE_ALIASES.get(raw_value.strip().lower())
    if alias is not None:
        return alias
    try:
        return parse_case_insensitive_enum(raw_value, ExecutionMode)
    except ValueError as error:
        raise InvalidModeError(str(error), stage="planning") from error

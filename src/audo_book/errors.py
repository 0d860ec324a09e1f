"""Error taxonomy for analysis, decoding and planning."""

from __future__ import annotations


class AudoBookError(ValueError):
    """Base error carrying a machine-readable code and the failing stage."""

    default_code = "audo_book_error"

    def __init__(self, message: str, *, code: str | None = None, stage: str = "core") -> None:
        super().__init__(message)
        self.message = message
        self.code = code or self.default_code
        self.stage = stage

    def as_dict(self) -> dict[str, str]:
        return {"code": self.code, "message": self.message, "stage": self.stage}


class InvalidInputError(AudoBookError):
    """Raised when a sample buffer or sample rate is unusable."""

    default_code = "invalid_input"


class InsufficientDataError(InvalidInputError):
    """Raised when a buffer holds no samples at all."""

    default_code = "insufficient_data"


class DecodeFailureError(AudoBookError):
    """Raised when the external decoder cannot produce a sample buffer."""

    default_code = "decode_failure"


class InvalidModeError(AudoBookError):
    """Raised when the planner receives an unknown execution mode."""

    default_code = "invalid_mode"


class MeasurementUnavailable(AudoBookError):
    """Pass-1 loudness values were missing.

    Never raised out of the core: the planner substitutes fallback values and
    logs an instance of this condition instead.
    """

    default_code = "measurement_unavailable"

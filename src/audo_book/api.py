"""FastAPI interface for Audo_Book."""

from typing import Any
from uuid import uuid4

from fastapi import FastAPI, File, Header, HTTPException, UploadFile
from pydantic import BaseModel, Field, ValidationError

from .audio_contract import UnsupportedAudioFormatError, ensure_supported_upload
from .errors import AudoBookError, DecodeFailureError
from .impact import describe_config
from .interfaces.api_handlers import build_config, plan_for_request, plan_to_dict, scan_uploaded_bytes
from .mastering_options import ExecutionMode, enum_values
from .measurement import LoudnessMeasurement, parse_loudnorm_output
from .presets import PRESETS, apply_preset
from .utils.config import DEFAULT_CONFIG, RANGES

app = FastAPI(title="Audo_Book API", version="0.1.0")


class MeasurementPayload(BaseModel):
    input_i: float | None = None
    input_tp: float | None = None
    input_lra: float | None = None
    input_thresh: float | None = None
    target_offset: float | None = None


class PlanPayload(BaseModel):
    input_path: str = Field(..., min_length=1, description="Source path as it should appear in the script")
    mode: str = Field(ExecutionMode.PREVIEW_45S.value, description="preview-10s, preview-45s or full-two-pass")
    output_dir: str | None = None
    preset: str | None = None
    config: dict[str, Any] = Field(default_factory=dict, description="Field overrides layered on the preset")
    revision: int = Field(1, ge=1)
    measurement: MeasurementPayload | None = None
    measurement_output: str | None = Field(None, description="Raw loudnorm print_format=json output")


def _measurement_from_payload(payload: PlanPayload) -> LoudnessMeasurement | None:
    if payload.measurement is not None:
        return LoudnessMeasurement(**payload.measurement.model_dump())
    if payload.measurement_output is not None:
        return parse_loudnorm_output(payload.measurement_output)
    return None


@app.get("/health")
def health() -> dict[str, str]:
    """Health check endpoint."""

    return {"status": "ok"}


@app.get("/presets")
def presets() -> dict[str, Any]:
    """Built-in presets, execution modes and slider ranges."""

    return {
        "presets": [
            {
                "id": preset.preset_id,
                "name": preset.name,
                "description": preset.description,
                "overrides": dict(preset.overrides),
                "impacts": [
                    impact.as_dict() for impact in describe_config(apply_preset(DEFAULT_CONFIG, preset.preset_id))
                ],
            }
            for preset in PRESETS
        ],
        "modes": list(enum_values(ExecutionMode)),
        "ranges": {
            name: {"min": bounds.minimum, "max": bounds.maximum, "step": bounds.step, "label": bounds.label}
            for name, bounds in RANGES.items()
        },
    }


@app.post("/plan")
def plan(
    payload: PlanPayload,
    x_correlation_id: str | None = Header(default=None, alias="X-Correlation-Id"),
) -> dict[str, Any]:
    """Build a processing plan and its rendered script."""

    correlation_id = x_correlation_id or str(uuid4())
    try:
        config = build_config(payload.preset, payload.config)
    except ValidationError as error:
        raise HTTPException(
            status_code=400,
            detail={"code": "invalid_config", "message": str(error)},
        ) from error
    except ValueError as error:
        raise HTTPException(
            status_code=400,
            detail={"code": "invalid_preset", "message": str(error)},
        ) from error

    try:
        result = plan_for_request(
            input_path=payload.input_path,
            mode=payload.mode,
            config=config,
            output_dir=payload.output_dir,
            revision=payload.revision,
            measurement=_measurement_from_payload(payload),
            correlation_id=correlation_id,
        )
    except AudoBookError as error:
        detail = error.as_dict()
        detail["allowed_values"] = list(enum_values(ExecutionMode))
        raise HTTPException(status_code=400, detail=detail) from error

    return {
        "correlation_id": correlation_id,
        "plan": plan_to_dict(result.plan),
        "script": result.script,
        "impacts": [impact.as_dict() for impact in result.impacts],
    }


@app.post("/analyze")
async def analyze(
    source: UploadFile = File(..., description="Audio file to scan"),
    x_correlation_id: str | None = Header(default=None, alias="X-Correlation-Id"),
) -> dict[str, Any]:
    """Quick scan of an uploaded file: level estimates plus advisory issues."""

    try:
        ensure_supported_upload(source.filename, source.content_type)
    except UnsupportedAudioFormatError as error:
        raise HTTPException(
            status_code=415,
            detail={"code": "unsupported_format", "message": str(error)},
        ) from error

    correlation_id = x_correlation_id or str(uuid4())
    payload = await source.read()
    try:
        report = scan_uploaded_bytes(payload, correlation_id=correlation_id)
    except DecodeFailureError as error:
        raise HTTPException(status_code=422, detail=error.as_dict()) from error
    except AudoBookError as error:
        raise HTTPException(status_code=400, detail=error.as_dict()) from error

    return {
        "correlation_id": correlation_id,
        "analysis": report.analysis.as_dict(),
        "issues": [issue.as_dict() for issue in report.issues],
    }

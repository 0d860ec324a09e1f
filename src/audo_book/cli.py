"""CLI interface for Audo_Book."""

import json
import logging
from pathlib import Path
from typing import NoReturn
from uuid import uuid4

import typer

from .application.mastering_service import PlanResult
from .interfaces.cli_handlers import (
    build_config,
    export_script,
    load_revision_counter,
    plan_from_options,
    scan_from_path,
)
from .mastering_options import ExecutionMode
from .presets import PRESETS

app = typer.Typer(help="Audo_Book command line interface")


def _fail(error: Exception) -> NoReturn:
    typer.echo(f"Error: {error}", err=True)
    raise typer.Exit(code=1)


@app.callback()
def configure(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging."),
) -> None:
    """Audiobook mastering: quick scans and ffmpeg plan generation."""

    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def _echo_impacts(result: PlanResult, err: bool = False) -> None:
    for impact in result.impacts:
        typer.echo(f"# {impact.label}: {impact.value:g} -> {impact.description}", err=err)


@app.command("scan")
def scan_command(
    path: Path = typer.Argument(..., help="Audio file to scan"),
    byte_cap: int | None = typer.Option(
        None,
        "--byte-cap",
        min=1,
        help="Decode at most this many leading bytes (default 50 MiB).",
    ),
    as_json: bool = typer.Option(False, "--json", help="Print the report as JSON."),
) -> None:
    """Estimate loudness, peak and noise floor of an audio file."""

    correlation_id = str(uuid4())
    try:
        report = scan_from_path(path, correlation_id=correlation_id, byte_cap=byte_cap)
    except (OSError, ValueError) as error:
        _fail(error)

    if as_json:
        payload = {
            "analysis": report.analysis.as_dict(),
            "issues": [issue.as_dict() for issue in report.issues],
            "correlation_id": correlation_id,
        }
        typer.echo(json.dumps(payload, indent=2))
        return

    summary = report.analysis.as_dict()
    label = "estimate (partial scan)" if report.analysis.is_estimate else "full scan"
    typer.echo(f"Scan: {label}")
    typer.echo(f"  Est. loudness: {summary['est_lufs']} dB")
    typer.echo(f"  Peak:          {summary['peak_db']} dB")
    typer.echo(f"  Noise floor:   {summary['noise_floor_db']} dB")
    typer.echo(f"  Duration:      {report.analysis.duration_seconds:.1f} s")
    typer.echo(f"  Sample rate:   {report.analysis.sample_rate_hz / 1000:g} kHz")
    for issue in report.issues:
        typer.echo(f"[{issue.tier.value.upper()}] {issue.message}")


@app.command("plan")
def plan_command(
    input_path: str = typer.Argument(..., help="Source path as it should appear in the script"),
    mode: ExecutionMode = typer.Option(
        ExecutionMode.PREVIEW_45S,
        "--mode",
        "-m",
        case_sensitive=False,
        help="preview-10s, preview-45s or full-two-pass.",
    ),
    output_dir: str | None = typer.Option(
        None,
        "--output-dir",
        "-o",
        help="Directory for the processed file (defaults to the input's directory).",
    ),
    preset: str | None = typer.Option(None, "--preset", "-p", help="Preset applied over the config."),
    config_path: Path | None = typer.Option(None, "--config", "-c", help="JSON or YAML config file."),
    revision: int | None = typer.Option(
        None,
        "--revision",
        min=1,
        help="Revision number for the output name (defaults to the revision file, else 1).",
    ),
    revision_file: Path | None = typer.Option(
        None,
        "--revision-file",
        help="File holding the revision counter; advanced after each script export.",
    ),
    measurement_output: Path | None = typer.Option(
        None,
        "--measurement",
        help="Captured loudnorm print_format=json output from a measurement pass.",
    ),
    script_dir: Path | None = typer.Option(
        None,
        "--script-dir",
        help="Write audiobook_master_v<N>.sh here and finalize the revision.",
    ),
) -> None:
    """Generate an ffmpeg processing plan for an audiobook file."""

    correlation_id = str(uuid4())
    try:
        counter = load_revision_counter(revision_file, start=revision)
        config = build_config(config_path, preset)
        result = plan_from_options(
            input_path,
            mode,
            correlation_id,
            config=config,
            output_dir=output_dir,
            revision=counter.current,
            measurement_output=measurement_output,
        )
    except (OSError, ValueError) as error:
        _fail(error)

    if script_dir is None:
        typer.echo(result.script, nl=False)
        _echo_impacts(result, err=True)
        return

    written = export_script(result, script_dir, correlation_id, counter, revision_file)
    typer.echo(f"Script written to: {written}")
    typer.echo(f"Output file: {result.plan.output_path}")
    typer.echo(f"Correlation ID: {correlation_id}")
    _echo_impacts(result)


@app.command("presets")
def presets_command() -> None:
    """List the built-in presets."""

    for preset in PRESETS:
        overrides = ", ".join(f"{key}={value}" for key, value in preset.overrides.items())
        typer.echo(f"{preset.preset_id:<6} {preset.name}: {preset.description}")
        typer.echo(f"       {overrides}")


def main() -> None:
    app()


if __name__ == "__main__":
    main()

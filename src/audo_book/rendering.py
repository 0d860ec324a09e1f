"""Render a processing plan into ffmpeg shell text."""

from __future__ import annotations

from .mastering_options import ExecutionMode
from .processing import DEFAULT_INTERMEDIATE_PATH, FilterStage, ProcessingPlan, format_number
from .path_resolver import shell_quote

_CONTINUATION = " \\\n"


def script_file_name(revision: int) -> str:
    return f"audiobook_master_v{revision}.sh"


def _cleanup_target(plan: ProcessingPlan, path: str) -> str:
    if path == plan.intermediate_path:
        return "\"$TEMP_FLAC\""
    return shell_quote(path)


def _intermediate_value(path: str) -> str:
    # The default name carries a $(date) substitution that bash must expand.
    if path == DEFAULT_INTERMEDIATE_PATH:
        return f'"{path}"'
    return shell_quote(path)


def _graph(stages: tuple[FilterStage, ...], separator: str) -> str:
    return separator.join(stage.render() for stage in stages)


def render_preview_command(plan: ProcessingPlan) -> str:
    graph = _graph(plan.stages, ",")
    lines = [
        f"ffmpeg -nostdin -ss {plan.start_offset} -i {shell_quote(plan.input_path)} -t {plan.duration_seconds}",
        f'-filter_complex "[0:a]{graph}"',
        f"-vn -c:a {plan.encoder.codec} -b:a {plan.encoder.bitrate_kbps}k {shell_quote(plan.output_path)}",
    ]
    return _CONTINUATION.join(lines) + "\n"


def render_full_script(plan: ProcessingPlan) -> str:
    protocol = plan.measurement_protocol
    if protocol is None or plan.intermediate_path is None:
        raise ValueError("A full export plan needs a measurement protocol and an intermediate path.")

    encoder = plan.encoder
    graph = _graph(plan.stages, ",\\\n")
    captures = "\n".join(
        f"{value.variable}=$(echo \"$LOUDNESS_DATA\" | grep '\"{value.field}\"' | cut -d : -f 2 | tr -d '\", \\n')"
        for value in protocol.values
    )
    fallbacks = "\n".join(f": ${{{value.variable}:={format_number(value.fallback)}}}" for value in protocol.values)
    cleanup = "\n".join(f"rm {_cleanup_target(plan, path)}" for path in plan.cleanup_paths)

    return f"""#!/bin/bash
# AUDIOBOOK MASTERING SCRIPT (two-pass, FLAC intermediate) v{plan.revision}

INPUT={shell_quote(plan.input_path)}
OUTPUT={shell_quote(plan.output_path)}
TEMP_FLAC={_intermediate_value(plan.intermediate_path)}

echo ">> PHASE 1: ANALYSIS & MEASUREMENT"
# -map_metadata 0 preserves chapters and tags from source
# -nostdin keeps ffmpeg from consuming the rest of this script as input
echo "   ...extracting to intermediate FLAC..."
ffmpeg -nostdin -v warning -i "$INPUT" -vn -acodec flac -compression_level {encoder.intermediate_flac_level} -ar {encoder.sample_rate_hz} -map_metadata 0 "$TEMP_FLAC" -y

echo "   ...measuring loudness..."
LOUDNESS_DATA=$(ffmpeg -nostdin -i "$TEMP_FLAC" -af {protocol.measure_stage.render()} -f null - 2>&1 | grep -A 12 "loudnorm" | tail -n 12)

{captures}

echo "   ...Captured: I=$MEASURED_I TP=$MEASURED_TP LRA=$MEASURED_LRA"

# Fallback values when measurement failed
{fallbacks}

echo ">> PHASE 2: PRECISION PROCESSING"
ffmpeg -nostdin -i "$TEMP_FLAC" -filter_complex "\\
[0:a]{graph}[out]" \\
-map "[out]" \\
-vn -map_metadata 0 \\
-c:a {encoder.codec} -b:a {encoder.bitrate_kbps}k -movflags +faststart \\
"$OUTPUT"

{cleanup}
echo ">> PROCESSING COMPLETE: $OUTPUT"
"""


def render_script(plan: ProcessingPlan) -> str:
    """Render ``plan`` as a preview command or a full bash script."""

    if plan.mode is ExecutionMode.FULL_TWO_PASS:
        return render_full_script(plan)
    return render_preview_command(plan)

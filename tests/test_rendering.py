from audo_book.mapping import loudness_targets_from_config, map_filter_parameters
from audo_book.measurement import LoudnessMeasurement
from audo_book.processing import plan_processing
from audo_book.rendering import render_script, script_file_name
from audo_book.utils.config import DEFAULT_CONFIG

PARAMS = map_filter_parameters(DEFAULT_CONFIG)
TARGETS = loudness_targets_from_config(DEFAULT_CONFIG)


def test_preview_renders_single_ffmpeg_command():
    plan = plan_processing(PARAMS, "~/Books/book.m4b", "~/Books/book_v2-preview-45s.m4b", "preview-45s", TARGETS)

    script = render_script(plan)

    assert script.startswith('ffmpeg -nostdin -ss 00:05:00 -i "$HOME/Books/book.m4b" -t 45')
    assert '-filter_complex "[0:a]aformat=sample_fmts=fltp' in script
    assert script.rstrip().endswith('-vn -c:a aac -b:a 128k "$HOME/Books/book_v2-preview-45s.m4b"')
    assert "loudnorm=I=-19:TP=-3:LRA=11," in script


def test_full_script_has_both_phases_and_fallbacks():
    plan = plan_processing(PARAMS, "/audio/book.m4b", "/audio/book_v3-processed.m4b", "full-two-pass", TARGETS, revision=3)

    script = render_script(plan)

    assert script.startswith("#!/bin/bash\n")
    assert 'INPUT="/audio/book.m4b"' in script
    assert 'OUTPUT="/audio/book_v3-processed.m4b"' in script
    assert 'TEMP_FLAC="/tmp/temp_analysis_$(date +%s).flac"' in script
    assert "-acodec flac -compression_level 6 -ar 44100 -map_metadata 0" in script
    assert "-af loudnorm=I=-19:TP=-3:LRA=11:print_format=json" in script
    assert ": ${MEASURED_I:=-19}" in script
    assert ": ${MEASURED_TP:=-3}" in script
    assert ": ${MEASURED_LRA:=11}" in script
    assert ": ${MEASURED_THRESH:=-70}" in script
    assert ": ${OFFSET:=0}" in script
    assert "measured_I=$MEASURED_I:measured_TP=$MEASURED_TP" in script
    assert "-c:a aac -b:a 128k -movflags +faststart" in script
    assert 'rm "$TEMP_FLAC"' in script
    assert script.index("PHASE 1") < script.index("PHASE 2") < script.index('rm "$TEMP_FLAC"')


def test_full_script_inlines_supplied_measurement():
    measurement = LoudnessMeasurement(input_i=-24.2, input_tp=-2.5, input_lra=5.0, input_thresh=-34.6, target_offset=0.3)
    plan = plan_processing(PARAMS, "book.m4b", "book_v1-processed.m4b", "full-two-pass", TARGETS, measurement=measurement)

    script = render_script(plan)

    assert "measured_I=-24.2:measured_TP=-2.5:measured_LRA=5:measured_thresh=-34.6:offset=0.3" in script


def test_output_paths_with_quotes_are_escaped():
    plan = plan_processing(PARAMS, 'say "hi".m4b', "out.m4b", "preview-10s", TARGETS)

    assert '-i "say \\"hi\\".m4b"' in render_script(plan)


def test_script_file_name_carries_revision():
    assert script_file_name(4) == "audiobook_master_v4.sh"


def test_dollar_signs_in_paths_are_not_expanded():
    plan = plan_processing(
        PARAMS,
        "/audio/Best of $5 Tales.m4b",
        "~/out/$USER $(id).m4b",
        "full-two-pass",
        TARGETS,
    )

    script = render_script(plan)

    assert 'INPUT="/audio/Best of \\$5 Tales.m4b"' in script
    assert 'OUTPUT="$HOME/out/\\$USER \\$(id).m4b"' in script
    assert 'TEMP_FLAC="/tmp/temp_analysis_$(date +%s).flac"' in script


def test_custom_intermediate_path_is_quoted_literally():
    plan = plan_processing(
        PARAMS, "book.m4b", "out.m4b", "full-two-pass", TARGETS, intermediate_path="/scratch/$job.flac"
    )

    assert 'TEMP_FLAC="/scratch/\\$job.flac"' in render_script(plan)

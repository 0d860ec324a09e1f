"""Path handling for generated scripts.

Paths are kept as plain strings rather than :class:`pathlib.Path` objects:
they are interpolated into a shell script that may run on another machine,
so the home shorthand is rewritten to ``$HOME`` instead of being expanded
locally.
"""

from __future__ import annotations

import re

from .audio_contract import OUTPUT_EXTENSION
from .mastering_options import OUTPUT_SUFFIXES, ExecutionMode, parse_execution_mode

_HOME_PREFIX = "~/"
_SHELL_HOME_PREFIX = "$HOME/"
_DEFAULT_BASE_NAME = "audiobook"
_ESCAPED_IN_DOUBLE_QUOTES = re.compile(r"([\"\\`$])")


def resolve_shell_path(path: str) -> str:
    """Replace a leading ``~/`` with ``$HOME/`` so it expands inside double quotes."""

    if path.startswith(_HOME_PREFIX):
        return _SHELL_HOME_PREFIX + path[len(_HOME_PREFIX) :]
    return path


def _separator_for(path: str) -> str:
    return "\\" if "\\" in path else "/"


def join_output_path(output_dir: str, file_name: str) -> str:
    """Join a directory and file name using the separator the directory already uses."""

    if not output_dir:
        return file_name
    if output_dir.endswith(("/", "\\")):
        return f"{output_dir}{file_name}"
    return f"{output_dir}{_separator_for(output_dir)}{file_name}"


def base_name(path: str) -> str:
    """File name of ``path`` without its final extension."""

    file_name = re.split(r"[/\\]", path)[-1] if path else ""
    if not file_name:
        return _DEFAULT_BASE_NAME
    stem = re.sub(r"\.[^/.]+$", "", file_name)
    return stem or _DEFAULT_BASE_NAME


def output_file_name(input_path: str, revision: int, mode: ExecutionMode | str) -> str:
    """Deterministic output name, e.g. ``book_v3-preview-10s.m4b``."""

    resolved_mode = parse_execution_mode(mode)
    return f"{base_name(input_path)}_v{revision}{OUTPUT_SUFFIXES[resolved_mode]}{OUTPUT_EXTENSION}"


def output_path_for(input_path: str, output_dir: str, revision: int, mode: ExecutionMode | str) -> str:
    return join_output_path(output_dir, output_file_name(input_path, revision, mode))


def shell_quote(path: str) -> str:
    """Double-quote a path for bash.

    Only a leading ``$HOME/`` stays expandable; every other ``$`` is escaped
    along with quotes, backslashes and backticks.
    """

    prefix = ""
    if path.startswith(_SHELL_HOME_PREFIX):
        prefix, path = _SHELL_HOME_PREFIX, path[len(_SHELL_HOME_PREFIX) :]
    return '"' + prefix + _ESCAPED_IN_DOUBLE_QUOTES.sub(r"\\\1", path) + '"'

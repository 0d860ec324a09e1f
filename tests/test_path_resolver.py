import pytest

from audo_book.mastering_options import ExecutionMode
from audo_book.path_resolver import (
    base_name,
    join_output_path,
    output_file_name,
    output_path_for,
    resolve_shell_path,
    shell_quote,
)


def test_home_shorthand_becomes_shell_variable():
    assert resolve_shell_path("~/Desktop/book.m4b") == "$HOME/Desktop/book.m4b"
    assert resolve_shell_path("/srv/book.m4b") == "/srv/book.m4b"
    assert resolve_shell_path("~user/book.m4b") == "~user/book.m4b"


@pytest.mark.parametrize(
    ("output_dir", "expected"),
    [
        ("~/Desktop", "~/Desktop/book.m4b"),
        ("~/Desktop/", "~/Desktop/book.m4b"),
        ("C:\\Books", "C:\\Books\\book.m4b"),
        ("C:\\Books\\", "C:\\Books\\book.m4b"),
        ("", "book.m4b"),
    ],
)
def test_join_respects_existing_separator(output_dir, expected):
    assert join_output_path(output_dir, "book.m4b") == expected


@pytest.mark.parametrize(
    ("path", "expected"),
    [
        ("~/Desktop/book.m4b", "book"),
        ("C:\\Books\\chapter 1.mp3", "chapter 1"),
        ("archive.tar.gz", "archive.tar"),
        ("README", "README"),
        ("", "audiobook"),
        ("/audio/", "audiobook"),
    ],
)
def test_base_name(path, expected):
    assert base_name(path) == expected


@pytest.mark.parametrize(
    ("mode", "suffix"),
    [
        (ExecutionMode.PREVIEW_10S, "_v3-preview-10s.m4b"),
        (ExecutionMode.PREVIEW_45S, "_v3-preview-45s.m4b"),
        (ExecutionMode.FULL_TWO_PASS, "_v3-processed.m4b"),
    ],
)
def test_output_file_name_per_mode(mode, suffix):
    assert output_file_name("/audio/book.mp3", 3, mode) == f"book{suffix}"


def test_output_path_for_joins_directory():
    assert output_path_for("~/in/book.m4b", "~/out", 1, "preview-10s") == "~/out/book_v1-preview-10s.m4b"


def test_shell_quote_escapes_only_special_characters():
    assert shell_quote("$HOME/a b.m4b") == '"$HOME/a b.m4b"'
    assert shell_quote('a"b`c\\d') == '"a\\"b\\`c\\\\d"'


def test_shell_quote_keeps_only_leading_home_expandable():
    assert shell_quote("$HOME/$5 book.m4b") == '"$HOME/\\$5 book.m4b"'
    assert shell_quote("/a/$HOME/b") == '"/a/\\$HOME/b"'

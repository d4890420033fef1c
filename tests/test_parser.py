"""Tests for routedoc.parser."""

from __future__ import annotations

from pathlib import Path

import pytest

from routedoc.errors import SourceParseError
from routedoc.parser import RustParser


def test_parse_source_returns_tree() -> None:
    parsed = RustParser().parse_source("fn main() {}\n", "main.rs")

    assert parsed.path == Path("main.rs")
    assert parsed.root.type == "source_file"
    assert [child.type for child in parsed.root.named_children] == ["function_item"]


def test_parse_source_rejects_syntax_errors() -> None:
    with pytest.raises(SourceParseError) as excinfo:
        RustParser().parse_source("fn broken( {\n", "broken.rs")

    assert excinfo.value.path == Path("broken.rs")
    assert "syntax error" in excinfo.value.message


def test_parse_files_skips_unparseable_files(tmp_path: Path) -> None:
    good = tmp_path / "good.rs"
    bad = tmp_path / "bad.rs"
    missing = tmp_path / "missing.rs"
    good.write_text("struct User { id: u32 }\n", encoding="utf-8")
    bad.write_text("struct User { id: }\n fn (", encoding="utf-8")

    parsed = RustParser().parse_files([good, bad, missing])

    assert [item.path for item in parsed] == [good]


def test_parse_file_reports_unreadable_path(tmp_path: Path) -> None:
    with pytest.raises(SourceParseError):
        RustParser().parse_file(tmp_path / "nope.rs")

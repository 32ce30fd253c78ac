"""Unit tests for utility functions (structgen.utils).

Tests cover:
- line_col
- compute_digest / extract_digest
- read_source (file and stdin) / write_text
- Rich output helpers (print_summary_table, print_success, etc.)
"""

from __future__ import annotations

import io
from pathlib import Path

import pytest

from structgen.utils import (
    compute_digest,
    extract_digest,
    line_col,
    print_error,
    print_success,
    print_summary_table,
    print_warning,
    read_source,
    write_text,
)


# ---------------------------------------------------------------------------
# line_col
# ---------------------------------------------------------------------------


class TestLineCol:
    @pytest.mark.unit
    def test_first_character(self):
        assert line_col("struct A;", 0) == (1, 1)

    @pytest.mark.unit
    def test_later_line(self):
        text = "struct A;\nstruct B {\n  x }"
        assert line_col(text, text.index("x")) == (3, 3)

    @pytest.mark.unit
    def test_end_of_input(self):
        text = "ab\ncd"
        assert line_col(text, len(text)) == (2, 3)


# ---------------------------------------------------------------------------
# Digests
# ---------------------------------------------------------------------------


class TestDigest:
    @pytest.mark.unit
    def test_digest_is_hex_sha256(self):
        digest = compute_digest("a", "b")
        assert len(digest) == 64
        assert all(c in "0123456789abcdef" for c in digest)

    @pytest.mark.unit
    def test_parts_are_separated(self):
        assert compute_digest("ab", "c") != compute_digest("a", "bc")
        assert compute_digest("a", "b") == compute_digest("a", "b")

    @pytest.mark.unit
    @pytest.mark.parametrize("prefix", ["//", "#"])
    def test_extract_from_header(self, prefix: str):
        digest = compute_digest("x")
        text = f"{prefix} @generated by structgen\n{prefix} digest: {digest}\n\nstruct A;\n"
        assert extract_digest(text) == digest

    @pytest.mark.unit
    def test_extract_without_header(self):
        assert extract_digest("struct A;\n") is None
        assert extract_digest("// digest: not-a-digest\n") is None


# ---------------------------------------------------------------------------
# Text I/O
# ---------------------------------------------------------------------------


class TestTextIO:
    @pytest.mark.unit
    def test_read_file(self, tmp_path: Path):
        path = tmp_path / "in.rs"
        path.write_text("struct A;", encoding="utf-8")
        assert read_source(str(path)) == "struct A;"

    @pytest.mark.unit
    def test_read_stdin(self, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.setattr("sys.stdin", io.StringIO("struct B;"))
        assert read_source("-") == "struct B;"

    @pytest.mark.unit
    def test_write_creates_parent_dirs(self, tmp_path: Path):
        target = tmp_path / "a" / "b" / "out.rs"
        assert write_text(target, "struct A;\n") == target
        assert target.read_text(encoding="utf-8") == "struct A;\n"


# ---------------------------------------------------------------------------
# Rich helpers
# ---------------------------------------------------------------------------


class TestRichHelpers:
    @pytest.mark.unit
    def test_messages_go_to_stderr(self, capsys: pytest.CaptureFixture[str]):
        print_success("generated: out.rs")
        print_error("bad.rs:1:2: error: [oops]")
        print_warning("careful")
        captured = capsys.readouterr()
        assert captured.out == ""
        assert "generated: out.rs" in captured.err
        assert "[oops]" in captured.err
        assert "careful" in captured.err

    @pytest.mark.unit
    def test_print_summary_table(self, capsys: pytest.CaptureFixture[str]):
        print_summary_table([("1", "A", "unit", "-")], columns=("#", "Struct", "Shape", "Constructor"), title="Run")
        err = capsys.readouterr().err
        assert "Struct" in err
        assert "unit" in err

"""Shared utility functions for structgen.

Provides source-position helpers for diagnostics, the output digest used by
``--check``, text I/O helpers and Rich-based console reporting.
"""

from __future__ import annotations

import hashlib
import re
import sys
from pathlib import Path
from typing import Optional

from rich.console import Console
from rich.markup import escape
from rich.table import Table

# Diagnostics go to stderr so generated code on stdout stays clean.
console = Console(stderr=True, highlight=False)

DIGEST_PATTERN = re.compile(r"^(?://|#) digest: ([0-9a-f]{64})$", re.MULTILINE)


# ---------------------------------------------------------------------------
# Source positions
# ---------------------------------------------------------------------------


def line_col(text: str, index: int) -> tuple[int, int]:
    """Convert a character offset into a 1-based ``(line, column)`` pair."""
    line = text.count("\n", 0, index) + 1
    line_start = text.rfind("\n", 0, index)
    return line, index - line_start


# ---------------------------------------------------------------------------
# Digest helpers
# ---------------------------------------------------------------------------


def compute_digest(*parts: str) -> str:
    """Return the SHA-256 hex digest of *parts*, NUL-separated."""
    h = hashlib.sha256()
    for i, part in enumerate(parts):
        if i:
            h.update(b"\x00")
        h.update(part.encode("utf-8"))
    return h.hexdigest()


def extract_digest(text: str) -> Optional[str]:
    """Return the digest recorded in a generated file's header, if any."""
    match = DIGEST_PATTERN.search(text)
    if not match:
        return None
    return match.group(1)


# ---------------------------------------------------------------------------
# Text I/O
# ---------------------------------------------------------------------------


def read_source(path: str) -> str:
    """Read declaration text from *path*, or from stdin when *path* is ``-``."""
    if path == "-":
        return sys.stdin.read()
    return Path(path).read_text(encoding="utf-8")


def write_text(path: str | Path, content: str) -> Path:
    """Create parent dirs and write *content*; returns the written path."""
    target = Path(path)
    target.parent.mkdir(parents=True, exist_ok=True)
    target.write_text(content, encoding="utf-8")
    return target


# ---------------------------------------------------------------------------
# Rich output helpers
# ---------------------------------------------------------------------------


def print_summary_table(rows: list[tuple[str, ...]], columns: tuple[str, ...], title: str = "Summary") -> None:
    """Print a Rich table with one row per entry of *rows*."""
    table = Table(title=title, show_header=True, header_style="bold cyan")
    for column in columns:
        table.add_column(column)
    for row in rows:
        table.add_row(*row)
    console.print(table)


def print_success(message: str) -> None:
    """Print a green success message."""
    console.print(f"[bold green]{escape(message)}[/bold green]", soft_wrap=True)


def print_error(message: str) -> None:
    """Print a red error message."""
    console.print(f"[bold red]{escape(message)}[/bold red]", soft_wrap=True)


def print_warning(message: str) -> None:
    """Print a yellow warning message."""
    console.print(f"[bold yellow]{escape(message)}[/bold yellow]", soft_wrap=True)

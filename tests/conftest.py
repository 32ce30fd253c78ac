"""Shared pytest fixtures for the structgen test suite.

Provides reusable fixtures for:
- Sample declaration batches for each shape
- A python-target configuration
- Executing generated python code and returning its namespace
"""

from __future__ import annotations

import sys
import textwrap
import types
from pathlib import Path
from typing import Any, Callable

import pytest

from structgen.config import Config
from structgen.parser.models import Target


# ---------------------------------------------------------------------------
# Sample batches
# ---------------------------------------------------------------------------

@pytest.fixture
def defaults_batch() -> str:
    """The zero-argument constructor example: a defaults struct, an empty one and a unit."""
    return textwrap.dedent(
        """\
        #[derive(Debug)]
        pub struct A<'a> {
            foo: u8 = 233,
            pub bar: &'a str = "abc",
        }
        struct B {}
        struct C;
        """
    )


@pytest.fixture
def params_batch() -> str:
    """The parameterised constructor example with generics and a where clause."""
    return textwrap.dedent(
        """\
        #[derive(Debug)]
        pub struct A<'a, T>(pub foo: T,) where T: Copy, T: Ord {
            pub bar: &'a str = "bar",
        }
        struct B {}
        struct C;
        """
    )


@pytest.fixture
def mixed_batch() -> str:
    """One declaration of each shape, in unit / defaults / params order."""
    return textwrap.dedent(
        """\
        struct StructA;
        struct StructB { x: i32 = 1 + 2, label: &'static str = "b" }
        struct StructC(first: u8, second: u8) { total: u16 = 0 }
        """
    )


@pytest.fixture
def tmp_input(tmp_path: Path) -> Callable[[str], Path]:
    """Write declaration text to a temporary input file."""

    def _write(text: str, name: str = "structs.rs.in") -> Path:
        path = tmp_path / name
        path.write_text(text, encoding="utf-8")
        return path

    return _write


# ---------------------------------------------------------------------------
# Python target
# ---------------------------------------------------------------------------

@pytest.fixture
def python_config() -> Config:
    """Configuration emitting executable python classes."""
    return Config(target=Target.PYTHON)


@pytest.fixture
def run_python(monkeypatch: pytest.MonkeyPatch) -> Callable[[str], dict[str, Any]]:
    """Execute generated python source as a throwaway module and return its namespace.

    The module is registered in ``sys.modules`` because dataclasses looks up
    the defining module when it inspects string annotations.
    """

    def _run(source: str) -> dict[str, Any]:
        module = types.ModuleType("structgen_generated")
        monkeypatch.setitem(sys.modules, module.__name__, module)
        exec(compile(source, "<structgen>", "exec"), module.__dict__)
        return module.__dict__

    return _run

"""Shared emission helpers for the constructor generators.

``StructEmitter`` renders the pieces every shape needs: the canonical struct
definition, a constructor function and the combined text of a declaration,
for whichever target the configuration selects.
"""

from __future__ import annotations

import keyword
from typing import Optional, Sequence, Union

from structgen.config import Config
from structgen.errors import GenerationError
from structgen.parser.models import (
    DeclShape,
    FieldSpec,
    GeneratedDeclaration,
    ParamSpec,
    StructDeclaration,
    Target,
)

from .templates import TemplateRenderer

Member = Union[ParamSpec, FieldSpec]


class StructEmitter:
    """Renders struct definitions and constructors for one target."""

    def __init__(self, renderer: TemplateRenderer, config: Config) -> None:
        self.renderer = renderer
        self.config = config
        self.ind = " " * config.indent

    @property
    def target(self) -> Target:
        return self.config.target

    # -- Struct definition -------------------------------------------------

    def render_struct(self, decl: StructDeclaration, members: Sequence[Member]) -> str:
        """Render *decl* with *members* as its body (defaults stripped)."""
        if self.target is Target.PYTHON:
            return self._render_python_class(decl, members, methods=[])
        return self.renderer.render(
            "rust/struct.rs.j2",
            {
                "attributes": decl.attributes,
                "head": f"{decl.visibility.prefix()}struct {decl.name}{decl.generic_params}",
                "where_clauses": decl.where_clauses,
                "unit": decl.fields is None,
                "members": list(members),
                "ind": self.ind,
            },
        )

    def _render_python_class(
        self, decl: StructDeclaration, members: Sequence[Member], methods: list[str]
    ) -> str:
        _check_python_name(decl, decl.name)
        for member in members:
            _check_python_member(decl, member.name)
        return self.renderer.render(
            "python/struct.py.j2",
            {
                "comments": _python_comments(decl),
                "name": _python_name(decl.name),
                "members": [_PyMember(m) for m in members],
                "methods": methods,
                "ind": self.ind,
            },
        )

    # -- Constructor -------------------------------------------------------

    def render_constructor(
        self,
        decl: StructDeclaration,
        fn_name: str,
        params: Sequence[ParamSpec],
        fields: Sequence[FieldSpec],
        trait: Optional[str] = None,
    ) -> str:
        """Render a constructor taking *params* and filling *fields* from their defaults.

        With *trait* set (Rust only) the function is emitted as the trait's
        implementation instead of an inherent method.
        """
        if self.target is Target.PYTHON:
            _check_python_name(decl, fn_name)
            for member in [*params, *fields]:
                _check_python_member(decl, member.name)
            return self.renderer.render(
                "python/constructor.py.j2",
                {
                    "fn_name": fn_name,
                    "name": _python_name(decl.name),
                    "params": [f"{_python_name(p.name)}: {p.type.text!r}" for p in params],
                    "inits": [f"{_python_name(p.name)}={_python_name(p.name)}" for p in params]
                    + [f"{_python_name(f.name)}={f.default_expr}" for f in fields],
                    "ind": self.ind,
                },
            )

        type_ref = f"{decl.name}{decl.generic_args}"
        if trait:
            head = f"impl{decl.generic_params} {trait} for {type_ref}"
            signature = f"fn {fn_name}() -> Self"
        else:
            head = f"impl{decl.generic_params} {type_ref}"
            arguments = ", ".join(f"{p.name}: {p.type}" for p in params)
            signature = f"{decl.visibility.prefix()}fn {fn_name}({arguments}) -> Self"
        return self.renderer.render(
            "rust/impl.rs.j2",
            {
                "head": head,
                "where_clauses": decl.where_clauses,
                "signature": signature,
                "name": decl.name,
                "inits": [p.name for p in params] + [f"{f.name}: {f.default_expr}" for f in fields],
                "ind": self.ind,
            },
        )

    # -- Declaration -------------------------------------------------------

    def compose(
        self,
        decl: StructDeclaration,
        shape: DeclShape,
        members: Sequence[Member],
        constructor: Optional[str] = None,
        constructor_name: Optional[str] = None,
    ) -> GeneratedDeclaration:
        """Bundle the artifacts of *decl* into a :class:`GeneratedDeclaration`."""
        struct_def = self.render_struct(decl, members)
        if constructor is None:
            text = struct_def
        elif self.target is Target.PYTHON:
            methods = constructor.split("\n")
            text = self._render_python_class(decl, members, methods)
        else:
            text = f"{struct_def}\n\n{constructor}"
        return GeneratedDeclaration(
            name=decl.name,
            shape=shape,
            struct_def=struct_def,
            constructor=constructor,
            constructor_name=constructor_name,
            text=text,
        )


# ---------------------------------------------------------------------------
# Python target helpers
# ---------------------------------------------------------------------------

class _PyMember:
    """Template view of a member with its raw-identifier prefix removed."""

    def __init__(self, member: Member) -> None:
        self.name = _python_name(member.name)
        self.type = member.type


def _python_name(name: str) -> str:
    return name[2:] if name.startswith("r#") else name


def _check_python_name(decl: StructDeclaration, name: str) -> None:
    if keyword.iskeyword(_python_name(name)):
        raise GenerationError(
            f"`{name}` is a Python keyword and cannot be used as a name in the python target",
            decl.index,
        )


def _check_python_member(decl: StructDeclaration, name: str) -> None:
    _check_python_name(decl, name)
    # The generated classmethod's first argument.
    if _python_name(name) == "cls":
        raise GenerationError(
            f"`{name}` clashes with the constructor's `cls` argument in the python target",
            decl.index,
        )


def _python_comments(decl: StructDeclaration) -> list[str]:
    """Keep the Rust-only parts of the header visible as comments."""
    if not (decl.attributes or decl.generics or decl.where_clauses):
        return []
    lines = [" ".join(f"#[{attr}]".split()) for attr in decl.attributes]
    header = f"{decl.visibility.prefix()}struct {decl.name}{decl.generic_params}"
    if decl.where_clauses:
        header += " where " + ", ".join(c.render() for c in decl.where_clauses)
    lines.append(" ".join(header.split()))
    return lines

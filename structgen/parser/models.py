"""Pydantic v2 models for parsed struct declarations and generated output.

Defines the declaration hierarchy produced by the grammar reader and consumed
by the scaffolder, plus the result objects returned by a generation pass.
Types, default expressions and where-bounds are kept as opaque source text.
"""

from __future__ import annotations

from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field


# ---------------------------------------------------------------------------
# Enumerations
# ---------------------------------------------------------------------------

class VisibilityKind(str, Enum):
    """Visibility of a struct, field or generated function."""
    PRIVATE = "private"
    PUBLIC = "public"
    RESTRICTED = "restricted"


class DeclShape(str, Enum):
    """The three recognised declaration forms."""
    UNIT = "unit"
    FIELDS_WITH_DEFAULTS = "fields_with_defaults"
    PARAMS_AND_FIELDS = "params_and_fields"


class Mode(str, Enum):
    """Which constructor the generator produces."""
    DEFAULT = "default"
    NEW = "new"


class Target(str, Enum):
    """Language the generated artifacts are written in."""
    RUST = "rust"
    PYTHON = "python"


# ---------------------------------------------------------------------------
# Declaration building blocks
# ---------------------------------------------------------------------------

class Visibility(BaseModel):
    """A visibility qualifier, rendered back exactly as written."""
    kind: VisibilityKind = Field(default=VisibilityKind.PRIVATE)
    scope: str = Field(
        default="", description="Restriction for restricted visibility, e.g. 'crate' or 'in a::b'"
    )

    def render(self) -> str:
        """Return the qualifier text (empty for private)."""
        if self.kind is VisibilityKind.PUBLIC:
            return "pub"
        if self.kind is VisibilityKind.RESTRICTED:
            return f"pub({self.scope})"
        return ""

    def prefix(self) -> str:
        """Return the qualifier followed by a space, or nothing when private."""
        text = self.render()
        return f"{text} " if text else ""


class Expr(BaseModel):
    """An opaque, unevaluated slice of source text."""
    text: str = Field(..., min_length=1)

    def __str__(self) -> str:
        return self.text


class GenericParam(BaseModel):
    """A generic parameter such as ``'a``, ``T: Clone`` or ``const N: usize``."""
    name: str = Field(..., description="Use-site form, e.g. \"'a\", 'T' or 'N'")
    text: str = Field(..., description="Declaration-site form including bounds")


class WhereClause(BaseModel):
    """One ``bounded: bound`` predicate of a where clause."""
    bounded: Expr
    bound: Expr

    def render(self) -> str:
        return f"{self.bounded}: {self.bound}"


class FieldSpec(BaseModel):
    """A field filled from its default expression."""
    visibility: Visibility = Field(default_factory=Visibility)
    name: str
    type: Expr
    default_expr: Expr


class ParamSpec(BaseModel):
    """A field supplied by the caller of the generated constructor."""
    visibility: Visibility = Field(default_factory=Visibility)
    name: str
    type: Expr


# ---------------------------------------------------------------------------
# Declarations
# ---------------------------------------------------------------------------

class StructDeclaration(BaseModel):
    """One struct declaration from a batch.

    ``params`` is ``None`` when no parameter list was written (an empty
    ``()`` gives an empty list) and ``fields`` is ``None`` for the unit form.
    """
    visibility: Visibility = Field(default_factory=Visibility)
    attributes: list[str] = Field(
        default_factory=list, description="Attribute bodies, e.g. 'derive(Debug)'"
    )
    name: str
    generics: list[GenericParam] = Field(default_factory=list)
    where_clauses: list[WhereClause] = Field(default_factory=list)
    params: Optional[list[ParamSpec]] = None
    fields: Optional[list[FieldSpec]] = None
    index: int = Field(default=0, ge=0, description="Position in the batch")
    offset: int = Field(default=0, ge=0, description="Source offset of the declaration")
    shape: Optional[DeclShape] = None

    @property
    def generic_params(self) -> str:
        """Declaration-site generics, e.g. ``<'a, T: Clone>``, or empty."""
        if not self.generics:
            return ""
        return "<" + ", ".join(g.text for g in self.generics) + ">"

    @property
    def generic_args(self) -> str:
        """Use-site generics, e.g. ``<'a, T>``, or empty."""
        if not self.generics:
            return ""
        return "<" + ", ".join(g.name for g in self.generics) + ">"


# ---------------------------------------------------------------------------
# Generation output
# ---------------------------------------------------------------------------

class GeneratedDeclaration(BaseModel):
    """The artifacts emitted for a single declaration."""
    name: str
    shape: DeclShape
    struct_def: str = Field(..., description="The canonical struct definition")
    constructor: Optional[str] = Field(
        default=None, description="The generated constructor, if the shape has one"
    )
    constructor_name: Optional[str] = None
    text: str = Field(..., description="Struct and constructor as they appear in the output")


class GenerationResult(BaseModel):
    """Complete result of one batch."""
    mode: Mode
    target: Target
    declarations: list[GeneratedDeclaration] = Field(default_factory=list)
    text: str = Field(default="")

    @property
    def struct_count(self) -> int:
        return len(self.declarations)

    @property
    def function_count(self) -> int:
        return sum(1 for d in self.declarations if d.constructor is not None)

"""Shape classification for parsed declarations.

The shape is decided by structure alone: whether a field block was written
and whether a parameter list precedes it.  ``check_mode`` then rejects
shapes the selected generator does not accept.
"""

from __future__ import annotations

from structgen.errors import ShapeError

from .models import DeclShape, Mode, StructDeclaration


# Shapes each generator mode accepts.
ACCEPTED_SHAPES: dict[Mode, frozenset[DeclShape]] = {
    Mode.DEFAULT: frozenset({DeclShape.UNIT, DeclShape.FIELDS_WITH_DEFAULTS}),
    Mode.NEW: frozenset(DeclShape),
}

_SHAPE_EXAMPLES: dict[DeclShape, str] = {
    DeclShape.UNIT: "`struct Name;`",
    DeclShape.FIELDS_WITH_DEFAULTS: "`struct Name { field: Type = expr, ... }`",
    DeclShape.PARAMS_AND_FIELDS: "`struct Name(param: Type, ...) { field: Type = expr, ... }`",
}


def classify(decl: StructDeclaration) -> DeclShape:
    """Return the shape of *decl*."""
    if decl.fields is None:
        return DeclShape.UNIT
    if decl.params is not None:
        return DeclShape.PARAMS_AND_FIELDS
    return DeclShape.FIELDS_WITH_DEFAULTS


def check_mode(decl: StructDeclaration, mode: Mode) -> DeclShape:
    """Classify *decl*, store the shape on it and verify *mode* accepts it.

    Raises:
        ShapeError: If the shape is not accepted by *mode*.
    """
    shape = classify(decl)
    accepted = ACCEPTED_SHAPES[mode]
    if shape not in accepted:
        expected = " or ".join(_SHAPE_EXAMPLES[s] for s in DeclShape if s in accepted)
        raise ShapeError(
            f"parameter lists are not accepted by the `{mode.value}` generator; expected {expected}",
            decl.offset,
            decl.index,
            decl.name,
        )
    decl.shape = shape
    return shape

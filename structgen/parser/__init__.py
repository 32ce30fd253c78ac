"""structgen declaration parser.

Tokenises batches of extended struct declarations, reads them into typed
models and classifies each one into a shape.

Usage::

    from structgen.parser import parse_batch, classify

    for decl in parse_batch(text):
        print(decl.name, classify(decl))
"""

from structgen.parser.classifier import check_mode, classify
from structgen.parser.extractor import parse_batch
from structgen.parser.models import (
    DeclShape,
    Expr,
    FieldSpec,
    GeneratedDeclaration,
    GenerationResult,
    GenericParam,
    Mode,
    ParamSpec,
    StructDeclaration,
    Target,
    Visibility,
    VisibilityKind,
    WhereClause,
)

__all__ = [
    "parse_batch",
    "classify",
    "check_mode",
    "DeclShape",
    "Expr",
    "FieldSpec",
    "GeneratedDeclaration",
    "GenerationResult",
    "GenericParam",
    "Mode",
    "ParamSpec",
    "StructDeclaration",
    "Target",
    "Visibility",
    "VisibilityKind",
    "WhereClause",
]

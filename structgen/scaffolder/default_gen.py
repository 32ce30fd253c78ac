"""Zero-argument constructor generation.

For a declaration whose fields all carry default expressions, emits the
struct definition with the defaults stripped and a constructor (named
``default`` unless configured otherwise) that builds an instance from those
expressions, in field order, when it is called.
"""

from __future__ import annotations

from structgen.parser.models import DeclShape, GeneratedDeclaration, StructDeclaration, Target

from .base import StructEmitter


class DefaultConstructorGenerator(StructEmitter):
    """Generates the struct and its zero-argument constructor."""

    def generate(self, decl: StructDeclaration) -> GeneratedDeclaration:
        fields = decl.fields or []
        fn_name = self.config.default_fn_name
        # Only a function called ``default`` can implement the Default trait.
        trait = "Default" if self.target is Target.RUST and fn_name == "default" else None
        constructor = self.render_constructor(decl, fn_name, [], fields, trait=trait)
        return self.compose(
            decl,
            DeclShape.FIELDS_WITH_DEFAULTS,
            fields,
            constructor=constructor,
            constructor_name=fn_name,
        )

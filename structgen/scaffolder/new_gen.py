"""Parameterised constructor generation.

Emits the struct with the caller-supplied parameter fields first and the
default-filled fields after them, and a constructor (``new`` by default)
that takes exactly the parameters and evaluates the defaults when called.
A declaration without a parameter list gets a zero-argument ``new()``.
"""

from __future__ import annotations

from structgen.parser.classifier import classify
from structgen.parser.models import GeneratedDeclaration, StructDeclaration

from .base import Member, StructEmitter


class ParamConstructorGenerator(StructEmitter):
    """Generates the struct and its parameterised constructor."""

    def generate(self, decl: StructDeclaration) -> GeneratedDeclaration:
        params = decl.params or []
        fields = decl.fields or []
        members: list[Member] = [*params, *fields]
        fn_name = self.config.new_fn_name
        constructor = self.render_constructor(decl, fn_name, params, fields)
        shape = decl.shape or classify(decl)
        return self.compose(decl, shape, members, constructor=constructor, constructor_name=fn_name)

"""Per-declaration dispatch.

``StructGenerator`` takes one classified declaration and hands it to the
generator for its shape.  Unit declarations never get a constructor.
"""

from __future__ import annotations

from typing import Optional

from structgen.config import Config
from structgen.errors import ShapeError
from structgen.parser.classifier import check_mode
from structgen.parser.models import DeclShape, GeneratedDeclaration, Mode, StructDeclaration

from .base import StructEmitter
from .default_gen import DefaultConstructorGenerator
from .new_gen import ParamConstructorGenerator
from .templates import TemplateRenderer


class StructGenerator:
    """Shape dispatcher for one generator mode.

    Given a ``Config`` and a ``Mode``, turns each declaration into its struct
    definition plus the constructor its shape calls for.
    """

    def __init__(self, mode: Mode, config: Optional[Config] = None) -> None:
        self.mode = mode
        self.config = config or Config()
        self.renderer = TemplateRenderer(self.config.template_dir)
        self.emitter = StructEmitter(self.renderer, self.config)
        self.default_gen = DefaultConstructorGenerator(self.renderer, self.config)
        self.new_gen = ParamConstructorGenerator(self.renderer, self.config)

    def generate(self, decl: StructDeclaration) -> GeneratedDeclaration:
        """Classify *decl* and emit its artifacts.

        Raises:
            ShapeError: If the shape is not accepted by this generator's mode.
            GenerationError: If the target cannot express the declaration.
        """
        shape = check_mode(decl, self.mode)
        if shape is DeclShape.UNIT:
            return self.emitter.compose(decl, shape, [])
        if shape is DeclShape.FIELDS_WITH_DEFAULTS:
            if self.mode is Mode.NEW:
                return self.new_gen.generate(decl)
            return self.default_gen.generate(decl)
        if shape is DeclShape.PARAMS_AND_FIELDS:
            return self.new_gen.generate(decl)
        raise ShapeError(f"unsupported declaration shape {shape!r}", decl.offset, decl.index, decl.name)

"""structgen scaffolder -- emits struct definitions and their constructors.

Quick usage::

    from structgen.scaffolder import StructGenerator
    from structgen.parser import Mode, parse_batch

    generator = StructGenerator(Mode.DEFAULT)
    for decl in parse_batch(text):
        print(generator.generate(decl).text)
"""

from structgen.scaffolder.default_gen import DefaultConstructorGenerator
from structgen.scaffolder.generator import StructGenerator
from structgen.scaffolder.new_gen import ParamConstructorGenerator
from structgen.scaffolder.templates import TemplateRenderer

__all__ = [
    "DefaultConstructorGenerator",
    "ParamConstructorGenerator",
    "StructGenerator",
    "TemplateRenderer",
]

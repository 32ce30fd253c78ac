"""structgen -- struct scaffolding generator.

Reads Rust-style struct declarations whose fields carry inline default
expressions and emits the plain struct definitions together with generated
``default()`` or ``new(...)`` constructors.

Usage::

    from structgen import struct_default, struct_new

    print(struct_default("struct A { foo: u8 = 233, bar: &'static str = \\"abc\\" }"))
    print(struct_new("struct A<T>(foo: T) { bar: &'static str = \\"bar\\" }"))
"""

__version__ = "0.1.0"

from structgen.config import Config
from structgen.errors import GenerationError, ParseError, ShapeError, StructgenError
from structgen.pipeline import generate, struct_default, struct_new

__all__ = [
    "__version__",
    "Config",
    "GenerationError",
    "ParseError",
    "ShapeError",
    "StructgenError",
    "generate",
    "struct_default",
    "struct_new",
]

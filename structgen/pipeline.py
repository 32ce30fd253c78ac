"""structgen batch pipeline.

Turns a batch of extended struct declarations into generated code:

1. PARSE    -- read every declaration of the batch.
2. CLASSIFY -- decide each declaration's shape and check the mode accepts it.
3. EMIT     -- render the struct definition and its constructor.

Declarations are processed one after another, independently of each other.
Any error aborts the whole batch before output is produced.

Usage::

    structgen default structs.rs.in -o structs.rs
    structgen new structs.rs.in --target python
    python -m structgen.pipeline new structs.rs.in --check -o structs.rs
"""

from __future__ import annotations

import sys
from pathlib import Path
from typing import Optional

from structgen import __version__
from structgen.config import Config
from structgen.errors import ParseError, StructgenError
from structgen.parser.extractor import parse_batch
from structgen.parser.models import GeneratedDeclaration, GenerationResult, Mode, Target
from structgen.scaffolder.generator import StructGenerator
from structgen.utils import (
    compute_digest,
    extract_digest,
    line_col,
    print_error,
    print_success,
    print_summary_table,
    print_warning,
    read_source,
    write_text,
)

# Blank lines between consecutive declarations, per target.
_SEPARATORS: dict[Target, str] = {
    Target.RUST: "\n\n",
    Target.PYTHON: "\n\n\n",
}
_MODULE_TEMPLATES: dict[Target, str] = {
    Target.RUST: "rust/module.rs.j2",
    Target.PYTHON: "python/module.py.j2",
}


# ---------------------------------------------------------------------------
# Batch generation
# ---------------------------------------------------------------------------


def generate(text: str, mode: Mode | str, config: Optional[Config] = None) -> GenerationResult:
    """Generate code for every declaration in *text*.

    Args:
        text: The batch of declarations.
        mode: ``"default"`` for zero-argument constructors, ``"new"`` for
            parameterised ones.
        config: Generator configuration; defaults to ``Config()``.

    Returns:
        The generated declarations, in input order, and the combined text.

    Raises:
        StructgenError: On the first declaration that cannot be generated.
            Nothing is returned for the rest of the batch.
    """
    mode = Mode(mode)
    config = config or Config()
    generator = StructGenerator(mode, config)

    declarations = parse_batch(text)
    generated: list[GeneratedDeclaration] = []
    for decl in declarations:
        generated.append(generator.generate(decl))

    header: list[str] = []
    if config.emit_header:
        settings = config.model_dump_json(exclude={"emit_header"})
        header = [
            f"@generated by structgen {__version__} ({mode.value} mode)",
            f"digest: {compute_digest(__version__, mode.value, settings, text)}",
        ]

    if generated or header:
        body = _SEPARATORS[config.target].join(d.text for d in generated)
        output = generator.renderer.render(
            _MODULE_TEMPLATES[config.target], {"header": header, "body": body}
        ) + "\n"
    else:
        output = ""

    return GenerationResult(mode=mode, target=config.target, declarations=generated, text=output)


def struct_default(text: str, config: Optional[Config] = None) -> str:
    """Return the structs in *text* with a ``default`` constructor each."""
    return generate(text, Mode.DEFAULT, config).text


def struct_new(text: str, config: Optional[Config] = None) -> str:
    """Return the structs in *text* with a ``new`` constructor each."""
    return generate(text, Mode.NEW, config).text


# ---------------------------------------------------------------------------
# CLI entry point
# ---------------------------------------------------------------------------


def _report(label: str, source: str, error: StructgenError) -> None:
    if isinstance(error, ParseError):
        line, col = line_col(source, error.index)
        print_error(f"{label}:{line}:{col}: error: {error}")
    else:
        print_error(f"{label}: error: {error}")


def _hand_edited(existing: str, rendered: str) -> bool:
    """Same recorded digest but different text: the file was edited after generation."""
    digest = extract_digest(existing)
    return digest is not None and digest == extract_digest(rendered)


def _check(output: Path, rendered: str) -> int:
    """Compare the full text of *output* with *rendered*."""
    if not output.exists():
        print_error(f"{output} is missing (run structgen)")
        return 1
    existing = output.read_text(encoding="utf-8")
    if existing != rendered:
        if _hand_edited(existing, rendered):
            print_error(f"{output} was edited after generation (run structgen)")
        else:
            print_error(f"{output} is out of date (run structgen)")
        return 1
    print_success(f"up-to-date: {output}")
    return 0


def _write(output: Path, rendered: str) -> int:
    """Write *rendered* unless *output* already holds exactly that text."""
    if output.exists():
        existing = output.read_text(encoding="utf-8")
        if existing == rendered:
            print_success(f"unchanged: {output}")
            return 0
        if _hand_edited(existing, rendered):
            print_warning(f"overwriting hand edits in {output}")
    write_text(output, rendered)
    print_success(f"generated: {output}")
    return 0


def run(argv: Optional[list[str]] = None) -> int:
    """Run the CLI with *argv* and return the process exit status."""
    import argparse

    parser = argparse.ArgumentParser(
        prog="structgen",
        description="Generate structs and their constructors from declarations with inline defaults",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=(
            "Examples:\n"
            "  structgen default structs.rs.in -o structs.rs\n"
            "  structgen new structs.rs.in --target python\n"
            "  structgen new structs.rs.in -o structs.rs --check\n"
        ),
    )
    parser.add_argument("mode", choices=[m.value for m in Mode], help="Constructor to generate")
    parser.add_argument("input", help="Declaration file, or '-' for stdin")
    parser.add_argument("--output", "-o", default=None, help="Output file (default: stdout)")
    parser.add_argument(
        "--target",
        choices=[t.value for t in Target],
        default=None,
        help="Output language (default: rust, or $STRUCTGEN_TARGET)",
    )
    parser.add_argument(
        "--header",
        action=argparse.BooleanOptionalAction,
        default=None,
        help="Prefix the output with a generated-by header and digest",
    )
    parser.add_argument("--check", action="store_true", help="Check the output file is up to date")
    parser.add_argument("--verbose", "-v", action="store_true", help="Print a summary table")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")

    args = parser.parse_args(argv)

    if args.check and not args.output:
        print_error("error: --check requires --output")
        return 2
    if args.input != "-" and not Path(args.input).exists():
        print_error(f"error: input file does not exist: {args.input}")
        return 1

    label = "<stdin>" if args.input == "-" else args.input
    try:
        config = Config.from_env()
    except ValueError as exc:
        print_error(f"error: invalid STRUCTGEN_* environment setting: {exc}")
        return 1
    if args.target:
        config.target = Target(args.target)
    if args.header is not None:
        config.emit_header = args.header

    try:
        source = read_source(args.input)
    except (OSError, UnicodeDecodeError) as exc:
        print_error(f"{label}: error: cannot read input: {exc}")
        return 1
    try:
        result = generate(source, args.mode, config)
    except StructgenError as exc:
        _report(label, source, exc)
        return 1

    if not result.declarations:
        print_warning(f"{label}: no struct declarations found")
    if args.verbose:
        print_summary_table(
            [
                (str(i + 1), d.name, d.shape.value, d.constructor_name or "-")
                for i, d in enumerate(result.declarations)
            ],
            columns=("#", "Struct", "Shape", "Constructor"),
            title=f"structgen {result.mode.value} ({result.target.value})",
        )

    if args.output is None:
        sys.stdout.write(result.text)
        return 0

    output = Path(args.output)
    if args.check:
        return _check(output, result.text)
    return _write(output, result.text)


def main() -> None:
    """CLI entry point for ``structgen`` and ``python -m structgen.pipeline``."""
    sys.exit(run())


if __name__ == "__main__":
    main()

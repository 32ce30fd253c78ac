"""Jinja2 template rendering for generated struct code.

Provides the TemplateRenderer class which loads Jinja2 templates from the
``structgen/scaffolder/templates/`` directory (one subdirectory per output
target) and renders them with per-declaration context data.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

from jinja2 import Environment, FileSystemLoader, StrictUndefined

from structgen.parser.models import Visibility


# ---------------------------------------------------------------------------
# Template directory discovery
# ---------------------------------------------------------------------------

_DEFAULT_TEMPLATE_DIR = Path(__file__).parent / "templates"


# ---------------------------------------------------------------------------
# TemplateRenderer
# ---------------------------------------------------------------------------


class TemplateRenderer:
    """Renders Jinja2 templates for struct scaffolding.

    Templates are line oriented: every block tag sits on its own line and is
    removed entirely from the output, so each rendered line corresponds to
    one emitted source line.  Autoescaping is off because the output is
    source code, not HTML.
    """

    def __init__(self, template_dir: str | Path | None = None) -> None:
        if template_dir is None:
            template_dir = _DEFAULT_TEMPLATE_DIR
        self.template_dir = Path(template_dir)
        self.env = Environment(
            loader=FileSystemLoader(str(self.template_dir)),
            autoescape=False,
            undefined=StrictUndefined,
            keep_trailing_newline=True,
            trim_blocks=True,
            lstrip_blocks=True,
        )
        # Register custom filters
        self.env.filters["vis"] = _visibility_filter
        self.env.filters["pyrepr"] = _pyrepr_filter

    def render(self, template_path: str, context: dict[str, Any]) -> str:
        """Render a single template with the provided context.

        Args:
            template_path: Path relative to the template directory (e.g.
                ``"rust/struct.rs.j2"``).
            context: Dictionary of variables available inside the template.

        Returns:
            The rendered text with trailing newlines removed.
        """
        template = self.env.get_template(template_path)
        return template.render(**context).rstrip("\n")

    def list_templates(self, prefix: str = "") -> list[str]:
        """Return a sorted list of all ``.j2`` template paths under *prefix*.

        Paths are relative to the template root directory.
        """
        search_dir = self.template_dir / prefix if prefix else self.template_dir
        if not search_dir.is_dir():
            return []
        return sorted(
            p.relative_to(self.template_dir).as_posix()
            for p in search_dir.rglob("*.j2")
        )


# ---------------------------------------------------------------------------
# Jinja2 custom filters
# ---------------------------------------------------------------------------

def _visibility_filter(value: Visibility) -> str:
    """Render a visibility qualifier followed by a space, or nothing when private."""
    return value.prefix()


def _pyrepr_filter(value: str) -> str:
    """Render *value* as a Python string literal."""
    return repr(value)

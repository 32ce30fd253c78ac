"""structgen configuration.

Centralised, typed configuration for the generator. Settings use a Pydantic
v2 model so they are validated at construction time and can be serialised
to/from JSON or read from environment variables.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any, Optional

from pydantic import BaseModel, Field, field_validator

from structgen.parser.models import Target


class Config(BaseModel):
    """Global structgen configuration.

    Instances are created once by the CLI (or by the caller of
    :func:`structgen.pipeline.generate`) and passed to the scaffolder.
    """

    target: Target = Field(default=Target.RUST, description="Language of the emitted code")
    indent: int = Field(default=4, ge=1, le=16, description="Spaces per indentation level")
    default_fn_name: str = Field(
        default="default", description="Name of the zero-argument constructor"
    )
    new_fn_name: str = Field(
        default="new", description="Name of the parameterised constructor"
    )
    emit_header: bool = Field(
        default=False, description="Prefix output with a generated-by header and digest"
    )
    template_dir: Optional[Path] = Field(
        default=None, description="Override for the bundled Jinja2 templates"
    )

    @field_validator("default_fn_name", "new_fn_name")
    @classmethod
    def _check_identifier(cls, value: str) -> str:
        if not value.isidentifier():
            raise ValueError(f"not a valid function name: {value!r}")
        return value

    # ------------------------------------------------------------------
    # Serialisation helpers
    # ------------------------------------------------------------------

    def save(self, path: Path) -> Path:
        """Persist the configuration to a JSON file.

        Returns:
            The path where the file was written.
        """
        target = Path(path)
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(self.model_dump_json(indent=2), encoding="utf-8")
        return target

    @classmethod
    def load(cls, path: Path) -> "Config":
        """Load a previously-saved configuration from JSON."""
        raw = Path(path).read_text(encoding="utf-8")
        return cls.model_validate_json(raw)

    @classmethod
    def from_env(cls) -> "Config":
        """Build a ``Config`` from environment variables.

        Recognised variables (all optional):
            STRUCTGEN_TARGET, STRUCTGEN_INDENT, STRUCTGEN_DEFAULT_FN,
            STRUCTGEN_NEW_FN, STRUCTGEN_HEADER, STRUCTGEN_TEMPLATE_DIR.
        """
        kwargs: dict[str, Any] = {}
        if os.environ.get("STRUCTGEN_TARGET"):
            kwargs["target"] = os.environ["STRUCTGEN_TARGET"]
        if os.environ.get("STRUCTGEN_INDENT"):
            kwargs["indent"] = int(os.environ["STRUCTGEN_INDENT"])
        if os.environ.get("STRUCTGEN_DEFAULT_FN"):
            kwargs["default_fn_name"] = os.environ["STRUCTGEN_DEFAULT_FN"]
        if os.environ.get("STRUCTGEN_NEW_FN"):
            kwargs["new_fn_name"] = os.environ["STRUCTGEN_NEW_FN"]
        if os.environ.get("STRUCTGEN_HEADER"):
            kwargs["emit_header"] = os.environ["STRUCTGEN_HEADER"].strip().lower() in (
                "1", "true", "yes", "on",
            )
        if os.environ.get("STRUCTGEN_TEMPLATE_DIR"):
            kwargs["template_dir"] = Path(os.environ["STRUCTGEN_TEMPLATE_DIR"])
        return cls(**kwargs)

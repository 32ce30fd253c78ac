"""Exception hierarchy for structgen.

Every failure is detected while generating, before any emitted code runs.
Errors carry the source offset they refer to and, once known, the position
of the offending declaration in its batch so the CLI can point at it.
"""

from __future__ import annotations

from typing import Optional


class StructgenError(Exception):
    """Base class for all structgen failures."""


class ParseError(StructgenError):
    """The input does not match any recognised declaration shape."""

    def __init__(
        self,
        message: str,
        index: int,
        declaration_index: Optional[int] = None,
        name: Optional[str] = None,
    ) -> None:
        self.message = message
        self.index = index
        self.declaration_index = declaration_index
        self.name = name
        super().__init__(self._format())

    def _format(self) -> str:
        if self.declaration_index is None:
            return self.message
        where = f"declaration #{self.declaration_index + 1}"
        if self.name:
            where += f" (`{self.name}`)"
        return f"{where}: {self.message}"

    def __str__(self) -> str:
        return self._format()


class ShapeError(ParseError):
    """A well-formed declaration whose shape the current mode does not accept."""


class GenerationError(StructgenError):
    """The target language cannot express a parsed declaration."""

    def __init__(self, message: str, declaration_index: Optional[int] = None) -> None:
        self.declaration_index = declaration_index
        if declaration_index is not None:
            message = f"declaration #{declaration_index + 1}: {message}"
        super().__init__(message)

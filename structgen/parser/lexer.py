"""Tokeniser for Rust-style struct declarations.

Splits declaration text into a flat list of :class:`Token` objects.  Tokens
keep their source offsets so that types and default expressions can later be
relocated as the exact slice of the input they came from, untouched.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

from structgen.errors import ParseError


# ---------------------------------------------------------------------------
# Token kinds
# ---------------------------------------------------------------------------

IDENT = "IDENT"
LIFETIME = "LIFETIME"
CHAR = "CHAR"
STRING = "STRING"
NUMBER = "NUMBER"
PUNCT = "PUNCT"
EOF = "EOF"

# Order matters: longer punctuation must be tried before its prefixes, and
# char literals before lifetimes.
_TOKEN_SPECS: list[tuple[str, str]] = [
    (STRING, r'b?r(?P<hashes>#*)"(?:.|\n)*?"(?P=hashes)'),
    (STRING, r'b?"(?:\\.|\\\n|[^"\\])*"'),
    (CHAR, r"b?'(?:\\(?:x[0-9a-fA-F]{2}|u\{[0-9a-fA-F]{1,6}\}|.)|[^'\\\n])'"),
    (LIFETIME, r"'[A-Za-z_][A-Za-z0-9_]*"),
    (IDENT, r"r#[A-Za-z_][A-Za-z0-9_]*"),
    (IDENT, r"[A-Za-z_][A-Za-z0-9_]*"),
    (
        NUMBER,
        r"(?:0x[0-9a-fA-F_]+|0o[0-7_]+|0b[01_]+|[0-9][0-9_]*(?:\.[0-9][0-9_]*)?"
        r"(?:[eE][+-]?[0-9_]+)?)(?:[iu](?:8|16|32|64|128|size)|f32|f64)?",
    ),
    (
        PUNCT,
        r"\.\.\.|\.\.=|<<=|>>=|::|->|=>|==|!=|<=|>=|&&|\|\||\.\.|<<|>>"
        r"|\+=|-=|\*=|/=|%=|\^=|&=|\|=",
    ),
    (PUNCT, r"[{}()\[\]<>,;:=#!&|+\-*/%^.?@~$]"),
]

_TOKEN_REGEXES = [(kind, re.compile(pattern)) for kind, pattern in _TOKEN_SPECS]
_WHITESPACE = re.compile(r"\s+")


@dataclass(frozen=True)
class Token:
    """A single lexical token with its half-open source span."""

    kind: str
    value: str
    start: int
    end: int

    def is_punct(self, value: str) -> bool:
        return self.kind == PUNCT and self.value == value

    def is_keyword(self, value: str) -> bool:
        return self.kind == IDENT and self.value == value


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def tokenize(text: str) -> list[Token]:
    """Tokenise *text* and return the tokens followed by a single EOF token.

    Whitespace and comments are dropped.

    Raises:
        ParseError: On an unterminated block comment or an unexpected
            character.
    """
    tokens: list[Token] = []
    pos = 0
    length = len(text)

    while True:
        pos = _skip_trivia(text, pos)
        if pos >= length:
            break
        for kind, regex in _TOKEN_REGEXES:
            match = regex.match(text, pos)
            if match:
                tokens.append(Token(kind, match.group(0), pos, match.end()))
                pos = match.end()
                break
        else:
            if text[pos] in "\"'":
                raise ParseError("unterminated literal", pos)
            raise ParseError(f"unexpected character {text[pos]!r}", pos)

    tokens.append(Token(EOF, "", length, length))
    return tokens


def _skip_trivia(text: str, pos: int) -> int:
    """Advance past whitespace, line comments and (nested) block comments."""
    length = len(text)
    while pos < length:
        match = _WHITESPACE.match(text, pos)
        if match:
            pos = match.end()
            continue
        if text.startswith("//", pos):
            newline = text.find("\n", pos + 2)
            if newline == -1:
                return length
            pos = newline + 1
            continue
        if text.startswith("/*", pos):
            pos = _skip_block_comment(text, pos)
            continue
        break
    return pos


def _skip_block_comment(text: str, start: int) -> int:
    depth = 0
    pos = start
    while pos < len(text):
        if text.startswith("/*", pos):
            depth += 1
            pos += 2
        elif text.startswith("*/", pos):
            depth -= 1
            pos += 2
            if depth == 0:
                return pos
        else:
            pos += 1
    raise ParseError("unterminated block comment", start)

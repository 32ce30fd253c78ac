"""Grammar reader for batches of extended struct declarations.

Reads declarations of the form::

    #[derive(Debug)]
    pub struct A<'a, T>(pub foo: T) where T: Copy {
        pub bar: &'a str = "bar",
    }
    struct B { baz: u8 = 1 }
    struct C;

Types, default expressions and where-bounds are never interpreted: the reader
only finds where they end and keeps the exact source slice.  Any input that
does not fit one of the recognised shapes raises :class:`ParseError` and the
whole batch is rejected.
"""

from __future__ import annotations

from typing import Optional

from structgen.errors import ParseError

from .lexer import EOF, IDENT, LIFETIME, PUNCT, Token, tokenize
from .models import (
    Expr,
    FieldSpec,
    GenericParam,
    ParamSpec,
    StructDeclaration,
    Visibility,
    VisibilityKind,
    WhereClause,
)


# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

EXPECTED_SHAPES = (
    "`struct Name;`, `struct Name { field: Type = expr, ... }` or "
    "`struct Name(param: Type, ...) { field: Type = expr, ... }`"
)

_OPENERS = {"(": ")", "[": "]", "{": "}"}
_CLOSERS = {")", "]", "}"}
_RESTRICTED_SCOPES = {"crate", "super", "self", "in"}
# Tokens that start with '>' or '<' and must be split inside angle brackets.
_SPLITTABLE = {">>", ">=", ">>=", "<<", "<=", "<<="}


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def parse_batch(text: str) -> list[StructDeclaration]:
    """Parse every declaration in *text*, in source order.

    Returns an empty list for input containing only whitespace and comments.

    Raises:
        ParseError: On the first declaration that matches no shape.
    """
    reader = _DeclarationReader(text, tokenize(text))
    declarations: list[StructDeclaration] = []
    while not reader.at_eof():
        declarations.append(reader.read_declaration(len(declarations)))
    return declarations


# ---------------------------------------------------------------------------
# Reader
# ---------------------------------------------------------------------------

class _DeclarationReader:
    """Recursive-descent reader over a token list."""

    def __init__(self, text: str, tokens: list[Token]) -> None:
        self.text = text
        self.tokens = tokens
        self.pos = 0
        self.decl_index: Optional[int] = None
        self.decl_name: Optional[str] = None

    # -- Token helpers -----------------------------------------------------

    def peek(self, offset: int = 0) -> Token:
        index = min(self.pos + offset, len(self.tokens) - 1)
        return self.tokens[index]

    def advance(self) -> Token:
        token = self.peek()
        if token.kind != EOF:
            self.pos += 1
        return token

    def at_eof(self) -> bool:
        return self.peek().kind == EOF

    def error(self, message: str, token: Optional[Token] = None) -> ParseError:
        index = (token or self.peek()).start
        return ParseError(message, index, self.decl_index, self.decl_name)

    def expect_punct(self, value: str, context: str) -> Token:
        token = self.peek()
        if not token.is_punct(value):
            raise self.error(f"expected `{value}` {context}, found {_describe(token)}")
        return self.advance()

    def expect_ident(self, what: str) -> str:
        token = self.peek()
        if token.kind != IDENT:
            raise self.error(f"expected {what}, found {_describe(token)}")
        self.advance()
        return token.value

    def slice(self, first: Token, last: Token) -> str:
        return self.text[first.start:last.end]

    def split_token(self) -> None:
        """Split a compound ``>>``-style token into its first character and the rest."""
        token = self.peek()
        head = Token(PUNCT, token.value[0], token.start, token.start + 1)
        tail = Token(PUNCT, token.value[1:], token.start + 1, token.end)
        self.tokens[self.pos:self.pos + 1] = [head, tail]

    # -- Declarations ------------------------------------------------------

    def read_declaration(self, index: int) -> StructDeclaration:
        self.decl_index = index
        self.decl_name = None
        start = self.peek()

        attributes = self.read_attributes()
        visibility = self.read_visibility()
        token = self.peek()
        if not token.is_keyword("struct"):
            raise self.error(f"expected `struct`, found {_describe(token)}; expected {EXPECTED_SHAPES}")
        self.advance()
        name = self.expect_ident("struct name")
        self.decl_name = name

        generics = self.read_generics() if self.peek().is_punct("<") else []
        params = self.read_params() if self.peek().is_punct("(") else None
        where_clauses = self.read_where() if self.peek().is_keyword("where") else []

        token = self.peek()
        if token.is_punct(";"):
            if params is not None:
                raise self.error("a parameter list must be followed by a field block `{ ... }`")
            self.advance()
            fields = None
        elif token.is_punct("{"):
            fields = self.read_fields()
        else:
            raise self.error(f"expected `;` or `{{`, found {_describe(token)}; expected {EXPECTED_SHAPES}")

        return StructDeclaration(
            visibility=visibility,
            attributes=attributes,
            name=name,
            generics=generics,
            where_clauses=where_clauses,
            params=params,
            fields=fields,
            index=index,
            offset=start.start,
        )

    def read_attributes(self) -> list[str]:
        attributes: list[str] = []
        while self.peek().is_punct("#"):
            hash_token = self.advance()
            if self.peek().is_punct("!"):
                raise self.error("inner attributes are not allowed on declarations", hash_token)
            open_token = self.expect_punct("[", "after `#`")
            body = self.skip_balanced(open_token)
            attributes.append(self.text[open_token.end:body.start].strip())
        return attributes

    def skip_balanced(self, open_token: Token) -> Token:
        """Skip to the bracket closing *open_token*; returns the closing token."""
        stack = [_OPENERS[open_token.value]]
        while stack:
            token = self.advance()
            if token.kind == EOF:
                raise self.error(f"unclosed `{open_token.value}`", open_token)
            if token.kind != PUNCT:
                continue
            if token.value in _OPENERS:
                stack.append(_OPENERS[token.value])
            elif token.value in _CLOSERS:
                if token.value != stack.pop():
                    raise self.error(f"mismatched `{token.value}`", token)
        return token

    def read_visibility(self) -> Visibility:
        if not self.peek().is_keyword("pub"):
            return Visibility()
        self.advance()
        if not (self.peek().is_punct("(") and self.peek(1).value in _RESTRICTED_SCOPES):
            return Visibility(kind=VisibilityKind.PUBLIC)
        open_token = self.advance()
        close_token = self.skip_balanced(open_token)
        scope = " ".join(self.text[open_token.end:close_token.start].split())
        return Visibility(kind=VisibilityKind.RESTRICTED, scope=scope)

    # -- Generics & where clauses -----------------------------------------

    def read_generics(self) -> list[GenericParam]:
        self.expect_punct("<", "to open the generic parameter list")
        generics: list[GenericParam] = []
        while True:
            if self._at_angle_close():
                self.advance()
                return generics
            generics.append(self.read_generic_param())
            if self.peek().is_punct(","):
                self.advance()
            elif not self._at_angle_close():
                raise self.error(f"expected `,` or `>` in generic parameters, found {_describe(self.peek())}")

    def _at_angle_close(self) -> bool:
        token = self.peek()
        if token.kind == PUNCT and token.value in _SPLITTABLE and token.value.startswith(">"):
            self.split_token()
            token = self.peek()
        return token.is_punct(">")

    def read_generic_param(self) -> GenericParam:
        first = self.peek()
        if first.kind == LIFETIME:
            self.advance()
            name = first.value
        elif first.is_keyword("const"):
            self.advance()
            name = self.expect_ident("const parameter name")
            self.expect_punct(":", "after const parameter name")
            self.scan_type({",", ">", "="}, what="const parameter type")
        elif first.kind == IDENT:
            self.advance()
            name = first.value
        else:
            raise self.error(f"expected generic parameter, found {_describe(first)}")

        if self.peek().is_punct(":") and not first.is_keyword("const"):
            self.advance()
            self.scan_type({",", ">", "="}, what="bound")
        if self.peek().is_punct("="):
            raise self.error(f"default for generic parameter `{name}` is not supported")

        last = self.tokens[self.pos - 1]
        return GenericParam(name=name, text=self.slice(first, last))

    def read_where(self) -> list[WhereClause]:
        self.advance()
        clauses: list[WhereClause] = []
        while not (self.peek().is_punct("{") or self.peek().is_punct(";")):
            bounded = self.scan_type({":"}, what="bounded type")
            self.expect_punct(":", "in where clause")
            bound = self.scan_type({",", "{", ";"}, what="bound")
            clauses.append(WhereClause(bounded=bounded, bound=bound))
            if not self.peek().is_punct(","):
                break
            self.advance()
        return clauses

    # -- Parameter list & field block --------------------------------------

    def read_params(self) -> list[ParamSpec]:
        self.expect_punct("(", "to open the parameter list")
        params: list[ParamSpec] = []
        while not self.peek().is_punct(")"):
            visibility = self.read_visibility()
            name = self.expect_ident("parameter name")
            if not self.peek().is_punct(":"):
                raise self.error(
                    f"expected `{name}: Type` in parameter list, found {_describe(self.peek())} "
                    "(tuple structs are not supported)"
                )
            self.advance()
            type_ = self.scan_type({",", ")"}, what="parameter type")
            params.append(ParamSpec(visibility=visibility, name=name, type=type_))
            if self.peek().is_punct(","):
                self.advance()
            elif not self.peek().is_punct(")"):
                raise self.error(f"expected `,` or `)` in parameter list, found {_describe(self.peek())}")
        self.advance()
        return params

    def read_fields(self) -> list[FieldSpec]:
        self.expect_punct("{", "to open the field block")
        fields: list[FieldSpec] = []
        while not self.peek().is_punct("}"):
            visibility = self.read_visibility()
            name = self.expect_ident("field name")
            self.expect_punct(":", f"after field name `{name}`")
            type_ = self.scan_type({",", "=", "}"}, what=f"type of field `{name}`")
            if not self.peek().is_punct("="):
                raise self.error(
                    f"field `{name}` is missing a default expression "
                    f"(expected `{name}: {type_} = expr`)"
                )
            self.advance()
            default_expr = self.scan_expr(name)
            fields.append(
                FieldSpec(visibility=visibility, name=name, type=type_, default_expr=default_expr)
            )
            if self.peek().is_punct(","):
                self.advance()
            elif not self.peek().is_punct("}"):
                raise self.error(f"expected `,` or `}}` after field `{name}`, found {_describe(self.peek())}")
        self.advance()
        return fields

    # -- Opaque spans ------------------------------------------------------

    def scan_type(self, stops: set[str], what: str) -> Expr:
        """Consume a type up to a top-level token in *stops*."""
        first = self.peek()
        stack: list[str] = []
        angle = 0
        last: Optional[Token] = None

        while True:
            token = self.peek()
            if token.kind == EOF:
                raise self.error(f"unexpected end of input in {what}")
            if token.kind == PUNCT:
                if token.value in _SPLITTABLE and (
                    angle > 0 or token.value == "<<" or (not stack and token.value[0] in stops)
                ):
                    self.split_token()
                    continue
                if not stack and angle == 0 and token.value in stops:
                    break
                if token.value in _OPENERS:
                    stack.append(_OPENERS[token.value])
                elif token.value in _CLOSERS:
                    if not stack or stack.pop() != token.value:
                        raise self.error(f"unbalanced `{token.value}` in {what}")
                elif token.value == "<":
                    angle += 1
                elif token.value == ">":
                    if angle == 0:
                        raise self.error(f"unbalanced `>` in {what}")
                    angle -= 1
            last = self.advance()

        if last is None:
            raise self.error(f"expected {what}, found {_describe(first)}")
        return Expr(text=self.slice(first, last))

    def scan_expr(self, field_name: str) -> Expr:
        """Consume a default expression up to a top-level ``,`` or ``}``."""
        first = self.peek()
        first_pos = self.pos
        stack: list[str] = []
        last: Optional[Token] = None

        while True:
            token = self.peek()
            if token.kind == EOF:
                raise self.error(f"unexpected end of input in default expression of `{field_name}`")
            if token.kind == PUNCT:
                in_angle = bool(stack) and stack[-1] == ">"
                if in_angle and token.value in _SPLITTABLE:
                    self.split_token()
                    continue
                if not stack and token.value in (",", "}"):
                    break
                if not stack and token.value in ("|", "||") and self._closure_may_start(first_pos):
                    last = self.skip_closure_params()
                    continue
                if token.value in _OPENERS:
                    stack.append(_OPENERS[token.value])
                elif token.value in _CLOSERS:
                    if not stack or stack.pop() != token.value:
                        raise self.error(f"unbalanced `{token.value}` in default expression of `{field_name}`")
                elif token.value == "<" and (in_angle or _opens_path(last)):
                    stack.append(">")
                elif token.value == ">" and in_angle:
                    stack.pop()
            last = self.advance()

        if last is None:
            raise self.error(f"field `{field_name}` has an empty default expression")
        return Expr(text=self.slice(first, last))

    def _closure_may_start(self, first_pos: int) -> bool:
        """A closure's parameter list can only open an expression (after an optional ``move``)."""
        return all(t.is_keyword("move") for t in self.tokens[first_pos:self.pos])

    def skip_closure_params(self) -> Token:
        token = self.advance()
        if token.value == "||":
            return token
        stack: list[str] = []
        while True:
            token = self.advance()
            if token.kind == EOF:
                raise self.error("unterminated closure parameter list")
            if token.kind != PUNCT:
                continue
            if token.value in _OPENERS:
                stack.append(_OPENERS[token.value])
            elif token.value in _CLOSERS and stack:
                stack.pop()
            elif token.value == "|" and not stack:
                return token


def _opens_path(last: Optional[Token]) -> bool:
    """Whether a ``<`` after *last* opens generic arguments rather than comparing.

    That is the case for a turbofish (``::<``) and for a qualified path
    (``<T as Trait>::f``) in operand position: at the start of the
    expression, or after an operator or opening bracket.
    """
    if last is None or last.is_punct("::"):
        return True
    return last.kind == PUNCT and last.value not in _CLOSERS and last.value not in (">", "?")


def _describe(token: Token) -> str:
    if token.kind == EOF:
        return "end of input"
    return f"`{token.value}`"

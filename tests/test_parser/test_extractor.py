"""Tests for the declaration grammar reader (extractor module).

Covers:
- Parsing the defaults and parameter-list examples end-to-end
- Unit declarations and empty parameter lists
- Visibility qualifiers on structs, parameters and fields
- Generics (lifetimes, bounds, const parameters) and where clauses
- Opaque types and default expressions kept verbatim
- Declaration order and source offsets
- Structural mismatches reported with the declaration's position
- Generic parameter defaults, with or without bounds
"""

from __future__ import annotations

import textwrap

import pytest

from structgen.errors import ParseError
from structgen.parser.extractor import parse_batch
from structgen.parser.models import VisibilityKind
from structgen.utils import line_col


pytestmark = pytest.mark.unit


def _single(text: str):
    declarations = parse_batch(text)
    assert len(declarations) == 1
    return declarations[0]


# ---------------------------------------------------------------------------
# Whole declarations
# ---------------------------------------------------------------------------

class TestParseBatch:
    def test_defaults_batch(self, defaults_batch: str):
        a, b, c = parse_batch(defaults_batch)

        assert a.name == "A"
        assert a.attributes == ["derive(Debug)"]
        assert a.visibility.kind is VisibilityKind.PUBLIC
        assert [g.name for g in a.generics] == ["'a"]
        assert a.params is None
        assert [(f.name, f.type.text, f.default_expr.text) for f in a.fields] == [
            ("foo", "u8", "233"),
            ("bar", "&'a str", '"abc"'),
        ]
        assert a.fields[0].visibility.kind is VisibilityKind.PRIVATE
        assert a.fields[1].visibility.kind is VisibilityKind.PUBLIC

        assert b.name == "B"
        assert b.fields == []
        assert c.name == "C"
        assert c.fields is None

    def test_params_batch(self, params_batch: str):
        a = parse_batch(params_batch)[0]

        assert [g.text for g in a.generics] == ["'a", "T"]
        assert [(p.name, p.type.text) for p in a.params] == [("foo", "T")]
        assert a.params[0].visibility.kind is VisibilityKind.PUBLIC
        assert [w.render() for w in a.where_clauses] == ["T: Copy", "T: Ord"]
        assert [(f.name, f.default_expr.text) for f in a.fields] == [("bar", '"bar"')]

    def test_declarations_keep_source_order_and_index(self, mixed_batch: str):
        declarations = parse_batch(mixed_batch)
        assert [d.name for d in declarations] == ["StructA", "StructB", "StructC"]
        assert [d.index for d in declarations] == [0, 1, 2]
        assert [line_col(mixed_batch, d.offset)[0] for d in declarations] == [1, 2, 3]

    def test_empty_input(self):
        assert parse_batch("") == []
        assert parse_batch("  // only a comment\n") == []

    def test_unit_with_attributes_and_visibility(self):
        decl = _single("#[derive(Clone, Copy)]\npub(crate) struct Marker;")
        assert decl.attributes == ["derive(Clone, Copy)"]
        assert decl.visibility.render() == "pub(crate)"
        assert decl.fields is None
        assert decl.params is None

    def test_empty_parameter_list_is_not_absent(self):
        decl = _single("struct D() { x: u8 = 1 }")
        assert decl.params == []

    def test_trailing_commas_are_optional(self):
        with_commas = _single("struct A(x: u8,) { y: u8 = 1, }")
        without = _single("struct A(x: u8) { y: u8 = 1 }")
        assert with_commas.params == without.params
        assert with_commas.fields == without.fields


# ---------------------------------------------------------------------------
# Visibility, generics and where clauses
# ---------------------------------------------------------------------------

class TestHeader:
    def test_restricted_visibility_scopes(self):
        decl = _single("pub(super) struct E { pub(in crate::a) x: u8 = 0, pub(self) y: u8 = 1 }")
        assert decl.visibility.kind is VisibilityKind.RESTRICTED
        assert decl.visibility.scope == "super"
        assert [f.visibility.render() for f in decl.fields] == ["pub(in crate::a)", "pub(self)"]

    def test_generic_bounds_and_const_parameters(self):
        decl = _single("struct G<'a: 'static, T: Clone + Default, const N: usize> { a: [T; N] = [T::default(); N] }")
        assert [g.name for g in decl.generics] == ["'a", "T", "N"]
        assert [g.text for g in decl.generics] == ["'a: 'static", "T: Clone + Default", "const N: usize"]
        assert decl.generic_params == "<'a: 'static, T: Clone + Default, const N: usize>"
        assert decl.generic_args == "<'a, T, N>"

    def test_nested_generic_bound_closing_angles(self):
        decl = _single("struct H<T: Into<Vec<u8>>> { t: Option<T> = None }")
        assert [g.text for g in decl.generics] == ["T: Into<Vec<u8>>"]
        assert decl.fields[0].type.text == "Option<T>"

    def test_where_clause_with_compound_bounds(self):
        decl = _single("struct W<T, U> where T: Clone + Send, Vec<U>: Default, { t: u8 = 0 }")
        assert [(w.bounded.text, w.bound.text) for w in decl.where_clauses] == [
            ("T", "Clone + Send"),
            ("Vec<U>", "Default"),
        ]

    def test_unit_with_where_clause(self):
        decl = _single("struct C<T> where T: Copy;")
        assert decl.fields is None
        assert [w.render() for w in decl.where_clauses] == ["T: Copy"]


# ---------------------------------------------------------------------------
# Opaque spans
# ---------------------------------------------------------------------------

class TestOpaqueSpans:
    def test_types_with_nested_commas(self):
        decl = _single("struct M { m: HashMap<String, Vec<u8>> = HashMap::new(), t: (u8, u8) = (1, 2) }")
        assert [(f.type.text, f.default_expr.text) for f in decl.fields] == [
            ("HashMap<String, Vec<u8>>", "HashMap::new()"),
            ("(u8, u8)", "(1, 2)"),
        ]

    def test_type_directly_followed_by_equals(self):
        decl = _single("struct V { v: Vec<u8>= vec![1, 2] }")
        assert decl.fields[0].type.text == "Vec<u8>"
        assert decl.fields[0].default_expr.text == "vec![1, 2]"

    def test_turbofish_default(self):
        decl = _single("struct T { h: HashMap<u8, u8> = HashMap::<u8, u8>::with_capacity(4), n: u8 = 1 }")
        assert decl.fields[0].default_expr.text == "HashMap::<u8, u8>::with_capacity(4)"
        assert decl.fields[1].name == "n"

    def test_qualified_path_default(self):
        decl = _single(
            "struct Q { x: usize = <HashMap<u8, u8> as Default>::default().len(), "
            "y: u8 = 1 + <u8 as Default>::default() }"
        )
        assert [f.default_expr.text for f in decl.fields] == [
            "<HashMap<u8, u8> as Default>::default().len()",
            "1 + <u8 as Default>::default()",
        ]

    def test_closure_default_with_parameter_commas(self):
        decl = _single("struct F { f: fn(u8, u8) -> u8 = |a, b| a + b, g: u8 = 0 }")
        assert decl.fields[0].type.text == "fn(u8, u8) -> u8"
        assert decl.fields[0].default_expr.text == "|a, b| a + b"
        assert decl.fields[1].name == "g"

    def test_comparison_is_not_a_generic(self):
        decl = _single("struct Q { q: bool = 1 < 2, r: bool = 3 > 2 }")
        assert [f.default_expr.text for f in decl.fields] == ["1 < 2", "3 > 2"]

    def test_struct_literal_and_block_defaults(self):
        decl = _single(
            "struct P { p: Point = Point { x: 1, y: 2 }, q: u8 = if FLAG { 1 } else { 2 } }"
        )
        assert [f.default_expr.text for f in decl.fields] == [
            "Point { x: 1, y: 2 }",
            "if FLAG { 1 } else { 2 }",
        ]

    def test_multiline_default_is_kept_verbatim(self):
        text = textwrap.dedent(
            """\
            struct L {
                items: Vec<u8> = vec![
                    1,
                    2,
                ],
            }
            """
        )
        decl = _single(text)
        assert decl.fields[0].default_expr.text == "vec![\n        1,\n        2,\n    ]"

    def test_comments_inside_the_body(self):
        decl = _single("struct K {\n    // counter\n    n: u8 = 1, /* trailing */\n}")
        assert [(f.name, f.default_expr.text) for f in decl.fields] == [("n", "1")]


# ---------------------------------------------------------------------------
# Structural mismatches
# ---------------------------------------------------------------------------

class TestParseErrors:
    def test_missing_default_names_declaration_position(self):
        text = "struct A { x: u8 = 1 }\nstruct B { y: u8 }"
        with pytest.raises(ParseError) as exc_info:
            parse_batch(text)
        error = exc_info.value
        assert error.declaration_index == 1
        assert error.name == "B"
        assert "declaration #2 (`B`)" in str(error)
        assert "missing a default expression" in str(error)
        assert line_col(text, error.index)[0] == 2

    def test_empty_default_expression(self):
        with pytest.raises(ParseError, match="empty default expression"):
            parse_batch("struct A { x: u8 = , }")

    def test_unbalanced_default_expression(self):
        with pytest.raises(ParseError, match="unbalanced"):
            parse_batch("struct A { x: (u8, u8) = (1, }")

    def test_generic_default_rejected(self):
        with pytest.raises(ParseError, match="default for generic parameter `T`"):
            parse_batch("struct A<T = u8> { x: u8 = 0 }")

    @pytest.mark.parametrize(
        "generics, name",
        [("<T: Clone = u8>", "T"), ("<T: Into<Vec<u8>> = Vec<u8>>", "T"), ("<const N: usize = 3>", "N")],
    )
    def test_generic_default_after_bound_rejected(self, generics: str, name: str):
        with pytest.raises(ParseError, match=f"default for generic parameter `{name}`"):
            parse_batch(f"struct A{generics} {{ x: u8 = 1 }}")

    def test_associated_type_binding_in_bound(self):
        decl = _single("struct I<T: Iterator<Item = u8>> { t: Option<T> = None }")
        assert [g.text for g in decl.generics] == ["T: Iterator<Item = u8>"]

    def test_parameter_list_without_field_block(self):
        with pytest.raises(ParseError, match="must be followed by a field block"):
            parse_batch("struct A(x: u8);")

    def test_tuple_struct_rejected(self):
        with pytest.raises(ParseError, match="tuple structs are not supported"):
            parse_batch("struct A(u8, u8) {}")

    def test_not_a_struct(self):
        with pytest.raises(ParseError, match="expected `struct`") as exc_info:
            parse_batch("enum E { A }")
        assert exc_info.value.declaration_index == 0
        assert exc_info.value.name is None

    def test_missing_body(self):
        with pytest.raises(ParseError, match="expected `;` or `\\{`"):
            parse_batch("struct A")

    def test_inner_attribute_rejected(self):
        with pytest.raises(ParseError, match="inner attributes"):
            parse_batch("#![allow(dead_code)] struct A;")

    def test_unclosed_field_block(self):
        with pytest.raises(ParseError, match="unexpected end of input"):
            parse_batch("struct A { x: u8 = 1")

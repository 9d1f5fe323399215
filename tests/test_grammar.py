from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional, Tuple

import pytest

from tests.support.harness import CLASS_LINE
from astgen.errors import AstGenError, DuplicateName, MalformedField, MalformedGrammar
from astgen.grammar import parse, parse_fields, parse_line
from astgen.model import FieldSpec, GrammarSpec, TypeRef, VariantSpec
from astgen.table import GRAMMARS


@dataclass(frozen=True)
class Case:
    """Grammar line plus the expected variant name and (type, name) pairs."""

    name: str
    line: str
    variant: Optional[str] = None
    fields: Tuple[Tuple[str, str], ...] = ()


LINE_CASES: List[Case] = [
    Case(
        "binary",
        "Binary : Expr left, Token operator, Expr right",
        "Binary",
        (("Expr", "left"), ("Token", "operator"), ("Expr", "right")),
    ),
    Case("padded-name", "Grouping   : Expr expression", "Grouping", (("Expr", "expression"),)),
    Case("object", "Literal  : Object value", "Literal", (("Object", "value"),)),
    Case("generic", "Block : List<Stmt> statements", "Block", (("List<Stmt>", "statements"),)),
    Case(
        "qualified-generic",
        CLASS_LINE,
        "Class",
        (("Token", "name"), ("Expr.Variable", "superclass"), ("List<Stmt.Function>", "methods")),
    ),
    Case(
        "nested-generic-normalized",
        "Table : Map<String,List< Expr >> rows",
        "Table",
        (("Map<String, List<Expr>>", "rows"),),
    ),
    Case("array", "Call : Expr callee, Expr[] arguments", "Call", (("Expr", "callee"), ("Expr[]", "arguments"))),
    Case("extra-spaces", "Var :  Token   name ,Expr initializer  ", "Var", (("Token", "name"), ("Expr", "initializer"))),
    Case("no-fields", "Nil :", "Nil", ()),
]


@pytest.mark.parametrize("case", LINE_CASES, ids=lambda case: case.name)
def test_parse_line(case: Case) -> None:
    variant = parse_line(case.line)

    assert variant.name == case.variant
    assert tuple((f.type, f.name) for f in variant.fields) == case.fields


@dataclass(frozen=True)
class ErrorCase:
    name: str
    line: str
    exc: type[AstGenError]
    msg: str
    column: Optional[int] = None


LINE_ERROR_CASES: List[ErrorCase] = [
    ErrorCase("missing-colon", "Binary Expr left", MalformedGrammar, "Missing ':' separator"),
    ErrorCase("two-colons", "Binary : Expr left : Expr right", MalformedGrammar, "More than one ':'"),
    ErrorCase("empty-line", "", MalformedGrammar, "Missing ':' separator"),
    ErrorCase("empty-name", " : Expr left", MalformedGrammar, "Invalid variant name"),
    ErrorCase("spaced-name", "Bin ary : Expr left", MalformedGrammar, "Invalid variant name"),
    ErrorCase("no-space", "Grouping : Exprexpression", MalformedField, "Field must be '<type> <name>'"),
    ErrorCase("generic-no-space", "Block : List<Stmt>statements", MalformedField, "Missing space", column=19),
    ErrorCase("array-no-space", "Call : Expr[]arguments", MalformedField, "Missing space", column=14),
    ErrorCase("three-words", "Var : Token name extra", MalformedField, "Field must be '<type> <name>'"),
    ErrorCase("trailing-comma", "Var : Token name,", MalformedField, "Field must be '<type> <name>'"),
    ErrorCase("bad-char", "Unary : Token op-erator", MalformedField, "Field must be '<type> <name>'"),
    ErrorCase("unclosed-generic", "Block : List<Stmt statements", MalformedField, "Field must be '<type> <name>'"),
    ErrorCase("duplicate-field", "Binary : Expr left, Expr left", DuplicateName, "Duplicate field name 'left'"),
    ErrorCase("dot-spaces", "Class : Expr . Variable superclass", MalformedField, "Whitespace around '.'", column=13),
    ErrorCase("dot-newline", "Class : Expr\n.Variable superclass", MalformedField, "Whitespace around '.'"),
    ErrorCase("qualified-spaces", "Use : java . util . List xs", MalformedField, "Whitespace around '.'"),
    ErrorCase("dim-space", "Call : Expr [] args", MalformedField, "Whitespace before '[]'", column=13),
]


@pytest.mark.parametrize("case", LINE_ERROR_CASES, ids=lambda case: case.name)
def test_parse_line_errors(case: ErrorCase) -> None:
    with pytest.raises(case.exc) as exc_info:
        parse_line(case.line, lineno=3)

    err = exc_info.value
    assert case.msg in str(err)
    assert "(grammar line 3)" in str(err)
    assert err.line == case.line

    if case.column is not None:
        assert isinstance(err, MalformedField)
        assert err.column == case.column, f"expected col {case.column}, got {err.column}"


def test_malformed_field_names_offending_token() -> None:
    with pytest.raises(MalformedField) as exc_info:
        parse_line("Binary : Expr left, Tokenoperator, Expr right")

    assert exc_info.value.token == "Tokenoperator"


def test_duplicate_field_is_a_malformed_grammar() -> None:
    with pytest.raises(MalformedGrammar):
        parse_line("Binary : Expr left, Expr left")


def test_parse_preserves_variant_order() -> None:
    lines = GRAMMARS["Expr"]
    spec = parse("Expr", lines)

    assert spec.base_name == "Expr"
    assert spec.tag == "expr"
    assert spec.variant_names == ("Binary", "Grouping", "Literal", "Unary")


def test_parse_single_binary_line() -> None:
    spec = parse("Expr", ["Binary : Expr left, Token operator, Expr right"])

    assert spec == GrammarSpec(
        "Expr",
        (
            VariantSpec(
                "Binary",
                (FieldSpec("Expr", "left"), FieldSpec("Token", "operator"), FieldSpec("Expr", "right")),
            ),
        ),
    )


def test_parse_rejects_duplicate_variant() -> None:
    lines = ["Print : Expr expression", "Var : Token name", "Print : Expr value"]

    with pytest.raises(DuplicateName) as exc_info:
        parse("Stmt", lines)

    err = exc_info.value
    assert err.kind == "variant"
    assert err.name == "Print"
    assert err.lineno == 3


def test_parse_reports_line_number_of_bad_line() -> None:
    lines = ["Print : Expr expression", "Var Token name"]

    with pytest.raises(MalformedGrammar) as exc_info:
        parse("Stmt", lines)

    assert exc_info.value.lineno == 2


@pytest.mark.parametrize("base_name", ["", "expr stmt", "1Expr", "Expr:"])
def test_parse_rejects_bad_base_name(base_name: str) -> None:
    with pytest.raises(MalformedGrammar):
        parse(base_name, ["Print : Expr expression"])


def test_parse_is_deterministic() -> None:
    for base_name, lines in GRAMMARS.items():
        assert parse(base_name, lines) == parse(base_name, lines)


def test_parse_fields_accepts_multiline_lists() -> None:
    wrapped = "Token name,\n          Expr.Variable superclass,\n          List<Stmt.Function> methods"
    single = "Token name, Expr.Variable superclass, List<Stmt.Function> methods"

    assert parse_fields(wrapped) == parse_fields(single)
    assert [f.name for f in parse_fields(wrapped)] == ["name", "superclass", "methods"]


def test_parse_fields_empty() -> None:
    assert parse_fields("") == ()
    assert parse_fields("   ") == ()


def test_type_ref_render() -> None:
    ref = TypeRef("Map", (TypeRef("String"), TypeRef("List", (TypeRef("Expr"),))), dims=1)
    assert ref.render() == "Map<String, List<Expr>>[]"
    assert str(TypeRef("Object")) == "Object"


@pytest.mark.parametrize(
    "text, token",
    [
        ("Expr left, Expr . Variable superclass", "Expr . Variable superclass"),
        ("Token name, Expr [] args", "Expr [] args"),
    ],
    ids=["dotted", "array"],
)
def test_type_whitespace_error_names_field(text: str, token: str) -> None:
    with pytest.raises(MalformedField) as exc_info:
        parse_fields(text)

    assert exc_info.value.token == token


def test_whitespace_around_generic_brackets_is_allowed() -> None:
    assert parse_fields("Map < String , Expr.Variable[] > table") == (
        FieldSpec("Map<String, Expr.Variable[]>", "table"),
    )

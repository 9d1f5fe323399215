"""
Grammar line parser.

A grammar line has the shape

    Binary   : Expr left, Token operator, Expr right

The left of the single ':' names the variant, the right is a comma separated
list of '<type> <name>' fields. The field list goes through a small lark
grammar so generic type references keep their inner commas:

    Map<String, List<Expr>> table, Token[] names

Whitespace is free around '<', '>', ',' and between fields (so a wrapped,
multi-line constructor parameter list parses the same as its one-line form),
but a type and its field name must be separated by whitespace.
"""

from __future__ import annotations

import logging
import re
from typing import Iterable, List, Optional, Tuple

from lark import Lark, Token, Transformer, v_args
from lark.exceptions import UnexpectedInput, VisitError

from .errors import DuplicateName, MalformedField, MalformedGrammar
from .model import FieldSpec, GrammarSpec, TypeRef, VariantSpec

logger = logging.getLogger(__name__)

FIELD_GRAMMAR = r"""
start: (field ("," field)*)?

field: typeref NAME

typeref: qualname type_args? DIM*
qualname: NAME ("." NAME)*
type_args: "<" typeref ("," typeref)* ">"

DIM: "[]"
NAME: /[A-Za-z_][A-Za-z0-9_]*/

%import common.WS
%ignore WS
"""

_IDENT = re.compile(r"[A-Za-z_][A-Za-z0-9_]*\Z")

_PARSER = Lark(FIELD_GRAMMAR, parser="lalr", propagate_positions=True)


def is_identifier(name: str) -> bool:
    return bool(_IDENT.match(name))


class _Positioned:
    """A TypeRef plus the offset just past its last character."""
    __slots__ = ("ref", "end_pos")

    def __init__(self, ref: TypeRef, end_pos: int):
        self.ref = ref
        self.end_pos = end_pos


class FieldBuilder(Transformer):
    """Turns the lark parse tree of a field list into FieldSpecs.

    Whitespace is ignored by the lexer, so the source text is kept to reject
    gaps inside a dotted name or before '[]'.
    """

    def __init__(self, text: str):
        super().__init__()
        self.text = text

    def start(self, children: List[FieldSpec]) -> Tuple[FieldSpec, ...]:
        return tuple(children)

    def field(self, children: List[object]) -> FieldSpec:
        typed, name = children
        if name.start_pos == typed.end_pos:
            raise MalformedField(
                "Missing space between field type and name",
                token=f"{typed.ref.render()}{name}",
                column=name.start_pos + 1,
            )
        return FieldSpec(typed.ref.render(), str(name))

    @v_args(meta=True)
    def typeref(self, meta, children: List[object]) -> _Positioned:
        args: Tuple[TypeRef, ...] = ()
        dims = 0
        for child in children[1:]:
            if isinstance(child, tuple):
                args = child
            elif isinstance(child, Token) and child.type == "DIM":
                if self.text[child.start_pos - 1].isspace():
                    raise MalformedField("Whitespace before '[]' in field type", column=child.start_pos + 1)
                dims += 1
        return _Positioned(TypeRef(str(children[0]), args, dims), meta.end_pos)

    def qualname(self, children: List[Token]) -> str:
        for prev, part in zip(children, children[1:]):
            if self.text[prev.end_pos:part.start_pos] != ".":
                raise MalformedField("Whitespace around '.' in field type", column=prev.end_pos + 1)
        return ".".join(str(part) for part in children)

    def type_args(self, children: List[_Positioned]) -> Tuple[TypeRef, ...]:
        return tuple(child.ref for child in children)


def _token_at(text: str, pos: Optional[int]) -> str:
    """Return the top-level comma separated segment of text containing pos."""
    if pos is None:
        return text.strip()

    start = 0
    depth = 0
    for idx, ch in enumerate(text):
        if ch == "<":
            depth += 1
        elif ch == ">":
            depth = max(depth - 1, 0)
        elif ch == "," and depth == 0:
            if idx >= pos:
                return text[start:idx].strip()
            start = idx + 1

    return text[start:].strip()


def parse_fields(text: str) -> Tuple[FieldSpec, ...]:
    """Parse a field list into FieldSpecs, in declaration order.

    Columns in MalformedField errors are 1-based offsets into text.
    """
    try:
        tree = _PARSER.parse(text)
    except UnexpectedInput as exc:
        pos = getattr(exc, "pos_in_stream", None)
        if not isinstance(pos, int) or pos < 0:
            pos = None
        raise MalformedField(
            "Field must be '<type> <name>'",
            token=_token_at(text, pos),
            column=pos + 1 if pos is not None else None,
        ) from None

    try:
        fields = FieldBuilder(text).transform(tree)
    except VisitError as exc:
        err = exc.orig_exc
        if not isinstance(err, MalformedField):
            raise
        if err.token is None and err.column is not None:
            raise MalformedField(err.message, _token_at(text, err.column - 1), err.column) from None
        raise err from None

    seen = set()
    for f in fields:
        if f.name in seen:
            raise DuplicateName("field", f.name)
        seen.add(f.name)

    return fields


def parse_line(line: str, lineno: Optional[int] = None) -> VariantSpec:
    """Parse one 'Name : Type field, ...' line."""
    if line.count(":") != 1:
        reason = "Missing ':' separator" if ":" not in line else "More than one ':' separator"
        raise MalformedGrammar(reason, line, lineno)

    head, field_list = line.split(":")
    name = head.strip()
    if not is_identifier(name):
        raise MalformedGrammar(f"Invalid variant name {name!r}", line, lineno)

    try:
        fields = parse_fields(field_list)
    except DuplicateName as exc:
        raise DuplicateName(exc.kind, exc.name, line, lineno) from None
    except MalformedField as exc:
        # Re-anchor the column from the field list to the whole line.
        column = exc.column + len(head) + 1 if exc.column is not None else None
        raise MalformedField(exc.message, exc.token, column, line, lineno) from None

    return VariantSpec(name, fields)


def parse(base_name: str, lines: Iterable[str]) -> GrammarSpec:
    """Parse grammar lines into the GrammarSpec for base_name, in order."""
    if not is_identifier(base_name):
        raise MalformedGrammar(f"Invalid base name {base_name!r}")

    variants: List[VariantSpec] = []
    seen = set()

    for lineno, line in enumerate(lines, start=1):
        variant = parse_line(line, lineno)
        if variant.name in seen:
            raise DuplicateName("variant", variant.name, line, lineno)
        seen.add(variant.name)
        variants.append(variant)

    logger.debug("parsed %s grammar: %s", base_name, ", ".join(v.name for v in variants))
    return GrammarSpec(base_name, tuple(variants))

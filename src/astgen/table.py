"""The grammars the jlox interpreter's syntax tree is generated from."""

from __future__ import annotations

from typing import Dict, List

GRAMMARS: Dict[str, List[str]] = {
    "Expr": [
        "Binary   : Expr left, Token operator, Expr right",
        "Grouping : Expr expression",
        "Literal  : Object value",
        "Unary    : Token operator, Expr right",
    ],
    "Stmt": [
        "Block      : List<Stmt> statements",
        "Expression : Expr expression",
        "Print      : Expr expression",
        "Var        : Token name, Expr initializer",
    ],
}

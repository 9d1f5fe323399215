"""
Errors raised by the AST generator.

Every failure is fatal to the current invocation; nothing is retried.
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional


class AstGenError(Exception):
    """Base class for all generator failures."""
    pass


class UsageError(AstGenError):
    """Wrong command line."""
    pass


def _where(lineno: Optional[int]) -> str:
    return f" (grammar line {lineno})" if lineno is not None else ""


class MalformedGrammar(AstGenError):
    """A grammar line that cannot be split into a variant name and a field list."""
    def __init__(self, message: str, line: Optional[str] = None, lineno: Optional[int] = None):
        self.message = message
        self.line = line
        self.lineno = lineno
        text = f"{message}{_where(lineno)}"
        super().__init__(f"{text}: {line!r}" if line is not None else text)


class DuplicateName(MalformedGrammar):
    def __init__(self, kind: str, name: str, line: Optional[str] = None, lineno: Optional[int] = None):
        self.kind = kind
        self.name = name
        super().__init__(f"Duplicate {kind} name '{name}'", line, lineno)


class MalformedField(AstGenError):
    """A field token that is not '<type> <name>'."""
    def __init__(self, message: str, token: Optional[str] = None, column: Optional[int] = None,
                 line: Optional[str] = None, lineno: Optional[int] = None):
        self.message = message
        self.token = token
        self.column = column
        self.line = line
        self.lineno = lineno
        text = message
        if token is not None:
            text += f" in {token!r}"
        if column is not None:
            text += f" at col {column}"
        super().__init__(text + _where(lineno))


class IOFailure(AstGenError):
    def __init__(self, path: Path, reason: str):
        self.path = path
        self.reason = reason
        super().__init__(f"Cannot write {path}: {reason}")

"""
Grammar model shared by the parser, builder and emitter.

All structures are immutable; sequences are tuples so a built GrammarSpec can
be compared and hashed as a value.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple


@dataclass(frozen=True)
class TypeRef:
    """Structured type reference: dotted name, generic arguments, array dims."""

    name: str
    args: Tuple[TypeRef, ...] = ()
    dims: int = 0

    def render(self) -> str:
        text = self.name
        if self.args:
            text += "<" + ", ".join(arg.render() for arg in self.args) + ">"
        return text + "[]" * self.dims

    def __str__(self) -> str:
        return self.render()


@dataclass(frozen=True)
class FieldSpec:
    type: str
    name: str

    def render(self) -> str:
        return f"{self.type} {self.name}"


@dataclass(frozen=True)
class VariantSpec:
    name: str
    fields: Tuple[FieldSpec, ...] = ()

    @property
    def field_names(self) -> Tuple[str, ...]:
        return tuple(f.name for f in self.fields)


@dataclass(frozen=True)
class GrammarSpec:
    base_name: str
    variants: Tuple[VariantSpec, ...] = ()

    @property
    def tag(self) -> str:
        """Lower-cased base name, used for region markers and visitor parameters."""
        return self.base_name.lower()

    @property
    def variant_names(self) -> Tuple[str, ...]:
        return tuple(v.name for v in self.variants)

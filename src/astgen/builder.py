"""
Derive the declarations to emit for one grammar.

The plan is target-neutral data: names, field order and which visitor method
each variant dispatches to. Rendering lives in emitter.py.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple

from .errors import DuplicateName, MalformedGrammar
from .grammar import is_identifier
from .model import FieldSpec, GrammarSpec, VariantSpec


def visit_method_name(variant: str, base: str) -> str:
    return f"visit{variant}{base}"


@dataclass(frozen=True)
class BaseDecl:
    name: str
    accept_method: str = "accept"


@dataclass(frozen=True)
class VisitMethod:
    name: str
    variant: str
    param_name: str


@dataclass(frozen=True)
class VisitorDecl:
    name: str
    methods: Tuple[VisitMethod, ...]


@dataclass(frozen=True)
class VariantDecl:
    name: str
    base: str
    fields: Tuple[FieldSpec, ...]
    visit_method: str

    @property
    def params(self) -> Tuple[str, ...]:
        """Constructor parameters, in declared order."""
        return tuple(f.render() for f in self.fields)

    @property
    def slots(self) -> Tuple[str, ...]:
        """Storage slot names, in declared order."""
        return tuple(f.name for f in self.fields)


@dataclass(frozen=True)
class EmitPlan:
    base: BaseDecl
    visitor: VisitorDecl
    variants: Tuple[VariantDecl, ...]
    tag: str


def _check(spec: GrammarSpec) -> None:
    if not is_identifier(spec.base_name):
        raise MalformedGrammar(f"Invalid base name {spec.base_name!r}")

    seen = set()
    for variant in spec.variants:
        if variant.name in seen:
            raise DuplicateName("variant", variant.name)
        seen.add(variant.name)

        names = variant.field_names
        if len(set(names)) != len(names):
            dup = next(n for n in names if names.count(n) > 1)
            raise DuplicateName("field", dup)


def _variant_decl(spec: GrammarSpec, variant: VariantSpec) -> VariantDecl:
    return VariantDecl(
        name=variant.name,
        base=spec.base_name,
        fields=variant.fields,
        visit_method=visit_method_name(variant.name, spec.base_name),
    )


def build(spec: GrammarSpec) -> EmitPlan:
    """Plan the base type, its visitor interface and one declaration per variant."""
    _check(spec)

    methods = tuple(
        VisitMethod(visit_method_name(v.name, spec.base_name), v.name, spec.tag)
        for v in spec.variants
    )

    return EmitPlan(
        base=BaseDecl(spec.base_name),
        visitor=VisitorDecl("Visitor", methods),
        variants=tuple(_variant_decl(spec, v) for v in spec.variants),
        tag=spec.tag,
    )

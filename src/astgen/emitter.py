"""
Node family emission: one FamilyDef in, one Python module's source out.

The emitted module holds the abstract family base, the visitor protocol with
one abstract operation per variant, one frozen dataclass per variant whose
accept() calls its own operation directly, the VARIANTS tuple and dispatch().

Output depends only on the grammar, and everything is emitted in declaration
order, so regenerating after appending a variant only appends text to each
section.
"""

from __future__ import annotations

from astgen.grammar import FamilyDef, GrammarSpec, VariantDef
from astgen.types import NamedRef, OptionalRef, SequenceRef, TypeRef, python_scalar

INDENT = "    "


def module_filename(family: FamilyDef) -> str:
    return f"{family.module_name}.py"


def emit_family(spec: GrammarSpec, family: FamilyDef) -> str:
    """Render the module source for one family of ``spec``."""
    sections = [
        _header(spec, family) + "\n\n" + _exports(family),
        _base(family),
        _visitor(family),
        *(_variant(spec, family, variant) for variant in family.variants),
        _variants_tuple(family),
        _dispatch(family),
    ]
    return "\n\n\n".join(sections) + "\n"


# =============================================================================
# Annotations
# =============================================================================


def annotation(spec: GrammarSpec, family: FamilyDef, type_ref: TypeRef) -> str:
    """Python annotation text for a field type inside ``family``'s module."""
    match type_ref:
        case SequenceRef(element=element):
            return f"tuple[{annotation(spec, family, element)}, ...]"
        case OptionalRef(inner=inner):
            return f"{annotation(spec, family, inner)} | None"
        case NamedRef(name=name):
            if scalar := python_scalar(name):
                return scalar
            if type_ref.qualifier and spec.family(type_ref.qualifier):
                return type_ref.local_name
            return name
    raise TypeError(f"Unsupported type reference: {type_ref!r}")


# =============================================================================
# Sections
# =============================================================================


def _header(spec: GrammarSpec, family: FamilyDef) -> str:
    lines = [
        '"""',
        f"{family.name} syntax tree nodes.",
        "",
        "Generated by astgen; edit the grammar and regenerate instead of editing this file.",
        '"""',
        "",
        "from __future__ import annotations",
        "",
        "from abc import ABC, abstractmethod",
        "from dataclasses import dataclass",
    ]

    type_only = [f"from {use.module} import {', '.join(use.names)}" for use in spec.uses]
    relative = [
        f"from .{other.module_name} import {', '.join(names)}"
        for other, names in spec.family_imports(family)
    ]
    if not (type_only or relative):
        lines.append("from typing import final")
        return "\n".join(lines)

    lines += ["from typing import TYPE_CHECKING, final", "", "if TYPE_CHECKING:"]
    lines += [INDENT + line for line in type_only]
    if type_only and relative:
        lines.append("")
    lines += [INDENT + line for line in relative]
    return "\n".join(lines)


def _exports(family: FamilyDef) -> str:
    names = [family.name, family.visitor_name, "VARIANTS", "dispatch", *family.variant_names]
    return "\n".join(["__all__ = [", *(f'{INDENT}"{name}",' for name in names), "]"])


def _base(family: FamilyDef) -> str:
    return "\n".join(
        [
            f"class {family.name}(ABC):",
            f'{INDENT}"""Base of the closed {family.name} family."""',
            "",
            f"{INDENT}__slots__ = ()",
            "",
            f"{INDENT}@abstractmethod",
            f"{INDENT}def accept[R](self, visitor: {family.visitor_name}[R]) -> R:",
            f'{INDENT * 2}"""Call the visitor operation for this variant."""',
        ]
    )


def _visitor(family: FamilyDef) -> str:
    lines = [
        f"class {family.visitor_name}[R](ABC):",
        f'{INDENT}"""Operations over {family.name} nodes, one per variant."""',
    ]
    for variant in family.variants:
        lines += [
            "",
            f"{INDENT}@abstractmethod",
            f"{INDENT}def {family.operation_name(variant)}(self, node: {variant.name}) -> R: ...",
        ]
    return "\n".join(lines)


def _variant(spec: GrammarSpec, family: FamilyDef, variant: VariantDef) -> str:
    lines = [
        "@final",
        "@dataclass(frozen=True, slots=True)",
        f"class {variant.name}({family.name}):",
    ]
    lines += [f"{INDENT}{f.name}: {annotation(spec, family, f.type)}" for f in variant.fields]

    frozen = _sequence_freezes(variant)
    if frozen:
        lines += ["", f"{INDENT}def __post_init__(self) -> None:"]
        lines += [INDENT * 2 + line for line in frozen]

    if variant.fields:
        lines.append("")
    lines += [
        f"{INDENT}def accept[R](self, visitor: {family.visitor_name}[R]) -> R:",
        f"{INDENT * 2}return visitor.{family.operation_name(variant)}(self)",
    ]
    return "\n".join(lines)


def _sequence_freezes(variant: VariantDef) -> list[str]:
    """Statements that store sequence fields as tuples."""
    lines: list[str] = []
    for f in variant.fields:
        match f.type:
            case SequenceRef():
                lines.append(f'object.__setattr__(self, "{f.name}", tuple(self.{f.name}))')
            case OptionalRef(inner=SequenceRef()):
                lines += [
                    f"if self.{f.name} is not None:",
                    f'{INDENT}object.__setattr__(self, "{f.name}", tuple(self.{f.name}))',
                ]
    return lines


def _variants_tuple(family: FamilyDef) -> str:
    lines = [f"VARIANTS: tuple[type[{family.name}], ...] = ("]
    lines += [f"{INDENT}{name}," for name in family.variant_names]
    lines.append(")")
    return "\n".join(lines)


def _dispatch(family: FamilyDef) -> str:
    return "\n".join(
        [
            f"def dispatch[R](node: {family.name}, visitor: {family.visitor_name}[R]) -> R:",
            f'{INDENT}"""Run the visitor operation for the variant of ``node``."""',
            f"{INDENT}return node.accept(visitor)",
        ]
    )

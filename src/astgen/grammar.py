"""
Grammar domain: the declarative description of node families.

A GrammarSpec is an ordered table of families, each an ordered table of
variants, each an ordered list of fields. Order is significant everywhere and
is preserved from the grammar text through to the generated modules.
"""

from __future__ import annotations

import re
from collections.abc import Iterator
from dataclasses import dataclass

from astgen.types import NamedRef, TypeRef

# =============================================================================
# Core Types
# =============================================================================


@dataclass(frozen=True)
class FieldDef:
    """One field of a variant: a name and its type reference."""

    name: str
    type: TypeRef

    def __str__(self) -> str:
        return f"{self.type} {self.name}"


@dataclass(frozen=True)
class VariantDef:
    """One concrete node shape within a family."""

    name: str
    fields: tuple[FieldDef, ...] = ()

    def __str__(self) -> str:
        return f"{self.name}: {', '.join(str(f) for f in self.fields)}".rstrip()

    @property
    def field_names(self) -> tuple[str, ...]:
        return tuple(f.name for f in self.fields)


@dataclass(frozen=True)
class FamilyDef:
    """A closed set of variants sharing one visitor protocol."""

    name: str
    variants: tuple[VariantDef, ...]

    def variant(self, name: str) -> VariantDef | None:
        for variant in self.variants:
            if variant.name == name:
                return variant
        return None

    @property
    def variant_names(self) -> tuple[str, ...]:
        return tuple(v.name for v in self.variants)

    @property
    def module_name(self) -> str:
        """Python module name of the generated family."""
        return snake_case(self.name)

    @property
    def visitor_name(self) -> str:
        return f"{self.name}Visitor"

    def operation_name(self, variant: VariantDef) -> str:
        """Name of the visitor operation for one of this family's variants."""
        return f"visit_{snake_case(variant.name)}_{self.module_name}"


@dataclass(frozen=True)
class UseDecl:
    """Types a generated module takes from an external Python module."""

    module: str
    names: tuple[str, ...]

    def __str__(self) -> str:
        return f"use {self.module}: {', '.join(self.names)}"


@dataclass(frozen=True)
class GrammarSpec:
    """The sole input of a generation run."""

    families: tuple[FamilyDef, ...]
    uses: tuple[UseDecl, ...] = ()

    def family(self, name: str) -> FamilyDef | None:
        for family in self.families:
            if family.name == name:
                return family
        return None

    @property
    def family_names(self) -> tuple[str, ...]:
        return tuple(f.name for f in self.families)

    def imported_names(self) -> dict[str, str]:
        """Map each name brought in by a use line to its module."""
        return {name: use.module for use in self.uses for name in use.names}

    def references(self) -> Iterator[tuple[FamilyDef, VariantDef, FieldDef, NamedRef]]:
        """Yield every named type reference, in declaration order."""
        for family in self.families:
            for variant in family.variants:
                for field in variant.fields:
                    for ref in field.type.names():
                        yield family, variant, field, ref

    def resolves(self, ref: NamedRef) -> bool:
        """Whether a named reference points at something declared or known."""
        if ref.is_scalar or ref.name in self.imported_names():
            return True
        if ref.qualifier is None:
            return self.family(ref.name) is not None
        family = self.family(ref.qualifier)
        return family is not None and family.variant(ref.local_name) is not None

    def unresolved(self) -> Iterator[tuple[FamilyDef, VariantDef, FieldDef, NamedRef]]:
        """Yield the references `resolves` rejects."""
        for family, variant, field, ref in self.references():
            if not self.resolves(ref):
                yield family, variant, field, ref

    def family_imports(self, family: FamilyDef) -> list[tuple[FamilyDef, list[str]]]:
        """Other families ``family`` refers to, with the names it needs from each."""
        wanted: dict[str, set[str]] = {}
        for variant in family.variants:
            for field in variant.fields:
                for ref in field.type.names():
                    if ref.is_scalar:
                        continue
                    target = self.family(ref.qualifier or ref.name)
                    if target is None or target.name == family.name:
                        continue
                    wanted.setdefault(target.name, set()).add(ref.local_name)

        imports = []
        for other in self.families:
            if other.name in wanted:
                names = [n for n in (other.name, *other.variant_names) if n in wanted[other.name]]
                imports.append((other, names))
        return imports


# =============================================================================
# Rendering
# =============================================================================


def to_text(spec: GrammarSpec) -> str:
    """Render a spec as grammar text that loads back to an equal spec."""
    blocks: list[str] = []
    if spec.uses:
        blocks.append("\n".join(str(use) for use in spec.uses))
    for family in spec.families:
        lines = [f"{family.name} {{"]
        lines.extend(f"    {variant}" for variant in family.variants)
        lines.append("}")
        blocks.append("\n".join(lines))
    return "\n\n".join(blocks) + "\n"


_ACRONYM = re.compile(r"([A-Z]+)([A-Z][a-z])")
_CAMEL = re.compile(r"([a-z0-9])([A-Z])")


def snake_case(name: str) -> str:
    """Expr → expr, TryCatch → try_catch, HTTPGet → http_get."""
    return _CAMEL.sub(r"\1_\2", _ACRONYM.sub(r"\1_\2", name)).lower()

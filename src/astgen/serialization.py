"""Dict and JSON forms of a grammar spec."""

from __future__ import annotations

import json
from dataclasses import fields
from typing import Any

from astgen.grammar import FamilyDef, FieldDef, GrammarSpec, UseDecl, VariantDef
from astgen.types import TypeRef


def type_to_dict(type_ref: TypeRef) -> dict[str, Any]:
    """Tagged dict form of a type reference."""
    result: dict[str, Any] = {"tag": type_ref._tag}
    for f in fields(type_ref):
        value = getattr(type_ref, f.name)
        result[f.name] = type_to_dict(value) if isinstance(value, TypeRef) else value
    return result


def type_from_dict(data: dict[str, Any]) -> TypeRef:
    """Rebuild a type reference from its tagged dict form."""
    cls = TypeRef.registered(data["tag"])
    kwargs = {
        f.name: type_from_dict(data[f.name]) if isinstance(data[f.name], dict) else data[f.name]
        for f in fields(cls)
    }
    return cls(**kwargs)


def to_dict(spec: GrammarSpec) -> dict[str, Any]:
    return {
        "uses": [{"module": use.module, "names": list(use.names)} for use in spec.uses],
        "families": [
            {
                "name": family.name,
                "variants": [
                    {
                        "name": variant.name,
                        "fields": [
                            {"name": f.name, "type": type_to_dict(f.type)}
                            for f in variant.fields
                        ],
                    }
                    for variant in family.variants
                ],
            }
            for family in spec.families
        ],
    }


def from_dict(data: dict[str, Any]) -> GrammarSpec:
    uses = tuple(UseDecl(u["module"], tuple(u["names"])) for u in data.get("uses", ()))
    families = tuple(
        FamilyDef(
            family["name"],
            tuple(
                VariantDef(
                    variant["name"],
                    tuple(
                        FieldDef(f["name"], type_from_dict(f["type"]))
                        for f in variant.get("fields", ())
                    ),
                )
                for variant in family["variants"]
            ),
        )
        for family in data["families"]
    )
    return GrammarSpec(families, uses)


def to_json(spec: GrammarSpec, **kwargs: Any) -> str:
    return json.dumps(to_dict(spec), **kwargs)


def from_json(text: str) -> GrammarSpec:
    return from_dict(json.loads(text))

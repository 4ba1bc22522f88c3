"""
Grammar loading: grammar text in, GrammarSpec out.

The loader is strict about the shape of each line and permissive about what a
type reference names; unknown names are kept as opaque references.
"""

from __future__ import annotations

import keyword
import logging
from collections.abc import Iterable
from dataclasses import dataclass, field
from os import PathLike
from pathlib import Path

from astgen.errors import DuplicateDefinition, InvalidName, MalformedGrammarLine
from astgen.grammar import FamilyDef, FieldDef, GrammarSpec, UseDecl, VariantDef
from astgen.types import parse_type

logger = logging.getLogger(__name__)

# Names every generated module defines or imports itself.
RESERVED_NAMES: frozenset[str] = frozenset(
    {
        "ABC",
        "TYPE_CHECKING",
        "VARIANTS",
        "abstractmethod",
        "annotations",
        "dataclass",
        "dispatch",
        "final",
    }
)
RESERVED_FIELDS: frozenset[str] = frozenset({"self", "accept"})

# =============================================================================
# Lines
# =============================================================================


def parse_variant(
    line: str, lineno: int | None = None, source: str | None = None
) -> VariantDef:
    """
    Parse one variant line of the form ``Name: Type field, Type field``.

    Raises:
        MalformedGrammarLine: if the line has no ':' or a field is not ``Type name``
        InvalidName: if a name cannot be used in Python
        DuplicateDefinition: if two fields share a name
    """
    source = source if source is not None else line
    name, sep, rest = line.partition(":")
    if not sep:
        raise MalformedGrammarLine("missing ':' separator", source, lineno)
    name = name.strip()
    if not name:
        raise MalformedGrammarLine("missing variant name", source, lineno)
    _check_identifier("variant", name, lineno)

    fields: list[FieldDef] = []
    rest = rest.strip()
    for entry in rest.split(",") if rest else ():
        parts = entry.strip().rsplit(None, 1)
        if len(parts) != 2:
            raise MalformedGrammarLine(
                f"field {entry.strip()!r} is not 'Type name'", source, lineno
            )
        type_text, field_name = parts
        _check_identifier("field", field_name, lineno)
        if field_name in RESERVED_FIELDS:
            raise InvalidName(_where(lineno) + f"field name '{field_name}' is reserved")
        if any(f.name == field_name for f in fields):
            raise DuplicateDefinition(
                _where(lineno) + f"field '{field_name}' declared twice in {name}"
            )
        try:
            type_ref = parse_type(type_text)
        except MalformedGrammarLine as exc:
            raise MalformedGrammarLine(exc.reason, source, lineno) from exc
        fields.append(FieldDef(field_name, type_ref))

    return VariantDef(name, tuple(fields))


def parse_use(line: str, lineno: int | None = None) -> UseDecl:
    """Parse ``use package.module: Name, Name``."""
    body = line.strip().removeprefix("use").strip()
    module, sep, names_text = body.partition(":")
    module = module.strip()
    names = tuple(n.strip() for n in names_text.split(",") if n.strip())
    if not sep or not module or not names:
        raise MalformedGrammarLine("expected 'use module: Name, ...'", line, lineno)
    if not all(part.isidentifier() for part in module.split(".")):
        raise MalformedGrammarLine(f"bad module path '{module}'", line, lineno)
    for name in names:
        _check_identifier("imported", name, lineno)
    return UseDecl(module, names)


def _where(lineno: int | None) -> str:
    return f"line {lineno}: " if lineno is not None else ""


def _check_identifier(kind: str, name: str, lineno: int | None) -> None:
    if not name.isidentifier():
        raise InvalidName(_where(lineno) + f"{kind} name {name!r} is not an identifier")
    if keyword.iskeyword(name):
        raise InvalidName(_where(lineno) + f"{kind} name '{name}' is a Python keyword")


# =============================================================================
# Families and Grammars
# =============================================================================


@dataclass
class _OpenFamily:
    name: str
    header: str
    lineno: int
    variants: list[VariantDef] = field(default_factory=list)

    def close(self) -> FamilyDef:
        if not self.variants:
            raise MalformedGrammarLine("family declares no variants", self.header, self.lineno)
        return FamilyDef(self.name, tuple(self.variants))


def load_family(name: str, lines: Iterable[str]) -> FamilyDef:
    """Build one family from bare variant lines."""
    family = FamilyDef(name, tuple(parse_variant(line) for line in lines))
    validate(GrammarSpec((family,)))
    return family


def loads(text: str) -> GrammarSpec:
    """
    Parse grammar text.

    Raises:
        GrammarError: on the first malformed, duplicate or invalid definition
    """
    uses: list[UseDecl] = []
    families: list[FamilyDef] = []
    current: _OpenFamily | None = None

    for lineno, raw in enumerate(text.splitlines(), start=1):
        line = raw.split("#", 1)[0].strip()
        if not line:
            continue

        if current is None:
            if line == "use" or line.startswith("use "):
                uses.append(parse_use(line, lineno))
                continue
            name, brace, line = line.partition("{")
            name = name.strip()
            if not brace:
                raise MalformedGrammarLine("expected 'Family {' or a use line", raw, lineno)
            if not name:
                raise MalformedGrammarLine("missing family name", raw, lineno)
            _check_identifier("family", name, lineno)
            current = _OpenFamily(name, raw, lineno)
            line = line.strip()

        closing = line.endswith("}")
        if closing:
            line = line[:-1]
        if "{" in line or "}" in line:
            raise MalformedGrammarLine("unexpected brace", raw, lineno)
        for part in line.split(";"):
            if part.strip():
                current.variants.append(parse_variant(part.strip(), lineno, raw))
        if closing:
            families.append(current.close())
            logger.debug(
                "loaded family %s with %d variants", current.name, len(current.variants)
            )
            current = None

    if current is not None:
        raise MalformedGrammarLine("unterminated family block", current.header, current.lineno)

    spec = GrammarSpec(tuple(families), tuple(uses))
    validate(spec)
    return spec


def load(path: str | PathLike[str]) -> GrammarSpec:
    """
    Read and parse a grammar file.

    Raises:
        GrammarError: if the file is not UTF-8 or its text is not a valid grammar
        OSError: if the file cannot be read
    """
    data = Path(path).read_bytes()
    try:
        text = data.decode("utf-8")
    except UnicodeDecodeError as exc:
        lineno = data.count(b"\n", 0, exc.start) + 1
        line = data.split(b"\n")[lineno - 1].decode("utf-8", errors="replace").rstrip("\r")
        raise MalformedGrammarLine(f"not valid UTF-8 ({exc.reason})", line, lineno) from exc
    return loads(text)


# =============================================================================
# Validation
# =============================================================================


def validate(spec: GrammarSpec) -> None:
    """
    Check that every generated module can define and import its names.

    Type references are not checked here; see GrammarSpec.unresolved.
    """
    imported = spec.imported_names()
    seen_modules: dict[str, str] = {}

    for family in spec.families:
        if keyword.iskeyword(family.module_name):
            raise InvalidName(f"family '{family.name}' gives module name '{family.module_name}'")
        if clash := seen_modules.get(family.module_name):
            raise DuplicateDefinition(
                f"families '{clash}' and '{family.name}' both generate {family.module_name}.py"
            )
        seen_modules[family.module_name] = family.name

        reserved = RESERVED_NAMES | set(imported)
        if family.name in reserved:
            raise InvalidName(f"family '{family.name}' clashes with a generated name")
        if family.visitor_name in reserved | set(spec.family_names):
            raise InvalidName(
                f"visitor '{family.visitor_name}' of family '{family.name}' clashes with another name"
            )

        cross_family = {name for _, names in spec.family_imports(family) for name in names}
        taken = reserved | {family.visitor_name} | set(spec.family_names) | cross_family
        seen_variants: set[str] = set()
        for variant in family.variants:
            if variant.name in seen_variants:
                raise DuplicateDefinition(
                    f"variant '{variant.name}' declared twice in {family.name}"
                )
            if variant.name in taken:
                raise InvalidName(
                    f"variant '{family.name}.{variant.name}' clashes with a generated name"
                )
            seen_variants.add(variant.name)

"""
Type reference domain for grammar field types.

A field type in the grammar is one of a named type (scalar, token, literal
value, family or Family.Variant), a sequence marker (List<T>, Sequence<T>) or
an optional marker (Optional<T>, T?). Each kind is a frozen dataclass
registered under a tag, which is what serialization writes out.
"""

from __future__ import annotations

import re
from collections.abc import Iterator
from dataclasses import dataclass
from typing import ClassVar, dataclass_transform

from astgen.errors import MalformedGrammarLine

# =============================================================================
# Scalars
# =============================================================================

# Grammar scalar names and the Python annotation they render to.
SCALARS: dict[str, str] = {
    "Object": "object",
    "Value": "object",
    "String": "str",
    "Number": "float",
    "Double": "float",
    "Integer": "int",
    "Int": "int",
    "Boolean": "bool",
    "Nil": "None",
}

# Python builtin type names are accepted as they are.
PYTHON_SCALARS: frozenset[str] = frozenset(
    {"object", "str", "float", "int", "bool", "bytes", "None"}
)

SEQUENCE_MARKERS: frozenset[str] = frozenset({"List", "Sequence"})
OPTIONAL_MARKERS: frozenset[str] = frozenset({"Optional"})

_NAME = re.compile(r"[A-Za-z_][A-Za-z0-9_]*(\.[A-Za-z_][A-Za-z0-9_]*)?")

# =============================================================================
# Type References
# =============================================================================


@dataclass_transform(frozen_default=True)
class TypeRef:
    """Base for field type references."""

    _tag: ClassVar[str]
    _registry: ClassVar[dict[str, type[TypeRef]]] = {}

    def __init_subclass__(cls, tag: str | None = None, **kwargs):
        super().__init_subclass__(**kwargs)
        dataclass(frozen=True)(cls)
        cls._tag = tag or cls.__name__.lower().removesuffix("ref")

        if existing := TypeRef._registry.get(cls._tag):
            if existing is not cls:
                raise ValueError(
                    f"Tag '{cls._tag}' already registered to {existing}. "
                    f"Choose a different tag."
                )
        TypeRef._registry[cls._tag] = cls

    @classmethod
    def registered(cls, tag: str) -> type[TypeRef]:
        """Look up a reference kind by tag."""
        try:
            return cls._registry[tag]
        except KeyError:
            msg = f"Unknown type reference tag: {tag!r}"
            raise ValueError(msg) from None

    def names(self) -> Iterator[NamedRef]:
        """Yield every named type inside this reference."""
        raise NotImplementedError


class NamedRef(TypeRef, tag="named"):
    """
    A type referenced by name.

    Examples: Token, Expr, Object, Expr.Variable
    """

    name: str

    def __str__(self) -> str:
        return self.name

    def names(self) -> Iterator[NamedRef]:
        yield self

    @property
    def is_scalar(self) -> bool:
        return self.name in SCALARS or self.name in PYTHON_SCALARS

    @property
    def qualifier(self) -> str | None:
        """Family part of a Family.Variant reference."""
        head, dot, _ = self.name.partition(".")
        return head if dot else None

    @property
    def local_name(self) -> str:
        return self.name.rpartition(".")[2]


class SequenceRef(TypeRef, tag="sequence"):
    """
    Ordered sequence of elements, frozen into a tuple in generated nodes.

    Example: List<Expr> → SequenceRef(element=NamedRef("Expr"))
    """

    element: TypeRef

    def __str__(self) -> str:
        return f"List<{self.element}>"

    def names(self) -> Iterator[NamedRef]:
        yield from self.element.names()


class OptionalRef(TypeRef, tag="optional"):
    """
    A value that may be absent.

    Example: Optional<Stmt> or Stmt? → OptionalRef(inner=NamedRef("Stmt"))
    """

    inner: TypeRef

    def __str__(self) -> str:
        return f"Optional<{self.inner}>"

    def names(self) -> Iterator[NamedRef]:
        yield from self.inner.names()


# =============================================================================
# Parsing
# =============================================================================


def parse_type(text: str) -> TypeRef:
    """
    Parse a grammar type reference.

    Raises:
        MalformedGrammarLine: if the text is not a type reference
    """
    source = text.strip()
    result, rest = _parse(source, source)
    if rest:
        raise MalformedGrammarLine(f"unexpected {rest!r} after type", source)
    return result


def _parse(text: str, source: str) -> tuple[TypeRef, str]:
    match = _NAME.match(text)
    if match is None:
        raise MalformedGrammarLine("expected a type name", source)
    name = match.group(0)
    rest = text[match.end():].lstrip()

    if rest.startswith("<"):
        if name in SEQUENCE_MARKERS:
            wrap = SequenceRef
        elif name in OPTIONAL_MARKERS:
            wrap = OptionalRef
        else:
            raise MalformedGrammarLine(f"unsupported type constructor '{name}'", source)
        inner, rest = _parse(rest[1:].lstrip(), source)
        if not rest.startswith(">"):
            raise MalformedGrammarLine("missing '>'", source)
        result: TypeRef = wrap(inner)
        rest = rest[1:].lstrip()
    else:
        result = NamedRef(name)

    if rest.startswith("?"):
        result = OptionalRef(result)
        rest = rest[1:].lstrip()
    return result, rest


def python_scalar(name: str) -> str | None:
    """Python annotation for a scalar name, or None if it is not a scalar."""
    if name in SCALARS:
        return SCALARS[name]
    if name in PYTHON_SCALARS:
        return name
    return None

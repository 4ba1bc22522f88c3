"""astgen - Syntax tree node and visitor generator for Python 3.12+."""

from astgen.emitter import (
    annotation,
    emit_family,
    module_filename,
)
from astgen.errors import (
    AstgenError,
    DuplicateDefinition,
    GrammarError,
    InvalidName,
    IOFailure,
    MalformedGrammarLine,
    UnknownTypeReference,
)
from astgen.generator import (
    generate,
    publish,
    render,
)
from astgen.grammar import (
    # Grammar model
    FamilyDef,
    FieldDef,
    GrammarSpec,
    UseDecl,
    VariantDef,
    snake_case,
    to_text,
)
from astgen.loader import (
    # Loading
    load,
    load_family,
    loads,
    parse_use,
    parse_variant,
    validate,
)
from astgen.lox import (
    LOX_GRAMMAR,
    Token,
    TokenType,
    load_lox,
)
from astgen.serialization import (
    from_dict,
    from_json,
    to_dict,
    to_json,
)
from astgen.types import (
    # Type references
    NamedRef,
    OptionalRef,
    SequenceRef,
    TypeRef,
    parse_type,
)

__all__ = [
    "LOX_GRAMMAR",
    "AstgenError",
    "DuplicateDefinition",
    # Grammar model
    "FamilyDef",
    "FieldDef",
    "GrammarError",
    "GrammarSpec",
    "IOFailure",
    "InvalidName",
    "MalformedGrammarLine",
    # Type references
    "NamedRef",
    "OptionalRef",
    "SequenceRef",
    "Token",
    "TokenType",
    "TypeRef",
    "UnknownTypeReference",
    "UseDecl",
    "VariantDef",
    # Emission and generation
    "annotation",
    "emit_family",
    "from_dict",
    "from_json",
    "generate",
    # Loading
    "load",
    "load_family",
    "load_lox",
    "loads",
    "module_filename",
    "parse_type",
    "parse_use",
    "parse_variant",
    "publish",
    "render",
    "snake_case",
    # Serialization
    "to_dict",
    "to_json",
    "to_text",
    "validate",
]

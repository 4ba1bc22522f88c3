"""
Error domain for grammar loading and code generation.

Every failure is fatal for the generation run. Grammar errors are raised
before any output is touched; output failures are wrapped in IOFailure.
"""

from __future__ import annotations

from pathlib import Path


class AstgenError(Exception):
    """Base for all astgen errors."""


class GrammarError(AstgenError, ValueError):
    """The grammar input itself is corrupt."""


class MalformedGrammarLine(GrammarError):
    """A grammar line that cannot be parsed."""

    def __init__(self, reason: str, line: str, lineno: int | None = None):
        self.reason = reason
        self.line = line
        self.lineno = lineno
        where = f"line {lineno}: " if lineno is not None else ""
        super().__init__(f"{where}{reason}: {line.strip()!r}")


class DuplicateDefinition(GrammarError):
    """A family, variant or field declared twice."""


class InvalidName(GrammarError):
    """A name that cannot appear in a generated module."""


class UnknownTypeReference(GrammarError):
    """A field type that names nothing known (strict mode only)."""

    def __init__(self, family: str, variant: str, field: str, name: str):
        self.family = family
        self.variant = variant
        self.field = field
        self.name = name
        super().__init__(
            f"{family}.{variant}.{field}: unknown type reference '{name}'"
        )


class IOFailure(AstgenError, OSError):
    """Generated output could not be published."""

    def __init__(self, path: Path, cause: OSError):
        self.path = path
        self.cause = cause
        super().__init__(f"cannot write {path}: {cause.strerror or cause}")

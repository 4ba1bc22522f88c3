"""Tests for astgen.types module."""

import dataclasses

import pytest

from astgen.errors import MalformedGrammarLine
from astgen.types import (
    SCALARS,
    NamedRef,
    OptionalRef,
    SequenceRef,
    TypeRef,
    parse_type,
    python_scalar,
)


class TestScalars:
    """Test scalar name handling."""

    def test_grammar_scalars(self):
        """Test that grammar scalar names map to Python builtins."""
        assert SCALARS["Object"] == "object"
        assert SCALARS["String"] == "str"
        assert SCALARS["Number"] == "float"
        assert SCALARS["Boolean"] == "bool"

    def test_python_scalar_passthrough(self):
        """Test that Python builtin names render as themselves."""
        assert python_scalar("int") == "int"
        assert python_scalar("Value") == "object"

    def test_non_scalar(self):
        """Test that other names are not scalars."""
        assert python_scalar("Token") is None
        assert python_scalar("Expr") is None


class TestRegistry:
    """Test the type reference tag registry."""

    def test_tags(self):
        """Test the tag of each reference kind."""
        assert NamedRef._tag == "named"
        assert SequenceRef._tag == "sequence"
        assert OptionalRef._tag == "optional"

    def test_registered_lookup(self):
        """Test looking a kind up by tag."""
        assert TypeRef.registered("sequence") is SequenceRef

    def test_unknown_tag(self):
        """Test that an unknown tag is rejected."""
        with pytest.raises(ValueError, match="Unknown type reference tag"):
            TypeRef.registered("mystery")

    def test_tag_collision(self):
        """Test that a second kind cannot reuse a tag."""
        with pytest.raises(ValueError, match="already registered"):

            class Clash(TypeRef, tag="named"):
                name: str


class TestNamedRef:
    """Test NamedRef."""

    def test_frozen(self):
        """Test that NamedRef is immutable."""
        ref = NamedRef("Token")
        with pytest.raises(dataclasses.FrozenInstanceError):
            ref.name = "Expr"

    def test_qualified(self):
        """Test the parts of a Family.Variant reference."""
        ref = NamedRef("Expr.Variable")
        assert ref.qualifier == "Expr"
        assert ref.local_name == "Variable"

    def test_unqualified(self):
        """Test a plain name has no qualifier."""
        ref = NamedRef("Expr")
        assert ref.qualifier is None
        assert ref.local_name == "Expr"

    def test_is_scalar(self):
        """Test scalar detection."""
        assert NamedRef("Object").is_scalar
        assert NamedRef("str").is_scalar
        assert not NamedRef("Token").is_scalar


class TestParseType:
    """Test parsing type reference text."""

    def test_name(self):
        """Test a plain name."""
        assert parse_type("Token") == NamedRef("Token")

    def test_qualified_name(self):
        """Test a Family.Variant name."""
        assert parse_type("Stmt.Function") == NamedRef("Stmt.Function")

    def test_list(self):
        """Test the List marker."""
        assert parse_type("List<Expr>") == SequenceRef(NamedRef("Expr"))

    def test_sequence_marker_is_list(self):
        """Test that Sequence and List parse to the same reference."""
        assert parse_type("Sequence<Expr>") == parse_type("List<Expr>")

    def test_optional(self):
        """Test both optional spellings."""
        expected = OptionalRef(NamedRef("Stmt"))
        assert parse_type("Optional<Stmt>") == expected
        assert parse_type("Stmt?") == expected

    def test_nested(self):
        """Test nested markers and inner whitespace."""
        result = parse_type("List< Optional<Expr.Variable> >")
        assert result == SequenceRef(OptionalRef(NamedRef("Expr.Variable")))

    def test_str_is_canonical(self):
        """Test that str() gives grammar text that parses back equal."""
        for text in ["Token", "List<Stmt.Function>", "Sequence<Expr>?", "Optional<List<Token>>"]:
            ref = parse_type(text)
            assert parse_type(str(ref)) == ref

    def test_names(self):
        """Test collecting the named types inside a reference."""
        ref = parse_type("Optional<List<Expr>>")
        assert list(ref.names()) == [NamedRef("Expr")]

    @pytest.mark.parametrize(
        "text",
        ["", "List<Expr", "Map<Expr>", "Expr>", "1Expr", "List<>", "Expr Stmt"],
    )
    def test_malformed(self, text):
        """Test that malformed references are rejected."""
        with pytest.raises(MalformedGrammarLine):
            parse_type(text)

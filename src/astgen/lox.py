"""
The built-in Lox grammar and the token values its nodes carry.

Generated Lox modules import Token from here for type checking only, so a
scanner may produce any object with the same attributes.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto
from typing import Any

from astgen.grammar import GrammarSpec
from astgen.loader import loads

LOX_GRAMMAR = """\
# Lox syntax trees: expressions and statements.
use astgen.lox: Token

Expr {
    Assign: Token name, Expr value
    Binary: Expr left, Token operator, Expr right
    Call: Expr callee, Token paren, List<Expr> arguments
    Get: Expr object, Token name
    Grouping: Expr expression
    Literal: Object value
    Logical: Expr left, Token operator, Expr right
    Set: Expr object, Token name, Expr value
    Super: Token keyword, Token method
    This: Token keyword
    Unary: Token operator, Expr right
    Variable: Token name
}

Stmt {
    Block: List<Stmt> statements
    Class: Token name, Optional<Expr.Variable> superclass, List<Stmt.Function> methods
    Expression: Expr expression
    Function: Token name, List<Token> params, List<Stmt> body
    If: Expr condition, Stmt then_branch, Optional<Stmt> else_branch
    Print: Expr expression
    Return: Token keyword, Optional<Expr> value
    Var: Token name, Optional<Expr> initializer
    While: Expr condition, Stmt body
}
"""


def load_lox() -> GrammarSpec:
    """Parse the built-in Lox grammar."""
    return loads(LOX_GRAMMAR)


class TokenType(Enum):
    # Single-character tokens.
    LEFT_PAREN = auto()
    RIGHT_PAREN = auto()
    LEFT_BRACE = auto()
    RIGHT_BRACE = auto()
    COMMA = auto()
    DOT = auto()
    MINUS = auto()
    PLUS = auto()
    SEMICOLON = auto()
    SLASH = auto()
    STAR = auto()

    # One or two character tokens.
    BANG = auto()
    BANG_EQUAL = auto()
    EQUAL = auto()
    EQUAL_EQUAL = auto()
    GREATER = auto()
    GREATER_EQUAL = auto()
    LESS = auto()
    LESS_EQUAL = auto()

    # Literals.
    IDENTIFIER = auto()
    STRING = auto()
    NUMBER = auto()

    # Keywords.
    AND = auto()
    CLASS = auto()
    ELSE = auto()
    FALSE = auto()
    FUN = auto()
    FOR = auto()
    IF = auto()
    NIL = auto()
    OR = auto()
    PRINT = auto()
    RETURN = auto()
    SUPER = auto()
    THIS = auto()
    TRUE = auto()
    VAR = auto()
    WHILE = auto()

    EOF = auto()


@dataclass(frozen=True)
class Token:
    """A scanned token."""

    type: TokenType
    lexeme: str
    literal: Any = None
    line: int = 1

    def __str__(self) -> str:
        return self.lexeme

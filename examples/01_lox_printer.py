"""
Lox AST Printer Example
=======================

This example generates the Lox syntax tree modules and writes a visitor over
them. It covers:

1. Generating node families from the built-in grammar
2. Building an expression tree with the generated constructors
3. Implementing the generated visitor protocol
4. Dispatching a tree to the visitor

Run it with ``python examples/01_lox_printer.py``.
"""

import sys
import tempfile
from pathlib import Path

from astgen import Token, TokenType, generate, load_lox


# ============================================================================
# Step 1: Generate the node modules
# ============================================================================
# The output directory is made a package so the modules can be imported.


def generate_package(root: Path) -> None:
    package = root / "loxast"
    generate(load_lox(), package)
    (package / "__init__.py").write_text("")
    sys.path.insert(0, str(root))


# ============================================================================
# Step 2: A visitor
# ============================================================================
# Every operation of ExprVisitor must be implemented, or the class cannot be
# instantiated.


def make_printer():
    from loxast.expr import ExprVisitor, dispatch

    class AstPrinter(ExprVisitor[str]):
        def print(self, expr) -> str:
            return dispatch(expr, self)

        def parenthesize(self, name: str, *exprs) -> str:
            return "(" + " ".join([name, *(self.print(e) for e in exprs)]) + ")"

        def visit_assign_expr(self, node):
            return self.parenthesize(f"= {node.name.lexeme}", node.value)

        def visit_binary_expr(self, node):
            return self.parenthesize(node.operator.lexeme, node.left, node.right)

        def visit_call_expr(self, node):
            return self.parenthesize("call", node.callee, *node.arguments)

        def visit_get_expr(self, node):
            return self.parenthesize(f". {node.name.lexeme}", node.object)

        def visit_grouping_expr(self, node):
            return self.parenthesize("group", node.expression)

        def visit_literal_expr(self, node):
            return "nil" if node.value is None else str(node.value)

        def visit_logical_expr(self, node):
            return self.parenthesize(node.operator.lexeme, node.left, node.right)

        def visit_set_expr(self, node):
            return self.parenthesize(f"= {node.name.lexeme}", node.object, node.value)

        def visit_super_expr(self, node):
            return f"super.{node.method.lexeme}"

        def visit_this_expr(self, node):
            return "this"

        def visit_unary_expr(self, node):
            return self.parenthesize(node.operator.lexeme, node.right)

        def visit_variable_expr(self, node):
            return node.name.lexeme

    return AstPrinter()


# ============================================================================
# Step 3: Build and print a tree
# ============================================================================


def main() -> None:
    with tempfile.TemporaryDirectory() as root:
        generate_package(Path(root))
        from loxast.expr import Binary, Grouping, Literal, Unary

        # -123 * (45.67)
        expression = Binary(
            Unary(Token(TokenType.MINUS, "-"), Literal(123)),
            Token(TokenType.STAR, "*"),
            Grouping(Literal(45.67)),
        )
        print(make_printer().print(expression))


if __name__ == "__main__":
    main()

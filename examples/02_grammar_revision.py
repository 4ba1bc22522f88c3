"""
Grammar Revision Example
========================

Grammars grow. This example regenerates the Lox expression family after a new
variant is appended and shows the diff of the generated module: every section
only gains lines, and the new visitor operation comes last.

Run it with ``python examples/02_grammar_revision.py``.
"""

import difflib

from astgen import LOX_GRAMMAR, emit_family, loads

CALL = "    Call: Expr callee, Token paren, Sequence<Expr> arguments\n"


def main() -> None:
    before = loads(LOX_GRAMMAR.replace(CALL.replace("Sequence", "List"), ""))
    after = loads(
        LOX_GRAMMAR.replace(CALL.replace("Sequence", "List"), "").replace(
            "    Variable: Token name\n", "    Variable: Token name\n" + CALL
        )
    )

    old = emit_family(before, before.family("Expr")).splitlines(keepends=True)
    new = emit_family(after, after.family("Expr")).splitlines(keepends=True)
    print("".join(difflib.unified_diff(old, new, "expr.py (before)", "expr.py (after)")))


if __name__ == "__main__":
    main()

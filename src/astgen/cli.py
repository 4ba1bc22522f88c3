"""Command line: ``astgen [--grammar PATH] [--strict] [-v] OUTPUT_DIR``."""

from __future__ import annotations

import argparse
import logging
import sys
from collections.abc import Sequence

from astgen.errors import GrammarError, IOFailure
from astgen.generator import generate
from astgen.loader import load
from astgen.lox import load_lox

# sysexits.h
EX_USAGE = 64
EX_DATAERR = 65
EX_IOERR = 74

logger = logging.getLogger(__name__)


class _ArgumentParser(argparse.ArgumentParser):
    def error(self, message: str):
        self.print_usage(sys.stderr)
        self.exit(EX_USAGE, f"{self.prog}: error: {message}\n")


def build_parser() -> argparse.ArgumentParser:
    parser = _ArgumentParser(
        prog="astgen",
        description="Generate syntax tree node modules and their visitor protocols.",
    )
    parser.add_argument("output_dir", help="directory that receives one module per family")
    parser.add_argument(
        "--grammar",
        metavar="PATH",
        help="grammar file to generate from (default: the built-in Lox grammar)",
    )
    parser.add_argument(
        "--strict",
        action="store_true",
        help="reject type references that name no scalar, family or used type",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="log each step")
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    try:
        spec = load(args.grammar) if args.grammar else load_lox()
        generate(spec, args.output_dir, strict=args.strict)
    except GrammarError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return EX_DATAERR
    except IOFailure as exc:
        print(f"error: {exc}", file=sys.stderr)
        return EX_IOERR
    except OSError as exc:
        # Unreadable grammar file.
        print(f"error: cannot read {args.grammar}: {exc.strerror or exc}", file=sys.stderr)
        return EX_IOERR

    logger.debug("done")
    return 0


if __name__ == "__main__":
    sys.exit(main())

"""Command line interface for mathexpr."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

from .core.config import get_settings
from .core.errors import ExpressionError
from .core.logging import get_context_logger, setup_logging
from .parser import Context, Parser

logger = get_context_logger(__name__)


def _variable(text: str) -> tuple[str, float]:
    name, sep, value = text.partition("=")
    if not sep or not name.strip():
        raise argparse.ArgumentTypeError(f"expected NAME=VALUE, got {text!r}")
    try:
        return name.strip(), float(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"value of {name.strip()!r} is not a number: {value!r}") from None


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="mathexpr",
        description="Evaluate an arithmetic expression.",
    )
    parser.add_argument(
        "expression",
        help="Expression to evaluate, e.g. '2a + sin(pi / 2)'.",
    )
    parser.add_argument(
        "-v",
        "--var",
        dest="variables",
        action="append",
        type=_variable,
        default=[],
        metavar="NAME=VALUE",
        help="Set a variable; may be repeated.",
    )
    parser.add_argument(
        "--context",
        type=Path,
        help="YAML file with extra constants and function aliases "
        "(defaults to MATHEXPR_CONTEXT_FILE).",
    )
    parser.add_argument(
        "--show-tree",
        action="store_true",
        help="Print the parsed elements before the result.",
    )
    parser.add_argument(
        "-q",
        "--quiet",
        action="store_true",
        help="Suppress error details.",
    )
    return parser


def main(argv: list[str] | None = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)

    settings = get_settings()
    setup_logging(settings)

    try:
        context_file = args.context or settings.CONTEXT_FILE
        context = Context.from_yaml(context_file) if context_file else Context.default()

        expression = Parser(context).parse(args.expression)
        for name, value in args.variables:
            expression.set_variable(name, value)

        if args.show_tree:
            for element in expression.elements:
                print(repr(element))

        result = expression.evaluate()
    except ExpressionError as exc:
        logger.debug("Evaluation failed", extra_data={"expression": args.expression, **exc.details})
        if not args.quiet:
            print(f"error: {exc}", file=sys.stderr)
        return 1

    print(repr(result))
    return 0


if __name__ == "__main__":  # pragma: no cover - CLI entry point
    sys.exit(main())

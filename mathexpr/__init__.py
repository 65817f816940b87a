"""
mathexpr

Parse arithmetic expressions (numbers, variables, parentheses, math functions
and the operators ^ * / + -) and evaluate them to a float.

    >>> from mathexpr import parse
    >>> parse("1 + 1 * 2 / 2 ^ 2").evaluate()
    1.5
"""

from collections.abc import MutableMapping
from typing import Optional

from .core.errors import (
    ContextError,
    EvaluationError,
    ExpressionError,
    InvalidExpressionError,
    ParseError,
    UnknownFunctionError,
    UnknownVariableError,
)
from .parser import Context, Expression, Parser, VariableMap

__version__ = "1.0.0"


def parse(
    text: str,
    variables: Optional[MutableMapping] = None,
    context: Optional[Context] = None,
) -> Expression:
    """
    Parse ``text`` into an Expression.

    Args:
        text: The expression, e.g. ``"2a + sin(pi / 2)"``
        variables: Optional mapping of variable values; it is shared with the
            returned expression, not copied
        context: Function and constant tables (defaults to Context.default())

    Raises:
        ParseError: If the text is not a valid expression
    """
    return Parser(context).parse(text, variables)


__all__ = [
    "parse",
    "Context",
    "Expression",
    "Parser",
    "VariableMap",
    "ContextError",
    "EvaluationError",
    "ExpressionError",
    "InvalidExpressionError",
    "ParseError",
    "UnknownFunctionError",
    "UnknownVariableError",
]

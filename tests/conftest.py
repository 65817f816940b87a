"""
Shared pytest fixtures.

This module provides:
- A default context and parser
- A helper that parses and evaluates in one call
"""

import pytest

from mathexpr.parser import Context, Parser


@pytest.fixture
def context() -> Context:
    """Fresh default context (safe to mutate)."""
    return Context.default()


@pytest.fixture
def parser(context: Context) -> Parser:
    """Parser bound to the default context."""
    return Parser(context)


@pytest.fixture
def evaluate(parser: Parser):
    """Parse an expression, set keyword variables and evaluate it."""
    def _evaluate(text: str, **variables: float) -> float:
        expression = parser.parse(text)
        for name, value in variables.items():
            expression.set_variable(name, value)
        return expression.evaluate()
    return _evaluate

"""
Parsed arithmetic expressions.

An Expression owns an immutable element sequence and shares a mutable
variable mapping with every sub-expression parsed from the same text, so a
variable set on any of them is visible to all.
"""

from __future__ import annotations

import threading
from collections.abc import MutableMapping
from typing import Iterator, Optional, Sequence

from ..core.errors import InvalidExpressionError
from .context import Context
from .elements import Element, Function, Parenthesis, find_violation
from .evaluator import Evaluator
from .visitors import StringVisitor


class VariableMap(MutableMapping):
    """Dictionary of variable values guarded by a lock."""

    def __init__(self, *args, **kwargs):
        self._lock = threading.RLock()
        self._data: dict[str, float] = dict(*args, **kwargs)

    def __getitem__(self, name: str) -> float:
        with self._lock:
            return self._data[name]

    def __setitem__(self, name: str, value: float) -> None:
        with self._lock:
            self._data[name] = value

    def __delitem__(self, name: str) -> None:
        with self._lock:
            del self._data[name]

    def __iter__(self) -> Iterator[str]:
        with self._lock:
            return iter(list(self._data))

    def __len__(self) -> int:
        with self._lock:
            return len(self._data)

    def get(self, name: str, default: Optional[float] = None) -> Optional[float]:
        with self._lock:
            return self._data.get(name, default)

    def pop(self, name: str, *default):
        with self._lock:
            return self._data.pop(name, *default)

    def __repr__(self) -> str:
        with self._lock:
            return f"VariableMap({self._data!r})"


class Expression:
    """
    A parsed arithmetic expression.

    Examples:
        >>> Expression.parse("1 + 1 * 2").evaluate()
        3.0

        >>> Expression.parse("2a").set_variable("a", 3).evaluate()
        6.0
    """

    def __init__(
        self,
        elements: Sequence[Element] = (),
        variables: Optional[MutableMapping] = None,
        context: Optional[Context] = None,
    ):
        self._elements = tuple(elements)
        self._variables = variables if variables is not None else VariableMap()
        self._context = context if context is not None else Context.default()

    @classmethod
    def parse(
        cls,
        text: str,
        variables: Optional[MutableMapping] = None,
        context: Optional[Context] = None,
    ) -> Expression:
        """Parse ``text``; see Parser.parse."""
        from .parser import Parser

        return Parser(context).parse(text, variables)

    @property
    def elements(self) -> tuple[Element, ...]:
        return self._elements

    @property
    def variables(self) -> MutableMapping:
        """The variable mapping, shared with every sub-expression."""
        return self._variables

    @property
    def context(self) -> Context:
        return self._context

    def evaluate(self) -> float:
        """
        Evaluate the expression with the current variable values.

        Raises:
            EvaluationError: If the expression is empty or a name is unresolved
            InvalidExpressionError: If the structure violates the grammar
        """
        if self._elements:
            violation = find_violation(self._elements)
            if violation is not None:
                index, message = violation
                raise InvalidExpressionError(message, position=index)

        return Evaluator(self._variables, self._context).evaluate(self._elements)

    def set_variable(self, name: str, value: float) -> Expression:
        """Set a variable (case-sensitive) and return self for chaining."""
        self._variables[name] = float(value)
        return self

    def remove_variable(self, name: str) -> Optional[float]:
        """Remove a variable, returning its previous value if it was set."""
        return self._variables.pop(name, None)

    def is_valid(self) -> bool:
        """Check this expression and every nested one against the grammar."""
        if find_violation(self._elements) is not None:
            return False

        for element in self._elements:
            if isinstance(element, Parenthesis) and not element.expression.is_valid():
                return False
            if isinstance(element, Function) and not all(
                argument.is_valid() for argument in element.arguments
            ):
                return False

        return True

    def __str__(self) -> str:
        return StringVisitor().render(self._elements)

    def __repr__(self) -> str:
        return f"Expression({str(self)!r})"

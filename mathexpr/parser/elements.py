"""
Element definitions for parsed arithmetic expressions.

An expression is kept flat: an ordered sequence of elements in which only
Parenthesis and Function own nested expressions. Every element kind declares
which kinds may follow it; that adjacency table is the grammar the parser
enforces and the evaluator re-checks.
"""

from __future__ import annotations

import math
import operator
from abc import ABC, abstractmethod
from enum import Enum, auto
from typing import TYPE_CHECKING, Any, ClassVar, Optional, Sequence

if TYPE_CHECKING:
    from .expression import Expression
    from .visitors import ElementVisitor


def _divide(left: float, right: float) -> float:
    try:
        return left / right
    except ZeroDivisionError:
        if left == 0 or math.isnan(left):
            return math.nan
        return math.copysign(math.inf, left) * math.copysign(1.0, right)


def _is_odd_integer(value: float) -> bool:
    return math.isfinite(value) and value == int(value) and int(value) % 2 == 1


def _power(left: float, right: float) -> float:
    try:
        return math.pow(left, right)
    except OverflowError:
        if left < 0 and _is_odd_integer(right):
            return -math.inf
        return math.inf
    except ValueError:
        # 0 raised to a negative power, or a negative base with a fractional exponent
        if left == 0:
            if _is_odd_integer(right):
                return math.copysign(math.inf, left)
            return math.inf
        return math.nan


class OperatorKind(Enum):
    """
    The five arithmetic operators.

    Each member carries its symbol, the binary function combining two
    operands, its precedence tier (lower tiers fire first) and an optional
    sign modifier that lets it act as a unary prefix.
    """

    POWER = ("^", _power, 0, None)
    MULTIPLY = ("*", operator.mul, 1, None)
    DIVIDE = ("/", _divide, 1, None)
    ADD = ("+", operator.add, 2, 1)
    SUBTRACT = ("-", operator.sub, 2, -1)

    def __init__(self, symbol: str, combiner, tier: int, modifier: Optional[int]):
        self.symbol = symbol
        self.combiner = combiner
        self.tier = tier
        self.modifier = modifier

    @property
    def is_modifier(self) -> bool:
        return self.modifier is not None

    def combine(self, left: float, right: float) -> float:
        return float(self.combiner(left, right))

    @classmethod
    def from_symbol(cls, symbol: str) -> OperatorKind:
        for kind in cls:
            if kind.symbol == symbol:
                return kind
        raise ValueError(f"Could not find operator for symbol {symbol!r}")

    @classmethod
    def tiers(cls) -> list[frozenset[OperatorKind]]:
        """Operator groups in the order they are reduced."""
        grouped: dict[int, set[OperatorKind]] = {}
        for kind in cls:
            grouped.setdefault(kind.tier, set()).add(kind)
        return [frozenset(grouped[tier]) for tier in sorted(grouped)]


class ElementKind(Enum):
    """Closed set of element kinds."""

    NUMBER = auto()
    OPERATOR = auto()
    PARENTHESIS = auto()
    FUNCTION = auto()
    VARIABLE = auto()
    COMMA = auto()


# Adjacency automaton: kinds allowed directly after each kind
SUCCESSORS: dict[ElementKind, frozenset[ElementKind]] = {
    ElementKind.NUMBER: frozenset(
        {ElementKind.OPERATOR, ElementKind.PARENTHESIS, ElementKind.COMMA}
    ),
    ElementKind.PARENTHESIS: frozenset(
        {ElementKind.OPERATOR, ElementKind.PARENTHESIS, ElementKind.COMMA}
    ),
    ElementKind.FUNCTION: frozenset({ElementKind.OPERATOR, ElementKind.COMMA}),
    ElementKind.VARIABLE: frozenset({ElementKind.OPERATOR, ElementKind.COMMA}),
    ElementKind.OPERATOR: frozenset(
        {
            ElementKind.NUMBER,
            ElementKind.PARENTHESIS,
            ElementKind.FUNCTION,
            ElementKind.VARIABLE,
            ElementKind.OPERATOR,
        }
    ),
    ElementKind.COMMA: frozenset(
        {
            ElementKind.PARENTHESIS,
            ElementKind.NUMBER,
            ElementKind.VARIABLE,
            ElementKind.FUNCTION,
            ElementKind.OPERATOR,
        }
    ),
}


class Element(ABC):
    """
    Base class for all elements.

    Uses the Visitor pattern so evaluation and rendering live outside the
    element classes.
    """

    kind: ClassVar[ElementKind]
    evaluable: ClassVar[bool] = True
    complete: ClassVar[bool] = True

    def valid_next(self) -> frozenset[ElementKind]:
        """Element kinds that may directly follow this one."""
        return SUCCESSORS[self.kind]

    def allows(self, following: Element) -> bool:
        """Check whether ``following`` may directly follow this element."""
        if following.kind not in self.valid_next():
            return False
        if isinstance(following, Operator) and not following.operator.is_modifier:
            # Only sign modifiers may stack after another operator or a comma
            return self.kind not in (ElementKind.OPERATOR, ElementKind.COMMA)
        return True

    @abstractmethod
    def accept(self, visitor: ElementVisitor) -> Any:
        """Accept a visitor for traversal."""

    @abstractmethod
    def __repr__(self) -> str:
        """Return string representation for debugging."""


class Number(Element):
    """
    A numeric literal.

    Examples: 42, 3.14, .5, 1e-10
    """

    kind = ElementKind.NUMBER

    def __init__(self, value: float | int):
        self.value = float(value)

    def accept(self, visitor: ElementVisitor) -> Any:
        return visitor.visit_number(self)

    def __repr__(self) -> str:
        return f"Number({self.value})"

    def __eq__(self, other: object) -> bool:
        return isinstance(other, Number) and self.value == other.value


class Operator(Element):
    """One of ^ * / + -; binds the operands around it."""

    kind = ElementKind.OPERATOR
    evaluable = False
    complete = False

    def __init__(self, operator: OperatorKind):
        self.operator = operator

    def accept(self, visitor: ElementVisitor) -> Any:
        return visitor.visit_operator(self)

    def __repr__(self) -> str:
        return f"Operator({self.operator.name})"

    def __eq__(self, other: object) -> bool:
        return isinstance(other, Operator) and self.operator is other.operator


class Parenthesis(Element):
    """
    A parenthesized group owning one nested expression.

    Examples: (1 + 2), (a)
    """

    kind = ElementKind.PARENTHESIS

    def __init__(self, expression: Expression):
        self.expression = expression

    def accept(self, visitor: ElementVisitor) -> Any:
        return visitor.visit_parenthesis(self)

    def __repr__(self) -> str:
        return f"Parenthesis({list(self.expression.elements)!r})"

    def __eq__(self, other: object) -> bool:
        return (
            isinstance(other, Parenthesis)
            and self.expression.elements == other.expression.elements
        )


class Function(Element):
    """
    A function call owning one expression per argument.

    Examples: sin(x), atan2(y, x), random()

    Arguments that parsed to no elements are dropped, which is how a call
    with empty parentheses gets zero arguments.
    """

    kind = ElementKind.FUNCTION

    def __init__(self, name: str, arguments: Sequence[Expression]):
        self.name = name
        self.arguments = tuple(arg for arg in arguments if arg.elements)

    @property
    def arity(self) -> int:
        return len(self.arguments)

    def accept(self, visitor: ElementVisitor) -> Any:
        return visitor.visit_function(self)

    def __repr__(self) -> str:
        args_repr = ", ".join(repr(list(arg.elements)) for arg in self.arguments)
        return f"Function('{self.name}', [{args_repr}])"

    def __eq__(self, other: object) -> bool:
        return (
            isinstance(other, Function)
            and self.name == other.name
            and [a.elements for a in self.arguments] == [a.elements for a in other.arguments]
        )


class Variable(Element):
    """
    A named value resolved at evaluation time.

    Examples: x, theta, pi
    """

    kind = ElementKind.VARIABLE

    def __init__(self, name: str):
        self.name = name

    def accept(self, visitor: ElementVisitor) -> Any:
        return visitor.visit_variable(self)

    def __repr__(self) -> str:
        return f"Variable('{self.name}')"

    def __eq__(self, other: object) -> bool:
        return isinstance(other, Variable) and self.name == other.name


class Comma(Element):
    """Argument separator; only present while a call's arguments are split."""

    kind = ElementKind.COMMA
    evaluable = False
    complete = False

    def accept(self, visitor: ElementVisitor) -> Any:
        return visitor.visit_comma(self)

    def __repr__(self) -> str:
        return "Comma()"

    def __eq__(self, other: object) -> bool:
        return isinstance(other, Comma)


def can_start(element: Element) -> bool:
    """Check whether ``element`` may open a sequence."""
    if isinstance(element, Comma):
        return False
    if isinstance(element, Operator):
        return element.operator.is_modifier
    return True


def find_violation(elements: Sequence[Element]) -> Optional[tuple[int, str]]:
    """
    Check a flat element sequence against the adjacency automaton.

    Returns:
        ``None`` if the sequence is valid, otherwise the offending index and
        a description
    """
    if not elements:
        return 0, "Empty expression"

    if not can_start(elements[0]):
        return 0, f"Cannot start expression with {elements[0]!r}"

    for index in range(1, len(elements)):
        previous, current = elements[index - 1], elements[index]
        if isinstance(current, Comma):
            return index, "Comma outside of a function argument list"
        if not previous.allows(current):
            expected = " or ".join(
                sorted(kind.name.title() for kind in previous.valid_next())
            )
            return index, f"Unexpected {current!r} after {previous!r}, expecting {expected}"

    if not elements[-1].complete:
        return len(elements) - 1, f"Incomplete expression ending with {elements[-1]!r}"

    return None

"""
Element visitors.

Visitors implement the Visitor pattern to operate on elements:
- StringVisitor: render an element sequence back to text
- Evaluator (see evaluator.py): reduce an element sequence to a float
"""

from typing import Any, Protocol, Sequence

from .elements import Comma, Element, Function, Number, Operator, Parenthesis, Variable


class ElementVisitor(Protocol):
    """
    Visitor protocol for element kinds.

    Every kind has its own method so behaviour that varies per kind is
    matched exhaustively.
    """

    def visit_number(self, element: Number) -> Any:
        ...

    def visit_operator(self, element: Operator) -> Any:
        ...

    def visit_parenthesis(self, element: Parenthesis) -> Any:
        ...

    def visit_function(self, element: Function) -> Any:
        ...

    def visit_variable(self, element: Variable) -> Any:
        ...

    def visit_comma(self, element: Comma) -> Any:
        ...


class StringVisitor:
    """
    Convert elements to their textual form.

    Examples:
    - [Number(2), Operator(ADD), Variable('x')] → "2 + x"
    - [Function('atan2', [[Number(1)], [Number(2)]])] → "atan2(1, 2)"
    """

    def render(self, elements: Sequence[Element]) -> str:
        parts = []
        for index, element in enumerate(elements):
            piece = element.accept(self)
            # Sign modifiers hug their operand: "1 + -2"
            if index == 0 or isinstance(element, Comma) or _is_sign(elements, index - 1):
                parts.append(piece)
            else:
                parts.append(" " + piece)
        return "".join(parts)

    def visit_number(self, element: Number) -> str:
        # Format number nicely (remove .0 for integers)
        if element.value.is_integer():
            return str(int(element.value))
        return repr(element.value)

    def visit_operator(self, element: Operator) -> str:
        return element.operator.symbol

    def visit_parenthesis(self, element: Parenthesis) -> str:
        return f"({self.render(element.expression.elements)})"

    def visit_function(self, element: Function) -> str:
        args_str = ", ".join(self.render(arg.elements) for arg in element.arguments)
        return f"{element.name}({args_str})"

    def visit_variable(self, element: Variable) -> str:
        return element.name

    def visit_comma(self, element: Comma) -> str:
        return ","


def _is_sign(elements: Sequence[Element], index: int) -> bool:
    """An operator at the start of a sequence or after another operator is a sign."""
    return isinstance(elements[index], Operator) and (
        index == 0 or isinstance(elements[index - 1], Operator)
    )

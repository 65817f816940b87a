"""
Tiered precedence evaluation of flat element sequences.

Evaluation runs in two phases:

1. Grouping: walk the sequence once, evaluating every operand and recording
   the run of operators in each gap. The first operator of a run between two
   operands is the binary combiner for that gap; the remaining ones are sign
   modifiers of the operand that follows. A run before the first operand
   holds sign modifiers only.
2. Reduction: for each precedence tier in order (^, then * /, then + -),
   scan the gaps left to right and collapse every gap whose combiner belongs
   to the tier. An operand's sign modifiers are applied the first time it is
   combined.

Keeping "which operand does this sign belong to" apart from "in which order
do binary operators fire" means precedence never has to be re-derived from
the token order.
"""

from typing import Sequence

from ..core.errors import (
    EvaluationError,
    InvalidExpressionError,
    UnknownFunctionError,
    UnknownVariableError,
)
from ..core.logging import get_context_logger
from .context import Context
from .elements import Comma, Element, Function, Number, Operator, OperatorKind, Parenthesis, Variable

logger = get_context_logger(__name__)


class Evaluator:
    """
    Evaluate elements to a float.

    Args:
        variables: Mapping consulted first for variable values (exact case)
        context: Supplies the function table and the built-in constants
    """

    def __init__(self, variables, context: Context):
        self.variables = variables
        self.context = context

    def evaluate(self, elements: Sequence[Element]) -> float:
        """
        Reduce an element sequence to a single value.

        Raises:
            EvaluationError: If the sequence is empty, or a variable or
                function cannot be resolved
            InvalidExpressionError: If operators and operands are not arranged
                the way the parser guarantees
        """
        if not elements:
            raise EvaluationError("Cannot evaluate an empty expression")

        values, signs, combiners = self._group(elements)

        if len(values) == 1:
            return values[0] * signs[0]

        for tier in OperatorKind.tiers():
            self._reduce(tier, values, signs, combiners)

        return values[0]

    def _group(self, elements: Sequence[Element]) -> tuple[list[float], list[int], list[OperatorKind]]:
        """
        Split elements into operand values, their pending signs, and the
        binary combiner of each gap between consecutive operands.
        """
        values: list[float] = []
        signs: list[int] = []
        combiners: list[OperatorKind] = []
        run: list[OperatorKind] = []

        for index, element in enumerate(elements):
            if not element.evaluable:
                if isinstance(element, Comma):
                    raise InvalidExpressionError(
                        "Comma outside of a function argument list", position=index
                    )
                kind = element.operator
                if not kind.is_modifier and (not values or run):
                    if not values:
                        raise InvalidExpressionError(
                            f"Cannot start expression with {element!r}", position=index
                        )
                    raise InvalidExpressionError(
                        f"Duplicate operators: {run[0].symbol} followed by {kind.symbol}",
                        position=index,
                    )
                run.append(kind)
                continue

            if values:
                if not run:
                    raise InvalidExpressionError(
                        f"Missing operator before {element!r}", position=index
                    )
                combiners.append(run[0])
                modifiers = run[1:]
            else:
                modifiers = run

            sign = 1
            for kind in modifiers:
                sign *= kind.modifier

            values.append(element.accept(self))
            signs.append(sign)
            run = []

        if run:
            raise InvalidExpressionError(
                f"Incomplete expression, trailing {run[-1].symbol}", position=len(elements) - 1
            )

        return values, signs, combiners

    @staticmethod
    def _reduce(
        tier: frozenset[OperatorKind],
        values: list[float],
        signs: list[int],
        combiners: list[OperatorKind],
    ) -> None:
        """Collapse every gap whose combiner is in ``tier``, left to right."""
        index = 0
        while index < len(combiners):
            combiner = combiners[index]
            if combiner not in tier:
                index += 1
                continue

            left = values[index] * signs[index]
            right = values[index + 1] * signs[index + 1]
            values[index] = combiner.combine(left, right)
            signs[index] = 1

            del values[index + 1]
            del signs[index + 1]
            del combiners[index]
            # Stay on this index: the gap now here may belong to the same tier

    # Visitor methods for evaluable elements

    def visit_number(self, element: Number) -> float:
        return element.value

    def visit_parenthesis(self, element: Parenthesis) -> float:
        return element.expression.evaluate()

    def visit_function(self, element: Function) -> float:
        arguments = [argument.evaluate() for argument in element.arguments]
        func = self.context.functions.lookup(element.name, len(arguments))
        if func is None:
            raise UnknownFunctionError(element.name, len(arguments), arguments)

        logger.debug(
            "Calling function",
            extra_data={"function": element.name, "arguments": arguments},
        )
        return float(func(*arguments))

    def visit_variable(self, element: Variable) -> float:
        value = self.variables.get(element.name)
        if value is None:
            value = self.context.constants.lookup(element.name)
        if value is None:
            raise UnknownVariableError(element.name, list(self.variables))
        return float(value)

    def visit_operator(self, element: Operator) -> float:
        raise InvalidExpressionError(f"{element!r} has no value of its own")

    def visit_comma(self, element: Comma) -> float:
        raise InvalidExpressionError("Comma outside of a function argument list")

"""
Stack-based parser for arithmetic expressions.

The parser folds the token stream into flat element sequences. Parentheses
are handled with an explicit stack of frames instead of recursion: ``(``
pushes a fresh frame and ``)`` pops it, wrapping its elements as a
Parenthesis or, when the frame was opened right after an identifier, as a
Function whose arguments are the frame split on commas.

Every element is checked against its predecessor's allowed successors as it
is appended, so an invalid sequence is never built.
"""

from __future__ import annotations

from collections.abc import MutableMapping
from dataclasses import dataclass, field
from typing import Optional

from ..core.errors import ParseError
from ..core.logging import get_context_logger
from .context import Context
from .elements import (
    Comma,
    Element,
    Function,
    Number,
    Operator,
    OperatorKind,
    Parenthesis,
    Variable,
    can_start,
)
from .expression import Expression, VariableMap
from .tokenizer import Token, TokenType, Tokenizer

logger = get_context_logger(__name__)


@dataclass
class Frame:
    """Elements collected inside one pair of parentheses."""

    pos: int
    function: Optional[str] = None
    elements: list[Element] = field(default_factory=list)

    @property
    def last(self) -> Optional[Element]:
        return self.elements[-1] if self.elements else None


class Parser:
    """
    Parser producing Expressions from text.

    The parser handles:
    - Operator runs (binary operator followed by sign modifiers: 10 + -12)
    - Function calls with any number of comma-separated arguments
    - Implicit multiplication before a parenthesis group: 2(x + 1), (a)(b)
    - Identifier hold: a name followed by ( is a function, otherwise a variable
    """

    def __init__(self, context: Optional[Context] = None):
        """
        Initialize parser with optional context.

        Args:
            context: Function and constant tables shared by every parsed
                expression (defaults to Context.default())
        """
        self.context = context or Context.default()
        self.tokenizer = Tokenizer()

    def parse(self, text: str, variables: Optional[MutableMapping] = None) -> Expression:
        """
        Parse an expression string.

        Args:
            text: The arithmetic expression
            variables: Mapping shared (not copied) by the expression and all
                of its sub-expressions

        Returns:
            The parsed Expression; blank text yields an empty one

        Raises:
            ParseError: If the text violates the grammar
        """
        if variables is None:
            variables = VariableMap()

        if not text.strip():
            return Expression([], variables, self.context)

        tokens = self.tokenizer.tokenize(text)
        stack: list[Frame] = [Frame(pos=0)]
        held: Optional[Token] = None

        for token in tokens:
            frame = stack[-1]

            if token.type == TokenType.IDENTIFIER:
                if held is not None:
                    raise ParseError("Unexpected name", token.pos, token.value)
                held = token
                continue

            if token.type == TokenType.LPAREN:
                if held is not None:
                    self._check(frame, Function(held.value, []), held)
                    stack.append(Frame(pos=token.pos, function=held.value))
                    held = None
                else:
                    self._open_group(frame, token)
                    stack.append(Frame(pos=token.pos))
                continue

            if held is not None:
                if token.type == TokenType.NUMBER:
                    raise ParseError(
                        "Cannot have variable directly before a number", token.pos, token.value
                    )
                self._append(frame, Variable(held.value), held)
                held = None

            if token.type == TokenType.NUMBER:
                self._append(frame, Number(float(token.value)), token)
            elif token.type == TokenType.OPERATOR:
                self._append(frame, Operator(OperatorKind.from_symbol(token.value)), token)
            elif token.type == TokenType.COMMA:
                if frame.function is None:
                    raise ParseError("Comma outside of a function argument list", token.pos, ",")
                self._append(frame, Comma(), token)
            elif token.type == TokenType.RPAREN:
                if len(stack) == 1:
                    raise ParseError("Illegal closing parenthesis", token.pos, ")")
                stack.pop()
                stack[-1].elements.append(self._close(frame, token, variables))

        if len(stack) != 1:
            raise ParseError("Unclosed parenthesis", stack[-1].pos, "(")

        elements = stack[0].elements
        if not elements:
            raise ParseError("Empty expression", 0)
        self._check_complete(elements, len(text))

        expression = Expression(elements, variables, self.context)
        logger.debug(
            "Parsed expression",
            extra_data={"text": text, "elements": len(elements)},
        )
        return expression

    def _append(self, frame: Frame, element: Element, token: Token) -> None:
        self._check(frame, element, token)
        frame.elements.append(element)

    def _check(self, frame: Frame, element: Element, token: Token) -> None:
        """Validate ``element`` against the element it would follow."""
        previous = frame.last
        if previous is None:
            if not can_start(element):
                raise ParseError(f"Cannot start expression with {element!r}", token.pos, token.value)
            return

        if not previous.allows(element):
            expected = " or ".join(sorted(kind.name.title() for kind in previous.valid_next()))
            raise ParseError(
                f"Unexpected token, expecting {expected} after {previous!r}",
                token.pos,
                token.value,
            )

    def _open_group(self, frame: Frame, token: Token) -> None:
        """Validate a plain ( and insert the implicit multiplication it may imply."""
        group = Parenthesis(Expression(context=self.context))
        self._check(frame, group, token)
        if frame.last is not None and frame.last.evaluable:
            frame.elements.append(Operator(OperatorKind.MULTIPLY))

    def _close(self, frame: Frame, token: Token, variables: MutableMapping) -> Element:
        """Turn a closed frame into a Parenthesis or Function element."""
        if frame.elements:
            self._check_complete(frame.elements, token.pos)

        if frame.function is None:
            if not frame.elements:
                raise ParseError("Empty parentheses", token.pos, ")")
            return Parenthesis(Expression(frame.elements, variables, self.context))

        arguments: list[Expression] = []
        current: list[Element] = []
        for element in frame.elements + [Comma()]:
            if isinstance(element, Comma):
                arguments.append(Expression(current, variables, self.context))
                current = []
            else:
                current.append(element)

        return Function(frame.function, arguments)

    @staticmethod
    def _check_complete(elements: list[Element], pos: int) -> None:
        if not elements[-1].complete:
            raise ParseError(f"Incomplete expression ending with {elements[-1]!r}", pos)

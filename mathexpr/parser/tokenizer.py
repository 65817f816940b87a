"""
Tokenizer for arithmetic expressions.

This module provides regex-based tokenization. It handles numbers, identifiers,
the five arithmetic operators, commas and parentheses, and inserts the implicit
multiplications that can be decided from lexical adjacency alone.
"""

import re
from dataclasses import dataclass
from enum import Enum, auto

from ..core.errors import ParseError


class TokenType(Enum):
    """Token types for arithmetic expressions."""

    NUMBER = auto()
    IDENTIFIER = auto()  # Variable or function name
    OPERATOR = auto()  # ^ * / + -
    COMMA = auto()
    LPAREN = auto()  # (
    RPAREN = auto()  # )
    EOF = auto()


@dataclass
class Token:
    """
    Represents a single token in the expression.

    Attributes:
        type: The token type
        value: The string value of the token
        pos: Position in the source string (for error reporting)
    """

    type: TokenType
    value: str
    pos: int

    def __repr__(self) -> str:
        return f"Token({self.type.name}, '{self.value}', pos={self.pos})"


class Tokenizer:
    """
    Tokenizes arithmetic expressions using a combined regex.

    The tokenizer handles:
    - Numbers (integers, decimals, scientific notation)
    - Identifiers (variable and function names)
    - The operators ^ * / + -
    - Commas and parentheses
    - Implicit multiplication (2x, a b)
    """

    # Order matters: the malformed literal must be tried before NUMBER
    PATTERNS = {
        "MALFORMED": r"(?:\d+\.\d*|\.\d+)\.[\d.]*",
        "NUMBER": r"(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?",
        "IDENTIFIER": r"[A-Za-z_][A-Za-z0-9_]*",
        "OPERATOR": r"[\^*/+\-]",
        "COMMA": r",",
        "LPAREN": r"\(",
        "RPAREN": r"\)",
        "WHITESPACE": r"\s+",
    }

    def __init__(self):
        self._compile_patterns()

    def _compile_patterns(self) -> None:
        """Compile regex patterns for faster matching."""
        pattern_parts = []
        for name, pattern in self.PATTERNS.items():
            pattern_parts.append(f"(?P<{name}>{pattern})")

        self.combined_pattern = re.compile("|".join(pattern_parts))

    def tokenize(self, expression: str) -> list[Token]:
        """
        Tokenize an arithmetic expression.

        Args:
            expression: The expression to tokenize

        Returns:
            List of tokens, terminated by an EOF token

        Raises:
            ParseError: If the expression contains a malformed number or a
                character outside the grammar
        """
        tokens: list[Token] = []
        pos = 0

        while pos < len(expression):
            match = self.combined_pattern.match(expression, pos)

            if not match:
                raise ParseError("Invalid character", pos, expression[pos])

            kind = match.lastgroup
            value = match.group()
            token_pos = pos
            pos = match.end()

            if kind == "WHITESPACE":
                continue

            if kind == "MALFORMED":
                raise ParseError("Malformed numeric literal", token_pos, value)

            tokens.append(Token(TokenType[kind], value, token_pos))

        tokens.append(Token(TokenType.EOF, "", len(expression)))

        return self._insert_implicit_multiplication(tokens)

    def _insert_implicit_multiplication(self, tokens: list[Token]) -> list[Token]:
        """
        Insert implicit multiplication tokens where adjacency alone decides it.

        Examples:
        - 2x → 2 * x
        - 2 sin(x) → 2 * sin(x)
        - a b → a * b

        A parenthesis group following a number or another group also
        multiplies, but whether the group belongs to a function call is only
        known while parsing, so the parser inserts that one.

        Args:
            tokens: Original token list

        Returns:
            Token list with implicit multiplication inserted
        """
        result: list[Token] = []

        for i, token in enumerate(tokens):
            result.append(token)

            if i >= len(tokens) - 1:
                continue

            next_token = tokens[i + 1]

            if (
                token.type in (TokenType.NUMBER, TokenType.IDENTIFIER)
                and next_token.type == TokenType.IDENTIFIER
            ):
                result.append(Token(TokenType.OPERATOR, "*", token.pos + len(token.value)))

        return result

"""
Expression exceptions.

Every failure raised by the tokenizer, parser and evaluator derives from
ExpressionError so callers can catch one type.
"""

from typing import Any, Dict, Optional


class ExpressionError(Exception):
    """Base exception for expression errors"""

    def __init__(
        self,
        message: str,
        position: Optional[int] = None,
        details: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.position = position
        self.details = details or {}
        super().__init__(self.message)


class ParseError(ExpressionError):
    """Raised for lexical and grammar errors"""

    def __init__(self, message: str, position: Optional[int] = None, token: Optional[str] = None):
        self.token = token
        text = message
        if position is not None:
            text = f"{message} at position {position}"
            if token:
                text += f": '{token}'"
        super().__init__(
            message=text,
            position=position,
            details={"token": token} if token else {},
        )


class EvaluationError(ExpressionError):
    """Raised when a well-formed expression cannot be evaluated"""


class UnknownVariableError(EvaluationError):
    """Raised when a variable is neither set nor a built-in constant"""

    def __init__(self, name: str, known: Optional[list] = None):
        self.name = name
        super().__init__(
            message=f"Variable '{name}' not found in variables {sorted(known or [])} or built-in constants",
            details={"variable": name},
        )


class UnknownFunctionError(EvaluationError):
    """Raised when no function matches a name and argument count"""

    def __init__(self, name: str, arity: int, arguments: Optional[list] = None):
        self.name = name
        self.arity = arity
        super().__init__(
            message=f"Unknown function {name} taking {arity} argument{'' if arity == 1 else 's'}"
            + (f" (supplied {arguments})" if arguments else ""),
            details={"function": name, "arity": arity},
        )


class InvalidExpressionError(ExpressionError):
    """Raised when an expression's structure violates the grammar"""


class ContextError(ExpressionError):
    """Raised when a context definition cannot be loaded"""

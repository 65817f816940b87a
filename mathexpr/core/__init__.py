"""
Core infrastructure: configuration, errors and logging.
"""

from .config import Settings, get_settings
from .errors import (
    ContextError,
    EvaluationError,
    ExpressionError,
    InvalidExpressionError,
    ParseError,
    UnknownFunctionError,
    UnknownVariableError,
)
from .logging import get_context_logger, get_logger, setup_logging

__all__ = [
    "Settings",
    "get_settings",
    "ContextError",
    "EvaluationError",
    "ExpressionError",
    "InvalidExpressionError",
    "ParseError",
    "UnknownFunctionError",
    "UnknownVariableError",
    "get_context_logger",
    "get_logger",
    "setup_logging",
]

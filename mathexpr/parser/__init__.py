"""
Expression parsing and evaluation.

This package provides tokenization, grammar-checked parsing into flat element
sequences, and tiered precedence evaluation.
"""

from .context import ConstantTable, Context, FunctionTable
from .elements import (
    Comma,
    Element,
    ElementKind,
    Function,
    Number,
    Operator,
    OperatorKind,
    Parenthesis,
    Variable,
)
from .evaluator import Evaluator
from .expression import Expression, VariableMap
from .parser import Parser
from .tokenizer import Token, TokenType, Tokenizer
from .visitors import ElementVisitor, StringVisitor

__all__ = [
    "ConstantTable",
    "Context",
    "FunctionTable",
    "Comma",
    "Element",
    "ElementKind",
    "Function",
    "Number",
    "Operator",
    "OperatorKind",
    "Parenthesis",
    "Variable",
    "Evaluator",
    "Expression",
    "VariableMap",
    "Parser",
    "Token",
    "TokenType",
    "Tokenizer",
    "ElementVisitor",
    "StringVisitor",
]

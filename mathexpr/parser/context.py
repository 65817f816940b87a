"""
Context system for expression evaluation.

A context bundles the two lookups the evaluator delegates to:
- a function table keyed by name and argument count
- a table of built-in constants, matched case-insensitively

The defaults mirror the scalar functions and constants of a standard math
library. Results follow IEEE double semantics, so domain errors produce nan
and overflow produces infinity instead of raising.
"""

from __future__ import annotations

import math
import random
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable, Optional

import yaml
from pydantic import BaseModel, ConfigDict, PrivateAttr, ValidationError

from ..core.errors import ContextError
from .elements import OperatorKind


class FunctionTable(BaseModel):
    """Maps (name, arity) to a callable returning a float."""

    model_config = ConfigDict(arbitrary_types_allowed=True)

    _functions: dict[tuple[str, int], Callable[..., float]] = PrivateAttr(default_factory=dict)

    def add(self, name: str, func: Callable[..., float], arity: int = 1) -> None:
        """
        Register a function.

        The same name may be registered once per arity, e.g. ``log`` with one
        argument and ``log`` with two.
        """
        if arity < 0:
            raise ValueError(f"Arity must be non-negative, got {arity}")
        self._functions[(name, arity)] = func

    def alias(self, alias: str, name: str) -> None:
        """Register every arity of ``name`` under ``alias`` as well."""
        matches = {key: func for key, func in self._functions.items() if key[0] == name}
        if not matches:
            raise KeyError(name)
        for (_, arity), func in matches.items():
            self._functions[(alias, arity)] = func

    def lookup(self, name: str, arity: int) -> Optional[Callable[..., float]]:
        """Get the function for an exact name and argument count."""
        return self._functions.get((name, arity))

    def remove(self, name: str, arity: Optional[int] = None) -> None:
        """Remove one arity of a function, or all of them."""
        for key in list(self._functions):
            if key[0] == name and (arity is None or key[1] == arity):
                del self._functions[key]

    def arities(self, name: str) -> list[int]:
        return sorted(arity for (fname, arity) in self._functions if fname == name)

    def names(self) -> list[str]:
        """Get sorted list of function names."""
        return sorted({name for name, _ in self._functions})

    def copy(self) -> FunctionTable:
        """Create a copy of this table."""
        new_table = FunctionTable()
        new_table._functions = dict(self._functions)
        return new_table

    def __contains__(self, name: str) -> bool:
        """Check if a function exists with any arity."""
        return any(fname == name for fname, _ in self._functions)


class ConstantTable(BaseModel):
    """Built-in constants, looked up case-insensitively."""

    _constants: dict[str, float] = PrivateAttr(default_factory=dict)

    def add(self, name: Optional[str] = None, value: Optional[float] = None, **kwargs: float) -> None:
        """
        Add constants.

        Can be called as:
        - add('pi', 3.14159)  # Positional
        - add(g=9.81, c=299792458)  # Keyword
        """
        if name is not None and value is not None:
            self._constants[name.lower()] = float(value)
        for const_name, const_value in kwargs.items():
            self._constants[const_name.lower()] = float(const_value)

    def lookup(self, name: str) -> Optional[float]:
        return self._constants.get(name.lower())

    def remove(self, name: str) -> None:
        self._constants.pop(name.lower(), None)

    def names(self) -> list[str]:
        return sorted(self._constants)

    def copy(self) -> ConstantTable:
        new_table = ConstantTable()
        new_table._constants = dict(self._constants)
        return new_table

    def __contains__(self, name: str) -> bool:
        return name.lower() in self._constants


def _ieee(func: Callable[..., float], domain: float = math.nan, overflow: float = math.inf) -> Callable[..., float]:
    """Wrap a math function so domain errors and overflow return IEEE values."""

    def wrapper(*args: float) -> float:
        try:
            return float(func(*args))
        except ValueError:
            return domain
        except OverflowError:
            return overflow

    wrapper.__name__ = getattr(func, "__name__", "function")
    return wrapper


def _log_of(func: Callable[[float], float], pole: float = 0.0) -> Callable[[float], float]:
    def log(x: float) -> float:
        if x == pole:
            return -math.inf
        if x < pole or math.isnan(x):
            return math.nan
        return func(x)

    return log


def _integral(func: Callable[[float], Any]) -> Callable[[float], float]:
    def rounded(x: float) -> float:
        if not math.isfinite(x):
            return x
        return float(func(x))

    return rounded


def _sinh(x: float) -> float:
    try:
        return math.sinh(x)
    except OverflowError:
        return math.copysign(math.inf, x)


def _cbrt(x: float) -> float:
    return math.copysign(abs(x) ** (1.0 / 3.0), x)


def _signum(x: float) -> float:
    if x == 0 or math.isnan(x):
        return x
    return math.copysign(1.0, x)


def _max(a: float, b: float) -> float:
    if math.isnan(a) or math.isnan(b):
        return math.nan
    return max(a, b)


def _min(a: float, b: float) -> float:
    if math.isnan(a) or math.isnan(b):
        return math.nan
    return min(a, b)


def default_functions() -> FunctionTable:
    """Build the standard function table."""
    table = FunctionTable()

    for name, func in {
        "acos": math.acos,
        "asin": math.asin,
        "atan": math.atan,
        "cos": math.cos,
        "sin": math.sin,
        "tan": math.tan,
        "cosh": math.cosh,
        "tanh": math.tanh,
        "exp": math.exp,
        "expm1": math.expm1,
        "sqrt": math.sqrt,
        "toDegrees": math.degrees,
        "toRadians": math.radians,
        "ulp": math.ulp,
    }.items():
        table.add(name, _ieee(func), 1)

    table.add("abs", lambda x: float(abs(x)), 1)
    table.add("sinh", _sinh, 1)
    table.add("cbrt", _cbrt, 1)
    table.add("log", _log_of(math.log), 1)
    table.add("log10", _log_of(math.log10), 1)
    table.add("log1p", _log_of(math.log1p, pole=-1.0), 1)
    table.add("ceil", _integral(math.ceil), 1)
    table.add("floor", _integral(math.floor), 1)
    table.add("rint", _integral(round), 1)
    table.add("signum", _signum, 1)
    table.add("nextUp", lambda x: math.nextafter(x, math.inf), 1)
    table.add("nextDown", lambda x: math.nextafter(x, -math.inf), 1)

    table.add("atan2", math.atan2, 2)
    table.add("hypot", _ieee(math.hypot), 2)
    table.add("pow", OperatorKind.POWER.combine, 2)
    table.add("max", _max, 2)
    table.add("min", _min, 2)
    table.add("copySign", math.copysign, 2)
    table.add("nextAfter", math.nextafter, 2)
    table.add("IEEEremainder", _ieee(math.remainder), 2)

    table.add("fma", lambda x, y, z: x * y + z, 3)

    table.add("random", random.random, 0)

    return table


def default_constants() -> ConstantTable:
    """Build the standard constant table."""
    table = ConstantTable()
    table.add(e=math.e, pi=math.pi, tau=math.tau)
    return table


class ContextFile(BaseModel):
    """Schema of a YAML context file."""

    name: str
    constants: dict[str, float] = {}
    aliases: dict[str, str] = {}


@dataclass
class Context:
    """
    Evaluation environment shared by an expression and all of its
    sub-expressions.

    Attributes:
        name: Context name
        functions: Function table used for calls
        constants: Built-in constants consulted after the expression's own
            variables
    """

    name: str
    functions: FunctionTable = field(default_factory=FunctionTable)
    constants: ConstantTable = field(default_factory=ConstantTable)

    @classmethod
    def default(cls) -> Context:
        """Create a context holding the standard functions and constants."""
        return cls(name="Default", functions=default_functions(), constants=default_constants())

    @classmethod
    def from_yaml(cls, path: str | Path) -> Context:
        """
        Load a context from a YAML file on top of the defaults.

        Example file::

            name: Physics
            constants:
              g: 9.80665
            aliases:
              ln: log

        Args:
            path: Path to YAML configuration file

        Returns:
            Context instance

        Raises:
            ContextError: If the file is unreadable or does not match the schema
        """
        try:
            with open(path, "r") as f:
                data = yaml.safe_load(f)
        except (OSError, yaml.YAMLError) as exc:
            raise ContextError(f"Cannot read context file {path}: {exc}") from exc

        try:
            definition = ContextFile.model_validate(data)
        except ValidationError as exc:
            raise ContextError(
                f"Invalid context file {path}", details={"errors": exc.errors()}
            ) from exc

        context = cls.default()
        context.name = definition.name
        for name, value in definition.constants.items():
            context.constants.add(name, value)
        for alias, target in definition.aliases.items():
            try:
                context.functions.alias(alias, target)
            except KeyError:
                raise ContextError(
                    f"Alias '{alias}' refers to unknown function '{target}'",
                    details={"alias": alias, "function": target},
                ) from None

        return context

    def copy(self) -> Context:
        return Context(name=self.name, functions=self.functions.copy(), constants=self.constants.copy())

"""
Symbol table for SimpleCalc variables and constants.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator
from dataclasses import dataclass

from simplecalc.core.errors import (
    ConstantWriteError,
    DuplicateDeclaration,
    UndefinedVariable,
)

logger = logging.getLogger(__name__)


@dataclass
class Variable:
    """A declared (name, value) pair; constants reject assignment."""

    name: str
    value: float
    constant: bool = False


# Names defined before any input is read
DEFAULT_SYMBOLS: tuple[Variable, ...] = (
    Variable("pi", 3.1415926535, constant=True),
    Variable("e", 2.7182818284, constant=True),
    Variable("k", 1000.0),
)


class SymbolTable:
    """Ordered table of variables with unique names."""

    def __init__(self) -> None:
        self._vars: dict[str, Variable] = {}

    @classmethod
    def with_defaults(
        cls, predefined: tuple[Variable, ...] | list[Variable] = DEFAULT_SYMBOLS
    ) -> SymbolTable:
        """Create a table holding pi, e and k (or the given predefined names)."""
        table = cls()
        for var in predefined:
            table.define_name(var.name, var.value, var.constant)
        return table

    def get_value(self, name: str) -> float:
        var = self._vars.get(name)
        if var is None:
            raise UndefinedVariable(f"trying to read undefined variable {name}", name)
        return var.value

    def set_value(self, name: str, value: float) -> None:
        var = self._vars.get(name)
        if var is None:
            raise UndefinedVariable(f"trying to write undefined variable {name}", name)
        if var.constant:
            raise ConstantWriteError(f"trying to write to constant {name}", name)
        var.value = value
        logger.debug("Assigned %s = %r", name, value)

    def define_name(self, name: str, value: float, constant: bool = False) -> float:
        if name in self._vars:
            raise DuplicateDeclaration(f"{name} declared twice", name)
        self._vars[name] = Variable(name, value, constant)
        logger.debug("Declared %s %s = %r", "const" if constant else "let", name, value)
        return value

    def is_declared(self, name: str) -> bool:
        return name in self._vars

    def variables(self) -> list[Variable]:
        """Snapshot of the table in declaration order."""
        return [Variable(v.name, v.value, v.constant) for v in self._vars.values()]

    def __iter__(self) -> Iterator[Variable]:
        return iter(self.variables())

    def __len__(self) -> int:
        return len(self._vars)

    def __contains__(self, name: object) -> bool:
        return name in self._vars

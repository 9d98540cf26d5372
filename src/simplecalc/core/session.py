"""
Calculator session: the per-statement read-eval boundary.

A session owns one token stream and one symbol table. Each call to step()
handles exactly one top-level command or statement. Statement errors are
caught here, the rest of the failed statement is discarded, and the session
keeps going.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Iterator
from dataclasses import dataclass
from enum import StrEnum
from typing import TextIO

from simplecalc.core.errors import CalcError, NestingTooDeep
from simplecalc.core.statement import statement
from simplecalc.core.symbols import SymbolTable, Variable
from simplecalc.core.tokenizer import TokenKind, TokenStream

logger = logging.getLogger(__name__)

RESULT_MARKER = "= "
ERROR_MARKER = "error: "


class OutcomeKind(StrEnum):
    """What a single step produced."""

    RESULT = "result"
    ERROR = "error"
    HELP = "help"
    SYMBOLS = "symbols"
    QUIT = "quit"


@dataclass(frozen=True)
class Outcome:
    """Result of one session step."""

    kind: OutcomeKind
    value: float | None = None
    error: CalcError | None = None

    @property
    def ok(self) -> bool:
        return self.kind != OutcomeKind.ERROR

    def render(self, result_marker: str = RESULT_MARKER, error_marker: str = ERROR_MARKER) -> str:
        """Format a RESULT or ERROR outcome for display."""
        if self.kind == OutcomeKind.RESULT and self.value is not None:
            return f"{result_marker}{format_value(self.value)}"
        if self.kind == OutcomeKind.ERROR and self.error is not None:
            return f"{error_marker}{self.error}"
        return ""


def format_value(value: float) -> str:
    """Format like a default C++ ostream: six significant digits."""
    return f"{value:g}"


def format_symbols(variables: list[Variable]) -> str:
    """One "name<TAB>value" line per variable."""
    return "\n".join(f"{var.name}\t{format_value(var.value)}" for var in variables)


_COMMANDS: dict[TokenKind, OutcomeKind] = {
    TokenKind.QUIT: OutcomeKind.QUIT,
    TokenKind.HELP: OutcomeKind.HELP,
    TokenKind.SYMBOLS: OutcomeKind.SYMBOLS,
}


class CalculatorSession:
    """
    Interactive calculator state.

    Usage:
        session = CalculatorSession("let x = 5; x * 2\\n")
        for outcome in session.outcomes():
            print(outcome.render())
    """

    def __init__(self, source: str | TextIO, symbols: SymbolTable | None = None) -> None:
        self.stream = TokenStream(source)
        self.symbols = symbols if symbols is not None else SymbolTable.with_defaults()
        self._lock = threading.Lock()

    def step(self) -> Outcome | None:
        """Handle the next command or statement; None at end of input."""
        with self._lock:
            try:
                tok = self.stream.next_token()
                while tok.kind == TokenKind.PRINT:
                    tok = self.stream.next_token()

                if tok.kind == TokenKind.END:
                    return None

                command = _COMMANDS.get(tok.kind)
                if command is not None:
                    return Outcome(kind=command)

                self.stream.push_back(tok)
                try:
                    value = statement(self.stream, self.symbols)
                except RecursionError as e:
                    raise NestingTooDeep("expression too deeply nested", tok.position) from e
                return Outcome(kind=OutcomeKind.RESULT, value=value)

            except CalcError as e:
                logger.debug("Statement failed with %s: %s", e.kind, e.message)
                self.stream.discard_to_terminator()
                return Outcome(kind=OutcomeKind.ERROR, error=e)

    def outcomes(self) -> Iterator[Outcome]:
        """Yield outcomes until end of input or a quit command."""
        while True:
            outcome = self.step()
            if outcome is None or outcome.kind == OutcomeKind.QUIT:
                return
            yield outcome

    def symbol_listing(self) -> str:
        with self._lock:
            return format_symbols(self.symbols.variables())


def run(source: str, symbols: SymbolTable | None = None) -> list[Outcome]:
    """Evaluate every statement in ``source`` and return the outcomes.

    Args:
        source: Statements separated by newlines or ';'.
        symbols: Table to evaluate against (default: fresh table with pi, e, k).

    Returns:
        One Outcome per statement or command, stopping at a quit command.
    """
    return list(CalculatorSession(source, symbols).outcomes())

"""
SimpleCalc: an interactive expression calculator.

Statements are read from a character stream, tokenized, and evaluated
immediately against a table of named variables and constants.
"""

from simplecalc._version import get_version
from simplecalc.core import (
    CalculatorSession,
    Outcome,
    OutcomeKind,
    SymbolTable,
    Token,
    TokenKind,
    TokenStream,
    Variable,
    run,
)
from simplecalc.core.errors import CalcError

__version__ = get_version()
__all__ = [
    "__version__",
    "CalcError",
    "CalculatorSession",
    "Outcome",
    "OutcomeKind",
    "SymbolTable",
    "Token",
    "TokenKind",
    "TokenStream",
    "Variable",
    "run",
]

"""
SimpleCalc core: tokenizer, evaluator chain, and symbol table.

Usage:
    from simplecalc.core import CalculatorSession

    session = CalculatorSession("let x = 5\nx * 2\n")
    [o.value for o in session.outcomes()]
    # [5.0, 10.0]
"""

from simplecalc.core.session import CalculatorSession, Outcome, OutcomeKind, run
from simplecalc.core.symbols import SymbolTable, Variable
from simplecalc.core.tokenizer import Token, TokenKind, TokenStream

__all__ = [
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

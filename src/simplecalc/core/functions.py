"""
Built-in functions for SimpleCalc.

Closed set, no user-defined functions:

    sqrt(x)     square root of x, x >= 0
    pow(x, y)   x raised to the power y
"""

from __future__ import annotations

import math
from collections.abc import Callable

from simplecalc.core.errors import ArgumentSyntaxError, DomainError, NegativeSqrt
from simplecalc.core.symbols import SymbolTable
from simplecalc.core.tokenizer import Token, TokenKind, TokenStream

# Parses one argument expression from the stream
ExpressionParser = Callable[[TokenStream, SymbolTable], float]


def _expect(stream: TokenStream, kind: TokenKind, function: str, expected: str) -> None:
    tok = stream.next_token()
    if tok.kind != kind:
        raise ArgumentSyntaxError(function, expected, tok.position)


def _parse_args(
    stream: TokenStream,
    symbols: SymbolTable,
    expression: ExpressionParser,
    function: str,
    count: int,
) -> list[float]:
    """Parse '(' expr (',' expr){count-1} ')'."""
    _expect(stream, TokenKind.LPAREN, function, "(")
    args = [expression(stream, symbols)]
    while len(args) < count:
        _expect(stream, TokenKind.COMMA, function, ",")
        args.append(expression(stream, symbols))
    _expect(stream, TokenKind.RPAREN, function, ")")
    return args


def _sqrt(
    tok: Token, stream: TokenStream, symbols: SymbolTable, expression: ExpressionParser
) -> float:
    (x,) = _parse_args(stream, symbols, expression, "sqrt", 1)
    if x < 0:
        raise NegativeSqrt("cannot get square root of negative number", tok.position)
    return math.sqrt(x)


def _pow(
    tok: Token, stream: TokenStream, symbols: SymbolTable, expression: ExpressionParser
) -> float:
    x, y = _parse_args(stream, symbols, expression, "pow", 2)
    try:
        return math.pow(x, y)
    except (ValueError, OverflowError) as e:
        raise DomainError(f"pow({x:g}, {y:g}): {e}", tok.position) from e


# Called with the function token, then the stream positioned at its argument list
Builtin = Callable[[Token, TokenStream, SymbolTable, ExpressionParser], float]

BUILTINS: dict[TokenKind, Builtin] = {
    TokenKind.SQRT: _sqrt,
    TokenKind.POW: _pow,
}


def is_function(tok: Token) -> bool:
    return tok.kind in BUILTINS


def resolve_call(
    tok: Token,
    stream: TokenStream,
    symbols: SymbolTable,
    expression: ExpressionParser,
) -> float:
    """Evaluate the call introduced by function keyword ``tok``.

    Args:
        tok: The SQRT or POW token already read from the stream.
        stream: Token stream positioned at the argument list.
        symbols: Symbol table used to resolve names in arguments.
        expression: Parser for a full argument expression.

    Returns:
        The function result.

    Raises:
        ArgumentSyntaxError: If a delimiter of the argument list is missing.
        NegativeSqrt: For sqrt of a negative number.
        DomainError: If pow has no real result.
    """
    return BUILTINS[tok.kind](tok, stream, symbols, expression)

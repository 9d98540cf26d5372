"""
Recursive descent evaluator for SimpleCalc expressions.

Parsing and evaluation are fused: each grammar rule reads tokens from the
stream and returns a float directly, no AST is built.

Grammar (precedence low to high):
    expression  → term (("+" | "-") term)*
    term        → secondary (("*" | "/" | "%") secondary)*
    secondary   → primary "!"*
    primary     → NUMBER
                | NAME
                | "(" expression ")" | "{" expression "}"
                | ("-" | "+") primary
                | ("sqrt" | "pow") "(" expression ("," expression)* ")"

Unary signs live in primary, so "-3!" is (-3)! and fails as a negative
factorial.
"""

from __future__ import annotations

import math

from simplecalc.core.errors import (
    DivideByZero,
    DomainError,
    FactorialOverflow,
    NegativeFactorial,
    PrimaryExpected,
    UnmatchedDelimiter,
)
from simplecalc.core.functions import is_function, resolve_call
from simplecalc.core.symbols import SymbolTable
from simplecalc.core.tokenizer import TokenKind, TokenStream

# Factorials are accumulated as 32-bit signed integers
FACTORIAL_MAX = 2**31 - 1

_CLOSERS: dict[TokenKind, tuple[TokenKind, str]] = {
    TokenKind.LPAREN: (TokenKind.RPAREN, ")"),
    TokenKind.LBRACE: (TokenKind.RBRACE, "}"),
}


def factorial(value: float) -> float:
    """Factorial of ``value`` truncated toward zero.

    Raises:
        NegativeFactorial: If the truncated value is negative.
        FactorialOverflow: If the product exceeds FACTORIAL_MAX.
    """
    if math.isnan(value):
        raise NegativeFactorial("cannot get factorial of nan")
    if math.isinf(value):
        if value < 0:
            raise NegativeFactorial("cannot get factorial of negative number")
        raise FactorialOverflow("overflow occurred in factorial")

    n = int(value)
    if n < 0:
        raise NegativeFactorial("cannot get factorial of negative number")
    if n > FACTORIAL_MAX:
        raise FactorialOverflow("overflow occurred in factorial")

    result = 1
    for i in range(2, n + 1):
        result *= i
        if result > FACTORIAL_MAX:
            raise FactorialOverflow(f"overflow occurred in factorial of {n}")
    return float(result)


def expression(stream: TokenStream, symbols: SymbolTable) -> float:
    """term (('+' | '-') term)*"""
    left = term(stream, symbols)
    while True:
        tok = stream.next_token()
        if tok.kind == TokenKind.PLUS:
            left += term(stream, symbols)
        elif tok.kind == TokenKind.MINUS:
            left -= term(stream, symbols)
        else:
            stream.push_back(tok)
            return left


def term(stream: TokenStream, symbols: SymbolTable) -> float:
    """secondary (('*' | '/' | '%') secondary)*"""
    left = secondary(stream, symbols)
    while True:
        tok = stream.next_token()
        if tok.kind == TokenKind.STAR:
            left *= secondary(stream, symbols)
        elif tok.kind == TokenKind.SLASH:
            right = secondary(stream, symbols)
            if right == 0:
                raise DivideByZero("divide by zero", tok.position)
            left /= right
        elif tok.kind == TokenKind.PERCENT:
            right = secondary(stream, symbols)
            if right == 0:
                raise DivideByZero("%: divide by zero", tok.position)
            try:
                left = math.fmod(left, right)
            except ValueError as e:
                raise DomainError(f"%: {e}", tok.position) from e
        else:
            stream.push_back(tok)
            return left


def secondary(stream: TokenStream, symbols: SymbolTable) -> float:
    """primary '!'*"""
    left = primary(stream, symbols)
    while True:
        tok = stream.next_token()
        if tok.kind == TokenKind.BANG:
            left = factorial(left)
        else:
            stream.push_back(tok)
            return left


def primary(stream: TokenStream, symbols: SymbolTable) -> float:
    """Number, name, grouping, unary sign, or built-in call."""
    tok = stream.next_token()

    if tok.kind in _CLOSERS:
        closer, text = _CLOSERS[tok.kind]
        value = expression(stream, symbols)
        end = stream.next_token()
        if end.kind != closer:
            raise UnmatchedDelimiter(f"'{text}' expected", end.position)
        return value

    if tok.kind == TokenKind.NUMBER:
        assert tok.value is not None
        return tok.value

    if tok.kind == TokenKind.MINUS:
        return -primary(stream, symbols)
    if tok.kind == TokenKind.PLUS:
        return +primary(stream, symbols)

    if tok.kind == TokenKind.NAME:
        return symbols.get_value(tok.text)

    if is_function(tok):
        return resolve_call(tok, stream, symbols, expression)

    raise PrimaryExpected(
        f"primary expected, got {tok.text!r}" if tok.text.strip() else "primary expected",
        tok.position,
    )

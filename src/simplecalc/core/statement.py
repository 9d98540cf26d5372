"""
Statement dispatcher for SimpleCalc.

Grammar:
    statement   → declaration | assignment | expression
    declaration → ("let" | "#" | "const") NAME "=" expression
    assignment  → NAME "=" expression

A statement must be followed by a terminator (newline, ';' or end of
input). The terminator itself is left in the stream for the caller.
"""

from __future__ import annotations

from simplecalc.core.errors import (
    MissingEquals,
    NameExpectedError,
    TrailingInputError,
    UndeclaredVariable,
)
from simplecalc.core.evaluator import expression
from simplecalc.core.symbols import SymbolTable
from simplecalc.core.tokenizer import TokenKind, TokenStream

DECLARATION_KINDS = (TokenKind.LET, TokenKind.CONST)


def statement(stream: TokenStream, symbols: SymbolTable) -> float:
    """Evaluate one declaration, assignment, or bare expression."""
    tok = stream.next_token()

    if tok.kind in DECLARATION_KINDS:
        return declaration(stream, symbols, constant=tok.kind == TokenKind.CONST)

    if tok.kind == TokenKind.NAME:
        following = stream.next_token()
        stream.push_back(following)
        stream.push_back(tok)
        if following.kind == TokenKind.ASSIGN:
            return assignment(stream, symbols)
    else:
        stream.push_back(tok)

    value = expression(stream, symbols)
    _expect_terminator(stream)
    return value


def declaration(stream: TokenStream, symbols: SymbolTable, constant: bool) -> float:
    """NAME '=' expression, after the declaration keyword."""
    name = stream.next_token()
    if name.kind != TokenKind.NAME:
        raise NameExpectedError("name expected in declaration", name.position)

    equals = stream.next_token()
    if equals.kind != TokenKind.ASSIGN:
        raise MissingEquals(f"'=' missing in declaration of {name.text}", equals.position)

    value = expression(stream, symbols)
    _expect_terminator(stream)
    return symbols.define_name(name.text, value, constant)


def assignment(stream: TokenStream, symbols: SymbolTable) -> float:
    """NAME '=' expression, for a previously declared NAME."""
    name = stream.next_token()
    if not symbols.is_declared(name.text):
        raise UndeclaredVariable(f"{name.text} has not been declared", name.text, name.position)

    equals = stream.next_token()
    if equals.kind != TokenKind.ASSIGN:
        raise MissingEquals(f"'=' missing in assignment to {name.text}", equals.position)

    value = expression(stream, symbols)
    _expect_terminator(stream)
    symbols.set_value(name.text, value)
    return value


def _expect_terminator(stream: TokenStream) -> None:
    tok = stream.peek()
    if tok.kind not in (TokenKind.PRINT, TokenKind.END):
        raise TrailingInputError(f"unexpected {tok.text!r} after statement", tok.position)

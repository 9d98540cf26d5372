"""
Tokenizer for SimpleCalc statements.

Reads characters lazily from a string or text stream and produces typed
tokens on demand. Tokens can be pushed back for one level of lookahead.
"""

from __future__ import annotations

import io
import logging
from enum import StrEnum, auto
from typing import TextIO

from simplecalc.core.errors import LexError, NumericLiteralError, SourcePosition

logger = logging.getLogger(__name__)


class TokenKind(StrEnum):
    """Token types for the calculator grammar."""

    # Literals and names
    NUMBER = auto()
    NAME = auto()

    # Keywords
    LET = auto()
    CONST = auto()
    QUIT = auto()
    HELP = auto()
    SYMBOLS = auto()
    SQRT = auto()
    POW = auto()

    # Operators
    PLUS = auto()
    MINUS = auto()
    STAR = auto()
    SLASH = auto()
    PERCENT = auto()
    BANG = auto()
    ASSIGN = auto()

    # Punctuation
    LPAREN = auto()
    RPAREN = auto()
    LBRACE = auto()
    RBRACE = auto()
    COMMA = auto()

    # Statement terminator (newline or ';')
    PRINT = auto()

    # End of input
    END = auto()


class Token:
    """A single token from the stream."""

    __slots__ = ("kind", "text", "value", "position")

    def __init__(
        self,
        kind: TokenKind,
        text: str,
        position: SourcePosition,
        value: float | None = None,
    ) -> None:
        self.kind = kind
        self.text = text
        self.value = value
        self.position = position

    def __repr__(self) -> str:
        return f"Token({self.kind}, {self.text!r}, at={self.position.format()})"


KEYWORDS: dict[str, TokenKind] = {
    "let": TokenKind.LET,
    "const": TokenKind.CONST,
    "quit": TokenKind.QUIT,
    "exit": TokenKind.QUIT,
    "q": TokenKind.QUIT,
    "help": TokenKind.HELP,
    "symbols": TokenKind.SYMBOLS,
    "sqrt": TokenKind.SQRT,
    "pow": TokenKind.POW,
}

SINGLE_CHAR_TOKENS: dict[str, TokenKind] = {
    "+": TokenKind.PLUS,
    "-": TokenKind.MINUS,
    "*": TokenKind.STAR,
    "/": TokenKind.SLASH,
    "%": TokenKind.PERCENT,
    "!": TokenKind.BANG,
    "=": TokenKind.ASSIGN,
    "(": TokenKind.LPAREN,
    ")": TokenKind.RPAREN,
    "{": TokenKind.LBRACE,
    "}": TokenKind.RBRACE,
    ",": TokenKind.COMMA,
    "#": TokenKind.LET,
    ";": TokenKind.PRINT,
    "\n": TokenKind.PRINT,
}

TERMINATORS = ("\n", ";")

# Pending pushbacks never exceed two (name-then-'=' lookahead in the dispatcher)
PUSHBACK_CAPACITY = 2


class TokenStream:
    """
    Lazy token stream over a character source.

    Usage:
        stream = TokenStream("let x = 2 * pi\\n")
        tok = stream.next_token()
        stream.push_back(tok)
    """

    def __init__(self, source: str | TextIO) -> None:
        self._source: TextIO = io.StringIO(source) if isinstance(source, str) else source
        self._buffer: list[Token] = []
        self._lookahead: str | None = None
        self._last_fresh: Token | None = None
        self.line = 1
        self.col = 1

    # -- Character level --

    def _peek_char(self) -> str:
        """Return the next character without consuming it ("" at end of input)."""
        if self._lookahead is None:
            self._lookahead = self._source.read(1)
        return self._lookahead

    def _advance(self) -> str:
        ch = self._peek_char()
        self._lookahead = None
        if ch == "\n":
            self.line += 1
            self.col = 1
        elif ch:
            self.col += 1
        return ch

    def _position(self) -> SourcePosition:
        return SourcePosition(self.line, self.col)

    def _skip_whitespace(self) -> None:
        """Skip spaces, tabs and carriage returns, but NOT newlines."""
        while True:
            ch = self._peek_char()
            if not ch or ch == "\n" or not ch.isspace():
                return
            self._advance()

    # -- Token level --

    def next_token(self) -> Token:
        """Return the most recently pushed-back token, or read a fresh one."""
        if self._buffer:
            return self._buffer.pop()
        return self._read_token()

    def push_back(self, token: Token) -> None:
        """Return a token so the next call to next_token() yields it again."""
        if len(self._buffer) >= PUSHBACK_CAPACITY:
            raise RuntimeError("token pushback buffer is full")
        self._buffer.append(token)

    def peek(self) -> Token:
        """Return the next token without consuming it."""
        tok = self.next_token()
        self.push_back(tok)
        return tok

    def _read_token(self) -> Token:
        self._last_fresh = None
        self._skip_whitespace()

        position = self._position()
        ch = self._peek_char()

        if not ch:
            tok = Token(TokenKind.END, "", position)
        elif ch.isdigit() or ch == ".":
            tok = self._read_number(position)
        elif ch.isalpha():
            tok = self._read_name(position)
        elif ch in SINGLE_CHAR_TOKENS:
            self._advance()
            tok = Token(SINGLE_CHAR_TOKENS[ch], ch, position)
        else:
            self._advance()
            raise LexError(f"bad token {ch!r}", position)

        self._last_fresh = tok
        return tok

    def _read_digits(self, chars: list[str]) -> None:
        while self._peek_char().isdigit():
            chars.append(self._advance())

    def _read_number(self, position: SourcePosition) -> Token:
        """Read a floating-point literal: digits [. digits] [e [+-] digits]."""
        chars: list[str] = []
        self._read_digits(chars)
        if self._peek_char() == ".":
            chars.append(self._advance())
            self._read_digits(chars)
        if self._peek_char() in ("e", "E"):
            chars.append(self._advance())
            if self._peek_char() in ("+", "-"):
                chars.append(self._advance())
            self._read_digits(chars)

        text = "".join(chars)
        try:
            value = float(text)
        except ValueError:
            raise NumericLiteralError(f"malformed number {text!r}", position) from None
        return Token(TokenKind.NUMBER, text, position, value=value)

    def _read_name(self, position: SourcePosition) -> Token:
        """Read a name or keyword: a letter followed by letters, digits and '_'."""
        chars = [self._advance()]
        while True:
            ch = self._peek_char()
            if ch and (ch.isalnum() or ch == "_"):
                chars.append(self._advance())
            else:
                break
        word = "".join(chars)
        return Token(KEYWORDS.get(word, TokenKind.NAME), word, position)

    # -- Error recovery --

    def discard_to_terminator(self) -> None:
        """
        Skip the rest of a failed statement.

        Drops pending tokens; if none of them was a terminator and the
        terminator has not been read yet, consumes raw characters up to and
        including the next newline or ';' (or end of input).
        """
        while self._buffer:
            tok = self._buffer.pop()
            if tok.kind == TokenKind.PRINT:
                return
            if tok.kind == TokenKind.END:
                self._buffer.append(tok)
                return

        last = self._last_fresh
        if last is not None and last.kind in (TokenKind.PRINT, TokenKind.END):
            return

        skipped = 0
        while True:
            ch = self._advance()
            if not ch or ch in TERMINATORS:
                break
            skipped += 1
        self._last_fresh = None
        logger.debug("Discarded %d characters up to line %d", skipped, self.line)

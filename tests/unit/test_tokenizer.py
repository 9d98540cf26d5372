"""Tests for the SimpleCalc tokenizer.

Covers:
- Numbers, names, keywords, operators, terminators
- Pushback buffer
- Source positions
- Error recovery (discard to terminator)
"""

from __future__ import annotations

import io

import pytest

from simplecalc.core.errors import LexError, NumericLiteralError
from simplecalc.core.tokenizer import Token, TokenKind, TokenStream


def tokenize(source: str) -> list[Token]:
    """Read every token up to and including END."""
    stream = TokenStream(source)
    tokens = [stream.next_token()]
    while tokens[-1].kind != TokenKind.END:
        tokens.append(stream.next_token())
    return tokens


def kinds(source: str) -> list[TokenKind]:
    return [t.kind for t in tokenize(source)]


# ============================================================================
# Token recognition
# ============================================================================


class TestNumbers:
    """Numeric literals are read greedily as floats."""

    def test_integer(self) -> None:
        tok = tokenize("42")[0]
        assert tok.kind == TokenKind.NUMBER
        assert tok.value == 42.0

    def test_fraction(self) -> None:
        assert tokenize("3.25")[0].value == 3.25

    def test_leading_dot(self) -> None:
        assert tokenize(".5")[0].value == 0.5

    def test_trailing_dot(self) -> None:
        assert tokenize("7.")[0].value == 7.0

    def test_exponent(self) -> None:
        values = [t.value for t in tokenize("1e3 2.5E-1")[:-1]]
        assert values == [1000.0, 0.25]

    def test_second_dot_starts_new_number(self) -> None:
        values = [t.value for t in tokenize("1.2.3")[:-1]]
        assert values == [1.2, 0.3]

    def test_lone_dot_is_malformed(self) -> None:
        with pytest.raises(NumericLiteralError):
            tokenize(".")

    def test_exponent_without_digits_is_malformed(self) -> None:
        with pytest.raises(NumericLiteralError, match="malformed number"):
            tokenize("1e+")

    def test_numeric_literal_error_is_lex_error(self) -> None:
        with pytest.raises(LexError):
            tokenize("2e")


class TestNamesAndKeywords:
    """Alphabetic runs become names unless they match a keyword exactly."""

    def test_keywords(self) -> None:
        source = "let const quit exit q help symbols sqrt pow"
        assert kinds(source) == [
            TokenKind.LET,
            TokenKind.CONST,
            TokenKind.QUIT,
            TokenKind.QUIT,
            TokenKind.QUIT,
            TokenKind.HELP,
            TokenKind.SYMBOLS,
            TokenKind.SQRT,
            TokenKind.POW,
            TokenKind.END,
        ]

    def test_names(self) -> None:
        tokens = tokenize("a_var3 X y2")
        assert [t.kind for t in tokens[:-1]] == [TokenKind.NAME] * 3
        assert [t.text for t in tokens[:-1]] == ["a_var3", "X", "y2"]

    def test_keywords_are_case_sensitive(self) -> None:
        assert kinds("Let SQRT") == [TokenKind.NAME, TokenKind.NAME, TokenKind.END]

    def test_keyword_prefix_is_a_name(self) -> None:
        tok = tokenize("sqrt2")[0]
        assert tok.kind == TokenKind.NAME
        assert tok.text == "sqrt2"

    def test_name_cannot_start_with_underscore(self) -> None:
        with pytest.raises(LexError, match="bad token"):
            tokenize("_x")

    def test_digit_then_letters_splits(self) -> None:
        assert kinds("2x") == [TokenKind.NUMBER, TokenKind.NAME, TokenKind.END]


class TestOperators:
    """Single-character operators and punctuation."""

    def test_operators(self) -> None:
        assert kinds("+ - * / % ! =") == [
            TokenKind.PLUS,
            TokenKind.MINUS,
            TokenKind.STAR,
            TokenKind.SLASH,
            TokenKind.PERCENT,
            TokenKind.BANG,
            TokenKind.ASSIGN,
            TokenKind.END,
        ]

    def test_punctuation(self) -> None:
        assert kinds("(){},") == [
            TokenKind.LPAREN,
            TokenKind.RPAREN,
            TokenKind.LBRACE,
            TokenKind.RBRACE,
            TokenKind.COMMA,
            TokenKind.END,
        ]

    def test_hash_is_declaration_marker(self) -> None:
        assert kinds("# x") == [TokenKind.LET, TokenKind.NAME, TokenKind.END]

    def test_newline_and_semicolon_terminate(self) -> None:
        assert kinds("1;2\n") == [
            TokenKind.NUMBER,
            TokenKind.PRINT,
            TokenKind.NUMBER,
            TokenKind.PRINT,
            TokenKind.END,
        ]

    def test_other_whitespace_is_skipped(self) -> None:
        assert kinds(" \t1 \r+\t 2 ") == [
            TokenKind.NUMBER,
            TokenKind.PLUS,
            TokenKind.NUMBER,
            TokenKind.END,
        ]

    def test_unknown_character(self) -> None:
        with pytest.raises(LexError, match="bad token"):
            tokenize("1 @ 2")

    def test_end_is_repeated(self) -> None:
        stream = TokenStream("")
        assert stream.next_token().kind == TokenKind.END
        assert stream.next_token().kind == TokenKind.END


class TestPositions:
    """Tokens record where they start."""

    def test_line_and_column(self) -> None:
        tokens = tokenize("1 +\n  x")
        x = tokens[3]
        assert x.text == "x"
        assert (x.position.line, x.position.column) == (2, 3)

    def test_error_carries_position(self) -> None:
        with pytest.raises(LexError) as exc_info:
            tokenize("12 $")
        assert exc_info.value.position is not None
        assert exc_info.value.position.column == 4


# ============================================================================
# Stream behaviour
# ============================================================================


class TestPushBack:
    """Pushed-back tokens are re-read in LIFO order."""

    def test_push_back_returns_same_token(self) -> None:
        stream = TokenStream("a b")
        tok = stream.next_token()
        stream.push_back(tok)
        assert stream.next_token() is tok

    def test_two_level_rollback(self) -> None:
        stream = TokenStream("x = 1")
        first = stream.next_token()
        second = stream.next_token()
        stream.push_back(second)
        stream.push_back(first)
        assert stream.next_token() is first
        assert stream.next_token() is second
        assert stream.next_token().kind == TokenKind.NUMBER

    def test_capacity_is_two(self) -> None:
        stream = TokenStream("a b c")
        toks = [stream.next_token() for _ in range(3)]
        stream.push_back(toks[2])
        stream.push_back(toks[1])
        with pytest.raises(RuntimeError):
            stream.push_back(toks[0])

    def test_peek_does_not_consume(self) -> None:
        stream = TokenStream("7")
        assert stream.peek().kind == TokenKind.NUMBER
        assert stream.next_token().value == 7.0

    def test_reads_text_stream_lazily(self) -> None:
        source = io.StringIO("1\n2\n")
        stream = TokenStream(source)
        assert stream.next_token().value == 1.0
        # Only the first token's characters (plus one lookahead) are consumed
        assert source.tell() <= 2


class TestDiscardToTerminator:
    """Error recovery skips the rest of the current statement."""

    def test_skips_rest_of_line(self) -> None:
        stream = TokenStream("1 @ 2\n3\n")
        stream.next_token()
        with pytest.raises(LexError):
            stream.next_token()
        stream.discard_to_terminator()
        assert stream.next_token().value == 3.0

    def test_semicolon_is_a_terminator(self) -> None:
        stream = TokenStream("1 2 3; 4")
        stream.next_token()
        stream.discard_to_terminator()
        assert stream.next_token().value == 4.0

    def test_pushed_back_terminator_is_dropped(self) -> None:
        stream = TokenStream("1\n2\n")
        stream.next_token()
        stream.push_back(stream.next_token())
        stream.discard_to_terminator()
        assert stream.next_token().value == 2.0

    def test_already_consumed_terminator_stops_recovery(self) -> None:
        stream = TokenStream("1\n2\n")
        stream.next_token()
        assert stream.next_token().kind == TokenKind.PRINT
        stream.discard_to_terminator()
        assert stream.next_token().value == 2.0

    def test_stops_at_end_of_input(self) -> None:
        stream = TokenStream("1 2 3")
        stream.next_token()
        stream.discard_to_terminator()
        assert stream.next_token().kind == TokenKind.END

"""
Error types for SimpleCalc tokenizing, parsing, and evaluation.

Every error raised while handling a statement derives from CalcError.
The session catches CalcError at the statement boundary, reports it, and
skips to the next terminator, so none of these end the process.
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class SourcePosition:
    """
    Location of a token in the input stream.

    Attributes:
        line: Line number (1-indexed)
        column: Column number (1-indexed)
    """

    line: int
    column: int

    def format(self) -> str:
        """Format as "line:column"."""
        return f"{self.line}:{self.column}"


class CalcError(Exception):
    """Base exception for all statement-level calculator errors."""

    def __init__(self, message: str, position: SourcePosition | None = None):
        self.message = message
        self.position = position
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        """Format error message with position if available."""
        if self.position:
            return f"{self.message} (at {self.position.format()})"
        return self.message

    @property
    def kind(self) -> str:
        """Short name of the failure kind, e.g. "DivideByZero"."""
        return type(self).__name__


# =============================================================================
# Lexical errors
# =============================================================================


class LexError(CalcError):
    """Raised for a character that starts no token."""


class NumericLiteralError(LexError):
    """Raised when a numeric literal cannot be converted to a float."""


# =============================================================================
# Syntax errors
# =============================================================================


class ParseError(CalcError):
    """
    Raised when a statement does not match the grammar.

    Examples:
    - Missing name or '=' in a declaration
    - Missing closing delimiter
    - Token that cannot start a primary
    """


class NameExpectedError(ParseError):
    """Raised when a declaration keyword is not followed by a name."""


class MissingEquals(ParseError):
    """Raised when '=' does not follow the name in a declaration or assignment."""


class UnmatchedDelimiter(ParseError):
    """Raised when a '(' or '{' group is not closed by its partner."""


class PrimaryExpected(ParseError):
    """Raised for a token that cannot start an operand, e.g. '*' or end of input."""


class ArgumentSyntaxError(ParseError):
    """Raised for a malformed built-in function call."""

    def __init__(
        self,
        function: str,
        expected: str,
        position: SourcePosition | None = None,
    ):
        self.function = function
        self.expected = expected
        super().__init__(f"{function}: '{expected}' expected", position)


class TrailingInputError(ParseError):
    """Raised when a statement is followed by something other than a terminator."""


class NestingTooDeep(ParseError):
    """Raised when groups or unary signs nest deeper than the interpreter stack allows."""


# =============================================================================
# Symbol table errors
# =============================================================================


class SymbolError(CalcError):
    """
    Raised when a name cannot be read, written, or declared.

    Attributes:
        name: The variable name involved
    """

    def __init__(self, message: str, name: str, position: SourcePosition | None = None):
        self.name = name
        super().__init__(message, position)


class UndefinedVariable(SymbolError):
    """Raised when reading or writing a name that is not in the table."""


class UndeclaredVariable(SymbolError):
    """Raised when assigning to a name that was never declared."""


class ConstantWriteError(SymbolError):
    """Raised when assigning to a constant such as pi."""


class DuplicateDeclaration(SymbolError):
    """Raised when declaring a name that already exists."""


# =============================================================================
# Evaluation errors
# =============================================================================


class EvaluationError(CalcError):
    """Raised when an arithmetic operation has no defined result."""


class DivideByZero(EvaluationError):
    """Raised for '/' or '%' with a zero divisor."""


class NegativeFactorial(EvaluationError):
    """Raised for '!' applied to a negative operand."""


class FactorialOverflow(EvaluationError, OverflowError):
    """Raised when a factorial product leaves the 32-bit signed integer range."""


class NegativeSqrt(EvaluationError):
    """Raised for sqrt of a negative number."""


class DomainError(EvaluationError):
    """Raised when a math primitive rejects its arguments (e.g. pow(-8, 0.5))."""


# =============================================================================
# Configuration errors
# =============================================================================


class ConfigError(Exception):
    """Raised when simplecalc.toml cannot be loaded or validated."""

"""
Kaleidoscope Error Hierarchy
============================

This module defines the exception hierarchy for the Kaleidoscope front-end.
All exceptions inherit from KaleidoscopeError, allowing callers to catch
every front-end error with a single except clause if desired.

Exception Hierarchy
-------------------
KaleidoscopeError (base)
└── KaleidoscopeSyntaxError - structural violation found by the parser
    ├── UnexpectedTokenError - token cannot start an expression
    └── MissingTokenError - a required token is absent

Error Message Format
--------------------
Diagnostics are a single line with no source position:

    error: Expected ')' in prototype

Parse Failure Contract
----------------------
The parser raises these exceptions internally so that a failure unwinds
every enclosing production without building a partial node. Its public
``parse_*`` methods catch them at their boundary, record them in an
ErrorCollector and return None. The caller (normally the Driver) is then
responsible for resynchronizing the token stream.
"""

from enum import Enum
from typing import TYPE_CHECKING, List, Optional

if TYPE_CHECKING:
    from kaleidoscope.lexer import Token


# =============================================================================
# Base Exception Class
# =============================================================================

class KaleidoscopeError(Exception):
    """
    Base exception for all Kaleidoscope front-end errors.

        try:
            ...
        except KaleidoscopeError as e:
            print(f"Error: {e}")
    """
    pass


# =============================================================================
# Syntax Errors
# =============================================================================

class SyntaxCause(Enum):
    """
    Distinguishable causes of a syntax error.

    The value of each member is the diagnostic text reported for it.
    """
    EXPECTED_EXPRESSION = "unknown token when expecting an expression"
    UNCLOSED_PAREN = "expected ')'"
    BAD_ARGUMENT_LIST = "Expected ')' or ',' in argument list"
    MISSING_FUNCTION_NAME = "Expected function name in prototype"
    MISSING_PROTOTYPE_LPAREN = "Expected '(' in prototype"
    MISSING_PROTOTYPE_RPAREN = "Expected ')' in prototype"
    TOO_DEEP = "expression nested too deeply"


class KaleidoscopeSyntaxError(KaleidoscopeError):
    """
    Syntax error in Kaleidoscope source.

    Attributes:
        message: The diagnostic text
        cause: Which structural rule was violated
        found: The token the parser was looking at, if known
    """

    def __init__(
        self,
        cause: SyntaxCause,
        found: Optional["Token"] = None,
        message: Optional[str] = None,
    ):
        self.cause = cause
        self.found = found
        self.message = message or cause.value
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        """Format as the single diagnostic line 'error: <message>'."""
        return f"error: {self.message}"


class UnexpectedTokenError(KaleidoscopeSyntaxError):
    """
    Token cannot start an expression.

    Raised by primary-expression parsing when the current token is not
    a number, an identifier or '('.

    Example:
        def f(x) )
    """

    def __init__(self, found: Optional["Token"] = None):
        super().__init__(SyntaxCause.EXPECTED_EXPRESSION, found)


class MissingTokenError(KaleidoscopeSyntaxError):
    """
    A required token is missing.

    Covers the closing parenthesis of a grouped expression, the argument
    list separator, and the name, '(' and ')' of a prototype.
    """
    pass


# =============================================================================
# Error Collection
# =============================================================================

class ErrorCollector:
    """
    Collects syntax errors for later reporting.

    The parser adds one error per failed top-level call. Nothing here
    stops parsing; resynchronization is left to the driver.
    """

    def __init__(self) -> None:
        self.errors: List[KaleidoscopeSyntaxError] = []

    def add(self, error: KaleidoscopeSyntaxError) -> None:
        """Add an error to the collection."""
        self.errors.append(error)

    def has_errors(self) -> bool:
        """Return True if any errors have been collected."""
        return len(self.errors) > 0

    def error_count(self) -> int:
        """Return the number of collected errors."""
        return len(self.errors)

    @property
    def last(self) -> Optional[KaleidoscopeSyntaxError]:
        """The most recently collected error, or None."""
        return self.errors[-1] if self.errors else None

    def report(self) -> str:
        """Format all errors, one per line, followed by a summary line."""
        lines = [str(error) for error in self.errors]
        error_word = "error" if len(self.errors) == 1 else "errors"
        lines.append(f"{len(self.errors)} {error_word}")
        return "\n".join(lines)

    def clear(self) -> None:
        """Clear all collected errors."""
        self.errors.clear()

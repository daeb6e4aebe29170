"""
Kaleidoscope Lexer (Tokenizer)
==============================

This module implements the lexer for the Kaleidoscope toy language.
It pulls characters one at a time from a text stream and hands tokens
to the parser on demand.

Token Categories
----------------
- Keywords: def, extern
- Identifiers: [a-zA-Z][a-zA-Z0-9]*
- Numbers: [0-9.]+ (a decimal value)
- Characters: any other single character, e.g. ( ) , + - * / <
- EOF: end of input

Comments
--------
``#`` starts a comment that runs to the end of the line. Comments never
produce tokens.

Lexer State
-----------
The lexer keeps exactly one pending character of look-ahead between
calls to ``next_token()``. It never seeks or re-reads the stream, so it
works equally well on a string, a file or an interactive terminal.

Example Usage
-------------
>>> from kaleidoscope.lexer import Lexer
>>> for token in Lexer("def add(a b) a+b").tokenize():
...     print(token)
Token(DEF, 'def')
Token(IDENTIFIER, 'add')
Token(CHAR, '(')
Token(IDENTIFIER, 'a')
Token(IDENTIFIER, 'b')
Token(CHAR, ')')
Token(IDENTIFIER, 'a')
Token(CHAR, '+')
Token(IDENTIFIER, 'b')
Token(EOF)
"""

import io
import logging
import re
import string
from dataclasses import dataclass
from enum import Enum, auto
from typing import Iterator, TextIO, Union

logger = logging.getLogger(__name__)


# =============================================================================
# Token Type Enumeration
# =============================================================================

class TokenType(Enum):
    """
    Token types for the Kaleidoscope language.

    Punctuation and operator symbols are not given their own types;
    they all arrive as CHAR tokens and the parser decides what to do
    with them.
    """
    EOF = auto()            # End of input
    DEF = auto()            # def
    EXTERN = auto()         # extern
    IDENTIFIER = auto()     # Variable/function names
    NUMBER = auto()         # Numeric literals
    CHAR = auto()           # Any other single character


KEYWORDS: dict[str, TokenType] = {
    "def": TokenType.DEF,
    "extern": TokenType.EXTERN,
}


# =============================================================================
# Token Data Class
# =============================================================================

@dataclass(frozen=True)
class Token:
    """
    A single token.

    Attributes:
        type: The TokenType classification
        value: Identifier or keyword text, float for numbers, the
               one-character string for CHAR, None for EOF
    """
    type: TokenType
    value: Union[str, float, None] = None

    def __repr__(self) -> str:
        if self.value is None:
            return f"Token({self.type.name})"
        return f"Token({self.type.name}, {self.value!r})"

    def is_char(self, char: str) -> bool:
        """Return True if this is the single-character token ``char``."""
        return self.type == TokenType.CHAR and self.value == char


EOF_TOKEN = Token(TokenType.EOF)


# =============================================================================
# Lexer Implementation
# =============================================================================

class Lexer:
    """
    Tokenizes Kaleidoscope source.

    The lexer never fails: anything it does not recognize is forwarded
    as a CHAR token for the parser to reject if it is unexpected.

    Usage:
        lexer = Lexer(sys.stdin)
        token = lexer.next_token()

    Attributes:
        stream: The character stream being tokenized
    """

    WHITESPACE = " \t\n\r\f\v"
    IDENT_START = string.ascii_letters
    IDENT_CHARS = string.ascii_letters + string.digits
    NUMBER_CHARS = string.digits + "."

    # Longest prefix of a numeric run that reads as a decimal value
    DECIMAL_PREFIX = re.compile(r"\d*(?:\.\d*)?")

    def __init__(self, source: Union[str, TextIO]):
        """
        Initialize the lexer.

        Args:
            source: Source text, or a text stream read one character
                    at a time
        """
        if isinstance(source, str):
            source = io.StringIO(source)
        self.stream = source

        # Pending look-ahead character; "" means end of input
        self._last_char = " "

    # =========================================================================
    # Public Interface
    # =========================================================================

    def next_token(self) -> Token:
        """
        Return the next token, consuming input.

        At end of input this keeps returning the EOF token.
        """
        token = self._scan_token()
        logger.debug(f"token: {token!r}")
        return token

    def tokenize(self) -> Iterator[Token]:
        """
        Generate tokens up to and including the first EOF token.
        """
        while True:
            token = self.next_token()
            yield token
            if token.type == TokenType.EOF:
                return

    # =========================================================================
    # Character Access
    # =========================================================================

    def _advance(self) -> str:
        """Read the next character into the look-ahead slot and return it."""
        self._last_char = self.stream.read(1)
        return self._last_char

    # =========================================================================
    # Token Scanning
    # =========================================================================

    def _scan_token(self) -> Token:
        while True:
            while self._last_char and self._last_char in self.WHITESPACE:
                self._advance()

            if self._last_char != "#":
                break

            # Comment until end of line
            while self._advance() not in ("", "\n", "\r"):
                pass

        char = self._last_char

        if not char:
            return EOF_TOKEN

        if char in self.IDENT_START:
            return self._scan_identifier()

        if char in self.NUMBER_CHARS:
            return self._scan_number()

        self._advance()
        return Token(TokenType.CHAR, char)

    def _scan_identifier(self) -> Token:
        """Scan an identifier or keyword."""
        chars = [self._last_char]
        while self._advance() and self._last_char in self.IDENT_CHARS:
            chars.append(self._last_char)

        name = "".join(chars)
        return Token(KEYWORDS.get(name, TokenType.IDENTIFIER), name)

    def _scan_number(self) -> Token:
        """
        Scan a run of digits and '.' characters as a decimal value.

        The run is not validated; '1.2.3' reads as 1.2.
        """
        chars = [self._last_char]
        while self._advance() and self._last_char in self.NUMBER_CHARS:
            chars.append(self._last_char)

        return Token(TokenType.NUMBER, parse_decimal_prefix("".join(chars)))


# =============================================================================
# Utility Functions
# =============================================================================

def parse_decimal_prefix(text: str) -> float:
    """
    Parse the longest leading decimal number in ``text``.

    Returns 0.0 when the prefix holds no digit at all (e.g. '.').
    """
    prefix = Lexer.DECIMAL_PREFIX.match(text).group()
    if not any(c.isdigit() for c in prefix):
        logger.debug(f"numeric run {text!r} has no digits, reading as 0.0")
        return 0.0
    return float(prefix)


def tokenize(source: Union[str, TextIO]) -> list[Token]:
    """Tokenize ``source`` completely, including the trailing EOF token."""
    return list(Lexer(source).tokenize())

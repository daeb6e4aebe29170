"""
Kaleidoscope - Lexer and Parser for a Toy Expression Language
==============================================================

This package provides the front-end of Kaleidoscope, a minimal
expression-oriented language with function definitions, external
declarations and standalone expressions:

    # Compute the average of two numbers
    def avg(a b) (a+b)/2
    extern sin(x);
    avg(sin(1), 2)

Main Components
---------------
- **lexer**: character stream to tokens (Lexer)
- **ast**: the fixed set of AST node shapes
- **parser**: recursive descent with precedence climbing (Parser)
- **driver**: top-level loop with error recovery (Driver)
- **cli**: the ``kaleido`` command-line tool

Quick Start
-----------
Parse a whole program:
    >>> from kaleidoscope import parse_source
    >>> parse_source("def inc(x) x+1")
    [Function(prototype=Prototype(name='inc', params=('x',)), ...)]

Or use the command-line tool:
    $ kaleido program.kal --ast
"""

__version__ = "1.0.0"

# =============================================================================
# Public API Exports
# =============================================================================

from kaleidoscope.ast import (
    ASTPrinter,
    BinaryOp,
    Call,
    Expr,
    Function,
    NumberLiteral,
    Prototype,
    Variable,
    to_source,
)
from kaleidoscope.driver import Driver, DriverOptions, TopLevelKind, TopLevelResult
from kaleidoscope.errors import (
    ErrorCollector,
    KaleidoscopeError,
    KaleidoscopeSyntaxError,
    MissingTokenError,
    SyntaxCause,
    UnexpectedTokenError,
)
from kaleidoscope.lexer import Lexer, Token, TokenType
from kaleidoscope.parser import BINOP_PRECEDENCE, Parser, parse_expression, parse_source

__all__ = [
    # Version info
    "__version__",
    # Lexer
    "Lexer",
    "Token",
    "TokenType",
    # AST
    "ASTPrinter",
    "BinaryOp",
    "Call",
    "Expr",
    "Function",
    "NumberLiteral",
    "Prototype",
    "Variable",
    "to_source",
    # Parser
    "BINOP_PRECEDENCE",
    "Parser",
    "parse_expression",
    "parse_source",
    # Driver
    "Driver",
    "DriverOptions",
    "TopLevelKind",
    "TopLevelResult",
    # Exception hierarchy
    "ErrorCollector",
    "KaleidoscopeError",
    "KaleidoscopeSyntaxError",
    "MissingTokenError",
    "SyntaxCause",
    "UnexpectedTokenError",
]

"""
Kaleidoscope Recursive Descent Parser
=====================================

This module implements a recursive descent parser for Kaleidoscope.
It pulls tokens from a Lexer on demand, holding exactly one token of
look-ahead, and builds the AST defined in kaleidoscope.ast.

Grammar (Simplified EBNF)
-------------------------
top             ::= definition | external | expression | ';'
definition      ::= 'def' prototype expression
external        ::= 'extern' prototype
prototype       ::= IDENTIFIER '(' IDENTIFIER* ')'
expression      ::= primary binoprhs
binoprhs        ::= (BINOP primary)*
primary         ::= identifierexpr | numberexpr | parenexpr
identifierexpr  ::= IDENTIFIER | IDENTIFIER '(' (expression (',' expression)*)? ')'
numberexpr      ::= NUMBER
parenexpr       ::= '(' expression ')'

Operator Precedence (lowest to highest, all left-associative)
-------------------------------------------------------------
10. relational     <
20. additive       + -
40. multiplicative * /

Binary expressions are parsed by precedence climbing rather than one
production per level.

Failure Handling
----------------
Each public ``parse_*`` method returns the parsed node, or None after
recording exactly one KaleidoscopeSyntaxError in ``parser.errors``. No
partial node is ever returned. The parser does not skip tokens after a
failure; resynchronizing is the caller's job (see kaleidoscope.driver).

Example Usage
-------------
>>> from kaleidoscope.parser import Parser
>>> parser = Parser.from_source("def add(a b) a+b")
>>> parser.parse_definition()
Function(prototype=Prototype(name='add', params=('a', 'b')), ...)
"""

import logging
from typing import Callable, Optional, TextIO, TypeVar, Union

from kaleidoscope.ast import (
    BinaryOp,
    Call,
    Expr,
    Function,
    NumberLiteral,
    Prototype,
    Variable,
)
from kaleidoscope.errors import (
    ErrorCollector,
    KaleidoscopeSyntaxError,
    MissingTokenError,
    SyntaxCause,
    UnexpectedTokenError,
)
from kaleidoscope.lexer import Lexer, Token, TokenType

logger = logging.getLogger(__name__)

T = TypeVar("T")


# =============================================================================
# Operator Precedence Table
# =============================================================================

BINOP_PRECEDENCE: dict[str, int] = {
    "<": 10,
    "+": 20,
    "-": 20,
    "*": 40,
    "/": 40,
}

# Precedence of anything that is not a binary operator
NOT_A_BINOP = -1


class Parser:
    """
    Recursive descent parser for Kaleidoscope.

    The parser owns its Lexer; all mutable state (the current token and
    the lexer's pending character) lives on these two instances, so
    independent parsers never interfere.

    Attributes:
        lexer: The token source
        errors: Collected syntax errors, one per failed public call
    """

    def __init__(self, lexer: Lexer):
        self.lexer = lexer
        self.errors = ErrorCollector()
        self._current: Optional[Token] = None

    @classmethod
    def from_source(cls, source: Union[str, TextIO]) -> "Parser":
        """Create a parser over a string or text stream."""
        return cls(Lexer(source))

    # =========================================================================
    # Token Access Methods
    # =========================================================================

    @property
    def current(self) -> Token:
        """The token being looked at, reading the first one if needed."""
        if self._current is None:
            self.next_token()
        return self._current

    def next_token(self) -> Token:
        """Read another token from the lexer and make it current."""
        self._current = self.lexer.next_token()
        return self._current

    def _token_precedence(self) -> int:
        """Precedence of the current token as a binary operator."""
        token = self.current
        if token.type != TokenType.CHAR:
            return NOT_A_BINOP
        return BINOP_PRECEDENCE.get(token.value, NOT_A_BINOP)

    # =========================================================================
    # Public Productions
    # =========================================================================

    def parse_primary(self) -> Optional[Expr]:
        """Parse a number, variable, call or parenthesized expression."""
        return self._attempt(self._parse_primary)

    def parse_expression(self) -> Optional[Expr]:
        """Parse a primary expression followed by any binary operators."""
        return self._attempt(self._parse_expression)

    def parse_prototype(self) -> Optional[Prototype]:
        """Parse ``name(param param ...)``."""
        return self._attempt(self._parse_prototype)

    def parse_definition(self) -> Optional[Function]:
        """Parse ``def prototype expression``."""
        return self._attempt(self._parse_definition)

    def parse_extern(self) -> Optional[Prototype]:
        """Parse ``extern prototype``."""
        return self._attempt(self._parse_extern)

    def parse_top_level_expr(self) -> Optional[Function]:
        """Parse a bare expression and wrap it in an anonymous Function."""
        return self._attempt(self._parse_top_level_expr)

    def _attempt(self, production: Callable[[], T]) -> Optional[T]:
        """
        Run a production, turning a syntax error into a None result.

        The error is recorded in ``self.errors``; the current token is
        left where the failure happened. Nesting deep enough to exhaust
        the interpreter stack is reported as a TOO_DEEP syntax error.
        """
        try:
            return production()
        except KaleidoscopeSyntaxError as e:
            error = e
        except RecursionError:
            error = KaleidoscopeSyntaxError(SyntaxCause.TOO_DEEP, self.current)

        self.errors.add(error)
        logger.debug(f"{error} (at {error.found!r})")
        return None

    # =========================================================================
    # Primary Expressions
    # =========================================================================

    def _parse_primary(self) -> Expr:
        token = self.current

        if token.type == TokenType.IDENTIFIER:
            return self._parse_identifier_expr()

        if token.type == TokenType.NUMBER:
            return self._parse_number_expr()

        if token.is_char("("):
            return self._parse_paren_expr()

        raise UnexpectedTokenError(token)

    def _parse_number_expr(self) -> NumberLiteral:
        """numberexpr ::= NUMBER"""
        result = NumberLiteral(self.current.value)
        self.next_token()  # consume the number
        return result

    def _parse_paren_expr(self) -> Expr:
        """parenexpr ::= '(' expression ')'"""
        self.next_token()  # consume (
        expr = self._parse_expression()

        if not self.current.is_char(")"):
            raise MissingTokenError(SyntaxCause.UNCLOSED_PAREN, self.current)
        self.next_token()  # consume )

        # Grouping is not recorded in the tree
        return expr

    def _parse_identifier_expr(self) -> Expr:
        """
        identifierexpr ::= IDENTIFIER
                         | IDENTIFIER '(' (expression (',' expression)*)? ')'
        """
        name = self.current.value
        self.next_token()  # consume identifier

        if not self.current.is_char("("):
            return Variable(name)

        self.next_token()  # consume (
        args = []
        if not self.current.is_char(")"):
            while True:
                args.append(self._parse_expression())

                if self.current.is_char(")"):
                    break

                if not self.current.is_char(","):
                    raise MissingTokenError(SyntaxCause.BAD_ARGUMENT_LIST, self.current)
                self.next_token()  # consume ,

        self.next_token()  # consume )

        return Call(name, tuple(args))

    # =========================================================================
    # Expression Parsing (Operator Precedence)
    # =========================================================================

    def _parse_expression(self) -> Expr:
        """expression ::= primary binoprhs"""
        lhs = self._parse_primary()
        return self._parse_binop_rhs(0, lhs)

    def _parse_binop_rhs(self, min_precedence: int, lhs: Expr) -> Expr:
        """
        Fold ``(BINOP primary)*`` into ``lhs`` by precedence climbing.

        Only operators binding at least as tightly as ``min_precedence``
        are consumed. An operator to the right that binds strictly
        tighter takes the pending right operand as its own left operand;
        equal precedence does not, which keeps the operators
        left-associative.
        """
        while True:
            precedence = self._token_precedence()

            if precedence < min_precedence:
                return lhs

            op = self.current.value
            self.next_token()  # consume operator

            rhs = self._parse_primary()

            next_precedence = self._token_precedence()
            if precedence < next_precedence:
                rhs = self._parse_binop_rhs(precedence + 1, rhs)

            lhs = BinaryOp(op, lhs, rhs)

    # =========================================================================
    # Declarations and Top-Level Units
    # =========================================================================

    def _parse_prototype(self) -> Prototype:
        """prototype ::= IDENTIFIER '(' IDENTIFIER* ')'"""
        if self.current.type != TokenType.IDENTIFIER:
            raise MissingTokenError(SyntaxCause.MISSING_FUNCTION_NAME, self.current)

        name = self.current.value
        self.next_token()  # consume name

        if not self.current.is_char("("):
            raise MissingTokenError(SyntaxCause.MISSING_PROTOTYPE_LPAREN, self.current)

        params = []
        while self.next_token().type == TokenType.IDENTIFIER:
            params.append(self.current.value)

        if not self.current.is_char(")"):
            raise MissingTokenError(SyntaxCause.MISSING_PROTOTYPE_RPAREN, self.current)
        self.next_token()  # consume )

        return Prototype(name, tuple(params))

    def _parse_definition(self) -> Function:
        """definition ::= 'def' prototype expression"""
        self.next_token()  # consume def
        proto = self._parse_prototype()
        body = self._parse_expression()
        return Function(proto, body)

    def _parse_extern(self) -> Prototype:
        """external ::= 'extern' prototype"""
        self.next_token()  # consume extern
        return self._parse_prototype()

    def _parse_top_level_expr(self) -> Function:
        """toplevelexpr ::= expression"""
        body = self._parse_expression()
        return Function(Prototype("", ()), body)


# =============================================================================
# Convenience Functions
# =============================================================================

def parse_expression(source: str) -> Optional[Expr]:
    """
    Parse a single expression from ``source``.

    Returns None if the text does not start with a valid expression.
    Trailing input after the expression is ignored.
    """
    return Parser.from_source(source).parse_expression()


def parse_source(source: Union[str, TextIO]) -> list[Union[Function, Prototype]]:
    """
    Parse every top-level unit in ``source``.

    This is a convenience wrapper around the Driver that keeps only the
    units that parsed successfully.

    Returns:
        Functions (definitions and anonymous top-level expressions) and
        Prototypes (extern declarations), in source order
    """
    from kaleidoscope.driver import Driver

    return [result.node for result in Driver.from_source(source).run() if result.ok]

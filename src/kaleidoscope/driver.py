"""
Kaleidoscope Top-Level Driver
=============================

This module runs the top-level loop: it asks the parser for one
top-level unit at a time until the input is exhausted.

    top ::= definition | external | expression | ';'

Error Recovery
--------------
The parser reports a failed unit by returning None; it never skips
input on its own. After each failure the driver discards exactly one
token and resumes. This recovers well from a single stray token but
can lose track badly on deeply malformed input such as unbalanced
parentheses, where the following units may also fail.

Example Usage
-------------
>>> from kaleidoscope.driver import Driver
>>> for result in Driver.from_source("extern sin(x); sin(1)").run():
...     print(result.status)
Parsed an extern
Parsed a top-level expr
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Iterator, Optional, TextIO, Union

from kaleidoscope.ast import Function, Prototype
from kaleidoscope.errors import KaleidoscopeSyntaxError
from kaleidoscope.lexer import TokenType
from kaleidoscope.parser import Parser

logger = logging.getLogger(__name__)


class TopLevelKind(Enum):
    """
    Kind of top-level unit.

    The value of each member is the status text reported on success.
    """
    DEFINITION = "Parsed a function definition."
    EXTERN = "Parsed an extern"
    EXPRESSION = "Parsed a top-level expr"


@dataclass(frozen=True)
class TopLevelResult:
    """
    Outcome of one attempt to parse a top-level unit.

    Exactly one of ``node`` and ``error`` is set.

    Attributes:
        kind: Which production was attempted
        node: Function for definitions and expressions, Prototype for externs
        error: The syntax error if the unit failed
    """
    kind: TopLevelKind
    node: Optional[Union[Function, Prototype]] = None
    error: Optional[KaleidoscopeSyntaxError] = None

    @property
    def ok(self) -> bool:
        return self.node is not None

    @property
    def status(self) -> str:
        """One-line report: the kind's status text, or the diagnostic."""
        if self.ok:
            return self.kind.value
        return str(self.error)


@dataclass
class DriverOptions:
    """
    Driver configuration options.

    Attributes:
        prompt: Text shown before each top-level unit in interactive use
    """
    prompt: str = "ready> "


class Driver:
    """
    Top-level loop over a Parser.

    Usage:
        driver = Driver.from_source(open("prog.kal"))
        for result in driver.run():
            print(result.status)

    Attributes:
        parser: The parser supplying units
        options: Driver configuration
    """

    def __init__(self, parser: Parser, options: Optional[DriverOptions] = None):
        self.parser = parser
        self.options = options or DriverOptions()

    @classmethod
    def from_source(
        cls,
        source: Union[str, TextIO],
        options: Optional[DriverOptions] = None,
    ) -> "Driver":
        """Create a driver with its own parser over a string or text stream."""
        return cls(Parser.from_source(source), options)

    def run(self) -> Iterator[TopLevelResult]:
        """
        Parse top-level units until end of input.

        Yields one TopLevelResult per definition, extern or expression.
        Semicolons between units are skipped.
        """
        while True:
            token = self.parser.current

            if token.type == TokenType.EOF:
                return

            if token.is_char(";"):
                self.parser.next_token()
                continue

            if token.type == TokenType.DEF:
                yield self.handle_definition()
            elif token.type == TokenType.EXTERN:
                yield self.handle_extern()
            else:
                yield self.handle_top_level_expression()

    def parse_all(self) -> list[TopLevelResult]:
        """Run the loop to completion and return every result."""
        return list(self.run())

    # =========================================================================
    # Unit Handlers
    # =========================================================================

    def handle_definition(self) -> TopLevelResult:
        return self._handle(TopLevelKind.DEFINITION, self.parser.parse_definition())

    def handle_extern(self) -> TopLevelResult:
        return self._handle(TopLevelKind.EXTERN, self.parser.parse_extern())

    def handle_top_level_expression(self) -> TopLevelResult:
        return self._handle(TopLevelKind.EXPRESSION, self.parser.parse_top_level_expr())

    def _handle(
        self,
        kind: TopLevelKind,
        node: Optional[Union[Function, Prototype]],
    ) -> TopLevelResult:
        if node is not None:
            logger.info(kind.value)
            return TopLevelResult(kind, node=node)

        error = self.parser.errors.last
        logger.info(f"{kind.name.lower()} failed: {error}")

        # Skip token for error recovery
        self.parser.next_token()
        return TopLevelResult(kind, error=error)

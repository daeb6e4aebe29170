"""
AST Test Suite
==============

Tests for the AST node shapes, source rendering and the pretty printer.
"""

import dataclasses

import pytest
from kaleidoscope.ast import (
    ASTPrinter,
    BinaryOp,
    Call,
    Function,
    NumberLiteral,
    Prototype,
    Variable,
    format_number,
    to_source,
)
from kaleidoscope.parser import Parser, parse_expression, parse_source


# =============================================================================
# Node Tests
# =============================================================================

class TestNodes:
    """Tests for node construction and immutability."""

    def test_nodes_are_frozen(self):
        node = BinaryOp("+", NumberLiteral(1.0), Variable("x"))
        with pytest.raises(dataclasses.FrozenInstanceError):
            node.op = "-"

    def test_structural_equality(self):
        assert Call("f", (Variable("x"),)) == Call("f", (Variable("x"),))
        assert Call("f", (Variable("x"),)) != Call("f", (Variable("y"),))

    def test_prototype_arity(self):
        assert Prototype("f", ("a", "b")).arity == 2
        assert Prototype("g").arity == 0

    def test_function_name(self):
        function = Function(Prototype("sq", ("x",)), BinaryOp("*", Variable("x"), Variable("x")))
        assert function.name == "sq"
        assert not function.is_anonymous

    def test_anonymous_function(self):
        assert Function(Prototype(""), NumberLiteral(1.0)).is_anonymous


# =============================================================================
# Source Rendering Tests
# =============================================================================

class TestToSource:
    """Tests for fully-parenthesized rendering."""

    def test_binary(self):
        assert to_source(parse_expression("1+2*3")) == "(1.0 + (2.0 * 3.0))"

    def test_call(self):
        assert to_source(parse_expression("f(a, b<c)")) == "f(a, (b < c))"

    def test_definition(self):
        function = Parser.from_source("def add(a b) a+b").parse_definition()
        assert to_source(function) == "def add(a b) (a + b)"

    def test_extern(self):
        assert to_source(Prototype("sin", ("x",))) == "extern sin(x)"

    def test_anonymous_function_renders_body(self):
        function = Parser.from_source("x-1").parse_top_level_expr()
        assert to_source(function) == "(x - 1.0)"

    @pytest.mark.parametrize("value,text", [
        (42.0, "42.0"),
        (0.5, "0.5"),
        (1e20, "100000000000000000000"),
        (1e-7, "0.0000001"),
    ])
    def test_format_number_has_no_exponent(self, value, text):
        assert format_number(value) == text

    def test_rejects_non_node(self):
        with pytest.raises(TypeError):
            to_source("x")


class TestRoundTrip:
    """Re-parsing rendered source yields the same tree."""

    @pytest.mark.parametrize("source", [
        "1+2*3",
        "1*2+3",
        "a<b+c",
        "a-b-c",
        "(a-b)-(c-d)",
        "a/(b/c)",
        "f()",
        "f(1, g(x, y*2), (3))",
        "x<y<z",
        "0.25*alpha+beta/gamma-1",
        "100000000000000000000000*2",
    ])
    def test_expression_round_trip(self, source):
        tree = parse_expression(source)
        assert parse_expression(to_source(tree)) == tree

    def test_program_round_trip(self):
        units = parse_source(
            "def fib(n) fib(n-1)+fib(n-2);"
            "extern sin(x) extern cos(y);"
            "fib(10) < sin(1.5)*2"
        )
        rendered = "; ".join(to_source(unit) for unit in units)
        assert parse_source(rendered) == units


# =============================================================================
# Pretty Printer Tests
# =============================================================================

class TestASTPrinter:
    """Tests for the indented tree dump."""

    def test_function(self):
        function = Parser.from_source("def f(a b) a*g(b, 2)").parse_definition()
        assert ASTPrinter().print(function).splitlines() == [
            "Function: f(a, b)",
            "  BinaryOp: *",
            "    Variable: a",
            "    Call: g",
            "      Variable: b",
            "      Number: 2.0",
        ]

    def test_anonymous(self):
        function = Parser.from_source("7").parse_top_level_expr()
        assert ASTPrinter().print(function) == "Function: <anonymous>()\n  Number: 7.0"

    def test_extern(self):
        assert ASTPrinter().print(Prototype("sin", ("x",))) == "Extern: sin(x)"

    def test_printer_is_reusable(self):
        printer = ASTPrinter()
        printer.print(Variable("a"))
        assert printer.print(Variable("b")) == "Variable: b"

    def test_custom_indent(self):
        text = ASTPrinter(indent="\t").print(BinaryOp("+", Variable("a"), Variable("b")))
        assert text == "BinaryOp: +\n\tVariable: a\n\tVariable: b"


class TestDeepTrees:
    """Rendering trees deeper than the interpreter recursion limit."""

    TERMS = 2000

    def _chain(self, terms):
        return parse_expression("+".join(["1"] * terms))

    def test_to_source_long_chain(self):
        text = to_source(self._chain(self.TERMS))
        assert text.startswith("(" * (self.TERMS - 1) + "1.0 + 1.0)")
        assert text.endswith(" + 1.0)")
        assert text.count("+") == self.TERMS - 1

    def test_to_source_nested_calls(self):
        node = NumberLiteral(1.0)
        for _ in range(3000):
            node = Call("f", (node,))
        assert to_source(node) == "f(" * 3000 + "1.0" + ")" * 3000

    def test_printer_long_chain(self):
        lines = ASTPrinter().print(self._chain(self.TERMS)).splitlines()
        assert len(lines) == 2 * self.TERMS - 1
        assert lines[0] == "BinaryOp: +"
        assert lines[self.TERMS - 1] == "  " * (self.TERMS - 1) + "Number: 1.0"
        assert lines[-1] == "  Number: 1.0"

    def test_printer_resets_indent(self):
        printer = ASTPrinter()
        printer.print(self._chain(10))
        assert printer.indent_level == 0

    def test_chain_round_trip(self):
        tree = self._chain(100)
        assert parse_expression(to_source(tree)) == tree

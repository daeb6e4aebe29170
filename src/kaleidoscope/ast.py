"""
Kaleidoscope Abstract Syntax Tree (AST) Definitions
===================================================

This module defines the AST node types produced by the parser.

Node Shapes
-----------
Expr (closed union)
├── NumberLiteral - numeric constant
├── Variable - variable reference
├── BinaryOp - binary operator application
└── Call - function call
Prototype - function name and parameter names, no body
Function - prototype plus body expression

Design Notes
------------
- All nodes are frozen dataclasses, immutable once constructed
- Sequences are tuples, so a child is owned by exactly one parent
- The set of node shapes is fixed; code that consumes the tree matches
  on it with isinstance rather than dispatching through the nodes
- An anonymous Function (empty name, no parameters) wraps a standalone
  top-level expression
"""

from dataclasses import dataclass, field
from decimal import Decimal
from typing import Union


# =============================================================================
# Expression Nodes
# =============================================================================

@dataclass(frozen=True)
class NumberLiteral:
    """
    Numeric literal expression.

    Attributes:
        value: The decimal value
    """
    value: float


@dataclass(frozen=True)
class Variable:
    """
    Variable reference expression.

    Attributes:
        name: The variable name
    """
    name: str


@dataclass(frozen=True)
class BinaryOp:
    """
    Binary operation expression (lhs op rhs).

    Attributes:
        op: The operator character
        lhs: Left operand expression
        rhs: Right operand expression
    """
    op: str
    lhs: "Expr"
    rhs: "Expr"


@dataclass(frozen=True)
class Call:
    """
    Function call expression.

    Attributes:
        callee: Name of the function to call
        args: Argument expressions, in order
    """
    callee: str
    args: tuple["Expr", ...] = ()


Expr = Union[NumberLiteral, Variable, BinaryOp, Call]


# =============================================================================
# Declaration Nodes
# =============================================================================

@dataclass(frozen=True)
class Prototype:
    """
    Function signature without a body.

    Parameter names are kept in order. Duplicates are not rejected.

    Attributes:
        name: Function name ("" for an anonymous function)
        params: Parameter names
    """
    name: str
    params: tuple[str, ...] = ()

    @property
    def arity(self) -> int:
        """Number of parameters."""
        return len(self.params)


@dataclass(frozen=True)
class Function:
    """
    Function definition.

    Attributes:
        prototype: The function signature
        body: The body expression
    """
    prototype: Prototype
    body: Expr

    @property
    def name(self) -> str:
        return self.prototype.name

    @property
    def is_anonymous(self) -> bool:
        """True for the wrapper around a standalone top-level expression."""
        return self.prototype.name == "" and not self.prototype.params


Node = Union[NumberLiteral, Variable, BinaryOp, Call, Prototype, Function]


# =============================================================================
# Source Rendering
# =============================================================================

def format_number(value: float) -> str:
    """
    Render a number so that the lexer reads it back unchanged.

    The lexer only accepts digits and '.', so exponent notation is
    expanded.
    """
    return format(Decimal(repr(value)), "f")


def to_source(node: Node) -> str:
    """
    Render a node as fully-parenthesized Kaleidoscope source.

    Every binary operation is wrapped in parentheses, so re-parsing the
    text yields a structurally identical tree. Anonymous functions render
    as their bare body and prototypes render as extern declarations.

    Example:
        >>> to_source(BinaryOp("+", NumberLiteral(1.0), Variable("x")))
        '(1.0 + x)'
    """
    if isinstance(node, Function):
        if node.is_anonymous:
            return _expr_source(node.body)
        return f"def {_prototype_source(node.prototype)} {_expr_source(node.body)}"
    if isinstance(node, Prototype):
        return f"extern {_prototype_source(node)}"
    return _expr_source(node)


def _prototype_source(proto: Prototype) -> str:
    return f"{proto.name}({' '.join(proto.params)})"


def _expr_source(expr: Expr) -> str:
    # Iterative so operator chains may nest past the recursion limit
    if isinstance(expr, str):
        raise TypeError("not an expression node: str")
    parts: list[str] = []
    stack: list[Union[Expr, str]] = [expr]

    while stack:
        item = stack.pop()
        if isinstance(item, str):
            parts.append(item)
        elif isinstance(item, NumberLiteral):
            parts.append(format_number(item.value))
        elif isinstance(item, Variable):
            parts.append(item.name)
        elif isinstance(item, BinaryOp):
            stack.extend(reversed(("(", item.lhs, f" {item.op} ", item.rhs, ")")))
        elif isinstance(item, Call):
            pieces: list[Union[Expr, str]] = [f"{item.callee}("]
            for index, arg in enumerate(item.args):
                if index:
                    pieces.append(", ")
                pieces.append(arg)
            pieces.append(")")
            stack.extend(reversed(pieces))
        else:
            raise TypeError(f"not an expression node: {type(item).__name__}")

    return "".join(parts)


# =============================================================================
# AST Pretty Printer
# =============================================================================

@dataclass
class ASTPrinter:
    """
    Pretty printer for AST debugging.

    Produces a human-readable, indented representation of the tree.

    Usage:
        printer = ASTPrinter()
        output = printer.print(function)
        print(output)
    """
    indent: str = "  "
    output: list[str] = field(default_factory=list, init=False)
    indent_level: int = field(default=0, init=False)

    def print(self, node: Node) -> str:
        """Print the AST and return as string."""
        self.output = []
        self.indent_level = 0
        self._visit(node)
        return "\n".join(self.output)

    def _emit(self, text: str) -> None:
        self.output.append(f"{self.indent * self.indent_level}{text}")

    def _visit(self, root: Node) -> None:
        """Walk the tree depth-first with an explicit stack."""
        stack: list[tuple[Node, int]] = [(root, 0)]
        while stack:
            node, self.indent_level = stack.pop()
            children = self._visit_node(node)
            for child in reversed(children):
                stack.append((child, self.indent_level + 1))
        self.indent_level = 0

    def _visit_node(self, node: Node) -> tuple[Node, ...]:
        """Emit the line for one node and return its children."""
        if isinstance(node, Function):
            label = "<anonymous>" if node.is_anonymous else node.name
            self._emit(f"Function: {label}({', '.join(node.prototype.params)})")
            return (node.body,)
        if isinstance(node, Prototype):
            self._emit(f"Extern: {node.name}({', '.join(node.params)})")
            return ()
        if isinstance(node, NumberLiteral):
            self._emit(f"Number: {format_number(node.value)}")
            return ()
        if isinstance(node, Variable):
            self._emit(f"Variable: {node.name}")
            return ()
        if isinstance(node, BinaryOp):
            self._emit(f"BinaryOp: {node.op}")
            return (node.lhs, node.rhs)
        if isinstance(node, Call):
            self._emit(f"Call: {node.callee}")
            return node.args
        raise TypeError(f"not an AST node: {type(node).__name__}")

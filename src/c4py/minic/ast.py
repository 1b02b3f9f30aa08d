"""
Mini-C Abstract Syntax Tree (AST) Definitions
=============================================

This module defines the AST node types built by the Mini-C parser and
walked by the evaluator.

Node Hierarchy
--------------
ASTNode (base)
├── ProgramNode - root node containing all function definitions
├── Declarations
│   ├── FunctionNode - function definition
│   └── Parameter - function parameter
├── Statements
│   ├── Block - compound statement { ... }
│   ├── VarDecl - local variable declaration
│   ├── Assign - assignment to a variable or through a pointer
│   ├── IfStatement - if/else statement
│   ├── WhileStatement - while loop
│   ├── ReturnStatement - return statement
│   └── ExpressionStatement - expression as statement
└── Expressions
    ├── IntLiteral, FloatLiteral, CharLiteral, StringLiteral
    ├── Identifier - variable reference
    ├── UnaryExpression - negation and logical not
    ├── BinaryExpression - binary operators (incl. && and ||)
    ├── ConditionalExpression - ternary operator (?:)
    ├── CallExpression - function call (incl. the print builtin)
    ├── CastExpression - type cast
    ├── SizeofExpression - sizeof(type)
    ├── AddressOf - &name
    └── Dereference - *pointer

Design Notes
------------
- All nodes are frozen dataclasses; the tree is immutable once built
- Child sequences are tuples so nodes stay hashable
- Each node stores its source location for error reporting, but the
  location takes no part in equality: two programs that differ only in
  layout produce equal trees
- Assignment is a statement, not an expression
"""

from dataclasses import dataclass, field, fields
from enum import Enum, auto
from typing import Any, Optional

from c4py.errors import SourceLocation
from c4py.minic.types import CType


# =============================================================================
# AST Node Base Classes
# =============================================================================

@dataclass(frozen=True)
class ASTNode:
    """
    Base class for all AST nodes.

    Attributes:
        location: Source location where this node appears
    """
    location: SourceLocation = field(compare=False, repr=False)


@dataclass(frozen=True)
class Expression(ASTNode):
    """Base class for all expression nodes."""
    pass


@dataclass(frozen=True)
class Statement(ASTNode):
    """Base class for all statement nodes."""
    pass


# =============================================================================
# Operators
# =============================================================================

class BinaryOperator(Enum):
    """Binary operator types."""
    # Arithmetic
    ADD = auto()        # +
    SUBTRACT = auto()   # -
    MULTIPLY = auto()   # *
    DIVIDE = auto()     # /
    MODULO = auto()     # %

    # Comparison
    EQUAL = auto()      # ==
    NOT_EQUAL = auto()  # !=
    LESS = auto()       # <
    GREATER = auto()    # >
    LESS_EQ = auto()    # <=
    GREATER_EQ = auto() # >=

    # Logical
    LOGICAL_AND = auto()  # &&
    LOGICAL_OR = auto()   # ||

    # Bitwise
    BITWISE_AND = auto()  # &
    BITWISE_OR = auto()   # |
    BITWISE_XOR = auto()  # ^
    LEFT_SHIFT = auto()   # <<
    RIGHT_SHIFT = auto()  # >>

    def __str__(self) -> str:
        return BINARY_OPERATOR_TEXT[self]


class UnaryOperator(Enum):
    """Unary operator types (address-of and dereference have their own nodes)."""
    NEGATE = auto()      # -x
    LOGICAL_NOT = auto() # !x

    def __str__(self) -> str:
        return UNARY_OPERATOR_TEXT[self]


BINARY_OPERATOR_TEXT = {
    BinaryOperator.ADD: "+",
    BinaryOperator.SUBTRACT: "-",
    BinaryOperator.MULTIPLY: "*",
    BinaryOperator.DIVIDE: "/",
    BinaryOperator.MODULO: "%",
    BinaryOperator.EQUAL: "==",
    BinaryOperator.NOT_EQUAL: "!=",
    BinaryOperator.LESS: "<",
    BinaryOperator.GREATER: ">",
    BinaryOperator.LESS_EQ: "<=",
    BinaryOperator.GREATER_EQ: ">=",
    BinaryOperator.LOGICAL_AND: "&&",
    BinaryOperator.LOGICAL_OR: "||",
    BinaryOperator.BITWISE_AND: "&",
    BinaryOperator.BITWISE_OR: "|",
    BinaryOperator.BITWISE_XOR: "^",
    BinaryOperator.LEFT_SHIFT: "<<",
    BinaryOperator.RIGHT_SHIFT: ">>",
}

UNARY_OPERATOR_TEXT = {
    UnaryOperator.NEGATE: "-",
    UnaryOperator.LOGICAL_NOT: "!",
}


# =============================================================================
# Expression Nodes
# =============================================================================

@dataclass(frozen=True)
class IntLiteral(Expression):
    """Integer constant (always non-negative; -5 is NEGATE applied to 5)."""
    value: int = 0


@dataclass(frozen=True)
class FloatLiteral(Expression):
    """Floating-point constant such as 3.14."""
    value: float = 0.0


@dataclass(frozen=True)
class CharLiteral(Expression):
    """
    Character constant such as 'A'.

    Attributes:
        value: The character code (0 to 255)
    """
    value: int = 0


@dataclass(frozen=True)
class StringLiteral(Expression):
    """
    String constant with escape sequences already resolved.

    Strings are only meaningful as the argument of print.
    """
    value: str = ""


@dataclass(frozen=True)
class Identifier(Expression):
    """Variable reference."""
    name: str = ""


@dataclass(frozen=True)
class UnaryExpression(Expression):
    """
    Unary operation expression (op x).

    Attributes:
        operator: The unary operator
        operand: The operand expression
    """
    operator: UnaryOperator = UnaryOperator.NEGATE
    operand: Optional[Expression] = None


@dataclass(frozen=True)
class BinaryExpression(Expression):
    """
    Binary operation expression (a op b).

    Attributes:
        operator: The binary operator
        left: Left operand expression
        right: Right operand expression
    """
    operator: BinaryOperator = BinaryOperator.ADD
    left: Optional[Expression] = None
    right: Optional[Expression] = None


@dataclass(frozen=True)
class ConditionalExpression(Expression):
    """
    Ternary conditional expression (cond ? a : b).

    Only the selected branch is ever evaluated.
    """
    condition: Optional[Expression] = None
    then_expr: Optional[Expression] = None
    else_expr: Optional[Expression] = None


@dataclass(frozen=True)
class CallExpression(Expression):
    """
    Function call expression.

    Attributes:
        function_name: Name of the called function
        arguments: Argument expressions, evaluated left to right
    """
    function_name: str = ""
    arguments: tuple[Expression, ...] = ()


@dataclass(frozen=True)
class CastExpression(Expression):
    """Type cast expression ((type) expr)."""
    target_type: Optional[CType] = None
    operand: Optional[Expression] = None


@dataclass(frozen=True)
class SizeofExpression(Expression):
    """sizeof(type) - a constant taken from the size table."""
    target_type: Optional[CType] = None


@dataclass(frozen=True)
class AddressOf(Expression):
    """Address of a named variable (&name)."""
    name: str = ""


@dataclass(frozen=True)
class Dereference(Expression):
    """Pointer dereference (*pointer); also an assignment target."""
    pointer: Optional[Expression] = None


# =============================================================================
# Statement Nodes
# =============================================================================

@dataclass(frozen=True)
class VarDecl(Statement):
    """
    Local variable declaration.

    Represents declarations like:
        int x;
        float *p;

    There is no initializer: a declared variable starts at zero.
    "int a, *p;" produces one VarDecl per declarator.
    """
    var_type: Optional[CType] = None
    name: str = ""


@dataclass(frozen=True)
class Assign(Statement):
    """
    Assignment statement.

    Attributes:
        target: An Identifier or a Dereference
        value: The assigned expression
    """
    target: Optional[Expression] = None
    value: Optional[Expression] = None


@dataclass(frozen=True)
class ExpressionStatement(Statement):
    """
    Expression used as a statement (followed by semicolon).

    Common for calls:
        print("hello");

    An empty statement ';' has no expression.
    """
    expression: Optional[Expression] = None


@dataclass(frozen=True)
class IfStatement(Statement):
    """
    If statement with optional else clause.

    Attributes:
        condition: The condition expression
        then_branch: Statement executed if condition is true
        else_branch: Optional statement executed if condition is false
    """
    condition: Optional[Expression] = None
    then_branch: Optional[Statement] = None
    else_branch: Optional[Statement] = None


@dataclass(frozen=True)
class WhileStatement(Statement):
    """
    While loop statement.

    Attributes:
        condition: Loop condition
        body: Loop body statement
    """
    condition: Optional[Expression] = None
    body: Optional[Statement] = None


@dataclass(frozen=True)
class ReturnStatement(Statement):
    """Return statement; value is None for a bare 'return;'."""
    value: Optional[Expression] = None


@dataclass(frozen=True)
class Block(Statement):
    """Compound statement enclosed in braces; opens a new scope."""
    statements: tuple[Statement, ...] = ()


# =============================================================================
# Declaration Nodes
# =============================================================================

@dataclass(frozen=True)
class Parameter(ASTNode):
    """
    Function parameter declaration.

    Attributes:
        name: Parameter name
        param_type: The type of the parameter
    """
    name: str = ""
    param_type: Optional[CType] = None


@dataclass(frozen=True)
class FunctionNode(ASTNode):
    """
    Function definition.

    Attributes:
        name: Function name
        return_type: The return type (may be void)
        parameters: Parameter declarations, in call order
        body: The function body
    """
    name: str = ""
    return_type: Optional[CType] = None
    parameters: tuple[Parameter, ...] = ()
    body: Optional[Block] = None


@dataclass(frozen=True)
class ProgramNode(ASTNode):
    """
    Root node of the AST representing a complete program.

    Attributes:
        functions: All function definitions in source order
    """
    functions: tuple[FunctionNode, ...] = ()


# =============================================================================
# AST Visitor Pattern
# =============================================================================

class ASTVisitor:
    """
    Base class for AST visitors.

    Provides a visitor pattern for traversing the AST. Subclasses
    define visit_* methods for specific node types they care about;
    anything else goes to generic_visit.

    Usage:
        class MyVisitor(ASTVisitor):
            def visit_FunctionNode(self, node):
                ...

        visitor = MyVisitor()
        visitor.visit(program)
    """

    def visit(self, node: ASTNode) -> Any:
        """
        Visit a node by dispatching to the appropriate method.

        Args:
            node: The AST node to visit

        Returns:
            The result of the visit method (varies by node type)
        """
        method_name = f"visit_{node.__class__.__name__}"
        visitor = getattr(self, method_name, self.generic_visit)
        return visitor(node)

    def generic_visit(self, node: ASTNode) -> None:
        """Default visit method: visits all children of the node."""
        for node_field in fields(node):
            value = getattr(node, node_field.name)
            if isinstance(value, ASTNode):
                self.visit(value)
            elif isinstance(value, tuple):
                for item in value:
                    if isinstance(item, ASTNode):
                        self.visit(item)


# =============================================================================
# AST Pretty Printer
# =============================================================================

class ASTPrinter(ASTVisitor):
    """
    Pretty printer for AST debugging.

    Produces an indented outline of statements; expressions are shown
    inline in fully parenthesized source form.

    Usage:
        printer = ASTPrinter()
        print(printer.print(ast))
    """

    def __init__(self):
        self.output: list[str] = []
        self.indent_level = 0

    def print(self, node: ASTNode) -> str:
        """Print the AST and return as string."""
        self.output = []
        self.indent_level = 0
        self.visit(node)
        return "\n".join(self.output)

    def _emit(self, text: str) -> None:
        """Emit a line with current indentation."""
        indent = "  " * self.indent_level
        self.output.append(f"{indent}{text}")

    def _indent(self) -> None:
        self.indent_level += 1

    def _dedent(self) -> None:
        self.indent_level = max(0, self.indent_level - 1)

    def visit_ProgramNode(self, node: ProgramNode):
        self._emit("Program")
        self._indent()
        for function in node.functions:
            self.visit(function)
        self._dedent()

    def visit_FunctionNode(self, node: FunctionNode):
        params = ", ".join(f"{p.param_type} {p.name}" for p in node.parameters)
        self._emit(f"Function: {node.return_type} {node.name}({params})")
        self._indent()
        self.visit(node.body)
        self._dedent()

    def visit_VarDecl(self, node: VarDecl):
        self._emit(f"Variable: {node.var_type} {node.name}")

    def visit_Assign(self, node: Assign):
        self._emit(f"Assign: {self._expr_str(node.target)} = {self._expr_str(node.value)}")

    def visit_Block(self, node: Block):
        self._emit("Block")
        self._indent()
        for stmt in node.statements:
            self.visit(stmt)
        self._dedent()

    def visit_IfStatement(self, node: IfStatement):
        self._emit(f"If ({self._expr_str(node.condition)})")
        self._indent()
        self._emit("Then:")
        self._indent()
        self.visit(node.then_branch)
        self._dedent()
        if node.else_branch:
            self._emit("Else:")
            self._indent()
            self.visit(node.else_branch)
            self._dedent()
        self._dedent()

    def visit_WhileStatement(self, node: WhileStatement):
        self._emit(f"While ({self._expr_str(node.condition)})")
        self._indent()
        self.visit(node.body)
        self._dedent()

    def visit_ReturnStatement(self, node: ReturnStatement):
        if node.value:
            self._emit(f"Return {self._expr_str(node.value)}")
        else:
            self._emit("Return")

    def visit_ExpressionStatement(self, node: ExpressionStatement):
        if node.expression is None:
            self._emit("Empty")
        else:
            self._emit(f"Expr: {self._expr_str(node.expression)}")

    def _expr_str(self, expr: Optional[Expression]) -> str:
        """Convert expression to its source form."""
        if expr is None:
            return ""
        # Imported here: source_writer depends on this module
        from c4py.minic.source_writer import SourceWriter
        return SourceWriter().write_expression(expr)

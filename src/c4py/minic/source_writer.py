"""
Mini-C Source Writer
====================

Re-serializes an AST to Mini-C source text that the lexer and parser
accept. Parsing the written text yields a tree equal to the original:

    program == parse_source(SourceWriter().write(program))

Output Conventions
------------------
- Every unary, binary, conditional, cast, address-of and dereference
  expression is wrapped in parentheses, so precedence never matters
- Float literals are written positionally, never in exponent form
  (1e16 is written 10000000000000000.0)
- Char and string literals are re-escaped; non-printable characters
  below 256 become \\xNN
- Four-space indentation, braces on the header line

The writer is also used for the "in: ..." context lines of runtime
errors and by the AST printer.

Note: the writer reproduces trees the parser can build. A hand-built
tree whose else belongs to an outer if with an open inner if cannot be
written without braces and is written as the parser would re-read it.
"""

from decimal import Decimal
from typing import Optional

from c4py.minic.types import CType
from c4py.minic.ast import (
    ASTNode,
    ASTVisitor,
    ProgramNode,
    FunctionNode,
    Statement,
    Block,
    VarDecl,
    Assign,
    ExpressionStatement,
    IfStatement,
    WhileStatement,
    ReturnStatement,
    Expression,
    IntLiteral,
    FloatLiteral,
    CharLiteral,
    StringLiteral,
    Identifier,
    UnaryExpression,
    BinaryExpression,
    ConditionalExpression,
    CallExpression,
    CastExpression,
    SizeofExpression,
    AddressOf,
    Dereference,
)


# Escapes written for literal contents (inverse of the lexer table)
WRITE_ESCAPES = {
    "\n": "\\n",
    "\r": "\\r",
    "\t": "\\t",
    "\\": "\\\\",
}


def escape_text(text: str, quote: str) -> str:
    """Escape literal contents for the given quote character."""
    parts = []
    for char in text:
        if char in WRITE_ESCAPES:
            parts.append(WRITE_ESCAPES[char])
        elif char == quote:
            parts.append("\\" + quote)
        elif not char.isprintable() and ord(char) < 0x100:
            parts.append(f"\\x{ord(char):02x}")
        else:
            parts.append(char)
    return "".join(parts)


def format_float_literal(value: float) -> str:
    """Positional float text with at least one digit after the point."""
    text = format(Decimal(repr(value)), "f")
    if "." not in text:
        text += ".0"
    return text


def declarator(ctype: CType, name: str) -> str:
    """Render 'int *p' style declarators."""
    return f"{ctype.base_type} {'*' * ctype.pointer_depth}{name}"


class SourceWriter(ASTVisitor):
    """
    Writes an AST back out as Mini-C source.

    Usage:
        writer = SourceWriter()
        text = writer.write(program)
        expr_text = writer.write_expression(expr)
    """

    INDENT = "    "

    def __init__(self):
        self._lines: list[str] = []
        self._depth = 0

    # =========================================================================
    # Public Interface
    # =========================================================================

    def write(self, program: ProgramNode) -> str:
        """Write a whole program."""
        self._lines = []
        self._depth = 0
        for index, function in enumerate(program.functions):
            if index:
                self._lines.append("")
            self.visit(function)
        return "\n".join(self._lines) + "\n"

    def write_statement(self, statement: Statement) -> str:
        """Write a single statement (possibly spanning several lines)."""
        self._lines = []
        self._depth = 0
        self.visit(statement)
        return "\n".join(self._lines)

    def write_expression(self, expr: Expression) -> str:
        """Write an expression on one line."""
        return self.visit(expr)

    def describe(self, node: ASTNode) -> Optional[str]:
        """
        One-line summary of a node for error context.

        Compound statements are reduced to their header.
        """
        if isinstance(node, Expression):
            return self.write_expression(node)
        if isinstance(node, IfStatement):
            return f"if ({self.write_expression(node.condition)})"
        if isinstance(node, WhileStatement):
            return f"while ({self.write_expression(node.condition)})"
        if isinstance(node, FunctionNode):
            return self._signature(node)
        if isinstance(node, Block):
            return None
        if isinstance(node, Statement):
            return self.write_statement(node)
        return None

    # =========================================================================
    # Line Output
    # =========================================================================

    def _emit(self, text: str) -> None:
        self._lines.append(f"{self.INDENT * self._depth}{text}")

    def _emit_block_contents(self, block: Block) -> None:
        self._depth += 1
        for statement in block.statements:
            self.visit(statement)
        self._depth -= 1

    def _emit_branch(self, header: str, body: Statement) -> None:
        """Emit 'header {' ... '}' for blocks, or an indented statement."""
        if isinstance(body, Block):
            self._emit(header + " {")
            self._emit_block_contents(body)
            self._emit("}")
        else:
            self._emit(header)
            self._depth += 1
            self.visit(body)
            self._depth -= 1

    def _signature(self, node: FunctionNode) -> str:
        params = ", ".join(declarator(p.param_type, p.name) for p in node.parameters)
        return f"{declarator(node.return_type, node.name)}({params})"

    # =========================================================================
    # Functions and Statements
    # =========================================================================

    def visit_FunctionNode(self, node: FunctionNode):
        self._emit_branch(self._signature(node), node.body)

    def visit_Block(self, node: Block):
        self._emit("{")
        self._emit_block_contents(node)
        self._emit("}")

    def visit_VarDecl(self, node: VarDecl):
        self._emit(declarator(node.var_type, node.name) + ";")

    def visit_Assign(self, node: Assign):
        self._emit(f"{self.visit(node.target)} = {self.visit(node.value)};")

    def visit_ExpressionStatement(self, node: ExpressionStatement):
        if node.expression is None:
            self._emit(";")
        else:
            self._emit(f"{self.visit(node.expression)};")

    def visit_IfStatement(self, node: IfStatement):
        self._emit_branch(f"if ({self.visit(node.condition)})", node.then_branch)
        if node.else_branch is not None:
            self._emit_branch("else", node.else_branch)

    def visit_WhileStatement(self, node: WhileStatement):
        self._emit_branch(f"while ({self.visit(node.condition)})", node.body)

    def visit_ReturnStatement(self, node: ReturnStatement):
        if node.value is None:
            self._emit("return;")
        else:
            self._emit(f"return {self.visit(node.value)};")

    # =========================================================================
    # Expressions
    # =========================================================================

    def visit_IntLiteral(self, node: IntLiteral) -> str:
        return str(node.value)

    def visit_FloatLiteral(self, node: FloatLiteral) -> str:
        return format_float_literal(node.value)

    def visit_CharLiteral(self, node: CharLiteral) -> str:
        return f"'{escape_text(chr(node.value), quote=chr(39))}'"

    def visit_StringLiteral(self, node: StringLiteral) -> str:
        return f'"{escape_text(node.value, quote=chr(34))}"'

    def visit_Identifier(self, node: Identifier) -> str:
        return node.name

    def visit_UnaryExpression(self, node: UnaryExpression) -> str:
        return f"({node.operator}{self.visit(node.operand)})"

    def visit_BinaryExpression(self, node: BinaryExpression) -> str:
        return f"({self.visit(node.left)} {node.operator} {self.visit(node.right)})"

    def visit_ConditionalExpression(self, node: ConditionalExpression) -> str:
        return (
            f"({self.visit(node.condition)} ? {self.visit(node.then_expr)}"
            f" : {self.visit(node.else_expr)})"
        )

    def visit_CallExpression(self, node: CallExpression) -> str:
        args = ", ".join(self.visit(arg) for arg in node.arguments)
        return f"{node.function_name}({args})"

    def visit_CastExpression(self, node: CastExpression) -> str:
        return f"(({node.target_type}) {self.visit(node.operand)})"

    def visit_SizeofExpression(self, node: SizeofExpression) -> str:
        return f"sizeof({node.target_type})"

    def visit_AddressOf(self, node: AddressOf) -> str:
        return f"(&{node.name})"

    def visit_Dereference(self, node: Dereference) -> str:
        return f"(*{self.visit(node.pointer)})"


def write_source(program: ProgramNode) -> str:
    """Convenience wrapper around SourceWriter().write()."""
    return SourceWriter().write(program)

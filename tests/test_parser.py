"""
Mini-C Parser Test Suite
========================

Tests for the recursive descent parser and function table linking.

Test Organization
-----------------
- TestFunctions: function definitions and parameters
- TestStatements: declarations and statement forms
- TestExpressions: precedence, associativity and unary forms
- TestParseErrors: error reporting and recovery
- TestLinking: function table construction
- TestASTPrinter: debugging output
"""

import sys

import pytest

from c4py.errors import SourceLocation
from c4py.minic.parser import parse_source, link_functions
from c4py.minic.types import (
    TYPE_INT,
    TYPE_CHAR,
    TYPE_FLOAT,
    TYPE_VOID,
    TYPE_INT_PTR,
    make_type,
    BaseType,
)
from c4py.minic.ast import (
    ASTPrinter,
    BinaryOperator,
    UnaryOperator,
    Block,
    VarDecl,
    Assign,
    ExpressionStatement,
    IfStatement,
    WhileStatement,
    ReturnStatement,
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
from c4py.minic.errors import (
    ParseError,
    ParseErrorGroup,
    ParseErrorCollector,
    MissingTokenError,
    UnexpectedTokenError,
    InvalidLValueError,
    RedeclarationError,
    LexError,
)


LOC = SourceLocation("test.c", 1, 1)


def parse_main_body(body: str) -> tuple:
    """Parse statements inside 'int main() { ... }' and return them."""
    program = parse_source("int main() {\n" + body + "\n}", "test.c")
    return program.functions[0].body.statements


def parse_expr(text: str):
    """Parse a single expression statement and return the expression."""
    statement = parse_main_body(text + ";")[0]
    assert isinstance(statement, ExpressionStatement)
    return statement.expression


def num(value: int) -> IntLiteral:
    return IntLiteral(location=LOC, value=value)


def ident(name: str) -> Identifier:
    return Identifier(location=LOC, name=name)


def binary(op: BinaryOperator, left, right) -> BinaryExpression:
    return BinaryExpression(location=LOC, operator=op, left=left, right=right)


# =============================================================================
# Functions
# =============================================================================

class TestFunctions:
    """Tests for function definitions."""

    def test_minimal_main(self):
        """Parse the smallest complete program."""
        program = parse_source("int main() { return 42; }", "test.c")
        assert len(program.functions) == 1
        main = program.functions[0]
        assert main.name == "main"
        assert main.return_type == TYPE_INT
        assert main.parameters == ()
        assert main.body.statements == (ReturnStatement(location=LOC, value=num(42)),)

    def test_empty_program(self):
        program = parse_source("", "test.c")
        assert program.functions == ()

    def test_parameters(self):
        program = parse_source("float f(int a, char *s, float **m) { return 0.0; }")
        params = program.functions[0].parameters
        assert [p.name for p in params] == ["a", "s", "m"]
        assert [p.param_type for p in params] == [
            TYPE_INT,
            make_type(BaseType.CHAR, 1),
            make_type(BaseType.FLOAT, 2),
        ]

    def test_void_parameter_list(self):
        """'(void)' declares no parameters."""
        program = parse_source("void f(void) { }")
        function = program.functions[0]
        assert function.parameters == ()
        assert function.return_type == TYPE_VOID

    def test_pointer_return_type(self):
        program = parse_source("int *f(int *p) { return p; }")
        assert program.functions[0].return_type == TYPE_INT_PTR

    def test_function_location(self):
        program = parse_source("\n\nint main() { return 0; }", "prog.c")
        assert str(program.functions[0].location) == "prog.c:3:1"

    def test_layout_does_not_affect_equality(self):
        """Trees compare structurally; locations are ignored."""
        a = parse_source("int main(){return 1+2;}")
        b = parse_source("int main()\n{\n    return 1 + 2;\n}\n")
        assert a == b

    def test_global_variable_rejected(self):
        with pytest.raises(ParseError, match="global variable 'g' is not supported"):
            parse_source("int g; int main() { return 0; }")

    def test_void_parameter_rejected(self):
        with pytest.raises(ParseError, match="has type void"):
            parse_source("int f(void x) { return 0; }")


# =============================================================================
# Statements
# =============================================================================

class TestStatements:
    """Tests for statements and declarations."""

    def test_declaration(self):
        statements = parse_main_body("int x;")
        assert statements == (VarDecl(location=LOC, var_type=TYPE_INT, name="x"),)

    def test_multiple_declarators(self):
        """'char *p, c;' declares a pointer and a plain char."""
        statements = parse_main_body("char *p, c;")
        assert statements == (
            VarDecl(location=LOC, var_type=make_type(BaseType.CHAR, 1), name="p"),
            VarDecl(location=LOC, var_type=TYPE_CHAR, name="c"),
        )

    def test_declarations_anywhere_in_block(self):
        """Declarations may follow other statements."""
        statements = parse_main_body("print(1);\nfloat f;\nf = 1.5;")
        assert isinstance(statements[0], ExpressionStatement)
        assert statements[1] == VarDecl(location=LOC, var_type=TYPE_FLOAT, name="f")
        assert statements[2] == Assign(
            location=LOC,
            target=ident("f"),
            value=FloatLiteral(location=LOC, value=1.5),
        )

    def test_void_pointer_variable(self):
        statements = parse_main_body("void *v;")
        assert statements[0].var_type == make_type(BaseType.VOID, 1)

    def test_void_variable_rejected(self):
        with pytest.raises(ParseError, match="declared void"):
            parse_main_body("void v;")

    def test_initializer_rejected(self):
        with pytest.raises(ParseError, match="cannot have an initializer"):
            parse_main_body("int x = 1;")

    def test_assignment_through_pointer(self):
        statements = parse_main_body("*p = 5;")
        assert statements == (
            Assign(
                location=LOC,
                target=Dereference(location=LOC, pointer=ident("p")),
                value=num(5),
            ),
        )

    def test_if_else(self):
        statements = parse_main_body("if (x) y = 1; else y = 2;")
        stmt = statements[0]
        assert isinstance(stmt, IfStatement)
        assert stmt.condition == ident("x")
        assert isinstance(stmt.then_branch, Assign)
        assert isinstance(stmt.else_branch, Assign)

    def test_dangling_else_binds_inner(self):
        """'else' belongs to the nearest 'if'."""
        stmt = parse_main_body("if (a) if (b) x = 1; else x = 2;")[0]
        assert stmt.else_branch is None
        assert isinstance(stmt.then_branch, IfStatement)
        assert stmt.then_branch.else_branch is not None

    def test_while(self):
        stmt = parse_main_body("while (i < 3) { i = i + 1; }")[0]
        assert isinstance(stmt, WhileStatement)
        assert stmt.condition == binary(BinaryOperator.LESS, ident("i"), num(3))
        assert isinstance(stmt.body, Block)

    def test_return_without_value(self):
        stmt = parse_main_body("return;")[0]
        assert stmt == ReturnStatement(location=LOC, value=None)

    def test_empty_statement(self):
        stmt = parse_main_body(";")[0]
        assert stmt == ExpressionStatement(location=LOC, expression=None)

    def test_nested_block(self):
        stmt = parse_main_body("{ int y; }")[0]
        assert stmt == Block(
            location=LOC,
            statements=(VarDecl(location=LOC, var_type=TYPE_INT, name="y"),),
        )

    def test_declaration_as_branch_rejected(self):
        """A declaration must sit directly in a block."""
        with pytest.raises(ParseError, match="declaration is not allowed here"):
            parse_main_body("if (1) int y;")

    def test_invalid_lvalue(self):
        with pytest.raises(InvalidLValueError):
            parse_main_body("1 = 2;")

    def test_chained_assignment_rejected(self):
        with pytest.raises(UnexpectedTokenError):
            parse_main_body("a = b = 1;")


# =============================================================================
# Expressions
# =============================================================================

class TestExpressions:
    """Tests for expression parsing."""

    def test_precedence(self):
        """Multiplication binds tighter than addition."""
        expr = parse_expr("1 + 2 * 3")
        assert expr == binary(
            BinaryOperator.ADD,
            num(1),
            binary(BinaryOperator.MULTIPLY, num(2), num(3)),
        )

    def test_left_associativity(self):
        expr = parse_expr("10 - 3 - 2")
        assert expr == binary(
            BinaryOperator.SUBTRACT,
            binary(BinaryOperator.SUBTRACT, num(10), num(3)),
            num(2),
        )

    def test_parentheses(self):
        expr = parse_expr("(1 + 2) * 3")
        assert expr.operator == BinaryOperator.MULTIPLY
        assert expr.left.operator == BinaryOperator.ADD

    def test_full_precedence_ladder(self):
        """a || b && c | d ^ e & f == g < h << i + j * k"""
        expr = parse_expr("a || b && c | d ^ e & f == g < h << i + j * k")
        ops = []
        node = expr
        while isinstance(node, BinaryExpression):
            ops.append(node.operator)
            node = node.right
        assert ops == [
            BinaryOperator.LOGICAL_OR,
            BinaryOperator.LOGICAL_AND,
            BinaryOperator.BITWISE_OR,
            BinaryOperator.BITWISE_XOR,
            BinaryOperator.BITWISE_AND,
            BinaryOperator.EQUAL,
            BinaryOperator.LESS,
            BinaryOperator.LEFT_SHIFT,
            BinaryOperator.ADD,
            BinaryOperator.MULTIPLY,
        ]

    def test_ternary_right_associative(self):
        expr = parse_expr("a ? b : c ? d : e")
        assert isinstance(expr, ConditionalExpression)
        assert expr.then_expr == ident("b")
        assert isinstance(expr.else_expr, ConditionalExpression)

    def test_unary_operators(self):
        assert parse_expr("-x") == UnaryExpression(
            location=LOC, operator=UnaryOperator.NEGATE, operand=ident("x")
        )
        assert parse_expr("!x") == UnaryExpression(
            location=LOC, operator=UnaryOperator.LOGICAL_NOT, operand=ident("x")
        )

    def test_address_and_dereference(self):
        assert parse_expr("&x") == AddressOf(location=LOC, name="x")
        assert parse_expr("**pp") == Dereference(
            location=LOC,
            pointer=Dereference(location=LOC, pointer=ident("pp")),
        )

    def test_address_of_expression_rejected(self):
        with pytest.raises(InvalidLValueError, match="cannot take the address"):
            parse_expr("&(a + 1)")

    def test_cast(self):
        expr = parse_expr("(float) 1")
        assert expr == CastExpression(location=LOC, target_type=TYPE_FLOAT, operand=num(1))

    def test_cast_binds_tighter_than_binary(self):
        expr = parse_expr("(int) 3.9 + 1")
        assert expr.operator == BinaryOperator.ADD
        assert isinstance(expr.left, CastExpression)

    def test_sizeof(self):
        assert parse_expr("sizeof(int *)") == SizeofExpression(
            location=LOC, target_type=TYPE_INT_PTR
        )

    def test_call(self):
        expr = parse_expr('f(1, "s", \'c\')')
        assert expr == CallExpression(
            location=LOC,
            function_name="f",
            arguments=(
                num(1),
                StringLiteral(location=LOC, value="s"),
                CharLiteral(location=LOC, value=99),
            ),
        )

    def test_call_without_arguments(self):
        assert parse_expr("f()") == CallExpression(location=LOC, function_name="f")

    def test_call_non_function_rejected(self):
        with pytest.raises(ParseError, match="cannot call non-function"):
            parse_expr("1(2)")


# =============================================================================
# Error Reporting and Recovery
# =============================================================================

class TestParseErrors:
    """Tests for parse errors."""

    def test_missing_semicolon(self):
        with pytest.raises(MissingTokenError) as exc_info:
            parse_source("int main() {\n    return 1\n}", "test.c")
        error = exc_info.value
        assert error.message == "expected ';' before '}'"
        assert str(error.location) == "test.c:3:1"
        assert "    }" in str(error)

    def test_unexpected_token(self):
        with pytest.raises(UnexpectedTokenError) as exc_info:
            parse_source("int main() { return ); }")
        assert exc_info.value.found == ")"
        assert "expected expression" in str(exc_info.value)

    def test_unexpected_end_of_file(self):
        with pytest.raises(MissingTokenError, match="end of file"):
            parse_source("int main() { return 0;")

    def test_lex_error_surfaces(self):
        with pytest.raises(LexError):
            parse_source("int main() { return $; }")

    def test_recovery_reports_every_broken_function(self):
        """Errors in separate functions are reported together."""
        source = (
            "int f() { return 1 }\n"
            "int g() { return 2; }\n"
            "int h() { x = ; }\n"
        )
        with pytest.raises(ParseErrorGroup) as exc_info:
            parse_source(source, "test.c")
        group = exc_info.value
        assert len(group.errors) == 2
        assert [e.location.line for e in group.errors] == [1, 3]
        assert str(group).endswith("2 errors")

    def test_error_limit(self):
        """Parsing stops once the collector is full."""
        source = "int f() { return 1 }\n" * 60
        with pytest.raises(ParseErrorGroup) as exc_info:
            parse_source(source, "test.c")
        assert len(exc_info.value.errors) == 50

    def test_collector(self):
        collector = ParseErrorCollector(max_errors=2)
        collector.raise_if_errors()
        first = ParseError("first", location=LOC)
        collector.add(first)
        assert not collector.should_stop()
        with pytest.raises(ParseError) as exc_info:
            collector.raise_if_errors()
        assert exc_info.value is first
        collector.add(ParseError("second", location=LOC))
        assert collector.should_stop()
        with pytest.raises(ParseErrorGroup):
            collector.raise_if_errors()


class TestDeepNesting:
    """Tests for deeply nested expressions."""

    def test_two_hundred_parentheses(self):
        depth = 200
        assert parse_expr("(" * depth + "1" + ")" * depth) == num(1)

    def test_long_conditional_chain(self):
        depth = 200
        expr = parse_expr("1 ? " * depth + "7" + " : 0" * depth)
        for _ in range(depth):
            assert isinstance(expr, ConditionalExpression)
            expr = expr.then_expr
        assert expr == num(7)

    def test_too_deep_is_a_parse_error(self):
        """Exhausting the host stack is reported at the offending token."""
        depth = 100000
        source = "int main() {\n    return " + "(" * depth + "1" + ")" * depth + ";\n}\n"
        before = sys.getrecursionlimit()
        with pytest.raises(ParseError) as exc_info:
            parse_source(source, "deep.c")
        error = exc_info.value
        assert error.message == "expression nested too deeply"
        assert error.location.filename == "deep.c"
        assert error.location.line == 2
        assert error.hint is not None
        assert sys.getrecursionlimit() == before

    def test_later_functions_still_checked(self):
        """Parsing recovers after a too-deep expression."""
        depth = 100000
        source = (
            "int f() { return " + "(" * depth + "1" + ")" * depth + "; }\n"
            "int g() { return 1 }\n"
        )
        with pytest.raises(ParseErrorGroup) as exc_info:
            parse_source(source, "deep.c")
        messages = [e.message for e in exc_info.value.errors]
        assert messages == ["expression nested too deeply", "expected ';' before '}'"]


# =============================================================================
# Linking
# =============================================================================

class TestLinking:
    """Tests for function table construction."""

    def test_function_table(self):
        program = parse_source("int f() { return 1; } int main() { return f(); }")
        table = link_functions(program)
        assert set(table) == {"f", "main"}
        assert table["f"] is program.functions[0]

    def test_duplicate_function(self):
        source = "int f() { return 1; }\nint f() { return 2; }"
        program = parse_source(source, "test.c")
        with pytest.raises(RedeclarationError) as exc_info:
            link_functions(program, source.splitlines())
        error = exc_info.value
        assert error.identifier == "f"
        assert error.location.line == 2
        assert error.original_location.line == 1
        assert "first declared at test.c:1:1" in str(error)

    def test_builtin_cannot_be_redefined(self):
        program = parse_source("void print(int x) { }")
        with pytest.raises(RedeclarationError, match="redeclaration of 'print'") as exc_info:
            link_functions(program)
        assert exc_info.value.hint == "'print' is a builtin function"


# =============================================================================
# AST Printer
# =============================================================================

class TestASTPrinter:
    """Tests for the debugging printer."""

    def test_outline(self):
        program = parse_source(
            "int main() {\n"
            "    int x;\n"
            "    x = 1 + 2;\n"
            "    if (x > 2) print(x); else ;\n"
            "    return x;\n"
            "}\n"
        )
        lines = ASTPrinter().print(program).splitlines()
        assert lines[0] == "Program"
        assert lines[1] == "  Function: int main()"
        assert "      Variable: int x" in lines
        assert "      Assign: x = (1 + 2)" in lines
        assert "      If ((x > 2))" in lines
        assert "          Expr: print(x)" in lines
        assert "          Empty" in lines
        assert lines[-1] == "      Return x"

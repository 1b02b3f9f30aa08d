"""
Mini-C Tree-Walking Evaluator
=============================

This module runs a parsed Mini-C program by walking its AST directly.
There is no intermediate code: each node kind has a visit_* method that
either produces a Value (expressions) or performs an effect
(statements).

Execution Model
---------------
- Expressions return a Value, or None for a call to a void function
  (or to print). evaluate() rejects None wherever a value is needed.
- Statements return None to continue, or a Returned signal that Block,
  If and While pass straight up until the call frame absorbs it. The
  signal is an ordinary return value, never an exception.
- Each call gets a fresh frame; parameters and the body's top-level
  declarations share the frame's outermost scope. Nested blocks open
  nested scopes, whose slots are freed on exit.

Error Context
-------------
Value operations raise without a location. Every visit is wrapped so
the first node an error passes through stamps its own location and
source text onto it:

    fact.c:3:16: error: integer division by zero
    in: (n / 0)

Recursion
---------
Mini-C recursion is Python recursion. The call depth is capped at
max_call_depth, and run_main() raises Python's recursion limit for the
duration of the run so that the cap, not the host stack, is what
normally stops a runaway program. Either way the program sees a
ResourceExhaustedError.
"""

from dataclasses import dataclass
from typing import Callable, Optional, Sequence
import difflib
import logging
import sys

from c4py.minic.types import TYPE_INT
from c4py.minic.limits import PYTHON_FRAMES_PER_CALL, headroom, recursion_limit
from c4py.minic.ast import (
    ASTNode,
    ASTVisitor,
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
    BinaryOperator,
    UnaryOperator,
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
from c4py.minic.parser import BUILTIN_FUNCTIONS, FunctionTable
from c4py.minic.environment import Environment, SlotHandle
from c4py.minic.source_writer import SourceWriter
from c4py.minic.values import (
    Value,
    ValueKind,
    ARITHMETIC_OPERATORS,
    BITWISE_OPERATORS,
    COMPARISON_OPERATORS,
    arithmetic,
    bitwise,
    compare,
    convert,
    format_value,
    is_truthy,
    logical_not,
    negate,
)
from c4py.minic.errors import (
    EvalError,
    TypeMismatchError,
    ArgumentCountError,
    UndefinedSymbolError,
    MissingReturnError,
    DanglingPointerError,
    ResourceExhaustedError,
)


logger = logging.getLogger(__name__)

# Default cap on nested calls
DEFAULT_MAX_CALL_DEPTH = 1000

PrintSink = Callable[[str], None]


@dataclass(frozen=True)
class Returned:
    """
    Signal produced by a return statement.

    Attributes:
        value: The returned value, or None for 'return;'
        statement: The return statement (for error context)
    """
    value: Optional[Value]
    statement: ReturnStatement


class Evaluator(ASTVisitor):
    """
    Runs a linked Mini-C program.

    Usage:
        functions = link_functions(parse_source(source))
        evaluator = Evaluator(functions, print_sink=sys.stdout.write)
        exit_code = evaluator.run_main()
    """

    def __init__(
        self,
        functions: FunctionTable,
        print_sink: Optional[PrintSink] = None,
        max_call_depth: int = DEFAULT_MAX_CALL_DEPTH,
        trailing_newline: bool = True,
    ):
        self.functions = functions
        self.print_sink = print_sink or sys.stdout.write
        self.max_call_depth = max_call_depth
        self.trailing_newline = trailing_newline
        self.env = Environment()
        self._writer = SourceWriter()

    # =========================================================================
    # Public Interface
    # =========================================================================

    def run_main(self) -> int:
        """
        Call main() and return its result as an int.

        A void main yields 0.

        Raises:
            UndefinedSymbolError: If the program has no main function
            EvalError: For any runtime error in the program
        """
        if "main" not in self.functions:
            raise UndefinedSymbolError(
                "main",
                kind="function",
                similar_identifiers=difflib.get_close_matches("main", list(self.functions)),
            )

        try:
            with recursion_limit(headroom(self.max_call_depth * PYTHON_FRAMES_PER_CALL)):
                result = self.call("main", [])
            if result is None:
                return 0
            return convert(result, TYPE_INT, explicit=True).payload
        except EvalError as e:
            raise e.locate(self.functions["main"].location, "main()")

    def call(self, name: str, args: Sequence[Value]) -> Optional[Value]:
        """
        Call a program function with already evaluated arguments.

        Returns:
            The converted return value, or None for a void function

        Raises:
            ResourceExhaustedError: If the host stack runs out
        """
        try:
            return self._call(name, args)
        except RecursionError:
            raise ResourceExhaustedError(
                f"stack exhausted while calling '{name}'",
                hint="check for unbounded recursion",
            ) from None

    # =========================================================================
    # Calls
    # =========================================================================

    def _lookup_function(self, name: str) -> FunctionNode:
        function = self.functions.get(name)
        if function is None:
            known = list(self.functions) + sorted(BUILTIN_FUNCTIONS)
            raise UndefinedSymbolError(
                name,
                kind="function",
                similar_identifiers=difflib.get_close_matches(name, known),
            )
        return function

    def _call(self, name: str, args: Sequence[Value]) -> Optional[Value]:
        function = self._lookup_function(name)

        if len(args) != len(function.parameters):
            raise ArgumentCountError(name, len(function.parameters), len(args))

        if self.env.call_depth >= self.max_call_depth:
            raise ResourceExhaustedError(
                f"call depth limit of {self.max_call_depth} exceeded calling '{name}'",
                hint="check for unbounded recursion",
            )

        logger.debug(f"Call {name}({', '.join(str(a) for a in args)}) depth {self.env.call_depth + 1}")

        with self.env.frame(name):
            for param, arg in zip(function.parameters, args):
                self.env.declare(
                    param.name,
                    param.param_type,
                    location=param.location,
                    value=convert(arg, param.param_type),
                )
            signal = self._execute_all(function.body.statements)

        return self._complete_call(function, signal)

    def _complete_call(self, function: FunctionNode, signal: Optional[Returned]) -> Optional[Value]:
        """Check the return against the declared type."""
        if function.return_type.is_void:
            if signal is not None and signal.value is not None:
                raise TypeMismatchError(
                    f"void function '{function.name}' cannot return a value",
                    location=signal.statement.location,
                    expression=self._writer.describe(signal.statement),
                )
            return None

        if signal is None:
            raise MissingReturnError(function.name, location=function.location)
        if signal.value is None:
            raise MissingReturnError(
                function.name,
                location=signal.statement.location,
                expression="return;",
            )

        try:
            return convert(signal.value, function.return_type)
        except EvalError as e:
            raise e.locate(signal.statement.location, self._writer.describe(signal.statement))

    def _print(self, node: CallExpression) -> None:
        if len(node.arguments) != 1:
            raise ArgumentCountError("print", 1, len(node.arguments))
        value = self.evaluate(node.arguments[0])
        self.print_sink(format_value(value, self.trailing_newline))

    # =========================================================================
    # Dispatch Helpers
    # =========================================================================

    def _visit_located(self, node: ASTNode):
        """Visit a node, stamping its location onto errors that lack one."""
        try:
            return self.visit(node)
        except EvalError as e:
            if e.location is None:
                e.locate(node.location, self._writer.describe(node))
            raise

    def evaluate(self, expr: Expression) -> Value:
        """
        Evaluate an expression that must produce a value.

        Raises:
            TypeMismatchError: If the expression is a void call
        """
        value = self._visit_located(expr)
        if value is None:
            raise TypeMismatchError(
                "void value used in an expression",
                location=expr.location,
                expression=self._writer.describe(expr),
            )
        return value

    def execute(self, statement: Statement) -> Optional[Returned]:
        """Execute a statement; returns a signal if it returned."""
        return self._visit_located(statement)

    def _execute_all(self, statements: Sequence[Statement]) -> Optional[Returned]:
        for statement in statements:
            signal = self.execute(statement)
            if signal is not None:
                return signal
        return None

    def _pointer_target(self, pointer: Value) -> SlotHandle:
        """Handle a pointer value refers to."""
        if pointer.kind != ValueKind.POINTER:
            raise TypeMismatchError(
                f"cannot dereference non-pointer type '{pointer.type_name}'",
                expected_type="pointer",
                actual_type=pointer.type_name,
            )
        if pointer.ctype.dereference().is_void:
            raise TypeMismatchError(f"cannot dereference '{pointer.type_name}'")
        if pointer.payload is None:
            raise DanglingPointerError(
                "dereference of an unset pointer",
                hint="assign an address with '&' first",
            )
        return pointer.payload

    # =========================================================================
    # Statements
    # =========================================================================

    def visit_Block(self, node: Block) -> Optional[Returned]:
        with self.env.scope():
            return self._execute_all(node.statements)

    def visit_VarDecl(self, node: VarDecl) -> None:
        self.env.declare(node.name, node.var_type, location=node.location)

    def visit_Assign(self, node: Assign) -> None:
        target = node.target
        if isinstance(target, Dereference):
            pointer = self.evaluate(target.pointer)
            handle = self._pointer_target(pointer)
            value = convert(self.evaluate(node.value), pointer.ctype.dereference())
            slot = self.env.slot(handle)
            self.env.write(handle, convert(value, slot.ctype, explicit=True))
        else:
            handle = self.env.resolve(target.name)
            slot = self.env.slot(handle)
            self.env.write(handle, convert(self.evaluate(node.value), slot.ctype))

    def visit_ExpressionStatement(self, node: ExpressionStatement) -> None:
        if node.expression is not None:
            # Void calls are fine here
            self._visit_located(node.expression)

    def visit_IfStatement(self, node: IfStatement) -> Optional[Returned]:
        if is_truthy(self.evaluate(node.condition)):
            return self.execute(node.then_branch)
        if node.else_branch is not None:
            return self.execute(node.else_branch)
        return None

    def visit_WhileStatement(self, node: WhileStatement) -> Optional[Returned]:
        while is_truthy(self.evaluate(node.condition)):
            signal = self.execute(node.body)
            if signal is not None:
                return signal
        return None

    def visit_ReturnStatement(self, node: ReturnStatement) -> Returned:
        value = None
        if node.value is not None:
            value = self.evaluate(node.value)
        return Returned(value, node)

    # =========================================================================
    # Expressions
    # =========================================================================

    def visit_IntLiteral(self, node: IntLiteral) -> Value:
        return Value.of_int(node.value)

    def visit_FloatLiteral(self, node: FloatLiteral) -> Value:
        return Value.of_float(node.value)

    def visit_CharLiteral(self, node: CharLiteral) -> Value:
        return Value.of_char(node.value)

    def visit_StringLiteral(self, node: StringLiteral) -> Value:
        return Value.of_string(node.value)

    def visit_Identifier(self, node: Identifier) -> Value:
        return self.env.read(self.env.resolve(node.name))

    def visit_UnaryExpression(self, node: UnaryExpression) -> Value:
        operand = self.evaluate(node.operand)
        if node.operator == UnaryOperator.NEGATE:
            return negate(operand)
        return logical_not(operand)

    def visit_BinaryExpression(self, node: BinaryExpression) -> Value:
        op = node.operator

        if op == BinaryOperator.LOGICAL_AND:
            if not is_truthy(self.evaluate(node.left)):
                return Value.of_bool(False)
            return Value.of_bool(is_truthy(self.evaluate(node.right)))

        if op == BinaryOperator.LOGICAL_OR:
            if is_truthy(self.evaluate(node.left)):
                return Value.of_bool(True)
            return Value.of_bool(is_truthy(self.evaluate(node.right)))

        left = self.evaluate(node.left)
        right = self.evaluate(node.right)
        if op in ARITHMETIC_OPERATORS:
            return arithmetic(op, left, right)
        if op in BITWISE_OPERATORS:
            return bitwise(op, left, right)
        if op in COMPARISON_OPERATORS:
            return compare(op, left, right)
        raise ValueError(f"Unknown binary operator: {op}")

    def visit_ConditionalExpression(self, node: ConditionalExpression) -> Value:
        if is_truthy(self.evaluate(node.condition)):
            return self.evaluate(node.then_expr)
        return self.evaluate(node.else_expr)

    def visit_CallExpression(self, node: CallExpression) -> Optional[Value]:
        if node.function_name in BUILTIN_FUNCTIONS:
            self._print(node)
            return None
        args = [self.evaluate(arg) for arg in node.arguments]
        return self._call(node.function_name, args)

    def visit_CastExpression(self, node: CastExpression) -> Value:
        return convert(self.evaluate(node.operand), node.target_type, explicit=True)

    def visit_SizeofExpression(self, node: SizeofExpression) -> Value:
        return Value.of_int(node.target_type.size)

    def visit_AddressOf(self, node: AddressOf) -> Value:
        handle = self.env.resolve(node.name)
        slot = self.env.slot(handle)
        return Value.of_pointer(handle, slot.ctype.pointer_to())

    def visit_Dereference(self, node: Dereference) -> Value:
        pointer = self.evaluate(node.pointer)
        handle = self._pointer_target(pointer)
        return convert(self.env.read(handle), pointer.ctype.dereference(), explicit=True)

    def generic_visit(self, node: ASTNode):
        raise TypeError(f"cannot evaluate {type(node).__name__}")

"""
Mini-C Runtime Values
=====================

This module defines the tagged runtime value used by the evaluator and
the rules for converting between value kinds, applying operators, and
formatting values for print.

Value Kinds
-----------
| Kind    | Payload                         | Static type       |
|---------|---------------------------------|-------------------|
| INT     | int in signed 64-bit range      | int               |
| CHAR    | int code 0 to 255               | char              |
| FLOAT   | Python float (IEEE double)      | float             |
| POINTER | SlotHandle, or None if unset    | T * (any depth)   |
| STRING  | decoded text                    | (print only)      |

Conversion Rules
----------------
- float -> int truncates toward zero; nan, inf and values outside the
  int range are rejected
- int <-> char keeps the low 8 bits
- float -> char goes through int
- pointer <-> pointer re-types the pointer on an explicit cast; an
  implicit conversion needs an exact type match
- pointer <-> scalar, anything -> void and string -> anything are
  rejected

Errors raised here carry no location; the evaluator attaches the
location of the node being evaluated.
"""

from dataclasses import dataclass
from enum import Enum, auto
from typing import TYPE_CHECKING, Optional, Union
import math

from c4py.minic.ast import BinaryOperator
from c4py.minic.errors import TypeMismatchError, DivisionByZeroError
from c4py.minic.types import (
    CType,
    BaseType,
    TYPE_CHAR,
    TYPE_INT,
    TYPE_FLOAT,
    promote_type,
)

if TYPE_CHECKING:
    from c4py.minic.environment import SlotHandle


# 64-bit two's-complement arithmetic
INT_BITS = 64
INT_MASK = (1 << INT_BITS) - 1
INT_MIN = -(1 << (INT_BITS - 1))
INT_MAX = (1 << (INT_BITS - 1)) - 1


def wrap_int(n: int) -> int:
    """Wrap an arbitrary Python int into the signed 64-bit range."""
    n &= INT_MASK
    if n > INT_MAX:
        n -= 1 << INT_BITS
    return n


# =============================================================================
# Value Representation
# =============================================================================

class ValueKind(Enum):
    """Runtime value categories."""
    INT = auto()
    CHAR = auto()
    FLOAT = auto()
    POINTER = auto()
    STRING = auto()


@dataclass(frozen=True)
class Value:
    """
    A runtime value.

    Values are produced fresh by every expression evaluation. Only
    pointers share anything: the handle of the slot they point to.

    Attributes:
        kind: The value category
        payload: The raw Python value (see module table)
        ctype: Static type of the value; None for strings
    """
    kind: ValueKind
    payload: Union[int, float, str, "SlotHandle", None]
    ctype: Optional[CType] = None

    @classmethod
    def of_int(cls, n: int) -> "Value":
        return cls(ValueKind.INT, wrap_int(n), TYPE_INT)

    @classmethod
    def of_char(cls, code: int) -> "Value":
        return cls(ValueKind.CHAR, code & 0xFF, TYPE_CHAR)

    @classmethod
    def of_float(cls, x: float) -> "Value":
        return cls(ValueKind.FLOAT, float(x), TYPE_FLOAT)

    @classmethod
    def of_bool(cls, flag: bool) -> "Value":
        """Comparison and logical results: Int 1 or 0."""
        return cls(ValueKind.INT, 1 if flag else 0, TYPE_INT)

    @classmethod
    def of_pointer(cls, handle: Optional["SlotHandle"], ctype: CType) -> "Value":
        if not ctype.is_pointer:
            raise ValueError(f"'{ctype}' is not a pointer type")
        return cls(ValueKind.POINTER, handle, ctype)

    @classmethod
    def of_string(cls, text: str) -> "Value":
        return cls(ValueKind.STRING, text, None)

    @property
    def is_numeric(self) -> bool:
        return self.kind in (ValueKind.INT, ValueKind.CHAR, ValueKind.FLOAT)

    @property
    def is_integer(self) -> bool:
        return self.kind in (ValueKind.INT, ValueKind.CHAR)

    @property
    def type_name(self) -> str:
        """Type name used in error messages."""
        if self.kind == ValueKind.STRING:
            return "string"
        return str(self.ctype)

    def __str__(self) -> str:
        return format_value(self, trailing_newline=False)


def zero_value(ctype: CType) -> Value:
    """
    Initial value of a freshly declared slot.

    0, '\\0' and 0.0 for scalars; an unset pointer for pointer types.
    """
    if ctype.is_pointer:
        return Value.of_pointer(None, ctype)
    if ctype.base_type == BaseType.INT:
        return Value.of_int(0)
    if ctype.base_type == BaseType.CHAR:
        return Value.of_char(0)
    if ctype.base_type == BaseType.FLOAT:
        return Value.of_float(0.0)
    raise TypeError(f"no storage for type '{ctype}'")


# =============================================================================
# Truthiness and Conversions
# =============================================================================

def is_truthy(value: Value) -> bool:
    """
    Map a value to a control decision.

    Numbers are true iff non-zero; a pointer is true iff it is set
    (an unset pointer is the null pointer).

    Raises:
        TypeMismatchError: For a string
    """
    if value.is_numeric:
        return value.payload != 0
    if value.kind == ValueKind.POINTER:
        return value.payload is not None
    raise TypeMismatchError(
        "string used as a condition",
        expected_type="int",
        actual_type=value.type_name,
    )


def float_to_int(x: float) -> int:
    """
    Truncate a float toward zero.

    Raises:
        TypeMismatchError: If x is nan, infinite, or outside the int range
    """
    if not math.isfinite(x):
        raise TypeMismatchError(f"cannot convert {format_float(x)} to int")
    n = int(x)
    if not INT_MIN <= n <= INT_MAX:
        raise TypeMismatchError(
            f"float {format_float(x)} is out of range for int",
        )
    return n


def convert(value: Value, target: CType, explicit: bool = False) -> Value:
    """
    Convert a value to the target type.

    Args:
        value: The value to convert
        target: The destination type
        explicit: True for a cast, False for assignment, argument
            binding and return (which forbid re-typing pointers)

    Returns:
        A value whose static type is target

    Raises:
        TypeMismatchError: If the conversion is not allowed
    """
    if value.kind == ValueKind.STRING:
        raise TypeMismatchError(
            f"cannot convert a string to '{target}'",
            *hint_types(target, value),
        )

    if target.is_void:
        raise TypeMismatchError(f"cannot convert '{value.type_name}' to void")

    if target.is_pointer:
        if value.kind != ValueKind.POINTER:
            raise TypeMismatchError(
                f"cannot convert '{value.type_name}' to pointer type '{target}'",
                *hint_types(target, value),
            )
        if value.ctype == target:
            return value
        if not explicit:
            raise TypeMismatchError(
                f"incompatible pointer types: '{value.type_name}' and '{target}'",
                *hint_types(target, value),
            )
        return Value.of_pointer(value.payload, target)

    if value.kind == ValueKind.POINTER:
        raise TypeMismatchError(
            f"cannot convert pointer '{value.type_name}' to '{target}'",
            *hint_types(target, value),
        )

    if target.base_type == BaseType.FLOAT:
        if value.kind == ValueKind.FLOAT:
            return value
        return Value.of_float(float(value.payload))

    if value.kind == ValueKind.FLOAT:
        n = float_to_int(value.payload)
    else:
        n = value.payload

    if target.base_type == BaseType.CHAR:
        return Value.of_char(n)
    return Value.of_int(n)


def hint_types(target: CType, value: Value) -> tuple[str, str]:
    """Expected/actual type names for TypeMismatchError."""
    return str(target), value.type_name


# =============================================================================
# Operators
# =============================================================================

ARITHMETIC_OPERATORS = frozenset({
    BinaryOperator.ADD,
    BinaryOperator.SUBTRACT,
    BinaryOperator.MULTIPLY,
    BinaryOperator.DIVIDE,
    BinaryOperator.MODULO,
})

BITWISE_OPERATORS = frozenset({
    BinaryOperator.BITWISE_AND,
    BinaryOperator.BITWISE_OR,
    BinaryOperator.BITWISE_XOR,
    BinaryOperator.LEFT_SHIFT,
    BinaryOperator.RIGHT_SHIFT,
})

COMPARISON_OPERATORS = frozenset({
    BinaryOperator.EQUAL,
    BinaryOperator.NOT_EQUAL,
    BinaryOperator.LESS,
    BinaryOperator.GREATER,
    BinaryOperator.LESS_EQ,
    BinaryOperator.GREATER_EQ,
})


def _invalid_operands(op: BinaryOperator, left: Value, right: Value) -> TypeMismatchError:
    return TypeMismatchError(
        f"invalid operands to '{op}' ('{left.type_name}' and '{right.type_name}')"
    )


def _divide_floats(a: float, b: float) -> float:
    """IEEE division: x/0 is a signed infinity, 0/0 is nan."""
    if b == 0.0:
        if a == 0.0 or math.isnan(a):
            return math.nan
        return math.copysign(math.inf, a) * math.copysign(1.0, b)
    return a / b


def _fmod(a: float, b: float) -> float:
    if b == 0.0 or math.isinf(a) or math.isnan(a) or math.isnan(b):
        return math.nan
    return math.fmod(a, b)


def _truncating_divmod(a: int, b: int) -> tuple[int, int]:
    """Division truncating toward zero; the remainder takes the dividend's sign."""
    q = abs(a) // abs(b)
    if (a < 0) != (b < 0):
        q = -q
    return q, a - b * q


def arithmetic(op: BinaryOperator, left: Value, right: Value) -> Value:
    """
    Apply + - * / % to two values.

    Char operands are promoted to int. If either operand is a float the
    other is widened and the result is a float.

    Raises:
        TypeMismatchError: If an operand is a pointer or a string
        DivisionByZeroError: For integer division or modulo by zero
    """
    if not (left.is_numeric and right.is_numeric):
        raise _invalid_operands(op, left, right)

    if promote_type(left.ctype, right.ctype) == TYPE_FLOAT:
        a = float(left.payload)
        b = float(right.payload)
        if op == BinaryOperator.ADD:
            return Value.of_float(a + b)
        if op == BinaryOperator.SUBTRACT:
            return Value.of_float(a - b)
        if op == BinaryOperator.MULTIPLY:
            return Value.of_float(a * b)
        if op == BinaryOperator.DIVIDE:
            return Value.of_float(_divide_floats(a, b))
        return Value.of_float(_fmod(a, b))

    a = left.payload
    b = right.payload
    if op == BinaryOperator.ADD:
        return Value.of_int(a + b)
    if op == BinaryOperator.SUBTRACT:
        return Value.of_int(a - b)
    if op == BinaryOperator.MULTIPLY:
        return Value.of_int(a * b)

    if b == 0:
        word = "division" if op == BinaryOperator.DIVIDE else "modulo"
        raise DivisionByZeroError(f"integer {word} by zero")

    quotient, remainder = _truncating_divmod(a, b)
    if op == BinaryOperator.DIVIDE:
        return Value.of_int(quotient)
    return Value.of_int(remainder)


def bitwise(op: BinaryOperator, left: Value, right: Value) -> Value:
    """
    Apply & | ^ << >> to two integer values.

    Shift counts are taken modulo 64 and >> is arithmetic.

    Raises:
        TypeMismatchError: If an operand is not an int or char
    """
    if not (left.is_integer and right.is_integer):
        raise _invalid_operands(op, left, right)

    a = left.payload
    b = right.payload
    if op == BinaryOperator.BITWISE_AND:
        return Value.of_int(a & b)
    if op == BinaryOperator.BITWISE_OR:
        return Value.of_int(a | b)
    if op == BinaryOperator.BITWISE_XOR:
        return Value.of_int(a ^ b)

    count = b % INT_BITS
    if op == BinaryOperator.LEFT_SHIFT:
        return Value.of_int(a << count)
    return Value.of_int(a >> count)


def compare(op: BinaryOperator, left: Value, right: Value) -> Value:
    """
    Apply a comparison operator; the result is Int 1 or 0.

    Numbers are widened to their common type (see promote_type).
    Pointers compare only for (in)equality with other pointers: equal
    iff they refer to the same slot.

    Raises:
        TypeMismatchError: For strings or mixed pointer comparisons
    """
    if left.kind == ValueKind.POINTER and right.kind == ValueKind.POINTER:
        if op == BinaryOperator.EQUAL:
            return Value.of_bool(left.payload == right.payload)
        if op == BinaryOperator.NOT_EQUAL:
            return Value.of_bool(left.payload != right.payload)
        raise _invalid_operands(op, left, right)

    if not (left.is_numeric and right.is_numeric):
        raise _invalid_operands(op, left, right)

    a = left.payload
    b = right.payload
    if promote_type(left.ctype, right.ctype) == TYPE_FLOAT:
        a = float(a)
        b = float(b)

    if op == BinaryOperator.EQUAL:
        result = a == b
    elif op == BinaryOperator.NOT_EQUAL:
        result = a != b
    elif op == BinaryOperator.LESS:
        result = a < b
    elif op == BinaryOperator.GREATER:
        result = a > b
    elif op == BinaryOperator.LESS_EQ:
        result = a <= b
    else:
        result = a >= b
    return Value.of_bool(result)


def negate(value: Value) -> Value:
    """Unary minus; char is promoted to int, int wraps."""
    if value.kind == ValueKind.FLOAT:
        return Value.of_float(-value.payload)
    if value.is_integer:
        return Value.of_int(-value.payload)
    raise TypeMismatchError(f"invalid operand to unary '-' ('{value.type_name}')")


def logical_not(value: Value) -> Value:
    """Logical not: Int 1 for a false value, 0 otherwise."""
    return Value.of_bool(not is_truthy(value))


# =============================================================================
# Formatting
# =============================================================================

def format_float(x: float) -> str:
    """Shortest text that reads back as the same float: 3.14, 4.0, inf, nan."""
    return repr(x)


def format_value(value: Value, trailing_newline: bool = True) -> str:
    """
    Text written by print for a value.

    Strings are written verbatim. Numbers (a char prints its code) and
    pointers are followed by a newline unless trailing_newline is off.
    """
    if value.kind == ValueKind.STRING:
        return value.payload

    if value.kind == ValueKind.FLOAT:
        text = format_float(value.payload)
    elif value.kind == ValueKind.POINTER:
        prefix = "null " if value.payload is None else ""
        text = f"<{prefix}pointer to {value.ctype.dereference()}>"
    else:
        text = str(value.payload)

    if trailing_newline:
        return text + "\n"
    return text

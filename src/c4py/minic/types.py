"""
Mini-C Type System
==================

This module defines the static types of Mini-C and the fixed size
table used by sizeof.

Supported Types
---------------
- int: 64-bit signed integer, wrapping on overflow
- char: 8-bit unsigned code (0 to 255), promoted to int in arithmetic
- float: IEEE double precision
- void: no value (function returns and empty parameter lists only)
- Pointers to any of the above (int *, char **, float *, ...)

Size Table
----------
| Type    | sizeof |
|---------|--------|
| char    | 1      |
| int     | 4      |
| float   | 8      |
| pointer | 8      |
| void    | 0      |

The sizes are fixed conventions of the language and need not match the
host machine: an int reports 4 bytes even though it holds 64 bits.

Widening Order
--------------
char < int < float. Mixed arithmetic and comparisons convert both
operands to the wider type; char never survives arithmetic and is
promoted to at least int.
"""

from dataclasses import dataclass
from enum import Enum, auto


# =============================================================================
# Base Type Enumeration
# =============================================================================

class BaseType(Enum):
    """Fundamental Mini-C data types."""
    VOID = auto()       # No value type (for function returns)
    CHAR = auto()       # 8-bit unsigned code
    INT = auto()        # 64-bit signed
    FLOAT = auto()      # IEEE double

    def __str__(self) -> str:
        """Return the C type name."""
        return self.name.lower()


# sizeof for non-pointer types
BASE_SIZES = {
    BaseType.VOID: 0,
    BaseType.CHAR: 1,
    BaseType.INT: 4,
    BaseType.FLOAT: 8,
}

POINTER_SIZE = 8


# =============================================================================
# Type Representation
# =============================================================================

@dataclass(frozen=True)
class CType:
    """
    Represents a Mini-C type.

    Attributes:
        base_type: The fundamental type (VOID, CHAR, INT, FLOAT)
        pointer_depth: Number of indirection levels (e.g., ** = 2)

    Examples:
        - int      : CType(INT)
        - float *  : CType(FLOAT, 1)
        - char **  : CType(CHAR, 2)
    """
    base_type: BaseType
    pointer_depth: int = 0

    def __post_init__(self):
        if self.pointer_depth < 0:
            raise ValueError("pointer depth cannot be negative")

    @property
    def is_pointer(self) -> bool:
        """Return True for any pointer type."""
        return self.pointer_depth > 0

    @property
    def is_void(self) -> bool:
        """Return True if this is the void type (not void *)."""
        return self.base_type == BaseType.VOID and not self.is_pointer

    @property
    def is_integer(self) -> bool:
        """Return True if this is an integer type (char or int)."""
        return self.base_type in (BaseType.CHAR, BaseType.INT) and not self.is_pointer

    @property
    def is_float(self) -> bool:
        return self.base_type == BaseType.FLOAT and not self.is_pointer

    @property
    def is_arithmetic(self) -> bool:
        """Return True if arithmetic operators apply (char, int, float)."""
        return self.is_integer or self.is_float

    @property
    def size(self) -> int:
        """
        Return the size in bytes of this type, per the size table.

        Returns:
            8 for pointers and float, 4 for int, 1 for char, 0 for void
        """
        if self.is_pointer:
            return POINTER_SIZE
        return BASE_SIZES[self.base_type]

    def dereference(self) -> "CType":
        """
        Return the type when this pointer is dereferenced.

        For int*, returns int. For int**, returns int*.

        Raises:
            TypeError: If this is not a pointer type
        """
        if not self.is_pointer:
            raise TypeError(f"cannot dereference non-pointer type {self}")
        return CType(self.base_type, self.pointer_depth - 1)

    def pointer_to(self) -> "CType":
        """Return a pointer type to this type (int -> int *)."""
        return CType(self.base_type, self.pointer_depth + 1)

    def __str__(self) -> str:
        """Return the C type string representation."""
        if self.is_pointer:
            return f"{self.base_type} {'*' * self.pointer_depth}"
        return str(self.base_type)


# =============================================================================
# Predefined Types (for convenience)
# =============================================================================

TYPE_VOID = CType(BaseType.VOID)
TYPE_CHAR = CType(BaseType.CHAR)
TYPE_INT = CType(BaseType.INT)
TYPE_FLOAT = CType(BaseType.FLOAT)

TYPE_CHAR_PTR = CType(BaseType.CHAR, 1)
TYPE_INT_PTR = CType(BaseType.INT, 1)
TYPE_FLOAT_PTR = CType(BaseType.FLOAT, 1)


def make_type(base: BaseType, pointer_depth: int = 0) -> CType:
    """Create a CType from components."""
    return CType(base_type=base, pointer_depth=pointer_depth)


# =============================================================================
# Type Promotion Rules
# =============================================================================

def promote_type(type_a: CType, type_b: CType) -> CType:
    """
    Determine the common type of two arithmetic operands.

    1. If either type is float, the result is float
    2. Otherwise the result is int (char is always promoted)

    Args:
        type_a: First operand type
        type_b: Second operand type

    Returns:
        TYPE_FLOAT or TYPE_INT

    Raises:
        TypeError: If either operand is not an arithmetic type
    """
    for operand in (type_a, type_b):
        if not operand.is_arithmetic:
            raise TypeError(f"'{operand}' is not an arithmetic type")

    if type_a.is_float or type_b.is_float:
        return TYPE_FLOAT
    return TYPE_INT

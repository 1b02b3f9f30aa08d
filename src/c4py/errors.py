"""
c4py Error Base
===============

This module defines the root of the c4py exception hierarchy and the
source location type shared by every stage of the interpreter.

All exceptions raised for problems in a user's program inherit from
C4Error, so callers can catch any language error with one except clause:

    try:
        run_c(source)
    except C4Error as e:
        print(e)

Error messages follow this format:
    filename:line:column: error: description
        source_line_text
        ^ (pointer to error location)
    hint: suggestion for fixing (when available)

The concrete exception classes live in c4py.minic.errors.
"""

from dataclasses import dataclass


# =============================================================================
# Base Exception Class
# =============================================================================

class C4Error(Exception):
    """
    Base exception for all c4py errors.

    Raised (through a subclass) whenever a program cannot be lexed,
    parsed, or evaluated.
    """
    pass


# =============================================================================
# Source Location Tracking
# =============================================================================

@dataclass(frozen=True)
class SourceLocation:
    """
    Represents a location in source code for error reporting.

    Tokens, AST nodes and errors all carry one of these. The frozen
    design ensures locations cannot be accidentally modified.

    Attributes:
        filename: Name of the source file (or "<input>" for string input)
        line: Line number (1-indexed)
        column: Column number (1-indexed)
    """
    filename: str
    line: int
    column: int

    def __str__(self) -> str:
        """Format as 'filename:line:column' for error messages."""
        return f"{self.filename}:{self.line}:{self.column}"

"""
Mini-C Error Hierarchy
======================

This module defines the exception hierarchy for the Mini-C interpreter.
All exceptions inherit from MiniCError, which itself inherits from the
base C4Error for consistent error handling across c4py.

Exception Hierarchy
-------------------
MiniCError (base for all Mini-C errors)
├── LexError - unrecognized or malformed input characters
│   ├── UnterminatedStringError - missing closing quote
│   └── InvalidCharacterError - unexpected character
├── ParseError - grammar violations
│   ├── UnexpectedTokenError - token does not fit the grammar
│   ├── MissingTokenError - required token not found
│   ├── InvalidLValueError - assignment to a non-lvalue
│   └── ParseErrorGroup - several parse errors reported together
├── RedeclarationError - name declared twice in one scope
└── EvalError - errors raised while running a program
    ├── TypeMismatchError - operator applied to incompatible types
    │   └── ArgumentCountError - wrong number of call arguments
    ├── UndefinedSymbolError - unknown variable or function
    ├── MissingReturnError - non-void function fell off its end
    ├── DanglingPointerError - pointer to a slot whose scope exited
    ├── DivisionByZeroError - integer division or modulo by zero
    └── ResourceExhaustedError - recursion limit reached

Lex and parse errors abort processing before evaluation begins. Every
error is terminal: the language has no way to catch and continue.

Error Message Format
--------------------
    fact.c:5:12: error: undefined variable 'nn'
        return nn * 2;
               ^
    in: nn
    hint: did you mean 'n'?
"""

from typing import Optional, List

from c4py.errors import C4Error, SourceLocation


# =============================================================================
# Base Mini-C Exception
# =============================================================================

class MiniCError(C4Error):
    """
    Base exception for all Mini-C errors.

    Provides common formatting for error messages including source
    location, the source line with a caret pointer, and a hint.

    Attributes:
        message: The error description
        location: Where in the source the error occurred
        hint: A suggestion for fixing the error
        source_line: The actual source text at the error location
    """

    def __init__(
        self,
        message: str,
        location: Optional[SourceLocation] = None,
        hint: Optional[str] = None,
        source_line: Optional[str] = None,
    ):
        self.message = message
        self.location = location
        self.hint = hint
        self.source_line = source_line
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        """
        Format the error message with location, source context, and hint.

            fact.c:5:12: error: undefined variable 'nn'
                return nn * 2;
                       ^
            hint: did you mean 'n'?
        """
        parts = []

        if self.location:
            parts.append(f"{self.location}: error: {self.message}")
        else:
            parts.append(f"error: {self.message}")

        if self.source_line is not None and self.location is not None:
            parts.append(f"    {self.source_line}")
            if self.location.column > 0:
                padding = " " * (4 + self.location.column - 1)
                parts.append(f"{padding}^")

        parts.extend(self._extra_lines())

        if self.hint:
            parts.append(f"hint: {self.hint}")

        return "\n".join(parts)

    def _extra_lines(self) -> List[str]:
        """Additional context lines placed between the caret and the hint."""
        return []

    def with_source_line(self, source_line: Optional[str]) -> "MiniCError":
        """
        Attach the source line after the fact and rebuild the message.

        The evaluator only knows node locations; the interpreter pipeline
        owns the source text and fills this in before re-raising.
        """
        if self.source_line is None and source_line is not None:
            self.source_line = source_line
            self.args = (self._format_message(),)
        return self


# =============================================================================
# Lexical Errors
# =============================================================================

class LexError(MiniCError):
    """
    Error while converting source text into tokens.

    Examples:
        - Character that belongs to no token ('@', '#', '~')
        - Malformed number ("3.")
        - Bad character literal ('ab')
    """
    pass


class UnterminatedStringError(LexError):
    """
    Unterminated string literal.

    Raised when a string literal is not closed before the end of the
    line or file.
    """

    def __init__(
        self,
        location: Optional[SourceLocation] = None,
        source_line: Optional[str] = None,
    ):
        super().__init__(
            "unterminated string literal",
            location=location,
            hint="add closing '\"' to complete the string",
            source_line=source_line,
        )


class InvalidCharacterError(LexError):
    """Character that cannot start any token."""

    def __init__(
        self,
        char: str,
        location: Optional[SourceLocation] = None,
        source_line: Optional[str] = None,
    ):
        self.char = char
        super().__init__(
            f"invalid character '{char}' (0x{ord(char):02X})",
            location=location,
            source_line=source_line,
        )


# =============================================================================
# Parse Errors
# =============================================================================

class ParseError(MiniCError):
    """
    Grammar violation.

    Raised when the token stream does not match the Mini-C grammar:
    an unexpected token, an unmatched bracket, a missing semicolon.
    """
    pass


class UnexpectedTokenError(ParseError):
    """Token that doesn't match the expected grammar rule."""

    def __init__(
        self,
        found: str,
        expected: Optional[str] = None,
        location: Optional[SourceLocation] = None,
        source_line: Optional[str] = None,
    ):
        self.found = found
        self.expected = expected

        hint = None
        if expected:
            hint = f"expected {expected}"

        super().__init__(
            f"unexpected token '{found}'",
            location=location,
            hint=hint,
            source_line=source_line,
        )


class MissingTokenError(ParseError):
    """
    Required token is missing.

    Raised when a required token (like ';' or ')') is not found where
    expected.
    """

    def __init__(
        self,
        expected: str,
        found: Optional[str] = None,
        location: Optional[SourceLocation] = None,
        source_line: Optional[str] = None,
    ):
        self.expected = expected
        self.found = found
        message = f"expected {expected}"
        if found:
            message += f" before '{found}'"
        super().__init__(
            message,
            location=location,
            source_line=source_line,
        )


class InvalidLValueError(ParseError):
    """
    Invalid target of an assignment or address-of.

    Examples of invalid lvalues:
        42 = x;
        (a + b) = x;
        p = &(a + 1);
    """

    def __init__(
        self,
        message: str = "expression is not assignable (not an lvalue)",
        location: Optional[SourceLocation] = None,
        source_line: Optional[str] = None,
    ):
        super().__init__(
            message,
            location=location,
            hint="only a variable or a dereferenced pointer can be assigned to",
            source_line=source_line,
        )


class ParseErrorGroup(ParseError):
    """
    Several parse errors found in one pass.

    The parser recovers at function granularity so a single run reports
    every broken function. The group takes the location of the first
    error; the message is the combined report.
    """

    def __init__(self, errors: List[ParseError]):
        self.errors = list(errors)
        first = self.errors[0] if self.errors else None
        super().__init__(
            self._report(),
            location=first.location if first else None,
        )

    def _report(self) -> str:
        lines = []
        for error in self.errors:
            lines.append(str(error))
            lines.append("")
        word = "error" if len(self.errors) == 1 else "errors"
        lines.append(f"{len(self.errors)} {word}")
        return "\n".join(lines)

    def _format_message(self) -> str:
        """Return message as-is - it's already a formatted report."""
        return self.message


# =============================================================================
# Declaration Errors
# =============================================================================

class RedeclarationError(MiniCError):
    """
    Identifier declared more than once in the same scope.

    Covers local variables, parameters, and function definitions
    (functions share a single program-wide namespace).
    """

    def __init__(
        self,
        identifier: str,
        location: Optional[SourceLocation] = None,
        original_location: Optional[SourceLocation] = None,
        source_line: Optional[str] = None,
        hint: Optional[str] = None,
    ):
        self.identifier = identifier
        self.original_location = original_location

        if hint is None and original_location:
            hint = f"'{identifier}' was first declared at {original_location}"

        super().__init__(
            f"redeclaration of '{identifier}'",
            location=location,
            hint=hint,
            source_line=source_line,
        )


# =============================================================================
# Evaluation Errors
# =============================================================================

class EvalError(MiniCError):
    """
    Error raised while evaluating a program.

    Carries the source text of the offending expression or statement
    (rendered from the AST) in addition to its location.

    Attributes:
        expression: Source text of the expression being evaluated
    """

    def __init__(
        self,
        message: str,
        location: Optional[SourceLocation] = None,
        hint: Optional[str] = None,
        source_line: Optional[str] = None,
        expression: Optional[str] = None,
    ):
        self.expression = expression
        super().__init__(message, location=location, hint=hint, source_line=source_line)

    def _extra_lines(self) -> List[str]:
        if self.expression:
            return [f"in: {self.expression}"]
        return []

    def locate(
        self,
        location: Optional[SourceLocation],
        expression: Optional[str] = None,
    ) -> "EvalError":
        """
        Fill in the location and expression context if not yet known.

        Value operations raise without a location; the evaluator calls
        this on the way out of the innermost node being evaluated.
        """
        if self.location is None:
            self.location = location
            if self.expression is None:
                self.expression = expression
            self.args = (self._format_message(),)
        return self


class TypeMismatchError(EvalError):
    """
    Operator or conversion applied to incompatible types.

    Raised when:
        - A bitwise or shift operator gets a float operand
        - A pointer is cast to a scalar (or back)
        - A void function's result is used as a value
        - A non-pointer is dereferenced
    """

    def __init__(
        self,
        message: str,
        expected_type: Optional[str] = None,
        actual_type: Optional[str] = None,
        location: Optional[SourceLocation] = None,
        source_line: Optional[str] = None,
        expression: Optional[str] = None,
    ):
        self.expected_type = expected_type
        self.actual_type = actual_type

        hint = None
        if expected_type and actual_type:
            hint = f"expected '{expected_type}', got '{actual_type}'"

        super().__init__(
            message,
            location=location,
            hint=hint,
            source_line=source_line,
            expression=expression,
        )


class ArgumentCountError(TypeMismatchError):
    """Function called with the wrong number of arguments."""

    def __init__(
        self,
        function_name: str,
        expected: int,
        actual: int,
        location: Optional[SourceLocation] = None,
        source_line: Optional[str] = None,
        expression: Optional[str] = None,
    ):
        self.function_name = function_name
        self.expected = expected
        self.actual = actual

        word = "argument" if expected == 1 else "arguments"
        super().__init__(
            f"'{function_name}' expects {expected} {word}, got {actual}",
            location=location,
            source_line=source_line,
            expression=expression,
        )


class UndefinedSymbolError(EvalError):
    """
    Reference to an undefined variable or function.

    Suggests similarly-named symbols when any are known, which helps
    catch typos.
    """

    def __init__(
        self,
        identifier: str,
        kind: str = "symbol",
        location: Optional[SourceLocation] = None,
        source_line: Optional[str] = None,
        similar_identifiers: Optional[List[str]] = None,
        expression: Optional[str] = None,
    ):
        self.identifier = identifier
        self.kind = kind
        self.similar_identifiers = similar_identifiers or []

        hint = None
        if self.similar_identifiers:
            suggestions = ", ".join(f"'{s}'" for s in self.similar_identifiers[:3])
            hint = f"did you mean {suggestions}?"

        super().__init__(
            f"undefined {kind} '{identifier}'",
            location=location,
            hint=hint,
            source_line=source_line,
            expression=expression,
        )


class MissingReturnError(EvalError):
    """Non-void function finished without returning a value."""

    def __init__(
        self,
        function_name: str,
        location: Optional[SourceLocation] = None,
        source_line: Optional[str] = None,
        expression: Optional[str] = None,
    ):
        self.function_name = function_name
        super().__init__(
            f"non-void function '{function_name}' did not return a value",
            location=location,
            hint="add a 'return <expr>;' statement on every path",
            source_line=source_line,
            expression=expression,
        )


class DanglingPointerError(EvalError):
    """
    Access through a pointer whose target slot no longer exists.

    The slot's scope has exited (for example a function returned the
    address of one of its locals).
    """
    pass


class DivisionByZeroError(EvalError):
    """Integer division or modulo by zero."""
    pass


class ResourceExhaustedError(EvalError):
    """Call depth limit reached (usually unbounded recursion)."""
    pass


# =============================================================================
# Error Collection
# =============================================================================

class ParseErrorCollector:
    """
    Collects parse errors for batch reporting.

    The parser uses this to continue after a broken function, so one
    run reports every broken function in the file.

    Example:
        collector = ParseErrorCollector(max_errors=50)

        for function in functions:
            try:
                parse_function()
            except ParseError as e:
                collector.add(e)
                if collector.should_stop():
                    break

        collector.raise_if_errors()
    """

    def __init__(self, max_errors: int = 50):
        self.errors: List[ParseError] = []
        self.max_errors = max_errors

    def add(self, error: ParseError) -> None:
        """Add an error to the collection."""
        self.errors.append(error)

    def should_stop(self) -> bool:
        """Return True if max_errors has been reached."""
        return len(self.errors) >= self.max_errors

    def raise_if_errors(self) -> None:
        """
        Raise the collected errors, if any.

        A single error is raised as itself; several are raised together
        as a ParseErrorGroup.
        """
        if len(self.errors) == 1:
            raise self.errors[0]
        if self.errors:
            raise ParseErrorGroup(self.errors)

"""
c4py - A Tree-Walking Interpreter for Mini-C
============================================

c4py runs programs written in Mini-C, a small subset of C, by parsing
them into an abstract syntax tree and evaluating the tree directly.

Main Components
---------------
- **minic**: the language itself
    Lexer, parser, AST, value model, environment and evaluator

- **cli**: command-line tools
    c4run, which runs a Mini-C source file

Quick Start
-----------
Run a program from Python:
    >>> from c4py import run_c
    >>> result = run_c('int main() { print("hello\\n"); return 3; }')
    >>> result.output, result.exit_code
    ('hello\\n', 3)

Or use the command-line tool:
    $ c4run examples/test_all_features.c

Version History
---------------
1.0.0 - Initial release
"""

__version__ = "1.0.0"

# =============================================================================
# Public API Exports
# =============================================================================

from c4py.errors import C4Error, SourceLocation
from c4py.minic import (
    Interpreter,
    InterpreterOptions,
    RunResult,
    run_c,
    run_file,
    MiniCError,
)

__all__ = [
    # Version info
    "__version__",
    # Interpreter
    "Interpreter",
    "InterpreterOptions",
    "RunResult",
    "run_c",
    "run_file",
    # Exception hierarchy
    "C4Error",
    "MiniCError",
    "SourceLocation",
]

"""
Mini-C Interpreter
==================

This package implements a tree-walking interpreter for Mini-C, a small
C-like language with int, char, float and pointer types, functions,
if/while control flow, and a single builtin: print.

Pipeline
--------
    Mini-C Source → Lexer → Parser → AST → Evaluator → Result

Usage
-----
>>> from c4py.minic import run_c
>>> source = '''
... int fact(int n) { if (n <= 1) return 1; return n * fact(n - 1); }
... int main() { print(fact(5)); return 0; }
... '''
>>> run_c(source).output
'120\\n'

Language Subset
---------------
Supported features:
- Data types: void, char (8-bit), int (64-bit, wrapping), float (double)
- Pointers to variables: &x, *p, *p = e;
- Operators: arithmetic, relational, logical, bitwise, shifts, ?:
- Casts and sizeof(type)
- Control flow: if/else, while, return
- Functions: definitions, calls, recursion, local variables

Not supported:
- Arrays, structs, pointer arithmetic
- Global variables
- for, do-while, switch, break, continue
- Declarations with initializers (int x = 1;)
"""

from c4py.minic.interpreter import (
    Interpreter,
    InterpreterOptions,
    RunResult,
    run_c,
    run_file,
)
from c4py.minic.errors import (
    MiniCError,
    LexError,
    ParseError,
    ParseErrorGroup,
    RedeclarationError,
    EvalError,
    TypeMismatchError,
    ArgumentCountError,
    UndefinedSymbolError,
    MissingReturnError,
    DanglingPointerError,
    DivisionByZeroError,
    ResourceExhaustedError,
)
from c4py.minic.lexer import CLexer, CTokenType, CToken, tokenize
from c4py.minic.parser import CParser, link_functions, parse_source
from c4py.minic.evaluator import Evaluator
from c4py.minic.source_writer import SourceWriter, write_source
from c4py.minic.ast import ASTPrinter, ProgramNode, FunctionNode

__all__ = [
    # Main API
    "Interpreter",
    "InterpreterOptions",
    "RunResult",
    "run_c",
    "run_file",
    # Errors
    "MiniCError",
    "LexError",
    "ParseError",
    "ParseErrorGroup",
    "RedeclarationError",
    "EvalError",
    "TypeMismatchError",
    "ArgumentCountError",
    "UndefinedSymbolError",
    "MissingReturnError",
    "DanglingPointerError",
    "DivisionByZeroError",
    "ResourceExhaustedError",
    # Front end
    "CLexer",
    "CTokenType",
    "CToken",
    "tokenize",
    "CParser",
    "link_functions",
    "parse_source",
    # Back end
    "Evaluator",
    "SourceWriter",
    "write_source",
    "ASTPrinter",
    "ProgramNode",
    "FunctionNode",
]

"""
Mini-C Interpreter Main Module
==============================

This module provides the main interpreter interface for Mini-C.
It orchestrates the complete run:

    Source → Lex → Parse → Link → Evaluate → Result

Usage
-----
Command line:
    $ c4run fact.c

Programmatic:
    >>> from c4py.minic import run_c
    >>> result = run_c('int main() { print("hi\\n"); return 7; }')
    >>> result.output, result.exit_code
    ('hi\\n', 7)

Pipeline
--------
1. **Lexical Analysis**: Convert source to tokens
2. **Parsing**: Build the Abstract Syntax Tree (AST)
3. **Linking**: Build the function table, rejecting duplicates
4. **Evaluation**: Walk the AST starting at main()

The whole program is lexed and parsed before anything runs, so a
syntax error anywhere means no output at all.

Configuration
-------------
InterpreterOptions can be built from environment variables:

    C4PY_MAX_CALL_DEPTH     call depth limit (integer, default 1000)
    C4PY_TRAILING_NEWLINE   newline after numeric prints (1/0, true/false)
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Optional
import logging
import os

from c4py.errors import SourceLocation
from c4py.minic.lexer import CLexer, CToken
from c4py.minic.parser import CParser, FunctionTable, link_functions
from c4py.minic.ast import ProgramNode
from c4py.minic.evaluator import DEFAULT_MAX_CALL_DEPTH, Evaluator, PrintSink
from c4py.minic.errors import MiniCError


logger = logging.getLogger(__name__)

TRUE_WORDS = frozenset({"1", "true", "yes", "on"})
FALSE_WORDS = frozenset({"0", "false", "no", "off"})


@dataclass
class InterpreterOptions:
    """
    Interpreter configuration options.

    Attributes:
        max_call_depth: Maximum number of nested calls before the run
                        fails with ResourceExhaustedError
        trailing_newline: Write a newline after each printed number or
                          pointer (strings are always written verbatim)
    """
    max_call_depth: int = DEFAULT_MAX_CALL_DEPTH
    trailing_newline: bool = True

    def __post_init__(self):
        if self.max_call_depth < 1:
            raise ValueError(f"max_call_depth must be at least 1, got {self.max_call_depth}")

    @classmethod
    def from_env(cls) -> "InterpreterOptions":
        """
        Create InterpreterOptions from environment variables.

        Invalid values are logged and ignored.
        """
        options = cls()

        if depth := os.environ.get("C4PY_MAX_CALL_DEPTH"):
            try:
                value = int(depth)
                if value < 1:
                    raise ValueError(depth)
                options.max_call_depth = value
            except ValueError:
                logger.warning(f"Ignoring invalid C4PY_MAX_CALL_DEPTH: {depth!r}")

        if newline := os.environ.get("C4PY_TRAILING_NEWLINE"):
            word = newline.strip().lower()
            if word in TRUE_WORDS:
                options.trailing_newline = True
            elif word in FALSE_WORDS:
                options.trailing_newline = False
            else:
                logger.warning(f"Ignoring invalid C4PY_TRAILING_NEWLINE: {newline!r}")

        return options


@dataclass
class RunResult:
    """
    Result of running a program.

    Attributes:
        filename: Source filename
        exit_code: main()'s return value converted to int
        output: Text written by print (empty when a sink was supplied)
        token_count: Number of tokens lexed (including EOF)
        program: The parsed AST
    """
    filename: str = ""
    exit_code: int = 0
    output: str = ""
    token_count: int = 0
    program: Optional[ProgramNode] = None


class Interpreter:
    """
    Mini-C interpreter.

    Example:
        interpreter = Interpreter()
        result = interpreter.run_file("fact.c")
        print(result.output, end="")

    Attributes:
        options: Interpreter configuration options
    """

    def __init__(self, options: Optional[InterpreterOptions] = None):
        self.options = options or InterpreterOptions()

    def run_source(
        self,
        source: str,
        filename: str = "<input>",
        print_sink: Optional[PrintSink] = None,
    ) -> RunResult:
        """
        Lex, parse and run Mini-C source code.

        Args:
            source: Mini-C source code string
            filename: Source filename for error messages
            print_sink: Receives print output; if None, output is
                        captured into RunResult.output

        Returns:
            RunResult with the exit code and captured output

        Raises:
            MiniCError: If the program fails to lex, parse or run
        """
        result = RunResult(filename=filename)
        source_lines = source.splitlines()

        # Stage 1: Lexical analysis
        tokens = self._lex(source, filename)
        result.token_count = len(tokens)

        # Stage 2: Parsing
        program = self._parse(tokens, filename, source_lines)
        result.program = program

        # Stage 3: Linking
        functions = link_functions(program, source_lines)

        # Stage 4: Evaluation
        captured: list[str] = []
        sink = print_sink if print_sink is not None else captured.append
        try:
            result.exit_code = self._evaluate(functions, sink)
        except MiniCError as e:
            raise e.with_source_line(self._source_line(source_lines, e.location))
        finally:
            result.output = "".join(captured)

        logger.debug(f"{filename}: main returned {result.exit_code}")
        return result

    def run_file(self, filepath: str, print_sink: Optional[PrintSink] = None) -> RunResult:
        """
        Run a Mini-C source file.

        Raises:
            MiniCError: If the program fails to lex, parse or run
            FileNotFoundError: If source file not found
        """
        path = Path(filepath)
        if not path.exists():
            raise FileNotFoundError(f"Source file not found: {filepath}")

        source = path.read_text(encoding="utf-8")
        return self.run_source(source, str(filepath), print_sink)

    def tokenize(self, source: str, filename: str = "<input>") -> list[CToken]:
        """Lex only (used by 'c4run --tokens')."""
        return self._lex(source, filename)

    def parse(self, source: str, filename: str = "<input>") -> ProgramNode:
        """Lex and parse only (used by 'c4run --ast')."""
        return self._parse(self._lex(source, filename), filename, source.splitlines())

    def _lex(self, source: str, filename: str) -> list[CToken]:
        """Tokenize source."""
        tokens = list(CLexer(source, filename).tokenize())
        logger.debug(f"{filename}: {len(tokens)} tokens")
        return tokens

    def _parse(self, tokens: list[CToken], filename: str, source_lines: list[str]) -> ProgramNode:
        """Parse tokens into AST."""
        program = CParser(tokens, filename, source_lines).parse()
        logger.debug(f"{filename}: parsed {len(program.functions)} function(s)")
        return program

    def _evaluate(self, functions: FunctionTable, print_sink: PrintSink) -> int:
        """Run main()."""
        evaluator = Evaluator(
            functions,
            print_sink,
            max_call_depth=self.options.max_call_depth,
            trailing_newline=self.options.trailing_newline,
        )
        return evaluator.run_main()

    @staticmethod
    def _source_line(source_lines: list[str], location: Optional[SourceLocation]) -> Optional[str]:
        if location is not None and 0 < location.line <= len(source_lines):
            return source_lines[location.line - 1]
        return None


# =============================================================================
# Convenience Functions
# =============================================================================

def run_c(
    source: str,
    filename: str = "<input>",
    options: Optional[InterpreterOptions] = None,
    print_sink: Optional[PrintSink] = None,
) -> RunResult:
    """
    Run Mini-C source code.

    This is the primary high-level interface for running Mini-C.

    Args:
        source: Mini-C source code
        filename: Source filename for error messages
        options: Interpreter configuration (defaults if None)
        print_sink: Receives print output (captured if None)

    Returns:
        RunResult with exit code and output

    Raises:
        MiniCError: If the program fails to lex, parse or run

    Example:
        >>> run_c('int main() { print(6 * 7); return 0; }').output
        '42\\n'
    """
    return Interpreter(options).run_source(source, filename, print_sink)


def run_file(filepath: str, options: Optional[InterpreterOptions] = None) -> RunResult:
    """Run a Mini-C source file, capturing its output."""
    return Interpreter(options).run_file(filepath)

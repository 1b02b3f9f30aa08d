"""
c4run - Mini-C Interpreter Command-Line Interface
=================================================

This module implements the command-line interface for the Mini-C
interpreter. It runs a program, writes its print output to stdout, and
exits with main()'s return value.

Usage Examples
--------------
Run a program:
    $ c4run fact.c

Show the token stream or the AST instead of running:
    $ c4run --tokens fact.c
    $ c4run --ast fact.c

Limit recursion depth:
    $ c4run --max-depth 200 fact.c

Verbose mode (debug logging to stderr):
    $ c4run -v fact.c
"""

import logging
import sys
from pathlib import Path
from typing import Optional

import click

from c4py import __version__
from c4py.cli.errors import handle_cli_exception
from c4py.minic import Interpreter, InterpreterOptions
from c4py.minic.ast import ASTPrinter


def setup_logging(verbose: bool) -> None:
    """Configure logging based on verbosity."""
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(levelname)s: %(message)s" if verbose else "%(message)s",
    )


def write_output(text: str) -> None:
    """Print sink: program output goes straight to stdout."""
    click.echo(text, nl=False)


# =============================================================================
# CLI Definition
# =============================================================================

@click.command()
@click.argument(
    "input_file",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
)
@click.option(
    "--ast",
    is_flag=True,
    help="Print AST and exit (for debugging)",
)
@click.option(
    "--tokens",
    is_flag=True,
    help="Print the token stream and exit",
)
@click.option(
    "--max-depth",
    type=click.IntRange(min=1),
    default=None,
    help="Maximum call depth (default: 1000, or C4PY_MAX_CALL_DEPTH)",
)
@click.option(
    "--no-result",
    is_flag=True,
    help="Do not print the 'Program result' line",
)
@click.option(
    "-v", "--verbose",
    is_flag=True,
    help="Verbose output",
)
@click.version_option(version=__version__, prog_name="c4run")
def main(
    input_file: Path,
    ast: bool,
    tokens: bool,
    max_depth: Optional[int],
    no_result: bool,
    verbose: bool,
) -> None:
    """
    Run a Mini-C program.

    INPUT_FILE is the Mini-C source file (.c) to run.

    The program's print output is written to stdout, followed by a
    "Program result: N" line. The exit status is N & 0xFF.

    \b
    Examples:
        c4run fact.c                 # Run and show the result
        c4run --ast fact.c           # Dump the AST
        c4run --tokens fact.c        # Dump the tokens
        c4run --no-result fact.c     # Program output only

    \b
    Exit codes:
        0-255  main()'s return value & 0xFF
        1      lex, parse or runtime error (also a result of 1)
        2      invalid arguments or unreadable file
        3      internal error
    """
    setup_logging(verbose)

    options = InterpreterOptions.from_env()
    if max_depth is not None:
        options.max_call_depth = max_depth

    try:
        source = input_file.read_text(encoding="utf-8")
        interpreter = Interpreter(options)

        if tokens:
            for token in interpreter.tokenize(source, str(input_file)):
                click.echo(repr(token))
            return

        if ast:
            program = interpreter.parse(source, str(input_file))
            click.echo(ASTPrinter().print(program))
            return

        if verbose:
            click.echo(f"Running {input_file} (max call depth {options.max_call_depth})", err=True)

        result = interpreter.run_source(source, str(input_file), print_sink=write_output)

        if verbose:
            click.echo(f"Tokenized: {result.token_count} tokens", err=True)

        if not no_result:
            click.echo(f"\nProgram result: {result.exit_code}")

        sys.exit(result.exit_code & 0xFF)

    except Exception as e:
        handle_cli_exception(e, verbose=verbose)


if __name__ == "__main__":
    main()

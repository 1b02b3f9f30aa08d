"""
Shared pytest fixtures for the c4py test suite.
"""

from pathlib import Path

import pytest

from c4py.minic import InterpreterOptions, RunResult, run_c


EXAMPLES_DIR = Path(__file__).parent.parent / "examples"

FEATURES_OUTPUT = (
    "\n"
    "====== Testing all features ======\n"
    "________Print string________\n"
    "Hello, world!\n"
    "________Function calls (no args, two args)________\n"
    "12\n"
    "120\n"
    "________Casting________\n"
    "123\n"
    "________Arithmetic________\n"
    "6\n"
    "3\n"
    "1\n"
    "________Unary minus and logical not________\n"
    "-5\n"
    "1\n"
    "0\n"
    "________Comparisons________\n"
    "1\n"
    "1\n"
    "1\n"
    "1\n"
    "0\n"
    "1\n"
    "________Conditional operator________\n"
    "100\n"
    "200\n"
    "________Bitwise________\n"
    "2\n"
    "7\n"
    "5\n"
    "________Shifts________\n"
    "16\n"
    "4\n"
    "________sizeof________\n"
    "4\n"
    "1\n"
    "________Char literal________\n"
    "90\n"
    "________Pointers________\n"
    "42\n"
    "________While loop again________\n"
    "0\n"
    "1\n"
    "2\n"
    "________Simple float literals________\n"
    "3.14\n"
    "0.0\n"
    "2.71828\n"
    "________Float arithmetic________\n"
    "4.0\n"
    "3.75\n"
    "9.0\n"
    "4.5\n"
)


@pytest.fixture
def run():
    """Run a complete program, returning the RunResult."""
    def _run(source: str, **options) -> RunResult:
        return run_c(source, "test.c", InterpreterOptions(**options))
    return _run


@pytest.fixture
def run_main(run):
    """Run statements as the body of 'int main()'; returns the print output."""
    def _run_main(body: str, **options) -> str:
        return run("int main() {\n" + body + "\nreturn 0;\n}\n", **options).output
    return _run_main


@pytest.fixture
def features_path() -> Path:
    """The all-features example program."""
    return EXAMPLES_DIR / "test_all_features.c"


@pytest.fixture
def features_output() -> str:
    """Exact print output of the all-features example program."""
    return FEATURES_OUTPUT

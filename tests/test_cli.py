"""
c4run Command-Line Interface Tests
==================================

Runs the c4run command through click's CliRunner and checks output
and exit codes.
"""

import pytest
from click.testing import CliRunner

from c4py import __version__
from c4py.cli.c4run import main
from c4py.cli.errors import ExitCode
from c4py.minic.interpreter import Interpreter


@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture
def write_program(tmp_path):
    """Write source to a .c file and return its path as a string."""
    def write(source: str, name: str = "prog.c") -> str:
        path = tmp_path / name
        path.write_text(source, encoding="utf-8")
        return str(path)
    return write


class TestRun:
    """Tests for running programs."""

    def test_example_program(self, runner, features_path, features_output):
        result = runner.invoke(main, [str(features_path)])
        assert result.exit_code == 42
        assert result.output == features_output + "\nProgram result: 42\n"

    def test_no_result(self, runner, write_program):
        path = write_program('int main() { print("hi\\n"); return 0; }')
        result = runner.invoke(main, ["--no-result", path])
        assert result.exit_code == 0
        assert result.output == "hi\n"

    def test_exit_status_is_low_byte(self, runner, write_program):
        result = runner.invoke(main, [write_program("int main() { return 300; }")])
        assert result.exit_code == 44
        assert "Program result: 300" in result.output

    def test_env_trailing_newline(self, runner, write_program, monkeypatch):
        monkeypatch.setenv("C4PY_TRAILING_NEWLINE", "0")
        path = write_program("int main() { print(1); print(2); return 0; }")
        result = runner.invoke(main, ["--no-result", path])
        assert result.output == "12"

    def test_verbose(self, runner, write_program):
        path = write_program("int main() { return 0; }")
        result = runner.invoke(main, ["-v", path])
        assert result.exit_code == 0
        assert f"Running {path} (max call depth 1000)" in result.output
        assert "Tokenized: 10 tokens" in result.output


class TestDumps:
    """Tests for --tokens and --ast."""

    def test_tokens(self, runner, features_path):
        result = runner.invoke(main, ["--tokens", str(features_path)])
        assert result.exit_code == 0
        lines = result.output.splitlines()
        assert lines[0].startswith("Token(INT")
        assert lines[0].endswith("4:1)")
        assert lines[-1].startswith("Token(EOF")

    def test_ast(self, runner, features_path):
        result = runner.invoke(main, ["--ast", str(features_path)])
        assert result.exit_code == 0
        assert result.output.startswith("Program\n")
        assert "Function: int sum(int a, int b)" in result.output
        assert "Function: int main()" in result.output
        assert "Program result" not in result.output


class TestErrors:
    """Tests for error reporting and exit codes."""

    def test_runtime_error(self, runner, write_program):
        path = write_program("int main() {\n    print(1);\n    return 1 / 0;\n}\n")
        result = runner.invoke(main, [path])
        assert result.exit_code == ExitCode.PROGRAM_ERROR
        assert result.output.startswith("1\n")
        assert f"{path}:3:12: error: integer division by zero" in result.output
        assert "Program result" not in result.output

    def test_parse_error(self, runner, write_program):
        path = write_program("int main() { return 0 }\n")
        result = runner.invoke(main, [path])
        assert result.exit_code == ExitCode.PROGRAM_ERROR
        assert "error:" in result.output

    def test_nesting_too_deep(self, runner, write_program):
        depth = 100000
        path = write_program("int main() { return " + "(" * depth + "0" + ")" * depth + "; }\n")
        result = runner.invoke(main, [path])
        assert result.exit_code == ExitCode.PROGRAM_ERROR
        assert "error: expression nested too deeply" in result.output
        assert "Internal error" not in result.output

    def test_depth_limit_option(self, runner, write_program):
        path = write_program(
            "int f(int n) { return f(n + 1); }\nint main() { return f(0); }\n"
        )
        result = runner.invoke(main, ["--max-depth", "10", path])
        assert result.exit_code == ExitCode.PROGRAM_ERROR
        assert "call depth limit of 10 exceeded" in result.output

    def test_invalid_depth(self, runner, write_program):
        path = write_program("int main() { return 0; }")
        result = runner.invoke(main, ["--max-depth", "0", path])
        assert result.exit_code == ExitCode.INVALID_ARGS

    def test_missing_file(self, runner, tmp_path):
        result = runner.invoke(main, [str(tmp_path / "absent.c")])
        assert result.exit_code == ExitCode.INVALID_ARGS

    def test_internal_error(self, runner, write_program, monkeypatch):
        def broken(self, *args, **kwargs):
            raise RuntimeError("boom")

        monkeypatch.setattr(Interpreter, "run_source", broken)
        result = runner.invoke(main, [write_program("int main() { return 0; }")])
        assert result.exit_code == ExitCode.INTERNAL_ERROR
        assert "Internal error: boom" in result.output


class TestInfo:
    """Tests for --help and --version."""

    def test_version(self, runner):
        result = runner.invoke(main, ["--version"])
        assert result.exit_code == 0
        assert result.output == f"c4run, version {__version__}\n"

    def test_help(self, runner):
        result = runner.invoke(main, ["--help"])
        assert result.exit_code == 0
        assert "INPUT_FILE" in result.output
        assert "--max-depth" in result.output

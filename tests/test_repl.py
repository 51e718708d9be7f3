"""
Tests for the interactive shell.
"""

import io
import pytest
from catlang.repl import Shell, PROMPT
from catlang.runtime import Environment, int_val


def run_session(text: str, **kwargs) -> str:
    """Feed lines to a shell and return everything it wrote."""
    stdout = io.StringIO()
    shell = Shell(color=kwargs.pop("color", False), stdin=io.StringIO(text),
                  stdout=stdout, **kwargs)
    shell.cmdloop(intro="")
    return stdout.getvalue()


class TestShellSession:
    """Test line-by-line evaluation."""

    def test_prints_value(self):
        out = run_session("1 + 2\n")
        assert "3\n" in out

    def test_let_prints_nothing(self):
        out = run_session("let x = 1;\n")
        assert out == PROMPT + PROMPT + "\n"

    def test_bindings_persist_between_lines(self):
        out = run_session("let a = 5;\na * 2\n")
        assert "10\n" in out

    def test_closures_persist_between_lines(self):
        source = "let newAdder = fn(x) { fn(y) { x + y } };\nlet addTwo = newAdder(2);\naddTwo(3)\n"
        out = run_session(source)
        assert out.endswith("5\n" + PROMPT + "\n")

    def test_shared_environment(self):
        env = Environment()
        run_session("let answer = 42;\n", environment=env)
        assert env.get("answer") == int_val(42)

    def test_displays_strings_raw(self):
        out = run_session('"hello" + " " + "cat"\n')
        assert "hello cat\n" in out

    def test_null_result(self):
        out = run_session("if (false) { 1 }\n")
        assert "null\n" in out

    def test_puts_writes_to_shell_stream(self, capsys):
        out = run_session('puts("hi", 2)\n')
        assert out == PROMPT + "hi\n2\nnull\n" + PROMPT + "\n"
        assert capsys.readouterr().out == ""


class TestShellErrors:
    """Test error display."""

    def test_parser_errors(self):
        """Syntax errors are listed under a header, one tab-indented line each."""
        out = run_session("let = 5; let y 10;\n")
        assert "parser errors:\n" in out
        assert "\t1:5: error[E101]: expected next token to be IDENT, got = instead\n" in out
        assert "\t1:16: error[E101]: expected next token to be =, got INT instead\n" in out

    def test_parse_error_line_not_evaluated(self):
        env = Environment()
        run_session("let a = 1; let = 2;\n", environment=env)
        assert env.get("a") is None

    def test_evaluation_error(self):
        out = run_session("1 + true\n")
        assert "ERROR: type mismatch: INTEGER + BOOLEAN\n" in out

    def test_error_does_not_end_session(self):
        out = run_session("nope\n7\n")
        assert "ERROR: identifier not found: nope\n" in out
        assert "7\n" in out

    def test_errors_colored(self, monkeypatch):
        monkeypatch.setattr("catlang.repl.colored", lambda text, color: f"<{color}>{text}")
        out = run_session("-true\n", color=True)
        assert "<red>ERROR: unknown operator: -BOOLEAN" in out

    def test_parser_errors_colored(self, monkeypatch):
        monkeypatch.setattr("catlang.repl.colored", lambda text, color: f"<{color}>{text}")
        out = run_session("let = 1;\n", color=True)
        assert "<red>parser errors:" in out

    def test_values_not_colored(self, monkeypatch):
        monkeypatch.setattr("catlang.repl.colored", lambda text, color: f"<{color}>{text}")
        out = run_session("5\n", color=True)
        assert "<red>" not in out

    def test_no_color(self):
        out = run_session("-true\n", color=False)
        assert "\x1b[" not in out


class TestShellControl:
    """Test shell commands and input handling."""

    def test_exit(self):
        out = run_session("exit\n1 + 1\n")
        assert "2\n" not in out

    def test_eof_ends_session(self):
        out = run_session("")
        assert out == PROMPT + "\n"

    def test_empty_line_does_nothing(self):
        out = run_session("3\n\n")
        assert out.count("3\n") == 1

    def test_help(self):
        out = run_session("help\n")
        assert "Built-in functions:" in out
        assert "  push   Append a value to an array in place; returns the new length.\n" in out

    def test_help_for_one_builtin(self):
        out = run_session("help first\n")
        assert "first: First element of an array, or null if empty.\n" in out

    def test_help_unknown_name(self):
        out = run_session("help nope\n")
        assert "no built-in function named 'nope'" in out

    @pytest.mark.parametrize("name", ["help", "exit", "EOF"])
    def test_command_words_as_bindings(self, name):
        """A line that merely starts with a command word is evaluated as source."""
        out = run_session(f"let {name} = fn(x) {{ x * 2 }};\n{name}(21)\n")
        assert "42\n" in out
        assert "Built-in functions" not in out

    def test_exit_with_trailing_space(self):
        out = run_session("exit  \n1 + 1\n")
        assert "2\n" not in out

    def test_prompt_from_environment(self, monkeypatch):
        monkeypatch.setenv("CAT_PROMPT", "cat> ")
        out = run_session("1\n")
        assert out.startswith("cat> ")

    @pytest.mark.parametrize("line", ["(1 + 2)", "-3 + 6", "[3][0]"])
    def test_lines_not_starting_with_identifier(self, line):
        out = run_session(line + "\n")
        assert "3\n" in out

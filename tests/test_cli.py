"""
Tests for the treelox command-line shell.
"""

import io
import json

import pytest
from treelox import DiagnosticCollector, Interpreter
from treelox.__main__ import PosixExit, main, run_prompt
from treelox.config import CONFIG_ENV_VAR, Settings


@pytest.fixture(autouse=True)
def no_env_config(monkeypatch):
    monkeypatch.delenv(CONFIG_ENV_VAR, raising=False)


def write_script(tmp_path, source, name="script.lox"):
    path = tmp_path / name
    path.write_text(source)
    return str(path)


class TestRunFile:
    """Test running script files."""

    def test_success(self, tmp_path, capsys):
        """A valid script prints its output and exits 0."""
        script = write_script(tmp_path, 'var x = 1; { var x = 2; print x; } print x;')
        assert main([script]) == PosixExit.OK
        assert capsys.readouterr().out == "2\n1\n"

    def test_syntax_error_exit_code(self, tmp_path, capsys):
        """Syntax errors exit 65 and print to stderr."""
        script = write_script(tmp_path, "print 1;\nprint ;")
        assert main([script]) == 65
        captured = capsys.readouterr()
        assert captured.out == ""
        assert "[line 2] Error at ';': Expect expression." in captured.err

    def test_runtime_error_exit_code(self, tmp_path, capsys):
        """Runtime errors exit 70 after partial output."""
        script = write_script(tmp_path, "print 1;\nprint 1 / 0;\nprint 2;")
        assert main([script]) == 70
        captured = capsys.readouterr()
        assert captured.out == "1\n"
        assert "Division by zero.\n[line 2]" in captured.err

    def test_missing_file(self, tmp_path, capsys):
        """An unreadable script exits 66."""
        assert main([str(tmp_path / "absent.lox")]) == 66
        assert "cannot read" in capsys.readouterr().err

    def test_not_utf8(self, tmp_path, capsys):
        """A script that is not UTF-8 exits 66."""
        path = tmp_path / "latin1.lox"
        path.write_bytes(b'print "\xff";')
        assert main([str(path)]) == 66
        assert "not valid UTF-8" in capsys.readouterr().err

    def test_deep_nesting_is_syntax_error(self, tmp_path, capsys):
        """Parentheses nested past the parser's depth exit 65."""
        script = write_script(tmp_path, "print " + "(" * 500 + "1" + ")" * 500 + ";")
        assert main([script]) == 65
        err = capsys.readouterr().err
        assert "Expression nested too deeply." in err
        assert "Traceback" not in err

    def test_deep_evaluation_is_runtime_error(self, tmp_path, capsys):
        """An operator chain too long to evaluate exits 70."""
        script = write_script(tmp_path, "print " + " + ".join(["1"] * 5000) + ";")
        assert main([script]) == 70
        assert "Expression nested too deeply.\n[line 1]" in capsys.readouterr().err

    def test_too_many_arguments(self, capsys):
        """More than one script prints usage and exits 64."""
        assert main(["a.lox", "b.lox"]) == 64
        assert capsys.readouterr().out == "Usage: treelox [script]\n"


class TestPrintAst:
    """Test --print-ast."""

    def test_lisp(self, tmp_path, capsys):
        """Lisp style prints each statement."""
        script = write_script(tmp_path, "print -123 * (45.67);\nvar a;")
        assert main(["--print-ast", "lisp", script]) == 0
        assert capsys.readouterr().out == "(print (* (- 123.0) (group 45.67)))\n(var a)\n"

    def test_rpn(self, tmp_path, capsys):
        """Reverse Polish style prints each expression."""
        script = write_script(tmp_path, "1 + 2; { print 3 * 4; }")
        assert main(["--print-ast", "rpn", script]) == 0
        assert capsys.readouterr().out == "1.0 2.0 +\n3.0 4.0 *\n"

    def test_tree(self, tmp_path, capsys):
        """Tree style prints the directory listing."""
        script = write_script(tmp_path, "1 + 2;")
        assert main(["--print-ast", "tree", script]) == 0
        assert capsys.readouterr().out == "+\n├ 1.0\n└ 2.0\n"

    def test_does_not_execute(self, tmp_path, capsys):
        """Printing the tree runs nothing."""
        script = write_script(tmp_path, "print 1 / 0;")
        assert main(["--print-ast", "lisp", script]) == 0
        assert capsys.readouterr().err == ""

    def test_syntax_error(self, tmp_path):
        """Syntax errors still exit 65."""
        script = write_script(tmp_path, "print ;")
        assert main(["--print-ast", "tree", script]) == 65

    @pytest.mark.parametrize("style", ["lisp", "rpn", "tree"])
    def test_tree_too_deep_to_print(self, tmp_path, capsys, style):
        """A tree too deep to render exits 70 without output."""
        script = write_script(tmp_path, " + ".join(["1"] * 5000) + ";")
        assert main(["--print-ast", style, script]) == 70
        captured = capsys.readouterr()
        assert captured.out == ""
        assert "nested too deeply" in captured.err


class TestConfig:
    """Test settings handling in the shell."""

    def test_detailed_diagnostics(self, tmp_path, capsys):
        """The detailed style shows the error code and source line."""
        config = write_script(tmp_path, "diagnostic_style: detailed\n", name="cfg.yaml")
        script = write_script(tmp_path, "print ;")
        assert main(["--config", config, script]) == 65
        err = capsys.readouterr().err
        assert "error[E101]: Expect expression." in err
        assert "print ;" in err

    def test_json_diagnostics(self, tmp_path, capsys):
        """The json style prints one JSON object per diagnostic."""
        config = write_script(tmp_path, "diagnostic_style: json\n", name="cfg.yaml")
        script = write_script(tmp_path, "print ;\nprint 1 +;")
        assert main(["--config", config, script]) == 65
        lines = capsys.readouterr().err.splitlines()
        records = [json.loads(line) for line in lines]
        assert [r["line"] for r in records] == [1, 2]
        assert records[0]["code"] == "E101"
        assert records[0]["message"] == "Expect expression."

    def test_bad_config_exit_code(self, tmp_path, capsys):
        """A bad settings file exits 78."""
        config = write_script(tmp_path, "nonsense: 1\n", name="cfg.yaml")
        script = write_script(tmp_path, "print 1;")
        assert main(["--config", config, script]) == 78
        assert "nonsense" in capsys.readouterr().err

    def test_config_from_environment(self, tmp_path, capsys, monkeypatch):
        """TREELOX_CONFIG is used when --config is absent."""
        config = write_script(tmp_path, "diagnostic_style: detailed\n", name="cfg.yaml")
        monkeypatch.setenv(CONFIG_ENV_VAR, config)
        script = write_script(tmp_path, "print ;")
        assert main([script]) == 65
        assert "error[E101]" in capsys.readouterr().err


class TestPrompt:
    """Test the interactive prompt."""

    def run_lines(self, text, settings=None):
        stdin = io.StringIO(text)
        stdout = io.StringIO()
        diagnostics = DiagnosticCollector()
        interpreter = Interpreter(output=stdout, diagnostics=diagnostics)
        code = run_prompt(interpreter, diagnostics, settings or Settings(),
                          stdin=stdin, stdout=stdout)
        return code, stdout.getvalue()

    def test_state_persists_between_lines(self):
        """Variables survive from one line to the next."""
        code, out = self.run_lines("var a = 1;\nprint a + 1;\n")
        assert code == 0
        assert out == "> > 2\n> "

    def test_error_does_not_end_session(self):
        """A syntax error on one line does not block the next."""
        _, out = self.run_lines("print ;\nprint 2;\n")
        assert out == "> > 2\n> "

    def test_runtime_error_does_not_end_session(self):
        """A runtime error on one line does not block the next."""
        _, out = self.run_lines("print -nil;\nprint 3;\n")
        assert out == "> > 3\n> "

    def test_custom_prompt(self):
        """The prompt comes from settings."""
        _, out = self.run_lines("", Settings(prompt="lox> "))
        assert out == "lox> "

    def test_prompt_from_main(self, monkeypatch, capsys):
        """With no script, main reads stdin until EOF."""
        monkeypatch.setattr("sys.stdin", io.StringIO("print 5;\n"))
        assert main([]) == 0
        assert capsys.readouterr().out == "> 5\n> "

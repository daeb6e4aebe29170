"""
CLI Test Suite
==============

Tests for the kaleido command-line tool.
"""

from click.testing import CliRunner

from kaleidoscope import __version__
from kaleidoscope.cli.errors import ExitCode
from kaleidoscope.cli.kaleido import main


class TestKaleidoCLI:
    """Tests for the kaleido CLI tool."""

    def test_cli_help(self):
        runner = CliRunner()
        result = runner.invoke(main, ["--help"])

        assert result.exit_code == 0
        assert "Parse Kaleidoscope source" in result.output

    def test_cli_version(self):
        runner = CliRunner()
        result = runner.invoke(main, ["--version"])

        assert result.exit_code == 0
        assert __version__ in result.output

    def test_cli_stdin(self):
        runner = CliRunner()
        result = runner.invoke(main, [], input="def f(x) x+1;\nextern g(a);\nf(2)\n")

        assert result.exit_code == ExitCode.SUCCESS
        assert "Parsed a function definition." in result.output
        assert "Parsed an extern" in result.output
        assert "Parsed a top-level expr" in result.output

    def test_cli_no_prompt_when_piped(self):
        runner = CliRunner()
        result = runner.invoke(main, [], input="1\n")

        assert "ready> " not in result.output

    def test_cli_prompt(self):
        runner = CliRunner()
        result = runner.invoke(main, ["--prompt", "always"], input="1;2\n")

        # One prompt before each unit plus the final one at end of input
        assert result.output.count("ready> ") == 3

    def test_cli_custom_prompt(self):
        runner = CliRunner()
        result = runner.invoke(main, ["--prompt", "always", "--prompt-text", "k> "], input="1\n")

        assert "k> " in result.output

    def test_cli_file(self, tmp_path):
        source_file = tmp_path / "prog.kal"
        source_file.write_text("extern sin(x)\n")

        runner = CliRunner()
        result = runner.invoke(main, [str(source_file)])

        assert result.exit_code == 0
        assert "Parsed an extern" in result.output

    def test_cli_missing_file(self, tmp_path):
        runner = CliRunner()
        result = runner.invoke(main, [str(tmp_path / "missing.kal")])

        assert result.exit_code == 2

    def test_cli_parse_error(self):
        runner = CliRunner()
        result = runner.invoke(main, [], input="foo(1,2\n")

        assert result.exit_code == ExitCode.PARSE_ERROR
        assert "error: Expected ')' or ',' in argument list" in result.output

    def test_cli_recovers_and_continues(self):
        runner = CliRunner()
        result = runner.invoke(main, [], input=") 1+2\n")

        assert result.exit_code == ExitCode.PARSE_ERROR
        assert "error: unknown token when expecting an expression" in result.output
        assert "Parsed a top-level expr" in result.output

    def test_cli_ast(self):
        runner = CliRunner()
        result = runner.invoke(main, ["--ast"], input="def sq(x) x*x\n")

        assert result.exit_code == 0
        assert "Function: sq(x)" in result.output
        assert "  BinaryOp: *" in result.output

    def test_cli_source(self):
        runner = CliRunner()
        result = runner.invoke(main, ["--source"], input="1+2*3\n")

        assert result.exit_code == 0
        assert "(1.0 + (2.0 * 3.0))" in result.output

    def test_cli_comments_ignored(self):
        runner = CliRunner()
        result = runner.invoke(main, ["--source"], input="1 #comment\n+2\n")

        assert "(1.0 + 2.0)" in result.output

    def test_cli_source_long_chain(self):
        runner = CliRunner()
        result = runner.invoke(main, ["--source", "--ast"], input="+".join(["1"] * 2000) + "\n")

        assert result.exit_code == ExitCode.SUCCESS
        assert "(" * 1999 + "1.0 + 1.0)" in result.output

    def test_cli_deep_nesting_reports_error(self):
        runner = CliRunner()
        result = runner.invoke(main, [], input="(" * 2000 + "\n")

        assert result.exit_code == ExitCode.PARSE_ERROR
        assert "error: expression nested too deeply" in result.output

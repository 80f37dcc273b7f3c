"""
Tests for cmlex - Token Dump Tool
=================================

These tests run the click command in-process with CliRunner.
"""

import logging
from pathlib import Path

import pytest
from click.testing import CliRunner

from cmasm import __version__
from cmasm.assembler import Token, TokenType
from cmasm.cli.cmlex import format_token, main
from cmasm.cli.errors import ExitCode
from cmasm.errors import Position


@pytest.fixture(autouse=True)
def isolate_logging_and_env(monkeypatch):
    """cmlex reconfigures root logging; put it back after each test."""
    for name in (
        "CMASM_DIRECTIVES",
        "CMASM_ENCODING",
        "CMASM_LOG_LEVEL",
        "CMASM_MAX_DIAGNOSTICS",
    ):
        monkeypatch.delenv(name, raising=False)

    root = logging.getLogger()
    level = root.level
    yield
    # basicConfig() leaves a plain StreamHandler on the runner's stderr
    for handler in root.handlers[:]:
        if type(handler) is logging.StreamHandler:
            root.removeHandler(handler)
    root.setLevel(level)


def run(args, source=b"main halt\n"):
    """Write source to prog.asm in a scratch directory and run cmlex."""
    runner = CliRunner()
    with runner.isolated_filesystem():
        Path("prog.asm").write_bytes(source)
        result = runner.invoke(main, args + ["prog.asm"])
        written = Path("out.tok").read_text() if Path("out.tok").exists() else None
    return result, written


def token_types(output: str) -> list[str]:
    """Token type column of every dump line."""
    return [line.split()[1] for line in output.splitlines() if line.strip()]


# =============================================================================
# Formatting
# =============================================================================

class TestFormatToken:
    """Tests for the dump line format."""

    def test_format(self):
        """Position, type and quoted lexeme."""
        token = Token(TokenType.OPERAND_OFFSET, "42", Position(1, 3))
        assert format_token(token) == "     1:3   OPERAND_OFFSET '42'"

    def test_hide_comment(self):
        """Comment text can be suppressed."""
        token = Token(TokenType.EOL, "; note", Position(1, 0))
        assert format_token(token).endswith("'; note'")
        assert format_token(token, show_comments=False).endswith("''")

    def test_hide_comment_only_affects_eol(self):
        """Other tokens keep their lexeme."""
        token = Token(TokenType.LABEL, "main", Position(1, 1))
        assert format_token(token, show_comments=False).endswith("'main'")


# =============================================================================
# Command
# =============================================================================

class TestCmlex:
    """Tests for the cmlex command."""

    def test_help(self):
        """--help describes the command."""
        result = CliRunner().invoke(main, ["--help"])
        assert result.exit_code == 0
        assert "Tokenize Cm assembly source" in result.output
        assert "--no-eol" in result.output

    def test_version(self):
        """--version prints the package version."""
        result = CliRunner().invoke(main, ["--version"])
        assert result.exit_code == 0
        assert __version__ in result.output

    def test_dump(self):
        """Clean source dumps every token and exits 0."""
        result, _ = run([])
        assert result.exit_code == ExitCode.SUCCESS, result.output
        assert token_types(result.output) == ["LABEL", "MNEMONIC", "EOL", "EOF"]
        assert "'main'" in result.output
        assert "'halt'" in result.output

    def test_no_eol(self):
        """--no-eol removes EOL lines."""
        result, _ = run(["--no-eol"], b"main halt ; hi\n")
        assert result.exit_code == 0
        assert token_types(result.output) == ["LABEL", "MNEMONIC", "EOF"]

    def test_no_comments(self):
        """--no-comments blanks comment text."""
        result, _ = run(["--no-comments"], b"  halt ; secret\n")
        assert result.exit_code == 0
        assert "secret" not in result.output

    def test_diagnostics_exit_code(self):
        """Recorded diagnostics are reported and exit with 1."""
        result, _ = run([], b"  ha#lt\n")
        assert result.exit_code == ExitCode.BUILD_ERROR
        assert "invalid character" in result.output
        assert "'halt'" in result.output

    def test_directive_option(self):
        """-d adds a directive."""
        result, _ = run(["-d", ".word"], b"  .word 3\n")
        assert result.exit_code == 0
        assert token_types(result.output)[0] == "DIRECTIVE"

    def test_directive_from_env(self, monkeypatch):
        """CMASM_DIRECTIVES is honored."""
        monkeypatch.setenv("CMASM_DIRECTIVES", ".byte")
        result, _ = run([], b"  .byte 3\n")
        assert token_types(result.output)[0] == "DIRECTIVE"

    def test_output_file(self):
        """-o writes the dump to a file."""
        result, written = run(["-o", "out.tok"])
        assert result.exit_code == 0
        assert written is not None
        assert token_types(written) == ["LABEL", "MNEMONIC", "EOL", "EOF"]

    def test_verbose(self):
        """-v reports the input and token count."""
        result, _ = run(["-v"])
        assert result.exit_code == 0
        assert "Input file: prog.asm" in result.output
        assert "Tokens: 4" in result.output

    def test_missing_input(self):
        """A missing input file is a usage error."""
        result = CliRunner().invoke(main, ["nowhere.asm"])
        assert result.exit_code == ExitCode.INVALID_ARGS

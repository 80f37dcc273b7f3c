"""
Tests for positions, diagnostics and the error hierarchy
========================================================
"""

import pytest

from cmasm.errors import (
    AssemblerError,
    CmasmError,
    Diagnostic,
    DuplicateSymbolError,
    ErrorReporter,
    LexicalError,
    Position,
    SourceReadError,
)


# =============================================================================
# Position
# =============================================================================

class TestPosition:
    """Tests for Position."""

    def test_str(self):
        """Formatted as filename:line:index."""
        assert str(Position(3, 2, "hello.asm")) == "hello.asm:3:2"
        assert str(Position(1, 1)) == "<input>:1:1"

    def test_equality_ignores_filename(self):
        """Filename is informational only."""
        assert Position(1, 2, "a.asm") == Position(1, 2, "b.asm")
        assert Position(1, 2) != Position(1, 3)

    def test_frozen(self):
        """Positions are immutable."""
        position = Position(1, 1)
        with pytest.raises(AttributeError):
            position.line = 2


# =============================================================================
# Exceptions
# =============================================================================

class TestExceptions:
    """Tests for the exception hierarchy."""

    def test_hierarchy(self):
        """All errors derive from CmasmError."""
        assert issubclass(AssemblerError, CmasmError)
        assert issubclass(LexicalError, AssemblerError)
        assert issubclass(SourceReadError, AssemblerError)
        assert issubclass(DuplicateSymbolError, AssemblerError)

    def test_message_without_location(self):
        """Errors without a location start with 'error:'."""
        assert str(AssemblerError("boom")) == "error: boom"

    def test_message_with_context(self):
        """Location, source line and hint are all included."""
        error = AssemblerError(
            "invalid character",
            location=Position(3, 2, "hello.asm"),
            hint="'#' is a reserved character",
            source_line="loop  br.i8 #loop",
        )
        assert str(error).splitlines() == [
            "hello.asm:3:2: error: invalid character",
            "    loop  br.i8 #loop",
            "hint: '#' is a reserved character",
        ]

    def test_source_read_error(self):
        """SourceReadError names the file and the reason."""
        error = SourceReadError("x.asm", "No such file or directory")
        assert error.source_filename == "x.asm"
        assert error.reason == "No such file or directory"
        assert "cannot read 'x.asm': No such file or directory" in str(error)

    def test_duplicate_symbol_without_original(self):
        """No hint when the first definition is unknown."""
        error = DuplicateSymbolError("main")
        assert error.hint is None
        assert str(error) == "error: duplicate symbol 'main'"


# =============================================================================
# Diagnostics
# =============================================================================

class TestDiagnostic:
    """Tests for Diagnostic."""

    def test_str(self):
        """Diagnostics format like errors."""
        diagnostic = Diagnostic("EOL in string", Position(4, 3, "a.asm"))
        assert str(diagnostic) == "a.asm:4:3: error: EOL in string"

    def test_to_error(self):
        """A diagnostic converts to a raisable LexicalError."""
        diagnostic = Diagnostic("invalid character", Position(1, 1))
        error = diagnostic.to_error()
        assert isinstance(error, LexicalError)
        assert error.location == Position(1, 1)
        with pytest.raises(CmasmError):
            raise error


class TestErrorReporter:
    """Tests for ErrorReporter."""

    def test_empty(self):
        """A new reporter has no errors."""
        reporter = ErrorReporter()
        assert not reporter.has_errors()
        assert reporter.error_count() == 0
        assert len(reporter) == 0

    def test_record(self):
        """Recorded diagnostics are kept in order."""
        reporter = ErrorReporter()
        reporter.record_error("invalid character", Position(1, 1))
        reporter.record_error("EOL in string", Position(2, 1))
        assert reporter.has_errors()
        assert [d.message for d in reporter] == ["invalid character", "EOL in string"]

    def test_report(self):
        """report() lists every diagnostic and a count."""
        reporter = ErrorReporter()
        reporter.record_error("invalid character", Position(1, 1, "a.asm"))
        assert reporter.report() == "a.asm:1:1: error: invalid character\n\n1 error"

        reporter.record_error("invalid character", Position(1, 2, "a.asm"))
        assert reporter.report().endswith("\n2 errors")

    def test_max_errors(self):
        """Past the limit diagnostics are counted but not stored."""
        reporter = ErrorReporter(max_errors=2)
        for index in range(1, 6):
            reporter.record_error("invalid character", Position(1, index))
        assert len(reporter) == 2
        assert reporter.error_count() == 5
        assert "... 3 more not shown" in reporter.report()

    def test_record_never_raises(self):
        """Recording with a zero limit still does not raise."""
        reporter = ErrorReporter(max_errors=0)
        reporter.record_error("invalid character", Position(1, 1))
        assert reporter.has_errors()
        assert len(reporter) == 0

    def test_clear(self):
        """clear() drops stored and counted diagnostics."""
        reporter = ErrorReporter(max_errors=1)
        reporter.record_error("a", Position(1, 1))
        reporter.record_error("b", Position(1, 2))
        reporter.clear()
        assert not reporter.has_errors()

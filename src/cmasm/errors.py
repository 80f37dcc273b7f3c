"""
Cm Assembler Error Hierarchy
============================

This module defines the exception hierarchy for the Cm assembler front end,
together with the Position record and the diagnostic sink used by the lexer.
All exceptions inherit from CmasmError, allowing callers to catch all
package errors with a single except clause if desired.

Exception Hierarchy
-------------------
CmasmError (base)
└── AssemblerError (assembler-related)
    ├── LexicalError - a recorded lexical diagnostic, raised on demand
    ├── SourceReadError - source stream cannot be opened or read
    └── DuplicateSymbolError - label defined multiple times

Recoverable vs. Fatal
---------------------
Lexical problems (invalid characters, unterminated strings) never raise
while scanning. The lexer records them as Diagnostic entries in an
ErrorReporter and keeps producing tokens, so a single run reports every
problem in the file. Only resource failures (the source cannot be opened
or read) are raised, and they are raised by the byte source, not the lexer.

Error messages follow this format:
    filename:line:index: error: description
    source_line_text
    hint: suggestion for fixing (when available)

Note that the third field is the token index on the line, not a character
column.
"""

from dataclasses import dataclass, field
from typing import Iterator, Optional
import logging


logger = logging.getLogger(__name__)


# =============================================================================
# Base Exception Class
# =============================================================================

class CmasmError(Exception):
    """
    Base exception for all cmasm errors.

    All exceptions in the package inherit from this class, allowing callers
    to catch all package errors with a single except clause:

        try:
            tokens = tokenize_file("program.asm")
        except CmasmError as e:
            print(f"Error: {e}")
    """
    pass


# =============================================================================
# Source Position Tracking
# =============================================================================

@dataclass(frozen=True)
class Position:
    """
    Location of a token or diagnostic in the source.

    The immutable (frozen) design ensures positions cannot be accidentally
    modified after a token has been built.

    Attributes:
        line: Line number (1-indexed)
        token_index: Scan attempt ordinal on the line. This is NOT a
            character column: it is bumped once per scan attempt, including
            attempts swallowed by leading whitespace, and is 0 on
            end-of-line tokens.
        filename: Name of the source file (not part of equality)
    """
    line: int
    token_index: int
    filename: str = field(default="<input>", compare=False)

    def __str__(self) -> str:
        """Format as 'filename:line:index' for error messages."""
        return f"{self.filename}:{self.line}:{self.token_index}"


# =============================================================================
# Assembler Exceptions
# =============================================================================

class AssemblerError(CmasmError):
    """
    Base exception for all assembler-related errors.

    Attributes:
        message: The error description
        location: Where in the source the error occurred (optional)
        hint: A suggestion for fixing the error (optional)
        source_line: The actual source text at the error location (optional)
    """

    def __init__(
        self,
        message: str,
        location: Optional[Position] = None,
        hint: Optional[str] = None,
        source_line: Optional[str] = None,
    ):
        self.message = message
        self.location = location
        self.hint = hint
        self.source_line = source_line
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        """
        Format the error message with location, source context, and hint.

        Example output:
            hello.asm:3:2: error: invalid character
                loop  br.i8 #loop
            hint: '#' is a reserved character
        """
        parts = []

        if self.location:
            parts.append(f"{self.location}: error: {self.message}")
        else:
            parts.append(f"error: {self.message}")

        if self.source_line is not None:
            parts.append(f"    {self.source_line}")

        if self.hint:
            parts.append(f"hint: {self.hint}")

        return "\n".join(parts)


class LexicalError(AssemblerError):
    """
    Lexical error in assembly source.

    The lexer never raises this itself. It is produced from a recorded
    Diagnostic (see Diagnostic.to_error) by callers that want to stop on
    the first lexical problem.

    Examples:
        - Invalid character in source
        - String literal not closed before end of line
        - String literal not closed before end of file
    """
    pass


class SourceReadError(AssemblerError):
    """
    The source stream cannot be opened or read.

    Raised by byte sources, never by the lexer. This is the only fatal
    error of the front end.
    """

    def __init__(self, filename: str, reason: str):
        self.source_filename = filename
        self.reason = reason
        super().__init__(f"cannot read '{filename}': {reason}")


class DuplicateSymbolError(AssemblerError):
    """
    Label defined multiple times.

    Raised when a label is added to the symbol table twice. Includes
    information about the original definition location when available.
    """

    def __init__(
        self,
        symbol: str,
        location: Optional[Position] = None,
        original_location: Optional[Position] = None,
        source_line: Optional[str] = None,
    ):
        self.symbol = symbol
        self.original_location = original_location

        hint = None
        if original_location:
            hint = f"'{symbol}' was first defined at {original_location}"

        super().__init__(
            f"duplicate symbol '{symbol}'",
            location=location,
            hint=hint,
            source_line=source_line,
        )


# =============================================================================
# Diagnostics
# =============================================================================

@dataclass(frozen=True)
class Diagnostic:
    """
    A recorded, non-fatal lexical problem.

    Attributes:
        message: Human-readable message ("invalid character", ...)
        position: Where the lexer was when the problem was found
    """
    message: str
    position: Position

    def __str__(self) -> str:
        return f"{self.position}: error: {self.message}"

    def to_error(self) -> LexicalError:
        """Convert this diagnostic into a raisable LexicalError."""
        return LexicalError(self.message, self.position)


class ErrorReporter:
    """
    Collects lexical diagnostics for batch reporting.

    The lexer uses this to continue processing after encountering a
    problem, collecting everything before reporting it together. Recording
    never raises: when max_errors is set, diagnostics past the limit are
    counted but not stored.

    Example:
        reporter = ErrorReporter()
        tokens = tokenize_file("program.asm", reporter=reporter)

        if reporter.has_errors():
            print(reporter.report())
            sys.exit(1)
    """

    def __init__(self, max_errors: Optional[int] = None):
        """
        Initialize the reporter.

        Args:
            max_errors: Maximum diagnostics to store (None for unlimited)
        """
        self.errors: list[Diagnostic] = []
        self.max_errors = max_errors
        self._dropped = 0

    def record_error(self, message: str, position: Position) -> None:
        """
        Record a diagnostic.

        Args:
            message: The diagnostic message
            position: Where it occurred
        """
        if self.max_errors is not None and len(self.errors) >= self.max_errors:
            self._dropped += 1
            return
        logger.debug(f"{position}: {message}")
        self.errors.append(Diagnostic(message, position))

    def has_errors(self) -> bool:
        """Return True if any diagnostics have been recorded."""
        return self.error_count() > 0

    def error_count(self) -> int:
        """Return the number of recorded diagnostics, including dropped ones."""
        return len(self.errors) + self._dropped

    def report(self) -> str:
        """
        Format all diagnostics for display.

        Returns:
            Formatted string with one diagnostic per line and a summary
        """
        lines = [str(error) for error in self.errors]

        if self._dropped:
            lines.append(f"... {self._dropped} more not shown")

        count = self.error_count()
        error_word = "error" if count == 1 else "errors"
        lines.append(f"\n{count} {error_word}")

        return "\n".join(lines)

    def clear(self) -> None:
        """Clear all recorded diagnostics."""
        self.errors.clear()
        self._dropped = 0

    def __iter__(self) -> Iterator[Diagnostic]:
        return iter(self.errors)

    def __len__(self) -> int:
        return len(self.errors)

"""
Cm Assembly Language Lexer
==========================

This module implements the lexer (scanner) for Cm assembly language.
It pulls bytes one at a time from a byte source and hands the parser one
classified token per call.

Token Types
-----------
- LABEL: First token on a line (a user-defined location name)
- MNEMONIC: Known Cm instruction (halt, ldc.i8, br.i5, ...)
- DIRECTIVE: Assembler directive (.cstring)
- OPERAND_OFFSET: Signed decimal integer (42, -7)
- OPERAND_LABEL: Any other word; a symbol resolved by a later pass
- STRING_OPERAND: Double-quoted string, quotes stripped ("hello")
- EOL: End of line; carries the comment text of the line, if any
- EOF: End of file

Source Layout
-------------
A Cm source line has the shape::

    [label] [mnemonic|directive [operand]] [; comment]

Tokens are separated by spaces or carriage returns. A word starting in
the first column becomes a LABEL even if it spells a mnemonic, so
instructions are written indented.

Token Index
-----------
Positions carry a token index, not a character column. The index is
bumped once per scan attempt and every leading space on a line is its own
discarded attempt, so indentation shows up in the index:

    "        halt"   ->  MNEMONIC 'halt' at index 9

End-of-line tokens always carry index 0.

Error Recovery
--------------
The lexer never raises on bad input. Problems are recorded in the
diagnostic sink and scanning continues:

- "invalid character": a reserved byte outside a comment; the byte is
  dropped and the current token continues
- "EOL in string": a string literal still open at end of line; the
  literal is closed implicitly
- "EOF in string": a string literal still open at end of file

Example
-------
>>> from cmasm.assembler.lexer import tokenize_bytes
>>> for token in tokenize_bytes(b'main ldc.i8 42 ; answer\\n'):
...     print(token)
Token(LABEL, 'main', 1:1)
Token(MNEMONIC, 'ldc.i8', 1:2)
Token(OPERAND_OFFSET, '42', 1:3)
Token(EOL, '; answer', 1:0)
Token(EOF, 2:1)
"""

from dataclasses import dataclass
from enum import Enum, auto
from pathlib import Path
from typing import Callable, Iterator, Optional, Protocol, Union
import codecs
import logging
import re

from cmasm.assembler.reader import EOF, BytesReader, FileReader
from cmasm.assembler.symbols import SymbolTable
from cmasm.config import LexerConfig, get_default_config
from cmasm.errors import ErrorReporter, Position


logger = logging.getLogger(__name__)


# =============================================================================
# Byte Classes
# =============================================================================

EOL = 10                # Line feed
CARRIAGE_RETURN = 13
SPACE = 32
QUOTE = 34              # "
SEMICOLON = 59          # ;

# Bytes that end a token outside comments and strings
SEPARATORS = frozenset({SPACE, CARRIAGE_RETURN})

# Bytes rejected outside comments: control codes (except line feed and
# carriage return) and punctuation with no meaning in Cm source
INVALID_BYTES = frozenset(
    [b for b in range(32) if b not in (EOL, CARRIAGE_RETURN)]
    + [ord(c) for c in "!#$%&'()*+,/:<=>?@[\\]^`{|}~"]
)

# Signed decimal integer: optional '-', ASCII digits only
_INTEGER_RE = re.compile(r"-?[0-9]+")


# =============================================================================
# Token Type Enumeration
# =============================================================================

class TokenType(Enum):
    """Token types for Cm assembly language."""

    # Structural tokens
    EOL = auto()             # End of line (carries trailing comment text)
    EOF = auto()             # End of file

    # Words
    DIRECTIVE = auto()       # .cstring
    LABEL = auto()           # First token on a line
    MNEMONIC = auto()        # Known instruction

    # Operands
    STRING_OPERAND = auto()  # "..." (quotes stripped)
    OPERAND_OFFSET = auto()  # Signed decimal integer
    OPERAND_LABEL = auto()   # Symbol reference


class ScanMode(Enum):
    """
    Scanner modes within one scan attempt.

    - NORMAL: Between or inside plain words; spaces separate tokens
    - IN_COMMENT: After ';' up to end of line; everything is comment text
    - IN_STRING: Between double quotes; spaces are part of the literal
    """

    NORMAL = auto()
    IN_COMMENT = auto()
    IN_STRING = auto()


# =============================================================================
# Token Data Class
# =============================================================================

@dataclass(frozen=True)
class Token:
    """
    A single token from the source.

    Attributes:
        type: The TokenType classification
        lexeme: The token text. For EOL tokens this is the comment text of
            the line (or the body of an unterminated string), usually empty.
        position: Line and token index of the token
    """
    type: TokenType
    lexeme: str
    position: Position

    def __repr__(self) -> str:
        where = f"{self.position.line}:{self.position.token_index}"
        if self.type is TokenType.EOF:
            return f"Token({self.type.name}, {where})"
        return f"Token({self.type.name}, {self.lexeme!r}, {where})"

    @property
    def line(self) -> int:
        return self.position.line

    @property
    def token_index(self) -> int:
        return self.position.token_index

    @property
    def is_structural(self) -> bool:
        """True for EOL and EOF tokens."""
        return self.type in (TokenType.EOL, TokenType.EOF)


# =============================================================================
# Collaborator Protocols
# =============================================================================

class ByteSource(Protocol):
    """Sequential byte reader; returns EOF (-1) once exhausted."""

    def next_byte(self) -> int:
        ...


class MnemonicRegistry(Protocol):
    """Answers whether a lexeme is a known instruction mnemonic."""

    def has_mnemonic(self, token: str) -> bool:
        ...


class DiagnosticSink(Protocol):
    """Accepts non-fatal diagnostics. Must not raise."""

    def record_error(self, message: str, position: Position) -> None:
        ...


# =============================================================================
# Token Classification
# =============================================================================
# Rules are tried in order and the first match wins. The order matters:
# a closed string always wins, directives beat labels, a line's first word
# is a label even if it spells a mnemonic, and numbers are checked before
# the mnemonic registry.
# =============================================================================

def is_integer(text: str) -> bool:
    """
    Check if text is a signed decimal integer.

    Args:
        text: The lexeme to check

    Returns:
        True for an optional '-' followed by one or more ASCII digits
    """
    return _INTEGER_RE.fullmatch(text) is not None


ClassificationRule = tuple[TokenType, Callable[["Scanner", str, bool], bool]]

CLASSIFICATION_RULES: tuple[ClassificationRule, ...] = (
    (TokenType.STRING_OPERAND, lambda scanner, lexeme, closed: closed),
    (TokenType.DIRECTIVE, lambda scanner, lexeme, closed: scanner.config.is_directive(lexeme)),
    (TokenType.LABEL, lambda scanner, lexeme, closed: scanner.token_index == 1),
    (TokenType.OPERAND_OFFSET, lambda scanner, lexeme, closed: is_integer(lexeme)),
    (TokenType.MNEMONIC, lambda scanner, lexeme, closed: scanner.symbol_table.has_mnemonic(lexeme)),
    (TokenType.OPERAND_LABEL, lambda scanner, lexeme, closed: True),
)


# =============================================================================
# Scanner Implementation
# =============================================================================

class Scanner:
    """
    Tokenizes Cm assembly source pulled from a byte source.

    One Scanner serves one source stream. Each scan() call returns exactly
    one token; once EOF has been returned every further call returns the
    same EOF token.

    The scanner holds back at most one byte: when a word is ended by a
    line feed or end of file, the word is returned first and the
    terminating byte is replayed on the next call. A ';' or '"' directly
    after a word does not end it: the word becomes part of the comment
    text or of the string literal.

    Usage:
        with FileReader("prog.asm") as reader:
            scanner = Scanner(reader, SymbolTable(), ErrorReporter())
            tokens = list(scanner.tokenize())

    Attributes:
        reader: The byte source
        symbol_table: Mnemonic registry queried during classification
        reporter: Diagnostic sink for lexical problems
        config: Lexer configuration
        filename: Name attached to positions
    """

    def __init__(
        self,
        reader: ByteSource,
        symbol_table: Optional[MnemonicRegistry] = None,
        reporter: Optional[DiagnosticSink] = None,
        config: Optional[LexerConfig] = None,
        filename: Optional[str] = None,
    ):
        """
        Initialize the scanner.

        Args:
            reader: Byte source to pull from
            symbol_table: Mnemonic registry (default: Cm instruction set)
            reporter: Diagnostic sink (default: a new ErrorReporter)
            config: Lexer configuration (default: get_default_config())
            filename: Name for positions (default: the reader's filename)
        """
        self.reader = reader
        self.config = config if config is not None else get_default_config()
        self.symbol_table = symbol_table if symbol_table is not None else SymbolTable()
        if reporter is None:
            reporter = ErrorReporter(max_errors=self.config.max_diagnostics)
        self.reporter = reporter
        self.filename = filename or getattr(reader, "filename", "<input>")

        # Counters
        self._line = 1
        self._token_index = 0

        # Per-attempt state
        self._mode = ScanMode.NORMAL
        self._buffer: list[str] = []
        self._decoder = codecs.getincrementaldecoder(self.config.encoding)(errors="replace")

        # Terminator byte replayed by the next attempt
        self._held: Optional[int] = None

        self._eof_token: Optional[Token] = None

    @property
    def line(self) -> int:
        """Current line number (1-indexed)."""
        return self._line

    @property
    def token_index(self) -> int:
        """Scan attempt ordinal on the current line."""
        return self._token_index

    @property
    def mode(self) -> ScanMode:
        return self._mode

    def scan(self) -> Token:
        """
        Scan the next token.

        Leading spaces make an attempt produce nothing; the attempt is
        dropped and a new one started, each attempt bumping the token index.

        Returns:
            The next Token (never None)
        """
        if self._eof_token is not None:
            return self._eof_token

        while True:
            self._token_index += 1
            token = self._scan_attempt()
            if token is not None:
                logger.debug(f"{self.filename}: {token!r}")
                return token
            logger.debug(
                f"{self.filename}:{self._line}: separator, attempt {self._token_index} discarded"
            )

    def tokenize(self) -> Iterator[Token]:
        """
        Generate tokens up to and including EOF.

        Yields:
            Token objects in source order
        """
        while True:
            token = self.scan()
            yield token
            if token.type is TokenType.EOF:
                return

    def classify(self, lexeme: str, closed_string: bool = False) -> Token:
        """
        Build a token for a finished lexeme.

        Args:
            lexeme: The collected text
            closed_string: True if the lexeme is a string literal body
                ended by its closing quote

        Returns:
            Token of the first matching CLASSIFICATION_RULES type
        """
        for token_type, matches in CLASSIFICATION_RULES:
            if matches(self, lexeme, closed_string):
                return Token(token_type, lexeme, self._position())
        # The last rule always matches
        raise AssertionError("unreachable")

    # =========================================================================
    # Scanning
    # =========================================================================

    def _scan_attempt(self) -> Optional[Token]:
        """
        Run one scan attempt.

        Returns:
            A token, or None if the attempt hit a leading separator
        """
        self._mode = ScanMode.NORMAL
        self._buffer = []
        self._decoder.reset()

        byte = self._next_byte()
        while byte != EOL and byte != EOF:
            # Reserved bytes are allowed in comments only
            if self._mode is not ScanMode.IN_COMMENT and byte in INVALID_BYTES:
                self._record("invalid character")
                byte = self._next_byte()
                continue

            if self._mode is ScanMode.NORMAL:
                if byte == QUOTE:
                    self._mode = ScanMode.IN_STRING
                    byte = self._next_byte()
                    continue
                if byte == SEMICOLON:
                    self._mode = ScanMode.IN_COMMENT
                elif byte in SEPARATORS:
                    if not self._buffer:
                        return None
                    return self._finish()
            elif self._mode is ScanMode.IN_STRING and byte == QUOTE:
                return self._finish(closed_string=True)

            if byte != CARRIAGE_RETURN:
                self._append(byte)
            byte = self._next_byte()

        if self._mode is ScanMode.NORMAL and self._buffer:
            self._held = byte
            return self._finish()

        if byte == EOL:
            return self._end_of_line()
        return self._end_of_file()

    def _end_of_line(self) -> Token:
        if self._mode is ScanMode.IN_STRING:
            self._record("EOL in string")

        token = Token(TokenType.EOL, self._text(), Position(self._line, 0, self.filename))
        self._line += 1
        self._token_index = 0
        return token

    def _end_of_file(self) -> Token:
        if self._mode is ScanMode.IN_STRING:
            self._record("EOF in string")

        self._eof_token = Token(TokenType.EOF, "", self._position())
        return self._eof_token

    # =========================================================================
    # Helpers
    # =========================================================================

    def _next_byte(self) -> int:
        """Return the held-back byte if any, else read from the source."""
        if self._held is not None:
            byte, self._held = self._held, None
            return byte
        return self.reader.next_byte()

    def _append(self, byte: int) -> None:
        text = self._decoder.decode(bytes((byte,)))
        if text:
            self._buffer.append(text)

    def _text(self) -> str:
        # Flush the decoder; an incomplete sequence becomes U+FFFD
        tail = self._decoder.decode(b"", final=True)
        if tail:
            self._buffer.append(tail)
        return "".join(self._buffer)

    def _finish(self, closed_string: bool = False) -> Token:
        return self.classify(self._text(), closed_string)

    def _position(self) -> Position:
        return Position(self._line, self._token_index, self.filename)

    def _record(self, message: str) -> None:
        self.reporter.record_error(message, self._position())


# =============================================================================
# Convenience Functions
# =============================================================================

def tokenize_bytes(
    data: Union[bytes, bytearray, str],
    symbol_table: Optional[MnemonicRegistry] = None,
    reporter: Optional[DiagnosticSink] = None,
    config: Optional[LexerConfig] = None,
    filename: str = "<input>",
) -> list[Token]:
    """
    Tokenize in-memory source.

    Args:
        data: Source bytes, or text (encoded with config.encoding)
        symbol_table: Mnemonic registry (default: Cm instruction set)
        reporter: Diagnostic sink (default: a new ErrorReporter)
        config: Lexer configuration
        filename: Name for positions

    Returns:
        List of tokens ending with EOF
    """
    config = config if config is not None else get_default_config()
    reader = BytesReader(data, filename=filename, encoding=config.encoding)
    scanner = Scanner(reader, symbol_table, reporter, config)
    return list(scanner.tokenize())


def tokenize_file(
    path: Union[str, Path],
    symbol_table: Optional[MnemonicRegistry] = None,
    reporter: Optional[DiagnosticSink] = None,
    config: Optional[LexerConfig] = None,
) -> list[Token]:
    """
    Tokenize a source file.

    The file is opened, scanned to EOF and closed.

    Args:
        path: Source file
        symbol_table: Mnemonic registry (default: Cm instruction set)
        reporter: Diagnostic sink (default: a new ErrorReporter)
        config: Lexer configuration

    Returns:
        List of tokens ending with EOF

    Raises:
        SourceReadError: If the file cannot be opened or read
    """
    with FileReader(path) as reader:
        scanner = Scanner(reader, symbol_table, reporter, config)
        return list(scanner.tokenize())

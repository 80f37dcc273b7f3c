"""
cmasm - Lexical Front End for the Cm Assembler
==============================================

This package provides the lexer of a small assembler for the Cm stack
machine. It reads assembly source one byte at a time and produces a
stream of classified tokens (labels, mnemonics, operands, directives,
string literals, end-of-line and end-of-file markers) for the parser.

Main Components
---------------
- **assembler**: Scanner, byte sources, symbol table, Cm instruction set
- **errors**: Position, diagnostics and the exception hierarchy
- **config**: Lexer configuration (defaults and environment variables)
- **cli**: The ``cmlex`` token dump tool

Quick Start
-----------
Tokenize a file:
    >>> from cmasm import tokenize_file, ErrorReporter
    >>> reporter = ErrorReporter()
    >>> for token in tokenize_file("hello.asm", reporter=reporter):
    ...     print(token)
    >>> if reporter.has_errors():
    ...     print(reporter.report())

Or use the command-line tool:
    $ cmlex hello.asm
"""

__version__ = "1.0.0"
__author__ = "cmasm contributors"

# =============================================================================
# Public API Exports
# =============================================================================

from cmasm.assembler import (
    Scanner,
    ScanMode,
    Token,
    TokenType,
    BytesReader,
    FileReader,
    SymbolTable,
    Label,
    Mnemonic,
    MnemonicType,
    OPCODE_TABLE,
    tokenize_bytes,
    tokenize_file,
)
from cmasm.config import LexerConfig, get_default_config, set_default_config
from cmasm.errors import (
    CmasmError,
    AssemblerError,
    LexicalError,
    SourceReadError,
    DuplicateSymbolError,
    Diagnostic,
    ErrorReporter,
    Position,
)

__all__ = [
    # Version info
    "__version__",
    "__author__",
    # Lexer
    "Scanner",
    "ScanMode",
    "Token",
    "TokenType",
    "tokenize_bytes",
    "tokenize_file",
    # Byte sources
    "BytesReader",
    "FileReader",
    # Symbol table
    "SymbolTable",
    "Label",
    "Mnemonic",
    "MnemonicType",
    "OPCODE_TABLE",
    # Configuration
    "LexerConfig",
    "get_default_config",
    "set_default_config",
    # Errors and diagnostics
    "CmasmError",
    "AssemblerError",
    "LexicalError",
    "SourceReadError",
    "DuplicateSymbolError",
    "Diagnostic",
    "ErrorReporter",
    "Position",
]

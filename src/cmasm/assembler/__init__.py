"""
Cm Assembler Front End
======================

This package provides the lexical front end of the assembler for the Cm
stack machine. It turns the bytes of an assembly source file into a
stream of classified tokens for the parser.

Main Components
---------------
- **Scanner**: Pulls bytes from a byte source and returns one token per call
- **FileReader / BytesReader**: Byte sources over a file or a buffer
- **SymbolTable**: Mnemonic registry (Cm instruction set) and label store
- **OPCODE_TABLE**: The Cm instruction set

Example Usage
-------------
>>> from cmasm.assembler import tokenize_bytes, TokenType
>>> tokens = tokenize_bytes(b"main halt\\n")
>>> [t.type for t in tokens]
[<TokenType.LABEL: 4>, <TokenType.MNEMONIC: 5>, <TokenType.EOL: 1>, <TokenType.EOF: 2>]
"""

from cmasm.assembler.lexer import (
    Scanner,
    ScanMode,
    Token,
    TokenType,
    CLASSIFICATION_RULES,
    INVALID_BYTES,
    is_integer,
    tokenize_bytes,
    tokenize_file,
)
from cmasm.assembler.reader import EOF, BytesReader, FileReader
from cmasm.assembler.symbols import Label, SymbolTable
from cmasm.assembler.opcodes import (
    Mnemonic,
    MnemonicType,
    OPCODE_TABLE,
    MNEMONICS,
    BRANCH_INSTRUCTIONS,
    get_mnemonic,
    is_valid_instruction,
    is_branch_instruction,
)

__all__ = [
    # Lexer
    "Scanner",
    "ScanMode",
    "Token",
    "TokenType",
    "CLASSIFICATION_RULES",
    "INVALID_BYTES",
    "is_integer",
    "tokenize_bytes",
    "tokenize_file",
    # Byte sources
    "EOF",
    "BytesReader",
    "FileReader",
    # Symbol table
    "Label",
    "SymbolTable",
    # Opcodes
    "Mnemonic",
    "MnemonicType",
    "OPCODE_TABLE",
    "MNEMONICS",
    "BRANCH_INSTRUCTIONS",
    "get_mnemonic",
    "is_valid_instruction",
    "is_branch_instruction",
]

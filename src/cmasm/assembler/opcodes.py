"""
Cm Instruction Set Definition
=============================

This module defines the Cm stack machine instruction set: every mnemonic
with its opcode and its operand encoding. The lexer only needs to know
*whether* a lexeme is a mnemonic; later passes use the opcode and type
to encode instructions.

Mnemonic Types
--------------
1. **INHERENT**: No operand (e.g., halt, pop, add)
   - 1 byte instruction
   - Example: halt -> $00

2. **IMMEDIATE**: Small operand packed into the low bits of the opcode
   - 1 byte instruction; the suffix gives the field width
   - Example: ldc.i3 2 -> $92 ($90 | 2)

3. **RELATIVE**: Operand bytes follow the opcode
   - 1 + N bytes, N from the suffix (u8/i8 -> 1, i16 -> 2, i32 -> 4)
   - Example: br.i8 loop -> $E0 $offset

Mnemonics are written in lowercase in Cm source files and lookup is
case-sensitive: "HALT" is not an instruction, it is a symbol.
"""

from dataclasses import dataclass
from enum import Enum, auto
from typing import Optional


# =============================================================================
# Mnemonic Type Enumeration
# =============================================================================

class MnemonicType(Enum):
    """
    Cm operand encodings.

    Each type determines how the operand is stored and affects the
    instruction size.
    """
    INHERENT = auto()   # No operand
    IMMEDIATE = auto()  # Operand packed into the opcode
    RELATIVE = auto()   # Operand bytes follow the opcode

    def __str__(self) -> str:
        """Return human-readable name for error messages."""
        return {
            MnemonicType.INHERENT: "inherent",
            MnemonicType.IMMEDIATE: "immediate",
            MnemonicType.RELATIVE: "relative",
        }[self]


# =============================================================================
# Mnemonic Information
# =============================================================================

@dataclass(frozen=True)
class Mnemonic:
    """
    A Cm instruction mnemonic.

    Attributes:
        name: Mnemonic spelling (e.g., "ldc.i8")
        opcode: Opcode byte (base value for IMMEDIATE instructions)
        type: Operand encoding
    """
    name: str
    opcode: int
    type: MnemonicType

    def __repr__(self) -> str:
        return f"Mnemonic({self.name!r}, opcode=${self.opcode:02X}, {self.type})"

    @property
    def operand_width(self) -> int:
        """
        Operand width in bits, taken from the mnemonic suffix.

        Returns 0 for inherent instructions.
        """
        if "." not in self.name:
            return 0
        suffix = self.name.rsplit(".", 1)[1]
        return int(suffix[1:])

    @property
    def is_signed(self) -> bool:
        """True when the operand is signed (".iN" suffix)."""
        return ".i" in self.name

    @property
    def size(self) -> int:
        """Total instruction size in bytes."""
        if self.type is MnemonicType.RELATIVE:
            return 1 + self.operand_width // 8
        return 1


# =============================================================================
# Opcode Table
# =============================================================================
# Master table of all Cm instructions.
# Key: mnemonic
# Value: Mnemonic(name, opcode, type)
# =============================================================================

_INSTRUCTIONS: list[tuple[str, int, MnemonicType]] = [
    # =========================================================================
    # INHERENT INSTRUCTIONS (no operand)
    # =========================================================================

    # Control
    ("halt", 0x00, MnemonicType.INHERENT),
    ("pop", 0x01, MnemonicType.INHERENT),
    ("dup", 0x02, MnemonicType.INHERENT),
    ("exit", 0x03, MnemonicType.INHERENT),
    ("ret", 0x04, MnemonicType.INHERENT),
    ("trap", 0xFF, MnemonicType.INHERENT),

    # Logic
    ("not", 0x0C, MnemonicType.INHERENT),
    ("and", 0x0D, MnemonicType.INHERENT),
    ("or", 0x0E, MnemonicType.INHERENT),
    ("xor", 0x0F, MnemonicType.INHERENT),

    # Arithmetic
    ("neg", 0x10, MnemonicType.INHERENT),
    ("inc", 0x11, MnemonicType.INHERENT),
    ("dec", 0x12, MnemonicType.INHERENT),
    ("add", 0x13, MnemonicType.INHERENT),
    ("sub", 0x14, MnemonicType.INHERENT),
    ("mul", 0x15, MnemonicType.INHERENT),
    ("div", 0x16, MnemonicType.INHERENT),
    ("rem", 0x17, MnemonicType.INHERENT),
    ("shl", 0x18, MnemonicType.INHERENT),
    ("shr", 0x19, MnemonicType.INHERENT),

    # Comparison
    ("teq", 0x1A, MnemonicType.INHERENT),
    ("tne", 0x1B, MnemonicType.INHERENT),
    ("tlt", 0x1C, MnemonicType.INHERENT),
    ("tgt", 0x1D, MnemonicType.INHERENT),
    ("tle", 0x1E, MnemonicType.INHERENT),
    ("tge", 0x1F, MnemonicType.INHERENT),

    # =========================================================================
    # IMMEDIATE INSTRUCTIONS (operand packed into opcode)
    # =========================================================================
    ("br.i5", 0x30, MnemonicType.IMMEDIATE),
    ("brf.i5", 0x50, MnemonicType.IMMEDIATE),
    ("enter.u5", 0x70, MnemonicType.IMMEDIATE),
    ("ldc.i3", 0x90, MnemonicType.IMMEDIATE),
    ("addv.u3", 0x98, MnemonicType.IMMEDIATE),
    ("ldv.u3", 0xA0, MnemonicType.IMMEDIATE),
    ("stv.u3", 0xA8, MnemonicType.IMMEDIATE),

    # =========================================================================
    # RELATIVE INSTRUCTIONS (operand bytes follow opcode)
    # =========================================================================

    # Local variables
    ("addv.u8", 0xB0, MnemonicType.RELATIVE),
    ("ldv.u8", 0xB1, MnemonicType.RELATIVE),
    ("stv.u8", 0xB2, MnemonicType.RELATIVE),
    ("incv.u8", 0xB3, MnemonicType.RELATIVE),
    ("decv.u8", 0xB4, MnemonicType.RELATIVE),
    ("enter.u8", 0xBF, MnemonicType.RELATIVE),

    # Constants and addresses
    ("lda.i16", 0xD5, MnemonicType.RELATIVE),
    ("ldc.i8", 0xD8, MnemonicType.RELATIVE),
    ("ldc.i16", 0xD9, MnemonicType.RELATIVE),
    ("ldc.i32", 0xDA, MnemonicType.RELATIVE),

    # Branches and calls
    ("br.i8", 0xE0, MnemonicType.RELATIVE),
    ("br.i16", 0xE1, MnemonicType.RELATIVE),
    ("brf.i8", 0xE3, MnemonicType.RELATIVE),
    ("call.i16", 0xE7, MnemonicType.RELATIVE),
]

OPCODE_TABLE: dict[str, Mnemonic] = {
    name: Mnemonic(name, opcode, kind) for name, opcode, kind in _INSTRUCTIONS
}


# =============================================================================
# Instruction Set Reference Lists
# =============================================================================

# Set of all valid mnemonics (for lexer validation)
MNEMONICS: frozenset[str] = frozenset(OPCODE_TABLE)

# Instructions that transfer control
BRANCH_INSTRUCTIONS: frozenset[str] = frozenset({
    "br.i5", "brf.i5", "br.i8", "br.i16", "brf.i8", "call.i16",
})


# =============================================================================
# Lookup Functions
# =============================================================================

def get_mnemonic(name: str) -> Optional[Mnemonic]:
    """
    Look up a mnemonic by name.

    Args:
        name: The instruction mnemonic (e.g., "ldc.i8")

    Returns:
        Mnemonic if found, None otherwise
    """
    return OPCODE_TABLE.get(name)


def is_valid_instruction(name: str) -> bool:
    """
    Check if a lexeme is a valid Cm mnemonic.

    Args:
        name: The lexeme to check

    Returns:
        True if valid, False otherwise
    """
    return name in MNEMONICS


def is_branch_instruction(name: str) -> bool:
    """Check if an instruction transfers control."""
    return name in BRANCH_INSTRUCTIONS

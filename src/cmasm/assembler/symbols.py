"""
Cm Assembler Symbol Table
=========================

The symbol table answers two kinds of questions:

- **Mnemonics**: is a lexeme a Cm instruction? The lexer asks this while
  classifying tokens. The answer comes from the instruction table in
  opcodes.py, optionally extended with extra mnemonics.
- **Labels**: user-defined names and where they were defined. The lexer
  never touches labels; later passes add and resolve them.

Example
-------
>>> from cmasm.assembler.symbols import SymbolTable, Label
>>> from cmasm.errors import Position
>>> table = SymbolTable()
>>> table.has_mnemonic("halt")
True
>>> table.add_label(Label("main", Position(1, 1)))
>>> table.has_label("main")
True
"""

from dataclasses import dataclass
from typing import Iterable, Iterator, Optional
import logging

from cmasm.assembler.opcodes import OPCODE_TABLE, Mnemonic
from cmasm.errors import DuplicateSymbolError, Position


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Label:
    """
    A user-defined label.

    Attributes:
        name: Label name as written in the source
        location: Where the label was defined
        address: Resolved address, filled in by a later pass
    """
    name: str
    location: Position
    address: Optional[int] = None


class SymbolTable:
    """
    Mnemonic registry and label store.

    Attributes:
        mnemonics: Known mnemonics by name
        labels: Defined labels by name, in definition order
    """

    def __init__(self, extra_mnemonics: Optional[Iterable[Mnemonic]] = None):
        """
        Initialize the symbol table with the Cm instruction set.

        Args:
            extra_mnemonics: Additional mnemonics to recognize
        """
        self.mnemonics: dict[str, Mnemonic] = dict(OPCODE_TABLE)
        for mnemonic in extra_mnemonics or ():
            self.mnemonics[mnemonic.name] = mnemonic
        self.labels: dict[str, Label] = {}

    # =========================================================================
    # Mnemonics
    # =========================================================================

    def has_mnemonic(self, token: str) -> bool:
        """Check if a lexeme is a known mnemonic."""
        return token in self.mnemonics

    def get_mnemonic(self, token: str) -> Optional[Mnemonic]:
        """Return the mnemonic for a lexeme, or None."""
        return self.mnemonics.get(token)

    # =========================================================================
    # Labels
    # =========================================================================

    def add_label(self, label: Label) -> None:
        """
        Define a label.

        Args:
            label: The label to add

        Raises:
            DuplicateSymbolError: If a label with the same name exists
        """
        existing = self.labels.get(label.name)
        if existing is not None:
            logger.warning(
                f"Label '{label.name}' redefined at {label.location} "
                f"(first defined at {existing.location})"
            )
            raise DuplicateSymbolError(
                label.name,
                location=label.location,
                original_location=existing.location,
            )
        self.labels[label.name] = label

    def get_label(self, name: str) -> Optional[Label]:
        """Return the label with this name, or None."""
        return self.labels.get(name)

    def has_label(self, name: str) -> bool:
        """Check if a label is defined."""
        return name in self.labels

    def set_label_address(self, name: str, address: int) -> Label:
        """
        Record the resolved address of a label.

        Labels are immutable, so the stored entry is replaced.

        Raises:
            KeyError: If the label is not defined
        """
        label = self.labels[name]
        resolved = Label(label.name, label.location, address)
        self.labels[name] = resolved
        return resolved

    def labels_table(self) -> str:
        """
        Format the label table for display.

        Example output:
            Label     Line  Address
            main         1  $0000
            loop         4  ----
        """
        width = max([len("Label")] + [len(name) for name in self.labels])
        lines = [f"{'Label':<{width}}  Line  Address"]
        for label in self.labels.values():
            address = f"${label.address:04X}" if label.address is not None else "----"
            lines.append(f"{label.name:<{width}}  {label.location.line:>4}  {address}")
        return "\n".join(lines)

    def __iter__(self) -> Iterator[Label]:
        return iter(self.labels.values())

    def __len__(self) -> int:
        return len(self.labels)

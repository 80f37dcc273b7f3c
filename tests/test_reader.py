"""
Tests for byte sources
======================

FileReader and BytesReader feed the lexer one byte at a time.
"""

import pytest

from cmasm.assembler.reader import EOF, BytesReader, FileReader
from cmasm.errors import SourceReadError


def read_all(reader) -> list[int]:
    values = []
    while (byte := reader.next_byte()) != EOF:
        values.append(byte)
    return values


# =============================================================================
# BytesReader
# =============================================================================

class TestBytesReader:
    """Tests for the in-memory byte source."""

    def test_reads_bytes_in_order(self):
        """Bytes come back in order, then EOF."""
        reader = BytesReader(b"ab\n")
        assert read_all(reader) == [97, 98, 10]

    def test_eof_is_sticky(self):
        """EOF keeps being returned once reached."""
        reader = BytesReader(b"")
        assert reader.next_byte() == EOF
        assert reader.next_byte() == EOF

    def test_str_is_encoded(self):
        """Text input is encoded with the given encoding."""
        reader = BytesReader("é", encoding="latin-1")
        assert read_all(reader) == [0xE9]

    def test_bytearray_input(self):
        """bytearray input is accepted."""
        reader = BytesReader(bytearray(b"x"))
        assert read_all(reader) == [120]

    def test_default_filename(self):
        """Buffers are named <input> unless told otherwise."""
        assert BytesReader(b"").filename == "<input>"
        assert BytesReader(b"", filename="buf.asm").filename == "buf.asm"

    def test_context_manager(self):
        """BytesReader can be scoped with a with block."""
        with BytesReader(b"z") as reader:
            assert reader.next_byte() == ord("z")


# =============================================================================
# FileReader
# =============================================================================

class TestFileReader:
    """Tests for the file byte source."""

    def test_reads_file(self, tmp_path):
        """File content is returned byte by byte."""
        path = tmp_path / "prog.asm"
        path.write_bytes(b"halt\r\n")
        with FileReader(path) as reader:
            assert read_all(reader) == [104, 97, 108, 116, 13, 10]
            assert reader.next_byte() == EOF

    def test_high_bytes(self, tmp_path):
        """Bytes above 127 are returned unchanged."""
        path = tmp_path / "prog.asm"
        path.write_bytes(bytes([0xFF, 0x80]))
        with FileReader(path) as reader:
            assert read_all(reader) == [0xFF, 0x80]

    def test_filename(self, tmp_path):
        """filename is the path as given."""
        path = tmp_path / "prog.asm"
        path.write_bytes(b"")
        with FileReader(str(path)) as reader:
            assert reader.filename == str(path)

    def test_closed_on_exit(self, tmp_path):
        """Leaving the with block closes the file."""
        path = tmp_path / "prog.asm"
        path.write_bytes(b"x")
        with FileReader(path) as reader:
            assert not reader.closed
        assert reader.closed

    def test_close_twice(self, tmp_path):
        """close() is idempotent."""
        path = tmp_path / "prog.asm"
        path.write_bytes(b"x")
        reader = FileReader(path)
        reader.close()
        reader.close()
        assert reader.closed

    def test_read_after_close(self, tmp_path):
        """Reading a closed reader raises SourceReadError."""
        path = tmp_path / "prog.asm"
        path.write_bytes(b"x")
        reader = FileReader(path)
        reader.close()
        with pytest.raises(SourceReadError) as exc_info:
            reader.next_byte()
        assert "reader is closed" in str(exc_info.value)

    def test_missing_file(self, tmp_path):
        """Opening a missing file raises SourceReadError."""
        path = tmp_path / "missing.asm"
        with pytest.raises(SourceReadError) as exc_info:
            FileReader(path)
        assert exc_info.value.source_filename == str(path)
        assert "cannot read" in str(exc_info.value)

    def test_directory(self, tmp_path):
        """Opening a directory raises SourceReadError."""
        with pytest.raises(SourceReadError):
            FileReader(tmp_path)

"""
Byte Sources
============

The lexer pulls its input one byte at a time from a byte source. A byte
source has a single method, next_byte(), returning a value in 0-255 or
EOF (-1) once the stream is exhausted. It keeps returning EOF after that.
There is no pushback.

Two implementations are provided:

- **FileReader**: reads a file from disk. The caller owns the open file
  and should scope it with a ``with`` block.
- **BytesReader**: reads from an in-memory buffer (bytes or str). Useful
  for tests and for source held in an editor buffer.

Example
-------
>>> with FileReader("hello.asm") as reader:
...     scanner = Scanner(reader, SymbolTable(), ErrorReporter())
...     tokens = list(scanner.tokenize())
"""

from pathlib import Path
from typing import BinaryIO, Optional, Union
import logging

from cmasm.errors import SourceReadError


logger = logging.getLogger(__name__)


# End-of-stream sentinel returned by next_byte()
EOF = -1


class FileReader:
    """
    Sequential byte reader over a source file.

    The file is opened on construction and closed by close() or on leaving
    a ``with`` block.

    Attributes:
        path: Path of the source file
    """

    def __init__(self, path: Union[str, Path]):
        """
        Open the source file.

        Args:
            path: File to read

        Raises:
            SourceReadError: If the file cannot be opened
        """
        self.path = Path(path)
        try:
            self._stream: Optional[BinaryIO] = open(self.path, "rb")
        except OSError as e:
            raise SourceReadError(str(self.path), e.strerror or str(e)) from e
        logger.info(f"Opened source {self.path}")

    @property
    def filename(self) -> str:
        """Name used in positions and error messages."""
        return str(self.path)

    def next_byte(self) -> int:
        """
        Read the next byte.

        Returns:
            The byte value (0-255), or EOF at end of file

        Raises:
            SourceReadError: If the file is closed or the read fails
        """
        if self._stream is None:
            raise SourceReadError(self.filename, "reader is closed")
        try:
            data = self._stream.read(1)
        except OSError as e:
            raise SourceReadError(self.filename, e.strerror or str(e)) from e
        if not data:
            return EOF
        return data[0]

    def close(self) -> None:
        """Close the underlying file. Safe to call more than once."""
        if self._stream is not None:
            self._stream.close()
            self._stream = None
            logger.info(f"Closed source {self.path}")

    @property
    def closed(self) -> bool:
        return self._stream is None

    def __enter__(self) -> "FileReader":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()


class BytesReader:
    """
    Sequential byte reader over an in-memory buffer.

    Attributes:
        data: The source bytes
        filename: Name used in positions and error messages
    """

    def __init__(
        self,
        data: Union[bytes, bytearray, str],
        filename: str = "<input>",
        encoding: str = "latin-1",
    ):
        """
        Args:
            data: Source bytes, or text to encode
            filename: Name used in positions and error messages
            encoding: Encoding applied when data is a str
        """
        if isinstance(data, str):
            data = data.encode(encoding)
        self.data = bytes(data)
        self.filename = filename
        self._pos = 0

    def next_byte(self) -> int:
        """Return the next byte value, or EOF when the buffer is exhausted."""
        if self._pos >= len(self.data):
            return EOF
        byte = self.data[self._pos]
        self._pos += 1
        return byte

    def close(self) -> None:
        """No-op; present so both readers can be scoped the same way."""

    def __enter__(self) -> "BytesReader":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

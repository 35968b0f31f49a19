"""Single-byte readers and writers used by the range coder."""

from typing import Any, Callable

from .errors import LimitError


class ByteReader:
    """Reads single bytes from a binary stream without over-reading."""

    def __init__(self, stream: Any) -> None:
        self.stream = stream

    def read_byte(self) -> int:
        """Return the next byte; raise EOFError at the end of the stream."""
        data = self.stream.read(1)
        if not data:
            raise EOFError("no more data")
        return data[0]


def byte_reader(stream: Any) -> Any:
    """Return ``stream`` if it already reads single bytes, else wrap it."""
    if callable(getattr(stream, "read_byte", None)):
        return stream
    return ByteReader(stream)


class LimitedByteReader:
    """Byte reader that returns at most ``n`` bytes."""

    def __init__(self, reader: Any, n: int) -> None:
        self.reader = reader
        self.n = n

    def read_byte(self) -> int:
        """Return the next byte; raise EOFError once the limit is reached."""
        if self.n <= 0:
            raise EOFError("byte limit reached")
        b = self.reader.read_byte()
        self.n -= 1
        return b


def _byte_sink(writer: Any) -> Callable[[int], Any]:
    write_byte = getattr(writer, "write_byte", None)
    if callable(write_byte):
        return write_byte
    if isinstance(writer, bytearray):
        return writer.append
    return lambda c: writer.write(bytes((c,)))


class LimitedByteWriter:
    """Byte writer that accepts at most ``n`` bytes.

    The target may provide ``write_byte``, be a bytearray, or be a binary
    stream with ``write``. The attribute ``n`` holds the remaining bytes.
    """

    def __init__(self, writer: Any, n: int) -> None:
        self.writer = writer
        self.n = n
        self._put = _byte_sink(writer)

    def write_byte(self, c: int) -> None:
        """Write one byte; raise LimitError if the limit has been reached."""
        if self.n <= 0:
            raise LimitError()
        self._put(c)
        self.n -= 1
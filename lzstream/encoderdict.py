"""The dictionary of the encoder with its lookahead buffer."""

from typing import Any, Protocol, Sequence

from .buffer import RingBuffer
from .errors import LzmaError, NoSpaceError
from .header import MAX_DICT_CAP
from .operation import Operation


class Matcher(Protocol):
    """Finds the next operation for the data at the dictionary head."""

    def set_dict(self, d: "EncoderDict") -> None:
        ...

    def write(self, data: bytes) -> int:
        ...

    def next_op(self, rep: Sequence[int]) -> Operation:
        ...


class EncoderDict:
    """Encoder dictionary: past data plus a buffer of data still to encode.

    The rear index of ``buf`` marks the dictionary head; bytes behind it
    form the dictionary, bytes in front of it await compression.
    """

    def __init__(self, dict_cap: int, buf_size: int, matcher: Matcher) -> None:
        if not 1 <= dict_cap <= MAX_DICT_CAP:
            raise LzmaError("lzma: dictionary capacity out of range")
        if buf_size < 1:
            raise LzmaError("lzma: buffer size must be larger than zero")
        self.buf = RingBuffer(dict_cap + buf_size)
        self.capacity = dict_cap
        self.matcher = matcher
        self.head = 0
        matcher.set_dict(self)

    def discard(self, n: int) -> None:
        """Move the head ``n`` bytes forward and feed them to the matcher."""
        p = self.buf.read(n)
        if len(p) < n:
            raise LzmaError(f"lzma: can't discard {n} bytes")
        self.head += n
        self.matcher.write(p)

    def length(self) -> int:
        """Return the number of dictionary bytes behind the head."""
        return min(self.buf.available(), self.head)

    def dict_len(self) -> int:
        """Return the actual length of the dictionary."""
        return min(self.head, self.capacity)

    def available(self) -> int:
        """Return the number of bytes a following write can accept."""
        return self.buf.available() - self.dict_len()

    def write(self, data: bytes) -> int:
        """Buffer data for compression; return the number of bytes accepted.

        The head is not moved. Fewer bytes than given are accepted when
        the buffer is full.
        """
        m = self.available()
        if len(data) > m:
            data = data[:max(m, 0)]
        return self.buf.write(data)

    def pos(self) -> int:
        """Return the position of the head."""
        return self.head

    def byte_at(self, distance: int) -> int:
        """Return the byte ``distance`` bytes behind the head, or 0."""
        if not 0 < distance <= self.length():
            return 0
        i = self.buf.rear - distance
        if i < 0:
            i += len(self.buf.data)
        return self.buf.data[i]

    def copy_n(self, writer: Any, n: int) -> int:
        """Write the last ``n`` bytes behind the head to ``writer``.

        If fewer bytes are in the dictionary, those are written and
        NoSpaceError is raised.
        """
        if n <= 0:
            return 0
        m = self.length()
        short = n > m
        if short:
            n = m
        data = self.buf.data
        i = self.buf.rear - n
        if i < 0:
            i += len(data)
            writer.write(bytes(data[i:]))
            i = 0
        writer.write(bytes(data[i:self.buf.rear]))
        if short:
            raise NoSpaceError()
        return n

    def buffered(self) -> int:
        """Return the number of bytes waiting to be compressed."""
        return self.buf.buffered()
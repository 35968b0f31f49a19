"""The dictionary of the decoder, which doubles as its output buffer."""

from .buffer import RingBuffer
from .codecs import MAX_MATCH_LEN
from .errors import DataError, LzmaError, NoSpaceError
from .header import MAX_DICT_CAP


class DecoderDict:
    """Decoder dictionary.

    Decoded bytes are written at the front of the ring buffer and read
    from its rear; the bytes behind the front form the dictionary that
    matches refer to.
    """

    def __init__(self, dict_cap: int) -> None:
        # The lower limit of one byte keeps small test cases possible.
        if not 1 <= dict_cap <= MAX_DICT_CAP:
            raise LzmaError("lzma: dictCap out of range")
        self.buf = RingBuffer(dict_cap)
        self.head = 0

    def reset(self) -> None:
        """Clear the dictionary; buffered data can still be read."""
        self.head = 0

    def write_byte(self, c: int) -> None:
        """Append a single literal byte."""
        self.buf.write_byte(c)
        self.head += 1

    def pos(self) -> int:
        """Return the position of the dictionary head."""
        return self.head

    def dict_len(self) -> int:
        """Return the current length of the dictionary."""
        return min(self.head, self.buf.capacity())

    def byte_at(self, dist: int) -> int:
        """Return the byte ``dist`` bytes back, or 0 if out of range."""
        if not 0 < dist <= self.dict_len():
            return 0
        i = self.buf.front - dist
        if i < 0:
            i += len(self.buf.data)
        return self.buf.data[i]

    def write_match(self, dist: int, length: int) -> None:
        """Append ``length`` bytes copied from ``dist`` bytes back.

        Raises DataError for a distance or length out of range and
        NoSpaceError if the buffer has no room; read from it first.
        """
        if not 0 < dist <= self.dict_len():
            raise DataError("lzma: match distance out of range")
        if not 0 < length <= MAX_MATCH_LEN:
            raise DataError("lzma: match length out of range")
        if length > self.buf.available():
            raise NoSpaceError()
        self.head += length
        data = self.buf.data
        i = self.buf.front - dist
        if i < 0:
            i += len(data)
        while length > 0:
            front = self.buf.front
            if i >= front:
                p = bytes(data[i:i + length])
                i = 0
            else:
                p = bytes(data[i:min(front, i + length)])
                i = front
            self.buf.write(p)
            length -= len(p)

    def write(self, data: bytes) -> int:
        """Append raw bytes; return how many fitted into the buffer."""
        n = self.buf.write(data)
        self.head += n
        return n

    def available(self) -> int:
        """Return the number of bytes that can still be written."""
        return self.buf.available()

    def read(self, n: int) -> bytes:
        """Consume and return up to ``n`` decoded bytes."""
        return self.buf.read(n)
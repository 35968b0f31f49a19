"""A circular byte buffer used by the dictionaries of encoder and decoder."""

from .errors import LzmaError, NoSpaceError


def prefix_len(a: bytes, b: bytes) -> int:
    """Return the length of the common prefix of ``a`` and ``b``."""
    for i, (x, y) in enumerate(zip(a, b)):
        if x != y:
            return i
    return min(len(a), len(b))


class RingBuffer:
    """Circular buffer of bytes.

    The buffer is empty when ``front`` equals ``rear``; therefore the
    underlying array is one byte larger than the capacity. Data is written
    at ``front`` and read from ``rear``.
    """

    __slots__ = ("data", "front", "rear")

    def __init__(self, size: int) -> None:
        if size < 0:
            raise ValueError("buffer size must not be negative")
        self.data = bytearray(size + 1)
        self.front = 0
        self.rear = 0

    def capacity(self) -> int:
        """Return the number of bytes the buffer can hold."""
        return len(self.data) - 1

    def reset(self) -> None:
        """Empty the buffer."""
        self.front = 0
        self.rear = 0

    def buffered(self) -> int:
        """Return the number of bytes that can be read."""
        delta = self.front - self.rear
        if delta < 0:
            delta += len(self.data)
        return delta

    def available(self) -> int:
        """Return the number of bytes that can be written."""
        delta = self.rear - 1 - self.front
        if delta < 0:
            delta += len(self.data)
        return delta

    def _add_index(self, i: int, n: int) -> int:
        i += n - len(self.data)
        if i < 0:
            i += len(self.data)
        return i

    def peek(self, n: int) -> bytes:
        """Return up to ``n`` buffered bytes without consuming them."""
        n = min(n, self.buffered())
        size = len(self.data)
        end = self.rear + n
        if end <= size:
            return bytes(self.data[self.rear:end])
        return bytes(self.data[self.rear:]) + bytes(self.data[: end - size])

    def read(self, n: int) -> bytes:
        """Consume and return up to ``n`` buffered bytes."""
        p = self.peek(n)
        self.rear = self._add_index(self.rear, len(p))
        return p

    def discard(self, n: int) -> int:
        """Skip ``n`` buffered bytes and return the number skipped.

        Raises LzmaError, after discarding everything buffered, if fewer
        than ``n`` bytes were available.
        """
        if n < 0:
            raise ValueError("discard: negative argument")
        m = self.buffered()
        short = m < n
        if short:
            n = m
        self.rear = self._add_index(self.rear, n)
        if short:
            raise LzmaError("discard: discarded fewer bytes than requested")
        return n

    def write(self, data: bytes) -> int:
        """Store as much of ``data`` as fits; return the number of bytes stored."""
        n = min(len(data), self.available())
        size = len(self.data)
        k = min(n, size - self.front)
        self.data[self.front:self.front + k] = data[:k]
        if k < n:
            self.data[: n - k] = data[k:n]
        self.front = self._add_index(self.front, n)
        return n

    def write_byte(self, c: int) -> None:
        """Store a single byte; raise NoSpaceError if the buffer is full."""
        if self.available() < 1:
            raise NoSpaceError()
        self.data[self.front] = c
        self.front = self._add_index(self.front, 1)

    def match_len(self, distance: int, data: bytes) -> int:
        """Return the common prefix length of ``data`` and the bytes at
        ``distance`` before the rear index."""
        n = 0
        i = self.rear - distance
        if i < 0:
            j = len(self.data) + i
            n = prefix_len(data, self.data[j:j + len(data)])
            if n < -i:
                return n
            data = data[n:]
            i = 0
        n += prefix_len(data, self.data[i:i + len(data)])
        return n
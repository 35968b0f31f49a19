"""Hash-table matcher that finds candidate matches for the encoder.

Every position in the dictionary is hashed over the word that starts
there. The table keeps the most recent position for each hash value;
older positions with the same hash are chained through a circular list
of position deltas.
"""

from typing import Any, List, Optional, Sequence

from .bitops import nlz32
from .codecs import MAX_MATCH_LEN, MIN_DISTANCE
from .errors import LzmaError
from .operation import Literal, Match, Operation

MAX_MATCHES = 16
SHORT_DISTS = 8
MIN_TABLE_EXPONENT = 9
MAX_TABLE_EXPONENT = 20

_MAX_DELTA = (1 << 32) - 1


def _mix(x: int) -> int:
    """Fold the bits of a word value into a hash value."""
    return x ^ (x >> 9) ^ (x >> 18) ^ (x >> 27)


def hash_table_exponent(n: int) -> int:
    """Return the table size exponent for a dictionary capacity ``n``."""
    e = 30 - nlz32(n)
    return max(MIN_TABLE_EXPONENT, min(MAX_TABLE_EXPONENT, e))


class HashTable:
    """Chained hash table over words of ``word_len`` bytes."""

    def __init__(self, capacity: int, word_len: int = 4) -> None:
        if capacity <= 0:
            raise LzmaError("hash table: capacity must be positive")
        exp = hash_table_exponent(capacity & 0xFFFFFFFF)
        if not 1 <= word_len <= 4:
            raise LzmaError("hash table: word length out of range")
        self._table: List[int] = [0] * (1 << exp)
        self._data: List[int] = [0] * capacity
        self.front = 0
        self.mask = (1 << exp) - 1
        self.hoff = -word_len
        self.word_len = word_len
        self._word_mask = (1 << (8 * word_len)) - 1
        self._x = 0
        self.dict: Optional[Any] = None

    def set_dict(self, d: Any) -> None:
        """Attach the encoder dictionary the matcher works on."""
        self.dict = d

    def _buffered(self) -> int:
        n = self.hoff + 1
        if n <= 0:
            return 0
        return min(n, len(self._data))

    def _put_delta(self, delta: int) -> None:
        self._data[self.front] = delta
        self.front += 1
        if self.front >= len(self._data):
            self.front = 0

    def _put_entry(self, h: int, pos: int) -> None:
        if pos < 0:
            return
        i = h & self.mask
        old = self._table[i] - 1
        self._table[i] = pos + 1
        delta = 0
        if old >= 0:
            delta = pos - old
            if delta > _MAX_DELTA or delta > self._buffered():
                delta = 0
        self._put_delta(delta)

    def write_byte(self, b: int) -> None:
        """Hash the word ending with byte ``b`` and record its position."""
        self._x = ((self._x << 8) | (b & 0xFF)) & self._word_mask
        self.hoff += 1
        self._put_entry(_mix(self._x), self.hoff)

    def write(self, data: bytes) -> int:
        """Hash all bytes of ``data``; return the number of bytes taken."""
        for b in data:
            self.write_byte(b)
        return len(data)

    def _get_matches(self, h: int, max_matches: int) -> List[int]:
        positions: List[int] = []
        if self.hoff < 0 or max_matches <= 0:
            return positions
        size = len(self._data)
        buffered = self._buffered()
        tail_pos = self.hoff + 1 - buffered
        rear = self.front - buffered
        if rear >= 0:
            rear -= size
        delta = self._table[h & self.mask] - 1 - tail_pos
        while delta >= 0:
            positions.append(tail_pos + delta)
            if len(positions) >= max_matches:
                break
            i = rear + delta
            if i < 0:
                i += size
            u = self._data[i]
            if u == 0:
                break
            delta -= u
        return positions

    def matches(self, word: bytes, max_matches: int = MAX_MATCHES) -> List[int]:
        """Return up to ``max_matches`` positions where ``word`` may start.

        The most recent positions come first. ``word`` must have exactly
        the word length of the table.
        """
        if len(word) != self.word_len:
            raise ValueError(f"word must have length {self.word_len}")
        h = _mix(int.from_bytes(bytes(word), "big"))
        return self._get_matches(h, max_matches)

    def next_op(self, rep: Sequence[int]) -> Operation:
        """Return the next operation for the data at the dictionary head."""
        d = self.dict
        buf = d.buf
        data = buf.peek(MAX_MATCH_LEN)
        if not data:
            raise LzmaError("hash table: no data in buffer")
        if len(data) < self.word_len:
            positions: List[int] = []
        else:
            positions = self.matches(data[: self.word_len], MAX_MATCHES)

        head = d.head
        dists = list(range(1, SHORT_DISTS + 1))
        dists.extend(
            head - pos for pos in positions if head - pos > SHORT_DISTS
        )

        m = Match()
        dict_len = d.dict_len()
        size = len(buf.data)
        for dist in dists:
            if dist > dict_len:
                continue
            # Only a longer match is of interest: test the byte that
            # would extend the current best match first.
            i = (buf.rear - dist + m.length) % size
            if buf.data[i] != data[m.length]:
                continue
            n = buf.match_len(dist, data)
            if n == 0:
                continue
            if n == 1 and dist - MIN_DISTANCE != rep[0]:
                continue
            if n > m.length:
                m = Match(dist, n)
                if n == len(data):
                    break

        if m.length == 0:
            return Literal(data[0])
        return m
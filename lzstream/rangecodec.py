"""Range encoder and decoder for adaptive binary probabilities.

Probabilities are 11-bit integers kept in plain lists; the coding
functions take the list and the index of the probability to use and
update it in place.
"""

from typing import Any, List

from .byteio import LimitedByteWriter, byte_reader
from .errors import DataError, LimitError

MOVE_BITS = 5
PROB_BITS = 11
PROB_INIT = 1 << (PROB_BITS - 1)
MAX_INT64 = (1 << 63) - 1

_TOP = 1 << 24
_MASK32 = 0xFFFFFFFF


def init_probs(n: int) -> List[int]:
    """Return a list of ``n`` probabilities set to one half."""
    return [PROB_INIT] * n


def _inc(p: int) -> int:
    return p + (((1 << PROB_BITS) - p) >> MOVE_BITS)


def _dec(p: int) -> int:
    return p - (p >> MOVE_BITS)


class RangeEncoder:
    """Range encoder writing to a byte writer.

    The writer may be a LimitedByteWriter, an object with ``write_byte``,
    a bytearray or a binary stream; anything but a LimitedByteWriter is
    wrapped into one without a practical limit.
    """

    def __init__(self, writer: Any) -> None:
        if not isinstance(writer, LimitedByteWriter):
            writer = LimitedByteWriter(writer, MAX_INT64)
        self.lbw = writer
        self.nrange = _MASK32
        self.low = 0
        self.cache_len = 1
        self.cache = 0

    def available(self) -> int:
        """Return the bytes still writable, reserving what close needs."""
        return self.lbw.n - (self.cache_len + 4)

    def _write_byte(self, c: int) -> None:
        if self.available() < 1:
            raise LimitError()
        self.lbw.write_byte(c)

    def _normalize(self) -> None:
        if self.nrange < _TOP:
            self.nrange = (self.nrange << 8) & _MASK32
            self._shift_low()

    def direct_encode_bit(self, b: int) -> None:
        """Encode the least significant bit of ``b`` with probability 1/2."""
        self.nrange >>= 1
        if b & 1:
            self.low += self.nrange
        self._normalize()

    def encode_bit(self, b: int, probs: List[int], i: int) -> None:
        """Encode the least significant bit of ``b`` using ``probs[i]``."""
        p = probs[i]
        bound = (self.nrange >> PROB_BITS) * p
        if b & 1 == 0:
            self.nrange = bound
            probs[i] = _inc(p)
        else:
            self.low += bound
            self.nrange -= bound
            probs[i] = _dec(p)
        self._normalize()

    def close(self) -> None:
        """Flush the complete low value."""
        for _ in range(5):
            self._shift_low()

    def _shift_low(self) -> None:
        low32 = self.low & _MASK32
        if low32 < 0xFF000000 or (self.low >> 32) != 0:
            tmp = self.cache
            carry = self.low >> 32
            while True:
                self._write_byte((tmp + carry) & 0xFF)
                tmp = 0xFF
                self.cache_len -= 1
                if self.cache_len <= 0:
                    break
            self.cache = (low32 >> 24) & 0xFF
        self.cache_len += 1
        self.low = (low32 << 8) & _MASK32


class RangeDecoder:
    """Range decoder reading from a byte reader or binary stream."""

    def __init__(self, reader: Any) -> None:
        self.reader = byte_reader(reader)
        self.nrange = _MASK32
        self.code = 0
        if self.reader.read_byte() != 0:
            raise DataError("range decoder: first byte not zero")
        for _ in range(4):
            self._update_code()
        if self.code >= self.nrange:
            raise DataError("range decoder: code out of range")

    def _update_code(self) -> None:
        self.code = ((self.code << 8) | self.reader.read_byte()) & _MASK32

    def possibly_at_end(self) -> bool:
        """Return whether the stream may end here."""
        return self.code == 0

    def _normalize(self) -> None:
        if self.nrange < _TOP:
            self.nrange <<= 8
            self._update_code()

    def direct_decode_bit(self) -> int:
        """Decode a bit with probability 1/2."""
        self.nrange >>= 1
        code = self.code - self.nrange
        if code < 0:
            b = 0
        else:
            self.code = code
            b = 1
        self._normalize()
        return b

    def decode_bit(self, probs: List[int], i: int) -> int:
        """Decode a bit using ``probs[i]`` and update the probability."""
        p = probs[i]
        bound = (self.nrange >> PROB_BITS) * p
        if self.code < bound:
            self.nrange = bound
            probs[i] = _inc(p)
            b = 0
        else:
            self.code -= bound
            self.nrange -= bound
            probs[i] = _dec(p)
            b = 1
        self._normalize()
        return b

    def tree_decode_matched_byte(self, probs: List[int], m: int) -> int:
        """Decode a literal byte in the context of the match byte ``m``."""
        symbol = 1
        offset = 0x100
        for _ in range(8):
            m <<= 1
            bit = offset
            offset &= m
            if self.decode_bit(probs, offset + bit + symbol):
                symbol = (symbol << 1) | 1
            else:
                symbol <<= 1
                offset ^= bit
        return symbol & 0xFF

    def tree_decode_bits(self, probs: List[int], n: int) -> int:
        """Decode ``n`` bits, most significant first, along a bit tree."""
        symbol = 1
        for _ in range(n):
            symbol = (symbol << 1) | self.decode_bit(probs, symbol)
        return symbol - (1 << n)

    def reverse_tree_decode_bits(self, probs: List[int], n: int) -> int:
        """Decode ``n`` bits, least significant first, along a bit tree."""
        symbol = 1
        x = 0
        for i in range(n):
            b = self.decode_bit(probs, symbol)
            symbol = (symbol << 1) | b
            x |= b << i
        return x

    def direct_decode_bits(self, n: int) -> int:
        """Decode ``n`` bits with probability 1/2, most significant first."""
        x = 0
        for _ in range(n):
            x = (x << 1) | self.direct_decode_bit()
        return x
"""Probability-model codecs for the parts of an LZMA operation stream.

All codecs use the range coder from :mod:`lzstream.rangecodec` and keep
their adaptive probabilities in plain lists of integers.
"""

from typing import List

from .bitops import nlz32
from .errors import LzmaError
from .properties import MAX_LC, MAX_LP, MIN_LC, MIN_LP
from .rangecodec import RangeDecoder, RangeEncoder, init_probs

MAX_POS_BITS = 4

MIN_MATCH_LEN = 2
MAX_MATCH_LEN = MIN_MATCH_LEN + 16 + 256 - 1

MIN_DISTANCE = 1
MAX_DISTANCE = 1 << 32
LEN_STATES = 4
START_POS_MODEL = 4
END_POS_MODEL = 14
POS_SLOT_BITS = 6
ALIGN_BITS = 4

_MASK32 = 0xFFFFFFFF


def _check_bits(bits: int) -> None:
    if not 1 <= bits <= 32:
        raise ValueError("bits outside of range [1,32]")


class TreeCodec:
    """Codes fixed-size values along a bit tree, most significant bit first."""

    def __init__(self, bits: int) -> None:
        _check_bits(bits)
        self.bits = bits
        self.probs: List[int] = init_probs(1 << bits)

    def encode(self, e: RangeEncoder, v: int) -> None:
        """Encode the lowest ``bits`` bits of ``v``."""
        m = 1
        for i in range(self.bits - 1, -1, -1):
            b = (v >> i) & 1
            e.encode_bit(b, self.probs, m)
            m = (m << 1) | b

    def decode(self, d: RangeDecoder) -> int:
        """Decode a value of ``bits`` bits."""
        return d.tree_decode_bits(self.probs, self.bits)


class TreeReverseCodec:
    """Codes fixed-size values along a bit tree, least significant bit first."""

    def __init__(self, bits: int) -> None:
        _check_bits(bits)
        self.bits = bits
        self.probs: List[int] = init_probs(1 << bits)

    def encode(self, e: RangeEncoder, v: int) -> None:
        """Encode the lowest ``bits`` bits of ``v``."""
        m = 1
        for i in range(self.bits):
            b = (v >> i) & 1
            e.encode_bit(b, self.probs, m)
            m = (m << 1) | b

    def decode(self, d: RangeDecoder) -> int:
        """Decode a value of ``bits`` bits."""
        return d.reverse_tree_decode_bits(self.probs, self.bits)


class DirectCodec:
    """Codes fixed-size values with probability 1/2 for every bit."""

    def __init__(self, bits: int) -> None:
        _check_bits(bits)
        self.bits = bits

    def encode(self, e: RangeEncoder, v: int) -> None:
        """Encode the lowest ``bits`` bits of ``v``, most significant first."""
        for i in range(self.bits - 1, -1, -1):
            e.direct_encode_bit(v >> i)

    def decode(self, d: RangeDecoder) -> int:
        """Decode a value of ``bits`` bits."""
        return d.direct_decode_bits(self.bits)


class LengthCodec:
    """Codes match length offsets (length minus MIN_MATCH_LEN)."""

    def __init__(self) -> None:
        self.choice: List[int] = init_probs(2)
        self.low = [TreeCodec(3) for _ in range(1 << MAX_POS_BITS)]
        self.mid = [TreeCodec(3) for _ in range(1 << MAX_POS_BITS)]
        self.high = TreeCodec(8)

    def encode(self, e: RangeEncoder, l: int, pos_state: int) -> None:
        """Encode the length offset ``l`` for the given position state."""
        if not 0 <= l <= MAX_MATCH_LEN - MIN_MATCH_LEN:
            raise LzmaError("length codec: length offset out of range")
        if l < 8:
            e.encode_bit(0, self.choice, 0)
            self.low[pos_state].encode(e, l)
            return
        e.encode_bit(1, self.choice, 0)
        if l < 16:
            e.encode_bit(0, self.choice, 1)
            self.mid[pos_state].encode(e, l - 8)
            return
        e.encode_bit(1, self.choice, 1)
        self.high.encode(e, l - 16)

    def decode(self, d: RangeDecoder, pos_state: int) -> int:
        """Decode a length offset for the given position state."""
        if d.decode_bit(self.choice, 0) == 0:
            return self.low[pos_state].decode(d)
        if d.decode_bit(self.choice, 1) == 0:
            return self.mid[pos_state].decode(d) + 8
        return self.high.decode(d) + 16


class LiteralCodec:
    """Codes literal bytes; 0x300 probabilities per literal state.

    The upper 512 probabilities of each state are used in the context of
    a match byte.
    """

    def __init__(self, lc: int, lp: int) -> None:
        if not MIN_LC <= lc <= MAX_LC:
            raise ValueError("lc out of range")
        if not MIN_LP <= lp <= MAX_LP:
            raise ValueError("lp out of range")
        self.probs: List[List[int]] = [
            init_probs(0x300) for _ in range(1 << (lc + lp))
        ]

    def encode(
        self, e: RangeEncoder, s: int, state: int, match: int, lit_state: int
    ) -> None:
        """Encode byte ``s`` given the LZMA state, match byte and literal state."""
        probs = self.probs[lit_state]
        symbol = 1
        r = s & 0xFF
        if state >= 7:
            m = match & 0xFF
            while True:
                match_bit = (m >> 7) & 1
                m = (m << 1) & 0xFF
                bit = (r >> 7) & 1
                r = (r << 1) & 0xFF
                e.encode_bit(bit, probs, ((1 + match_bit) << 8) | symbol)
                symbol = (symbol << 1) | bit
                if match_bit != bit or symbol >= 0x100:
                    break
        while symbol < 0x100:
            bit = (r >> 7) & 1
            r = (r << 1) & 0xFF
            e.encode_bit(bit, probs, symbol)
            symbol = (symbol << 1) | bit

    def decode(self, d: RangeDecoder, state: int, match: int, lit_state: int) -> int:
        """Decode a literal byte given the LZMA state, match byte and literal state."""
        probs = self.probs[lit_state]
        if state >= 7:
            return d.tree_decode_matched_byte(probs, match & 0xFF)
        return d.tree_decode_bits(probs, 8)


def _len_state(l: int) -> int:
    return min(l, LEN_STATES - 1)


class DistCodec:
    """Codes distance offsets (distance minus one); 0xFFFFFFFF marks the end."""

    def __init__(self) -> None:
        self.pos_slot_codecs = [TreeCodec(POS_SLOT_BITS) for _ in range(LEN_STATES)]
        self.pos_model = [
            TreeReverseCodec((slot >> 1) - 1)
            for slot in range(START_POS_MODEL, END_POS_MODEL)
        ]
        self.align_codec = TreeReverseCodec(ALIGN_BITS)

    def encode(self, e: RangeEncoder, dist: int, l: int) -> None:
        """Encode the distance offset ``dist`` using the length offset ``l``."""
        dist &= _MASK32
        bits = 0
        if dist < START_POS_MODEL:
            pos_slot = dist
        else:
            bits = 30 - nlz32(dist)
            pos_slot = START_POS_MODEL - 2 + (bits << 1) + ((dist >> bits) & 1)
        self.pos_slot_codecs[_len_state(l)].encode(e, pos_slot)
        if pos_slot < START_POS_MODEL:
            return
        if pos_slot < END_POS_MODEL:
            self.pos_model[pos_slot - START_POS_MODEL].encode(e, dist)
            return
        DirectCodec(bits - ALIGN_BITS).encode(e, dist >> ALIGN_BITS)
        self.align_codec.encode(e, dist)

    def decode(self, d: RangeDecoder, l: int) -> int:
        """Decode a distance offset using the length offset ``l``."""
        pos_slot = self.pos_slot_codecs[_len_state(l)].decode(d)
        if pos_slot < START_POS_MODEL:
            return pos_slot
        bits = (pos_slot >> 1) - 1
        dist = (2 | (pos_slot & 1)) << bits
        if pos_slot < END_POS_MODEL:
            dist += self.pos_model[pos_slot - START_POS_MODEL].decode(d)
            return dist & _MASK32
        dist += DirectCodec(bits - ALIGN_BITS).decode(d) << ALIGN_BITS
        dist += self.align_codec.decode(d)
        return dist & _MASK32
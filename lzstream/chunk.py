"""LZMA2 chunk headers, the chunk state machine and dictionary-size codes."""

import enum
from dataclasses import dataclass, field
from typing import Any

from .errors import DataError, LzmaError
from .properties import Properties, properties_for_code

MAX_COMPRESSED = 1 << 16
MAX_UNCOMPRESSED = 1 << 21
UNCOMPRESSED_HEADER_LEN = 3

MAX_DICT_CAP = (1 << 32) - 1
MAX_DICT_CAP_CODE = 40

H_EOS = 0
H_UD = 1
H_U = 2
H_L = 1 << 7
H_LR = 1 << 7 | 1 << 5
H_LRN = 1 << 7 | 1 << 6
H_LRND = 1 << 7 | 1 << 6 | 1 << 5


class ChunkType(enum.IntEnum):
    """Kind of an LZMA2 chunk."""

    EOS = 0
    UD = 1
    U = 2
    L = 3
    LR = 4
    LRN = 5
    LRND = 6

    def __str__(self) -> str:
        return self.name


_HEADER_BYTE = {
    ChunkType.UD: H_UD,
    ChunkType.U: H_U,
    ChunkType.L: H_L,
    ChunkType.LR: H_LR,
    ChunkType.LRN: H_LRN,
    ChunkType.LRND: H_LRND,
}

_COMPRESSED_TYPES = {
    H_L: ChunkType.L,
    H_LR: ChunkType.LR,
    H_LRN: ChunkType.LRN,
    H_LRND: ChunkType.LRND,
}

_UNCOMPRESSED_TYPES = {
    H_EOS: ChunkType.EOS,
    H_UD: ChunkType.UD,
    H_U: ChunkType.U,
}


def header_chunk_type(h: int) -> ChunkType:
    """Return the chunk type of a header byte, ignoring its size bits."""
    table, key = (
        (_UNCOMPRESSED_TYPES, h) if h & H_L == 0 else (_COMPRESSED_TYPES, h & H_LRND)
    )
    try:
        return table[key]
    except KeyError:
        raise DataError("lzma: unsupported chunk header byte") from None


def header_len(ctype: ChunkType) -> int:
    """Return the length of the chunk header for a chunk type."""
    if ctype == ChunkType.EOS:
        return 1
    if ctype in (ChunkType.U, ChunkType.UD):
        return UNCOMPRESSED_HEADER_LEN
    if ctype in (ChunkType.L, ChunkType.LR):
        return 5
    return 6


@dataclass
class ChunkHeader:
    """Contents of an LZMA2 chunk header.

    ``uncompressed`` and ``compressed`` hold the sizes minus one, as stored.
    """

    ctype: ChunkType
    uncompressed: int = 0
    compressed: int = 0
    props: Properties = field(default_factory=Properties)

    def __str__(self) -> str:
        return f"{self.ctype} {self.uncompressed} {self.compressed} {self.props}"

    def to_bytes(self) -> bytes:
        """Encode the chunk header."""
        self.props.verify()
        data = bytearray(header_len(self.ctype))
        if self.ctype == ChunkType.EOS:
            return bytes(data)
        data[0] = _HEADER_BYTE[self.ctype]
        data[1:3] = (self.uncompressed & 0xFFFF).to_bytes(2, "big")
        if self.ctype <= ChunkType.U:
            return bytes(data)
        data[0] |= (self.uncompressed >> 16) & 0xFF & ~H_LRND
        data[3:5] = (self.compressed & 0xFFFF).to_bytes(2, "big")
        if self.ctype <= ChunkType.LR:
            return bytes(data)
        data[5] = self.props.code()
        return bytes(data)


def parse_chunk_header(data: bytes) -> ChunkHeader:
    """Decode a chunk header; ``data`` must have exactly the right length."""
    if not data:
        raise DataError("lzma: no chunk header data")
    ctype = header_chunk_type(data[0])
    n = header_len(ctype)
    if len(data) < n:
        raise DataError("lzma: incomplete chunk header data")
    if len(data) > n:
        raise DataError("lzma: invalid chunk header data length")
    h = ChunkHeader(ctype)
    if ctype == ChunkType.EOS:
        return h
    h.uncompressed = int.from_bytes(data[1:3], "big")
    if ctype <= ChunkType.U:
        return h
    h.uncompressed |= (data[0] & ~H_LRND & 0xFF) << 16
    h.compressed = int.from_bytes(data[3:5], "big")
    if ctype <= ChunkType.LR:
        return h
    h.props = properties_for_code(data[5])
    return h


def _read_exact(stream: Any, n: int) -> bytes:
    parts = []
    remaining = n
    while remaining > 0:
        chunk = stream.read(remaining)
        if not chunk:
            break
        parts.append(chunk)
        remaining -= len(chunk)
    return b"".join(parts)


def read_chunk_header(stream: Any) -> ChunkHeader:
    """Read a chunk header from a binary stream.

    Raises EOFError if the stream ends before the header is complete.
    """
    first = _read_exact(stream, 1)
    if not first:
        raise EOFError("no chunk header")
    ctype = header_chunk_type(first[0])
    rest_len = header_len(ctype) - 1
    rest = _read_exact(stream, rest_len)
    if len(rest) < rest_len:
        raise EOFError("truncated chunk header")
    return parse_chunk_header(first + rest)


class ChunkState(enum.Enum):
    """State of the chunk sequence of an LZMA2 stream."""

    START = "S"
    LZMA = "L"
    RESET = "R"
    UNCOMPRESSED = "U"
    STOP = "T"

    def next(self, ctype: ChunkType) -> "ChunkState":
        """Return the state after a chunk of type ``ctype``.

        Raises DataError if the chunk type is not allowed here.
        """
        target = _TRANSITIONS[self].get(ctype)
        if target is None:
            raise DataError("lzma: unexpected chunk type")
        return target

    def default_chunk_type(self) -> ChunkType:
        """Return the chunk type a writer uses by default in this state."""
        if self is ChunkState.START:
            return ChunkType.LRND
        if self in (ChunkState.LZMA, ChunkState.UNCOMPRESSED):
            return ChunkType.L
        if self is ChunkState.RESET:
            return ChunkType.LRN
        return ChunkType.EOS


_S = ChunkState
_T = ChunkType
_TRANSITIONS = {
    _S.START: {_T.EOS: _S.STOP, _T.UD: _S.RESET, _T.LRND: _S.LZMA},
    _S.LZMA: {
        _T.EOS: _S.STOP,
        _T.UD: _S.RESET,
        _T.U: _S.UNCOMPRESSED,
        _T.L: _S.LZMA,
        _T.LR: _S.LZMA,
        _T.LRN: _S.LZMA,
        _T.LRND: _S.LZMA,
    },
    _S.RESET: {
        _T.EOS: _S.STOP,
        _T.UD: _S.RESET,
        _T.U: _S.RESET,
        _T.LRN: _S.LZMA,
        _T.LRND: _S.LZMA,
    },
    _S.UNCOMPRESSED: {
        _T.EOS: _S.STOP,
        _T.UD: _S.RESET,
        _T.U: _S.UNCOMPRESSED,
        _T.L: _S.LZMA,
        _T.LR: _S.LZMA,
        _T.LRN: _S.LZMA,
        _T.LRND: _S.LZMA,
    },
    _S.STOP: {},
}


def _decode_dict_cap(c: int) -> int:
    return (2 | (c & 1)) << (11 + ((c >> 1) & 0x1F))


def decode_dict_cap(c: int) -> int:
    """Decode an LZMA2 dictionary capacity code."""
    if c >= MAX_DICT_CAP_CODE:
        if c == MAX_DICT_CAP_CODE:
            return MAX_DICT_CAP
        raise LzmaError("lzma: invalid dictionary size code")
    return _decode_dict_cap(c)


def encode_dict_cap(n: int) -> int:
    """Return the smallest code whose capacity is at least ``n``.

    Capacities beyond the largest code map to the maximum code.
    """
    a, b = 0, MAX_DICT_CAP_CODE
    while a < b:
        c = a + ((b - a) >> 1)
        m = _decode_dict_cap(c)
        if n <= m:
            if n == m:
                return c
            b = c
        else:
            a = c + 1
    return a
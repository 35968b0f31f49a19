"""Reader for the classic LZMA file format."""

import io
from typing import Any

from .byteio import byte_reader
from .decoder import Decoder
from .decoderdict import DecoderDict
from .errors import DataError, LzmaError
from .header import HEADER_LEN, MAX_DICT_CAP, MIN_DICT_CAP, parse_header
from .state import State

DEFAULT_DICT_CAP = 8 * 1024 * 1024


def _read_full(stream: Any, n: int) -> bytes:
    parts = []
    remaining = n
    while remaining > 0:
        chunk = stream.read(remaining)
        if not chunk:
            break
        parts.append(chunk)
        remaining -= len(chunk)
    return b"".join(parts)


def _verify_dict_cap(dict_cap: int) -> int:
    if dict_cap == 0:
        dict_cap = DEFAULT_DICT_CAP
    if not MIN_DICT_CAP <= dict_cap <= MAX_DICT_CAP:
        raise LzmaError("lzma: dictionary capacity is out of range")
    return dict_cap


class LzmaReader(io.RawIOBase):
    """Decompressing reader for a classic LZMA stream.

    The header is read and checked on construction. ``dict_cap`` of 0
    selects the default of 8 MiB; the larger of it and the capacity in
    the header is used.
    """

    def __init__(self, stream: Any, dict_cap: int = 0) -> None:
        super().__init__()
        dict_cap = _verify_dict_cap(dict_cap)
        data = _read_full(stream, HEADER_LEN)
        if len(data) < HEADER_LEN:
            raise DataError("lzma: unexpected EOF")
        self.header = parse_header(data)
        self.header.dict_cap = max(self.header.dict_cap, MIN_DICT_CAP)
        dictionary = DecoderDict(max(self.header.dict_cap, dict_cap))
        self._decoder = Decoder(
            byte_reader(stream),
            State(self.header.properties),
            dictionary,
            self.header.size,
        )

    def readable(self) -> bool:
        return True

    def readinto(self, b: Any) -> int:
        """Decode into ``b``; return the number of bytes, 0 at the end."""
        data = self._decoder.read(len(b))
        k = len(data)
        b[:k] = data
        return k

    def eos_marker(self) -> bool:
        """Return whether an end-of-stream marker has been met."""
        return self._decoder.eos_marker


def decompress(data: bytes, dict_cap: int = 0) -> bytes:
    """Decompress a complete classic LZMA stream."""
    return LzmaReader(io.BytesIO(data), dict_cap).read()
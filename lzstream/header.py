"""The 13-byte header of the classic LZMA file format."""

import struct
from dataclasses import dataclass

from .errors import LzmaError
from .properties import Properties, properties_for_code

HEADER_LEN = 13
MIN_DICT_CAP = 1 << 12
MAX_DICT_CAP = (1 << 32) - 1
NO_HEADER_SIZE = (1 << 64) - 1

_LAYOUT = struct.Struct("<BIQ")


@dataclass
class Header:
    """Properties, dictionary capacity and uncompressed size (-1 if unknown)."""

    properties: Properties
    dict_cap: int
    size: int = -1

    def to_bytes(self) -> bytes:
        """Encode the header into its 13-byte form."""
        self.properties.verify()
        if not 0 <= self.dict_cap <= MAX_DICT_CAP:
            raise LzmaError(f"lzma: DictCap {self.dict_cap} out of range")
        size = self.size if self.size > 0 else NO_HEADER_SIZE
        return _LAYOUT.pack(self.properties.code(), self.dict_cap, size)


def parse_header(data: bytes) -> Header:
    """Decode a 13-byte LZMA header."""
    if len(data) != HEADER_LEN:
        raise LzmaError("lzma: header data has wrong length")
    code, dict_cap, size = _LAYOUT.unpack(bytes(data))
    properties = properties_for_code(code)
    if size == NO_HEADER_SIZE:
        size = -1
    elif size >= 1 << 63:
        raise LzmaError("LZMA header: uncompressed size out of int64 range")
    return Header(properties, dict_cap, size)


def valid_dict_cap(dict_cap: int) -> bool:
    """Return whether the capacity is 2^n or 2^n+2^(n-1) with n >= 10, or 2^32-1."""
    if dict_cap == MAX_DICT_CAP:
        return True
    return any(
        dict_cap == 1 << n or dict_cap == (1 << n) + (1 << (n - 1))
        for n in range(10, 32)
    )


def valid_header(data: bytes) -> bool:
    """Return whether ``data`` looks like a plausible LZMA file header."""
    try:
        h = parse_header(data)
    except LzmaError:
        return False
    if not valid_dict_cap(h.dict_cap):
        return False
    return h.size < 0 or h.size <= 1 << 38
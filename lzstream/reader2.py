"""Reader for LZMA2 chunk sequences."""

import io
from typing import Any, Optional

from .byteio import LimitedByteReader, byte_reader
from .chunk import ChunkState, ChunkType, read_chunk_header
from .decoder import Decoder
from .decoderdict import DecoderDict
from .errors import DataError, LzmaError
from .header import MAX_DICT_CAP, MIN_DICT_CAP
from .state import State

DEFAULT_DICT_CAP = 8 * 1024 * 1024


def _read_up_to(stream: Any, n: int) -> bytes:
    parts = []
    remaining = n
    while remaining > 0:
        chunk = stream.read(remaining)
        if not chunk:
            break
        parts.append(chunk)
        remaining -= len(chunk)
    return b"".join(parts)


class _UncompressedReader:
    """Copies the data of uncompressed chunks through the dictionary."""

    def __init__(self, stream: Any, dictionary: DecoderDict, size: int) -> None:
        self.dict = dictionary
        self.reopen(stream, size)

    def reopen(self, stream: Any, size: int) -> None:
        self.stream = stream
        self.remaining = size
        self.eof = False
        self.error: Optional[LzmaError] = None

    def _fill(self) -> bool:
        if not self.eof:
            want = self.dict.available()
            data = _read_up_to(self.stream, min(want, self.remaining))
            self.dict.write(data)
            self.remaining -= len(data)
            if len(data) == want:
                return True
            self.eof = True
            if data:
                return True
        if self.remaining != 0:
            raise DataError("lzma: unexpected EOF")
        return False

    def read(self, n: int) -> bytes:
        if self.error is not None:
            raise self.error
        out = bytearray()
        while True:
            out += self.dict.read(n - len(out))
            if len(out) >= n:
                return bytes(out)
            try:
                more = self._fill()
            except LzmaError as exc:
                self.error = exc
                if out:
                    return bytes(out)
                raise
            if not more:
                return bytes(out)


class Lzma2Reader(io.RawIOBase):
    """Decompressing reader for an LZMA2 chunk sequence.

    Errors in the first chunk header are reported by the first read.
    ``dict_cap`` of 0 selects the default of 8 MiB.
    """

    def __init__(self, stream: Any, dict_cap: int = 0) -> None:
        super().__init__()
        if dict_cap == 0:
            dict_cap = DEFAULT_DICT_CAP
        if not MIN_DICT_CAP <= dict_cap <= MAX_DICT_CAP:
            raise LzmaError("lzma: dictionary capacity is out of range")
        self._stream = stream
        self._cstate = ChunkState.START
        self._dict = DecoderDict(dict_cap)
        self._ur: Optional[_UncompressedReader] = None
        self._decoder: Optional[Decoder] = None
        self._chunk_reader: Any = None
        self._error: Optional[LzmaError] = None
        self._done = False
        try:
            self._done = not self._start_chunk()
        except LzmaError as exc:
            self._error = exc

    def _start_chunk(self) -> bool:
        """Parse the next chunk header; return False at the EOS chunk."""
        self._chunk_reader = None
        try:
            header = read_chunk_header(self._stream)
        except EOFError:
            raise DataError("lzma: unexpected EOF") from None
        self._cstate = self._cstate.next(header.ctype)
        if self._cstate is ChunkState.STOP:
            return False
        ctype = header.ctype
        if ctype in (ChunkType.UD, ChunkType.LRND):
            self._dict.reset()
        size = header.uncompressed + 1
        if ctype in (ChunkType.U, ChunkType.UD):
            if self._ur is None:
                self._ur = _UncompressedReader(self._stream, self._dict, size)
            else:
                self._ur.reopen(self._stream, size)
            self._chunk_reader = self._ur
            return True
        br = LimitedByteReader(byte_reader(self._stream), header.compressed + 1)
        if self._decoder is None:
            self._decoder = Decoder(br, State(header.props), self._dict, size)
        else:
            if ctype == ChunkType.LR:
                self._decoder.state.reset()
            elif ctype in (ChunkType.LRN, ChunkType.LRND):
                self._decoder.state = State(header.props)
            self._decoder.reopen(br, size)
        self._chunk_reader = self._decoder
        return True

    def readable(self) -> bool:
        return True

    def readinto(self, b: Any) -> int:
        """Decode into ``b``; return the number of bytes, 0 at the end."""
        if self._error is not None:
            raise self._error
        n = len(b)
        out = bytearray()
        while len(out) < n and not self._done:
            try:
                chunk = self._chunk_reader.read(n - len(out))
                if not chunk:
                    self._done = not self._start_chunk()
                    continue
            except LzmaError as exc:
                self._error = exc
                if out:
                    break
                raise
            out += chunk
        k = len(out)
        b[:k] = out
        return k

    def eos(self) -> bool:
        """Return whether the sequence was terminated by an EOS chunk."""
        return self._cstate is ChunkState.STOP


def decompress2(data: bytes, dict_cap: int = 0) -> bytes:
    """Decompress a complete LZMA2 chunk sequence."""
    return Lzma2Reader(io.BytesIO(data), dict_cap).read()
"""Writer for LZMA2 chunk sequences."""

import dataclasses
import io
from dataclasses import dataclass
from typing import Any, Optional

from .byteio import LimitedByteWriter
from .chunk import (
    MAX_COMPRESSED,
    MAX_UNCOMPRESSED,
    UNCOMPRESSED_HEADER_LEN,
    ChunkHeader,
    ChunkState,
    ChunkType,
    header_len,
)
from .codecs import MAX_MATCH_LEN
from .encoder import Encoder
from .encoderdict import EncoderDict
from .errors import LzmaError
from .header import MAX_DICT_CAP, MIN_DICT_CAP
from .match_algorithm import MatchAlgorithm
from .properties import Properties
from .state import State

DEFAULT_DICT_CAP = 8 * 1024 * 1024
DEFAULT_BUF_SIZE = 4096


@dataclass
class Writer2Config:
    """Parameters of an Lzma2Writer; zero values select the defaults."""

    properties: Optional[Properties] = None
    dict_cap: int = 0
    buf_size: int = 0
    matcher: MatchAlgorithm = MatchAlgorithm.HASH_TABLE4

    def _fill(self) -> None:
        if self.properties is None:
            self.properties = Properties(lc=3, lp=0, pb=2)
        if self.dict_cap == 0:
            self.dict_cap = DEFAULT_DICT_CAP
        if self.buf_size == 0:
            self.buf_size = DEFAULT_BUF_SIZE

    def verify(self) -> None:
        """Replace zero values by defaults and raise LzmaError on bad values."""
        self._fill()
        self.properties.verify()
        if not MIN_DICT_CAP <= self.dict_cap <= MAX_DICT_CAP:
            raise LzmaError("lzma: dictionary capacity is out of range")
        if self.buf_size < MAX_MATCH_LEN:
            raise LzmaError("lzma: lookahead buffer size too small")
        if self.properties.lc + self.properties.lp > 4:
            raise LzmaError("lzma: sum of lc and lp exceeds 4")
        try:
            self.matcher = MatchAlgorithm(self.matcher)
        except ValueError:
            raise LzmaError("lzma: unsupported match algorithm value") from None


class Lzma2Writer:
    """Compressing writer producing an LZMA2 chunk sequence.

    Data is buffered; flush writes complete chunks, close also writes the
    end-of-stream chunk. The output of a writer that was only flushed can
    be continued by another stream.
    """

    def __init__(self, stream: Any, config: Optional[Writer2Config] = None) -> None:
        config = dataclasses.replace(config) if config else Writer2Config()
        config.verify()
        self._stream = stream
        self._start = State(config.properties)
        self._cstate = ChunkState.START
        self._ctype = self._cstate.default_chunk_type()
        self._buf = bytearray()
        self._lbw = LimitedByteWriter(self._buf, MAX_COMPRESSED)
        matcher = config.matcher.new_matcher(config.dict_cap)
        dictionary = EncoderDict(config.dict_cap, config.buf_size, matcher)
        self._encoder = Encoder(self._lbw, self._start.clone(), dictionary, False)

    def _written(self) -> int:
        return self._encoder.compressed() + self._encoder.dict.buffered()

    def _check_open(self) -> None:
        if self._cstate is ChunkState.STOP:
            raise LzmaError("lzma: writer closed")

    def write(self, data: bytes) -> int:
        """Compress ``data`` into the buffered chunk; return its length."""
        self._check_open()
        data = bytes(data)
        n = 0
        while n < len(data):
            m = MAX_UNCOMPRESSED - self._written()
            if m <= 0:
                raise LzmaError("lzma: uncompressed chunk limit reached")
            q = data[n:n + m]
            k = self._encoder.write(q)
            n += k
            if k < len(q) or k == m:
                self._flush_chunk()
        return n

    def _write_uncompressed_chunk(self) -> None:
        u = self._encoder.compressed()
        if u <= 0:
            raise LzmaError("lzma: can't write empty uncompressed chunk")
        if u > MAX_UNCOMPRESSED:
            raise LzmaError("lzma: overrun of uncompressed data limit")
        self._ctype = ChunkType.UD if self._ctype == ChunkType.LRND else ChunkType.U
        self._encoder.state = self._start
        header = ChunkHeader(self._ctype, uncompressed=u - 1)
        self._stream.write(header.to_bytes())
        self._encoder.dict.copy_n(self._stream, u)

    def _write_compressed_chunk(self) -> None:
        u = self._encoder.compressed()
        if u <= 0:
            raise LzmaError("lzma: empty chunk")
        if u > MAX_UNCOMPRESSED:
            raise LzmaError("lzma: overrun of uncompressed data limit")
        c = len(self._buf)
        if not 0 < c <= MAX_COMPRESSED:
            raise LzmaError("lzma: compressed chunk size out of range")
        header = ChunkHeader(
            self._ctype,
            uncompressed=u - 1,
            compressed=c - 1,
            props=self._encoder.state.properties,
        )
        self._stream.write(header.to_bytes())
        self._stream.write(bytes(self._buf))

    def _write_chunk(self) -> None:
        u = UNCOMPRESSED_HEADER_LEN + self._encoder.compressed()
        c = header_len(self._ctype) + len(self._buf)
        if u < c:
            self._write_uncompressed_chunk()
        else:
            self._write_compressed_chunk()

    def _flush_chunk(self) -> None:
        if self._written() == 0:
            return
        self._encoder.close()
        self._write_chunk()
        del self._buf[:]
        self._lbw.n = MAX_COMPRESSED
        self._encoder.reopen(self._lbw)
        self._cstate = self._cstate.next(self._ctype)
        self._ctype = self._cstate.default_chunk_type()
        self._start = self._encoder.state.clone()

    def flush(self) -> None:
        """Write all buffered data as one or more chunks."""
        self._check_open()
        while self._written() > 0:
            self._flush_chunk()

    def close(self) -> None:
        """Flush and terminate the sequence with an end-of-stream chunk."""
        self._check_open()
        self.flush()
        self._stream.write(b"\x00")
        self._cstate = ChunkState.STOP

    def __enter__(self) -> "Lzma2Writer":
        return self

    def __exit__(self, exc_type: Any, exc: Any, tb: Any) -> None:
        if exc_type is None:
            self.close()


def compress2(data: bytes, config: Optional[Writer2Config] = None) -> bytes:
    """Compress ``data`` into a complete LZMA2 chunk sequence."""
    out = io.BytesIO()
    with Lzma2Writer(out, config) as w:
        w.write(data)
    return out.getvalue()
"""Writer for the classic LZMA file format."""

import dataclasses
import io
from dataclasses import dataclass
from typing import Any, Optional

from .codecs import MAX_MATCH_LEN
from .encoder import Encoder
from .encoderdict import EncoderDict
from .errors import DataError, LzmaError, NoSpaceError
from .header import MAX_DICT_CAP, MIN_DICT_CAP, Header
from .match_algorithm import MatchAlgorithm
from .properties import Properties
from .state import State

DEFAULT_DICT_CAP = 8 * 1024 * 1024
DEFAULT_BUF_SIZE = 4096


@dataclass
class WriterConfig:
    """Parameters of an LzmaWriter; zero values select the defaults.

    A positive ``size`` implies ``size_in_header``. Without a size in the
    header the end-of-stream marker is always written.
    """

    properties: Optional[Properties] = None
    dict_cap: int = 0
    buf_size: int = 0
    matcher: MatchAlgorithm = MatchAlgorithm.HASH_TABLE4
    size_in_header: bool = False
    size: int = 0
    eos_marker: bool = False

    def _fill(self) -> None:
        if self.properties is None:
            self.properties = Properties(lc=3, lp=0, pb=2)
        if self.dict_cap == 0:
            self.dict_cap = DEFAULT_DICT_CAP
        if self.buf_size == 0:
            self.buf_size = DEFAULT_BUF_SIZE
        if self.size > 0:
            self.size_in_header = True
        if not self.size_in_header:
            self.eos_marker = True

    def verify(self) -> None:
        """Replace zero values by defaults and raise LzmaError on bad values."""
        self._fill()
        self.properties.verify()
        if not MIN_DICT_CAP <= self.dict_cap <= MAX_DICT_CAP:
            raise LzmaError("lzma: dictionary capacity is out of range")
        if self.buf_size < MAX_MATCH_LEN:
            raise LzmaError("lzma: lookahead buffer size too small")
        if self.size_in_header:
            if self.size < 0:
                raise LzmaError("lzma: negative size not supported")
        elif not self.eos_marker:
            raise LzmaError("lzma: EOS marker is required")
        try:
            self.matcher = MatchAlgorithm(self.matcher)
        except ValueError:
            raise LzmaError("lzma: unsupported match algorithm value") from None

    def _header(self) -> Header:
        size = self.size if self.size_in_header else -1
        return Header(properties=self.properties, dict_cap=self.dict_cap, size=size)


class LzmaWriter:
    """Compressing writer for the classic LZMA format.

    The header is written on construction; close finishes the stream but
    leaves the underlying stream open.
    """

    def __init__(self, stream: Any, config: Optional[WriterConfig] = None) -> None:
        config = dataclasses.replace(config) if config else WriterConfig()
        config.verify()
        self._stream = stream
        self.header = config._header()
        self._out = bytearray()
        matcher = config.matcher.new_matcher(self.header.dict_cap)
        dictionary = EncoderDict(self.header.dict_cap, config.buf_size, matcher)
        self._encoder = Encoder(
            self._out, State(self.header.properties), dictionary, config.eos_marker
        )
        self._closed = False
        stream.write(self.header.to_bytes())

    def _flush_out(self) -> None:
        if self._out:
            self._stream.write(bytes(self._out))
            del self._out[:]

    def _taken(self) -> int:
        return self._encoder.compressed() + self._encoder.dict.buffered()

    def write(self, data: bytes) -> int:
        """Compress ``data``; return the number of bytes taken.

        If a size is given in the header, bytes beyond it are refused:
        the part that fits is taken and NoSpaceError is raised, with the
        count in its ``written`` attribute.
        """
        if self._closed:
            raise LzmaError("lzma: writer closed")
        data = bytes(data)
        truncated = False
        if self.header.size >= 0:
            m = max(self.header.size - self._taken(), 0)
            if m < len(data):
                data = data[:m]
                truncated = True
        n = self._encoder.write(data)
        self._flush_out()
        if truncated:
            exc = NoSpaceError()
            exc.written = n
            raise exc
        return n

    def close(self) -> None:
        """Finish the LZMA stream.

        Raises DataError if fewer bytes than the header's size were written;
        the writer then stays open.
        """
        if self._closed:
            return
        if self.header.size >= 0 and self._taken() != self.header.size:
            raise DataError("lzma: wrong uncompressed data size")
        self._closed = True
        self._encoder.close()
        self._flush_out()

    def __enter__(self) -> "LzmaWriter":
        return self

    def __exit__(self, exc_type: Any, exc: Any, tb: Any) -> None:
        if exc_type is None:
            self.close()


def compress(data: bytes, config: Optional[WriterConfig] = None) -> bytes:
    """Compress ``data`` into a classic LZMA stream."""
    out = io.BytesIO()
    with LzmaWriter(out, config) as w:
        w.write(data)
    return out.getvalue()
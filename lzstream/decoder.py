"""Decoder for raw LZMA data without a file header."""

from typing import Any, Optional

from .codecs import MAX_MATCH_LEN, MIN_DISTANCE, MIN_MATCH_LEN
from .decoderdict import DecoderDict
from .errors import DataError, LzmaError
from .operation import Literal, Match, Operation
from .rangecodec import RangeDecoder
from .state import State

EOS_DIST = 0xFFFFFFFF


def _unexpected_eof() -> DataError:
    return DataError("lzma: unexpected EOF")


def _range_decoder(reader: Any) -> RangeDecoder:
    try:
        return RangeDecoder(reader)
    except EOFError:
        raise _unexpected_eof() from None


class Decoder:
    """Decodes an LZMA operation stream into a decoder dictionary.

    A negative ``size`` means the uncompressed size is unknown and the
    stream must end with an end-of-stream marker.
    """

    def __init__(
        self, reader: Any, state: State, dictionary: DecoderDict, size: int = -1
    ) -> None:
        self.rd = _range_decoder(reader)
        self.state = state
        self.dict = dictionary
        self.size = size
        self.start = dictionary.pos()
        self.eos = False
        self.eos_marker = False
        self._error: Optional[LzmaError] = None

    def reopen(self, reader: Any, size: int) -> None:
        """Restart with a new byte source and size; the count starts at zero."""
        self.rd = _range_decoder(reader)
        self.start = self.dict.pos()
        self.size = size
        self.eos = False
        self._error = None

    def _decode_literal(self) -> Literal:
        s = self.state
        lit_state = s.lit_state(self.dict.byte_at(1), self.dict.head)
        match = self.dict.byte_at(s.rep[0] + 1)
        return Literal(s.lit_codec.decode(self.rd, s.state, match, lit_state))

    def read_op(self) -> Optional[Operation]:
        """Decode the next operation.

        Returns None when the end-of-stream marker is found. Raises
        EOFError if the compressed input ends.
        """
        s = self.state
        rd = self.rd
        state, state2, pos_state = s.states(self.dict.head)
        if rd.decode_bit(s.is_match, state2) == 0:
            op = self._decode_literal()
            s.update_literal()
            return op
        if rd.decode_bit(s.is_rep, state) == 0:
            s.rep[1:4] = s.rep[0:3]
            s.update_match()
            n = s.len_codec.decode(rd, pos_state)
            s.rep[0] = s.dist_codec.decode(rd, n)
            if s.rep[0] == EOS_DIST:
                self.eos_marker = True
                return None
            return Match(s.rep[0] + MIN_DISTANCE, n + MIN_MATCH_LEN)
        if rd.decode_bit(s.is_rep_g0, state) == 0:
            dist = s.rep[0]
            if rd.decode_bit(s.is_rep_g0_long, state2) == 0:
                s.update_short_rep()
                return Match(dist + MIN_DISTANCE, 1)
        else:
            if rd.decode_bit(s.is_rep_g1, state) == 0:
                dist = s.rep[1]
            else:
                if rd.decode_bit(s.is_rep_g2, state) == 0:
                    dist = s.rep[2]
                else:
                    dist = s.rep[3]
                    s.rep[3] = s.rep[2]
                s.rep[2] = s.rep[1]
            s.rep[1] = s.rep[0]
            s.rep[0] = dist
        n = s.rep_len_codec.decode(rd, pos_state)
        s.update_rep()
        return Match(dist + MIN_DISTANCE, n + MIN_MATCH_LEN)

    def _apply(self, op: Operation) -> None:
        if isinstance(op, Match):
            self.dict.write_match(op.distance, op.length)
        else:
            self.dict.write_byte(op.value)

    def _next_op(self) -> Optional[Operation]:
        try:
            return self.read_op()
        except EOFError:
            self.eos = True
            raise _unexpected_eof() from None

    def decompress(self) -> bool:
        """Decode until the dictionary is nearly full or the stream ends.

        Returns True once the end of the LZMA stream has been reached.
        """
        if self.eos:
            return True
        while self.dict.available() >= MAX_MATCH_LEN:
            op = self._next_op()
            if op is None:
                self.eos = True
                if not self.rd.possibly_at_end():
                    raise DataError("lzma: data after end of stream marker")
                if self.size >= 0 and self.size != self.decompressed():
                    raise DataError("lzma: wrong uncompressed data size")
                return True
            self._apply(op)
            if self.size >= 0 and self.decompressed() >= self.size:
                self.eos = True
                if self.decompressed() > self.size:
                    raise DataError("lzma: wrong uncompressed data size")
                if not self.rd.possibly_at_end():
                    if self._next_op() is not None:
                        raise DataError("lzma: wrong uncompressed data size")
                return True
        return False

    def read(self, n: int) -> bytes:
        """Return up to ``n`` decoded bytes; an empty result means the end.

        An error met after some bytes were decoded is raised by the next
        call, so the bytes before it are not lost.
        """
        if self._error is not None:
            raise self._error
        out = bytearray()
        while True:
            chunk = self.dict.read(n - len(out))
            if not chunk and self.eos:
                return bytes(out)
            out += chunk
            if len(out) >= n:
                return bytes(out)
            try:
                self.decompress()
            except LzmaError as exc:
                self._error = exc
                if out:
                    return bytes(out)
                raise

    def decompressed(self) -> int:
        """Return the number of bytes decoded since the last (re)start."""
        return self.dict.pos() - self.start
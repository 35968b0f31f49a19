"""Encoder that turns dictionary data into an LZMA operation stream."""

from typing import Any

from .codecs import MAX_DISTANCE, MAX_MATCH_LEN, MIN_DISTANCE, MIN_MATCH_LEN
from .encoderdict import EncoderDict
from .errors import LimitError
from .operation import Literal, Match, Operation
from .rangecodec import RangeEncoder
from .state import State

# Upper limit of the bytes needed to encode a single operation.
OP_LEN_MARGIN = 16

EOS_MATCH = Match(MAX_DISTANCE, MIN_MATCH_LEN)


class Encoder:
    """Compresses data buffered in an encoder dictionary.

    ``writer`` may be a LimitedByteWriter, in which case the encoder stops
    before the limit is exceeded. With ``eos_marker`` set, close writes an
    end-of-stream marker.
    """

    def __init__(
        self,
        writer: Any,
        state: State,
        dictionary: EncoderDict,
        eos_marker: bool = False,
    ) -> None:
        self.re = RangeEncoder(writer)
        self.dict = dictionary
        self.state = state
        self.marker = eos_marker
        self.start = dictionary.pos()
        self.limit = False
        self.margin = OP_LEN_MARGIN + (5 if eos_marker else 0)

    def write(self, data: bytes) -> int:
        """Put ``data`` into the dictionary, compressing to make room.

        Returns the number of bytes taken; fewer than given means the
        limit of the underlying byte writer has been reached.
        """
        data = bytes(data)
        total = len(data)
        n = 0
        while True:
            avail = self.dict.available()
            if avail > 0 and n < total:
                k = min(avail, total - n)
                self.dict.write(data[n:n + k])
                n += k
            if n >= total:
                return n
            try:
                self.compress(False)
            except LimitError:
                self.limit = True
                return n

    def reopen(self, writer: Any) -> None:
        """Continue with a new byte writer; the compressed count restarts."""
        self.re = RangeEncoder(writer)
        self.start = self.dict.pos()
        self.limit = False

    def _write_literal(self, lit: Literal) -> None:
        s = self.state
        state, state2, _ = s.states(self.dict.pos())
        self.re.encode_bit(0, s.is_match, state2)
        lit_state = s.lit_state(self.dict.byte_at(1), self.dict.pos())
        match = self.dict.byte_at(s.rep[0] + 1)
        s.lit_codec.encode(self.re, lit.value, state, match, lit_state)
        s.update_literal()

    def _write_match(self, m: Match) -> None:
        s = self.state
        e = self.re
        if not MIN_DISTANCE <= m.distance <= MAX_DISTANCE:
            raise ValueError(f"match distance {m.distance} out of range")
        dist = (m.distance - MIN_DISTANCE) & 0xFFFFFFFF
        if not MIN_MATCH_LEN <= m.length <= MAX_MATCH_LEN and not (
            dist == s.rep[0] and m.length == 1
        ):
            raise ValueError(
                f"match length {m.length} out of range; "
                f"dist {dist} rep[0] {s.rep[0]}"
            )
        state, state2, pos_state = s.states(self.dict.pos())
        e.encode_bit(1, s.is_match, state2)
        g = next((i for i, r in enumerate(s.rep) if r == dist), 4)
        e.encode_bit(int(g < 4), s.is_rep, state)
        n = m.length - MIN_MATCH_LEN
        if g == 4:
            s.rep[1:4] = s.rep[0:3]
            s.rep[0] = dist
            s.update_match()
            s.len_codec.encode(e, n, pos_state)
            s.dist_codec.encode(e, dist, n)
            return
        e.encode_bit(int(g != 0), s.is_rep_g0, state)
        if g == 0:
            long_rep = int(m.length != 1)
            e.encode_bit(long_rep, s.is_rep_g0_long, state2)
            if not long_rep:
                s.update_short_rep()
                return
        else:
            e.encode_bit(int(g != 1), s.is_rep_g1, state)
            if g != 1:
                e.encode_bit(int(g != 2), s.is_rep_g2, state)
                if g != 2:
                    s.rep[3] = s.rep[2]
                s.rep[2] = s.rep[1]
            s.rep[1] = s.rep[0]
            s.rep[0] = dist
        s.update_rep()
        s.rep_len_codec.encode(e, n, pos_state)

    def write_op(self, op: Operation) -> None:
        """Encode one operation.

        Raises LimitError if too little room is left to close the stream
        after it.
        """
        if self.re.available() < self.margin:
            raise LimitError()
        if isinstance(op, Literal):
            self._write_literal(op)
        elif isinstance(op, Match):
            self._write_match(op)
        else:
            raise TypeError(f"unexpected operation {op!r}")

    def compress(self, all_data: bool) -> None:
        """Compress buffered data.

        Without ``all_data`` a lookahead of MAX_MATCH_LEN - 1 bytes is kept.
        Raises LimitError when the byte writer's limit is reached.
        """
        keep = 0 if all_data else MAX_MATCH_LEN - 1
        d = self.dict
        matcher = d.matcher
        while d.buffered() > keep:
            op = matcher.next_op(self.state.rep)
            self.write_op(op)
            d.discard(len(op))

    def close(self) -> None:
        """Compress what fits, write the marker if requested, flush the coder.

        Data that does not fit under the writer's limit stays buffered.
        """
        try:
            self.compress(True)
        except LimitError:
            self.limit = True
        if self.marker:
            self._write_match(EOS_MATCH)
        self.re.close()

    def compressed(self) -> int:
        """Return the number of input bytes compressed since the last start."""
        return self.dict.pos() - self.start
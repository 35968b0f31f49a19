import io

import pytest

from lzstream.chunk import (
    MAX_DICT_CAP,
    ChunkHeader,
    ChunkState,
    ChunkType,
    decode_dict_cap,
    encode_dict_cap,
    header_chunk_type,
    header_len,
    parse_chunk_header,
    read_chunk_header,
)
from lzstream.errors import DataError, LzmaError
from lzstream.properties import Properties


@pytest.mark.parametrize(
    "ctype,text",
    [
        (ChunkType.EOS, "EOS"),
        (ChunkType.UD, "UD"),
        (ChunkType.U, "U"),
        (ChunkType.L, "L"),
        (ChunkType.LR, "LR"),
        (ChunkType.LRN, "LRN"),
        (ChunkType.LRND, "LRND"),
    ],
)
def test_chunk_type_string(ctype, text):
    assert str(ctype) == text


@pytest.mark.parametrize(
    "h,ctype",
    [
        (0, ChunkType.EOS),
        (1, ChunkType.UD),
        (2, ChunkType.U),
        (1 << 7 | 0x1F, ChunkType.L),
        (1 << 7 | 1 << 5 | 0x1F, ChunkType.LR),
        (1 << 7 | 1 << 6 | 0x1F, ChunkType.LRN),
        (1 << 7 | 1 << 6 | 1 << 5 | 0x1F, ChunkType.LRND),
        (1 << 7 | 1 << 6 | 1 << 5, ChunkType.LRND),
    ],
)
def test_header_chunk_type(h, ctype):
    assert header_chunk_type(h) == ctype


def test_header_chunk_type_invalid():
    with pytest.raises(DataError):
        header_chunk_type(3)


@pytest.mark.parametrize(
    "ctype,n",
    [
        (ChunkType.EOS, 1),
        (ChunkType.U, 3),
        (ChunkType.UD, 3),
        (ChunkType.L, 5),
        (ChunkType.LR, 5),
        (ChunkType.LRN, 6),
        (ChunkType.LRND, 6),
    ],
)
def test_header_len(ctype, n):
    assert header_len(ctype) == n


def _samples():
    props = Properties(lc=3, lp=0, pb=2)
    headers = []
    for c in ChunkType:
        h = ChunkHeader(c)
        if c >= ChunkType.UD:
            h.uncompressed = 0x0304
        if c >= ChunkType.L:
            h.compressed = 0x0201
        if c >= ChunkType.LRN:
            h.props = props
        headers.append(h)
    return headers


@pytest.mark.parametrize("h", _samples(), ids=str)
def test_chunk_header_marshalling(h):
    data = h.to_bytes()
    assert len(data) == header_len(h.ctype)
    assert parse_chunk_header(data) == h


@pytest.mark.parametrize("h", _samples(), ids=str)
def test_read_chunk_header(h):
    assert read_chunk_header(io.BytesIO(h.to_bytes())) == h


def test_read_eos():
    h = read_chunk_header(io.BytesIO(b"\x00"))
    assert h.ctype == ChunkType.EOS
    assert h.compressed == 0
    assert h.uncompressed == 0
    assert h.props == Properties()


def test_uncompressed_reset_wire_bytes():
    assert ChunkHeader(ChunkType.UD, uncompressed=0).to_bytes() == b"\x01\x00\x00"


def test_high_uncompressed_bits_round_trip():
    h = ChunkHeader(ChunkType.LR, uncompressed=(1 << 21) - 1, compressed=0xFFFF)
    assert parse_chunk_header(h.to_bytes()) == h


def test_parse_wrong_lengths():
    with pytest.raises(DataError):
        parse_chunk_header(b"")
    with pytest.raises(DataError):
        parse_chunk_header(b"\x01\x00")
    with pytest.raises(DataError):
        parse_chunk_header(b"\x00\x00")


def test_read_truncated_header():
    with pytest.raises(EOFError):
        read_chunk_header(io.BytesIO(b"\x80\x00"))
    with pytest.raises(EOFError):
        read_chunk_header(io.BytesIO(b""))


def test_chunk_state_transitions():
    s = ChunkState.START
    assert s.next(ChunkType.LRND) is ChunkState.LZMA
    assert ChunkState.LZMA.next(ChunkType.U) is ChunkState.UNCOMPRESSED
    assert ChunkState.UNCOMPRESSED.next(ChunkType.L) is ChunkState.LZMA
    assert ChunkState.START.next(ChunkType.UD) is ChunkState.RESET
    assert ChunkState.RESET.next(ChunkType.LRN) is ChunkState.LZMA
    assert ChunkState.LZMA.next(ChunkType.EOS) is ChunkState.STOP


def test_chunk_state_errors():
    with pytest.raises(DataError):
        ChunkState.START.next(ChunkType.U)
    with pytest.raises(DataError):
        ChunkState.RESET.next(ChunkType.L)
    with pytest.raises(DataError):
        ChunkState.STOP.next(ChunkType.EOS)


def test_default_chunk_types():
    assert ChunkState.START.default_chunk_type() == ChunkType.LRND
    assert ChunkState.LZMA.default_chunk_type() == ChunkType.L
    assert ChunkState.UNCOMPRESSED.default_chunk_type() == ChunkType.L
    assert ChunkState.RESET.default_chunk_type() == ChunkType.LRN
    assert ChunkState.STOP.default_chunk_type() == ChunkType.EOS


def test_decode_dict_cap_values():
    assert decode_dict_cap(0) == 4096
    assert decode_dict_cap(40) == MAX_DICT_CAP
    with pytest.raises(LzmaError):
        decode_dict_cap(41)


def test_dict_cap_round_trip():
    for c in range(41):
        assert encode_dict_cap(decode_dict_cap(c)) == c


def test_encode_dict_cap_rounds_up():
    for n in (1, 4097, 100000, 8 * 1024 * 1024 + 1, MAX_DICT_CAP):
        c = encode_dict_cap(n)
        assert decode_dict_cap(c) >= n
        if c > 0:
            assert decode_dict_cap(c - 1) < n
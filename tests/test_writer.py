import io
import random

import pytest

from lzstream.errors import DataError, LzmaError, NoSpaceError
from lzstream.header import HEADER_LEN, parse_header
from lzstream.match_algorithm import MatchAlgorithm
from lzstream.properties import Properties
from lzstream.reader import LzmaReader, decompress
from lzstream.writer import LzmaWriter, WriterConfig, compress

_WORDS = (
    "alpha beta gamma delta epsilon zeta eta theta iota kappa lambda mu "
    "nu xi omicron pi rho sigma tau upsilon phi chi psi omega"
).split()


def _text(seed, n):
    rng = random.Random(seed)
    parts = []
    size = 0
    while size < n:
        w = rng.choice(_WORDS)
        parts.append(w)
        size += len(w) + 1
    return " ".join(parts).encode()[:n]


ORIG = b"The quick brown fox jumps over the lazy dog.\n" * 40


def test_writer_cycle():
    buf = io.BytesIO()
    w = LzmaWriter(buf)
    assert w.write(ORIG) == len(ORIG)
    w.close()
    out = buf.getvalue()
    assert len(out) < len(ORIG)
    r = LzmaReader(io.BytesIO(out))
    assert r.read() == ORIG
    assert r.eos_marker()


def test_writer_long_data():
    txt = _text(49, 20000)
    out = compress(txt, WriterConfig(dict_cap=0x4000))
    assert decompress(out) == txt


def test_writer_size():
    buf = io.BytesIO()
    w = LzmaWriter(buf, WriterConfig(size=10, eos_marker=True))
    q = ord("a")
    for _ in range(9):
        assert w.write(bytes([q])) == 1
        q += 1
    with pytest.raises(DataError):
        w.close()
    assert w.write(bytes([q])) == 1
    w.close()
    assert decompress(buf.getvalue()) == b"abcdefghij"


def test_write_beyond_size_raises_no_space():
    buf = io.BytesIO()
    w = LzmaWriter(buf, WriterConfig(size=3))
    with pytest.raises(NoSpaceError) as info:
        w.write(b"abcdef")
    assert info.value.written == 3
    w.close()
    assert decompress(buf.getvalue()) == b"abc"


def test_size_in_header():
    data = b"hello hello hello"
    out = compress(data, WriterConfig(size=len(data)))
    h = parse_header(out[:HEADER_LEN])
    assert h.size == len(data)
    assert h.properties == Properties(3, 0, 2)
    assert decompress(out) == data


def test_default_header():
    out = compress(b"x")
    h = parse_header(out[:HEADER_LEN])
    assert h.size == -1
    assert h.dict_cap == 8 * 1024 * 1024
    assert out[0] == Properties(3, 0, 2).code()


def test_min_dict_size():
    data = ORIG
    compressed = bytearray(compress(data, WriterConfig(dict_cap=4096)))
    compressed[1:5] = (0).to_bytes(4, "little")
    assert decompress(bytes(compressed)) == data


def test_empty_input():
    assert decompress(compress(b"")) == b""


def test_binary_tree_matcher():
    txt = _text(3, 5000)
    out = compress(txt, WriterConfig(dict_cap=4096, matcher=MatchAlgorithm.BINARY_TREE))
    assert decompress(out) == txt


def test_context_manager_and_closed_writes():
    buf = io.BytesIO()
    with LzmaWriter(buf) as w:
        w.write(b"abc")
    assert decompress(buf.getvalue()) == b"abc"
    with pytest.raises(LzmaError):
        w.write(b"d")


@pytest.mark.parametrize(
    "config",
    [
        WriterConfig(dict_cap=100),
        WriterConfig(buf_size=100),
        WriterConfig(properties=Properties(9, 0, 2)),
        WriterConfig(size_in_header=True, size=-1),
        WriterConfig(matcher=7),
    ],
)
def test_verify_errors(config):
    with pytest.raises(LzmaError):
        config.verify()


def test_verify_fills_defaults():
    c = WriterConfig()
    c.verify()
    assert c.properties == Properties(3, 0, 2)
    assert c.dict_cap == 8 * 1024 * 1024
    assert c.buf_size == 4096
    assert c.eos_marker
import io
import random

import pytest

from lzstream.byteio import LimitedByteWriter
from lzstream.decoder import Decoder
from lzstream.decoderdict import DecoderDict
from lzstream.encoder import Encoder
from lzstream.encoderdict import EncoderDict
from lzstream.errors import LimitError
from lzstream.hashtable import HashTable
from lzstream.header import MIN_DICT_CAP
from lzstream.operation import Literal
from lzstream.properties import Properties
from lzstream.state import State

TEST_STRING = b"""LZMA decoder test example
=========================
! LZMA ! Decoder ! TEST !
=========================
! TEST ! LZMA ! Decoder !
=========================
---- Test Line 1 --------
=========================
---- Test Line 2 --------
=========================
=== End of test file ====
=========================
"""

_WORDS = (
    "the quick brown fox jumps over lazy dog and then runs far away "
    "into forest where many trees grow tall under sky"
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


def _new_dict():
    m = HashTable(MIN_DICT_CAP, 4)
    return EncoderDict(MIN_DICT_CAP, MIN_DICT_CAP + 1024, m)


def _decode(data, props, size=-1):
    dec = Decoder(io.BytesIO(bytes(data)), State(props), DecoderDict(MIN_DICT_CAP), size)
    out = bytearray()
    while True:
        chunk = dec.read(4096)
        if not chunk:
            return bytes(out)
        out += chunk


def _cycle(n):
    props = Properties(2, 0, 2)
    props.verify()
    buf = bytearray()
    enc = Encoder(buf, State(props), _new_dict(), eos_marker=True)
    orig = TEST_STRING[:n]
    assert enc.write(orig) == len(orig)
    enc.close()
    return orig, _decode(buf, props)


def test_encoder_cycle1():
    orig, decoded = _cycle(len(TEST_STRING))
    assert decoded == orig


@pytest.mark.parametrize("n", [0, 1, 5, 40, 100])
def test_encoder_cycle_prefixes(n):
    orig, decoded = _cycle(n)
    assert decoded == orig


def test_encoder_cycle2_limited_writer():
    txt = _text(42, 50000)
    props = Properties(3, 0, 2)
    props.verify()
    buf = bytearray()
    lbw = LimitedByteWriter(buf, 100)
    enc = Encoder(lbw, State(props), _new_dict(), eos_marker=False)
    written = enc.write(txt)
    assert written < len(txt)
    enc.close()
    assert len(buf) <= 100
    n = enc.compressed()
    assert 0 < n < len(txt)
    got = _decode(buf, props, n)
    assert len(got) == n
    assert got == txt[:n]


def test_compressed_counts_input():
    props = Properties(3, 0, 2)
    enc = Encoder(bytearray(), State(props), _new_dict(), eos_marker=True)
    data = _text(1, 3000)
    enc.write(data)
    enc.close()
    assert enc.compressed() == len(data)


def test_write_op_raises_limit_error_near_limit():
    props = Properties(3, 0, 2)
    d = _new_dict()
    d.write(b"A")
    enc = Encoder(LimitedByteWriter(bytearray(), 10), State(props), d)
    with pytest.raises(LimitError):
        enc.write_op(Literal(65))


def test_reopen_restarts_compressed_count():
    props = Properties(3, 0, 2)
    enc = Encoder(bytearray(), State(props), _new_dict())
    enc.write(b"hello world")
    enc.close()
    assert enc.compressed() == 11
    enc.reopen(bytearray())
    assert enc.compressed() == 0
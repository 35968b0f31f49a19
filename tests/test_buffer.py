import pytest

from lzstream.buffer import RingBuffer, prefix_len
from lzstream.errors import LzmaError, NoSpaceError


def test_write():
    buf = RingBuffer(10)
    b = b"1234567890"
    for i in range(len(b)):
        assert buf.write(b[i:i + 1]) == 1
    assert buf.discard(8) == 8
    n = buf.write(b)
    assert n == 8
    assert n < len(b)
    assert buf.discard(4) == 4
    assert buf.write(b[:3]) == 3


def test_buffered_available():
    buf = RingBuffer(19)
    b = b"0123456789"
    assert buf.write(b) == 10
    assert buf.buffered() == 10
    buf.discard(8)
    buf.write(b[:7])
    assert buf.buffered() == 9
    assert buf.available() == buf.capacity() - 9


def test_read():
    buf = RingBuffer(10)
    b = b"0123456789"
    buf.write(b)
    p = buf.read(8)
    assert p == b[:8]
    buf.write(b[:7])
    q = buf.read(7)
    assert q == b"8901234"
    buf.write(b[7:])
    buf.write(b[:2])
    r = buf.read(2)
    assert r == b"56"


def test_discard():
    buf = RingBuffer(10)
    b = b"0123456789"
    buf.write(b)
    with pytest.raises(LzmaError):
        buf.discard(11)
    assert buf.buffered() == 0
    assert buf.write(b) == 10
    assert buf.discard(10) == 10
    assert buf.write(b[:4]) == 4
    assert buf.discard(1) == 1
    assert buf.buffered() == 3


def test_discard_error():
    buf = RingBuffer(10)
    with pytest.raises(ValueError):
        buf.discard(-1)
    assert buf.buffered() == 0


@pytest.mark.parametrize(
    "a, b, k",
    [
        (b"abcde", b"abc", 3),
        (b"abc", b"uvw", 0),
        (b"", b"uvw", 0),
        (b"abcde", b"abcuvw", 3),
    ],
)
def test_prefix_len(a, b, k):
    assert prefix_len(a, b) == k
    assert prefix_len(b, a) == k


@pytest.mark.parametrize("d, n", [(1, 1), (3, 2), (6, 6), (5, 0), (2, 0)])
def test_match_len(d, n):
    buf = RingBuffer(13)
    s = b"abcaba"
    buf.write(s)
    buf.write(s)
    buf.discard(12)
    buf.write(s)
    assert buf.match_len(d, s) == n


def test_peek_does_not_consume():
    buf = RingBuffer(5)
    buf.write(b"abc")
    assert buf.peek(10) == b"abc"
    assert buf.buffered() == 3
    assert buf.read(10) == b"abc"
    assert buf.buffered() == 0


def test_write_byte_full():
    buf = RingBuffer(2)
    buf.write_byte(1)
    buf.write_byte(2)
    with pytest.raises(NoSpaceError):
        buf.write_byte(3)
    assert buf.read(2) == bytes([1, 2])


def test_reset_empties():
    buf = RingBuffer(4)
    buf.write(b"xyz")
    buf.reset()
    assert buf.buffered() == 0
    assert buf.available() == buf.capacity()
import pytest

from lzstream.errors import LzmaError
from lzstream.header import (
    HEADER_LEN,
    MAX_DICT_CAP,
    Header,
    parse_header,
    valid_dict_cap,
    valid_header,
)
from lzstream.properties import Properties

SAMPLES = [
    Header(Properties(3, 0, 2), 8 * 1024 * 1024, -1),
    Header(Properties(4, 3, 3), 4096, 10),
]


@pytest.mark.parametrize("h", SAMPLES)
def test_header_marshalling(h):
    data = h.to_bytes()
    assert len(data) == HEADER_LEN
    assert parse_header(data) == h


@pytest.mark.parametrize("h", SAMPLES)
def test_valid_header(h):
    assert valid_header(h.to_bytes())


def test_invalid_header_text():
    assert not valid_header(b"1234567890123")


def test_unknown_size_wire_form():
    data = Header(Properties(3, 0, 2), 4096, -1).to_bytes()
    assert data[5:] == b"\xff" * 8
    assert data[0] == Properties(3, 0, 2).code()


def test_zero_size_is_written_as_unknown():
    h = Header(Properties(3, 0, 2), 4096, 0)
    assert parse_header(h.to_bytes()).size == -1


def test_wrong_length():
    with pytest.raises(LzmaError):
        parse_header(b"\x5d" * 12)
    assert not valid_header(b"\x5d" * 14)


def test_dict_cap_out_of_range():
    with pytest.raises(LzmaError):
        Header(Properties(3, 0, 2), MAX_DICT_CAP + 1).to_bytes()
    with pytest.raises(LzmaError):
        Header(Properties(3, 0, 2), -1).to_bytes()


def test_invalid_properties():
    with pytest.raises(LzmaError):
        Header(Properties(9, 0, 0), 4096).to_bytes()


def test_size_out_of_int64_range():
    data = bytes([0x5D]) + (4096).to_bytes(4, "little") + (1 << 63).to_bytes(8, "little")
    with pytest.raises(LzmaError):
        parse_header(data)


def test_size_too_large_not_valid():
    data = Header(Properties(3, 0, 2), 4096, (1 << 38) + 1).to_bytes()
    assert parse_header(data).size == (1 << 38) + 1
    assert not valid_header(data)


@pytest.mark.parametrize("cap", [MAX_DICT_CAP, 1 << 10, 1 << 20, (1 << 20) + (1 << 19), 1 << 31])
def test_valid_dict_caps(cap):
    assert valid_dict_cap(cap)


@pytest.mark.parametrize("cap", [0, 1 << 9, 1000, (1 << 20) + 1])
def test_invalid_dict_caps(cap):
    assert not valid_dict_cap(cap)
import pytest

from lzstream.errors import LzmaError
from lzstream.properties import MAX_PROPERTY_CODE, Properties, properties_for_code


def test_string_form():
    assert str(Properties(3, 0, 2)) == "LC 3 LP 0 PB 2"


def test_default_code():
    assert Properties(3, 0, 2).code() == 0x5D


@pytest.mark.parametrize("code", range(MAX_PROPERTY_CODE + 1))
def test_code_round_trip(code):
    p = properties_for_code(code)
    p.verify()
    assert p.code() == code


def test_maximum_properties():
    p = Properties(8, 4, 4)
    p.verify()
    assert p.code() == MAX_PROPERTY_CODE
    assert properties_for_code(MAX_PROPERTY_CODE) == p


def test_invalid_code():
    with pytest.raises(LzmaError):
        properties_for_code(MAX_PROPERTY_CODE + 1)


@pytest.mark.parametrize(
    "props", [Properties(9, 0, 0), Properties(0, 5, 0), Properties(0, 0, 5), Properties(-1, 0, 0)]
)
def test_verify_out_of_range(props):
    with pytest.raises(LzmaError):
        props.verify()


def test_round_trip_from_properties():
    p = Properties(4, 3, 3)
    assert properties_for_code(p.code()) == p
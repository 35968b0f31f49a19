import pytest

from lzstream.bintree import BinTree
from lzstream.errors import LzmaError
from lzstream.hashtable import HashTable
from lzstream.match_algorithm import MatchAlgorithm


def test_string_names():
    assert str(MatchAlgorithm(0)) == "HashTable4"
    assert str(MatchAlgorithm(1)) == "BinaryTree"


def test_hash_table_matcher_uses_four_byte_words():
    m = MatchAlgorithm.HASH_TABLE4.new_matcher(4096)
    assert isinstance(m, HashTable)
    assert m.word_len == 4


def test_binary_tree_matcher_has_capacity_nodes():
    m = MatchAlgorithm.BINARY_TREE.new_matcher(4096)
    assert isinstance(m, BinTree)
    assert len(m.keys) == 4096


def test_matchers_find_repeated_words():
    m = MatchAlgorithm.HASH_TABLE4.new_matcher(4096)
    m.write(b"abcdabcd")
    assert m.matches(b"abcd") == [4, 0]


def test_hash_table_invalid_capacity_raises():
    with pytest.raises(LzmaError):
        MatchAlgorithm.HASH_TABLE4.new_matcher(0)


def test_binary_tree_invalid_capacity_raises():
    with pytest.raises(LzmaError):
        MatchAlgorithm.BINARY_TREE.new_matcher(0)


def test_lookup_by_value():
    assert MatchAlgorithm(1) is MatchAlgorithm.BINARY_TREE
    with pytest.raises(ValueError):
        MatchAlgorithm(2)
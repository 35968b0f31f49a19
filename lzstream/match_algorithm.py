"""Selection of the algorithm that finds matches in the dictionary."""

import enum
from typing import Any

from .bintree import BinTree
from .hashtable import HashTable


class MatchAlgorithm(enum.IntEnum):
    """Algorithm used by the encoder to find matches."""

    HASH_TABLE4 = 0
    BINARY_TREE = 1

    def __str__(self) -> str:
        return _NAMES[self]

    def new_matcher(self, dict_cap: int) -> Any:
        """Create a matcher for a dictionary of capacity ``dict_cap``."""
        if self is MatchAlgorithm.HASH_TABLE4:
            return HashTable(dict_cap, 4)
        return BinTree(dict_cap)


_NAMES = {
    MatchAlgorithm.HASH_TABLE4: "HashTable4",
    MatchAlgorithm.BINARY_TREE: "BinaryTree",
}
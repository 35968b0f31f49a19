"""Binary-tree matcher that finds candidate matches for the encoder.

Each dictionary position is a node keyed by the four bytes starting
there. Nodes live in a ring of fixed capacity; the oldest node is
removed from the tree when its slot is reused.
"""

import unicodedata
from dataclasses import dataclass
from typing import Any, Iterator, List, Optional, Sequence, Tuple

from .codecs import MAX_MATCH_LEN, MIN_DISTANCE
from .errors import LzmaError
from .operation import Literal, Match, Operation

NULL = -1
WORD_LEN = 4

_MAX_NODES = (1 << 32) - 1
_MASK32 = 0xFFFFFFFF


def xval(a: bytes) -> int:
    """Return the first four bytes of ``a`` as a big-endian value, zero padded."""
    return int.from_bytes(bytes(a[:4]).ljust(4, b"\0"), "big")


def dump_x(x: int) -> str:
    """Return a four-character view of ``x``; non-graphic bytes become dots."""
    chars = []
    for shift in (24, 16, 8, 0):
        ch = chr((x >> shift) & 0xFF)
        cat = unicodedata.category(ch)
        chars.append(ch if cat[0] in "LMNPS" or cat == "Zs" else ".")
    return "".join(chars)


@dataclass
class _MatchParams:
    rep: Sequence[int]
    n_accept: int
    check: int
    stop_shorter: bool = False


class BinTree:
    """Binary search tree over the words of the dictionary.

    Node ``v`` has key ``keys[v]`` and links ``parent[v]``, ``left[v]``
    and ``right[v]``; NULL marks a missing node.
    """

    def __init__(self, capacity: int) -> None:
        if capacity < 1:
            raise LzmaError("binary tree: capacity must be larger than zero")
        if capacity >= _MAX_NODES:
            raise LzmaError("binary tree: capacity must be less than 2^32-1")
        self.keys: List[int] = [0] * capacity
        self.parent: List[int] = [NULL] * capacity
        self.left: List[int] = [NULL] * capacity
        self.right: List[int] = [NULL] * capacity
        self.hoff = -WORD_LEN
        self.front = 0
        self.root = NULL
        self.x = 0
        self.dict: Optional[Any] = None
        self._data = b""

    def set_dict(self, d: Any) -> None:
        """Attach the encoder dictionary the matcher works on."""
        self.dict = d

    def write_byte(self, c: int) -> None:
        """Add the word ending with byte ``c`` to the tree."""
        self.x = ((self.x << 8) | (c & 0xFF)) & _MASK32
        self.hoff += 1
        if self.hoff < 0:
            return
        v = self.front
        if v < self.hoff:
            self._remove(v)
        self.keys[v] = self.x
        self._add(v)
        self.front += 1
        if self.front >= len(self.keys):
            self.front = 0

    def write(self, data: bytes) -> int:
        """Add the words of all bytes in ``data``; return the number taken."""
        for c in data:
            self.write_byte(c)
        return len(data)

    def _add(self, v: int) -> None:
        self.left[v] = NULL
        self.right[v] = NULL
        if self.root == NULL:
            self.root = v
            self.parent[v] = NULL
            return
        x = self.keys[v]
        p = self.root
        while True:
            if x <= self.keys[p]:
                if self.left[p] == NULL:
                    self.left[p] = v
                    self.parent[v] = p
                    return
                p = self.left[p]
            else:
                if self.right[p] == NULL:
                    self.right[p] = v
                    self.parent[v] = p
                    return
                p = self.right[p]

    def _replace_child(self, p: int, on_left: bool, u: int) -> None:
        if p == NULL:
            self.root = u
        elif on_left:
            self.left[p] = u
        else:
            self.right[p] = u

    def _remove(self, v: int) -> None:
        p = NULL if self.root == v else self.parent[v]
        on_left = p != NULL and self.left[p] == v
        l, r = self.left[v], self.right[v]
        if l == NULL:
            self._replace_child(p, on_left, r)
            if r != NULL:
                self.parent[r] = p
            return
        if r == NULL:
            self._replace_child(p, on_left, l)
            self.parent[l] = p
            return
        if self.right[l] == NULL:
            # The in-order predecessor is l itself: move it up.
            self.right[l] = r
            self.parent[r] = l
            self.parent[l] = p
            self._replace_child(p, on_left, l)
            return
        u = self.right[l]
        while self.right[u] != NULL:
            u = self.right[u]
        ul = self.left[u]
        up = self.parent[u]
        self.right[up] = ul
        if ul != NULL:
            self.parent[ul] = up
        self.left[u], self.right[u] = l, r
        self.parent[l] = u
        self.parent[r] = u
        self._replace_child(p, on_left, u)
        self.parent[u] = p

    def search(self, v: int, x: int) -> Tuple[int, int]:
        """Search the subtree at ``v`` for key ``x``.

        Returns (node, node) for the highest node with key ``x``; otherwise
        the nodes that bracket ``x`` from below and above, NULL where none.
        """
        a, b = NULL, NULL
        if v == NULL:
            return a, b
        while True:
            key = self.keys[v]
            if x <= key:
                if x == key:
                    return v, v
                b = v
                if self.left[v] == NULL:
                    return a, b
                v = self.left[v]
            else:
                a = v
                if self.right[v] == NULL:
                    return a, b
                v = self.right[v]

    def max_node(self, v: int) -> int:
        """Return the node with the largest key in the subtree at ``v``."""
        if v == NULL:
            return NULL
        while self.right[v] != NULL:
            v = self.right[v]
        return v

    def min_node(self, v: int) -> int:
        """Return the node with the smallest key in the subtree at ``v``."""
        if v == NULL:
            return NULL
        while self.left[v] != NULL:
            v = self.left[v]
        return v

    def pred(self, v: int) -> int:
        """Return the in-order predecessor of ``v``."""
        if v == NULL:
            return NULL
        u = self.max_node(self.left[v])
        if u != NULL:
            return u
        while True:
            p = self.parent[v]
            if p == NULL:
                return NULL
            if self.right[p] == v:
                return p
            v = p

    def succ(self, v: int) -> int:
        """Return the in-order successor of ``v``."""
        if v == NULL:
            return NULL
        u = self.min_node(self.right[v])
        if u != NULL:
            return u
        while True:
            p = self.parent[v]
            if p == NULL:
                return NULL
            if self.left[p] == v:
                return p
            v = p

    def _distance(self, v: int) -> int:
        dist = self.front - v
        if dist <= 0:
            dist += len(self.keys)
        return dist

    def _match(
        self, m: Match, dists: Iterator[int], p: _MatchParams
    ) -> Tuple[Match, int, bool]:
        buf = self.dict.buf
        dict_len = self.dict.dict_len()
        size = len(buf.data)
        data = self._data
        checked = 0
        while True:
            if checked >= p.check:
                return m, checked, True
            dist = next(dists, None)
            if dist is None:
                return m, checked, False
            checked += 1
            if dist > dict_len:
                continue
            if m.length > 0:
                i = (buf.rear - dist + m.length - 1) % size
                if buf.data[i] != data[m.length - 1]:
                    if p.stop_shorter:
                        return m, checked, False
                    continue
            n = buf.match_len(dist, data)
            if n == 0:
                if p.stop_shorter:
                    return m, checked, False
                continue
            if n == 1 and dist - MIN_DISTANCE != p.rep[0]:
                continue
            if n < m.length or (n == m.length and dist >= m.distance):
                continue
            m = Match(dist, n)
            if n >= p.n_accept:
                return m, checked, True

    def _equal_dists(self, u: int, x: int) -> Iterator[int]:
        while u != NULL:
            dist = self._distance(u)
            u, v = self.search(self.left[u], x)
            if u != v:
                u = NULL
            yield dist

    def _walk_dists(self, v: int, step: Any) -> Iterator[int]:
        while v != NULL:
            dist = self._distance(v)
            v = step(v)
            yield dist

    def next_op(self, rep: Sequence[int]) -> Operation:
        """Return the next operation for the data at the dictionary head."""
        data = self.dict.buf.peek(MAX_MATCH_LEN)
        if not data:
            raise LzmaError("binary tree: no data in buffer")
        self._data = data
        p = _MatchParams(rep=rep, n_accept=MAX_MATCH_LEN, check=32)
        m, checked, accepted = self._match(Match(), iter((3, 2, 1)), p)
        if not accepted:
            p.check -= checked
            x = xval(data)
            u, v = self.search(self.root, x)
            if u == v and len(data) == 4:
                m, _, _ = self._match(m, self._equal_dists(u, x), p)
            else:
                p.stop_shorter = True
                m, checked, accepted = self._match(
                    m, self._walk_dists(v, self.succ), p
                )
                if not accepted:
                    p.check -= checked
                    m, _, _ = self._match(m, self._walk_dists(u, self.pred), p)
        if m.length == 0:
            return Literal(data[0])
        return m
"""The complete coding state shared by LZMA encoder and decoder."""

import copy
from typing import Tuple

from .codecs import MAX_POS_BITS, DistCodec, LengthCodec, LiteralCodec
from .properties import Properties
from .rangecodec import init_probs

STATES = 12


class State:
    """Probability models, repetition distances and the operation state."""

    def __init__(self, properties: Properties) -> None:
        self.properties = properties
        self.reset()

    def reset(self) -> None:
        """Restore all models and counters to their initial values."""
        p = self.properties
        self.rep = [0, 0, 0, 0]
        self.is_match = init_probs(STATES << MAX_POS_BITS)
        self.is_rep_g0_long = init_probs(STATES << MAX_POS_BITS)
        self.is_rep = init_probs(STATES)
        self.is_rep_g0 = init_probs(STATES)
        self.is_rep_g1 = init_probs(STATES)
        self.is_rep_g2 = init_probs(STATES)
        self.lit_codec = LiteralCodec(p.lc, p.lp)
        self.len_codec = LengthCodec()
        self.rep_len_codec = LengthCodec()
        self.dist_codec = DistCodec()
        self.state = 0
        self.pos_bit_mask = (1 << p.pb) - 1

    def clone(self) -> "State":
        """Return an independent deep copy of this state."""
        return copy.deepcopy(self)

    def update_literal(self) -> None:
        """Advance the state after a literal."""
        if self.state < 4:
            self.state = 0
        elif self.state < 10:
            self.state -= 3
        else:
            self.state -= 6

    def update_match(self) -> None:
        """Advance the state after a simple match."""
        self.state = 7 if self.state < 7 else 10

    def update_rep(self) -> None:
        """Advance the state after a repetition."""
        self.state = 8 if self.state < 7 else 11

    def update_short_rep(self) -> None:
        """Advance the state after a short repetition."""
        self.state = 9 if self.state < 7 else 11

    def states(self, dict_head: int) -> Tuple[int, int, int]:
        """Return (state, state combined with position, position state)."""
        pos_state = dict_head & 0xFFFFFFFF & self.pos_bit_mask
        state2 = (self.state << MAX_POS_BITS) | pos_state
        return self.state, state2, pos_state

    def lit_state(self, prev: int, dict_head: int) -> int:
        """Return the literal state from the previous byte and the position."""
        lp, lc = self.properties.lp, self.properties.lc
        return ((dict_head & 0xFFFFFFFF & ((1 << lp) - 1)) << lc) | (
            (prev & 0xFF) >> (8 - lc)
        )
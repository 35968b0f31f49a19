"""Operations applied to the dictionary: literals and matches."""

from dataclasses import dataclass
from typing import Union


@dataclass(frozen=True)
class Match:
    """Repetition of ``length`` bytes found ``distance`` bytes back."""

    distance: int = 0
    length: int = 0

    def __len__(self) -> int:
        return self.length

    def __str__(self) -> str:
        return f"M{{{self.distance},{self.length}}}"


@dataclass(frozen=True)
class Literal:
    """A single literal byte."""

    value: int

    def __len__(self) -> int:
        return 1

    def __str__(self) -> str:
        ch = chr(self.value)
        shown = ch if ch.isprintable() else "."
        return f"L{{{shown}/{self.value:02x}}}"


Operation = Union[Match, Literal]
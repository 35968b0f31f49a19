"""The LC, LP and PB parameters of an LZMA stream."""

from dataclasses import dataclass

from .errors import LzmaError

MIN_LC = 0
MAX_LC = 8
MIN_LP = 0
MAX_LP = 4
MIN_PB = 0
MAX_PB = 4

MAX_PROPERTY_CODE = (MAX_PB + 1) * (MAX_LP + 1) * (MAX_LC + 1) - 1


@dataclass(frozen=True)
class Properties:
    """Literal context bits (lc), literal position bits (lp) and
    position bits (pb)."""

    lc: int = 0
    lp: int = 0
    pb: int = 0

    def __str__(self) -> str:
        return f"LC {self.lc} LP {self.lp} PB {self.pb}"

    def verify(self) -> None:
        """Raise LzmaError if a parameter is out of range."""
        if not MIN_LC <= self.lc <= MAX_LC:
            raise LzmaError("lzma: lc out of range")
        if not MIN_LP <= self.lp <= MAX_LP:
            raise LzmaError("lzma: lp out of range")
        if not MIN_PB <= self.pb <= MAX_PB:
            raise LzmaError("lzma: pb out of range")

    def code(self) -> int:
        """Return the properties byte; parameters are assumed in range."""
        return ((self.pb * 5 + self.lp) * 9 + self.lc) & 0xFF


def properties_for_code(code: int) -> Properties:
    """Decode a properties byte."""
    if not 0 <= code <= MAX_PROPERTY_CODE:
        raise LzmaError("lzma: invalid properties code")
    code, lc = divmod(code, 9)
    code, lp = divmod(code, 5)
    return Properties(lc=lc, lp=lp, pb=code % 5)
"""Bit manipulation helpers."""


def nlz32(x: int) -> int:
    """Return the number of leading zero bits of the 32-bit value ``x``."""
    return 32 - (x & 0xFFFFFFFF).bit_length()
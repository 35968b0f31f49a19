"""Pure-Python encoding and decoding of classic LZMA files and LZMA2 chunk sequences."""

__version__ = "0.1.0"
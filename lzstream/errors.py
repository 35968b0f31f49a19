"""Exception types raised by the LZMA and LZMA2 codecs."""


class LzmaError(Exception):
    """Base class of all errors raised by this package."""


class NoSpaceError(LzmaError):
    """Raised when a buffer has no room left for the data to be written."""

    def __init__(self, message: str = "insufficient space") -> None:
        super().__init__(message)


class LimitError(LzmaError):
    """Raised when the limit of a limited byte writer has been reached."""

    def __init__(self, message: str = "limit reached") -> None:
        super().__init__(message)


class DataError(LzmaError):
    """Raised when compressed data is corrupt or inconsistent."""
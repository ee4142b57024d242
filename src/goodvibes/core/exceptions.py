"""
goodvibes exception hierarchy.

All goodvibes exceptions inherit from GoodVibesError, making it easy for
callers to catch library-level errors while still distinguishing specific
failure modes. None of them is meant to end the process.
"""


class GoodVibesError(Exception):
    """Base exception class for all goodvibes errors."""


class ConfigurationError(GoodVibesError):
    """Raised for configuration errors (missing keys, invalid values)."""


class FileIOError(GoodVibesError):
    """Raised when entry storage cannot be read or written."""


class DecodeError(GoodVibesError):
    """Raised when a stored entry's content cannot be parsed."""


class IndexClosedError(GoodVibesError):
    """Raised when a refresh is requested from a closed search index."""

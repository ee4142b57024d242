"""goodvibes: a one-file-per-day diary with in-memory full-text search."""

__version__ = "0.1.0"

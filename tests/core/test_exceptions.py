"""Tests for goodvibes.core.exceptions."""

from goodvibes.core.exceptions import (
    ConfigurationError,
    DecodeError,
    FileIOError,
    GoodVibesError,
    IndexClosedError,
)


def test_hierarchy():
    """All exceptions should inherit from GoodVibesError."""
    for exc_cls in [ConfigurationError, FileIOError, DecodeError, IndexClosedError]:
        assert issubclass(exc_cls, GoodVibesError)


def test_exception_message():
    err = DecodeError("2024-01-01.json: Invalid JSON")
    assert "Invalid JSON" in str(err)


def test_catch_base():
    """Catching GoodVibesError should catch all subtypes."""
    try:
        raise FileIOError("disk full")
    except GoodVibesError as e:
        assert "disk full" in str(e)

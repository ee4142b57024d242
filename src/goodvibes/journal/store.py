"""EntryStore protocol: the contract for diary storage backends.

Anything that maps a calendar date to a text blob (a directory of JSON
files, a database table, an in-memory dict in tests) can implement this
protocol and feed the search index.
"""

from __future__ import annotations

from collections.abc import Iterable
from datetime import date
from typing import Protocol, runtime_checkable

from .models import Entry


@runtime_checkable
class EntryStore(Protocol):
    """Protocol for reading and writing diary entries."""

    def load(self, day: date) -> str:
        """Return the text stored for ``day``.

        Returns an empty string when no entry exists or the stored entry
        cannot be decoded.

        Raises:
            FileIOError: the underlying storage could not be read.
        """
        ...

    def save(self, day: date, text: str) -> None:
        """Store ``text`` as the entry for ``day``, replacing any prior content.

        Raises:
            FileIOError: the entry could not be written. The previous
                content is left intact.
        """
        ...

    def list_all(self) -> Iterable[Entry]:
        """Yield every persisted entry, in no particular order.

        Entries that cannot be read or decoded are skipped.
        """
        ...

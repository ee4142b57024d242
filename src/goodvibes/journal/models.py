"""Core data models for the diary and its search index.

Plain dataclasses with no dependency on any UI toolkit.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import date
from enum import Enum
from types import MappingProxyType
from typing import NamedTuple

DATE_FORMAT = "%Y-%m-%d"


class IndexState(Enum):
    """Lifecycle of a search index."""

    EMPTY = "empty"  # Never built
    BUILDING = "building"  # Rebuild in flight
    READY = "ready"  # Consistent snapshot available


@dataclass(frozen=True)
class Entry:
    """The text written for one calendar date.

    Attributes:
        date: Day the entry belongs to.
        text: Entry body. May be empty.
    """

    date: date
    text: str = ""

    def __post_init__(self):
        if not isinstance(self.date, date):
            raise ValueError("Entry date must be a datetime.date")
        if not isinstance(self.text, str):
            raise ValueError("Entry text must be a string")

    @property
    def key(self) -> str:
        """``YYYY-MM-DD`` form of the date, also used as the file stem."""
        return self.date.strftime(DATE_FORMAT)

    def __repr__(self) -> str:
        preview = self.text[:50] + "..." if len(self.text) > 50 else self.text
        return f"Entry(date='{self.key}', text='{preview}')"


@dataclass(frozen=True)
class SearchResult:
    """One matching entry for a query.

    Attributes:
        date: Matching entry's date.
        text: Full entry text at index time.
        query: The query as typed, used for highlighting.
    """

    date: date
    text: str
    query: str

    def __str__(self) -> str:
        return self.date.strftime(DATE_FORMAT)


class Span(NamedTuple):
    """A highlighted region of entry text, in character offsets."""

    start: int
    length: int

    @property
    def end(self) -> int:
        return self.start + self.length


def _frozen(mapping: Mapping) -> Mapping:
    return MappingProxyType(dict(mapping))


@dataclass(frozen=True, eq=False)
class IndexSnapshot:
    """A complete, internally consistent state of the search index.

    Built from a single full corpus scan and never mutated afterwards;
    a refresh produces a new snapshot.

    Attributes:
        words: Lowercased token -> dates whose text contains it.
        contents: Date -> full entry text.
        built_at: Monotonic completion time, or None for the empty snapshot.
    """

    words: Mapping[str, frozenset[date]] = field(default_factory=dict)
    contents: Mapping[date, str] = field(default_factory=dict)
    built_at: float | None = None

    def __post_init__(self):
        object.__setattr__(self, "words", _frozen(self.words))
        object.__setattr__(self, "contents", _frozen(self.contents))

    @property
    def is_empty(self) -> bool:
        return self.built_at is None

    @property
    def entry_count(self) -> int:
        return len(self.contents)

    @property
    def token_count(self) -> int:
        return len(self.words)

    def age(self, now: float) -> float:
        """Seconds since this snapshot was built (infinite if never built)."""
        if self.built_at is None:
            return float("inf")
        return now - self.built_at

"""Diary entries and their full-text search.

Provides the entry models, an EntryStore protocol with a JSON file
backend, the in-memory SearchIndex, highlight span computation and the
DiarySession facade that a UI drives.
"""

from .config import SearchConfig, StoreConfig
from .file_store import FileEntryStore
from .highlight import apply_highlight, highlight_spans
from .models import Entry, IndexSnapshot, IndexState, SearchResult, Span
from .search import SearchIndex
from .session import DiarySession
from .store import EntryStore

__all__ = [
    "DiarySession",
    "Entry",
    "EntryStore",
    "FileEntryStore",
    "IndexSnapshot",
    "IndexState",
    "SearchConfig",
    "SearchIndex",
    "SearchResult",
    "Span",
    "StoreConfig",
    "apply_highlight",
    "highlight_spans",
]

"""Diary session: the API a UI drives.

A UI (desktop window, TUI, the bundled CLI) keeps one ``DiarySession``
and calls it where it would otherwise wire event handlers: when a date is
picked, when the editor loses focus, when the window closes, when a link
is clicked. The session owns no widgets and no event loop.
"""

from __future__ import annotations

from collections.abc import Callable
from datetime import date

import click
from loguru import logger

from ..core.exceptions import FileIOError
from ..core.utils.text import find_links, shift_month
from .highlight import highlight_spans
from .models import SearchResult, Span
from .search import SearchIndex
from .store import EntryStore

Opener = Callable[[str], object]


class DiarySession:
    """Current-date state plus load, save, search and link handling.

    Args:
        store: Where entries live.
        index: Search index over ``store``. Saves invalidate it.
        today: Initial current date. Defaults to ``date.today()``.
        opener: Hands a link to the OS default application.
            Defaults to ``click.launch``.
    """

    def __init__(
        self,
        store: EntryStore,
        index: SearchIndex,
        today: date | None = None,
        opener: Opener | None = None,
    ):
        self.store = store
        self.index = index
        self.current_date = today or date.today()
        self._opener = opener or click.launch

    # ── Entries ─────────────────────────────────────────────────────

    def load_entry(self, day: date) -> str:
        """Make ``day`` the current date and return its text ("" if none)."""
        self.current_date = day
        return self.store.load(day)

    def save_entry(self, day: date, text: str) -> None:
        """Persist ``text`` for ``day``.

        Raises:
            FileIOError: the entry could not be written.
        """
        self.store.save(day, text)
        self.index.invalidate()

    def _save_current(self, text: str) -> bool:
        try:
            self.save_entry(self.current_date, text)
        except FileIOError as e:
            logger.error(f"Could not save entry for {self.current_date}: {e}")
            return False
        return True

    def on_focus_lost(self, text: str) -> bool:
        """Save the editor's text for the current date.

        Returns:
            False if the save failed; the failure is logged, not raised.
        """
        return self._save_current(text)

    def on_closing(self, text: str) -> bool:
        """Save the editor's text and shut down the search index."""
        try:
            return self._save_current(text)
        finally:
            self.index.close()

    # ── Navigation ──────────────────────────────────────────────────

    def select_date(self, day: date) -> str:
        return self.load_entry(day)

    def prev_month(self) -> str:
        """Step back one month (day clamped to the month's length) and load it."""
        return self.load_entry(shift_month(self.current_date, -1))

    def next_month(self) -> str:
        return self.load_entry(shift_month(self.current_date, 1))

    # ── Search ──────────────────────────────────────────────────────

    def search(self, query: str) -> list[SearchResult]:
        return self.index.search(query)

    @staticmethod
    def highlight_spans(text: str, query: str) -> list[Span]:
        return highlight_spans(text, query)

    # ── Links ───────────────────────────────────────────────────────

    @staticmethod
    def links(text: str) -> list[str]:
        return find_links(text)

    def open_link(self, link: str) -> bool:
        """Open ``link`` with the OS default application.

        Returns:
            True if the opener was invoked without error.
        """
        if not link or not link.strip():
            logger.warning("The link is empty; nothing to open")
            return False
        target = link.strip()
        if target.lower().startswith("www."):
            target = f"http://{target}"
        try:
            self._opener(target)
        except Exception as e:
            logger.error(f"Failed to open link {link!r}: {e}")
            return False
        return True

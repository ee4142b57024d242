"""Highlight span computation for search results.

Pure functions, independent of the index: given an entry's text and the
query that found it, locate every literal occurrence of the query.
"""

from __future__ import annotations

import re
from collections.abc import Callable

from .models import Span


def highlight_spans(text: str, query: str) -> list[Span]:
    """Find case-insensitive, non-overlapping occurrences of ``query`` in ``text``.

    The scan runs left to right and resumes after each match, so
    ``highlight_spans("aaaa", "aa")`` yields two spans, not three.
    Offsets are character offsets into ``text`` as given.

    Args:
        text: Entry text to scan.
        query: Literal search string. Not tokenized or normalized.

    Returns:
        Spans ordered by start offset. Empty if either argument is empty.
    """
    if not text or not query:
        return []
    pattern = re.compile(re.escape(query), re.IGNORECASE)
    return [Span(m.start(), m.end() - m.start()) for m in pattern.finditer(text)]


def apply_highlight(text: str, spans: list[Span], mark: Callable[[str], str]) -> str:
    """Return ``text`` with each span passed through ``mark``.

    Spans must be ordered and non-overlapping, as produced by ``highlight_spans``.
    """
    parts = []
    cursor = 0
    for span in spans:
        parts.append(text[cursor : span.start])
        parts.append(mark(text[span.start : span.end]))
        cursor = span.end
    parts.append(text[cursor:])
    return "".join(parts)

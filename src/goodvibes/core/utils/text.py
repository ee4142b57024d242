"""Text utilities: tokenization, link detection, truncation, date stepping."""

from __future__ import annotations

import calendar
import re
from datetime import date

# Entry text is split on exactly these characters when building the word index.
TOKEN_SEPARATORS = frozenset(" \n\r\t.,!?")

_SEPARATOR_RE = re.compile("[" + "".join(re.escape(c) for c in sorted(TOKEN_SEPARATORS)) + "]+")

_LINK_RE = re.compile(
    r"""(?ix)
    \b(
        (?:https?|ftp|file)://[^\s<>"']+
        | mailto:[^\s<>"']+
        | www\.[^\s<>"']+
    )
    """
)
_TRAILING_PUNCT = ".,;:!?)]}'\""


def tokenize(text: str) -> list[str]:
    """Split text on whitespace and .,!? and lowercase each non-empty token."""
    if not text or not isinstance(text, str):
        return []
    return [token.lower() for token in _SEPARATOR_RE.split(text) if token]


def find_links(text: str) -> list[str]:
    """Return URLs found in text, in order of appearance.

    Recognizes http(s), ftp, file and mailto links plus bare ``www.`` hosts.
    Trailing sentence punctuation is not part of the link.
    """
    if not text or not isinstance(text, str):
        return []
    links = []
    for match in _LINK_RE.finditer(text):
        link = match.group(1).rstrip(_TRAILING_PUNCT)
        if link:
            links.append(link)
    return links


def truncate_text(text: str, max_length: int = 100, ellipsis: str = "...") -> str:
    """Truncate text to max_length, appending ellipsis if truncated."""
    if not text:
        return ""
    if len(text) <= max_length:
        return text
    return text[: max_length - len(ellipsis)] + ellipsis


def shift_month(day: date, months: int) -> date:
    """Move ``day`` by a number of months, clamping to the target month's length.

    ``shift_month(date(2024, 1, 31), 1)`` is ``date(2024, 2, 29)``.
    """
    month_index = day.year * 12 + (day.month - 1) + months
    year, month = divmod(month_index, 12)
    month += 1
    last_day = calendar.monthrange(year, month)[1]
    return date(year, month, min(day.day, last_day))

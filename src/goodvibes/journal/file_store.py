"""
Directory-of-JSON-files entry store.

Each entry lives in ``<entries_dir>/<YYYY-MM-DD>.json`` as a JSON object
with a single ``"Text"`` field. Files are replaced atomically on save.
"""

from __future__ import annotations

import json
import re
from collections.abc import Iterator
from datetime import date, datetime
from pathlib import Path

from loguru import logger

from ..core.exceptions import DecodeError, FileIOError
from ..core.utils.file_io import atomic_write
from .config import StoreConfig
from .models import DATE_FORMAT, Entry

ENTRY_SUFFIX = ".json"
TEXT_FIELD = "Text"

_STEM_RE = re.compile(r"\d{4}-\d{2}-\d{2}")


def encode_entry(text: str) -> str:
    """Serialize entry text to the on-disk JSON record.

    Non-ASCII characters are written as \\uXXXX escapes, so any Python
    string (lone surrogates included) produces an ASCII-only record.
    """
    return json.dumps({TEXT_FIELD: text})


def decode_entry(raw: str) -> str:
    """Parse an on-disk JSON record and return its text.

    Raises:
        DecodeError: the record is not valid JSON or has no string ``Text`` field.
    """
    try:
        record = json.loads(raw)
    except json.JSONDecodeError as e:
        raise DecodeError(f"Invalid JSON: {e}") from e
    if not isinstance(record, dict):
        raise DecodeError(f"Expected a JSON object, got {type(record).__name__}")
    text = record.get(TEXT_FIELD)
    if not isinstance(text, str):
        raise DecodeError(f"Missing or non-string '{TEXT_FIELD}' field")
    return text


def parse_entry_date(stem: str) -> date | None:
    """Return the date encoded in a file stem, or None if it is not ``YYYY-MM-DD``."""
    if not _STEM_RE.fullmatch(stem):
        return None
    try:
        return datetime.strptime(stem, DATE_FORMAT).date()
    except ValueError:
        return None


class FileEntryStore:
    """Entry store backed by one JSON file per date.

    Implements the ``EntryStore`` protocol. The directory is created on
    first write if it does not exist yet.

    Example::

        store = FileEntryStore(StoreConfig(entries_dir="~/.goodvibes/entries"))
        store.save(date(2024, 1, 1), "hello world")
        store.load(date(2024, 1, 1))  # "hello world"
    """

    def __init__(self, config: StoreConfig | None = None):
        self.config = config or StoreConfig()
        self.entries_dir = Path(self.config.entries_dir).expanduser()

    def path_for(self, day: date) -> Path:
        return self.entries_dir / f"{day.strftime(DATE_FORMAT)}{ENTRY_SUFFIX}"

    def _read(self, path: Path) -> str:
        try:
            raw = path.read_text(encoding=self.config.encoding)
        except UnicodeDecodeError as e:
            raise DecodeError(f"{path.name} is not valid {self.config.encoding}: {e}") from e
        except FileNotFoundError:
            raise
        except OSError as e:
            raise FileIOError(f"Cannot read {path}: {e}") from e
        try:
            return decode_entry(raw)
        except DecodeError as e:
            raise DecodeError(f"{path.name}: {e}") from e

    def load(self, day: date) -> str:
        path = self.path_for(day)
        try:
            return self._read(path)
        except FileNotFoundError:
            return ""
        except DecodeError as e:
            logger.warning(f"Ignoring unreadable entry for {day}: {e}")
            return ""

    def save(self, day: date, text: str) -> None:
        if not isinstance(text, str):
            raise TypeError("Entry text must be a string")
        path = self.path_for(day)
        try:
            atomic_write(str(path), encode_entry(text), encoding=self.config.encoding)
        except (OSError, UnicodeError) as e:
            raise FileIOError(f"Cannot write {path}: {e}") from e
        logger.debug(f"Saved entry {path.name} ({len(text)} chars)")

    def exists(self, day: date) -> bool:
        return self.path_for(day).is_file()

    def list_all(self) -> Iterator[Entry]:
        """Yield every readable entry in the directory.

        Files with a non-date name, or whose content cannot be read or
        decoded, are skipped with a log message.

        Raises:
            FileIOError: the directory itself cannot be listed.
        """
        try:
            paths = sorted(p for p in self.entries_dir.iterdir() if p.suffix == ENTRY_SUFFIX)
        except FileNotFoundError:
            return
        except OSError as e:
            raise FileIOError(f"Cannot list {self.entries_dir}: {e}") from e

        for path in paths:
            day = parse_entry_date(path.stem)
            if day is None:
                logger.debug(f"Skipping non-entry file {path.name}")
                continue
            try:
                text = self._read(path)
            except FileNotFoundError:
                logger.debug(f"Entry {path.name} removed during scan")
                continue
            except (DecodeError, FileIOError) as e:
                logger.warning(f"Skipping entry {path.name}: {e}")
                continue
            yield Entry(date=day, text=text)

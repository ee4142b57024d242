"""Configuration dataclasses for entry storage and search.

These are pure data containers with sensible defaults. Build them from a
``Config`` with ``from_config`` or pass values directly.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from ..core.exceptions import ConfigurationError

if TYPE_CHECKING:
    from ..core.config import Config


def _as_float(key: str, value: Any) -> float:
    # Environment overrides arrive as strings
    try:
        number = float(value)
    except (TypeError, ValueError):
        raise ConfigurationError(f"{key} must be a number, got {value!r}") from None
    if number < 0:
        raise ConfigurationError(f"{key} must not be negative, got {number}")
    return number


@dataclass
class StoreConfig:
    """Settings for the on-disk entry store.

    Attributes:
        entries_dir: Directory holding one ``YYYY-MM-DD.json`` file per entry.
        encoding: Text encoding of entry files.
    """

    entries_dir: str = os.path.join("~", ".goodvibes", "entries")
    encoding: str = "utf-8"

    @classmethod
    def from_config(cls, config: Config) -> StoreConfig:
        entries_dir = config.get("paths.entries_dir")
        if not entries_dir:
            raise ConfigurationError("paths.entries_dir is not set")
        return cls(entries_dir=str(entries_dir))


@dataclass
class SearchConfig:
    """Settings for the search index.

    Attributes:
        max_age_seconds: Staleness window; older snapshots are rebuilt on search.
        build_timeout: How long a search waits for a rebuild before serving
            the previous snapshot.
    """

    max_age_seconds: float = 300.0
    build_timeout: float = 10.0

    @classmethod
    def from_config(cls, config: Config) -> SearchConfig:
        return cls(
            max_age_seconds=_as_float("search.max_age_seconds", config.get("search.max_age_seconds", 300)),
            build_timeout=_as_float("search.build_timeout", config.get("search.build_timeout", 10)),
        )

"""Shared setup logic for CLI commands."""

from __future__ import annotations

import contextlib
from collections.abc import Iterator
from datetime import date, datetime
from pathlib import Path

import click

from goodvibes.core.config import Config
from goodvibes.core.exceptions import ConfigurationError

GOODVIBES_DIR = Path.home() / ".goodvibes"
CONFIG_PATH = GOODVIBES_DIR / "config.yaml"

DATE_ARGUMENT = click.DateTime(formats=["%Y-%m-%d"])


def load_config(config_file: str | None = None, data_dir: str | None = None) -> Config:
    """Load config from ``config_file`` or ~/.goodvibes/config.yaml."""
    try:
        return Config(config_file=config_file or str(CONFIG_PATH), data_dir=data_dir)
    except ConfigurationError as e:
        raise click.ClickException(str(e)) from e


def resolve_date(value: datetime | None) -> date:
    """Turn an optional DATE argument into a date, defaulting to today."""
    return value.date() if value is not None else date.today()


@contextlib.contextmanager
def open_session(config: Config) -> Iterator:
    """Build a DiarySession from config and close its index on exit."""
    from goodvibes.journal import DiarySession, FileEntryStore, SearchConfig, SearchIndex, StoreConfig

    try:
        store = FileEntryStore(StoreConfig.from_config(config))
        search_config = SearchConfig.from_config(config)
    except ConfigurationError as e:
        raise click.ClickException(str(e)) from e

    with SearchIndex(store, search_config) as index:
        yield DiarySession(store, index)

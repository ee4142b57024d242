"""Shared test fixtures for goodvibes."""

import os
import tempfile
from datetime import date

import pytest
import yaml


@pytest.fixture
def tmp_dir():
    """Provide a temporary directory that is cleaned up after the test."""
    with tempfile.TemporaryDirectory() as d:
        yield d


@pytest.fixture
def tmp_config_file(tmp_dir):
    """Create a temporary YAML config file."""
    config_data = {
        "paths": {
            "entries_dir": os.path.join(tmp_dir, "entries"),
        },
        "search": {
            "max_age_seconds": 60,
        },
    }
    config_path = os.path.join(tmp_dir, "config.yaml")
    with open(config_path, "w") as f:
        yaml.dump(config_data, f)
    return config_path


class MemoryStore:
    """In-memory EntryStore that counts corpus scans."""

    def __init__(self, entries: dict[date, str] | None = None):
        self.entries = dict(entries or {})
        self.scans = 0

    def load(self, day):
        return self.entries.get(day, "")

    def save(self, day, text):
        self.entries[day] = text

    def list_all(self):
        from goodvibes.journal.models import Entry

        self.scans += 1
        for day, text in self.entries.items():
            yield Entry(date=day, text=text)


@pytest.fixture
def memory_store():
    return MemoryStore(
        {
            date(2024, 1, 2): "goodbye world",
            date(2024, 1, 1): "hello world",
        }
    )


@pytest.fixture
def make_store():
    """Factory for MemoryStore instances with custom entries."""
    return MemoryStore

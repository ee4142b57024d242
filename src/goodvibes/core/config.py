"""
Diary configuration.

Values are resolved with this precedence (highest wins):
    1. Environment variables (GOODVIBES_SECTION__KEY)
    2. Config file (YAML or JSON)
    3. Built-in defaults

Usage:
    config = Config(config_file="~/.goodvibes/config.yaml")
    config.get("paths.entries_dir")
    config.get("search.max_age_seconds")
"""

import json
import os
from typing import Any

import yaml

from .exceptions import ConfigurationError

ENV_PREFIX = "GOODVIBES_"
_DEFAULT_DATA_DIR = os.path.join("~", ".goodvibes")


def _defaults(data_dir: str) -> dict[str, Any]:
    return {
        "paths": {
            "data_dir": data_dir,
            "entries_dir": os.path.join(data_dir, "entries"),
        },
        "search": {
            "max_age_seconds": 300,
            "build_timeout": 10,
        },
        "logging": {
            "level": "WARNING",
            "file": "",
        },
    }


def _merge(target: dict, source: dict) -> None:
    for key, value in source.items():
        if isinstance(target.get(key), dict) and isinstance(value, dict):
            _merge(target[key], value)
        else:
            target[key] = value


class Config:
    """
    Defaults merged with an optional config file and environment overrides.

    Env vars use double-underscore to denote nesting:
    GOODVIBES_SEARCH__MAX_AGE_SECONDS=60 -> config["search"]["max_age_seconds"] = "60"
    """

    def __init__(self, config_file: str | None = None, data_dir: str | None = None):
        """
        Args:
            config_file: Path to YAML or JSON configuration file. Ignored if missing.
            data_dir: Base directory for diary data. Defaults to ~/.goodvibes.
        """
        self.config_file = os.path.expanduser(config_file) if config_file else None
        self.config_data = _defaults(os.path.expanduser(data_dir or _DEFAULT_DATA_DIR))

        if self.config_file and os.path.exists(self.config_file):
            _merge(self.config_data, self._load_file(self.config_file))
        self._load_from_env()

    @staticmethod
    def _load_file(path: str) -> dict[str, Any]:
        """Load a YAML or JSON config file."""
        ext = os.path.splitext(path)[1].lower()
        try:
            with open(path, encoding="utf-8") as f:
                if ext in (".yaml", ".yml"):
                    data = yaml.safe_load(f) or {}
                elif ext == ".json":
                    data = json.load(f)
                else:
                    return {}
        except (yaml.YAMLError, json.JSONDecodeError) as e:
            raise ConfigurationError(f"Cannot parse config file {path}: {e}") from e

        if not isinstance(data, dict):
            raise ConfigurationError(f"Config file {path} must contain a mapping at the top level")
        return data

    def _load_from_env(self) -> None:
        for env_key, env_value in os.environ.items():
            if not env_key.startswith(ENV_PREFIX):
                continue
            *parents, leaf = env_key[len(ENV_PREFIX) :].lower().split("__")
            current = self.config_data
            for part in parents:
                if not isinstance(current.get(part), dict):
                    current[part] = {}
                current = current[part]
            current[leaf] = env_value

    def get(self, key_path: str, default: Any = None) -> Any:
        """
        Get a config value by dot-notation path.

        Args:
            key_path: e.g. "paths.entries_dir", "search.max_age_seconds"
            default: Returned when key is not found.
        """
        current = self.config_data
        for part in key_path.split("."):
            if not isinstance(current, dict) or part not in current:
                return default
            current = current[part]
        return current

    def set(self, key_path: str, value: Any) -> None:
        """Set a config value by dot-notation path, creating intermediate dicts."""
        *parents, leaf = key_path.split(".")
        current = self.config_data
        for part in parents:
            current = current.setdefault(part, {})
        current[leaf] = value

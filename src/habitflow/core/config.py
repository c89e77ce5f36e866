"""
Layered configuration for habitflow.

Three layers are merged, later ones winning:

    built-in defaults  <  config file (YAML or JSON)  <  HABITFLOW_* env vars

Nested keys in env vars are separated by a double underscore, and values are
read as YAML scalars so numbers and booleans arrive typed::

    HABITFLOW_STORE__BACKEND=memory      -> store.backend = "memory"
    HABITFLOW_INSIGHTS__TIMEOUT=15       -> insights.timeout = 15

Usage:
    config = Config.for_home("~/.habitflow")
    config.get("store.path")
    config.validated().insights.model
"""

from __future__ import annotations

import json
import os
from typing import TYPE_CHECKING, Any

import yaml

from .exceptions import ConfigurationError

if TYPE_CHECKING:
    from .config_schema import HabitflowConfig

ENV_PREFIX = "HABITFLOW_"
CONFIG_FILENAME = "config.yaml"
_DEFAULT_DATA_DIR = os.path.join("~", ".habitflow-data")


def default_config(data_dir: str) -> dict[str, Any]:
    """The built-in layer, rooted at ``data_dir``."""
    data_dir = os.path.expanduser(data_dir)
    return {
        "paths": {
            "data_dir": data_dir,
            "log_dir": os.path.join(data_dir, "logs"),
        },
        "store": {"backend": "json", "path": os.path.join(data_dir, "habits.json")},
        "insights": {"model": "gpt-4o-mini", "temperature": 0.7, "timeout": 60},
        "logging": {"level": "WARNING", "file": ""},
    }


def deep_merge(target: dict, source: dict) -> dict:
    """Merge ``source`` into ``target`` in place; nested dicts merge, anything else replaces."""
    for key, value in source.items():
        if isinstance(value, dict) and isinstance(target.get(key), dict):
            deep_merge(target[key], value)
        else:
            target[key] = value
    return target


def read_config_file(path: str) -> dict[str, Any]:
    """Parse a ``.yaml``/``.yml``/``.json`` file. Other extensions contribute nothing.

    Raises:
        ConfigurationError: The file is malformed or its top level isn't a mapping.
    """
    ext = os.path.splitext(path)[1].lower()
    if ext not in (".yaml", ".yml", ".json"):
        return {}
    try:
        with open(path, encoding="utf-8") as f:
            data = json.load(f) if ext == ".json" else yaml.safe_load(f)
    except (yaml.YAMLError, json.JSONDecodeError) as e:
        raise ConfigurationError(f"Cannot parse config file {path}: {e}") from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigurationError(f"Config file {path} must contain a mapping at the top level")
    return data


def _env_scalar(raw: str) -> Any:
    try:
        value = yaml.safe_load(raw)
    except yaml.YAMLError:
        return raw
    # Only plain scalars; "[a, b]" or "{x: 1}" stay strings
    return value if isinstance(value, (str, int, float, bool)) else raw


def env_overrides(prefix: str, environ: dict[str, str] | None = None) -> dict[str, Any]:
    """Collect ``PREFIX_SECTION__KEY=value`` variables into a nested dict."""
    if not prefix:
        return {}
    environ = os.environ if environ is None else environ
    overrides: dict[str, Any] = {}
    for name, raw in environ.items():
        if not name.startswith(prefix):
            continue
        *parents, leaf = name[len(prefix) :].lower().split("__")
        node = overrides
        for part in parents:
            if not isinstance(node.get(part), dict):
                node[part] = {}
            node = node[part]
        node[leaf] = _env_scalar(raw)
    return overrides


class Config:
    """Merged configuration with dot-path access."""

    def __init__(
        self,
        config_file: str | None = None,
        env_prefix: str = ENV_PREFIX,
        data_dir: str | None = None,
        defaults: dict[str, Any] | None = None,
    ):
        """
        Args:
            config_file: YAML or JSON file; silently skipped when it doesn't exist.
            env_prefix: Prefix of override variables. Empty disables env overrides.
            data_dir: Where habits and logs live. Defaults to ~/.habitflow-data.
            defaults: Extra values layered on top of the built-in defaults.
        """
        self.config_file = os.path.expanduser(config_file) if config_file else None
        self.env_prefix = env_prefix or ""
        self._data_dir = data_dir or _DEFAULT_DATA_DIR
        self._extra_defaults = defaults or {}
        self.config_data: dict[str, Any] = {}
        self.reload()

    @classmethod
    def for_home(cls, home: str | os.PathLike[str]) -> Config:
        """Config for a habitflow home directory: ``<home>/config.yaml`` with data kept in ``<home>``."""
        home = os.path.expanduser(os.fspath(home))
        return cls(config_file=os.path.join(home, CONFIG_FILENAME), data_dir=home)

    def reload(self) -> None:
        """Rebuild ``config_data`` from all layers."""
        data = deep_merge(default_config(self._data_dir), self._extra_defaults)
        if self.config_file and os.path.exists(self.config_file):
            deep_merge(data, read_config_file(self.config_file))
        deep_merge(data, env_overrides(self.env_prefix))
        self.config_data = data

    def get(self, key_path: str, default: Any = None) -> Any:
        """Look up ``"section.key"``; ``default`` when any segment is missing."""
        node: Any = self.config_data
        for part in key_path.split("."):
            if not isinstance(node, dict) or part not in node:
                return default
            node = node[part]
        return node

    def set(self, key_path: str, value: Any) -> None:
        *parents, leaf = key_path.split(".")
        node = self.config_data
        for part in parents:
            node = node.setdefault(part, {})
        node[leaf] = value

    def get_data_dir(self) -> str:
        return os.path.expanduser(self.get("paths.data_dir", self._data_dir))

    def ensure_directories(self) -> None:
        """Create every directory listed under ``paths``."""
        for value in (self.get("paths") or {}).values():
            if isinstance(value, str) and value:
                os.makedirs(os.path.expanduser(value), exist_ok=True)

    def validated(self) -> HabitflowConfig:
        """Typed view of ``config_data``.

        Raises:
            ConfigurationError: A value fails schema validation.
        """
        from pydantic import ValidationError

        from .config_schema import HabitflowConfig

        try:
            return HabitflowConfig.model_validate(self.config_data)
        except ValidationError as e:
            raise ConfigurationError(f"Invalid configuration: {e}") from e


_config_instance: Config | None = None


def get_config(
    config_file: str | None = None,
    env_prefix: str = ENV_PREFIX,
    data_dir: str | None = None,
) -> Config:
    """Process-wide Config, created on first use."""
    global _config_instance
    if _config_instance is None:
        _config_instance = Config(config_file=config_file, env_prefix=env_prefix, data_dir=data_dir)
    return _config_instance


def reset_config() -> None:
    """Drop the process-wide Config (tests)."""
    global _config_instance
    _config_instance = None

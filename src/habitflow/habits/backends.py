"""
Persistence backends for the habit store.

A backend only knows how to load and save a whole ``HabitSnapshot``; all
CRUD rules live in :class:`habitflow.habits.store.HabitStore`.  Two backends
ship built in (``memory`` and ``json``).  Third-party packages can add more
through ``importlib.metadata`` entry points (group:
``habitflow.store_backends``):

    [project.entry-points."habitflow.store_backends"]
    sqlite = "my_package.backend:SqliteBackend"
"""

from __future__ import annotations

import json
import os
import tempfile
from importlib.metadata import entry_points
from pathlib import Path
from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

from loguru import logger

from habitflow.core.exceptions import ConfigurationError, InvalidHabitError, InvalidLogError, StoreError

from .models import HabitSnapshot

if TYPE_CHECKING:
    from habitflow.core.config import Config

ENTRY_POINT_GROUP = "habitflow.store_backends"


@runtime_checkable
class HabitBackend(Protocol):
    """Protocol that every store backend must satisfy."""

    name: str

    def load(self) -> HabitSnapshot:
        """Return the persisted snapshot (empty if nothing was saved yet)."""
        ...

    def save(self, snapshot: HabitSnapshot) -> None:
        """Persist ``snapshot`` in full, replacing what was there."""
        ...


class MemoryBackend:
    """Keeps the last saved snapshot in process memory."""

    name = "memory"

    def __init__(self, snapshot: HabitSnapshot | None = None, **config: Any):
        self.config = config
        self._snapshot = snapshot or HabitSnapshot()

    def load(self) -> HabitSnapshot:
        return self._snapshot

    def save(self, snapshot: HabitSnapshot) -> None:
        self._snapshot = snapshot


class JsonFileBackend:
    """Stores habits and logs in a single JSON document.

    Writes go to a temp file that is then renamed over the target, so a crash
    mid-write never leaves a truncated file behind.
    """

    name = "json"

    def __init__(self, path: str | Path, **config: Any):
        self.config = config
        self.path = Path(path).expanduser()

    def load(self) -> HabitSnapshot:
        if not self.path.exists():
            logger.debug(f"No habit file at {self.path}; starting empty")
            return HabitSnapshot()

        try:
            with open(self.path, encoding="utf-8") as f:
                data = json.load(f)
        except json.JSONDecodeError as e:
            logger.warning(f"Habit file {self.path} is not valid JSON: {e}")
            raise StoreError(f"Cannot parse {self.path}: {e}") from e
        except OSError as e:
            raise StoreError(f"Cannot read {self.path}: {e}") from e

        if not isinstance(data, dict):
            raise StoreError(f"{self.path} must contain a JSON object with 'habits' and 'logs'")
        try:
            snapshot = HabitSnapshot.from_dict(data)
        except (InvalidHabitError, InvalidLogError) as e:
            raise StoreError(f"Invalid record in {self.path}: {e}") from e

        logger.debug(f"Loaded {len(snapshot.habits)} habits and {len(snapshot.logs)} logs from {self.path}")
        return snapshot

    def save(self, snapshot: HabitSnapshot) -> None:
        parent = self.path.parent
        try:
            parent.mkdir(parents=True, exist_ok=True)
            fd, tmp = tempfile.mkstemp(dir=parent, suffix=".tmp")
        except OSError as e:
            raise StoreError(f"Cannot write to {parent}: {e}") from e

        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(snapshot.to_dict(), f, indent=2)
            os.replace(tmp, self.path)  # atomic on POSIX
        except BaseException as e:
            try:
                os.unlink(tmp)
            except OSError:
                pass
            if isinstance(e, OSError):
                raise StoreError(f"Cannot write {self.path}: {e}") from e
            raise

        logger.debug(f"Saved {len(snapshot.habits)} habits and {len(snapshot.logs)} logs to {self.path}")


class BackendRegistry:
    """Discover and manage store backends."""

    def __init__(self):
        self._backends: dict[str, type] = {
            MemoryBackend.name: MemoryBackend,
            JsonFileBackend.name: JsonFileBackend,
        }

    def discover(self) -> dict[str, type]:
        """Scan entry points and return {name: backend_class}."""
        for ep in entry_points(group=ENTRY_POINT_GROUP):
            try:
                self._backends[ep.name] = ep.load()
                logger.debug(f"Discovered store backend: {ep.name}")
            except Exception as e:
                logger.warning(f"Failed to load store backend '{ep.name}': {e}")

        return dict(self._backends)

    def register(self, name: str, backend_class: type) -> None:
        """Manually register a backend (useful for testing)."""
        self._backends[name] = backend_class

    def get(self, name: str) -> type | None:
        return self._backends.get(name)

    def list_names(self) -> list[str]:
        return list(self._backends.keys())

    def create(self, name: str, **config: Any) -> HabitBackend:
        """Instantiate a backend by name with the given config."""
        cls = self._backends.get(name)
        if cls is None:
            raise KeyError(f"No store backend registered as '{name}'. Available: {self.list_names()}")
        return cls(**config)


def create_backend(config: Config, registry: BackendRegistry | None = None) -> HabitBackend:
    """Build the backend named by ``store.backend`` using the rest of ``store.*`` as settings."""
    settings = dict(config.get("store", {}) or {})
    name = str(settings.pop("backend", "json")).strip().lower()

    if registry is None:
        registry = BackendRegistry()
        registry.discover()

    if name == JsonFileBackend.name and not settings.get("path"):
        settings["path"] = os.path.join(config.get_data_dir(), "habits.json")
    if name == MemoryBackend.name:
        settings.pop("path", None)

    try:
        return registry.create(name, **settings)
    except KeyError as e:
        raise ConfigurationError(str(e.args[0])) from e

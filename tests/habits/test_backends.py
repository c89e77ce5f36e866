"""Tests for habitflow.habits.backends — persistence and backend discovery."""

import json
from datetime import date

import pytest

from habitflow.core.config import Config
from habitflow.core.exceptions import ConfigurationError, StoreError
from habitflow.habits.backends import (
    BackendRegistry,
    HabitBackend,
    JsonFileBackend,
    MemoryBackend,
    create_backend,
)
from habitflow.habits.models import Habit, HabitLog, HabitSnapshot


@pytest.fixture
def snapshot():
    habit = Habit(id="h1", name="Water", target=8, unit="glasses")
    log = HabitLog(id="l1", habit_id="h1", value=3, date=date(2025, 6, 15), note="morning")
    return HabitSnapshot(habits=(habit,), logs=(log,))


class TestMemoryBackend:
    def test_starts_empty(self):
        assert MemoryBackend().load() == HabitSnapshot()

    def test_satisfies_protocol(self):
        assert isinstance(MemoryBackend(), HabitBackend)

    def test_save_then_load(self, snapshot):
        backend = MemoryBackend()
        backend.save(snapshot)
        assert backend.load() is snapshot


class TestJsonFileBackend:
    def test_missing_file_is_empty(self, tmp_path):
        assert JsonFileBackend(tmp_path / "none.json").load() == HabitSnapshot()

    def test_satisfies_protocol(self, tmp_path):
        assert isinstance(JsonFileBackend(tmp_path / "h.json"), HabitBackend)

    def test_writes_camel_case_fields(self, tmp_path, snapshot):
        path = tmp_path / "habits.json"
        JsonFileBackend(path).save(snapshot)
        data = json.loads(path.read_text())
        assert data["habits"][0]["unit"] == "glasses"
        assert "createdAt" in data["habits"][0]
        assert data["logs"][0] == {"id": "l1", "habitId": "h1", "value": 3, "date": "2025-06-15", "note": "morning"}

    def test_load_restores_records(self, tmp_path, snapshot):
        path = tmp_path / "habits.json"
        JsonFileBackend(path).save(snapshot)
        loaded = JsonFileBackend(path).load()
        assert loaded.logs == snapshot.logs
        assert loaded.habits[0].name == "Water"

    def test_creates_parent_dirs(self, tmp_path, snapshot):
        path = tmp_path / "nested" / "dir" / "habits.json"
        JsonFileBackend(path).save(snapshot)
        assert path.exists()

    def test_leaves_no_temp_files(self, tmp_path, snapshot):
        JsonFileBackend(tmp_path / "habits.json").save(snapshot)
        assert [p.name for p in tmp_path.iterdir()] == ["habits.json"]

    def test_malformed_json_raises(self, tmp_path):
        path = tmp_path / "habits.json"
        path.write_text("{not json")
        with pytest.raises(StoreError, match="Cannot parse"):
            JsonFileBackend(path).load()

    def test_non_object_raises(self, tmp_path):
        path = tmp_path / "habits.json"
        path.write_text("[]")
        with pytest.raises(StoreError):
            JsonFileBackend(path).load()

    def test_invalid_record_raises(self, tmp_path):
        path = tmp_path / "habits.json"
        path.write_text(json.dumps({"habits": [{"id": "h1", "name": "x", "target": 0}], "logs": []}))
        with pytest.raises(StoreError, match="Invalid record"):
            JsonFileBackend(path).load()


class FakeBackend(MemoryBackend):
    name = "fake"


class TestRegistry:
    def test_builtins(self):
        reg = BackendRegistry()
        assert set(reg.list_names()) >= {"memory", "json"}

    def test_manual_register(self):
        reg = BackendRegistry()
        reg.register("fake", FakeBackend)
        assert reg.get("fake") is FakeBackend
        assert reg.get("nonexistent") is None

    def test_create(self, tmp_path):
        reg = BackendRegistry()
        backend = reg.create("json", path=tmp_path / "h.json")
        assert isinstance(backend, JsonFileBackend)

    def test_create_missing_raises(self):
        with pytest.raises(KeyError, match="No store backend"):
            BackendRegistry().create("sqlite")

    def test_discover_includes_builtins(self):
        assert "memory" in BackendRegistry().discover()


class TestCreateBackend:
    def test_json_default_path(self, tmp_dir):
        config = Config(data_dir=tmp_dir, env_prefix="")
        config.set("store.path", "")
        backend = create_backend(config, registry=BackendRegistry())
        assert isinstance(backend, JsonFileBackend)
        assert str(backend.path).startswith(tmp_dir)

    def test_memory(self, tmp_dir):
        config = Config(data_dir=tmp_dir, env_prefix="", defaults={"store": {"backend": "memory"}})
        assert isinstance(create_backend(config, registry=BackendRegistry()), MemoryBackend)

    def test_unknown_backend(self, tmp_dir):
        config = Config(data_dir=tmp_dir, env_prefix="", defaults={"store": {"backend": "sqlite"}})
        with pytest.raises(ConfigurationError, match="sqlite"):
            create_backend(config, registry=BackendRegistry())

"""Shared test fixtures for habitflow."""

import os
import tempfile
from datetime import date, datetime, timedelta

import pytest

from habitflow.habits.models import Habit, HabitLog
from habitflow.habits.store import HabitStore

TODAY = date(2025, 6, 15)  # a Sunday


@pytest.fixture
def tmp_dir():
    """Provide a temporary directory that is cleaned up after the test."""
    with tempfile.TemporaryDirectory() as d:
        yield d


@pytest.fixture
def tmp_config_file(tmp_dir):
    """Create a temporary YAML config file."""
    import yaml

    config_data = {
        "paths": {"data_dir": os.path.join(tmp_dir, "data")},
        "store": {"backend": "json", "path": os.path.join(tmp_dir, "data", "habits.json")},
        "insights": {"model": "gpt-4o-mini"},
    }
    config_path = os.path.join(tmp_dir, "config.yaml")
    with open(config_path, "w") as f:
        yaml.dump(config_data, f)
    return config_path


@pytest.fixture
def today():
    return TODAY


@pytest.fixture
def make_habit():
    """Factory for habits created ``days_ago`` days before TODAY (at midnight)."""

    def _make(habit_id="h1", target=1, days_ago=30, **kwargs):
        kwargs.setdefault("name", f"Habit {habit_id}")
        created = datetime.combine(TODAY - timedelta(days=days_ago), datetime.min.time())
        return Habit(id=habit_id, target=target, created_at=created, **kwargs)

    return _make


@pytest.fixture
def make_log():
    """Factory for a log ``offset`` days before TODAY."""
    counter = {"n": 0}

    def _make(habit_id="h1", offset=0, value=1, note=None):
        counter["n"] += 1
        return HabitLog(
            id=f"log-{counter['n']}",
            habit_id=habit_id,
            value=value,
            date=TODAY - timedelta(days=offset),
            note=note,
        )

    return _make


@pytest.fixture
def store():
    """In-memory store whose clock is pinned to TODAY."""
    return HabitStore(clock=lambda: TODAY)

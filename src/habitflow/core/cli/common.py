"""Shared setup logic for CLI commands."""

from __future__ import annotations

import json
import os
import sys
from pathlib import Path
from typing import Any

import click

from habitflow.core.config import CONFIG_FILENAME, Config
from habitflow.core.exceptions import ConfigurationError, HabitflowError
from habitflow.core.utils.logging import configure_logging
from habitflow.habits.backends import create_backend
from habitflow.habits.models import Habit
from habitflow.habits.store import HabitStore


def habitflow_dir() -> Path:
    """Home of the CLI config; ``HABITFLOW_HOME`` overrides ``~/.habitflow``."""
    return Path(os.environ.get("HABITFLOW_HOME") or Path.home() / ".habitflow").expanduser()


def config_path() -> Path:
    return habitflow_dir() / CONFIG_FILENAME


def ensure_init() -> None:
    """Check that habitflow init has been run."""
    if not config_path().exists():
        click.echo("No configuration found. Run 'habitflow init' first.")
        sys.exit(1)


def load_config() -> Config:
    """Load and validate config from the habitflow home, then apply its logging settings."""
    try:
        config = Config.for_home(habitflow_dir())
        config.validated()
    except ConfigurationError as e:
        raise click.ClickException(str(e)) from e
    configure_logging(config)
    return config


def open_store(config: Config) -> HabitStore:
    """Build the configured backend and load its habits."""
    try:
        return HabitStore(backend=create_backend(config))
    except HabitflowError as e:
        raise click.ClickException(str(e)) from e


def resolve_habit(store: HabitStore, ref: str) -> Habit:
    """Find a habit by exact id, unique id prefix, or case-insensitive name.

    Exits with status 1 when nothing (or more than one habit) matches.
    """
    habits = store.list_habits()
    for habit in habits:
        if habit.id == ref:
            return habit

    matches = [h for h in habits if h.id.startswith(ref)] or [h for h in habits if h.name.lower() == ref.lower()]
    if len(matches) == 1:
        return matches[0]
    if not matches:
        click.echo(f"Habit not found: {ref}", err=True)
    else:
        click.echo(f"'{ref}' matches {len(matches)} habits; use a longer id.", err=True)
    sys.exit(1)


def echo_json(data: Any) -> None:
    click.echo(json.dumps(data, indent=2))


def format_number(value: float) -> str:
    """Drop a trailing .0 from whole numbers."""
    return str(int(value)) if float(value).is_integer() else f"{value:g}"

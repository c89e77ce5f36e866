"""habitflow add / edit / remove / list / log — manage habits and record progress."""

from __future__ import annotations

import click

from habitflow.core.exceptions import HabitflowError
from habitflow.habits.models import HabitCategory, HabitFrequency, HabitUnit

_CATEGORIES = click.Choice([c.value for c in HabitCategory])
_UNITS = click.Choice([u.value for u in HabitUnit])
_FREQUENCIES = click.Choice([f.value for f in HabitFrequency])


@click.command()
@click.argument("name")
@click.option("--category", type=_CATEGORIES, default="health", show_default=True)
@click.option("--target", type=int, default=1, show_default=True, help="Daily amount that counts as done.")
@click.option("--unit", type=_UNITS, default="times", show_default=True)
@click.option("--frequency", type=_FREQUENCIES, default="daily", show_default=True)
@click.option("--description", default=None)
@click.option("--icon", default="Target", show_default=True)
@click.option("--color", default="#0EA5E9", show_default=True)
def add(
    name: str,
    category: str,
    target: int,
    unit: str,
    frequency: str,
    description: str | None,
    icon: str,
    color: str,
) -> None:
    """Create a new habit."""
    from habitflow.core.cli.common import ensure_init, load_config, open_store

    ensure_init()
    store = open_store(load_config())
    try:
        habit = store.add_habit(
            name,
            category=category,
            target=target,
            unit=unit,
            frequency=frequency,
            description=description,
            icon=icon,
            color=color,
        )
    except HabitflowError as e:
        raise click.ClickException(str(e)) from e
    click.echo(f'Habit created! "{habit.name}" ({habit.id})')


@click.command()
@click.argument("habit_ref")
@click.option("--name", default=None)
@click.option("--category", type=_CATEGORIES, default=None)
@click.option("--target", type=int, default=None)
@click.option("--unit", type=_UNITS, default=None)
@click.option("--frequency", type=_FREQUENCIES, default=None)
@click.option("--description", default=None)
@click.option("--icon", default=None)
@click.option("--color", default=None)
def edit(habit_ref: str, **options: object) -> None:
    """Change fields of an existing habit."""
    from habitflow.core.cli.common import ensure_init, load_config, open_store, resolve_habit

    ensure_init()
    store = open_store(load_config())
    habit = resolve_habit(store, habit_ref)

    changes = {key: value for key, value in options.items() if value is not None}
    if not changes:
        click.echo("Nothing to change.")
        return
    try:
        updated = store.update_habit(habit.id, **changes)
    except HabitflowError as e:
        raise click.ClickException(str(e)) from e
    click.echo(f'Updated "{updated.name}".')


@click.command()
@click.argument("habit_ref")
@click.option("--yes", is_flag=True, help="Don't ask for confirmation.")
def remove(habit_ref: str, yes: bool) -> None:
    """Delete a habit together with all of its logs."""
    from habitflow.core.cli.common import ensure_init, load_config, open_store, resolve_habit

    ensure_init()
    store = open_store(load_config())
    habit = resolve_habit(store, habit_ref)

    if not yes:
        click.confirm(f'Delete "{habit.name}" and all of its logs?', abort=True)
    try:
        store.delete_habit(habit.id)
    except HabitflowError as e:
        raise click.ClickException(str(e)) from e
    click.echo(f'Deleted "{habit.name}".')


@click.command(name="list")
def list_habits() -> None:
    """Show all habits."""
    from habitflow.core.cli.common import ensure_init, load_config, open_store

    ensure_init()
    store = open_store(load_config())
    habits = store.list_habits()
    if not habits:
        click.echo("No habits yet. Add one with 'habitflow add'.")
        return
    for habit in habits:
        click.echo(
            f"{habit.id[:8]}  {habit.name:<30} {habit.category.value:<13} "
            f"{habit.target} {habit.unit.value}/day  {habit.frequency.value}"
        )


@click.command()
@click.argument("habit_ref")
@click.argument("value", type=float, required=False)
@click.option("--increment", "-i", "mode", flag_value="increment", help="Add one (capped at twice the target).")
@click.option("--decrement", "-d", "mode", flag_value="decrement", help="Subtract one (never below zero).")
@click.option("--complete", "-c", "mode", flag_value="complete", help="Log exactly the target.")
@click.option("--note", default=None)
@click.option("--date", "day", default=None, help="Calendar day (YYYY-MM-DD). Defaults to today.")
def log(habit_ref: str, value: float | None, mode: str | None, note: str | None, day: str | None) -> None:
    """Record progress for a habit (replaces an earlier entry for the same day).

    Pass VALUE to set the day's amount, or use --increment / --decrement /
    --complete to adjust it.
    """
    from habitflow.core.cli.common import ensure_init, format_number, load_config, open_store, resolve_habit

    if (value is None) == (mode is None):
        raise click.UsageError("Give either VALUE or one of --increment, --decrement, --complete.")
    if mode is not None and note is not None:
        raise click.UsageError("--note can only be used together with VALUE.")

    ensure_init()
    store = open_store(load_config())
    habit = resolve_habit(store, habit_ref)
    try:
        if mode == "increment":
            entry = store.increment_habit(habit.id, day=day)
        elif mode == "decrement":
            entry = store.decrement_habit(habit.id, day=day)
        elif mode == "complete":
            entry = store.complete_habit(habit.id, day=day)
        else:
            amount: float = int(value) if value.is_integer() else value
            entry = store.log_habit(habit.id, amount, note, day=day)
    except (HabitflowError, ValueError) as e:
        raise click.ClickException(str(e)) from e

    status = "done" if entry.value >= habit.target else "in progress"
    click.echo(
        f"{habit.name}: {format_number(entry.value)}/{habit.target} {habit.unit.value} "
        f"on {entry.date.isoformat()} ({status})"
    )

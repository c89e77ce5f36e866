"""habitflow stats / trends / categories — derived statistics."""

from __future__ import annotations

import sys

import click


@click.command()
@click.argument("habit_ref", required=False)
@click.option("--json", "as_json", is_flag=True, help="Print machine-readable JSON.")
def stats(habit_ref: str | None, as_json: bool) -> None:
    """Streaks and completion rates (all habits, or one)."""
    from habitflow.core.cli.common import echo_json, ensure_init, format_number, load_config, open_store, resolve_habit
    from habitflow.habits.stats import progress_message, streak_label

    ensure_init()
    store = open_store(load_config())

    if habit_ref:
        habit = resolve_habit(store, habit_ref)
        habit_stats = store.get_habit_stats(habit.id)
        if habit_stats is None:
            click.echo(f"Habit not found: {habit_ref}", err=True)
            sys.exit(1)
        rows = [habit_stats]
    else:
        overview = store.overview()
        if as_json:
            echo_json(overview.to_dict())
            return
        click.echo(f"Today: {overview.completed_today}/{overview.total_habits} habits completed")
        click.echo(progress_message(overview.completed_today, overview.total_habits))
        click.echo(f"Best current streak: {overview.total_streak} days ({streak_label(overview.total_streak)})")
        click.echo(f"Best streak ever: {overview.longest_streak} days")
        click.echo(f"Overall completion: {overview.overall_completion_rate:.0f}%")
        click.echo(f"Average weekly progress: {overview.average_weekly_progress:.0f}%")
        click.echo(f"Logged entries: {overview.total_logs}\n")
        rows = overview.habits

    if as_json:
        echo_json([row.to_dict() for row in rows])
        return

    for row in rows:
        click.echo(
            f"{row.name:<30} today {format_number(row.today_value)}/{row.target} {row.habit.unit.value}"
            f" | streak {row.current_streak} (best {row.longest_streak})"
            f" | week {row.weekly_progress:.0f}% | overall {row.completion_rate:.0f}%"
        )

    if not habit_ref and overview.top_habits:
        click.echo("\nTop habits:")
        for rank, row in enumerate(overview.top_habits, 1):
            click.echo(f"{rank}. {row.name:<30} {row.completion_rate:.0f}%")


@click.command()
@click.option("--json", "as_json", is_flag=True, help="Print machine-readable JSON.")
def trends(as_json: bool) -> None:
    """Completed habits for each of the last seven days."""
    from habitflow.core.cli.common import echo_json, ensure_init, load_config, open_store

    ensure_init()
    store = open_store(load_config())
    rows = store.weekly_trends()

    if as_json:
        echo_json([row.to_dict() for row in rows])
        return
    for row in rows:
        bar = "#" * round(row.rate / 10)
        click.echo(f"{row.day} {row.date.isoformat()}  {row.completed}/{row.total}  {bar:<10} {row.rate:.0f}%")


@click.command()
@click.option("--json", "as_json", is_flag=True, help="Print machine-readable JSON.")
def categories(as_json: bool) -> None:
    """Average completion rate per category."""
    from habitflow.core.cli.common import echo_json, ensure_init, load_config, open_store

    ensure_init()
    store = open_store(load_config())
    rows = store.category_stats()

    if as_json:
        echo_json([row.to_dict() for row in rows])
        return
    if not rows:
        click.echo("No habits yet.")
        return
    for row in rows:
        noun = "habit" if row.count == 1 else "habits"
        click.echo(f"{row.category.value:<13} {row.count} {noun:<7} {row.avg_completion:.0f}%")

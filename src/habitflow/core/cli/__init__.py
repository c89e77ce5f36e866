"""habitflow CLI — entry point for habit management and statistics commands."""

import click

from habitflow import __version__


@click.group()
@click.version_option(version=__version__, package_name="habitflow")
def main() -> None:
    """habitflow — track daily habits, streaks and trends."""


# Register subcommands (command bodies import lazily to keep startup fast)
from .habit_cmd import add, edit, list_habits, log, remove
from .init_cmd import init
from .insights_cmd import insights
from .stats_cmd import categories, stats, trends

main.add_command(init)
main.add_command(add)
main.add_command(edit)
main.add_command(remove)
main.add_command(list_habits)
main.add_command(log)
main.add_command(stats)
main.add_command(trends)
main.add_command(categories)
main.add_command(insights)

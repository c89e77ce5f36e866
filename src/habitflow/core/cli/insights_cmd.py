"""habitflow insights — ask an LLM for an honest read on your habits."""

from __future__ import annotations

import click


@click.command()
def insights() -> None:
    """Generate an analytical summary of your habits with an LLM."""
    try:
        from rich.console import Console
        from rich.markdown import Markdown
        from rich.panel import Panel
    except ImportError:
        raise click.ClickException("Install rich: pip install rich") from None

    from habitflow.core.cli.common import ensure_init, load_config, open_store
    from habitflow.core.exceptions import InsightError
    from habitflow.habits.insights import InsightService

    ensure_init()
    config = load_config()
    habits = open_store(config).list_habits()
    service = InsightService.from_config(config)

    console = Console()
    console.print(f"[dim]Analyzing {len(habits)} habit(s) with {service.model}...[/dim]")
    try:
        text = service.generate(habits)
    except (ImportError, InsightError) as e:
        raise click.ClickException(str(e)) from e
    console.print(Panel(Markdown(text), title="Habit insights"))

"""habitflow init — create the config file and an empty (or sample) habit list."""

from __future__ import annotations

import click
import yaml


@click.command()
@click.option(
    "--backend",
    type=click.Choice(["json", "memory"]),
    default="json",
    show_default=True,
    help="Where habits and logs are stored.",
)
@click.option("--samples", is_flag=True, help="Start with a few example habits.")
@click.option("--force", is_flag=True, help="Overwrite an existing config file.")
def init(backend: str, samples: bool, force: bool) -> None:
    """Set up habitflow in your home directory."""
    from habitflow.core.cli.common import config_path, habitflow_dir, load_config, open_store
    from habitflow.habits.samples import SAMPLE_HABITS

    path = config_path()
    if path.exists() and not force:
        click.echo(f"Config already exists at {path}. Use --force to overwrite.")
        return

    home = habitflow_dir()
    home.mkdir(parents=True, exist_ok=True)
    config_data = {
        "store": {"backend": backend, "path": str(home / "habits.json")},
        "insights": {"model": "gpt-4o-mini"},
        "logging": {"level": "WARNING"},
    }
    with open(path, "w") as f:
        yaml.dump(config_data, f, default_flow_style=False, sort_keys=False)
    click.echo(f"Wrote {path}")

    if samples:
        store = open_store(load_config())
        added = store.seed(SAMPLE_HABITS)
        click.echo(f"Added {len(added)} sample habit(s).")

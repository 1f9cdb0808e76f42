"""
Informational commands for Ronin CLI: task list, effective configuration and
single-episode number lookups.
"""
import click
import logging
from typing import Any, Dict, Optional

from rich.table import Table
from rich import box

from .base import cancel_on_interrupt, build_resolver, console
from ..config import get_config
from ..registry import TASKS, trigger_label
from ..resolver import (
    parse_tvdb_absolute,
    parse_tvdb_aired_episode,
    parse_tvdb_aired_season,
    tvdb_episode_url,
)

logger = logging.getLogger(__name__)

SECRET_MARKERS = ("key", "token", "password", "secret")


def _flatten(data: Dict[str, Any], prefix: str = "") -> Dict[str, Any]:
    flat = {}
    for name, value in data.items():
        path = f"{prefix}{name}"
        if isinstance(value, dict):
            flat.update(_flatten(value, f"{path}."))
        else:
            flat[path] = value
    return flat


def _display(value: Any) -> str:
    if value is None:
        return "[dim]-[/dim]"
    return str(value)


@click.command("tasks")
def list_tasks() -> None:
    """List the available Ronin tasks."""
    table = Table(title="Ronin Tasks", box=box.ROUNDED)
    table.add_column("Key", style="cyan", no_wrap=True)
    table.add_column("Name", style="bold white")
    table.add_column("Trigger", style="magenta")
    table.add_column("Description", style="dim")

    for key, task in TASKS.items():
        table.add_row(key, task.name, trigger_label(task), task.description)

    console.print(table)


@click.command("config")
@click.option("--save", "save_path", type=click.Path(dir_okay=False), help="Write the effective configuration to a JSON file.")
def show_config(save_path: Optional[str]) -> None:
    """Show the effective configuration (secrets masked)."""
    config = get_config()

    table = Table(title="Ronin Configuration", box=box.ROUNDED)
    table.add_column("Setting", style="cyan")
    table.add_column("Value", style="white")

    for name, value in _flatten(config.model_dump(mode="json")).items():
        if value and any(marker in name.lower() for marker in SECRET_MARKERS):
            value = "********"
        table.add_row(name, _display(value))
    console.print(table)

    if save_path:
        config.save_to_file(save_path)
        logger.info(f"Configuration saved to {save_path}")
        console.print(f"[green]Configuration saved to {save_path}[/green]")


@click.command("lookup")
@click.option("--series-id", help="TheTVDB series id.")
@click.option("--series-slug", help="TheTVDB series slug (used when no id is given).")
@click.option("--episode-id", help="TheTVDB episode id.")
@click.option("--anidb-id", help="AniDB episode id.")
def lookup(series_id: Optional[str], series_slug: Optional[str], episode_id: Optional[str], anidb_id: Optional[str]) -> None:
    """
    Resolve the numbers of a single episode without touching the library.
    Useful to check why an episode was skipped or moved.
    """
    url = tvdb_episode_url(series_id, series_slug, episode_id)
    if url is None and not anidb_id:
        raise click.UsageError("Give --episode-id with --series-id or --series-slug, and/or --anidb-id.")

    config = get_config()
    table = Table(title="Episode Lookup", box=box.ROUNDED)
    table.add_column("Source", style="cyan")
    table.add_column("Value", justify="right", style="bold white")

    with cancel_on_interrupt() as cancel_event:
        resolver = build_resolver(config, cancel_event)
        try:
            if url is not None:
                # One page serves all three TheTVDB numbers
                html = resolver.client.get_html(url)
                if html is None:
                    console.print(f"[yellow]Could not load {url}[/yellow]")
                    html = ""
                table.add_row("TheTVDB absolute episode", _display(parse_tvdb_absolute(html)))
                table.add_row("TheTVDB aired season", _display(parse_tvdb_aired_season(html)))
                table.add_row("TheTVDB aired episode", _display(parse_tvdb_aired_episode(html)))
            if anidb_id:
                table.add_row("AniDB absolute episode", _display(resolver.absolute_from_anidb(anidb_id)))
        finally:
            resolver.client.close()

    console.print(table)

"""
Season re-organization commands for Ronin CLI.

Both commands rewrite season assignments across the whole anime library, so
they ask for confirmation unless --yes is given.
"""
import click
import logging

from .base import console, run_task
from ..merger import MergeSeasonsTask
from ..splitter import SplitSeasonsTask

logger = logging.getLogger(__name__)


def _confirm(task_name: str, yes: bool) -> None:
    if yes:
        return
    console.print(f"[bold yellow]{task_name}[/bold yellow] is experimental and changes every anime series.")
    click.confirm("Continue?", abort=True)


@click.command("split-seasons")
@click.option("--yes", is_flag=True, help="Do not ask for confirmation.")
def split_seasons(yes: bool) -> None:
    """Move episodes into their aired seasons (TheTVDB official order)."""
    logger.info(f"Split seasons command started (yes={yes})")
    _confirm(SplitSeasonsTask.name, yes)
    run_task(SplitSeasonsTask.key)


@click.command("merge-seasons")
@click.option("--yes", is_flag=True, help="Do not ask for confirmation.")
def merge_seasons(yes: bool) -> None:
    """Merge all non-special episodes into season 1 and remove emptied seasons."""
    logger.info(f"Merge seasons command started (yes={yes})")
    _confirm(MergeSeasonsTask.name, yes)
    run_task(MergeSeasonsTask.key)

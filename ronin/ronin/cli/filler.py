"""
Canon/Filler commands for Ronin CLI.
"""
import click
import logging

from .base import run_task
from ..classifier import FillerResetTask, FillerUpdateTask

logger = logging.getLogger(__name__)


@click.command("filler-update")
def filler_update() -> None:
    """
    Tag unlabelled anime episodes as Manga Canon, Mixed Canon/Filler,
    Filler or Anime Canon using animefillerlist.com.
    """
    logger.info("Filler update command started")
    run_task(FillerUpdateTask.key)


@click.command("filler-reset")
def filler_reset() -> None:
    """Remove every canon/filler tag previously set by Ronin."""
    logger.info("Filler reset command started")
    run_task(FillerResetTask.key)

import click
import logging
from typing import Optional

from .config import setup_config
from .logging import setup_logging, set_log_level, console
from .cli.filler import filler_update, filler_reset
from .cli.seasons import split_seasons, merge_seasons
from .cli.info import list_tasks, show_config, lookup

logger = logging.getLogger(__name__)


@click.group()
@click.option("--config-file", type=click.Path(exists=True, dir_okay=False), help="JSON configuration written by 'ronin config --save'.")
@click.option("--log-level", type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False), help="Log level for both console and file.")
def cli(config_file: Optional[str], log_level: Optional[str]):
    """Ronin: canon/filler tagging and season re-organization for anime in Jellyfin."""
    try:
        config = setup_config(config_file)
    except ValueError as e:
        # pydantic ValidationError is a ValueError
        console.print(f"[red]Invalid configuration: {e}[/red]")
        raise click.Abort()

    setup_logging(config.logging.log_file)
    if log_level:
        set_log_level(log_level)
    else:
        set_log_level(config.logging.file_level, "file")
        set_log_level(config.logging.console_level, "console")
    logger.info(f"Ronin started (config_file={config_file}, log_level={log_level})")


cli.add_command(list_tasks)
cli.add_command(show_config)
cli.add_command(lookup)
cli.add_command(filler_update)
cli.add_command(filler_reset)
cli.add_command(split_seasons)
cli.add_command(merge_seasons)


if __name__ == "__main__":
    cli()

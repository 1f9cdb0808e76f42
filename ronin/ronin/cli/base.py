"""
Shared CLI utilities and base functionality.

Builds the host and scrape collaborators from configuration and runs a task
under a rich progress bar with Ctrl+C mapped to cooperative cancellation.
"""
import sys
import signal
import threading
from contextlib import contextmanager
from typing import Iterator

from rich.progress import Progress, SpinnerColumn, BarColumn, TextColumn, TimeElapsedColumn
from rich.table import Table
from rich import box

from ..config import RoninConfig, get_config
from ..constants import PROGRESS_REFRESH_RATE
from ..jellyfin_api import JellyfinAPI
from ..logging import get_logger, log_step, console, ConfigError, HostError, TaskCancelledError
from ..registry import create_task
from ..resolver import EpisodeNumberResolver
from ..scraper import ScrapeClient, create_scrape_session
from ..tasks import RoninTask, TaskReport

logger = get_logger(__name__)

EXIT_CANCELLED = 130


def build_host(config: RoninConfig) -> JellyfinAPI:
    """
    Creates the Jellyfin host adapter.

    Raises:
        SystemExit: If the Jellyfin API key is not configured.
    """
    try:
        return JellyfinAPI(config.jellyfin)
    except ConfigError as e:
        logger.error(str(e))
        console.print(f"[red]Error: {e}[/red]")
        sys.exit(1)


def build_resolver(config: RoninConfig, cancel_event: threading.Event) -> EpisodeNumberResolver:
    """Resolver over one pooled session; rate-limit waits end early once cancelled."""
    client = ScrapeClient(
        session=create_scrape_session(),
        delay_seconds=config.request_delay_seconds,
        timeout=config.request_timeout,
        wait=cancel_event.wait,
    )
    return EpisodeNumberResolver(client)


@contextmanager
def cancel_on_interrupt() -> Iterator[threading.Event]:
    """Installs a SIGINT handler that sets the yielded event instead of raising."""
    cancel_event = threading.Event()

    def _handler(signum, frame):
        console.print("[yellow]Cancelling after the current episode...[/yellow]")
        cancel_event.set()

    previous = signal.signal(signal.SIGINT, _handler)
    try:
        yield cancel_event
    finally:
        signal.signal(signal.SIGINT, previous)


def print_report(task: RoninTask, report: TaskReport) -> None:
    table = Table(title=task.name, box=box.ROUNDED, show_header=False)
    table.add_column("Metric", style="cyan")
    table.add_column("Value", justify="right", style="white")
    for metric, value in report.as_dict().items():
        style = "red" if metric == "errors" and value else ""
        table.add_row(metric.replace("_", " ").capitalize(), f"[{style}]{value}[/{style}]" if style else str(value))
    console.print(table)


def run_task(key: str) -> TaskReport:
    """
    Runs a registered task against the configured Jellyfin server.

    Exits with status 130 when cancelled and 1 when the host cannot be reached.
    """
    config = get_config()
    host = build_host(config)

    with cancel_on_interrupt() as cancel_event:
        resolver = build_resolver(config, cancel_event)
        task = create_task(key, host, resolver, config)
        log_step(task.name)

        progress = Progress(
            SpinnerColumn(),
            TextColumn("[progress.description]{task.description}"),
            BarColumn(),
            TextColumn("[progress.percentage]{task.percentage:>3.0f}%"),
            TimeElapsedColumn(),
            console=console,
            refresh_per_second=PROGRESS_REFRESH_RATE,
        )
        try:
            with progress:
                progress_id = progress.add_task(f"[bold green]{task.name}", total=1.0)
                report = task.execute(
                    progress=lambda value: progress.update(progress_id, completed=value),
                    cancel_event=cancel_event,
                )
        except TaskCancelledError:
            console.print(f"[yellow]{task.name} cancelled. Changes already applied are kept.[/yellow]")
            sys.exit(EXIT_CANCELLED)
        except HostError as e:
            logger.error(f"{task.name} failed: {e}")
            console.print(f"[red]Error: {e}[/red]")
            sys.exit(1)
        finally:
            resolver.client.close()

    print_report(task, report)
    return report

"""
Task framework shared by the classification and reorganization passes.

A task walks the anime series of the library strictly sequentially, one
episode at a time. Cancellation is cooperative: it is checked before every
series and every episode, so an episode mutation is never interrupted half
way. Progress is reported as a fraction in [0, 1].
"""

import threading
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Callable, Dict, Iterator, List, Optional, Sequence

from .config import RoninConfig
from .constants import TASK_CATEGORY
from .host import ItemUpdateType, LibraryHost, LibraryItem, RefreshOptions
from .logging import get_logger, HostError, TaskCancelledError
from .models import EpisodeRef, SeriesRef
from .resolver import EpisodeNumberResolver
from .selector import select_anime_series

logger = get_logger(__name__)

ProgressCallback = Callable[[float], None]


class ProgressTracker:
    """
    Fractional progress over a series loop:
    (series completed + episodes done / episode count) / total series.

    Reported values never decrease and stay within [0, 1].
    """

    def __init__(self, total_series: int, callback: Optional[ProgressCallback] = None):
        self.total_series = total_series
        self.callback = callback
        self.value = 0.0

    def _emit(self, value: float) -> None:
        value = min(max(value, self.value), 1.0)
        self.value = value
        if self.callback:
            self.callback(value)

    def start(self) -> None:
        self._emit(0.0)

    def report(self, series_done: int, episodes_done: int = 0, episode_count: int = 0) -> None:
        if self.total_series <= 0:
            return
        partial = episodes_done / episode_count if episode_count > 0 else 0.0
        self._emit((series_done + partial) / self.total_series)

    def finish(self) -> None:
        self._emit(1.0)


@dataclass
class TaskReport:
    """Counters collected during one task run."""
    series_total: int = 0
    series_processed: int = 0
    series_skipped: int = 0
    episodes_updated: int = 0
    episodes_skipped: int = 0
    seasons_renamed: int = 0
    seasons_deleted: int = 0
    errors: int = 0

    def as_dict(self) -> Dict[str, int]:
        return dict(self.__dict__)


class RoninTask(ABC):
    """Base class for the library passes."""

    name: str = ""
    key: str = ""
    description: str = ""
    category: str = TASK_CATEGORY
    default_interval_hours: Optional[int] = None  # None = manual only

    def __init__(
        self,
        host: LibraryHost,
        resolver: Optional[EpisodeNumberResolver],
        config: RoninConfig,
    ):
        self.host = host
        self.resolver = resolver
        self.config = config
        self.report = TaskReport()
        self._tracker = ProgressTracker(0)
        self._cancel_event: Optional[threading.Event] = None
        self._current_series_index = 0

    def execute(
        self,
        progress: Optional[ProgressCallback] = None,
        cancel_event: Optional[threading.Event] = None,
    ) -> TaskReport:
        """
        Runs the task over every anime series.

        Raises:
            TaskCancelledError: if cancel_event is set while running.
            HostError: if the series list itself cannot be queried.
        """
        logger.info(f"Starting {self.name}")
        self.report = TaskReport()
        self._cancel_event = cancel_event

        series_list = select_anime_series(self.host.query_series(), self.config)
        self.report.series_total = len(series_list)
        self._tracker = ProgressTracker(len(series_list), progress)
        self._tracker.start()

        for series_index, series in enumerate(series_list):
            self._check_cancelled()
            self._current_series_index = series_index
            self.process_series(series)
            self._tracker.report(series_index + 1)

        self._tracker.finish()
        logger.info(f"Finished {self.name}: {self.report.as_dict()}")
        return self.report

    @abstractmethod
    def process_series(self, series: SeriesRef) -> None:
        """Processes one anime series."""

    def _check_cancelled(self) -> None:
        if self._cancel_event is not None and self._cancel_event.is_set():
            logger.warning(f"{self.name} cancelled")
            raise TaskCancelledError(f"{self.name} was cancelled")

    def _each_episode(self, episodes: Sequence[EpisodeRef]) -> Iterator[EpisodeRef]:
        """Yields episodes with a cancellation check before and a progress report after each."""
        count = len(episodes)
        for done, episode in enumerate(episodes):
            self._check_cancelled()
            yield episode
            self._tracker.report(self._current_series_index, done + 1, count)

    def _query_episodes(self, series: SeriesRef) -> Optional[List[EpisodeRef]]:
        try:
            return self.host.query_episodes(series)
        except HostError as e:
            logger.error(f"Could not list episodes of {series.name}: {e}")
            self.report.errors += 1
            return None

    def _refresh_series(self, series: SeriesRef) -> bool:
        """Non-destructive refresh; a failure is logged and never undoes episode changes."""
        logger.info(f"Refreshing metadata for series: {series.name}")
        try:
            self.host.refresh_metadata(series, RefreshOptions())
        except HostError as e:
            logger.error(f"Failed to refresh metadata for series {series.name}: {e}")
            self.report.errors += 1
            return False
        return True

    def _persist(self, item: LibraryItem, **changes: Any) -> bool:
        """
        Applies attribute changes to an item and saves it through the host.
        On failure the in-memory attributes are restored and False is returned.
        """
        previous = {attr: getattr(item, attr) for attr in changes}
        for attr, value in changes.items():
            setattr(item, attr, value)

        try:
            self.host.update_item(item, ItemUpdateType.METADATA_EDIT)
        except HostError as e:
            for attr, value in previous.items():
                setattr(item, attr, value)
            logger.error(f"Failed to update {item.name} ({item.id}): {e}")
            self.report.errors += 1
            return False
        return True

"""
Available Ronin tasks, keyed by task key.
"""

from typing import Dict, Optional, Type

from .classifier import FillerResetTask, FillerUpdateTask
from .config import RoninConfig
from .host import LibraryHost
from .merger import MergeSeasonsTask
from .resolver import EpisodeNumberResolver
from .splitter import SplitSeasonsTask
from .tasks import RoninTask

TASKS: Dict[str, Type[RoninTask]] = {
    task.key: task
    for task in (FillerUpdateTask, FillerResetTask, SplitSeasonsTask, MergeSeasonsTask)
}


def create_task(
    key: str,
    host: LibraryHost,
    resolver: Optional[EpisodeNumberResolver],
    config: RoninConfig,
) -> RoninTask:
    """Instantiates a registered task; unknown keys raise KeyError."""
    return TASKS[key](host, resolver, config)


def trigger_label(task: Type[RoninTask]) -> str:
    if task.default_interval_hours is None:
        return "Manual"
    return f"Every {task.default_interval_hours}h"

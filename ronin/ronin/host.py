"""
Contract between the engine and the media library that owns the items.

The engine never persists anything itself; every durable change is a single
call on a LibraryHost. Implementations raise HostError on failure.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import List, Union

from .models import EpisodeRef, SeasonRef, SeriesRef

LibraryItem = Union[SeriesRef, SeasonRef, EpisodeRef]


class ItemUpdateType(Enum):
    METADATA_EDIT = "MetadataEdit"


class RefreshMode(Enum):
    NONE = "None"
    VALIDATION_ONLY = "ValidationOnly"
    DEFAULT = "Default"
    FULL_REFRESH = "FullRefresh"


@dataclass(frozen=True)
class RefreshOptions:
    """Defaults describe a non-destructive refresh that keeps user edits."""
    metadata_refresh_mode: RefreshMode = RefreshMode.DEFAULT
    image_refresh_mode: RefreshMode = RefreshMode.DEFAULT
    replace_all_metadata: bool = False
    replace_all_images: bool = False
    force_save: bool = True
    recursive: bool = True


@dataclass(frozen=True)
class DeleteOptions:
    delete_file_location: bool = False


class LibraryHost(ABC):
    """Host library operations consumed by the tasks."""

    @abstractmethod
    def query_series(self) -> List[SeriesRef]:
        """All series in the library."""

    @abstractmethod
    def query_episodes(self, series: SeriesRef) -> List[EpisodeRef]:
        """Non-virtual episodes of a series, all seasons included."""

    @abstractmethod
    def query_seasons(self, series: SeriesRef) -> List[SeasonRef]:
        """Season containers of a series."""

    @abstractmethod
    def update_item(self, item: LibraryItem, update_type: ItemUpdateType = ItemUpdateType.METADATA_EDIT) -> None:
        """Persists the current state of an episode or season."""

    @abstractmethod
    def refresh_metadata(self, series: SeriesRef, options: RefreshOptions = RefreshOptions()) -> None:
        """Asks the host to re-validate and refresh a series."""

    @abstractmethod
    def delete_item(self, item: LibraryItem, options: DeleteOptions = DeleteOptions()) -> None:
        """Removes an item (an emptied season) from the library."""

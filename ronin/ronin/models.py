from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional

from .constants import FILLER_TAGS, SPECIALS_SEASON_NUMBER


class FillerStatus(Enum):
    """Canon/Filler label as published by AnimeFillerList."""
    MANGA_CANON = FILLER_TAGS[0]
    MIXED = FILLER_TAGS[1]
    FILLER = FILLER_TAGS[2]
    ANIME_CANON = FILLER_TAGS[3]

    @classmethod
    def from_label(cls, label: str) -> Optional["FillerStatus"]:
        """Returns the status for a label (whitespace-insensitive), or None if unknown."""
        normalized = " ".join(label.split())
        for status in cls:
            if status.value == normalized:
                return status
        return None


# Mapping of absolute episode number -> status, scoped to one scrape
FillerTable = Dict[int, FillerStatus]


def _provider_lookup(provider_ids: Dict[str, str], name: str) -> Optional[str]:
    # Host provider keys are case-insensitive ("Tvdb" == "tvdb")
    for key, value in provider_ids.items():
        if key.lower() == name.lower():
            value = str(value).strip() if value is not None else ""
            return value or None
    return None


def positive_or_none(value: Optional[int]) -> Optional[int]:
    """Zero and negative ordinals are never valid; they mean 'unresolved'."""
    if value is None or value <= 0:
        return None
    return value


@dataclass
class SeriesRef:
    """A series as seen through the host library."""
    id: str
    name: str
    genres: List[str] = field(default_factory=list)
    tags: List[str] = field(default_factory=list)
    provider_ids: Dict[str, str] = field(default_factory=dict)
    path: Optional[str] = None

    def provider_id(self, name: str) -> Optional[str]:
        return _provider_lookup(self.provider_ids, name)


@dataclass
class EpisodeRef:
    """An episode as seen through the host library."""
    id: str
    name: str
    series_id: str
    season_number: Optional[int] = None  # ParentIndexNumber, 0 = specials
    index_number: Optional[int] = None  # IndexNumber within the season
    tags: List[str] = field(default_factory=list)
    provider_ids: Dict[str, str] = field(default_factory=dict)
    path: Optional[str] = None

    def provider_id(self, name: str) -> Optional[str]:
        return _provider_lookup(self.provider_ids, name)

    @property
    def is_special(self) -> bool:
        return self.season_number == SPECIALS_SEASON_NUMBER

    @property
    def label(self) -> str:
        """Short S/E label for log lines."""
        season = "?" if self.season_number is None else f"{self.season_number:02d}"
        episode = "?" if self.index_number is None else f"{self.index_number:02d}"
        return f"S{season}E{episode} {self.name}"


@dataclass
class SeasonRef:
    """A season container of a series."""
    id: str
    name: str
    series_id: str
    index_number: Optional[int] = None
    path: Optional[str] = None


@dataclass
class ResolvedOrdinal:
    """
    Result of an ordinal lookup. Each value is either positive or None;
    non-positive input is normalized to None on construction.
    """
    absolute: Optional[int] = None
    season: Optional[int] = None
    source: Optional[str] = None  # Provider that produced the value

    def __post_init__(self) -> None:
        self.absolute = positive_or_none(self.absolute)
        self.season = positive_or_none(self.season)

    @property
    def is_resolved(self) -> bool:
        return self.absolute is not None or self.season is not None

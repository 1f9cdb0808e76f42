"""
Merge Seasons task: consolidates every non-special episode of an anime into
season 1, then tidies the season containers.

Episode numbers are kept when the library already numbers the whole show
1..N. Otherwise (per-season numbering, gaps, repeats) each moved episode is
renumbered with its absolute number when one can be resolved.

Season containers are only touched after every episode move of the series has
been issued, and a season is never deleted while one of its episodes failed
to move out.
"""

from dataclasses import dataclass
from typing import Iterable, List, Set

from .constants import DEFAULT_SEASON_NUMBER
from .host import DeleteOptions
from .logging import get_logger, HostError
from .models import EpisodeRef, SeasonRef, SeriesRef
from .tasks import RoninTask

logger = get_logger(__name__)


@dataclass
class NumberingPattern:
    """
    How the episode numbers of a series are laid out.

    duplicate_ones is a heuristic for per-season numbering: it also fires for
    a genuine one-episode first season followed by a season that restarts at 1.
    """
    sequential_absolute: bool
    duplicate_ones: bool

    @property
    def needs_renumbering(self) -> bool:
        return not self.sequential_absolute or self.duplicate_ones


def classify_numbering(episodes: Iterable[EpisodeRef]) -> NumberingPattern:
    """Inspects the positive episode numbers of the given episodes."""
    numbers = sorted(
        e.index_number for e in episodes
        if e.index_number is not None and e.index_number > 0
    )
    count = len(numbers)
    sequential = (
        count > 0
        and len(set(numbers)) == count
        and numbers[0] == 1
        and numbers[-1] == count
    )
    duplicate_ones = numbers.count(1) > 1
    return NumberingPattern(sequential_absolute=sequential, duplicate_ones=duplicate_ones)


class MergeSeasonsTask(RoninTask):
    name = "Global Anime Re-Org: Force Single Season"
    key = "RoninMergeSeasonsTask"
    description = (
        "Consolidates all episodes into a single season (season 1) for each "
        "anime series. This renumbers seasons while keeping episode metadata "
        "intact. Specials (Season 0) are untouched. Experimental feature; use "
        "with caution."
    )

    def process_series(self, series: SeriesRef) -> None:
        episodes = self._query_episodes(series)
        if episodes is None:
            self.report.series_skipped += 1
            return

        episodes = [e for e in episodes if e.season_number is not None and e.season_number > 0]
        if not episodes:
            self.report.series_skipped += 1
            return

        pattern = classify_numbering(episodes)
        logger.debug(
            f"{series.name}: sequential_absolute={pattern.sequential_absolute}, "
            f"duplicate_ones={pattern.duplicate_ones}"
        )

        modified = False
        failed_seasons: Set[int] = set()
        for episode in self._each_episode(episodes):
            if episode.season_number == DEFAULT_SEASON_NUMBER:
                continue

            old_season = episode.season_number
            if self.merge_episode(series, episode, pattern):
                modified = True
            else:
                failed_seasons.add(old_season)

        if modified and self.config.refresh_series_after_processed:
            if self._refresh_series(series):
                self.tidy_seasons(series, failed_seasons)
            else:
                logger.warning(f"Season cleanup for {series.name} skipped because the refresh failed")

        self.report.series_processed += 1

    def merge_episode(self, series: SeriesRef, episode: EpisodeRef, pattern: NumberingPattern) -> bool:
        """Moves one episode to season 1. Returns False if the host rejected it."""
        changes = {"season_number": DEFAULT_SEASON_NUMBER}

        if pattern.needs_renumbering:
            resolved = self.resolver.resolve_absolute(series, episode)
            if resolved.absolute is not None:
                changes["index_number"] = resolved.absolute
            else:
                logger.debug(f"No absolute number for {episode.label}, keeping episode number")

        logger.info(f"Merging {series.name} - {episode.name}: Season {episode.season_number} -> 1")
        if not self._persist(episode, **changes):
            return False

        self.report.episodes_updated += 1
        return True

    def tidy_seasons(self, series: SeriesRef, failed_seasons: Set[int]) -> None:
        """Renames season 1 if configured and removes the emptied seasons above it."""
        try:
            seasons: List[SeasonRef] = self.host.query_seasons(series)
        except HostError as e:
            logger.error(f"Could not list seasons of {series.name}: {e}")
            self.report.errors += 1
            return

        target_name = self.config.single_season_name
        for season in seasons:
            if season.index_number == DEFAULT_SEASON_NUMBER and self.config.rename_when_single_season:
                if season.name.casefold() != target_name.casefold():
                    logger.info(f"Renaming season: {season.name} -> {target_name}")
                    if self._persist(season, name=target_name):
                        self.report.seasons_renamed += 1

            if season.index_number is not None and season.index_number > DEFAULT_SEASON_NUMBER:
                if season.index_number in failed_seasons:
                    logger.warning(
                        f"Keeping {series.name} - Season {season.index_number}: "
                        "some of its episodes could not be moved"
                    )
                    continue
                self._delete_season(series, season)

    def _delete_season(self, series: SeriesRef, season: SeasonRef) -> None:
        logger.info(f"Removing empty season: {series.name} - Season {season.index_number}")
        try:
            self.host.delete_item(season, DeleteOptions(delete_file_location=False))
        except HostError as e:
            logger.error(f"Failed to remove {series.name} - Season {season.index_number}: {e}")
            self.report.errors += 1
            return
        self.report.seasons_deleted += 1

"""
Canon/Filler classification tasks.

FillerUpdateTask scrapes AnimeFillerList once per series, resolves the
absolute number of each unlabelled episode (TheTVDB, then AniDB) and tags the
episode with the matching status. Episodes that already carry a status are
left alone, so re-running only fills in the gaps.
"""

from typing import List

from .constants import FILLER_UPDATE_INTERVAL_HOURS
from .filler import fetch_filler_table
from .logging import get_logger, ScrapeError
from .models import EpisodeRef, FillerTable, SeriesRef
from .tags import current_status, reconcile_tags, strip_status_tags
from .tasks import RoninTask

logger = get_logger(__name__)


def numbered_episodes(episodes: List[EpisodeRef]) -> List[EpisodeRef]:
    """Episodes with an episode number, in (season or 1, number) order."""
    numbered = [e for e in episodes if e.index_number is not None]
    return sorted(
        numbered,
        key=lambda e: (e.season_number if e.season_number is not None else 1, e.index_number),
    )


class FillerUpdateTask(RoninTask):
    name = "Update Anime Canon/Filler Metadata Tags"
    key = "RoninFillerUpdateTask"
    description = (
        "Checks your anime on animefillerlist.com and updates episode tags "
        "to mark canon or filler episodes."
    )
    default_interval_hours = FILLER_UPDATE_INTERVAL_HOURS

    def process_series(self, series: SeriesRef) -> None:
        try:
            filler_table = fetch_filler_table(self.resolver.client, series)
        except ScrapeError as e:
            logger.warning(str(e))
            self.report.series_skipped += 1
            return

        if not filler_table:
            logger.info(f"No filler data for {series.name}, skipping")
            self.report.series_skipped += 1
            return

        episodes = self._query_episodes(series)
        if not episodes:
            self.report.series_skipped += 1
            return
        episodes = numbered_episodes(episodes)
        if not episodes:
            self.report.series_skipped += 1
            return

        logger.info(f"Classifying {len(episodes)} episodes of {series.name} ({len(filler_table)} known)")
        for episode in self._each_episode(episodes):
            self.classify_episode(series, episode, filler_table)

        self.report.series_processed += 1

    def classify_episode(self, series: SeriesRef, episode: EpisodeRef, filler_table: FillerTable) -> bool:
        """Returns True when the episode was tagged."""
        existing = current_status(episode.tags)
        if existing is not None:
            logger.debug(f"{episode.label} already tagged '{existing.value}', skipping")
            self.report.episodes_skipped += 1
            return False

        resolved = self.resolver.resolve_absolute(series, episode)
        if resolved.absolute is None:
            logger.debug(f"Could not resolve absolute episode number for {episode.label}, skipping")
            self.report.episodes_skipped += 1
            return False

        status = filler_table.get(resolved.absolute)
        if status is None:
            logger.debug(f"Episode {resolved.absolute} of {series.name} not in filler list")
            self.report.episodes_skipped += 1
            return False

        if not self._persist(episode, tags=reconcile_tags(episode.tags, status)):
            return False

        logger.info(f"Tagged {series.name} {episode.label} as {status.value} (absolute {resolved.absolute} via {resolved.source})")
        self.report.episodes_updated += 1
        return True


class FillerResetTask(RoninTask):
    name = "Reset Anime Canon/Filler Metadata Tags"
    key = "RoninFillerResetTask"
    description = "Removes all filler/canon tags previously set by Ronin."

    def process_series(self, series: SeriesRef) -> None:
        episodes = self._query_episodes(series)
        if episodes is None:
            self.report.series_skipped += 1
            return

        numbered = [e for e in episodes if e.index_number is not None]
        for episode in self._each_episode(numbered):
            if not episode.tags:
                continue

            updated = strip_status_tags(episode.tags)
            if updated == list(episode.tags):
                continue

            if self._persist(episode, tags=updated):
                logger.info(f"Reset filler tags for {series.name} {episode.label}")
                self.report.episodes_updated += 1

        self.report.series_processed += 1

"""
Split Seasons task: moves each episode into the season it originally aired in
according to TheTVDB's official ordering.
"""

from .constants import PROVIDER_TVDB, PROVIDER_TVDB_SLUG
from .logging import get_logger
from .models import EpisodeRef, SeriesRef
from .tasks import RoninTask

logger = get_logger(__name__)


class SplitSeasonsTask(RoninTask):
    name = "Global Anime Re-Org: Organize in Aired Seasons"
    key = "RoninSplitSeasonsTask"
    description = (
        "Redistributes episodes into seasons based on TVDB Aired Order while "
        "preserving episode numbers. Specials (Season 0) are not affected. "
        "Experimental feature; use with caution."
    )

    def process_series(self, series: SeriesRef) -> None:
        if not series.provider_id(PROVIDER_TVDB) and not series.provider_id(PROVIDER_TVDB_SLUG):
            logger.debug(f"{series.name} has no TheTVDB id or slug, skipping")
            self.report.series_skipped += 1
            return

        episodes = self._query_episodes(series)
        if episodes is None:
            self.report.series_skipped += 1
            return

        # Specials stay in season 0
        episodes = [
            e for e in episodes
            if e.provider_id(PROVIDER_TVDB) and not e.is_special
        ]
        if not episodes:
            self.report.series_skipped += 1
            return

        modified = False
        for episode in self._each_episode(episodes):
            if self.split_episode(series, episode):
                modified = True

        if modified and self.config.refresh_series_after_processed:
            self._refresh_series(series)

        self.report.series_processed += 1

    def split_episode(self, series: SeriesRef, episode: EpisodeRef) -> bool:
        """Returns True when the episode was moved to another season."""
        aired_season = self.resolver.resolve_aired_season(series, episode)

        # Season 1 doubles as the "unknown" answer, so it never moves anything
        if aired_season <= 1 or episode.season_number == aired_season:
            self.report.episodes_skipped += 1
            return False

        old_season = episode.season_number if episode.season_number is not None else 1
        logger.info(f"Updating {series.name} - {episode.name}: Season {old_season} -> {aired_season}")
        if not self._persist(episode, season_number=aired_season):
            return False

        self.report.episodes_updated += 1
        return True

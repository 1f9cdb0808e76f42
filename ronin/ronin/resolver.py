"""
Resolves episode ordinals the host library cannot derive locally.

TheTVDB episode pages carry breadcrumbs for each ordering of a series: the
"absolute" crumb gives the show-wide episode number and the "official"
(aired) crumb gives the broadcast season. AniDB is the fallback source for
absolute numbers and is keyed by episode id only.

Absolute lookups fail closed to None. The aired season lookup defaults to 1,
which the season splitter treats as "leave the episode alone".
"""

import re
from typing import Optional

from bs4 import BeautifulSoup

from .constants import (
    ANIDB_EPISODE_URL_TEMPLATE,
    DEFAULT_SEASON_NUMBER,
    PROVIDER_ANIDB,
    PROVIDER_TVDB,
    PROVIDER_TVDB_SLUG,
    SCRAPER_PARSER,
    TVDB_ABSOLUTE_LINK_SELECTOR,
    TVDB_CRUMBS_SELECTOR,
    TVDB_EPISODE_URL_TEMPLATE,
    TVDB_OFFICIAL_LINK_SELECTOR,
)
from .logging import get_logger
from .models import EpisodeRef, ResolvedOrdinal, SeriesRef, positive_or_none
from .scraper import ScrapeClient

logger = get_logger(__name__)

EPISODE_RE = re.compile(r"Episode\s+(\d+)", re.IGNORECASE)
SEASON_RE = re.compile(r"Season\s+(\d+)")
ANIDB_ABSOLUTE_RE = re.compile(r"- (\d+) -")


def _crumb_episode_number(html: str, link_selector: str) -> Optional[int]:
    soup = BeautifulSoup(html, SCRAPER_PARSER)
    for crumbs in soup.select(TVDB_CRUMBS_SELECTOR):
        if crumbs.select_one(link_selector) is None:
            continue
        match = EPISODE_RE.search(crumbs.get_text(" ", strip=True))
        return positive_or_none(int(match.group(1))) if match else None
    return None


def parse_tvdb_absolute(html: str) -> Optional[int]:
    """Episode number from the breadcrumb that links to the absolute ordering."""
    return _crumb_episode_number(html, TVDB_ABSOLUTE_LINK_SELECTOR)


def parse_tvdb_aired_episode(html: str) -> Optional[int]:
    """Episode number from the breadcrumb that links to the official (aired) ordering."""
    return _crumb_episode_number(html, TVDB_OFFICIAL_LINK_SELECTOR)


def parse_tvdb_aired_season(html: str) -> int:
    """Season number from the first official-ordering link; 1 when missing or invalid."""
    soup = BeautifulSoup(html, SCRAPER_PARSER)
    link = soup.select_one(TVDB_OFFICIAL_LINK_SELECTOR)
    if link is None:
        return DEFAULT_SEASON_NUMBER
    match = SEASON_RE.search(link.get_text(" ", strip=True))
    if not match:
        return DEFAULT_SEASON_NUMBER
    return positive_or_none(int(match.group(1))) or DEFAULT_SEASON_NUMBER


def parse_anidb_absolute(html: str) -> Optional[int]:
    """AniDB pages are matched as raw text: the first '- <digits> -'."""
    match = ANIDB_ABSOLUTE_RE.search(html)
    return positive_or_none(int(match.group(1))) if match else None


def tvdb_episode_url(
    series_id: Optional[str],
    series_slug: Optional[str],
    episode_id: Optional[str],
) -> Optional[str]:
    """Canonical TheTVDB episode URL; the numeric series id wins over the slug."""
    if not episode_id:
        return None
    series_key = series_id or series_slug
    if not series_key:
        return None
    return TVDB_EPISODE_URL_TEMPLATE.format(series=series_key, episode=episode_id)


class EpisodeNumberResolver:
    """
    Looks up absolute numbers and aired seasons through a rate-limited
    ScrapeClient. Each method issues at most one request; a missing
    identifier short-circuits without any request (and without a delay).
    """

    def __init__(self, client: ScrapeClient):
        self.client = client

    def absolute_from_tvdb(
        self,
        series_id: Optional[str],
        series_slug: Optional[str],
        episode_id: Optional[str],
    ) -> Optional[int]:
        url = tvdb_episode_url(series_id, series_slug, episode_id)
        if url is None:
            return None
        html = self.client.get_html(url)
        if html is None:
            return None
        return parse_tvdb_absolute(html)

    def aired_episode_from_tvdb(
        self,
        series_id: Optional[str],
        series_slug: Optional[str],
        episode_id: Optional[str],
    ) -> Optional[int]:
        url = tvdb_episode_url(series_id, series_slug, episode_id)
        if url is None:
            return None
        html = self.client.get_html(url)
        if html is None:
            return None
        return parse_tvdb_aired_episode(html)

    def aired_season_from_tvdb(
        self,
        series_id: Optional[str],
        series_slug: Optional[str],
        episode_id: Optional[str],
    ) -> int:
        url = tvdb_episode_url(series_id, series_slug, episode_id)
        if url is None:
            return DEFAULT_SEASON_NUMBER
        html = self.client.get_html(url)
        if html is None:
            return DEFAULT_SEASON_NUMBER
        return parse_tvdb_aired_season(html)

    def absolute_from_anidb(self, episode_id: Optional[str]) -> Optional[int]:
        if not episode_id:
            return None
        html = self.client.get_html(ANIDB_EPISODE_URL_TEMPLATE.format(episode=episode_id))
        if html is None:
            return None
        return parse_anidb_absolute(html)

    def resolve_absolute(self, series: SeriesRef, episode: EpisodeRef) -> ResolvedOrdinal:
        """
        TheTVDB first, AniDB when TheTVDB yields nothing usable. Both
        attempts pay the rate-limit delay.
        """
        absolute = self.absolute_from_tvdb(
            series.provider_id(PROVIDER_TVDB),
            series.provider_id(PROVIDER_TVDB_SLUG),
            episode.provider_id(PROVIDER_TVDB),
        )
        if absolute is not None:
            return ResolvedOrdinal(absolute=absolute, source="TheTVDB")

        absolute = self.absolute_from_anidb(episode.provider_id(PROVIDER_ANIDB))
        if absolute is not None:
            return ResolvedOrdinal(absolute=absolute, source="AniDB")

        logger.debug(f"No absolute number for {series.name} {episode.label}")
        return ResolvedOrdinal()

    def resolve_aired_season(self, series: SeriesRef, episode: EpisodeRef) -> int:
        return self.aired_season_from_tvdb(
            series.provider_id(PROVIDER_TVDB),
            series.provider_id(PROVIDER_TVDB_SLUG),
            episode.provider_id(PROVIDER_TVDB),
        )

    def resolve_aired_episode(self, series: SeriesRef, episode: EpisodeRef) -> Optional[int]:
        """Episode number within its aired season, TheTVDB only."""
        return self.aired_episode_from_tvdb(
            series.provider_id(PROVIDER_TVDB),
            series.provider_id(PROVIDER_TVDB_SLUG),
            episode.provider_id(PROVIDER_TVDB),
        )

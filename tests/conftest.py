"""
Shared fixtures: an in-memory library host, a canned-HTML HTTP session and
configuration objects.
"""

import copy
from typing import Dict, List, Optional
from unittest.mock import MagicMock

import pytest

from ronin.ronin.config import RoninConfig
from ronin.ronin.host import DeleteOptions, ItemUpdateType, LibraryHost, RefreshOptions
from ronin.ronin.logging import HostError
from ronin.ronin.models import EpisodeRef, SeasonRef, SeriesRef
from ronin.ronin.resolver import EpisodeNumberResolver
from ronin.ronin.scraper import ScrapeClient


class FakeHost(LibraryHost):
    """In-memory LibraryHost that records every call."""

    def __init__(self):
        self.series: List[SeriesRef] = []
        self.episodes: Dict[str, List[EpisodeRef]] = {}
        self.seasons: Dict[str, List[SeasonRef]] = {}
        self.calls: List[tuple] = []
        self.updates: List[object] = []
        self.refreshed: List[str] = []
        self.deleted: List[str] = []
        self.fail_update_ids = set()
        self.fail_delete_ids = set()
        self.fail_refresh = False
        self.fail_episode_query = False

    def add_series(self, series: SeriesRef, episodes=(), seasons=()) -> SeriesRef:
        self.series.append(series)
        self.episodes[series.id] = list(episodes)
        self.seasons[series.id] = list(seasons)
        return series

    def query_series(self):
        return list(self.series)

    def query_episodes(self, series):
        if self.fail_episode_query:
            raise HostError("episode query failed")
        return list(self.episodes.get(series.id, []))

    def query_seasons(self, series):
        return list(self.seasons.get(series.id, []))

    def update_item(self, item, update_type=ItemUpdateType.METADATA_EDIT):
        self.calls.append(("update", item.id))
        if item.id in self.fail_update_ids:
            raise HostError(f"update of {item.id} rejected")
        self.updates.append(copy.deepcopy(item))

    def refresh_metadata(self, series, options=RefreshOptions()):
        self.calls.append(("refresh", series.id))
        if self.fail_refresh:
            raise HostError("refresh failed")
        self.refreshed.append(series.id)

    def delete_item(self, item, options=DeleteOptions()):
        self.calls.append(("delete", item.id))
        if item.id in self.fail_delete_ids:
            raise HostError(f"delete of {item.id} rejected")
        self.deleted.append(item.id)

    def updated_ids(self) -> List[str]:
        return [item.id for item in self.updates]


class FakeSession:
    """Stands in for requests.Session, serving canned HTML by URL."""

    def __init__(self, pages: Optional[Dict[str, str]] = None):
        self.pages = pages or {}
        self.requested: List[str] = []

    def get(self, url, timeout=None):
        self.requested.append(url)
        response = MagicMock()
        if url in self.pages:
            response.ok = True
            response.status_code = 200
            response.text = self.pages[url]
        else:
            response.ok = False
            response.status_code = 404
            response.text = "Not Found"
        return response

    def close(self):
        pass


def tvdb_page(season: Optional[int] = None, episode: Optional[int] = None, absolute: Optional[int] = None) -> str:
    """A trimmed TheTVDB episode page with official and absolute breadcrumbs."""
    parts = ["<html><body>"]
    if season is not None:
        parts.append(
            '<div class="crumbs">'
            '<a href="/series/naruto">Naruto</a> / '
            f'<a href="/series/naruto/seasons/official/{season}">Season {season}</a> / '
            f'Episode {episode if episode is not None else ""}'
            "</div>"
        )
    if absolute is not None:
        parts.append(
            '<div class="crumbs">'
            '<a href="/series/naruto">Naruto</a> / '
            '<a href="/series/naruto/seasons/absolute/1">Absolute Order</a> / '
            f"Episode {absolute}"
            "</div>"
        )
    parts.append("<h1>Some Episode Title</h1></body></html>")
    return "".join(parts)


def anidb_page(absolute: int) -> str:
    return (
        "<html><head><title>Naruto - "
        f"{absolute} - Some Episode Title - AniDB</title></head>"
        "<body><h1>Episode</h1></body></html>"
    )


def filler_page(rows) -> str:
    """An AnimeFillerList show page holding the given (number, label) rows."""
    body = "".join(
        f'<tr class="{"filler" if label == "Filler" else "manga_canon"} even">'
        f'<td class="Number">{number}</td>'
        f'<td class="Title"><a href="/episode/{number}">Episode {number}</a></td>'
        f'<td class="Type"><span>{label}</span></td>'
        '<td class="Date">2003-10-03</td>'
        "</tr>"
        for number, label in rows
    )
    return (
        "<html><body><h1>Naruto Filler List</h1>"
        '<table class="EpisodeList"><thead><tr><th>#</th><th>Title</th><th>Type</th></tr></thead>'
        f"<tbody>{body}</tbody></table></body></html>"
    )


@pytest.fixture
def config():
    return RoninConfig(_env_file=None)


@pytest.fixture
def host():
    return FakeHost()


@pytest.fixture
def session():
    return FakeSession()


@pytest.fixture
def waits():
    return []


@pytest.fixture
def client(session, waits):
    return ScrapeClient(session=session, delay_seconds=2.0, wait=waits.append)


@pytest.fixture
def resolver(client):
    return EpisodeNumberResolver(client)


@pytest.fixture
def anime_series():
    return SeriesRef(
        id="s1",
        name="Naruto",
        genres=["Anime", "Comedy"],
        provider_ids={"Tvdb": "12345"},
    )


def make_episode(episode_id: str, season: Optional[int], number: Optional[int], series_id: str = "s1", **kwargs) -> EpisodeRef:
    return EpisodeRef(
        id=episode_id,
        name=kwargs.pop("name", f"Episode {episode_id}"),
        series_id=series_id,
        season_number=season,
        index_number=number,
        **kwargs,
    )

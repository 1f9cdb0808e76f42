"""
AnimeFillerList support: slug handling, page fetch and episode table parsing.
"""

import re

from bs4 import BeautifulSoup

from .constants import (
    FILLER_LIST_URL_TEMPLATE,
    FILLER_NUMBER_CELL_SELECTOR,
    FILLER_SLUG_MAX_LENGTH,
    FILLER_TABLE_ROW_SELECTOR,
    FILLER_TYPE_CELL_SELECTOR,
    PROVIDER_TVDB_SLUG,
    SCRAPER_PARSER,
)
from .logging import get_logger, ScrapeError
from .models import FillerStatus, FillerTable, SeriesRef
from .scraper import ScrapeClient

logger = get_logger(__name__)


def generate_slug(title: str) -> str:
    """
    Builds an AnimeFillerList style slug from a series title.
    e.g. "Naruto: Shippuden" -> "naruto-shippuden"
    """
    slug = title.lower()
    slug = re.sub(r"[^a-z0-9\s-]", "", slug)
    slug = re.sub(r"\s+", " ", slug).strip()
    slug = slug[:FILLER_SLUG_MAX_LENGTH].strip()
    return re.sub(r"\s", "-", slug)


def series_slug(series: SeriesRef) -> str:
    """TheTVDB slug when the host has one, otherwise derived from the name."""
    return series.provider_id(PROVIDER_TVDB_SLUG) or generate_slug(series.name)


def filler_list_url(slug: str) -> str:
    return FILLER_LIST_URL_TEMPLATE.format(slug=slug)


def parse_filler_table(html: str) -> FillerTable:
    """
    Parses the EpisodeList table into {absolute episode number: status}.

    Rows without a numeric episode cell or with an unknown type label are
    skipped. Later rows overwrite earlier ones for the same number. A page
    without the table yields an empty mapping.
    """
    table: FillerTable = {}
    soup = BeautifulSoup(html, SCRAPER_PARSER)

    for row in soup.select(FILLER_TABLE_ROW_SELECTOR):
        number_cell = row.select_one(FILLER_NUMBER_CELL_SELECTOR)
        type_cell = row.select_one(FILLER_TYPE_CELL_SELECTOR)
        if number_cell is None or type_cell is None:
            continue

        try:
            number = int(number_cell.get_text(strip=True))
        except ValueError:
            continue

        label = type_cell.get_text(strip=True)
        status = FillerStatus.from_label(label)
        if status is None:
            logger.debug(f"Skipping episode {number}: unknown type label '{label}'")
            continue

        table[number] = status

    return table


def fetch_filler_table(client: ScrapeClient, series: SeriesRef) -> FillerTable:
    """
    Downloads and parses the filler list of a series.

    Raises:
        ScrapeError: if the page could not be retrieved.
    """
    url = filler_list_url(series_slug(series))
    html = client.get_html(url)
    if html is None:
        raise ScrapeError(f"Could not find filler list for {series.name} at {url}")
    return parse_filler_table(html)

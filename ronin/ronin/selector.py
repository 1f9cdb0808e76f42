"""
Selects the anime subset of the library's series.
"""

import logging
from typing import Iterable, List

from .config import AnimeIdentificationMode, RoninConfig
from .constants import DEFAULT_ANIME_GENRE
from .models import SeriesRef

logger = logging.getLogger(__name__)


def _contains_ignore_case(values: Iterable[str], needle: str) -> bool:
    needle = needle.lower()
    return any(v is not None and v.lower() == needle for v in values or ())


def is_anime(series: SeriesRef, config: RoninConfig) -> bool:
    has_genre = _contains_ignore_case(series.genres, DEFAULT_ANIME_GENRE)
    has_tag = _contains_ignore_case(series.tags, config.anime_target_tag)

    mode = config.anime_identification_mode
    if mode == AnimeIdentificationMode.TAG:
        return has_tag
    if mode == AnimeIdentificationMode.GENRE_OR_TAG:
        return has_genre or has_tag
    if mode == AnimeIdentificationMode.GENRE_AND_TAG:
        return has_genre and has_tag
    return has_genre


def select_anime_series(all_series: Iterable[SeriesRef], config: RoninConfig) -> List[SeriesRef]:
    """
    Filters series down to anime according to the configured identification mode.
    Returns an empty list when nothing matches.
    """
    selected = [s for s in all_series if is_anime(s, config)]
    logger.info(
        f"Identified {len(selected)} anime series "
        f"(mode={config.anime_identification_mode.value}, tag='{config.anime_target_tag}')"
    )
    return selected

import requests
import logging
from typing import Any, Dict, List, Optional

from .config import JellyfinConfig
from .constants import JELLYFIN_ITEM_FIELDS
from .host import (
    DeleteOptions,
    ItemUpdateType,
    LibraryHost,
    LibraryItem,
    RefreshOptions,
)
from .logging import ConfigError, HostError, log_api_call
from .models import EpisodeRef, SeasonRef, SeriesRef

logger = logging.getLogger(__name__)


def _series_from_dto(dto: Dict[str, Any]) -> SeriesRef:
    return SeriesRef(
        id=dto["Id"],
        name=dto.get("Name") or "",
        genres=list(dto.get("Genres") or []),
        tags=list(dto.get("Tags") or []),
        provider_ids=dict(dto.get("ProviderIds") or {}),
        path=dto.get("Path"),
    )


def _episode_from_dto(dto: Dict[str, Any], series_id: str) -> EpisodeRef:
    return EpisodeRef(
        id=dto["Id"],
        name=dto.get("Name") or "",
        series_id=dto.get("SeriesId") or series_id,
        season_number=dto.get("ParentIndexNumber"),
        index_number=dto.get("IndexNumber"),
        tags=list(dto.get("Tags") or []),
        provider_ids=dict(dto.get("ProviderIds") or {}),
        path=dto.get("Path"),
    )


def _season_from_dto(dto: Dict[str, Any], series_id: str) -> SeasonRef:
    return SeasonRef(
        id=dto["Id"],
        name=dto.get("Name") or "",
        series_id=dto.get("SeriesId") or series_id,
        index_number=dto.get("IndexNumber"),
        path=dto.get("Path"),
    )


class JellyfinAPI(LibraryHost):
    """LibraryHost backed by the Jellyfin REST API."""

    def __init__(self, config: JellyfinConfig, session: Optional[requests.Session] = None):
        if not config.api_key:
            raise ConfigError("JELLYFIN_API_KEY is not set in .env file or config")
        self.base_url = config.url.rstrip("/")
        self.user_id = config.user_id
        self.timeout = config.timeout
        self.session = session or requests.Session()
        self.session.headers.update({"X-Emby-Token": config.api_key})

    def _request(self, method: str, path: str, **kwargs) -> requests.Response:
        url = f"{self.base_url}{path}"
        log_api_call(url, method, kwargs.get("params"))
        try:
            response = self.session.request(method, url, timeout=self.timeout, **kwargs)
        except requests.RequestException as e:
            raise HostError(f"Error connecting to Jellyfin ({method} {path}): {e}") from e
        if not response.ok:
            raise HostError(f"Jellyfin {method} {path} failed: {response.status_code} {response.text[:200]}")
        return response

    def _query_items(self, params: Dict[str, Any]) -> List[Dict[str, Any]]:
        params = dict(params)
        params.setdefault("Fields", JELLYFIN_ITEM_FIELDS)
        if self.user_id:
            params["userId"] = self.user_id
        data = self._request("GET", "/Items", params=params).json()
        return data.get("Items", [])

    def _get_item_dto(self, item_id: str) -> Dict[str, Any]:
        if self.user_id:
            return self._request("GET", f"/Users/{self.user_id}/Items/{item_id}").json()
        return self._request("GET", f"/Items/{item_id}").json()

    def query_series(self) -> List[SeriesRef]:
        items = self._query_items({"IncludeItemTypes": "Series", "Recursive": "true"})
        return [_series_from_dto(dto) for dto in items]

    def query_episodes(self, series: SeriesRef) -> List[EpisodeRef]:
        items = self._query_items({
            "ParentId": series.id,
            "IncludeItemTypes": "Episode",
            "Recursive": "true",
            "IsMissing": "false",
        })
        return [
            _episode_from_dto(dto, series.id)
            for dto in items
            if dto.get("LocationType") != "Virtual"
        ]

    def query_seasons(self, series: SeriesRef) -> List[SeasonRef]:
        items = self._query_items({"ParentId": series.id, "IncludeItemTypes": "Season"})
        return [_season_from_dto(dto, series.id) for dto in items]

    def update_item(self, item: LibraryItem, update_type: ItemUpdateType = ItemUpdateType.METADATA_EDIT) -> None:
        """
        Jellyfin replaces the whole item on update, so the full DTO is read
        first and only the fields Ronin manages are changed.
        """
        dto = self._get_item_dto(item.id)
        dto["Name"] = item.name
        if isinstance(item, EpisodeRef):
            dto["Tags"] = list(item.tags)
            dto["ParentIndexNumber"] = item.season_number
            dto["IndexNumber"] = item.index_number
        elif isinstance(item, SeasonRef):
            dto["IndexNumber"] = item.index_number
        elif isinstance(item, SeriesRef):
            dto["Tags"] = list(item.tags)

        self._request("POST", f"/Items/{item.id}", json=dto)
        logger.debug(f"Updated item {item.id} ({update_type.value})")

    def refresh_metadata(self, series: SeriesRef, options: RefreshOptions = RefreshOptions()) -> None:
        params = {
            "metadataRefreshMode": options.metadata_refresh_mode.value,
            "imageRefreshMode": options.image_refresh_mode.value,
            "replaceAllMetadata": str(options.replace_all_metadata).lower(),
            "replaceAllImages": str(options.replace_all_images).lower(),
            "recursive": str(options.recursive).lower(),
        }
        self._request("POST", f"/Items/{series.id}/Refresh", params=params)
        logger.info(f"Requested metadata refresh for {series.name}")

    def delete_item(self, item: LibraryItem, options: DeleteOptions = DeleteOptions()) -> None:
        """
        DELETE /Items removes the backing folder too, so items with a path
        are refused unless the caller explicitly allows file deletion.
        """
        if item.path and not options.delete_file_location:
            raise HostError(
                f"Refusing to delete '{item.name}': it is backed by '{item.path}' "
                "and deleting it through the API would remove files"
            )
        self._request("DELETE", f"/Items/{item.id}")
        logger.info(f"Deleted item {item.name} ({item.id})")

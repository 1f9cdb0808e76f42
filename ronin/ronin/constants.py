"""
Constants used throughout the Ronin application.
"""

# Canon/Filler labels, in the order animefillerlist.com uses them
FILLER_TAGS = ("Manga Canon", "Mixed Canon/Filler", "Filler", "Anime Canon")

# Anime Identification
DEFAULT_ANIME_GENRE = "Anime"
DEFAULT_ANIME_TARGET_TAG = "Anime"

# Season Handling
SPECIALS_SEASON_NUMBER = 0
DEFAULT_SEASON_NUMBER = 1
DEFAULT_SINGLE_SEASON_NAME = "Episodes"

# Rate Limiting
DEFAULT_DB_RATE_LIMIT_MS = 2000  # Minimum delay after every outbound scrape

# Provider ID keys as stored by the host library
PROVIDER_TVDB = "Tvdb"
PROVIDER_TVDB_SLUG = "TvdbSlug"
PROVIDER_ANIDB = "AniDB"

# Scraper Configuration
SCRAPER_USER_AGENT = "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 (KHTML, like Gecko)"
SCRAPER_TIMEOUT_SECONDS = 15
SCRAPER_PARSER = "lxml"

# TheTVDB (primary ordinal authority)
TVDB_BASE_URL = "https://www.thetvdb.com"
TVDB_EPISODE_URL_TEMPLATE = f"{TVDB_BASE_URL}/series/{{series}}/episodes/{{episode}}"
TVDB_CRUMBS_SELECTOR = "div[class*=crumbs]"
TVDB_ABSOLUTE_LINK_SELECTOR = "a[href*='/seasons/absolute/']"
TVDB_OFFICIAL_LINK_SELECTOR = "a[href*='/seasons/official/']"

# AniDB (secondary ordinal authority)
ANIDB_BASE_URL = "https://anidb.net"
ANIDB_EPISODE_URL_TEMPLATE = f"{ANIDB_BASE_URL}/episode/{{episode}}"

# AnimeFillerList
FILLER_LIST_BASE_URL = "https://www.animefillerlist.com"
FILLER_LIST_URL_TEMPLATE = f"{FILLER_LIST_BASE_URL}/shows/{{slug}}"
FILLER_TABLE_ROW_SELECTOR = "table.EpisodeList > tbody > tr"
FILLER_NUMBER_CELL_SELECTOR = "td.Number"
FILLER_TYPE_CELL_SELECTOR = "td.Type span"
FILLER_SLUG_MAX_LENGTH = 45

# Jellyfin Host
JELLYFIN_DEFAULT_URL = "http://localhost:8096"
JELLYFIN_TIMEOUT_SECONDS = 30
JELLYFIN_ITEM_FIELDS = "Genres,Tags,ProviderIds,Path"

# Task Metadata
TASK_CATEGORY = "Ronin"
FILLER_UPDATE_INTERVAL_HOURS = 24

# Progress Display
PROGRESS_REFRESH_RATE = 10  # Refresh per second for progress bars

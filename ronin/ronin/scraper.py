"""
HTTP access to the scraped sources (TheTVDB, AniDB, AnimeFillerList).

One pooled session is shared by every lookup in a run. Each attempted request
is followed by the configured delay, whatever its outcome, so the outbound
rate stays under the ceiling no matter how fast the caller processes results.
"""

import time
from typing import Callable, Optional

import requests
from requests.adapters import HTTPAdapter

from .constants import SCRAPER_USER_AGENT, SCRAPER_TIMEOUT_SECONDS
from .logging import get_logger, log_api_call

logger = get_logger(__name__)


def create_scrape_session(user_agent: str = SCRAPER_USER_AGENT) -> requests.Session:
    """
    Creates a requests session with a browser-like user agent.

    Requests are strictly sequential, so the pool holds a single connection
    per host. Failed lookups are not retried; they resolve to "unresolved".
    """
    session = requests.Session()
    session.headers.update({"User-Agent": user_agent})
    adapter = HTTPAdapter(pool_connections=1, pool_maxsize=1, max_retries=0)
    session.mount("http://", adapter)
    session.mount("https://", adapter)
    return session


class ScrapeClient:
    """Rate-limited HTML fetcher."""

    def __init__(
        self,
        session: Optional[requests.Session] = None,
        delay_seconds: float = 2.0,
        timeout: float = SCRAPER_TIMEOUT_SECONDS,
        wait: Callable[[float], object] = time.sleep,
    ):
        self.session = session or create_scrape_session()
        self.delay_seconds = delay_seconds
        self.timeout = timeout
        self.wait = wait
        self.request_count = 0

    def get_html(self, url: str) -> Optional[str]:
        """
        GETs a page and returns its body, or None on any network error or
        non-2xx status. The rate-limit delay is awaited in every case.
        """
        self.request_count += 1
        log_api_call(url, "GET")
        try:
            response = self.session.get(url, timeout=self.timeout)
            if not response.ok:
                logger.debug(f"GET {url} returned HTTP {response.status_code}")
                return None
            return response.text
        except requests.RequestException as e:
            logger.warning(f"GET {url} failed: {e}")
            return None
        finally:
            self.wait(self.delay_seconds)

    def close(self) -> None:
        self.session.close()
